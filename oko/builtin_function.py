from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class BuiltinFunction:
    """A host function exposed through a standard module.

    `arity` is the exact number of arguments, or None for a variadic function
    which receives its arguments as a single list.
    """
    name: str
    arity: Optional[int]
    fn: Any

    def __repr__(self) -> str:
        return f"<builtin {self.name}>"


Module = Dict[str, BuiltinFunction]
