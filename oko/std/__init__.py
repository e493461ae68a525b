"""Standard-library modules available to `import`.

Each entry maps a module name to a factory building that module's function
table. A module only becomes callable after the program imports it.
"""

from typing import Callable, Dict

from oko.builtin_function import Module
from .arrays import populate_arru_module
from .io import populate_io_module
from .maths import populate_math_module
from .program import populate_prog_module
from .strings import populate_stru_module
from .timing import populate_time_module
from .typeutils import populate_tu_module

BUILTIN_MODULES: Dict[str, Callable[[], Module]] = {
    'io': populate_io_module,
    'math': populate_math_module,
    'stru': populate_stru_module,
    'arru': populate_arru_module,
    'tu': populate_tu_module,
    'time': populate_time_module,
    'prog': populate_prog_module,
}

__all__ = ['BUILTIN_MODULES']
