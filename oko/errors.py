"""Error taxonomy for the oko toolchain.

Every failure in tokenizing, parsing or evaluating is fatal to the running
program. Each stage raises its own exception class, all of which derive from
`OkoError` and carry an `ErrorInfo` describing what went wrong and where.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional


class ErrorKind(Enum):
    LexUnexpectedChar = 'LexUnexpectedChar'
    LexUnparsableNumber = 'LexUnparsableNumber'
    LexInvalidOperator = 'LexInvalidOperator'
    ParseUnexpectedToken = 'ParseUnexpectedToken'
    ParseUnexpectedEOF = 'ParseUnexpectedEOF'
    ParseSyntaxError = 'ParseSyntaxError'
    ParseDanglingElifElse = 'ParseDanglingElifElse'
    RuntimeUnresolvedIdentifier = 'RuntimeUnresolvedIdentifier'
    RuntimeOperatorTypeMismatch = 'RuntimeOperatorTypeMismatch'
    RuntimeAssignTypeMismatch = 'RuntimeAssignTypeMismatch'
    RuntimeAssignUndefinedVariable = 'RuntimeAssignUndefinedVariable'
    RuntimeReturnOutsideFunction = 'RuntimeReturnOutsideFunction'
    RuntimeFunctionNotFirstClass = 'RuntimeFunctionNotFirstClass'
    RuntimeInvalidModuleAccess = 'RuntimeInvalidModuleAccess'
    RuntimeModuleNotLoaded = 'RuntimeModuleNotLoaded'
    RuntimeUnknownModule = 'RuntimeUnknownModule'
    RuntimeUnknownFunction = 'RuntimeUnknownFunction'
    RuntimeArityMismatch = 'RuntimeArityMismatch'
    RuntimeBuiltinArgTypeMismatch = 'RuntimeBuiltinArgTypeMismatch'
    RuntimeUserThrow = 'RuntimeUserThrow'
    RuntimeRecursionLimitExceeded = 'RuntimeRecursionLimitExceeded'
    Unknown = 'Unknown'


@dataclass
class ErrorInfo:
    """What went wrong, plus the source position when one is known."""
    kind: ErrorKind
    message: str
    line: Optional[int] = None
    line_text: Optional[str] = None

    def __repr__(self) -> str:
        return f"Error(kind={self.kind.value}, message={self.message!r}, line={self.line})"


class OkoError(Exception):
    """Base exception used to propagate fatal oko errors."""
    def __init__(self, err: ErrorInfo):
        super().__init__(f"{err.kind.value}: {err.message}")
        self.err = err

    @property
    def kind(self) -> ErrorKind:
        return self.err.kind


class LexError(OkoError):
    pass


class ParseError(OkoError):
    pass


class OkoRuntimeError(OkoError):
    pass


def runtime_error(kind: ErrorKind, message: str, line: Optional[int] = None) -> OkoRuntimeError:
    return OkoRuntimeError(ErrorInfo(kind, message, line or None))


class ReturnSignal:
    """Carries a return value up through nested blocks to the enclosing call."""
    def __init__(self, value: Any):
        self.value = value


def format_error(err: ErrorInfo, source: Optional[str] = None) -> str:
    """Render an error for the user.

    The first line names the error kind and message. When the line is known
    the offending line text follows, underlined with carets. Runtime errors
    only record a line number, so their text is looked up in `source`.
    """
    out: List[str] = [f"[{err.kind.value}] {err.message}"]
    line_text = err.line_text
    if line_text is None and err.line is not None and source is not None:
        lines = source.split('\n')
        if 0 < err.line <= len(lines):
            line_text = lines[err.line - 1]
    if err.line is not None:
        out[0] = f"[{err.kind.value}] at line {err.line}: {err.message}"
    if line_text:
        out.append('\t' + line_text)
        out.append('\t' + '^' * len(line_text))
    return '\n'.join(out)
