# oko language package
# This package provides a tokenizer, parser and tree-walking interpreter for the oko language.
from .errors import ErrorKind, OkoError
from .interpreter import Interpreter, execute, parse, parse_program, run_program, tokenize

__all__ = [
    'tokenize',
    'parse',
    'parse_program',
    'Interpreter',
    'execute',
    'run_program',
    'OkoError',
    'ErrorKind',
]
