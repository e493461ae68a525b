"""CLI entry point for the oko interpreter.

Usage:
    python -m oko [-v|-vv|-vvv] <program_file>
    python -m oko [-v...] --emit-ast <program_file>
    python -m oko [-v...] --ast <ast_json_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --emit-ast    Parse the given .oko file and emit an AST JSON file
  --ast         Execute a previously emitted AST JSON file

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Any lexing, parsing or runtime error is
reported on stderr and the process exits with status 1.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from .ast import Program
from .ast_json import ast_to_obj, ast_from_obj
from .errors import ErrorInfo, ErrorKind, OkoError, format_error
from .interpreter import parse_program, Interpreter

SOURCE_SUFFIX = '.oko'


def read_source(path: Path) -> str:
    if path.suffix != SOURCE_SUFFIX:
        print(f"Error: {path} is not an oko program (expected a {SOURCE_SUFFIX} file)", file=sys.stderr)
        sys.exit(1)
    if not path.exists():
        print(f"Error: file {path} not found", file=sys.stderr)
        sys.exit(1)
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def parse_source(source: str) -> Program:
    try:
        return parse_program(source)
    except OkoError as e:
        print(format_error(e.err, source), file=sys.stderr)
    except Exception as e:
        print(format_error(ErrorInfo(ErrorKind.Unknown, str(e)), source), file=sys.stderr)
    sys.exit(1)


def run_ast(program: Program, debug_level: int, source: Optional[str] = None) -> None:
    interpreter = Interpreter(debug_level=debug_level)
    try:
        interpreter.run(program)
    except OkoError as e:
        print(format_error(e.err, source), file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(format_error(ErrorInfo(ErrorKind.Unknown, str(e)), source), file=sys.stderr)
        sys.exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="oko language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--emit-ast', metavar='OKO_FILE', help='emit AST JSON for the given .oko file')
    group.add_argument('--ast', metavar='AST_JSON_FILE', help='execute AST from a JSON file')
    parser.add_argument('program', nargs='?', help='oko program file (.oko) to execute')
    args = parser.parse_args(argv)

    # Emit AST mode
    if args.emit_ast:
        program_file = Path(args.emit_ast)
        source = read_source(program_file)
        ast_program = parse_source(source)
        out_path = program_file.with_name(program_file.name + '.ast.json')
        with open(out_path, 'w', encoding='utf-8') as out:
            json.dump(ast_to_obj(ast_program), out, ensure_ascii=False, indent=2)
        print(str(out_path))
        return

    # Execute from AST JSON
    if args.ast:
        ast_path = Path(args.ast)
        if not ast_path.exists():
            print(f"Error: file {ast_path} not found", file=sys.stderr)
            sys.exit(1)
        with open(ast_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        try:
            ast_program = ast_from_obj(data)
        except (TypeError, ValueError, KeyError) as e:
            print(f"Error: {ast_path} does not contain a valid oko AST: {e}", file=sys.stderr)
            sys.exit(1)
        run_ast(ast_program, args.v)
        return

    # Default: execute source file
    if not args.program:
        parser.error('missing program file; or use --emit-ast/--ast')
    program_file = Path(args.program)
    source = read_source(program_file)
    ast_program = parse_source(source)
    run_ast(ast_program, args.v, source)


if __name__ == '__main__':
    main()
