"""Tokenizer for the oko language.

The tokenizer is a single left-to-right scan. It keeps a small mode
(`nothing`, `ident`, `number`, `op` or `string`) and an accumulation buffer;
each character's membership in one of the fixed character classes decides
whether it extends the current token, ends it, or starts a new one. A
character that ends a token is examined again in `nothing` mode.

Line comments are written `//` and are recognised after an operator run: the
run is dropped and no tokens are emitted until the next newline.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import List

from .errors import ErrorInfo, ErrorKind, LexError
from .types import parse_number


NUMERIC = frozenset('-.0123456789')
IDENTIFIER = frozenset(string.ascii_letters + string.digits + '_')
OPERATOR_CHARS = frozenset('=><+-/*%^!:&|')
BRACKETS = frozenset('()[]{}')
WHITESPACE = frozenset(' \t\r')

KEYWORDS = frozenset({
    'return', 'funct', 'while', 'if', 'elif', 'else', 'import', 'for', 'feach',
})

OPERATORS = frozenset({
    ':=', '=', '+=', '-=', '*=', '/=',
    '+', '-', '*', '/', '%', '^', '!',
    '>', '<', '>=', '<=', '&&', '||', '==', '::',
})

ESCAPE_SEQUENCES = (
    ('\\n', '\n'),
    ('\\e', '\x1b'),
    ('\\t', '\t'),
    ('\\"', '"'),
)


class TokenKind(Enum):
    Identifier = 'Identifier'
    Keyword = 'Keyword'
    Number = 'Number'
    String = 'String'
    Operator = 'Operator'
    Bracket = 'Bracket'
    Semicolon = 'Semicolon'
    Comma = 'Comma'


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    line: int
    line_text: str


def apply_escapes(raw: str) -> str:
    for seq, replacement in ESCAPE_SEQUENCES:
        raw = raw.replace(seq, replacement)
    return raw


def tokenize(source: str) -> List[Token]:
    """Convert source text into a flat list of tokens.

    Raises LexError for an unexpected character, an unparsable number
    literal or an operator run that is not a known operator.
    """
    tokens: List[Token] = []
    i = 0
    length = len(source)
    mode = 'nothing'
    buffer = ''
    comment_skip = False
    line = 1
    line_text = ''

    def advance(ch: str):
        nonlocal i, line, line_text
        i += 1
        if ch == '\n':
            line += 1
            line_text = ''
        else:
            line_text += ch

    def fail(kind: ErrorKind, message: str):
        raise LexError(ErrorInfo(kind, message, line, line_text))

    def push(kind: TokenKind, text: str):
        if comment_skip:
            return
        if kind is TokenKind.Operator and text not in OPERATORS:
            fail(ErrorKind.LexInvalidOperator, f'found an invalid operator: "{text}"')
        if kind is TokenKind.Number:
            try:
                parse_number(text)
            except ValueError:
                fail(ErrorKind.LexUnparsableNumber, f'found an unparsable number literal: "{text}"')
        if kind is TokenKind.String:
            text = apply_escapes(text)
        if kind is TokenKind.Identifier and text in KEYWORDS:
            kind = TokenKind.Keyword
        tokens.append(Token(kind, text, line, line_text))

    while i < length:
        c = source[i]

        if mode == 'string':
            if c == '"' and not buffer.endswith('\\'):
                push(TokenKind.String, buffer)
                mode = 'nothing'
                buffer = ''
            else:
                buffer += c
            advance(c)
            continue

        if mode == 'number':
            if c in NUMERIC:
                buffer += c
                advance(c)
                continue
            push(TokenKind.Number, buffer)
            mode = 'nothing'
            buffer = ''
            continue

        if mode == 'op':
            if c in OPERATOR_CHARS:
                buffer += c
                advance(c)
                continue
            if buffer == '//':
                comment_skip = True
            else:
                push(TokenKind.Operator, buffer)
            mode = 'nothing'
            buffer = ''
            continue

        if mode == 'ident':
            if c in IDENTIFIER:
                buffer += c
                advance(c)
                continue
            push(TokenKind.Identifier, buffer)
            mode = 'nothing'
            buffer = ''
            continue

        # mode == 'nothing'
        if comment_skip and c != '\n':
            advance(c)
            continue
        if c == '"':
            mode = 'string'
            buffer = ''
            advance(c)
            continue
        if c == ';':
            advance(c)
            push(TokenKind.Semicolon, c)
            continue
        if c in BRACKETS:
            advance(c)
            push(TokenKind.Bracket, c)
            continue
        if c == ',':
            advance(c)
            push(TokenKind.Comma, c)
            continue
        if c == '\n':
            comment_skip = False
            advance(c)
            continue
        if c in NUMERIC:
            # a lone '-' is an operator, '-' before a digit starts a number
            nxt = source[i + 1] if i + 1 < length else ''
            if c != '-' or nxt in NUMERIC:
                mode = 'number'
                buffer = ''
                continue
        if c in OPERATOR_CHARS:
            mode = 'op'
            buffer = ''
            continue
        if c in IDENTIFIER:
            mode = 'ident'
            buffer = ''
            continue
        advance(c)
        if c not in WHITESPACE:
            fail(ErrorKind.LexUnexpectedChar, f'found an unexpected character: "{c}"')

    if buffer:
        if mode == 'string':
            push(TokenKind.String, buffer)
        elif mode == 'number':
            push(TokenKind.Number, buffer)
        elif mode == 'ident':
            push(TokenKind.Identifier, buffer)
        elif mode == 'op' and buffer != '//':
            push(TokenKind.Operator, buffer)

    return tokens
