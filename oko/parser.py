"""Recursive-descent parser for the oko language.

Statements are parsed by dispatching on their leading keyword; expressions
use precedence climbing over the binary operator table below. The public
entry points are `parse`, which turns a token list into a `Program`, and
`parse_program`, which tokenizes source text first.
"""

from __future__ import annotations

from typing import List, Optional

from .ast import (
    Program, ImportStat, VariableAssign, BinaryExpr, UnaryExpr, NumLiteral,
    StrLiteral, Identifier, ArrayLiteral, FunctionCall, ModAccess, ReturnStat,
    FunctionDeclaration, ExprStat, ElifClause, IfStat, WhileStat, FeachStat,
    BinaryOperator, UnaryOperator, AssignOperator, Node,
)
from .errors import ErrorInfo, ErrorKind, ParseError
from .tokenizer import Token, TokenKind, tokenize
from .types import parse_number


PRECEDENCE = {
    '||': 1,
    '&&': 2,
    '==': 3,
    '>': 3,
    '<': 3,
    '>=': 3,
    '<=': 3,
    '+': 5,
    '-': 5,
    '*': 6,
    '/': 6,
    '%': 6,
    '^': 7,
    '::': 8,
}

RIGHT_ASSOCIATIVE = {'^'}

UNARY_PRECEDENCE = 9

ASSIGN_OPERATORS = {op.value: op for op in AssignOperator}

LOOP_KEYWORDS = ('for', 'feach')


class Parser:
    def __init__(self, tokens: List[Token]):
        self.tokens = tokens
        self.pos = 0

    def peek(self, offset: int = 0) -> Optional[Token]:
        index = self.pos + offset
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def check(self, kind: TokenKind, text: Optional[str] = None) -> bool:
        token = self.peek()
        if token is None or token.kind is not kind:
            return False
        return text is None or token.text == text

    def error(self, kind: ErrorKind, message: str, token: Optional[Token] = None) -> ParseError:
        if token is None:
            token = self.peek() or self.peek(-1)
        if token is None:
            return ParseError(ErrorInfo(kind, message))
        return ParseError(ErrorInfo(kind, message, token.line, token.line_text))

    def consume(self, kind: TokenKind, text: Optional[str] = None) -> Token:
        token = self.peek()
        expected = f'a token of type "{kind.value}"'
        if text is not None:
            expected += f' with value "{text}"'
        if token is None:
            raise self.error(
                ErrorKind.ParseUnexpectedEOF,
                f"didn't expect the end of input yet, expected {expected}",
                self.peek(-1),
            )
        if token.kind is not kind or (text is not None and token.text != text):
            raise self.error(
                ErrorKind.ParseUnexpectedToken,
                f'expected {expected}, but got "{token.kind.value}" with value "{token.text}"',
                token,
            )
        self.pos += 1
        return token

    def parse_program(self) -> Program:
        statements: List[Node] = []
        while self.peek() is not None:
            statements.append(self.parse_statement())
        return Program(statements)

    def parse_statement(self) -> Node:
        token = self.peek()
        if token.kind is TokenKind.Keyword:
            if token.text == 'if':
                return self.parse_if_stat()
            if token.text == 'while':
                return self.parse_while_stat()
            if token.text in LOOP_KEYWORDS:
                return self.parse_feach_stat()
            if token.text in ('elif', 'else'):
                raise self.error(
                    ErrorKind.ParseDanglingElifElse,
                    f'"{token.text}" was used without a preceding if statement',
                    token,
                )
            if token.text == 'funct':
                return self.parse_function_declaration()
            if token.text == 'return':
                return self.parse_return_stat()
            if token.text == 'import':
                return self.parse_import_stat()
        nxt = self.peek(1)
        if (token.kind is TokenKind.Identifier and nxt is not None
                and nxt.kind is TokenKind.Operator and nxt.text in ASSIGN_OPERATORS):
            return self.parse_variable_assign()
        expr = self.parse_expression()
        self.consume(TokenKind.Semicolon)
        return ExprStat(expr)

    def parse_block(self) -> List[Node]:
        self.consume(TokenKind.Bracket, '{')
        body: List[Node] = []
        while not self.check(TokenKind.Bracket, '}'):
            if self.peek() is None:
                raise self.error(
                    ErrorKind.ParseSyntaxError,
                    'syntax error inside of the statement: unterminated block',
                    self.peek(-1),
                )
            body.append(self.parse_statement())
        self.consume(TokenKind.Bracket, '}')
        return body

    def parse_condition(self) -> Node:
        self.consume(TokenKind.Bracket, '(')
        expr = self.parse_expression()
        self.consume(TokenKind.Bracket, ')')
        return expr

    def parse_if_stat(self) -> IfStat:
        self.consume(TokenKind.Keyword, 'if')
        condition = self.parse_condition()
        body = self.parse_block()
        elifs: List[ElifClause] = []
        while self.check(TokenKind.Keyword, 'elif'):
            self.advance()
            elif_condition = self.parse_condition()
            elifs.append(ElifClause(elif_condition, self.parse_block()))
        else_body = None
        if self.check(TokenKind.Keyword, 'else'):
            self.advance()
            else_body = self.parse_block()
        return IfStat(condition, body, elifs, else_body)

    def parse_while_stat(self) -> WhileStat:
        self.consume(TokenKind.Keyword, 'while')
        condition = self.parse_condition()
        body = self.parse_block()
        return WhileStat(condition, body)

    def parse_feach_stat(self) -> FeachStat:
        keyword = self.advance()
        self.consume(TokenKind.Bracket, '(')
        element = self.consume(TokenKind.Identifier).text
        self.consume(TokenKind.Bracket, ')')
        array = self.parse_condition()
        body = self.parse_block()
        return FeachStat(element, array, body, keyword.line)

    def parse_function_declaration(self) -> FunctionDeclaration:
        keyword = self.consume(TokenKind.Keyword, 'funct')
        name = self.consume(TokenKind.Identifier).text
        self.consume(TokenKind.Bracket, '(')
        arguments: List[str] = []
        if not self.check(TokenKind.Bracket, ')'):
            arguments.append(self.consume(TokenKind.Identifier).text)
            while self.check(TokenKind.Comma):
                self.advance()
                arguments.append(self.consume(TokenKind.Identifier).text)
        self.consume(TokenKind.Bracket, ')')
        body = self.parse_block()
        return FunctionDeclaration(name, arguments, body, keyword.line)

    def parse_return_stat(self) -> ReturnStat:
        keyword = self.consume(TokenKind.Keyword, 'return')
        value = None
        if not self.check(TokenKind.Semicolon):
            value = self.parse_expression()
        self.consume(TokenKind.Semicolon)
        return ReturnStat(value, keyword.line)

    def parse_import_stat(self) -> ImportStat:
        keyword = self.consume(TokenKind.Keyword, 'import')
        module = self.consume(TokenKind.Identifier).text
        self.consume(TokenKind.Semicolon)
        return ImportStat(module, keyword.line)

    def parse_variable_assign(self) -> VariableAssign:
        name_token = self.consume(TokenKind.Identifier)
        operator = ASSIGN_OPERATORS[self.consume(TokenKind.Operator).text]
        value = self.parse_expression()
        self.consume(TokenKind.Semicolon)
        return VariableAssign(name_token.text, operator, value, name_token.line)

    # Expression parsing (precedence climbing)
    def parse_expression(self, min_precedence: int = 0) -> Node:
        left = self.parse_primary()
        while True:
            token = self.peek()
            if token is None or token.kind is not TokenKind.Operator:
                break
            precedence = PRECEDENCE.get(token.text)
            if precedence is None or precedence < min_precedence:
                break
            self.advance()
            if token.text in RIGHT_ASSOCIATIVE:
                right = self.parse_expression(precedence)
            else:
                right = self.parse_expression(precedence + 1)
            if token.text == '::':
                left = ModAccess(left, right, token.line)
            else:
                left = BinaryExpr(BinaryOperator(token.text), left, right, token.line)
        return left

    def parse_primary(self) -> Node:
        token = self.peek()
        if token is None:
            raise self.error(
                ErrorKind.ParseUnexpectedEOF,
                "didn't expect the end of input yet, expected an expression",
                self.peek(-1),
            )
        if token.kind is TokenKind.Bracket and token.text == '[':
            return self.parse_array_literal()
        if token.kind is TokenKind.Operator and token.text == UnaryOperator.Not.value:
            self.advance()
            operand = self.parse_expression(UNARY_PRECEDENCE)
            return UnaryExpr(UnaryOperator.Not, operand, token.line)
        if token.kind is TokenKind.Number:
            self.advance()
            return NumLiteral(parse_number(token.text), token.line)
        if token.kind is TokenKind.String:
            self.advance()
            return StrLiteral(token.text, token.line)
        if token.kind is TokenKind.Identifier:
            self.advance()
            if self.check(TokenKind.Bracket, '('):
                return FunctionCall(token.text, self.parse_call_args(), None, token.line)
            if self.check(TokenKind.Operator, '::'):
                self.advance()
                member = self.parse_primary()
                return ModAccess(Identifier(token.text, token.line), member, token.line)
            return Identifier(token.text, token.line)
        if token.kind is TokenKind.Bracket and token.text == '(':
            self.advance()
            expr = self.parse_expression()
            self.consume(TokenKind.Bracket, ')')
            return expr
        raise self.error(
            ErrorKind.ParseSyntaxError,
            f'syntax error inside of the expression near "{token.text}"',
            token,
        )

    def parse_call_args(self) -> List[Node]:
        self.consume(TokenKind.Bracket, '(')
        args: List[Node] = []
        if not self.check(TokenKind.Bracket, ')'):
            args.append(self.parse_expression())
            while self.check(TokenKind.Comma):
                self.advance()
                args.append(self.parse_expression())
        self.consume(TokenKind.Bracket, ')')
        return args

    def parse_array_literal(self) -> ArrayLiteral:
        bracket = self.consume(TokenKind.Bracket, '[')
        elements: List[Node] = []
        if not self.check(TokenKind.Bracket, ']'):
            elements.append(self.parse_expression())
            while self.check(TokenKind.Comma):
                self.advance()
                elements.append(self.parse_expression())
        self.consume(TokenKind.Bracket, ']')
        return ArrayLiteral(elements, bracket.line)


def parse(tokens: List[Token]) -> Program:
    """Parse a token list into a Program AST."""
    try:
        return Parser(tokens).parse_program()
    except RecursionError:
        raise ParseError(ErrorInfo(
            ErrorKind.RuntimeRecursionLimitExceeded,
            'maximum nesting depth exceeded while parsing, the recursion depth limit has been exceeded',
        )) from None


def parse_program(source: str) -> Program:
    """Tokenize and parse oko source text into a Program AST."""
    return parse(tokenize(source))
