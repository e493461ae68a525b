import pytest

from oko.errors import ErrorKind, LexError
from oko.tokenizer import TokenKind, tokenize


def texts(source):
    return [t.text for t in tokenize(source)]


def test_simple_statement():
    tokens = tokenize('a := 5;')
    assert [(t.kind, t.text) for t in tokens] == [
        (TokenKind.Identifier, 'a'),
        (TokenKind.Operator, ':='),
        (TokenKind.Number, '5'),
        (TokenKind.Semicolon, ';'),
    ]


def test_keywords_are_recognised():
    tokens = tokenize('funct f() { return 1; }')
    assert tokens[0].kind is TokenKind.Keyword
    assert tokens[1].kind is TokenKind.Identifier
    assert tokens[5].kind is TokenKind.Keyword
    assert tokens[5].text == 'return'


def test_line_numbers():
    tokens = tokenize('a := 1;\nb := 2;\n\nc;')
    lines = {t.text: t.line for t in tokens if t.kind is TokenKind.Identifier}
    assert lines == {'a': 1, 'b': 2, 'c': 4}


def test_minus_before_digit_is_part_of_number():
    assert texts('x := -5;') == ['x', ':=', '-5', ';']
    assert texts('x := a - 5;') == ['x', ':=', 'a', '-', '5', ';']


def test_decimal_numbers():
    tokens = tokenize('1.25')
    assert tokens[0].kind is TokenKind.Number
    assert tokens[0].text == '1.25'


def test_module_access_operator():
    assert texts('io::println("hi");') == ['io', '::', 'println', '(', 'hi', ')', ';']


def test_line_comments():
    assert texts('a := 1; // comment := "x"\nb;') == ['a', ':=', '1', ';', 'b', ';']
    assert texts('a;//no space') == ['a', ';']
    assert texts('a; //') == ['a', ';']


def test_string_escapes():
    tokens = tokenize('"a\\nb\\t\\"c\\""')
    assert tokens[0].kind is TokenKind.String
    assert tokens[0].text == 'a\nb\t"c"'


def test_strings_keep_special_characters():
    assert texts('"a; b // c"') == ['a; b // c']


def test_brackets_and_commas():
    kinds = [t.kind for t in tokenize('[1, 2]')]
    assert kinds == [
        TokenKind.Bracket, TokenKind.Number, TokenKind.Comma,
        TokenKind.Number, TokenKind.Bracket,
    ]


def test_unexpected_character():
    with pytest.raises(LexError) as excinfo:
        tokenize('a := 1;\nb := $;')
    err = excinfo.value.err
    assert err.kind is ErrorKind.LexUnexpectedChar
    assert err.line == 2
    assert err.line_text == 'b := $'


def test_unparsable_number():
    with pytest.raises(LexError) as excinfo:
        tokenize('x := 1.2.3;')
    assert excinfo.value.kind is ErrorKind.LexUnparsableNumber


def test_invalid_operator():
    with pytest.raises(LexError) as excinfo:
        tokenize('a =+ b;')
    assert excinfo.value.kind is ErrorKind.LexInvalidOperator


def test_newlines_inside_strings_count_lines():
    tokens = tokenize('a := "x\ny";\nb;')
    assert tokens[2].text == 'x\ny'
    assert tokens[2].line == 2
    assert [t.line for t in tokens if t.text == 'b'] == [3]
    assert [t.line for t in tokens] == sorted(t.line for t in tokens)
