from oko.errors import ErrorInfo, ErrorKind, format_error, runtime_error


def test_format_with_line_text():
    err = ErrorInfo(ErrorKind.LexUnexpectedChar, 'found an unexpected character: "$"', 1, 'a := $')
    assert format_error(err) == (
        '[LexUnexpectedChar] at line 1: found an unexpected character: "$"\n'
        '\ta := $\n'
        '\t^^^^^^'
    )


def test_format_looks_up_runtime_lines():
    err = ErrorInfo(ErrorKind.RuntimeUnresolvedIdentifier, 'identifier "b" is not pointing to anything', 2)
    text = format_error(err, 'a := 1;\nx := b;')
    assert text.split('\n')[1] == '\tx := b;'


def test_format_without_position():
    err = ErrorInfo(ErrorKind.Unknown, 'boom')
    assert format_error(err) == '[Unknown] boom'


def test_runtime_error_drops_unknown_line():
    exc = runtime_error(ErrorKind.RuntimeUserThrow, 'stop', 0)
    assert exc.kind is ErrorKind.RuntimeUserThrow
    assert exc.err.line is None
    assert str(exc) == 'RuntimeUserThrow: stop'
