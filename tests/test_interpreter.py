import math

import pytest

from oko.builtin_function import BuiltinFunction
from oko.errors import ErrorKind, OkoRuntimeError
from oko.interpreter import parse_program, Interpreter, divide, modulo, power
from oko.types import Value, ValueType


def run(source, **kwargs):
    interp = Interpreter(**kwargs)
    interp.run(parse_program(source))
    return interp


def run_error(source, **kwargs):
    with pytest.raises(OkoRuntimeError) as excinfo:
        run(source, **kwargs)
    return excinfo.value.err


def test_declare_never_fails():
    interp = run('y := 1; y := "now a string";')
    assert interp.env.get('y') == Value.string('now a string')


def test_assign_undeclared_variable():
    err = run_error('y = 1;')
    assert err.kind is ErrorKind.RuntimeAssignUndefinedVariable
    assert err.line == 1


def test_compound_assign_type_mismatch():
    err = run_error('s := "a";\ns += 1;')
    assert err.kind is ErrorKind.RuntimeAssignTypeMismatch
    assert err.line == 2


def test_assign_keeps_type():
    err = run_error('n := 1; n = "one";')
    assert err.kind is ErrorKind.RuntimeAssignTypeMismatch


def test_compound_assignments():
    interp = run('s := "a"; s += "b"; n := 10; n /= 4; m := 3; m *= 2; m -= 1;')
    assert interp.env.get('s') == Value.string('ab')
    assert interp.env.get('n') == Value.number(2.5)
    assert interp.env.get('m') == Value.number(5)


def test_module_not_loaded():
    err = run_error('io::println(1);')
    assert err.kind is ErrorKind.RuntimeModuleNotLoaded


def test_unknown_module_function():
    err = run_error('import io;\nio::nope();')
    assert err.kind is ErrorKind.RuntimeUnknownFunction
    assert err.line == 2


def test_unknown_module():
    err = run_error('import nope;')
    assert err.kind is ErrorKind.RuntimeUnknownModule


def test_return_outside_function():
    err = run_error('return 1;')
    assert err.kind is ErrorKind.RuntimeReturnOutsideFunction


def test_function_is_not_a_value():
    err = run_error('funct f() { return 1; }\nx := f;')
    assert err.kind is ErrorKind.RuntimeFunctionNotFirstClass
    assert err.line == 2


def test_calling_a_value():
    err = run_error('x := 1; x();')
    assert err.kind is ErrorKind.RuntimeUnknownFunction


def test_calling_undefined_function():
    err = run_error('missing(1);')
    assert err.kind is ErrorKind.RuntimeUnknownFunction


def test_arity_mismatch():
    err = run_error('funct f(a) { return a; } f();')
    assert err.kind is ErrorKind.RuntimeArityMismatch


def test_builtin_arity_mismatch():
    err = run_error('import stru; stru::len("a", "b");')
    assert err.kind is ErrorKind.RuntimeArityMismatch


def test_invalid_module_access():
    err = run_error('x := 1; x::y;')
    assert err.kind is ErrorKind.RuntimeInvalidModuleAccess


def test_unresolved_identifier_reports_line():
    err = run_error('a := 1;\n\nb := c;')
    assert err.kind is ErrorKind.RuntimeUnresolvedIdentifier
    assert err.line == 3


def test_for_requires_array():
    err = run_error('for (e) (5) { }')
    assert err.kind is ErrorKind.RuntimeOperatorTypeMismatch


def test_function_frame_does_not_leak():
    interp = run('funct f(x) { y := x * 2; return y; } r := f(3);')
    assert interp.env.get('r') == Value.number(6)
    assert interp.env.get('x') is None
    assert interp.env.get('y') is None


def test_function_without_return_yields_nil():
    interp = run('funct f() { a := 1; } r := f();')
    assert interp.env.get('r').type is ValueType.Nil


def test_lookup_is_dynamic():
    source = '''
    funct show() { return v; }
    funct outer() { v := 7; return show(); }
    r := outer();
    '''
    interp = run(source)
    assert interp.env.get('r') == Value.number(7)


def test_return_from_inside_while():
    source = '''
    funct first() {
        i := 0;
        while (1) {
            i += 1;
            if (i == 3) { return i; }
        }
    }
    r := first();
    '''
    interp = run(source)
    assert interp.env.get('r') == Value.number(3)


def test_arrays_are_copied_on_assignment():
    interp = run('import arru; a := [1]; b := a; b = arru::push(b, 2);')
    assert interp.env.get('a') == Value.array([Value.number(1)])
    assert interp.env.get('b') == Value.array([Value.number(1), Value.number(2)])


def test_arguments_are_copies():
    interp = run('funct f(xs) { xs = [0]; return 1; } a := [5]; f(a);')
    assert interp.env.get('a') == Value.array([Value.number(5)])


def test_plus_is_not_commutative_for_mixed_types():
    interp = run('a := 1 + "x"; b := "x" + 1;')
    assert interp.env.get('a') == Value.string('1x')
    assert interp.env.get('b') == Value.string('x1')


def test_string_repeat():
    interp = run('a := "ab" * 2; b := 3 * "c"; c := "x" * 0;')
    assert interp.env.get('a') == Value.string('abab')
    assert interp.env.get('b') == Value.string('ccc')
    assert interp.env.get('c') == Value.string('')


def test_string_repeat_negative_count():
    err = run_error('a := "ab" * -1;')
    assert err.kind is ErrorKind.RuntimeOperatorTypeMismatch


def test_arrays_cannot_be_compared():
    err = run_error('a := [1] == [1];')
    assert err.kind is ErrorKind.RuntimeOperatorTypeMismatch


def test_operator_type_mismatch():
    err = run_error('a := "a" - 1;')
    assert err.kind is ErrorKind.RuntimeOperatorTypeMismatch
    err = run_error('a := !"a";')
    assert err.kind is ErrorKind.RuntimeOperatorTypeMismatch


def test_nil_semantics():
    interp = run('import tu; n := tu::getNil(); a := n == n; b := n + 1; c := !n; d := n == 0;')
    assert interp.env.get('a') == Value.number(1)
    assert interp.env.get('b').type is ValueType.Nil
    assert interp.env.get('c') == Value.number(1)
    assert interp.env.get('d') == Value.number(0)


def test_truthiness_in_conditions(capsys):
    source = '''
    import io;
    if ("") { io::println("string"); }
    if ([]) { io::println("array"); }
    if (0) { io::println("zero"); } elif ([0]) { io::println("elif"); } else { io::println("else"); }
    '''
    run(source)
    assert capsys.readouterr().out.strip() == 'elif'


def test_number_edge_cases():
    assert math.isnan(divide(0, 0))
    assert divide(-1, 0) == -math.inf
    assert math.isnan(modulo(5, 0))
    assert modulo(-7, 3) == -1
    assert modulo(7.5, 2) == 1.5
    assert power(2, 10) == 1024
    assert power(2, -1) == 0.5
    assert power(0, -1) == math.inf
    assert math.isnan(power(-8, 0.5))


def test_nan_prints_as_nan(capsys):
    run('import io; io::println(0 / 0, 5 % 0, -1 / 0);')
    assert capsys.readouterr().out.strip() == 'NaN NaN -Infinity'


def test_call_depth_limit():
    err = run_error('funct f(n) { return f(n + 1); } f(0);', max_call_depth=50)
    assert err.kind is ErrorKind.RuntimeRecursionLimitExceeded


def test_host_recursion_limit_is_reported():
    err = run_error('funct f(n) { return f(n + 1); } f(0);')
    assert err.kind is ErrorKind.RuntimeRecursionLimitExceeded


def test_injected_module():
    modules = {
        'host': lambda: {'answer': BuiltinFunction('answer', 0, lambda: Value.number(42))},
    }
    interp = run('import host; x := host::answer();', modules=modules)
    assert interp.env.get('x') == Value.number(42)


def test_debug_trace(tmp_path):
    debug_file = tmp_path / 'debug.txt'
    run('import io; funct f(a) { return a; } x := f(1); io::println(x);',
        debug_level=3, debug_file=str(debug_file))
    trace = debug_file.read_text(encoding='utf-8')
    assert 'import io' in trace
    assert 'define function f(a)' in trace
    assert 'call f(1)' in trace
    assert 'call builtin io::println' in trace
    assert 'run: finished' in trace


def test_large_powers_overflow_to_infinity(capsys):
    run('import io; io::println(10 ^ 400, -10 ^ 401, 10 ^ 5000, 2 ^ 53, 2 ^ 60);')
    assert capsys.readouterr().out.strip() == 'Infinity -Infinity Infinity 9007199254740992 1152921504606846976'


def test_integers_beyond_safe_range_become_doubles():
    interp = run('a := 9007199254740992 * 4; b := 10 ^ 300 * 10 ^ 300; c := 10 ^ 200 / 3;')
    assert interp.env.get('a') == Value.number(2.0 ** 55)
    assert isinstance(interp.env.get('a').value, float)
    assert interp.env.get('b').value == math.inf
    assert interp.env.get('c').value == pytest.approx(10.0 ** 200 / 3)


def test_dividing_infinity(capsys):
    run('import io; x := 10 ^ 400; y := x / 3; io::println(y, 1 / x);')
    assert capsys.readouterr().out.strip() == 'Infinity 0'


def test_string_repeat_with_huge_count():
    assert run_error('a := "a" * (10 ^ 400);').kind is ErrorKind.RuntimeOperatorTypeMismatch
    assert run_error('a := "ab" * (10 ^ 20);').kind is ErrorKind.RuntimeOperatorTypeMismatch
    interp = run('a := "" * (10 ^ 20);')
    assert interp.env.get('a') == Value.string('')
