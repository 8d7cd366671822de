import pytest

from Calculator import MathEngine
from Calculator import ScientificEngine
from Calculator import error as E
from Calculator.Tokenizer import NUMBER, OPERATOR, Token, number_token, tokenize


def test_evaluate_basic_sum() -> None:
    assert MathEngine.evaluate("1+2", {}) == 3.0


def test_evaluate_parentheses() -> None:
    assert MathEngine.evaluate("2*(3+4)", {}) == 14.0
    assert MathEngine.evaluate("((2+3)*(4-1))^2", {}) == 225.0


def test_evaluate_function_call() -> None:
    assert MathEngine.evaluate("sqrt4", {}) == 2.0
    assert MathEngine.evaluate("sqrt(2+2)*3", {}) == 6.0
    assert MathEngine.evaluate("log10100", {}) == 2.0
    assert MathEngine.evaluate("cos0+sin0+atan0", {}) == 1.0


def test_chained_functions_resolve_from_the_inside() -> None:
    assert MathEngine.evaluate("sinsqrt0", {}) == 0.0
    assert MathEngine.evaluate("sqrtsqrt16", {}) == 2.0


def test_power_groups_right_to_left() -> None:
    assert MathEngine.evaluate("2^3^2", {}) == 512.0


def test_division_groups_left_to_right() -> None:
    assert MathEngine.evaluate("8/4/2", {}) == 1.0
    assert MathEngine.evaluate("2*3/4", {}) == 1.5


def test_power_binds_tighter_than_sign() -> None:
    assert MathEngine.evaluate("-2^2", {}) == -4.0
    assert MathEngine.evaluate("2^-1", {}) == 0.5
    assert MathEngine.evaluate("2^--2", {}) == 4.0


def test_parenthesized_group_is_one_operand() -> None:
    assert MathEngine.evaluate("(0-2)^2", {}) == 4.0


def test_sign_runs() -> None:
    assert MathEngine.evaluate("2*-3", {}) == -6.0
    assert MathEngine.evaluate("2*--3", {}) == 6.0
    assert MathEngine.evaluate("2--3", {}) == 5.0
    assert MathEngine.evaluate("1+-+2", {}) == -1.0
    assert MathEngine.evaluate("-1-1", {}) == -2.0


def test_scientific_notation() -> None:
    assert MathEngine.evaluate("1E-3*1000", {}) == 1.0
    assert MathEngine.evaluate("2.5E2-50", {}) == 200.0


def test_trailing_equals_sign_is_ignored() -> None:
    assert MathEngine.evaluate("1+2=", {}) == 3.0


def test_division_by_zero() -> None:
    with pytest.raises(E.ArithmeticError) as excinfo:
        MathEngine.evaluate("1/0", {})
    assert excinfo.value.code == "3003"
    assert excinfo.value.equation == "1/0"

    with pytest.raises(E.ArithmeticError):
        MathEngine.evaluate("2/(1-1)", {})
    with pytest.raises(E.ArithmeticError):
        MathEngine.evaluate("0^-1", {})


def test_non_finite_results_fail() -> None:
    with pytest.raises(E.ArithmeticError) as excinfo:
        MathEngine.evaluate("10^400", {})
    assert excinfo.value.code == "3026"

    with pytest.raises(E.ArithmeticError) as excinfo:
        MathEngine.evaluate("(0-8)^(1/3)", {})
    assert excinfo.value.code == "2005"

    with pytest.raises(E.ArithmeticError):
        MathEngine.evaluate("sqrt-4", {})


def test_variables() -> None:
    assert MathEngine.evaluate("x+1", {"x": 2.0}) == 3.0
    assert MathEngine.evaluate("xy*x", {"x": 2.0, "xy": 3.0}) == 6.0
    assert MathEngine.evaluate("sin(x/2)", {"x": 0.0}) == 0.0
    assert MathEngine.evaluate("x^2", {"x": -3.0}) == 9.0


def test_variable_must_be_a_whole_word() -> None:
    with pytest.raises(E.SyntaxError) as excinfo:
        MathEngine.evaluate("2x", {"x": 1.0})
    assert excinfo.value.code == "3031"

    with pytest.raises(E.SyntaxError):
        MathEngine.evaluate("x2", {"x": 1.0})
    with pytest.raises(E.SyntaxError):
        MathEngine.evaluate("sinx", {"x": 1.0})


def test_invalid_binding_value() -> None:
    with pytest.raises(E.InputError) as excinfo:
        MathEngine.evaluate("x", {"x": "abc"})
    assert excinfo.value.code == "7002"


def test_unclosed_parentheses() -> None:
    with pytest.raises(E.SyntaxError) as excinfo:
        MathEngine.evaluate("(1+2", {})
    assert excinfo.value.code == "3009"

    with pytest.raises(E.SyntaxError) as excinfo:
        MathEngine.evaluate("1+2)", {})
    assert excinfo.value.code == "3010"


def test_undefined_variable() -> None:
    with pytest.raises(E.SyntaxError) as excinfo:
        MathEngine.evaluate("1+y", {})
    assert excinfo.value.code == "3031"
    assert "y" in excinfo.value.message


def test_validator_rejects_operator_layout() -> None:
    with pytest.raises(E.SyntaxError) as excinfo:
        MathEngine.evaluate("2+*3", {})
    assert excinfo.value.code == "3032"

    with pytest.raises(E.SyntaxError) as excinfo:
        MathEngine.evaluate("*2", {})
    assert excinfo.value.code == "3033"

    with pytest.raises(E.SyntaxError) as excinfo:
        MathEngine.evaluate("2-", {})
    assert excinfo.value.code == "3034"


def test_missing_function_argument() -> None:
    for expression in ("sqrt", "2+sqrt", "sqrt+4"):
        with pytest.raises(E.MissingArgumentError) as excinfo:
            MathEngine.evaluate(expression, {})
        assert excinfo.value.code == "3036"


def test_numeric_errors() -> None:
    for expression in ("", "()", "(1)(2)", "2^", "2**3"):
        with pytest.raises(E.NumericError):
            MathEngine.evaluate(expression, {})


def test_evaluate_is_idempotent_and_keeps_bindings() -> None:
    bindings = {"x": 1.5, "y": -2.0}
    first = MathEngine.evaluate("x*y+sqrt(x^2)", bindings)
    second = MathEngine.evaluate("x*y+sqrt(x^2)", bindings)
    assert first == second == -1.5
    assert bindings == {"x": 1.5, "y": -2.0}


def test_evaluate_with_degree_functions() -> None:
    functions = ScientificEngine.build_function_table(degrees=True)
    assert MathEngine.evaluate("sin90", {}, functions) == pytest.approx(1.0)
    assert MathEngine.evaluate("atan1", {}, functions) == pytest.approx(45.0)


def test_try_evaluate() -> None:
    outcome = MathEngine.try_evaluate("1+2")
    assert outcome.ok
    assert outcome.value == 3.0
    assert outcome.kind is None

    outcome = MathEngine.try_evaluate("1/0")
    assert not outcome.ok
    assert outcome.kind == E.ErrorKind.ARITHMETIC
    assert outcome.error.equation == "1/0"

    assert MathEngine.try_evaluate("sqrt").kind == E.ErrorKind.MISSING_ARGUMENT


def test_validate_accepts_signed_operands() -> None:
    assert MathEngine.validate(tokenize("2*-3")) is None
    assert MathEngine.validate(tokenize("-2/-3")) is None


def test_fold_signs() -> None:
    tokens = [Token(OPERATOR, "-"), Token(OPERATOR, "-"), number_token(1.0),
              Token(OPERATOR, "+"), Token(OPERATOR, "-"), number_token(2.0)]
    assert [token.text for token in MathEngine.fold_signs(tokens)] == ["+", "1.0", "-", "2.0"]


def test_reduce_precedence_leaves_signed_numbers() -> None:
    reduced = MathEngine.reduce_precedence(tokenize("1+2*3^2"))
    assert [token.kind for token in reduced] == [NUMBER, OPERATOR, NUMBER]
    assert reduced[2].value == 18.0


def test_sum_terms() -> None:
    assert MathEngine.sum_terms(tokenize("-1+2-4")) == -3.0
    with pytest.raises(E.NumericError):
        MathEngine.sum_terms([number_token(1.0), number_token(2.0)])


def test_calculate_renders_results() -> None:
    settings = {"decimal_places": 10, "fractions": False, "degrees": False}
    assert MathEngine.calculate("2*(3+4)", {}, settings) == ("= 14", 14.0)

    text, value = MathEngine.calculate("0.1+0.2", {}, settings)
    assert text == "≈ 0.3"
    assert value == 0.1 + 0.2

    assert MathEngine.calculate("1/3", {}, {"decimal_places": 4})[0] == "≈ 0.3333"
    assert MathEngine.calculate("1E20*10", {}, settings)[0] == "= 1000000000000000000000"


def test_calculate_renders_fractions() -> None:
    settings = {"decimal_places": 10, "fractions": True}
    assert MathEngine.calculate("1/4", {}, settings)[0] == "= 1/4"
    assert MathEngine.calculate("3/2", {}, settings)[0] == "= 1 1/2"
    assert MathEngine.calculate("0-3/2", {}, settings)[0] == "= -1 1/2"
    assert MathEngine.calculate("1/3", {}, settings)[0] == "≈ 1/3"


def test_calculate_uses_degree_setting() -> None:
    assert MathEngine.calculate("sin90", {}, {"degrees": True}) == ("= 1", 1.0)


def test_calculate_caps_decimal_places() -> None:
    assert MathEngine.calculate("1/3", {}, {"decimal_places": 1000})[0] == "= 0.3333333333333333"
    assert MathEngine.calculate("123456789.25", {}, {"decimal_places": 100})[0] == "= 123456789.25"


def test_deep_nesting_does_not_recurse_per_level() -> None:
    depth = 1500
    assert MathEngine.evaluate("(" * depth + "1+1" + ")" * depth, {}) == 2.0
