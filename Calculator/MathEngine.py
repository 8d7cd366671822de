# MathEngine.py
"""""
Core calculation engine of the expression calculator.

Pipeline
--------
1) Tokenizer: the expression string becomes a flat token list (see Tokenizer.py).
2) Parentheses: the last '(' and the first ')' after it enclose a group without
   parentheses; the group runs through steps 2-7 and is replaced by its value.
   Repeated until no parenthesis is left.
3) Substitution: whole-word variables become numbers.
4) Validation: undefined variables, invalid operator pairs, illegal start/end.
5) Functions: 'sqrt4' -> 2.0, leftmost call first, rescanning after each call.
6) Precedence: '^' (last one first, so 2^3^2 = 2^9), then '*' and '/'
   (first one first, so 8/4/2 = 1), then runs of signs are folded.
7) Summation: the remaining chain of signed numbers is added up left to right.
8) Formatter: renders results using Decimal/Fraction and user preferences.

evaluate() raises MathError subclasses; try_evaluate() returns an Outcome instead.
"""""

import fractions
import logging
import math
from decimal import Decimal, localcontext

from . import config_manager as config_manager
from . import ScientificEngine
from . import Tokenizer
from .Tokenizer import NUMBER, OPERATOR, LPAREN, RPAREN, FUNCTION, NAME, Token, number_token
from . import error as E

logger = logging.getLogger(__name__)

# Operator pairs that can never be read as "operator followed by a signed operand"
INVALID_SEQUENCES = ("+*", "*+", "+/", "/+", "-*", "-/")


# -----------------------------
# Parenthesis resolver
# -----------------------------

def resolve_parentheses(tokens, bindings, functions):
    """Replace every parenthesized group by its value, innermost-rightmost first."""
    tokens = list(tokens)

    while any(token.kind in (LPAREN, RPAREN) for token in tokens):
        open_index = None
        for index, token in enumerate(tokens):
            if token.kind == LPAREN:
                open_index = index

        start = 0 if open_index is None else open_index
        close_index = None
        for index in range(start, len(tokens)):
            if tokens[index].kind == RPAREN:
                close_index = index
                break

        if open_index is None:
            raise E.SyntaxError("the left parenthesis is not closed", code="3010")
        if close_index is None:
            raise E.SyntaxError("the right parenthesis is not closed", code="3009")

        # The group holds no parentheses, so this call never recurses further
        value = evaluate_tokens(tokens[open_index + 1:close_index], bindings, functions)
        logger.debug("Group %s -> %r", tokens[open_index:close_index + 1], value)
        tokens[open_index:close_index + 1] = [number_token(value)]

    return tokens


# -----------------------------
# Variable substitution
# -----------------------------

def binding_value(name, value):
    """Return the bound value of `name` as a finite float."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise E.InputError(f"Invalid value for variable {name}: {value!r}", code="7002")
    if not math.isfinite(number):
        raise E.InputError(f"Invalid value for variable {name}: {value!r}", code="7002")
    return number


def substitute_variables(tokens, bindings):
    """Replace whole-word names that have a binding with their value."""
    result = []
    for token in tokens:
        if token.kind == NAME and not token.attached and token.text in bindings:
            result.append(number_token(binding_value(token.text, bindings[token.text])))
        else:
            result.append(token)
    return result


# -----------------------------
# Validator
# -----------------------------

def validate(tokens):
    """Reject structurally invalid token lists with a SyntaxError. Returns None."""
    for token in tokens:
        if token.kind == NAME:
            detail = " (not separated from the text before it)" if token.attached else ""
            raise E.SyntaxError(f"There are undefined variables in the expression: {token.text}{detail}",
                                code="3031")

    for left, right in zip(tokens, tokens[1:]):
        if left.kind == OPERATOR and right.kind == OPERATOR and left.text + right.text in INVALID_SEQUENCES:
            raise E.SyntaxError(f"There is something wrong with math operations in the expression: "
                                f"'{left.text}{right.text}'", code="3032")

    if tokens and tokens[0].is_operator("*/"):
        raise E.SyntaxError("Illegal start of expression", code="3033")

    if tokens and tokens[-1].is_operator("*/+-"):
        raise E.SyntaxError("Illegal end of expression", code="3034")


# -----------------------------
# Function applier
# -----------------------------

def find_function_call(tokens):
    """Return (start, end, argument) of the leftmost 'function [-] number' run, or None."""
    for index, token in enumerate(tokens):
        if token.kind != FUNCTION:
            continue
        following = tokens[index + 1:index + 3]
        if following and following[0].kind == NUMBER:
            return index, index + 2, following[0].value
        if len(following) == 2 and following[0].is_operator("-") and following[1].kind == NUMBER:
            return index, index + 3, -following[1].value
    return None


def apply_functions(tokens, functions):
    """Replace every function call by its result."""
    tokens = list(tokens)

    call = find_function_call(tokens)
    while call is not None:
        start, end, argument = call
        name = tokens[start].text
        result = ScientificEngine.apply_function(name, argument, functions)
        logger.debug("%s(%r) = %r", name, argument, result)
        tokens[start:end] = [number_token(result)]
        # The list changed length, scan again from the beginning
        call = find_function_call(tokens)

    for token in tokens:
        if token.kind == FUNCTION:
            raise E.MissingArgumentError(f"Missing argument for function: {token.text}", code="3036")

    return tokens


# -----------------------------
# Precedence reducer
# -----------------------------

def fold_signs_after(tokens, symbols):
    """Collapse the run of signs right after each operator in `symbols` into at most one sign.

    '^--' becomes '^', '*---' becomes '*-'.
    """
    result = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        result.append(token)
        index += 1
        if not token.is_operator(symbols):
            continue

        negative = False
        while index < len(tokens) and tokens[index].is_operator("+-"):
            negative ^= tokens[index].text == "-"
            index += 1
        if negative:
            result.append(Token(OPERATOR, "-"))
    return result


def compute(left, operator, right):
    """Apply one binary operator; the result is always a finite float."""
    if operator == "^":
        if left == 0 and right < 0:
            raise E.ArithmeticError("Cannot divide by zero", code="3003")
        try:
            result = math.pow(left, right)
        except OverflowError:
            raise E.ArithmeticError(f"{left}^{right} is too large", code="3026")
        except ValueError:
            raise E.ArithmeticError(f"{left}^{right} is not a real number", code="2005")
    elif operator == "*":
        result = left * right
    elif operator == "/":
        if right == 0:
            raise E.ArithmeticError("Cannot divide by zero", code="3003")
        result = left / right
    else:
        raise E.NumericError(f"Invalid operation: {operator}", code="3038")

    if not math.isfinite(result):
        raise E.ArithmeticError(f"{left}{operator}{right} is too large", code="3026")
    return result


def fold_binary(tokens, index):
    """Evaluate the operator at `index` with its neighbouring operands and splice the result."""
    operator = tokens[index].text

    if index == 0 or tokens[index - 1].kind != NUMBER:
        raise E.NumericError(f"Missing operand before '{operator}'", code="3038")
    left = tokens[index - 1].value

    end = index + 1
    sign = 1.0
    if end < len(tokens) and tokens[end].is_operator("+-"):
        if tokens[end].text == "-":
            sign = -1.0
        end += 1
    if end >= len(tokens) or tokens[end].kind != NUMBER:
        raise E.NumericError(f"Missing operand after '{operator}'", code="3038")
    right = sign * tokens[end].value

    result = compute(left, operator, right)
    logger.debug("%r %s %r = %r", left, operator, right, result)
    return tokens[:index - 1] + [number_token(result)] + tokens[end + 1:]


def fold_signs(tokens):
    """Collapse '++' to '+', '+-' and '-+' to '-', '--' to '+' until no run of signs is left."""
    result = []
    for token in tokens:
        if token.is_operator("+-") and result and result[-1].is_operator("+-"):
            negative = (result[-1].text == "-") != (token.text == "-")
            result[-1] = Token(OPERATOR, "-" if negative else "+")
        else:
            result.append(token)
    return result


def reduce_precedence(tokens):
    """Reduce '^', then '*' and '/', then sign runs, leaving a chain of signed numbers."""
    tokens = list(tokens)

    # Power: the last caret first, so exponentiation groups right to left
    while any(token.is_operator("^") for token in tokens):
        tokens = fold_signs_after(tokens, "^")
        index = max(i for i, token in enumerate(tokens) if token.is_operator("^"))
        tokens = fold_binary(tokens, index)

    # Multiplication / division: the first one first, left to right
    while any(token.is_operator("*/") for token in tokens):
        tokens = fold_signs_after(tokens, "*/")
        index = min(i for i, token in enumerate(tokens) if token.is_operator("*/"))
        tokens = fold_binary(tokens, index)

    return fold_signs(tokens)


# -----------------------------
# Summation
# -----------------------------

def sum_terms(tokens):
    """Add up a chain of signed numbers, e.g. [-, 1, +, 2, -, 4] -> -3.0."""
    if not tokens:
        raise E.NumericError("The expression must contain a valid numeric value.", code="3035")

    result = 0.0
    operation = "+"
    expect_number = True

    for position, token in enumerate(tokens):
        if token.kind == NUMBER:
            if not expect_number:
                raise E.NumericError(f"Missing operator before {token.text}", code="3039")
            if operation == "+":
                result = result + token.value
            else:
                result = result - token.value
            expect_number = False

        elif token.is_operator("+-") and (position == 0 or not expect_number):
            operation = token.text
            expect_number = True

        else:
            raise E.NumericError(f"The expression must contain a valid numeric value, found '{token.text}'",
                                 code="3035")

    if expect_number:
        raise E.NumericError(f"Missing operand after '{operation}'", code="3038")

    return result


# -----------------------------
# Public entry points
# -----------------------------

def evaluate_tokens(tokens, bindings, functions):
    """Run one token list through parentheses, substitution, validation, functions and reduction."""
    tokens = resolve_parentheses(tokens, bindings, functions)
    tokens = substitute_variables(tokens, bindings)
    validate(tokens)
    tokens = apply_functions(tokens, functions)
    tokens = reduce_precedence(tokens)
    logger.debug("Reduced: %s", tokens)

    result = sum_terms(tokens)
    if not math.isfinite(result):
        raise E.ArithmeticError("Number too large (Arithmetic overflow).", code="3026")
    return result


def evaluate(expression, bindings=None, functions=None):
    """Evaluate `expression` with the variable `bindings` and return a float.

    The expression must not contain whitespace and must use '.' as decimal separator.
    Raises a MathError subclass (error.py) with `equation` set to the expression.
    """
    if bindings is None:
        bindings = {}
    if functions is None:
        functions = ScientificEngine.FUNCTIONS

    try:
        tokens = Tokenizer.tokenize(expression, bindings, functions)
        logger.debug("Tokens: %s", tokens)
        return evaluate_tokens(tokens, bindings, functions)

    except E.MathError as e:
        e.equation = expression
        raise


class Outcome:
    """Result of try_evaluate: a value, or the MathError that stopped the evaluation."""

    def __init__(self, value=None, error=None):
        self.value = value
        self.error = error

    @property
    def ok(self):
        return self.error is None

    @property
    def kind(self):
        """ErrorKind of the failure, None on success."""
        if self.error is None:
            return None
        return self.error.kind

    def __repr__(self):
        if self.ok:
            return f"Outcome(value={self.value!r})"
        return f"Outcome(error={self.error.kind.name}: {self.error.message!r})"


def try_evaluate(expression, bindings=None, functions=None):
    """Like evaluate(), but returns an Outcome instead of raising MathError."""
    try:
        return Outcome(value=evaluate(expression, bindings, functions))
    except E.MathError as e:
        return Outcome(error=e)


# -----------------------------
# Result formatting
# -----------------------------

def cleanup(ergebnis, settings):
    """Format a numeric result as Fraction or Decimal depending on settings.

    Returns:
        (rendered_value, rounding_flag)
    where rounding_flag indicates whether the rendered value is not exact.
    """
    rounding = False
    target_decimals = settings.get("decimal_places", config_manager.DEFAULT_SETTINGS["decimal_places"])
    target_decimals = min(max(target_decimals, 0), config_manager.MAX_DECIMAL_PLACES)

    if settings.get("fractions"):
        exact = fractions.Fraction.from_decimal(Decimal(repr(ergebnis)))
        bruch = exact.limit_denominator(100000)
        rounding = bruch != exact
        zaehler = bruch.numerator
        nenner = bruch.denominator

        if nenner == 1:
            return str(zaehler), rounding
        if abs(zaehler) > nenner:
            # Mixed fraction form (e.g., 3/2 -> "1 1/2"), the remainder part stays positive
            ganzzahl = abs(zaehler) // nenner
            rest_zaehler = abs(zaehler) % nenner
            vorzeichen = "-" if zaehler < 0 else ""
            return f"{vorzeichen}{ganzzahl} {rest_zaehler}/{nenner}", rounding
        return str(bruch), rounding

    value = Decimal(repr(ergebnis))
    if value == 0:
        return "0", rounding

    # Every digit before the point plus the requested decimals must fit, or quantize() fails
    with localcontext() as context:
        context.prec = max(value.adjusted() + 1, 1) + target_decimals + 28

        if value % 1 == 0:
            # Integer result, normalized without rounding
            return format(value.normalize(), "f"), rounding

        gerundetes_ergebnis = value.quantize(Decimal(1).scaleb(-target_decimals))
        if gerundetes_ergebnis != value:
            rounding = True
        if gerundetes_ergebnis == 0:
            return "0", rounding
        return format(gerundetes_ergebnis.normalize(), "f"), rounding


def calculate(problem, bindings=None, settings=None):
    """Evaluate `problem` and render it for display.

    Returns:
        (display_text, value), e.g. ("= 14", 14.0) or ("\u2248 0.3333333333", 0.333...)
    `settings` defaults to the configuration file; the "degrees" setting selects the angle mode.
    """
    if settings is None:
        settings = config_manager.load_setting_value("all")

    functions = ScientificEngine.build_function_table(degrees=settings.get("degrees", False))
    ergebnis = evaluate(problem, bindings, functions)

    ausgabe_string, rounding = cleanup(ergebnis, settings)
    ungefaehr_zeichen = "\u2248"  # "≈"
    if rounding:
        return f"{ungefaehr_zeichen} {ausgabe_string}", ergebnis
    return f"= {ausgabe_string}", ergebnis
