# Tokenizer.py
"""""
Turns an expression string into a flat list of tokens.

Token kinds
-----------
number    literal, value already parsed to float ('2', '.5', '1.0E-5')
operator  one of ^ * / + -   (signs are operators too, numbers are never signed)
lparen    (
rparen    )
function  a registered function name ('sqrt' in 'sqrt4')
name      any other identifier; bound variables are replaced later by MathEngine

The caller removes whitespace and converts ',' to '.' before tokenizing.
"""""
import math
import re

from . import ScientificEngine
from . import error as E

NUMBER = "number"
OPERATOR = "operator"
LPAREN = "lparen"
RPAREN = "rparen"
FUNCTION = "function"
NAME = "name"

OPERATORS = "^*/+-"
DIGITS = "0123456789"
NUMERIC_CHARS = DIGITS + ".E+-"

WORD = re.compile(r"[A-Za-z_]\w*", re.ASCII)


class Token:
    """One lexical unit of an expression."""

    def __init__(self, kind, text, value=None, attached=False):
        self.kind = kind
        self.text = text
        self.value = value
        # name tokens only: glued to a preceding letter/digit/underscore, so not a whole word
        self.attached = attached

    def is_operator(self, symbols=OPERATORS):
        return self.kind == OPERATOR and self.text in symbols

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.kind, self.text, self.value, self.attached) == \
               (other.kind, other.text, other.value, other.attached)

    def __repr__(self):
        if self.kind == NUMBER:
            return f"Number({self.value!r})"
        return f"{self.kind.capitalize()}({self.text!r})"


def number_token(value):
    """Build a number token for a computed value."""
    return Token(NUMBER, repr(value), value=value)


def is_operator_symbol(symbol):
    return symbol in OPERATORS


def operation_index(text, from_end=False):
    """Return the index of the nearest operator in `text`, or None.

    from_end=False: first operator after position 0.
    from_end=True:  last operator.
    An operator directly preceded by 'E' is the sign of an exponent and is skipped.
    """
    if not text:
        return None

    if from_end:
        for i in range(len(text) - 1, -1, -1):
            if is_operator_symbol(text[i]) and (i == 0 or text[i - 1] != 'E'):
                return i
    else:
        for i in range(1, len(text)):
            if is_operator_symbol(text[i]) and text[i - 1] != 'E':
                return i
    return None


def read_number(text, start):
    """Read the numeric literal starting at `start`.

    The literal runs up to the next operator boundary (see operation_index) and stops early
    at the first character that cannot be part of a number, e.g. ')' or a letter.

    Returns:
        (token, position_after_literal)
    """
    rest = text[start:]
    boundary = operation_index(rest)
    region = rest if boundary is None else rest[:boundary]

    end = 0
    while end < len(region) and region[end] in NUMERIC_CHARS:
        end += 1
    literal = region[:end]

    try:
        value = float(literal)
    except ValueError:
        raise E.NumericError(f"'{literal}' is not a valid number", code="3035")

    if not math.isfinite(value):
        raise E.ArithmeticError(f"'{literal}' is too large", code="3026")

    return Token(NUMBER, literal, value=value), start + end


def tokenize(expression, variables=(), functions=ScientificEngine.FUNCTIONS):
    """Convert `expression` into a token list.

    `variables` are the bound names. A whole word equal to a bound name stays a name token
    (substituted later); any other word starting with a function name is split into a
    function token and the rest, which is tokenized normally ('sqrt4' -> sqrt, 4).
    A single trailing '=' is ignored ('1+2=').
    """
    text = expression
    if text.endswith("="):
        text = text[:-1]

    tokens = []
    position = 0

    while position < len(text):
        current_char = text[position]

        # --- Numbers ---
        if current_char in DIGITS or current_char == ".":
            token, position = read_number(text, position)
            tokens.append(token)
            continue

        # --- Operators and parentheses ---
        if current_char in OPERATORS:
            tokens.append(Token(OPERATOR, current_char))
            position += 1
            continue
        if current_char == "(":
            tokens.append(Token(LPAREN, current_char))
            position += 1
            continue
        if current_char == ")":
            tokens.append(Token(RPAREN, current_char))
            position += 1
            continue

        # --- Identifiers: variables and functions ---
        match = WORD.match(text, position)
        if match is None:
            raise E.NumericError(f"Unexpected character '{current_char}' at position {position}", code="3011")

        word = match.group()
        previous_char = text[position - 1] if position > 0 else ""
        attached = previous_char.isalnum() or previous_char == "_"

        if word in variables and not attached:
            tokens.append(Token(NAME, word))
            position = match.end()
            continue

        function_name = ScientificEngine.match_function(word, functions)
        if function_name is not None:
            tokens.append(Token(FUNCTION, function_name))
            position += len(function_name)
        else:
            tokens.append(Token(NAME, word, attached=attached))
            position = match.end()

    return tokens
