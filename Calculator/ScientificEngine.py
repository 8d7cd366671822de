# ScientificEngine.py
"""""
Function registry for the calculator.

Each entry maps a function name to a one-argument callable on floats.
The table is a read-only mapping and can be shared between evaluations.
"""""
import math
from types import MappingProxyType

from . import error as E


def _degrees_in(function):
    # sin/cos/tan receive degrees when the degree setting is active
    def wrapped(number):
        return function(math.radians(number))
    return wrapped


def _degrees_out(function):
    def wrapped(number):
        return math.degrees(function(number))
    return wrapped


def build_function_table(degrees=False):
    """Return the immutable name -> function table.

    degrees=True reads the argument of sin/cos/tan in degrees and returns atan in degrees.
    """
    if degrees:
        table = {
            "sin": _degrees_in(math.sin),
            "cos": _degrees_in(math.cos),
            "tan": _degrees_in(math.tan),
            "atan": _degrees_out(math.atan),
        }
    else:
        table = {
            "sin": math.sin,
            "cos": math.cos,
            "tan": math.tan,
            "atan": math.atan,
        }
    table["log10"] = math.log10
    table["log2"] = math.log2
    table["sqrt"] = math.sqrt
    return MappingProxyType(table)


# Default table (radians), built once
FUNCTIONS = build_function_table()


def match_function(word, functions=FUNCTIONS):
    """Return the function name that `word` starts with, or None."""
    # Longest names first, a name never loses against its own prefix
    for name in sorted(functions, key=len, reverse=True):
        if word.startswith(name):
            return name
    return None


def apply_function(name, argument, functions=FUNCTIONS):
    """Call the registered function `name` with `argument`.

    Domain violations (sqrt of a negative, log of zero) and overflow are raised as
    ArithmeticError, never returned as NaN or infinity.
    """
    try:
        function = functions[name]
    except KeyError:
        raise E.SyntaxError(f"Unknown function: {name}", code="2004")

    try:
        result = function(argument)
    except ValueError:
        raise E.ArithmeticError(f"{name}({argument}) is outside the domain of '{name}'", code="2005")
    except OverflowError:
        raise E.ArithmeticError(f"{name}({argument}) is too large", code="3026")

    if not math.isfinite(result):
        raise E.ArithmeticError(f"{name}({argument}) has no finite result", code="2005")
    return result
