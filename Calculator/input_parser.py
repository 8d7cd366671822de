# input_parser.py
"""""
Input normalization shared by the command line and the window.

The engine expects an expression without whitespace and with '.' as decimal
separator; both front ends run user text through normalize_expression() first.
"""""
import math

from . import error as E


def normalize_expression(expression):
    """Remove all whitespace and turn decimal commas into dots ('1, 5 + x' -> '1.5+x')."""
    return "".join(expression.split()).replace(",", ".")


def parse_binding(argument):
    """Parse one 'name=value' argument into (name, float)."""
    variable = normalize_expression(argument)
    if "=" not in variable:
        raise E.InputError(f"The variable is assigned through the sign \"=\": {argument}", code="7001")

    name, value = variable.split("=", 1)
    if not name:
        raise E.InputError(f"Missing variable name: {argument}", code="7001")

    try:
        number = float(value)
    except ValueError:
        raise E.InputError(f"Invalid value for variable {name}: {value}", code="7002")
    if not math.isfinite(number):
        raise E.InputError(f"Invalid value for variable {name}: {value}", code="7002")

    return name, number


def parse_bindings(arguments):
    """Turn ['x=1', 'y = 2,5'] into {'x': 1.0, 'y': 2.5}. A later binding of a name wins."""
    bindings = {}
    for argument in arguments:
        name, number = parse_binding(argument)
        bindings[name] = number
    return bindings


def parse_bindings_line(line):
    """Parse the window's bindings field: 'x=1; y=2' (';' separated, ',' is a decimal comma)."""
    return parse_bindings(part for part in line.split(";") if part.strip())
