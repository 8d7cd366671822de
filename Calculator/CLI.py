# CLI.py
"""""
Command line front end.

    python main.py "2 * (x + 1)" x=3
    8.0

The first argument is the formula, every following argument binds a variable ('name=value').
Whitespace is removed and ',' is read as decimal separator in both.
The result goes to stdout, errors go to stderr as 'Error <code>: <message>' with exit status 1.
"""""
import logging
import sys

from . import config_manager as config_manager
from . import MathEngine
from . import ScientificEngine
from . import error as E
from .input_parser import normalize_expression, parse_bindings

logger = logging.getLogger(__name__)


def configure_logging(debug=False):
    """Debug setting on: engine steps at DEBUG on stderr. Off: warnings only."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def run(arguments, settings=None):
    """Evaluate the formula in arguments[0] with the bindings in arguments[1:]; return the exit status."""
    if settings is None:
        settings = config_manager.load_setting_value("all")

    if not arguments:
        print(E.ERROR_MESSAGES["7004"], file=sys.stderr)
        return 1

    expression = normalize_expression(arguments[0])
    if not expression:
        print(E.ERROR_MESSAGES["7003"], file=sys.stderr)
        return 1

    try:
        bindings = parse_bindings(arguments[1:])
        functions = ScientificEngine.build_function_table(degrees=settings.get("degrees", False))
        result = MathEngine.evaluate(expression, bindings, functions)

    except E.MathError as e:
        logger.debug("Evaluation of %r failed with %s (%s)", expression, e.kind.name, e.area)
        print(e.describe(), file=sys.stderr)
        return 1

    print(result)
    return 0


def main(argv=None):
    """Console script entry point."""
    if argv is None:
        argv = sys.argv[1:]
    settings = config_manager.load_setting_value("all")
    configure_logging(settings.get("debug", False))
    return run(argv, settings)


if __name__ == "__main__":
    sys.exit(main())
