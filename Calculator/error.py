# error.py
"""""
Error taxonomy of the expression calculator.

Every failure raised by the engine is a MathError subclass carrying a four digit
code (see ERROR_MESSAGES) and, once it left the engine, the equation that caused it.
"""""
from enum import Enum


class ErrorKind(Enum):
    SYNTAX = "syntax"
    NUMERIC = "numeric"
    ARITHMETIC = "arithmetic"
    MISSING_ARGUMENT = "missing_argument"
    INPUT = "input"
    UNKNOWN = "unknown"


class MathError(Exception):
    kind = ErrorKind.UNKNOWN

    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

    def describe(self):
        """Return the user facing text: 'Error <code>: <message>'."""
        return f"Error {self.code}: {self.message}"

    @property
    def area(self):
        """Name of the error area, taken from the first digit of the code."""
        return Error_Dictionary.get(self.code[:1], "Unknown Error")


class SyntaxError(MathError):
    kind = ErrorKind.SYNTAX

class NumericError(MathError):
    kind = ErrorKind.NUMERIC

class ArithmeticError(MathError):
    kind = ErrorKind.ARITHMETIC

class MissingArgumentError(MathError):
    kind = ErrorKind.MISSING_ARGUMENT

class InputError(MathError):
    kind = ErrorKind.INPUT



Error_Dictionary= {

    "1" : "Missing Files",
    "2" : "Scientific Calculation Error",
    "3" : "Calculator Error",
    "4" : "UI Error",
    "5" : "Configuration Error",
    "7" : "Runtime Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "2004" : "Unknown function: ", # + name
    "2005" : "Argument outside the domain of function: ", # + name


    "3003" : "Division by Zero",
    "3009" : "Missing ')'. ",
    "3010" : "Missing '('. ",
    "3011" : "Unexpected character: ", # + character
    "3026" : "Number too big.",
    "3031" : "Undefined variable: ", # + name
    "3032" : "Invalid operator sequence: ", # + operators
    "3033" : "Illegal start of expression.",
    "3034" : "Illegal end of expression.",
    "3035" : "Invalid number: ", # + token
    "3036" : "Missing argument for function: ", # + name
    "3038" : "Missing operand next to: ", # + operator
    "3039" : "Missing operator between numbers.",


    "4002" : "Calculation already Running!",
    "4003" : "No Value in ANS",


    "5001" : "Not all Settings could be saved: ", # + setting


    "7001" : "Variables are assigned with '=': ", # + argument
    "7002" : "Invalid value for variable: ", # + argument
    "7003" : "the written formula is empty.",
    "7004" : "Please write the formula in program arguments",


    "9999" : "Unexpected Error: " #+error
}
