"""Skoobert: a lexer, precedence-climbing parser and call-by-need evaluator for a tiny JavaScript-flavoured lambda
calculus. Closures, currying, self-application and Y-combinator recursion, without loops or recursion syntax.
"""

from skoobert.lang.error import ErrorHandler, EvalError, LexError, ParseError, SkoobertError
from skoobert.lang.lexical import tokenize
from skoobert.lang.parser import parse
from skoobert.lang.session import Session, interpret, run
from skoobert.lang.values import (BooleanValue, Environment, FunctionValue, NumberValue, StringValue, Thunk, display,
                                  force)

__all__ = [
    "tokenize", "parse", "interpret", "run", "Session",
    "Environment", "Thunk", "force", "display",
    "NumberValue", "StringValue", "BooleanValue", "FunctionValue",
    "SkoobertError", "LexError", "ParseError", "EvalError", "ErrorHandler",
]
