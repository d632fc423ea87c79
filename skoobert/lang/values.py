"""Runtime values for the skoobert language, the chained Environment they live in, and the Thunk that makes evaluation
call-by-need.

Numbers, strings and booleans compare structurally. Functions and thunks compare by identity. Environments and values
may reference each other in cycles (a closure captures an environment whose thunks lead back to the closure), which is
fine: they are ordinary Python objects and the garbage collector handles the cycles.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal

from skoobert.lang.error import EvalError


class Value:
    """Superclass of everything an expression can evaluate to. str(value) is the value's display form."""
    type_name = "value"


@dataclass(frozen=True)
class NumberValue(Value):
    value: float
    type_name = "number"

    def __str__(self):
        number = self.value
        if math.isnan(number):
            return "NaN"
        elif math.isinf(number):
            return "Infinity" if number > 0 else "-Infinity"
        elif number.is_integer() and abs(number) < 1e21:
            return str(int(number))

        # shortest round-tripping digits, laid out the way JavaScript's Number#toString does
        __, digits, exponent = Decimal(repr(abs(number))).normalize().as_tuple()
        digits = "".join(str(digit) for digit in digits)
        point = len(digits) + exponent  # number == 0.<digits> * 10 ** point

        if len(digits) <= point <= 21:
            text = digits + "0" * (point - len(digits))
        elif 0 < point <= 21:
            text = f"{digits[:point]}.{digits[point:]}"
        elif -6 < point <= 0:
            text = "0." + "0" * -point + digits
        else:
            mantissa = f"{digits[0]}.{digits[1:]}" if len(digits) > 1 else digits
            text = f"{mantissa}e{'+' if point > 0 else '-'}{abs(point - 1)}"

        return "-" + text if number < 0 else text


@dataclass(frozen=True)
class StringValue(Value):
    value: str
    type_name = "string"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class BooleanValue(Value):
    value: bool
    type_name = "boolean"

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(eq=False)
class FunctionValue(Value):
    """A single-parameter closure. body is evaluated in a child of closure, never of the calling environment."""
    parameter: str
    body: object
    closure: "Environment" = field(repr=False)
    type_name = "function"

    def __str__(self):
        return "[Function]"


class Environment:
    """One scope in a singly-linked chain of scopes. A root environment is created per program run, and a child is
    created per function application binding exactly its parameter.
    """

    def __init__(self, parent=None):
        self.bindings = {}
        self.parent = parent

    def bind(self, name, value):
        """Inserts (or overwrites) name in this environment only; never walks to the parent."""
        self.bindings[name] = value

    def lookup(self, name):
        """Walks the chain outward and returns the first value bound to name, or None if name isn't bound."""
        env = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]
            env = env.parent
        return None

    def __contains__(self, name):
        return self.lookup(name) is not None

    def __repr__(self):
        depth, env = 0, self.parent
        while env is not None:
            depth, env = depth + 1, env.parent
        return f"Environment({sorted(self.bindings)}, depth={depth})"


class Thunk(Value):
    """An unevaluated expression paired with the environment it must be evaluated in. The memo cell is written at most
    once, on the first force.
    """
    type_name = "thunk"
    _EMPTY = object()

    def __init__(self, expression, environment):
        self.expression = expression
        self.environment = environment
        self._memo = Thunk._EMPTY
        self._forcing = False

    @property
    def forced(self):
        return self._memo is not Thunk._EMPTY

    @property
    def memo(self):
        """The memoized immediate result (possibly another Thunk), or None if this thunk hasn't been forced."""
        return self._memo if self.forced else None

    def memoize(self, value):
        assert not self.forced, "thunk memo cell is single-assignment"
        self._memo = value

    def step(self):
        """Evaluates self.expression once and memoizes the immediate result, which may itself be a Thunk. Returns the
        memoized result on every later call.
        """
        if self.forced:
            return self._memo

        if self._forcing:
            raise EvalError("Circular definition: value depends on itself", self.expression.location)

        self._forcing = True
        try:
            result = self.expression.evaluate(self.environment)
        finally:
            self._forcing = False

        self.memoize(result)
        return result

    def __str__(self):
        return "[Unevaluated Thunk]"

    def __repr__(self):
        state = f"memo={self._memo!r}" if self.forced else "unforced"
        return f"Thunk({self.expression}, {state})"


def force(value):
    """Resolves value down to a non-Thunk value. Every thunk along the way memoizes its own immediate result, so each
    thunk's expression is evaluated at most once no matter how many references force it.
    """
    while isinstance(value, Thunk):
        value = value.step()
    return value


def display(value):
    """Display form of value, as used for string concatenation and default printing."""
    return str(value)
