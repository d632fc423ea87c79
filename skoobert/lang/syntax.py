"""Skoobert abstract syntax tree. Every node knows how to
    - evaluate itself lazily in an Environment (call-by-need: calls and conditionals return Thunks),
    - check whether it references any name bound in an Environment (used to spot self-contained bindings),
    - expand itself symbolically against an Environment (inspect.expanded),
    - print itself back to surface syntax with minimal parentheses.

Precedence is encoded structurally: each level of the grammar ladder (see skoobert/grammar/tokens.py) that applies an
operator gets its own node class, and a level with no operator is simply the node of the next-tighter level. Nodes are
immutable. Every expression class must implement all of Expression's abstract methods, so a missing case fails as soon
as the node class is instantiated rather than at some later evaluation.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace

from skoobert.grammar.tokens import Location
from skoobert.lang.error import EvalError
from skoobert.lang.values import BooleanValue, Environment, FunctionValue, NumberValue, StringValue, Thunk, force


class Precedence:
    """Binding power of each node, loosest first. Mirrors the parser's ladder."""
    CONDITIONAL = 0  # also arrow functions: both extend as far right as possible
    LOGICAL_OR = 1
    LOGICAL_AND = 2
    EQUALITY = 3
    RELATIONAL = 4
    ADDITIVE = 5
    MULTIPLICATIVE = 6
    UNARY = 7
    CALL = 8
    PRIMARY = 9


def _loc():
    return field(default=None, compare=False, repr=False)


def _wrap(node, parenthesize):
    text = node.show()
    return f"({text})" if parenthesize else text


class Expression(ABC):
    """Superclass of every expression node."""
    precedence = Precedence.PRIMARY

    @abstractmethod
    def evaluate(self, env):
        """Reduces self to a Value in env. May return an unforced Thunk: forcing is the caller's responsibility."""

    @abstractmethod
    def children(self):
        """Direct sub-expressions of self, left to right."""

    @abstractmethod
    def expand(self, env, expanding, params):
        """Returns a copy of self with let-bound names inlined. expanding is the frozenset of names currently being
        inlined (for cycle detection), params the frozenset of enclosing arrow parameters, which are never expanded.
        """

    @abstractmethod
    def show(self):
        """Surface syntax of self, with parentheses only where precedence requires them."""

    def references(self, env, params=frozenset()):
        """Whether or not self mentions a name (other than one of params) that resolves in env."""
        return any(child.references(env, params) for child in self.children())

    def __str__(self):
        return self.show()


# ----------------------------------------------------------------------------------------------------------------------
# primary expressions
# ----------------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Literal(Expression):
    """Number, string or boolean literal. value is the Value it evaluates to."""
    value: object
    location: Location = _loc()

    def evaluate(self, env):
        return self.value

    def children(self):
        return ()

    def expand(self, env, expanding, params):
        return self

    def show(self):
        if isinstance(self.value, StringValue):
            escaped = self.value.value.replace("\\", "\\\\").replace("\"", "\\\"").replace("\n", "\\n")
            return f"\"{escaped}\""
        return str(self.value)


@dataclass(frozen=True)
class Identifier(Expression):
    name: str
    location: Location = _loc()

    def evaluate(self, env):
        value = env.lookup(self.name)
        if value is None:
            raise EvalError(f"Undefined variable: {self.name}", self.location)
        return value

    def children(self):
        return ()

    def references(self, env, params=frozenset()):
        return self.name not in params and self.name in env

    def expand(self, env, expanding, params):
        """Inlines the binding of self.name unless it is a parameter, unbound, or self-contained. A name that is
        already being expanded is rendered as ...name... instead of being inlined again.
        """
        if self.name in params:
            return self
        if self.name in expanding:
            return replace(self, name=f"...{self.name}...")

        value = env.lookup(self.name)
        if not isinstance(value, Thunk):
            return self

        # self-contained bindings (S, K, literals) are primitives: keep the name
        if not value.expression.references(value.environment):
            return self

        return value.expression.expand(value.environment, expanding | {self.name}, frozenset())

    def show(self):
        return self.name


@dataclass(frozen=True)
class Parenthesized(Expression):
    """( expression ). Transparent to evaluation, and dropped when printing: parentheses are re-derived instead."""
    expression: Expression
    location: Location = _loc()

    @property
    def precedence(self):
        return self.expression.precedence

    def evaluate(self, env):
        return self.expression.evaluate(env)

    def children(self):
        return (self.expression,)

    def expand(self, env, expanding, params):
        return replace(self, expression=self.expression.expand(env, expanding, params))

    def show(self):
        return self.expression.show()


@dataclass(frozen=True)
class Arrow(Expression):
    """parameter => body. Evaluates to a closure over the defining environment."""
    parameter: str
    body: Expression
    location: Location = _loc()
    precedence = Precedence.CONDITIONAL

    def evaluate(self, env):
        return FunctionValue(self.parameter, self.body, env)

    def children(self):
        return (self.body,)

    def references(self, env, params=frozenset()):
        return self.body.references(env, params | {self.parameter})

    def expand(self, env, expanding, params):
        return replace(self, body=self.body.expand(env, expanding, params | {self.parameter}))

    def show(self):
        return f"{self.parameter} => {self.body.show()}"


@dataclass(frozen=True)
class Call(Expression):
    """callee(argument). Neither the argument nor the result is evaluated here: the parameter is bound to a Thunk over
    the argument in the caller's environment, and the result is a Thunk over the body in a child of the closure.
    """
    callee: Expression
    argument: Expression
    location: Location = _loc()
    precedence = Precedence.CALL

    def evaluate(self, env):
        function = force(self.callee.evaluate(env))
        if not isinstance(function, FunctionValue):
            raise EvalError(f"Cannot call non-function ({function.type_name})", self.location)

        call_env = Environment(function.closure)
        call_env.bind(function.parameter, Thunk(self.argument, env))
        return Thunk(function.body, call_env)

    def children(self):
        return self.callee, self.argument

    def expand(self, env, expanding, params):
        return replace(self,
                       callee=self.callee.expand(env, expanding, params),
                       argument=self.argument.expand(env, expanding, params))

    def show(self):
        return f"{_wrap(self.callee, self.callee.precedence < self.precedence)}({self.argument.show()})"


# ----------------------------------------------------------------------------------------------------------------------
# operators
# ----------------------------------------------------------------------------------------------------------------------

def _require(value, value_type, msg, location):
    if not isinstance(value, value_type):
        raise EvalError(f"{msg}, got {value.type_name}", location)
    return value


@dataclass(frozen=True)
class Unary(Expression):
    """!operand or -operand. Right-associative: - -x is -(-x)."""
    operator: str
    operand: Expression
    location: Location = _loc()
    precedence = Precedence.UNARY

    def evaluate(self, env):
        operand = force(self.operand.evaluate(env))
        if self.operator == "!":
            operand = _require(operand, BooleanValue, "'!' operator requires a boolean", self.location)
            return BooleanValue(not operand.value)

        operand = _require(operand, NumberValue, "'-' operator requires a number", self.location)
        return NumberValue(-operand.value)

    def children(self):
        return (self.operand,)

    def expand(self, env, expanding, params):
        return replace(self, operand=self.operand.expand(env, expanding, params))

    def show(self):
        return self.operator + _wrap(self.operand, self.operand.precedence < self.precedence)


@dataclass(frozen=True)
class BinaryOperation(Expression):
    """left operator right. Every binary level of the ladder is left-associative."""
    operator: str
    left: Expression
    right: Expression
    location: Location = _loc()

    def evaluate(self, env):
        left = force(self.left.evaluate(env))
        right = force(self.right.evaluate(env))
        return self.combine(left, right)

    @abstractmethod
    def combine(self, left, right):
        """Applies self.operator to two forced values."""

    def _numbers(self, left, right):
        msg = f"'{self.operator}' operator requires numbers"
        _require(left, NumberValue, msg, self.location)
        _require(right, NumberValue, msg, self.location)
        return left.value, right.value

    def children(self):
        return self.left, self.right

    def expand(self, env, expanding, params):
        return replace(self,
                       left=self.left.expand(env, expanding, params),
                       right=self.right.expand(env, expanding, params))

    def show(self):
        # a right operand at the same level needs parentheses to keep left-associativity: a - (b - c)
        left = _wrap(self.left, self.left.precedence < self.precedence)
        right = _wrap(self.right, self.right.precedence <= self.precedence)
        return f"{left} {self.operator} {right}"


@dataclass(frozen=True)
class Logical(BinaryOperation):
    """|| and &&. The left operand is forced first, and the right one is only evaluated if the left one doesn't already
    decide the result. Both operands must be booleans.
    """
    short_circuit = None

    def evaluate(self, env):
        msg = f"'{self.operator}' operator requires booleans"
        left = _require(force(self.left.evaluate(env)), BooleanValue, msg, self.location)
        if left.value is self.short_circuit:
            return left
        right = _require(force(self.right.evaluate(env)), BooleanValue, msg, self.location)
        return self.combine(left, right)


@dataclass(frozen=True)
class LogicalOr(Logical):
    precedence = Precedence.LOGICAL_OR
    short_circuit = True

    def combine(self, left, right):
        return BooleanValue(left.value or right.value)


@dataclass(frozen=True)
class LogicalAnd(Logical):
    precedence = Precedence.LOGICAL_AND
    short_circuit = False

    def combine(self, left, right):
        return BooleanValue(left.value and right.value)


@dataclass(frozen=True)
class Equality(BinaryOperation):
    """=== and !==. Numbers, strings and booleans compare by value, functions by identity."""
    precedence = Precedence.EQUALITY

    def combine(self, left, right):
        # payloads compare with ==, so NaN never equals itself even when both sides share one memoized value
        if isinstance(left, FunctionValue) or isinstance(right, FunctionValue):
            equal = left is right
        else:
            equal = type(left) is type(right) and left.value == right.value
        return BooleanValue(equal if self.operator == "===" else not equal)


@dataclass(frozen=True)
class Relational(BinaryOperation):
    precedence = Precedence.RELATIONAL
    OPERATORS = {
        "<": lambda a, b: a < b,
        "<=": lambda a, b: a <= b,
        ">": lambda a, b: a > b,
        ">=": lambda a, b: a >= b,
    }

    def combine(self, left, right):
        return BooleanValue(Relational.OPERATORS[self.operator](*self._numbers(left, right)))


@dataclass(frozen=True)
class Additive(BinaryOperation):
    """+ concatenates if either side is a string (using display formatting), otherwise both sides must be numbers."""
    precedence = Precedence.ADDITIVE

    def combine(self, left, right):
        if self.operator == "+":
            if isinstance(left, StringValue) or isinstance(right, StringValue):
                return StringValue(str(left) + str(right))
            if not (isinstance(left, NumberValue) and isinstance(right, NumberValue)):
                raise EvalError(f"'+' operator requires numbers or strings, got {left.type_name} and "
                                f"{right.type_name}", self.location)
            return NumberValue(left.value + right.value)

        left, right = self._numbers(left, right)
        return NumberValue(left - right)


@dataclass(frozen=True)
class Multiplicative(BinaryOperation):
    """* / %. Division and modulo by zero are errors, and % keeps the sign of the dividend."""
    precedence = Precedence.MULTIPLICATIVE

    def combine(self, left, right):
        left, right = self._numbers(left, right)
        if self.operator == "*":
            return NumberValue(left * right)
        elif right == 0:
            raise EvalError("Division by zero" if self.operator == "/" else "Modulo by zero", self.location)
        elif self.operator == "/":
            return NumberValue(left / right)
        return NumberValue(math.fmod(left, right))


@dataclass(frozen=True)
class Conditional(Expression):
    """condition ? consequent : alternate. Only the chosen branch is ever evaluated, and it is returned as a Thunk."""
    condition: Expression
    consequent: Expression
    alternate: Expression
    location: Location = _loc()
    precedence = Precedence.CONDITIONAL

    def evaluate(self, env):
        condition = force(self.condition.evaluate(env))
        if not isinstance(condition, BooleanValue):
            raise EvalError("Condition must be a boolean", self.location)
        return Thunk(self.consequent if condition.value else self.alternate, env)

    def children(self):
        return self.condition, self.consequent, self.alternate

    def expand(self, env, expanding, params):
        return replace(self,
                       condition=self.condition.expand(env, expanding, params),
                       consequent=self.consequent.expand(env, expanding, params),
                       alternate=self.alternate.expand(env, expanding, params))

    def show(self):
        condition = _wrap(self.condition, self.condition.precedence <= self.precedence)
        return f"{condition} ? {self.consequent.show()} : {self.alternate.show()}"


BINARY_NODES = {
    "||": LogicalOr,
    "&&": LogicalAnd,
    "===": Equality,
    "!==": Equality,
    "<": Relational,
    "<=": Relational,
    ">": Relational,
    ">=": Relational,
    "+": Additive,
    "-": Additive,
    "*": Multiplicative,
    "/": Multiplicative,
    "%": Multiplicative,
}


# ----------------------------------------------------------------------------------------------------------------------
# statements
# ----------------------------------------------------------------------------------------------------------------------

class Statement(ABC):
    """Top-level statement. execute runs it against the program's global environment."""

    @abstractmethod
    def execute(self, env, on_output):
        """Applies self to env, sending any output Value to on_output."""


@dataclass(frozen=True)
class Declaration(Statement):
    """let name = expression; Binds a Thunk: the expression is not evaluated until something forces it."""
    name: str
    expression: Expression
    location: Location = _loc()

    def execute(self, env, on_output):
        if self.name in env:
            raise EvalError(f"Cannot use 'let {self.name}' - the name '{self.name}' is already taken. Each name can "
                            f"only be defined once.", self.location)
        env.bind(self.name, Thunk(self.expression, env))

    def __str__(self):
        return f"let {self.name} = {self.expression.show()};"


class SideEffect(Statement):
    """console.log(...) or inspect.expanded(...)."""
    keyword = None

    def __str__(self):
        return f"{self.keyword}({self.expression.show()});"


@dataclass(frozen=True)
class ConsoleLog(SideEffect):
    """Fully forces its argument and outputs the resulting value."""
    expression: Expression
    location: Location = _loc()
    keyword = "console.log"

    def execute(self, env, on_output):
        on_output(force(self.expression.evaluate(env)))


@dataclass(frozen=True)
class InspectExpanded(SideEffect):
    """Outputs its argument, with let-bound names symbolically inlined, as a StringValue. Nothing is evaluated."""
    expression: Expression
    location: Location = _loc()
    keyword = "inspect.expanded"

    def execute(self, env, on_output):
        expanded = self.expression.expand(env, frozenset(), frozenset())
        on_output(StringValue(expanded.show()))


@dataclass(frozen=True)
class Program:
    statements: tuple
    source: str = field(default="", compare=False, repr=False)

    def __str__(self):
        return "\n".join(str(statement) for statement in self.statements)
