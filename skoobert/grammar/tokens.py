"""Skoobert token definitions and the formal grammar they feed.

Skoobert is a small, lazily evaluated subset of JavaScript expression syntax. The grammar can be defined as follows,
from lowest to highest binding power:

```
<program>      ::= <statement>*
<statement>    ::= "let" <ident> "=" <expr> ";"              ; single assignment: a name is bound once per program
                 | <side_effect> "(" <expr> ")" ";"
<side_effect>  ::= "console.log" | "inspect.expanded"

<expr>         ::= <or> ("?" <expr> ":" <expr>)?             ; right-associative, lowest precedence
<or>           ::= <and> ("||" <and>)*
<and>          ::= <equality> ("&&" <equality>)*
<equality>     ::= <relational> (("===" | "!==") <relational>)*
<relational>   ::= <additive> (("<" | "<=" | ">" | ">=") <additive>)*
<additive>     ::= <mult> (("+" | "-") <mult>)*
<mult>         ::= <unary> (("*" | "/" | "%") <unary>)*
<unary>        ::= ("!" | "-") <unary> | <call>
<call>         ::= <primary> ("(" <expr> ")")*               ; associating by left: f(x)(y) = ((f(x))(y))
<primary>      ::= <number> | <string> | "true" | "false"
                 | <ident> "=>" <expr>                       ; arrow functions take exactly one parameter
                 | "(" <ident> ")" "=>" <expr>
                 | <ident>
                 | "(" <expr> ")"
```

Multi-parameter functions are written by nesting arrows (`x => y => x + y`), which is all currying is.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple


class Location(NamedTuple):
    """1-based line/column position of a token or node in the source text."""
    line: int
    column: int

    def __str__(self):
        return f"{self.line}:{self.column}"


class TokenType(Enum):
    # literals and names
    NUMBER = "number"
    STRING = "string"
    IDENTIFIER = "identifier"
    TRUE = "true"
    FALSE = "false"

    # keywords
    LET = "let"
    CONSOLE_LOG = "console.log"
    INSPECT_EXPANDED = "inspect.expanded"

    # operators
    STRICT_EQUAL = "==="
    STRICT_NOT_EQUAL = "!=="
    AND = "&&"
    OR = "||"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN_OR_EQUAL = ">="
    ARROW = "=>"
    ASSIGNMENT = "="
    NOT = "!"
    MINUS = "-"
    PLUS = "+"
    ASTERISK = "*"
    SLASH = "/"
    PERCENT = "%"
    LESS_THAN = "<"
    GREATER_THAN = ">"
    QUESTION = "?"
    COLON = ":"

    # punctuation
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    SEMICOLON = ";"

    EOF = "end of input"

    def __str__(self):
        return self.value


# scanned longest first: every table is tried before the next one
THREE_CHAR_OPERATORS = {
    "===": TokenType.STRICT_EQUAL,
    "!==": TokenType.STRICT_NOT_EQUAL,
}

TWO_CHAR_OPERATORS = {
    "&&": TokenType.AND,
    "||": TokenType.OR,
    "<=": TokenType.LESS_THAN_OR_EQUAL,
    ">=": TokenType.GREATER_THAN_OR_EQUAL,
    "=>": TokenType.ARROW,
}

# matched as whole substrings, never through the identifier rule
KEYWORD_LITERALS = {
    "console.log": TokenType.CONSOLE_LOG,
    "inspect.expanded": TokenType.INSPECT_EXPANDED,
}

SINGLE_CHAR_TOKENS = {
    "=": TokenType.ASSIGNMENT,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "!": TokenType.NOT,
    "-": TokenType.MINUS,
    "+": TokenType.PLUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "?": TokenType.QUESTION,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
}

RESERVED_WORDS = {
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
}

SIDE_EFFECTS = (TokenType.CONSOLE_LOG, TokenType.INSPECT_EXPANDED)


@dataclass(frozen=True)
class Token:
    """A single lexeme. value holds the payload of NUMBER (float), STRING (str) and IDENTIFIER (str) tokens."""
    type: TokenType
    value: Any = None
    location: Location = Location(1, 1)

    def describe(self):
        """Human-readable name of this token, used in parse error messages."""
        if self.type is TokenType.IDENTIFIER:
            return f"identifier '{self.value}'"
        elif self.type is TokenType.NUMBER:
            from skoobert.lang.values import NumberValue  # values imports this module
            return f"number {NumberValue(self.value)}"
        elif self.type is TokenType.STRING:
            return "string literal"
        elif self.type is TokenType.EOF:
            return str(self.type)
        return f"'{self.type}'"

    def __repr__(self):
        if self.value is None:
            return f"Token({self.type.name} @ {self.location})"
        return f"Token({self.type.name}, {self.value!r} @ {self.location})"
