"""Lexical analysis for the skoobert language: turns source text into a flat list of Tokens terminated by an EOF token.

Scanning is greedy and longest-match first. After whitespace and `//` comments are skipped, the scanners are tried in
this order:

    1. three-character operators   (===, !==)
    2. two-character operators     (&&, ||, <=, >=, =>)
    3. keyword literals            (console.log, inspect.expanded)
    4. single-character operators and punctuation
    5. numbers                     (unsigned decimal, a "." must be followed by a digit to belong to the number)
    6. identifiers                 (let, true and false are reserved)
    7. double-quoted strings       (\\n, \\" and \\\\ escapes; any other escaped character is taken literally)
"""

from skoobert.grammar.tokens import (KEYWORD_LITERALS, RESERVED_WORDS, SINGLE_CHAR_TOKENS, THREE_CHAR_OPERATORS,
                                     TWO_CHAR_OPERATORS, Location, Token, TokenType)
from skoobert.lang.error import LexError


class Lexer:
    """Single-use scanner over a source string. Line/column counters advance per character."""
    ESCAPES = {"n": "\n", "\"": "\"", "\\": "\\"}

    def __init__(self, source):
        self.source = source
        self.current = 0
        self.line = 1
        self.column = 1
        self.tokens = []

        self._scanners = [
            self._operator(THREE_CHAR_OPERATORS),
            self._operator(TWO_CHAR_OPERATORS),
            self._operator(KEYWORD_LITERALS),
            self._operator(SINGLE_CHAR_TOKENS),
            self.number,
            self.identifier,
            self.string,
        ]

    @property
    def location(self):
        return Location(self.line, self.column)

    def peek(self, offset=0):
        """Returns the character offset characters ahead, or "" past the end of input."""
        idx = self.current + offset
        return self.source[idx] if idx < len(self.source) else ""

    def advance(self, count=1):
        for __ in range(count):
            if self.source[self.current] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.current += 1

    def at_end(self):
        return self.current >= len(self.source)

    def push(self, token_type, location, value=None):
        self.tokens.append(Token(token_type, value, location))

    def skip(self):
        """Skips whitespace and comments. Returns whether or not anything was skipped."""
        char = self.peek()
        if char.isspace():
            self.advance()
            return True

        if char == "/" and self.peek(1) == "/":
            while not self.at_end() and self.peek() != "\n":
                self.advance()
            return True

        return False

    def _operator(self, table):
        """Returns a scanner that matches any of the lexemes in table."""

        def scanner():
            for lexeme, token_type in table.items():
                if self.source.startswith(lexeme, self.current):
                    self.push(token_type, self.location)
                    self.advance(len(lexeme))
                    return True
            return False

        return scanner

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    def number(self):
        if not Lexer.is_digit(self.peek()):
            return False

        start, location = self.current, self.location
        while Lexer.is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and Lexer.is_digit(self.peek(1)):
            self.advance()
            while Lexer.is_digit(self.peek()):
                self.advance()

        self.push(TokenType.NUMBER, location, float(self.source[start:self.current]))
        return True

    def identifier(self):
        if not (self.peek().isascii() and (self.peek().isalpha() or self.peek() == "_")):
            return False

        start, location = self.current, self.location
        while self.peek().isascii() and (self.peek().isalnum() or self.peek() == "_"):
            self.advance()

        name = self.source[start:self.current]
        if name in RESERVED_WORDS:
            self.push(RESERVED_WORDS[name], location)
        else:
            self.push(TokenType.IDENTIFIER, location, name)
        return True

    def string(self):
        if self.peek() != "\"":
            return False

        location = self.location
        value = ""
        self.advance()  # opening quote

        while self.peek() != "\"":
            char = self.peek()
            if not char or char == "\n":
                raise LexError("Unterminated string literal", location, self.source)

            if char == "\\":
                self.advance()
                escaped = self.peek()
                if not escaped:
                    raise LexError("Unterminated string literal", location, self.source)
                value += Lexer.ESCAPES.get(escaped, escaped)
            else:
                value += char
            self.advance()

        self.advance()  # closing quote
        self.push(TokenType.STRING, location, value)
        return True

    def tokenize(self):
        """Scans all of self.source. Raises a LexError on the first character no scanner accepts."""
        while not self.at_end():
            if self.skip():
                continue

            if not any(scanner() for scanner in self._scanners):
                raise LexError(f"Unexpected character '{self.peek()}'", self.location, self.source)

        self.push(TokenType.EOF, self.location)
        return self.tokens


def tokenize(source):
    """Returns the list of Tokens in source, terminated by an EOF token."""
    return Lexer(source).tokenize()
