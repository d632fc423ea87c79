"""Recursive-descent/precedence-climbing parser for the skoobert language. See skoobert/grammar/tokens.py for the
grammar: each method below parses one rung of the precedence ladder and delegates to the next-tighter one.
"""

from skoobert.grammar.tokens import SIDE_EFFECTS, TokenType
from skoobert.lang.error import ParseError
from skoobert.lang.lexical import tokenize
from skoobert.lang.syntax import (BINARY_NODES, Arrow, Call, ConsoleLog, Conditional, Declaration, Identifier,
                                  InspectExpanded, Literal, Parenthesized, Program, Unary)
from skoobert.lang.values import BooleanValue, NumberValue, StringValue


class Parser:
    """Consumes a token list (terminated by an EOF token) into a Program."""
    LADDER = [
        (TokenType.OR,),
        (TokenType.AND,),
        (TokenType.STRICT_EQUAL, TokenType.STRICT_NOT_EQUAL),
        (TokenType.LESS_THAN, TokenType.LESS_THAN_OR_EQUAL, TokenType.GREATER_THAN, TokenType.GREATER_THAN_OR_EQUAL),
        (TokenType.PLUS, TokenType.MINUS),
        (TokenType.ASTERISK, TokenType.SLASH, TokenType.PERCENT),
    ]
    SIDE_EFFECT_NODES = {
        TokenType.CONSOLE_LOG: ConsoleLog,
        TokenType.INSPECT_EXPANDED: InspectExpanded,
    }

    def __init__(self, tokens, source=None):
        self.tokens = list(tokens)
        self.source = source
        self.current = 0

        if not self.tokens or self.tokens[-1].type is not TokenType.EOF:
            raise ValueError("token list must be terminated by an EOF token")

    def peek(self, offset=0):
        idx = min(self.current + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def check(self, *types):
        return self.peek().type in types

    def advance(self):
        token = self.peek()
        if token.type is not TokenType.EOF:
            self.current += 1
        return token

    def match(self, *types):
        """Consumes and returns the next token if it is one of types, otherwise returns None."""
        if self.check(*types):
            return self.advance()
        return None

    def expect(self, token_type, construct=None):
        """Consumes a token of token_type or raises a ParseError naming the expected construct."""
        token = self.match(token_type)
        if token is None:
            self.error(f"Expected {construct or repr(str(token_type))}")
        return token

    def error(self, msg, token=None):
        token = token if token is not None else self.peek()
        raise ParseError(f"{msg}, got {token.describe()}", token.location, self.source)

    # statements

    def program(self):
        statements = []
        while not self.check(TokenType.EOF):
            statements.append(self.statement())
        return Program(tuple(statements), self.source if self.source is not None else "")

    def statement(self):
        if self.check(TokenType.LET):
            return self.declaration()
        elif self.check(*SIDE_EFFECTS):
            return self.side_effect()
        self.error("Expected 'let', 'console.log' or 'inspect.expanded'")

    def declaration(self):
        let = self.expect(TokenType.LET)
        name = self.expect(TokenType.IDENTIFIER, "identifier after 'let'")
        self.expect(TokenType.ASSIGNMENT, "'=' after variable name")
        expression = self.expression()
        self.expect(TokenType.SEMICOLON, "';' after variable declaration")
        return Declaration(name.value, expression, let.location)

    def side_effect(self):
        keyword = self.advance()
        self.expect(TokenType.LEFT_PAREN, f"'(' after '{keyword.type}'")
        expression = self.expression()
        self.expect(TokenType.RIGHT_PAREN, f"')' after '{keyword.type}' argument")
        self.expect(TokenType.SEMICOLON, "';' after statement")
        return Parser.SIDE_EFFECT_NODES[keyword.type](expression, keyword.location)

    # expressions, loosest first

    def expression(self):
        """Conditional: right-associative and the loosest rung of the ladder."""
        condition = self.binary(0)

        question = self.match(TokenType.QUESTION)
        if question is None:
            return condition

        consequent = self.expression()
        self.expect(TokenType.COLON, "':' in conditional expression")
        alternate = self.expression()
        return Conditional(condition, consequent, alternate, question.location)

    def binary(self, level):
        """Parses the left-associative binary rung Parser.LADDER[level]."""
        if level == len(Parser.LADDER):
            return self.unary()

        left = self.binary(level + 1)
        while self.check(*Parser.LADDER[level]):
            operator = self.advance()
            right = self.binary(level + 1)
            node = BINARY_NODES[operator.type.value]
            left = node(operator.type.value, left, right, operator.location)
        return left

    def unary(self):
        operator = self.match(TokenType.NOT, TokenType.MINUS)
        if operator is None:
            return self.call()
        return Unary(operator.type.value, self.unary(), operator.location)

    def call(self):
        """Postfix call chain: f(x)(y) is Call(Call(f, x), y)."""
        callee = self.primary()
        while True:
            paren = self.match(TokenType.LEFT_PAREN)
            if paren is None:
                return callee
            argument = self.expression()
            self.expect(TokenType.RIGHT_PAREN, "')' after function call argument")
            callee = Call(callee, argument, paren.location)

    def primary(self):
        token = self.peek()

        if self.match(TokenType.NUMBER):
            return Literal(NumberValue(token.value), token.location)
        elif self.match(TokenType.STRING):
            return Literal(StringValue(token.value), token.location)
        elif self.match(TokenType.TRUE, TokenType.FALSE):
            return Literal(BooleanValue(token.type is TokenType.TRUE), token.location)

        elif self.match(TokenType.IDENTIFIER):
            if self.match(TokenType.ARROW):
                return Arrow(token.value, self.expression(), token.location)
            return Identifier(token.value, token.location)

        elif self.check(TokenType.LEFT_PAREN):
            if self._at_parenthesized_parameter():
                self.advance()
                parameter = self.advance()
                self.advance()
                self.expect(TokenType.ARROW)
                return Arrow(parameter.value, self.expression(), token.location)

            self.advance()
            expression = self.expression()
            self.expect(TokenType.RIGHT_PAREN, "')' after expression")
            return Parenthesized(expression, token.location)

        self.error("Expected expression")

    def _at_parenthesized_parameter(self):
        """Whether or not the next tokens are ( IDENT ) =>, the parenthesized form of an arrow parameter."""
        types = [self.peek(offset).type for offset in range(4)]
        return types == [TokenType.LEFT_PAREN, TokenType.IDENTIFIER, TokenType.RIGHT_PAREN, TokenType.ARROW]


def parse(source_or_tokens, source=None):
    """Parses a source string (or an already-tokenized list of Tokens) into a Program. Raises LexError/ParseError."""
    if isinstance(source_or_tokens, str):
        source = source_or_tokens
        tokens = tokenize(source)
    else:
        tokens = source_or_tokens
    return Parser(tokens, source).program()
