import unittest

from skoobert.grammar.tokens import Location, TokenType
from skoobert.lang.error import LexError
from skoobert.lang.lexical import tokenize


def types(source):
    return [token.type for token in tokenize(source)]


class TokenizeTestCase(unittest.TestCase):

    def test_token_types(self):
        T = TokenType
        cases = {
            "": [T.EOF],
            "let x = 5;": [T.LET, T.IDENTIFIER, T.ASSIGNMENT, T.NUMBER, T.SEMICOLON, T.EOF],
            "console.log(1);": [T.CONSOLE_LOG, T.LEFT_PAREN, T.NUMBER, T.RIGHT_PAREN, T.SEMICOLON, T.EOF],
            "inspect.expanded(f)": [T.INSPECT_EXPANDED, T.LEFT_PAREN, T.IDENTIFIER, T.RIGHT_PAREN, T.EOF],
            "x=>x": [T.IDENTIFIER, T.ARROW, T.IDENTIFIER, T.EOF],
            "(x) => x": [T.LEFT_PAREN, T.IDENTIFIER, T.RIGHT_PAREN, T.ARROW, T.IDENTIFIER, T.EOF],
            "a===b": [T.IDENTIFIER, T.STRICT_EQUAL, T.IDENTIFIER, T.EOF],
            "a!==b": [T.IDENTIFIER, T.STRICT_NOT_EQUAL, T.IDENTIFIER, T.EOF],
            "!a": [T.NOT, T.IDENTIFIER, T.EOF],
            "a&&b||c": [T.IDENTIFIER, T.AND, T.IDENTIFIER, T.OR, T.IDENTIFIER, T.EOF],
            "a<=b>=c<d>e": [T.IDENTIFIER, T.LESS_THAN_OR_EQUAL, T.IDENTIFIER, T.GREATER_THAN_OR_EQUAL, T.IDENTIFIER,
                            T.LESS_THAN, T.IDENTIFIER, T.GREATER_THAN, T.IDENTIFIER, T.EOF],
            "1+2-3*4/5%6": [T.NUMBER, T.PLUS, T.NUMBER, T.MINUS, T.NUMBER, T.ASTERISK, T.NUMBER, T.SLASH, T.NUMBER,
                            T.PERCENT, T.NUMBER, T.EOF],
            "c ? a : b": [T.IDENTIFIER, T.QUESTION, T.IDENTIFIER, T.COLON, T.IDENTIFIER, T.EOF],
            "true false let letter _x1": [T.TRUE, T.FALSE, T.LET, T.IDENTIFIER, T.IDENTIFIER, T.EOF],
            "a / b // c / d": [T.IDENTIFIER, T.SLASH, T.IDENTIFIER, T.EOF],
            "// just a comment": [T.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, types(case), case)

    def test_payloads(self):
        cases = {
            "42": 42.0,
            "3.14": 3.14,
            "007": 7.0,
            "\"hello\"": "hello",
            "\"a\\nb\"": "a\nb",
            "\"say \\\"hi\\\"\"": "say \"hi\"",
            "\"back\\\\slash\"": "back\\slash",
            "\"\\q\"": "q",
            "\"\"": "",
            "name_2": "name_2",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, tokenize(case)[0].value, case)

    def test_locations(self):
        tokens = tokenize("let x = 5;\n// comment\n  console.log(x);")
        cases = [
            (TokenType.LET, Location(1, 1)),
            (TokenType.IDENTIFIER, Location(1, 5)),
            (TokenType.ASSIGNMENT, Location(1, 7)),
            (TokenType.NUMBER, Location(1, 9)),
            (TokenType.SEMICOLON, Location(1, 10)),
            (TokenType.CONSOLE_LOG, Location(3, 3)),
            (TokenType.LEFT_PAREN, Location(3, 14)),
            (TokenType.IDENTIFIER, Location(3, 15)),
        ]
        for token, (token_type, location) in zip(tokens, cases):
            self.assertEqual(token_type, token.type)
            self.assertEqual(location, token.location, token)

    def test_longest_match(self):
        # === before =, => before =, console.log before the identifier rule
        self.assertEqual([TokenType.STRICT_EQUAL, TokenType.ASSIGNMENT, TokenType.EOF], types("===="))
        self.assertEqual([TokenType.ASSIGNMENT, TokenType.ARROW, TokenType.EOF], types("==>"))
        self.assertEqual([TokenType.IDENTIFIER, TokenType.EOF], types("console"))
        self.assertEqual([TokenType.CONSOLE_LOG, TokenType.EOF], types("console.log"))

    def test_errors(self):
        cases = {
            "5.": ("Unexpected character '.'", Location(1, 2)),
            "let x = @;": ("Unexpected character '@'", Location(1, 9)),
            "let\n  #": ("Unexpected character '#'", Location(2, 3)),
            "console.warn": ("Unexpected character '.'", Location(1, 8)),
            "\"abc": ("Unterminated string literal", Location(1, 1)),
            "x = \"ab\ncd\"": ("Unterminated string literal", Location(1, 5)),
            "\"ends in escape\\": ("Unterminated string literal", Location(1, 1)),
        }
        for case, (msg, location) in cases.items():
            with self.assertRaises(LexError, msg=case) as context:
                tokenize(case)
            self.assertEqual(msg, context.exception.msg, case)
            self.assertEqual(location, context.exception.location, case)
            self.assertEqual(case, context.exception.source, case)


if __name__ == '__main__':
    unittest.main()
