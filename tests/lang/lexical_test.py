import unittest

from caxlang.lang.error import InvalidInteger, LexingError, NonAsciiCharacter
from caxlang.lang.lexical import Lexer, Token, TokenKind, tokenize


def kinds(source):
    return [token.kind for token in tokenize(source)]


class LexerTestCase(unittest.TestCase):

    def test_numbers(self):
        cases = {
            "0": 0.0,
            "123": 123.0,
            "123.42": 123.42,
            "1e3": 1000.0,
            "2.5E-1": 0.25,
            "7e+2": 700.0,
        }
        for case, expected in cases.items():
            self.assertEqual([Token(TokenKind.NUMBER, expected)], list(tokenize(case)), case)

    def test_number_overflow(self):
        should_raise = ["1e999", "123456789e400"]
        for case in should_raise:
            with self.assertRaises(InvalidInteger, msg=case) as ctx:
                list(tokenize(case))
            self.assertEqual("overflow", ctx.exception.reason)

    def test_strings(self):
        cases = {
            '"Hello"': "Hello",
            '""': "",
            r'"a\"b"': 'a"b',
            r'"tab\there"': "tab\there",
            r'"back\\slash"': "back\\slash",
            r'"ABC"': "ABC",
        }
        for case, expected in cases.items():
            self.assertEqual([Token(TokenKind.STRING, expected)], list(tokenize(case)), case)

    def test_string_rejects_raw_control_characters(self):
        should_raise = ['"a\nb"', '"tab\there"', '"\x01"']
        for case in should_raise:
            with self.assertRaises(NonAsciiCharacter, msg=repr(case)) as ctx:
                list(tokenize(case))
            self.assertLess(ord(ctx.exception.char), 0x20)

    def test_malformed_strings(self):
        should_raise = ['"unterminated', r'"bad \q escape"', r'"\u12"']
        for case in should_raise:
            self.assertRaises(NonAsciiCharacter, list, tokenize(case))

    def test_identifiers_and_keywords(self):
        cases = {
            "sd": [TokenKind.IDENT],
            "_under_score": [TokenKind.IDENT],
            "true": [TokenKind.TRUE],
            "false": [TokenKind.FALSE],
            "nil": [TokenKind.NIL],
            "truely nil": [TokenKind.IDENT, TokenKind.NIL],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, kinds(case), case)

        self.assertEqual(Token(TokenKind.IDENT, "truely"), next(iter(tokenize("truely"))))

    def test_operators(self):
        cases = {
            "+ - * /": [TokenKind.PLUS, TokenKind.MINUS, TokenKind.MULT, TokenKind.DIV],
            "= ! != ==": [TokenKind.EQUAL, TokenKind.BANG, TokenKind.NEQUAL, TokenKind.DEQUAL],
            "< > <= >=": [TokenKind.LESS, TokenKind.GREATER, TokenKind.LEQUAL, TokenKind.GEQUAL],
            "!==": [TokenKind.NEQUAL, TokenKind.EQUAL],
            "()": [TokenKind.LPAREN, TokenKind.RPAREN],
            "<=>": [TokenKind.LEQUAL, TokenKind.GREATER],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, kinds(case), case)

    def test_mixed(self):
        expected = [
            Token(TokenKind.NUMBER, 123.42),
            Token(TokenKind.LPAREN),
            Token(TokenKind.NUMBER, 23.43),
            Token(TokenKind.RPAREN),
            Token(TokenKind.MULT),
            Token(TokenKind.NUMBER, 123.43),
            Token(TokenKind.IDENT, "sd"),
            Token(TokenKind.PLUS),
            Token(TokenKind.STRING, "Hello"),
        ]
        self.assertEqual(expected, list(tokenize('123.42 (23.43) * 123.43 sd + "Hello"')))

    def test_whitespace_is_skipped(self):
        self.assertEqual([], list(tokenize(" \t\n \r\n")))
        self.assertEqual([TokenKind.NUMBER, TokenKind.PLUS, TokenKind.NUMBER], kinds("\n1\t+\n  2\n"))

    def test_positions(self):
        tokens = list(tokenize("12 +  \"ab\""))
        self.assertEqual([(0, 2), (3, 4), (6, 10)], [(token.start, token.end) for token in tokens])
        self.assertEqual(["12", "+", '"ab"'], [token.lexeme for token in tokens])
        self.assertEqual(3, tokens[1].position)

    def test_non_ascii_character(self):
        should_raise = {"λ": 0, "1 + é": 4, "1 # 2": 2, "1 @": 2, "3 . 4": 2}
        for case, position in should_raise.items():
            with self.assertRaises(NonAsciiCharacter, msg=case) as ctx:
                list(tokenize(case))
            self.assertEqual(position, ctx.exception.start, case)
            self.assertEqual(case, ctx.exception.source, case)
            self.assertIsInstance(ctx.exception, LexingError)

    def test_lazy(self):
        tokens = iter(tokenize("1 + λ"))
        self.assertEqual(Token(TokenKind.NUMBER, 1.0), next(tokens))
        self.assertEqual(Token(TokenKind.PLUS), next(tokens))
        self.assertRaises(NonAsciiCharacter, next, tokens)

    def test_restartable(self):
        lexer = Lexer('-(1.5 + "x") >= nil')
        self.assertEqual(list(lexer), list(lexer))
        self.assertEqual(8, len(list(lexer)))


if __name__ == '__main__':
    unittest.main()
