import unittest

from arithc.lang.error import LexError
from arithc.pure.lexical import INT_MAX, Lexer, Token, TokenType


class RecordingTrace:

    def __init__(self):
        self.tokens = []

    def token(self, token):
        self.tokens.append(token)


class TokenTestCase(unittest.TestCase):

    def test_eq(self):
        self.assertEqual(Token(TokenType.NUMBER, 1, offset=0), Token(TokenType.NUMBER, 1, offset=7))
        self.assertEqual(Token(TokenType.END, offset=3), Token(TokenType.END))
        self.assertNotEqual(Token(TokenType.NUMBER, 1), Token(TokenType.NUMBER, 2))
        self.assertNotEqual(Token(TokenType.ADD), Token(TokenType.SUB))

    def test_describe(self):
        cases = {
            Token(TokenType.NUMBER, 42): "number 42",
            Token(TokenType.SEMICOLON): "';'",
            Token(TokenType.END): "end of input",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, case.describe(), case)


class LexerTestCase(unittest.TestCase):

    def test_next_token(self):
        N, END = TokenType.NUMBER, TokenType.END
        cases = {
            "": [Token(END)],
            "  \t\n ": [Token(END)],
            "12 + 3*4;": [Token(N, 12), Token(TokenType.ADD), Token(N, 3), Token(TokenType.MULT), Token(N, 4),
                          Token(TokenType.SEMICOLON), Token(END)],
            "10-3/2;": [Token(N, 10), Token(TokenType.SUB), Token(N, 3), Token(TokenType.DIV), Token(N, 2),
                        Token(TokenType.SEMICOLON), Token(END)],
            "007;": [Token(N, 7), Token(TokenType.SEMICOLON), Token(END)],
            "1\r\n2": [Token(N, 1), Token(N, 2), Token(END)],
            ";;": [Token(TokenType.SEMICOLON), Token(TokenType.SEMICOLON), Token(END)],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, list(Lexer(case).tokens()), repr(case))

    def test_offsets(self):
        tokens = list(Lexer(" 12 +\n345;").tokens())
        self.assertEqual([1, 4, 6, 9, 10], [token.offset for token in tokens])
        self.assertEqual([2, 1, 3, 1], [token.width for token in tokens[:-1]])

    def test_end_is_idempotent(self):
        lexer = Lexer("1;")
        kinds = [lexer.next_token().kind for __ in range(3)]
        self.assertEqual([TokenType.NUMBER, TokenType.SEMICOLON, TokenType.END], kinds)

        for __ in range(5):
            self.assertIs(TokenType.END, lexer.next_token().kind)

    def test_unexpected_character(self):
        cases = {"2 $ 3;": ("$", 2), "a;": ("a", 0), "1+(2);": ("(", 2), "1 ²;": ("²", 2), "1.5;": (".", 1)}
        for case, (char, offset) in cases.items():
            with self.assertRaises(LexError, msg=case) as context:
                list(Lexer(case).tokens())
            self.assertEqual(char, context.exception.char, case)
            self.assertEqual(offset, context.exception.offset, case)

    def test_lazy(self):
        lexer = Lexer("1 $")
        self.assertEqual(Token(TokenType.NUMBER, 1), lexer.next_token())
        self.assertRaises(LexError, lexer.next_token)

    def test_restart(self):
        self.assertEqual(Token(TokenType.NUMBER, 34), Lexer("12+34;", pos=3).next_token())

    def test_integer_range(self):
        self.assertEqual(Token(TokenType.NUMBER, INT_MAX), Lexer(str(INT_MAX)).next_token())

        should_fail = [str(INT_MAX + 1), "1" * 30]
        for case in should_fail:
            with self.assertRaises(LexError, msg=case) as context:
                Lexer(" " + case + ";").next_token()
            self.assertEqual(1, context.exception.offset)
            self.assertEqual(len(case), context.exception.length)

    def test_trace(self):
        trace = RecordingTrace()
        tokens = list(Lexer("1+2;", trace).tokens())
        self.assertEqual(tokens, trace.tokens)


if __name__ == '__main__':
    unittest.main()
