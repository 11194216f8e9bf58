"""Recursive-descent parser for arithc.

Grammar (LL(1), one token of lookahead, never backtracks):

```
<program> ::= (<expr> ";")*
<expr>    ::= <term> (("+" | "-") <term>)*      ; associating by left: a-b-c = (a-b)-c
<term>    ::= <factor> (("*" | "/") <factor>)*  ; binds tighter than <expr>
<factor>  ::= <number>
```

Precedence comes entirely from the layering of expr/term/factor: there is no precedence table.
"""

from arithc.lang.error import ExpectedSemicolon, UnexpectedToken
from arithc.pure.lexical import Lexer, TokenType
from arithc.pure.syntax import BinaryOp, Number


class Parser:
    """Pulls tokens from a Lexer and builds one syntax tree per statement."""
    TERM_OPS = (TokenType.MULT, TokenType.DIV)
    EXPR_OPS = (TokenType.ADD, TokenType.SUB)

    def __init__(self, source, trace=None):
        self.lexer = Lexer(source, trace)
        self.current_token = self.lexer.next_token()

    def eat(self, kind):
        """Consumes the current token if it is of kind, otherwise raises UnexpectedToken. The only way tokens are
        consumed.
        """
        if self.current_token.kind is not kind:
            raise UnexpectedToken(kind, self.current_token)
        self.current_token = self.lexer.next_token()

    def factor(self):
        token = self.current_token
        self.eat(TokenType.NUMBER)
        return Number(token.value, token.offset)

    def _fold(self, operand, ops):
        """Parses operand (op operand)* and folds the results into a left-leaning tree."""
        node = operand()
        while self.current_token.kind in ops:
            op = self.current_token
            self.eat(op.kind)
            node = BinaryOp(node, op.kind, operand(), op.offset)
        return node

    def term(self):
        return self._fold(self.factor, Parser.TERM_OPS)

    def expr(self):
        return self._fold(self.term, Parser.EXPR_OPS)

    def statement(self):
        node = self.expr()
        if self.current_token.kind is not TokenType.SEMICOLON:
            raise ExpectedSemicolon(self.current_token)
        self.eat(TokenType.SEMICOLON)
        return node

    def parse(self):
        """Parses the whole source. Returns the statements' trees in source order."""
        statements = []
        while self.current_token.kind is not TokenType.END:
            statements.append(self.statement())
        return tuple(statements)


def parse(source, trace=None):
    return Parser(source, trace).parse()
