"""Recursive-descent parser for minilang. Pulls tokens from a Lexer with exactly one token of lookahead and builds one
syntax tree per top-level statement.

Grammar, from lowest to highest precedence:

```
<statement> ::= "print" <expr>
              | <identifier> "=" <expr>                                         ; assignment
              | "if" "(" <expr> ")" <statement> ["else" <statement>]
              | "for" "(" <statement> ";" <expr> ";" <statement> ")" <statement>
              | "{" (<statement> [";"])* "}"                                    ; block
              | <expr>
<expr>      ::= <term> (("+" | "-" | "<" | ">") <term>)*
<term>      ::= <factor> (("*" | "/" | "%") <factor>)*
<factor>    ::= <number> | <identifier> | "(" <expr> ")"
```

Note that comparisons share a precedence level with "+" and "-": `1 < 2 + 3` is `(1 < 2) + 3`. All binary operators
associate to the left.
"""

from minilang.lang.error import ParseError
from minilang.lang.numerical import number
from minilang.pure.lexical import TokenKind
from minilang.pure.syntax import Assign, BinaryOp, Block, For, If, NumberLiteral, Print, VariableRef


EXPR_OPERATORS = (TokenKind.PLUS, TokenKind.MINUS, TokenKind.LESS, TokenKind.GREATER)
TERM_OPERATORS = (TokenKind.MULTIPLY, TokenKind.DIVIDE, TokenKind.MODULO)


class Parser:
    """Parses the token stream of a Lexer, one top-level statement at a time."""

    def __init__(self, lexer):
        self.lexer = lexer
        self.current = lexer.next_token()

    def parse(self):
        """Returns syntax tree of the next top-level statement (and eats its optional ';'), or None at end of input.
        Raises ParseError if the statement is not valid grammar.
        """
        if self.current.kind is TokenKind.EOF:
            return None

        node = self.statement()
        if self.current.kind is TokenKind.SEMICOLON:
            self.eat(TokenKind.SEMICOLON)
        return node

    def eat(self, kind):
        """Advances past the current token if it is of kind, otherwise raises ParseError."""
        if self.current.kind is not kind:
            self.error("expected '{}' but got '{}'", kind.value, str(self.current))
        self.current = self.lexer.next_token()

    def error(self, msg, *exprs):
        """Raises ParseError pointing at the current token."""
        start = self.current.start
        raise ParseError(msg, exprs, source=self.lexer.text, start=start, end=start + max(len(self.current.text), 1))

    def statement(self):
        kind = self.current.kind

        if kind is TokenKind.PRINT:
            self.eat(TokenKind.PRINT)
            return Print(self.expr())

        elif kind is TokenKind.IF:
            return self.if_statement()

        elif kind is TokenKind.FOR:
            return self.for_statement()

        elif kind is TokenKind.LBRACE:
            return self.block()

        elif kind is TokenKind.IDENTIFIER:
            name = self.current.text
            self.eat(TokenKind.IDENTIFIER)
            if self.current.kind is TokenKind.ASSIGN:
                self.eat(TokenKind.ASSIGN)
                return Assign(name, self.expr())
            return self.expr(VariableRef(name))  # bare variable, possibly the left operand of a longer expr

        return self.expr()

    def if_statement(self):
        self.eat(TokenKind.IF)
        self.eat(TokenKind.LPAREN)
        condition = self.expr()
        self.eat(TokenKind.RPAREN)

        then_branch = self.statement()
        else_branch = None
        if self.current.kind is TokenKind.ELSE:
            self.eat(TokenKind.ELSE)
            else_branch = self.statement()

        return If(condition, then_branch, else_branch)

    def for_statement(self):
        self.eat(TokenKind.FOR)
        self.eat(TokenKind.LPAREN)
        init = self.statement()
        self.eat(TokenKind.SEMICOLON)
        condition = self.expr()
        self.eat(TokenKind.SEMICOLON)
        update = self.statement()
        self.eat(TokenKind.RPAREN)

        return For(init, condition, update, self.statement())

    def block(self):
        self.eat(TokenKind.LBRACE)

        statements = []
        while self.current.kind not in (TokenKind.RBRACE, TokenKind.EOF):
            statements.append(self.statement())
            if self.current.kind is TokenKind.SEMICOLON:
                self.eat(TokenKind.SEMICOLON)

        self.eat(TokenKind.RBRACE)  # raises at end of input
        return Block(tuple(statements))

    def expr(self, first=None):
        """If first is given, it is used as the already-parsed leftmost factor."""
        node = self.term(first)
        while self.current.kind in EXPR_OPERATORS:
            operator = self.current
            self.eat(operator.kind)
            node = BinaryOp(node, operator, self.term())
        return node

    def term(self, first=None):
        node = first if first is not None else self.factor()
        while self.current.kind in TERM_OPERATORS:
            operator = self.current
            self.eat(operator.kind)
            node = BinaryOp(node, operator, self.factor())
        return node

    def factor(self):
        token = self.current

        if token.kind is TokenKind.NUMBER:
            self.eat(TokenKind.NUMBER)
            return NumberLiteral(number(token.text, self.lexer.text, token.start))

        elif token.kind is TokenKind.IDENTIFIER:
            self.eat(TokenKind.IDENTIFIER)
            return VariableRef(token.text)

        elif token.kind is TokenKind.LPAREN:
            self.eat(TokenKind.LPAREN)
            node = self.expr()
            self.eat(TokenKind.RPAREN)
            return node

        self.error("unexpected '{}': expected a number, variable or '('", str(token))

    def __iter__(self):
        """Yields syntax trees of top-level statements until end of input."""
        node = self.parse()
        while node is not None:
            yield node
            node = self.parse()
