"""Lexical analysis for minilang. Converts statement text into a lazy stream of tokens, pulled one at a time by the
parser.

Recognition rules, in priority order at each position (whitespace is skipped):

```
<identifier> ::= <alpha> <alnum>*         ; "if", "else", "for" and "print" are keywords
<number>     ::= (<digit> | ".")+         ; at most one ".": a second one ends the number
<symbol>     ::= "+" | "-" | "*" | "/" | "%" | "(" | ")" | "{" | "}" | "=" | ";" | "<" | ">"
```

Letters and digits are ASCII only. Any other character is reported as a LexWarning and skipped.
"""

import string
from dataclasses import dataclass, field
from enum import Enum

from minilang.lang.error import LexWarning


class TokenKind(Enum):
    NUMBER = "number"
    IDENTIFIER = "identifier"
    PLUS = "+"
    MINUS = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    ASSIGN = "="
    PRINT = "print"
    IF = "if"
    ELSE = "else"
    FOR = "for"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LESS = "<"
    GREATER = ">"
    SEMICOLON = ";"
    EOF = "end of input"


KEYWORDS = {kind.value: kind for kind in (TokenKind.PRINT, TokenKind.IF, TokenKind.ELSE, TokenKind.FOR)}
SYMBOLS = {kind.value: kind for kind in TokenKind if len(kind.value) == 1}
LETTERS = frozenset(string.ascii_letters)
DIGITS = frozenset(string.digits)
ALNUM = LETTERS | DIGITS  # ASCII only: other characters are unrecognized


@dataclass(frozen=True)
class Token:
    """Smallest lexical unit. start is the offset of text in the source and is only used for error messages."""
    kind: TokenKind
    text: str
    start: int = field(default=0, compare=False)

    def __str__(self):
        return self.text if self.kind is not TokenKind.EOF else TokenKind.EOF.value


class Lexer:
    """Pull-based tokenizer over a single statement's text."""

    def __init__(self, text, error_handler=None):
        self.text = text
        self.pos = 0

        self.error_handler = error_handler  # if given, LexWarnings are reported as soon as they are found
        self.warnings = []

    def next_token(self):
        """Returns the next Token and advances past it. Returns an EOF Token forever once the text is exhausted."""
        while self.pos < len(self.text):
            char = self.text[self.pos]

            if char.isspace():
                self.pos += 1
            elif char in LETTERS:
                return self._word()
            elif char in DIGITS or char == ".":
                return self._number()
            elif char in SYMBOLS:
                self.pos += 1
                return Token(SYMBOLS[char], char, self.pos - 1)
            else:
                self._warn(char)
                self.pos += 1

        return Token(TokenKind.EOF, "", len(self.text))

    def _word(self):
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in ALNUM:
            self.pos += 1

        word = self.text[start:self.pos]
        return Token(KEYWORDS.get(word, TokenKind.IDENTIFIER), word, start)

    def _number(self):
        start = self.pos
        seen_point = False
        while self.pos < len(self.text):
            char = self.text[self.pos]
            if char == "." and not seen_point:
                seen_point = True
            elif char not in DIGITS:
                break
            self.pos += 1

        return Token(TokenKind.NUMBER, self.text[start:self.pos], start)

    def _warn(self, char):
        warning = LexWarning("unrecognized character '{}' skipped", char, source=self.text, start=self.pos,
                             end=self.pos + 1)
        self.warnings.append(warning)
        if self.error_handler is not None:
            self.error_handler.warn(warning)

    def __iter__(self):
        """Yields tokens lazily, up to but excluding EOF."""
        token = self.next_token()
        while token.kind is not TokenKind.EOF:
            yield token
            token = self.next_token()
