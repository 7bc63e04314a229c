"""Lexical analysis for pcalc: converts raw source text into an ordered list of Tokens.

One maximal token is produced per step:

```
[0-9]+       ; integer, must fit in a 64-bit signed integer
[a-z]+       ; keyword (if, then, else, func, apply) or variable
T | F        ; boolean
+ - * / < =  ; binary operators ("=>" is the arrow, not equals)
& |          ; binary operators
!            ; unary operator
( ) ,        ; punctuation
```

Spaces and tabs are skipped. Anything else (other uppercase letters, underscores, newlines, ...) is an error.
"""

from dataclasses import dataclass, field
from enum import Enum
from string import ascii_lowercase, digits

from pcalc.core.syntax import BinaryOperator, INT_MAX, UnaryOperator
from pcalc.lang.error import IntegerOverflow, UnexpectedCharacter


class TokenKind(Enum):
    """All token kinds, valued by how they are named in error messages."""
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    COMMA = ","
    INTEGER = "integer"
    VARIABLE = "variable"
    BOOLEAN = "boolean"
    IF = "if"
    THEN = "then"
    ELSE = "else"
    FUNC = "func"
    APPLY = "apply"
    BINARY_OP = "binary operator"
    UNARY_OP = "unary operator"
    ARROW = "=>"


@dataclass(frozen=True)
class Token:
    """A single token. start/end are offsets into the lexed text and do not take part in comparisons."""
    kind: TokenKind
    value: object = None
    start: int = field(default=0, compare=False)
    end: int = field(default=0, compare=False)

    def __str__(self):
        if self.kind is TokenKind.BOOLEAN:
            return "T" if self.value else "F"
        elif self.value is not None:
            return str(self.value)
        return self.kind.value


class Lexer:
    """Single-pass scanner over one line of pcalc source."""
    KEYWORDS = {
        "if": TokenKind.IF,
        "then": TokenKind.THEN,
        "else": TokenKind.ELSE,
        "func": TokenKind.FUNC,
        "apply": TokenKind.APPLY,
    }
    BOOLEANS = {"T": True, "F": False}
    PUNCTUATION = {
        "(": TokenKind.OPEN_PAREN,
        ")": TokenKind.CLOSE_PAREN,
        ",": TokenKind.COMMA,
    }
    OPERATORS = {op.value: op for op in list(BinaryOperator) + list(UnaryOperator)}
    WHITESPACE = " \t"

    def __init__(self, source):
        self.source = source
        self.pos = 0

    def _peek(self, offset=0):
        """Returns the character offset positions ahead, or an empty string past the end."""
        pos = self.pos + offset
        return self.source[pos] if pos < len(self.source) else ""

    def _advance(self):
        char = self.source[self.pos]
        self.pos += 1
        return char

    def _scan_run(self, alphabet):
        """Consumes and returns the longest run of characters in alphabet."""
        start = self.pos
        while self._peek() and self._peek() in alphabet:
            self._advance()
        return self.source[start:self.pos]

    def _token(self, kind, value, start):
        return Token(kind, value, start, self.pos)

    def _scan_token(self):
        """Scans exactly one token starting at self.pos. Assumes whitespace has been skipped."""
        start = self.pos
        char = self._peek()

        if char in digits:
            literal = self._scan_run(digits)
            value = int(literal)
            if value > INT_MAX:
                raise IntegerOverflow(literal, self.source, start)
            return self._token(TokenKind.INTEGER, value, start)

        elif char in ascii_lowercase:
            word = self._scan_run(ascii_lowercase)
            if word in Lexer.KEYWORDS:
                return self._token(Lexer.KEYWORDS[word], None, start)
            return self._token(TokenKind.VARIABLE, word, start)

        self._advance()

        if char in Lexer.BOOLEANS:
            return self._token(TokenKind.BOOLEAN, Lexer.BOOLEANS[char], start)

        elif char in Lexer.PUNCTUATION:
            return self._token(Lexer.PUNCTUATION[char], None, start)

        elif char == "=" and self._peek() == ">":
            self._advance()
            return self._token(TokenKind.ARROW, None, start)

        elif char in Lexer.OPERATORS:
            op = Lexer.OPERATORS[char]
            kind = TokenKind.UNARY_OP if isinstance(op, UnaryOperator) else TokenKind.BINARY_OP
            return self._token(kind, op, start)

        raise UnexpectedCharacter(char, self.source, start)

    def tokenize(self):
        """Returns every token in self.source, raising a LexError on the first bad character."""
        tokens = []
        while self.pos < len(self.source):
            if self._peek() in Lexer.WHITESPACE:
                self._advance()
            else:
                tokens.append(self._scan_token())
        return tokens


def lex(source):
    """Converts source into a list of Tokens."""
    return Lexer(source).tokenize()
