"""Recursive-descent parser for pcalc. Every production is decided by its first token, so the parser keeps a single
cursor into the token list and never backtracks:

```
expr := INTEGER | VARIABLE | BOOLEAN
      | unary_op expr
      | binary_op '(' expr ',' expr ')'
      | 'func' VARIABLE '=>' expr
      | 'apply' '(' expr ',' expr ')'
      | 'if' expr 'then' expr 'else' expr
```

Because all operators are prefix and all binary forms are parenthesized, there is no precedence or associativity to
resolve. The first error aborts parsing; there is no recovery.
"""

from pcalc.core.lexical import lex, TokenKind
from pcalc.core.syntax import Apply, BinaryOp, Boolean, Func, If, Integer, UnaryOp, Variable
from pcalc.lang.error import (ExpectedExpression, ExpectedToken, NestingTooDeep, TrailingInput,
                              UnexpectedEndOfInput)


class Parser:
    """Builds one Expression from a list of Tokens. source is the lexed text, used only for error diagnostics."""
    LEAVES = {
        TokenKind.INTEGER: Integer,
        TokenKind.VARIABLE: Variable,
        TokenKind.BOOLEAN: Boolean,
    }

    def __init__(self, tokens, source=""):
        self.tokens = tokens
        self.source = source
        self.current = 0

    @property
    def remaining(self):
        """Tokens that have not been consumed yet."""
        return self.tokens[self.current:]

    def _peek(self):
        if self.current < len(self.tokens):
            return self.tokens[self.current]
        return None

    def _expect(self, kind, msg):
        """Consumes and returns the current token if it is of the given kind, else raises ExpectedToken."""
        token = self._peek()
        if token is None or token.kind is not kind:
            start, end = self._span(token)
            raise ExpectedToken(kind, msg, self.source, start, end)
        self.current += 1
        return token

    def _span(self, token):
        """Source offsets of token, or of the end of input if token is None."""
        if token is None:
            return len(self.source), len(self.source) + 1
        return token.start, token.end

    def parse(self, strict=True):
        """Parses a single expression. If strict, every token must be consumed; otherwise leftover tokens are left in
        self.remaining.
        """
        try:
            expr = self.parse_expression()
        except RecursionError:
            raise NestingTooDeep(self.source) from None

        if strict and self.remaining:
            first, last = self.remaining[0], self.remaining[-1]
            rest = self.source[first.start:last.end] or " ".join(str(token) for token in self.remaining)
            raise TrailingInput(rest, self.source, first.start, last.end)
        return expr

    def parse_expression(self):
        token = self._peek()
        if token is None:
            raise UnexpectedEndOfInput(self.source)

        if token.kind in Parser.LEAVES:
            self.current += 1
            return Parser.LEAVES[token.kind](token.value)
        elif token.kind is TokenKind.UNARY_OP:
            return self.parse_unary_expression()
        elif token.kind is TokenKind.BINARY_OP:
            return self.parse_binary_expression()
        elif token.kind is TokenKind.FUNC:
            return self.parse_func_expression()
        elif token.kind is TokenKind.APPLY:
            return self.parse_apply_expression()
        elif token.kind is TokenKind.IF:
            return self.parse_if_expression()

        start, end = self._span(token)
        raise ExpectedExpression(token, self.source, start, end)

    def parse_unary_expression(self):
        op = self._expect(TokenKind.UNARY_OP, "Expected a unary operator").value
        return UnaryOp(op, self.parse_expression())

    def parse_binary_expression(self):
        op = self._expect(TokenKind.BINARY_OP, "Expected a binary operator").value

        msg = "Expected opening parenthesis '('. Parentheses are required for binary operations."
        self._expect(TokenKind.OPEN_PAREN, msg)
        lhs = self.parse_expression()

        self._expect(TokenKind.COMMA, "Expected ',' after left operand of binary expression")
        rhs = self.parse_expression()

        self._expect(TokenKind.CLOSE_PAREN, "Expected closing parenthesis ')'")
        return BinaryOp(op, lhs, rhs)

    def parse_func_expression(self):
        self._expect(TokenKind.FUNC, "Expected 'func' keyword")
        param = self._expect(TokenKind.VARIABLE, "Expected variable name as function parameter").value
        self._expect(TokenKind.ARROW, "Expected '=>' arrow after function parameter")

        return Func(param, self.parse_expression())

    def parse_apply_expression(self):
        self._expect(TokenKind.APPLY, "Expected 'apply' keyword")

        msg = "Expected opening parenthesis '('. Parentheses are required for apply expression"
        self._expect(TokenKind.OPEN_PAREN, msg)
        func_expr = self.parse_expression()

        self._expect(TokenKind.COMMA, "Expected comma ',' after function expression")
        arg_expr = self.parse_expression()

        msg = "Expected closing parenthesis ')'. Parentheses are required for apply expression"
        self._expect(TokenKind.CLOSE_PAREN, msg)
        return Apply(func_expr, arg_expr)

    def parse_if_expression(self):
        self._expect(TokenKind.IF, "Expected 'if' keyword")
        condition = self.parse_expression()

        self._expect(TokenKind.THEN, "Expected 'then' keyword")
        then_expr = self.parse_expression()

        self._expect(TokenKind.ELSE, "Expected 'else' keyword")
        else_expr = self.parse_expression()

        return If(condition, then_expr, else_expr)


def parse(source, strict=True):
    """Lexes and parses source into a single Expression."""
    return Parser(lex(source), source).parse(strict)
