"""Expression trees for pcalc, a prefix-notation expression language.

Every operator is written in prefix position and every binary form is fully parenthesized:

```
<expr> ::= <integer> | <variable> | "T" | "F"
         | "!" <expr>                                  ; unary operator
         | <binop> "(" <expr> "," <expr> ")"           ; binop is one of + - * / < = & |
         | "func" <variable> "=>" <expr>               ; single-parameter function
         | "apply" "(" <expr> "," <expr> ")"           ; function application
         | "if" <expr> "then" <expr> "else" <expr>
```

Nodes are immutable dataclasses. Each node renders two ways:
- str(node) (also render(node)): the display form, e.g. `1 + 2`. Not guaranteed to parse back to the same tree.
- node.source: the canonical prefix form, e.g. `+(1, 2)`, which parses back to an equal tree.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum


INT_MIN = -2 ** 63
INT_MAX = 2 ** 63 - 1


class BinaryOperator(Enum):
    """Binary operators, valued by their symbol."""
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    LESS_THAN = "<"
    EQUALS = "="
    AND = "&"
    OR = "|"

    @property
    def display_name(self):
        """Name used in error messages: 'Add', 'LessThan', ..."""
        return "".join(word.capitalize() for word in self.name.split("_"))

    def __str__(self):
        return self.value


class UnaryOperator(Enum):
    NOT = "!"

    @property
    def display_name(self):
        return self.name.capitalize()

    def __str__(self):
        return self.value


class Expression(ABC):
    """Superclass for every node in a pcalc expression tree. The set of subclasses is closed: Integer, Variable,
    Boolean, BinaryOp, UnaryOp, Func, If, Apply.
    """

    @abstractmethod
    def __str__(self):
        """Display form of this node."""

    @property
    @abstractmethod
    def source(self):
        """Canonical prefix form of this node."""

    @property
    def children(self):
        """Sub-expressions of this node, in source order."""
        return [getattr(self, field.name) for field in fields(self)
                if isinstance(getattr(self, field.name), Expression)]

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Expression>(expr='<expr>', nodes=[
            <Expression>(expr='<expr>', nodes=[
                ...
                <Expression>(expr='<expr>')  # <-- if node has no children
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}(expr='{self.source}'"
        if self.children:
            result += ", nodes=["
            for node in self.children:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


@dataclass(frozen=True)
class Integer(Expression):
    value: int

    def __str__(self):
        return str(self.value)

    @property
    def source(self):
        return str(self.value)


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def __str__(self):
        return self.name

    @property
    def source(self):
        return self.name


@dataclass(frozen=True)
class Boolean(Expression):
    value: bool

    def __str__(self):
        return "T" if self.value else "F"

    @property
    def source(self):
        return str(self)


@dataclass(frozen=True)
class BinaryOp(Expression):
    op: BinaryOperator
    lhs: Expression
    rhs: Expression

    def __str__(self):
        return f"{self.lhs} {self.op} {self.rhs}"

    @property
    def source(self):
        return f"{self.op}({self.lhs.source}, {self.rhs.source})"


@dataclass(frozen=True)
class UnaryOp(Expression):
    op: UnaryOperator
    child: Expression

    def __str__(self):
        return f"{self.op}{self.child}"

    @property
    def source(self):
        return f"{self.op}{self.child.source}"


@dataclass(frozen=True)
class Func(Expression):
    """Single-parameter function literal. Captures nothing: a Func is exactly its own definition."""
    param: str
    body: Expression

    def __str__(self):
        return f"func {self.param} => {self.body}"

    @property
    def source(self):
        return f"func {self.param} => {self.body.source}"


@dataclass(frozen=True)
class If(Expression):
    condition: Expression
    then_expr: Expression
    else_expr: Expression

    def __str__(self):
        return f"if {self.condition} then {self.then_expr} else {self.else_expr}"

    @property
    def source(self):
        return f"if {self.condition.source} then {self.then_expr.source} else {self.else_expr.source}"


@dataclass(frozen=True)
class Apply(Expression):
    func_expr: Expression
    arg_expr: Expression

    def __str__(self):
        return f"{self.func_expr} ({self.arg_expr})"

    @property
    def source(self):
        return f"apply({self.func_expr.source}, {self.arg_expr.source})"


def render(expr):
    """Display form of expr. Always succeeds; see module docstring for why this is one-way."""
    return str(expr)


def is_value(expr):
    """Whether or not expr is in normal form (Integer, Boolean, Func, or an unresolved Variable)."""
    return isinstance(expr, (Integer, Boolean, Func, Variable))
