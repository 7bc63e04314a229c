"""Substitution-based evaluation of pcalc expression trees.

Evaluation is call-by-value and strict: both operands of a binary operator and both halves of an application are
reduced before the operator or application is applied. There is no environment. Applying `func x => body` to a value
substitutes the value for x throughout body and evaluates the result.

Two substitution rules are available:
- total (default): substitution reaches every sub-expression. A nested func whose parameter shadows x is left alone,
  and a nested func parameter that would capture a free variable of the argument is renamed first.
- legacy: substitution only reaches unary and binary operator operands. A parameter used inside an if, apply, or
  nested func is left unresolved, e.g. `apply(func x => if T then x else 0, 5)` evaluates to `x`.
"""

import operator
from string import ascii_lowercase

from pcalc.core.lexical import Lexer
from pcalc.core.syntax import (Apply, BinaryOp, BinaryOperator, Boolean, Func, If, INT_MAX, INT_MIN, Integer,
                               is_value, UnaryOp, UnaryOperator, Variable)
from pcalc.lang.error import (ArithmeticOverflow, DivisionByZero, NotAFunction, RecursionLimitExceeded,
                              TypeMismatch)


def _divide(lhs, rhs):
    """Integer division truncating toward zero."""
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


ARITHMETIC = {
    BinaryOperator.ADD: operator.add,
    BinaryOperator.SUBTRACT: operator.sub,
    BinaryOperator.MULTIPLY: operator.mul,
    BinaryOperator.DIVIDE: _divide,
}
COMPARISON = {
    BinaryOperator.LESS_THAN: operator.lt,
    BinaryOperator.EQUALS: operator.eq,
}
LOGICAL = {
    BinaryOperator.AND: lambda lhs, rhs: lhs and rhs,
    BinaryOperator.OR: lambda lhs, rhs: lhs or rhs,
}


def free_variables(expr):
    """Names of all Variables in expr that are not bound by an enclosing func inside expr."""
    if isinstance(expr, Variable):
        return {expr.name}
    elif isinstance(expr, Func):
        return free_variables(expr.body) - {expr.param}

    result = set()
    for child in expr.children:
        result |= free_variables(child)
    return result


def fresh_name(name, used):
    """Returns the first lowercase name that extends name and is neither in used nor a keyword."""
    candidates = [name]
    while True:
        candidates = [candidate + letter for candidate in candidates for letter in ascii_lowercase]
        for candidate in candidates:
            if candidate not in used and candidate not in Lexer.KEYWORDS:
                return candidate


def substitute(expr, param, arg, legacy=False, arg_free=None):
    """Returns expr with every occurrence of Variable(param) replaced by arg. expr is not modified. See module
    docstring for the difference between the total and legacy rules. arg_free is free_variables(arg), computed once
    per top-level call and passed down.
    """
    if arg_free is None and not legacy:
        arg_free = free_variables(arg)

    if isinstance(expr, Variable):
        return arg if expr.name == param else expr

    elif isinstance(expr, UnaryOp):
        return UnaryOp(expr.op, substitute(expr.child, param, arg, legacy, arg_free))

    elif isinstance(expr, BinaryOp):
        return BinaryOp(expr.op, substitute(expr.lhs, param, arg, legacy, arg_free),
                        substitute(expr.rhs, param, arg, legacy, arg_free))

    elif legacy:
        return expr

    elif isinstance(expr, If):
        return If(*(substitute(child, param, arg, arg_free=arg_free) for child in expr.children))

    elif isinstance(expr, Apply):
        return Apply(substitute(expr.func_expr, param, arg, arg_free=arg_free),
                     substitute(expr.arg_expr, param, arg, arg_free=arg_free))

    elif isinstance(expr, Func):
        if expr.param == param:
            return expr  # param is shadowed

        if expr.param in arg_free:
            body_free = free_variables(expr.body)
            if param in body_free:
                # rename expr.param so it cannot capture arg's free variables
                new_param = fresh_name(expr.param, arg_free | body_free | {param})
                expr = Func(new_param, substitute(expr.body, expr.param, Variable(new_param)))

        return Func(expr.param, substitute(expr.body, param, arg, arg_free=arg_free))

    return expr


class Evaluator:
    """Reduces expression trees to normal form. If error_handler is given and verbose, every reduction is reported
    to it through register_step.
    """

    def __init__(self, legacy_substitution=False, error_handler=None):
        self.legacy_substitution = legacy_substitution
        self.error_handler = error_handler

    def evaluate(self, expr):
        """Returns the normal form of expr: an Integer, Boolean, Func, or unresolved Variable. Raises an EvalError if
        expr cannot be reduced.
        """
        try:
            return self._evaluate(expr)
        except RecursionError:
            raise RecursionLimitExceeded() from None

    def _step(self, step, before, after):
        if self.error_handler is not None and self.error_handler.verbose:
            self.error_handler.register_step(step, f"{before.source} -> {after.source}")

    def _evaluate(self, expr):
        if is_value(expr):
            return expr
        elif isinstance(expr, UnaryOp):
            result = self._evaluate_unary(expr)
        elif isinstance(expr, BinaryOp):
            result = self._evaluate_binary(expr)
        elif isinstance(expr, If):
            return self._evaluate_if(expr)
        elif isinstance(expr, Apply):
            return self._evaluate_apply(expr)
        else:
            raise TypeError(f"not a pcalc expression: {expr!r}")

        self._step(str(expr.op), expr, result)
        return result

    def _evaluate_unary(self, expr):
        child = self._evaluate(expr.child)

        if expr.op is UnaryOperator.NOT and isinstance(child, Boolean):
            return Boolean(not child.value)
        raise TypeMismatch(expr.op.display_name, "Invalid operand for '{}' operator")

    def _evaluate_binary(self, expr):
        lhs = self._evaluate(expr.lhs)
        rhs = self._evaluate(expr.rhs)
        op = expr.op

        if op in LOGICAL:
            if not (isinstance(lhs, Boolean) and isinstance(rhs, Boolean)):
                raise TypeMismatch(op.display_name)
            return Boolean(LOGICAL[op](lhs.value, rhs.value))

        if not (isinstance(lhs, Integer) and isinstance(rhs, Integer)):
            raise TypeMismatch(op.display_name)

        if op in COMPARISON:
            return Boolean(COMPARISON[op](lhs.value, rhs.value))

        if op is BinaryOperator.DIVIDE and rhs.value == 0:
            raise DivisionByZero(lhs.value)

        value = ARITHMETIC[op](lhs.value, rhs.value)
        if not INT_MIN <= value <= INT_MAX:
            raise ArithmeticOverflow(op.display_name, lhs.value, rhs.value)
        return Integer(value)

    def _evaluate_if(self, expr):
        condition = self._evaluate(expr.condition)
        if not isinstance(condition, Boolean):
            raise TypeMismatch("If", "Invalid condition for '{}' expression")

        branch = expr.then_expr if condition.value else expr.else_expr
        self._step("if", expr, branch)
        return self._evaluate(branch)

    def _evaluate_apply(self, expr):
        func = self._evaluate(expr.func_expr)
        arg = self._evaluate(expr.arg_expr)

        if not isinstance(func, Func):
            raise NotAFunction(func)

        body = substitute(func.body, func.param, arg, self.legacy_substitution)
        self._step("apply", expr, body)
        return self._evaluate(body)


def evaluate(expr, legacy_substitution=False, error_handler=None):
    """Shorthand for Evaluator(legacy_substitution, error_handler).evaluate(expr)."""
    return Evaluator(legacy_substitution, error_handler).evaluate(expr)
