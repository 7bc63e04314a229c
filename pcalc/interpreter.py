"""pcalc interpreter pipeline.

Basic program flow:
    1. Lexer: splits the input text into tokens (see pcalc/core/lexical.py)
    2. Parser: builds one expression tree from the tokens by recursive descent (see pcalc/core/parser.py)
    3. Evaluator: reduces the tree to a value by substitution (see pcalc/core/evaluator.py)
    4. Renderer: turns the value back into text (see pcalc/core/syntax.py)

The first error in any phase stops the pipeline: later phases are never attempted. run() is the entry point for
front ends that only deal in strings; interpret() raises instead, for front ends that display diagnostics.
"""

from dataclasses import dataclass

from pcalc.core.evaluator import Evaluator
from pcalc.core.parser import parse
from pcalc.core.syntax import render
from pcalc.lang.error import EvalError, LexError, ParseError


PARSE_ERROR = "Error parsing expression: {}"
EVAL_ERROR = "Error evaluating expression: {}"


@dataclass(frozen=True)
class Options:
    """Interpreter settings, populated from the command line.

    :param strict: reject tokens left over after a complete expression (otherwise they are ignored)
    :param legacy_substitution: use the legacy substitution rule (see pcalc/core/evaluator.py)
    """
    strict: bool = True
    legacy_substitution: bool = False


def interpret(text, options=None, error_handler=None):
    """Parses and evaluates text, returning the resulting Expression. Raises LexError, ParseError, or EvalError."""
    if options is None:
        options = Options()

    expr = parse(text, options.strict)
    return Evaluator(options.legacy_substitution, error_handler).evaluate(expr)


def run(text, options=None, error_handler=None):
    """Runs text through the whole pipeline and returns either the rendered result or an error message. Never raises
    for errors in text. error_handler, if given, receives the reduction steps.
    """
    if options is None:
        options = Options()

    try:
        expr = parse(text, options.strict)
    except (LexError, ParseError) as error:
        return PARSE_ERROR.format(error.msg)

    try:
        result = Evaluator(options.legacy_substitution, error_handler).evaluate(expr)
    except EvalError as error:
        return EVAL_ERROR.format(error.msg)

    return render(result)
