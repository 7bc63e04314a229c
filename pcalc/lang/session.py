"""Session control for pcalc. Runs a source file (one expression per line) or the lines typed into the shell.

File format:

```
<line>     ::= <expr> | <comment> | <expr> <comment> | ""
<comment>  ::= ";;" <char>*
```

A line with more '(' than ')' continues onto the next line. Expressions are independent: nothing bound on one line
is visible on another.
"""

from pcalc.core.evaluator import Evaluator
from pcalc.core.lexical import lex
from pcalc.core.parser import Parser
from pcalc.core.syntax import render
from pcalc.interpreter import Options
from pcalc.lang.error import GenericException


class Session:
    """Governs a pcalc session: parses lines as they are added and evaluates them on run."""
    SH_FILE = "<in>"  # command-line interpreter filename
    COMMENT = ";;"

    def __init__(self, error_handler, path, cmd_line, options=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.options = options if options is not None else Options()
        self.evaluator = Evaluator(self.options.legacy_substitution, error_handler)

        self.to_exec = {}  # dict of line num: (line, Expression) to evaluate
        self.results = []  # rendered results, in order of execution

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            exprs = []
            add_to_prev = False

            try:
                with open(path, "r", encoding="utf-8") as file:
                    for line_num, line in enumerate(file, 1):
                        __, add_to_prev = self.preprocess_line(line, line_num, add_to_prev, exprs)
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for expr, line_num in exprs:
                self.add(expr, line_num)

        elif not cmd_line:
            raise GenericException("'{}' is a reserved filename", Session.SH_FILE, diagnosis=False)

    @staticmethod
    def preprocess_line(line, line_num, add_to_prev, exprs=None):
        """Preprocesses a line from a file or command-line: strips comments and surrounding whitespace. If exprs is
        given, the line is appended to it as (line, line_num), or joined onto the previous entry if add_to_prev.
        Returns the updated line and whether or not the next line continues this one.
        """
        if Session.COMMENT in line:
            line = line[:line.index(Session.COMMENT)]  # get rid of comments

        line = line.strip()
        if not line:
            return line, add_to_prev

        if exprs is not None:
            if add_to_prev and exprs:
                prev, line_num = exprs.pop()
                line = f"{prev} {line}"
            exprs.append((line, line_num))

        return line, line.count("(") > line.count(")")

    def add(self, expr, line_num):
        """Parses expr and queues it for evaluation. Evaluation is delayed until run is called."""
        self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised

        parser = Parser(lex(expr), expr)
        self.to_exec[line_num] = (expr, parser.parse(self.options.strict))

        if parser.remaining:
            start = parser.remaining[0].start
            self.error_handler.warn("trailing input '{}' was ignored", expr[start:], source=expr, start=start)

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates this session's queued expressions in line order. Will raise any errors that are encountered."""
        self.error_handler.steps.clear()
        for line_num, (line, expr) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, line, line_num)

            try:
                self.results.append(render(self.evaluator.evaluate(expr)))
            finally:
                del self.to_exec[line_num]

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the most recent result."""
        return self.results.pop()
