"""Handles interactive/command-line mode for pcalc. Uses cmd as backend."""

import cmd

from pcalc.core.parser import parse
from pcalc.lang.session import Session


class Shell(cmd.Cmd):
    """pcalc interpreter shell."""
    intro = "pcalc :: prefix expression interpreter\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary pcalc expression."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = Session.preprocess_line(f"{self._tmp_line} {line}", self.line_num, False)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            if not line:
                return

            self.sess.add(line, self.line_num)
            self.sess.run()

            if self.sess.results:
                print(self.sess.pop())

    def do_tree(self, arg):
        """tree EXPR: prints the parse tree of EXPR without evaluating it."""
        with self.sess.error_handler:
            print(parse(arg, self.sess.options.strict).display())

    def do_source(self, arg):
        """source EXPR: prints EXPR in canonical prefix form without evaluating it."""
        with self.sess.error_handler:
            print(parse(arg, self.sess.options.strict).source)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the pcalc interpreter!\n\n"
              "Every operator is written first, and binary operators take parenthesized,\n"
              "comma-separated operands. Try '+(1, *(2, 3))', 'if <(1, 2) then T else F', or\n"
              "'apply(func x => *(x, x), 4)'.\n\n"
              "Commands: 'tree EXPR' prints a parse tree, 'source EXPR' prints the canonical\n"
              "form, 'exit' quits. A line that starts with a command name runs the command, so\n"
              "a bare variable named tree, source, help, or exit cannot be evaluated here.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
