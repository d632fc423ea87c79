"""Handles interactive/command-line mode for the skoobert interpreter. Uses cmd as backend."""

import cmd

from skoobert.grammar.tokens import TokenType
from skoobert.lang.error import LexError
from skoobert.lang.lexical import tokenize
from skoobert.lang.session import Session
from skoobert.lang.values import display


class Shell(cmd.Cmd):
    """Skoobert interpreter shell."""
    intro = "Skoobert: a lazy lambda calculus in JavaScript clothing\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.sess = sess
        self.sess.on_output = self.output
        self._tmp_line = ""

    @staticmethod
    def is_complete(source):
        """Whether or not source is ready to run: every statement in the language ends with ';'. Source that doesn't
        lex is complete too, so that the error is reported right away.
        """
        try:
            tokens = tokenize(source)
        except LexError:
            return True
        return len(tokens) > 1 and tokens[-2].type is TokenType.SEMICOLON

    def default(self, line):
        """Executes arbitrary skoobert statements once a full statement has been typed."""
        source = f"{self._tmp_line}\n{line}" if self._tmp_line else line

        if not Shell.is_complete(source):
            self._tmp_line = source
            self.prompt = self.secondary_prompt
            return

        self._tmp_line = ""
        self.prompt = self._tmp_prompt

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.sess.add(source)

    def output(self, value):
        """Prints each output value as soon as the program produces it."""
        print(display(value), file=self.stdout)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the skoobert interpreter!\n\n"
              "Skoobert is a lazily evaluated, single-assignment subset of JavaScript expressions. There\n"
              "are no loops and no mutation: everything is done with one-parameter arrow functions.\n\n"
              "Try it out by typing 'let K = x => y => x;'. This will bind K to a function. Next, try\n"
              "typing 'console.log(K(42)(1 / 0));'. The second argument is never evaluated, so the\n"
              "result is 42. 'inspect.expanded(K(1));' shows a binding with its names expanded.", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True


def start(error_handler):
    """Runs the shell until exit/EOF with a non-fatal error_handler and a fresh session."""
    error_handler.fatal = False
    Shell(Session(error_handler, Session.SH_FILE)).cmdloop()
