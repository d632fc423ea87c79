"""Program driver for the skoobert language, plus Session, the file-backed host that the command-line runner uses.

interpret folds a Program's statements left to right over one growing global Environment: `let` binds a Thunk,
console.log forces and outputs a value, inspect.expanded outputs a symbolic expansion. Output values reach the caller
through on_output, synchronously and in program order. The first error aborts the run; outputs delivered before it
stay delivered.
"""

from skoobert.lang.error import SkoobertError
from skoobert.lang.parser import parse
from skoobert.lang.values import Environment, display


def print_value(value):
    """Default output sink: prints the display form of value."""
    print(display(value))


def interpret(program, on_output=None, environment=None):
    """Runs program. environment is the global Environment to run against (a fresh one if None), so a host can keep
    one alive across runs. Returns the environment.
    """
    env = environment if environment is not None else Environment()
    on_output = on_output if on_output is not None else print_value

    try:
        for statement in program.statements:
            statement.execute(env, on_output)
    except SkoobertError as error:
        error.attach(program.source)
        raise

    return env


def run(source, on_output=None, environment=None):
    """Tokenizes, parses and interprets source in one go."""
    return interpret(parse(source), on_output, environment)


class Session:
    """Governs a skoobert session: one global environment shared by every run, the sink its output goes to (printed
    if None) and the file it reads from (also used in error messages).
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path=SH_FILE, on_output=None):
        self.error_handler = error_handler
        self.error_handler.path = path

        self.path = path
        self.on_output = on_output
        self.environment = Environment()

    def load(self):
        """Reads self.path. Raises a SkoobertError if it can't be read."""
        if self.path == Session.SH_FILE:
            raise SkoobertError(f"'{Session.SH_FILE}' is a reserved filename")
        try:
            with open(self.path, "r", encoding="utf-8") as file:
                return file.read()
        except OSError as error:
            raise SkoobertError(f"'{self.path}' could not be opened: {error.strerror}")

    def add(self, source):
        """Parses and runs source against this session's environment. Names bound by earlier calls stay bound."""
        interpret(parse(source), self.on_output, self.environment)

    def run(self):
        """Runs the file at self.path."""
        self.add(self.load())
