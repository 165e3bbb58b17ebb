"""Session control for the Patty language. Owns the evaluation Context and feeds it forms read from a file or from the
command line.
"""

from patty.core.environment import Context
from patty.core.evaluator import evaluate
from patty.core.intrinsics import install
from patty.core.reader import Reader
from patty.lang.error import PattyError, ResourceExhausted


class Session:
    """Governs a Patty session: one global Context shared by every form that is run."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, stdin=None, stdout=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.context = install(Context(stdin, stdout, error_handler))
        self.expressions = []  # every form added so far
        self.to_exec = []      # forms waiting to be run
        self.results = []      # values of the forms that have been run

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    self.source = file.read()
            except OSError:
                raise PattyError("'{}' could not be opened", path)

            self.add(self.source)

        elif not cmd_line:
            raise PattyError("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Strips line and returns it along with whether or not it leaves a parenthesis open, in which case the next
        line continues it.
        """
        line = line.strip()
        depth = 0
        try:
            for kind, text in Reader(line).tokens():
                if kind == "paren":
                    depth += 1 if text == "(" else -1
        except PattyError:
            return line, False  # let add report it
        return line, depth > 0

    @staticmethod
    def tokens(source):
        """Returns the (kind, text) token stream of source."""
        return list(Reader(source).tokens())

    def add(self, source, line_num=1):
        """Reads source and queues its forms. A program file is one top-level form: anything after it is ignored with
        a warning. On the command line every form on the line is queued.
        """
        self.error_handler.register_line(self.path, source.strip().split("\n")[0], line_num)

        reader = Reader(source)
        if self.cmd_line:
            forms = reader.read_all()
        else:
            forms = [reader.read()]
            reader.skip_blanks()
            if not reader.exhausted:
                self.error_handler.warn("ignoring input after the first top-level form: '{}'", reader.rest()[:40])

        self.expressions.extend(forms)
        self.to_exec.extend(forms)

        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Evaluates the queued forms in order, appending their values to results. Will raise any errors that are
        encountered, in which case the forms queued after the failing one are dropped. On the command line, results
        only holds the values of the current run.
        """
        if self.cmd_line:
            self.results.clear()

        try:
            while self.to_exec:
                expr = self.to_exec.pop(0)
                depth = self.context.depth
                try:
                    self.results.append(evaluate(self.context, expr))
                except RecursionError:
                    self.context.unwind(depth)
                    raise ResourceExhausted("maximum recursion depth exceeded while evaluating '{}'", str(expr)[:40])
        finally:
            self.to_exec.clear()

    def pop(self):
        """Returns the rendering of the most recent result and forgets it."""
        return self.results.pop().render()
