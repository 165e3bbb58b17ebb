"""Handles interactive/command-line mode for the Patty interpreter. Uses cmd as backend.

Lines are Patty forms unless they start with one of the shell commands below. A line that leaves a parenthesis open
is continued on the next one.

```
help            ; short introduction
tokens <forms>  ; token stream of the forms, nothing is evaluated
ast <forms>     ; parsed forms, nothing is evaluated
defs            ; names defined in the global scope by the user
exit            ; leaves the shell (as does Ctrl+D)
```
"""

import cmd

from patty.core.reader import Reader
from patty.core.value import NativeFunction


class Shell(cmd.Cmd):
    """Patty interpreter shell."""
    intro = "Patty interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._pending = ""  # text of a form still missing its closing parens
        self.line_num = 0

    def onecmd(self, line):
        if self._pending:
            return self.default(line)  # continuation lines are never shell commands
        return super().onecmd(line)

    def default(self, line):
        """Executes arbitrary Patty forms, printing the value of the last one."""
        self.line_num += 1
        line, unfinished = self.sess.preprocess_line(self._pending + "\n" + line)

        if unfinished:
            self._pending = line
            self.prompt = self.secondary_prompt
            return

        self._pending = ""
        self.prompt = self._tmp_prompt
        if not line:
            return

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.sess.add(line, self.line_num)
            self.sess.run()

            if self.sess.results:
                print(self.sess.pop(), file=self.stdout)

    def do_tokens(self, arg):
        """Prints the tokens of the forms on the line."""
        with self.sess.error_handler:
            for kind, text in self.sess.tokens(arg):
                print(f"{kind:<6} {text}", file=self.stdout)

    def do_ast(self, arg):
        """Prints the forms on the line as they were parsed."""
        with self.sess.error_handler:
            for expr in Reader(arg).read_all():
                print(expr.render(in_list=True), file=self.stdout)

    def do_defs(self, arg):
        """Prints every global binding that is not a native function."""
        for name, value in self.sess.context.globals.items():
            if not isinstance(value, NativeFunction):
                print(f"{name} = {value.render(in_list=True)}", file=self.stdout)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Patty interpreter!\n\n"
              "Patty is a small S-expression language. Every form is a list whose head picks\n"
              "what happens: (+ 1 2), (def x 5), (if (< x 10) \"small\" \"big\").\n\n"
              "Functions are lists of formals and a body: (def sq (fun (x) (* x x))). Lazy\n"
              "sequences use the index n: (take 4 (seq (* n n))) gives (0 1 4 9).\n\n"
              "Shell commands: 'tokens <forms>', 'ast <forms>' and 'defs'.\n"
              "Type 'exit' or press Ctrl+D to leave.", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            self.sess.error_handler.warn("unrecognized token after exit: '{}'", arg)
            return False
        return True
