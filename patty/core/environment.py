"""Scope stack used to resolve names while evaluating Patty.

Patty is dynamically scoped: a function body resolves its free names against whatever scopes are live when it is
called, not against the scopes that existed when it was written down. The stack is therefore the whole story:

```
scopes[0]    ; global scope, holds every native function, never popped
...          ; one scope per active function call or for-loop iteration
scopes[-1]   ; innermost scope, the only one assign ever writes to
```
"""

import sys
from contextlib import contextmanager

from patty.core.value import NativeFunction
from patty.lang.error import PattyError, UnresolvedSymbol


class Context:
    """Evaluation context: the scope stack plus the input/output streams the native functions talk to."""

    def __init__(self, stdin=None, stdout=None, error_handler=None):
        self.scopes = [{}]
        self.stdin = stdin
        self.stdout = stdout
        self.error_handler = error_handler  # receives warnings, may be None

    @property
    def globals(self):
        return self.scopes[0]

    @property
    def depth(self):
        """Number of scopes pushed on top of the global one."""
        return len(self.scopes) - 1

    @property
    def input(self):
        return self.stdin if self.stdin is not None else sys.stdin

    @property
    def output(self):
        return self.stdout if self.stdout is not None else sys.stdout

    def lookup(self, name):
        """Returns the innermost binding of name, or None if no scope binds it."""
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None

    def assign(self, name, value):
        """Binds name in the innermost scope only, shadowing any outer binding."""
        self.scopes[-1][name] = value

    def push_scope(self):
        self.scopes.append({})

    def pop_scope(self):
        if len(self.scopes) == 1:
            raise PattyError("cannot pop the global scope", internal=True)
        self.scopes.pop()

    def unwind(self, depth):
        """Drops every scope above depth, for recovering after an evaluation was torn down half way."""
        del self.scopes[depth + 1:]

    @contextmanager
    def local_scope(self):
        """Pushes a scope for the duration of the with block, popping it even if the block raises."""
        self.push_scope()
        try:
            yield self.scopes[-1]
        finally:
            self.pop_scope()

    def define(self, name, function):
        """Registers function as the native function name in the global scope."""
        self.globals[name] = NativeFunction(name, function)

    def native(self, name):
        """Returns the global binding of name regardless of how deep the stack currently is."""
        try:
            return self.globals[name]
        except KeyError:
            raise UnresolvedSymbol(name)

    def warn(self, msg, *exprs):
        """Forwards a warning to the attached error handler, if any."""
        if self.error_handler is not None:
            self.error_handler.warn(msg, *exprs)
