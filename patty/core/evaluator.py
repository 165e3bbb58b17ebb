"""Tree-walking evaluator for Patty.

There is no compilation step: expressions are the Value trees produced by the reader, and evaluate interprets them
directly. Atoms evaluate to themselves, symbols are looked up in the Context, and a non-empty List is a call whose
head decides what happens next:

```
NativeFunction  ; called with the unevaluated arguments, it picks its own evaluation order
List            ; user function [formals, body], applied in a fresh scope
anything else   ; the list is returned as is, unevaluated
```
"""

from patty.core.value import NIL, List, NativeFunction, Symbol
from patty.lang.error import ArityMismatch, TypeMismatch, UnresolvedSymbol


def evaluate(context, expr):
    """Evaluates expr in context and returns the resulting Value."""
    if isinstance(expr, Symbol):
        value = context.lookup(expr.name)
        if value is None:
            raise UnresolvedSymbol(expr.name)
        return value

    if not isinstance(expr, List):
        return expr  # Nil, Int, String, NativeFunction and Sequence are self-evaluating

    if not expr:
        return NIL

    callable_ = evaluate(context, expr.head)
    if isinstance(callable_, NativeFunction):
        return callable_(context, expr.tail())
    if isinstance(callable_, List):
        return apply(context, callable_, expr.tail())
    return expr


def check_function(function):
    """Returns (formals, body) of a callable List, raising TypeMismatch if it is not shaped [formals, body]."""
    if len(function) != 2 or not isinstance(function.head, List):
        raise TypeMismatch("'{}' is not a function: expected (formals body)", function)

    formals, body = function.items
    for formal in formals:
        if not isinstance(formal, Symbol):
            raise TypeMismatch("formal parameter '{}' is not a symbol", formal)
    return formals, body


def apply(context, function, args):
    """Applies user function [formals, body] to the unevaluated List args. Each argument is evaluated after the new
    scope has been pushed, so later arguments already see the formals bound before them.
    """
    formals, body = check_function(function)
    if len(formals) != len(args):
        msg = "'{}' expects {} argument(s), got {}"
        raise ArityMismatch(msg, [function, len(formals), len(args)])

    with context.local_scope():
        for formal, arg in zip(formals, args):
            context.assign(formal.name, evaluate(context, arg))
        return evaluate(context, body)


def call(context, callable_expr, *values):
    """Evaluates the call expression (callable_expr value...). values are placed in the expression as they are and are
    therefore evaluated once more by the callee.
    """
    return evaluate(context, List([callable_expr, *values]))
