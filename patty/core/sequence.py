"""Lazy sequences for Patty.

A sequence never stores values, only the expressions that produce them. Which generator backs a (seq ...) depends on
whether its arguments are static, i.e. do not mention the reserved index symbol `n`:

```
(seq 1 2 3)          ; CircularGenerator: finite, repeats when sampled past its length
(seq (* n n))        ; DynamicGenerator: infinite, element i is the expression evaluated with n = i
(seq 1 2 (* n 10))   ; ComposedGenerator: the static prefix, then the dynamic tail
```

Generators are immutable: pop returns a new generator (or None once nothing is left) and leaves the original alone,
so a Sequence value can be shared freely.
"""

from abc import ABC, abstractmethod

from patty.core.evaluator import evaluate
from patty.core.value import Int, List, Symbol
from patty.lang.error import OutOfRange


INDEX = "n"


def is_static(expr):
    """Whether or not expr is free of the index symbol, directly or in any nested sub-expression."""
    if isinstance(expr, List):
        return all(is_static(item) for item in expr)
    if isinstance(expr, Symbol):
        return expr.name != INDEX
    return True


def _sample(context, expr, index):
    """Evaluates expr in a fresh scope with the index symbol bound to index."""
    with context.local_scope():
        context.assign(INDEX, Int(index))
        return evaluate(context, expr)


class Generator(ABC):
    """Strategy behind a Sequence value."""
    kind = "generator"

    @abstractmethod
    def take(self, context, n):
        """Returns a List of the first n sampled elements."""

    @abstractmethod
    def len(self, context):
        """Returns the number of distinct elements, or None if self is unbounded."""

    @abstractmethod
    def pop(self, context, n):
        """Returns a new generator without the first n elements, or None if nothing is left."""

    def prefix(self):
        """Expressions that can be copied out directly when self is part of a composition. None if unbounded."""
        return None


class DynamicGenerator(Generator):
    """Infinite sequence defined by a single expression over the index symbol."""
    kind = "dynamic"

    def __init__(self, expr, start=0):
        self.expr = expr
        self.start = start

    def take(self, context, n):
        return List(_sample(context, self.expr, self.start + i) for i in range(n))

    def len(self, context):
        return None

    def pop(self, context, n):
        return DynamicGenerator(self.expr, self.start + n)

    def __repr__(self):
        return f"DynamicGenerator({self.expr!r}, start={self.start})"


class CircularGenerator(Generator):
    """Finite sequence of static expressions that wraps around when sampled past its end."""
    kind = "circular"

    def __init__(self, value_set):
        self.value_set = list(value_set)

    def take(self, context, n):
        if n and not self.value_set:
            raise OutOfRange("cannot take {} element(s) from an empty sequence", n)
        size = len(self.value_set)
        return List(_sample(context, self.value_set[i % size], i) for i in range(n))

    def len(self, context):
        return len(self.value_set)

    def pop(self, context, n):
        if n >= len(self.value_set):
            return None  # popping the whole cycle collapses it
        return CircularGenerator(self.value_set[n:])

    def prefix(self):
        return self.value_set

    def __repr__(self):
        return f"CircularGenerator({self.value_set!r})"


class ComposedGenerator(Generator):
    """Concatenation of child generators. Finite children hand out their prefix once; the first unbounded child
    supplies everything after that, so children following it are never reached. A composition of finite children
    only repeats as a whole.
    """
    kind = "composed"

    def __init__(self, children):
        self.children = list(children)

    def take(self, context, n):
        result = List()
        remaining = n

        if remaining and self.len(context) == 0:
            raise OutOfRange("cannot take {} element(s) from an empty sequence", n)

        while remaining:
            for child in self.children:
                values = child.prefix()
                if values is None:
                    result.extend(child.take(context, remaining))
                    return result

                copied = min(len(values), remaining)
                for i in range(copied):
                    result.append(_sample(context, values[i], len(result)))
                remaining -= copied
                if not remaining:
                    break
        return result

    def len(self, context):
        total = 0
        for child in self.children:
            size = child.len(context)
            if size is None:
                return None
            total += size
        return total

    def pop(self, context, n):
        children = list(self.children)
        remaining = n

        while children:
            size = children[0].len(context)
            if size is None or remaining < size:
                children[0] = children[0].pop(context, remaining)
                break
            remaining -= size
            children.pop(0)

        if not children:
            return None
        if len(children) == 1:
            return children[0]
        return ComposedGenerator(children)

    def __repr__(self):
        return f"ComposedGenerator({self.children!r})"


def generator_for(expressions):
    """Chooses the generator for the unevaluated (seq ...) arguments. Returns (generator, discarded) where discarded
    lists the expressions following the first non-static one, which a sequence cannot use.
    """
    expressions = list(expressions)
    split = next((idx for idx, expr in enumerate(expressions) if not is_static(expr)), None)

    if split is None:
        return CircularGenerator(expressions), []

    dynamic = DynamicGenerator(expressions[split])
    discarded = expressions[split + 1:]
    if split == 0:
        return dynamic, discarded
    return ComposedGenerator([CircularGenerator(expressions[:split]), dynamic]), discarded
