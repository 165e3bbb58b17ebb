"""Runtime values of the Patty language.

Every datum the engine touches, whether it is source text that has just been read or the result of an evaluation, is
one of a closed set of Value variants:

```
Nil             ; absence of a value, the reader's end-of-elements sentinel and the canonical false
Int             ; signed 64-bit integer
String          ; raw text, no escape decoding
Symbol          ; name resolved by the evaluator, literal data otherwise
List            ; call expressions, literal data and function bodies alike
NativeFunction  ; host callable receiving its arguments unevaluated
Sequence        ; shared lazy generator (see sequence.py)
```

Values are shared by reference, so operations that shorten or extend a List always work on a copy.
"""

from abc import ABC

from patty.lang.error import UnsupportedOperation


INT_BITS = 64


def to_int64(number):
    """Wraps a Python int to signed 64-bit two's complement."""
    number &= (1 << INT_BITS) - 1
    if number >= 1 << (INT_BITS - 1):
        number -= 1 << INT_BITS
    return number


def fits_int64(number):
    """Whether or not number is representable without wrapping."""
    return -(1 << (INT_BITS - 1)) <= number < 1 << (INT_BITS - 1)


class Value(ABC):
    """Superclass of every Patty value."""
    kind = "value"

    def coerce_bool(self):
        """Boolean coercion used by conditionals. Overridden by variants that can be false."""
        return True

    def take(self, context, n):
        """Returns the first n elements of self. Only strings, lists and sequences support it."""
        raise UnsupportedOperation("take only supports strings, lists and sequences, got {}", self.kind)

    def render(self, in_list=False):
        """Returns the textual form of self. in_list is set while rendering the elements of a List."""
        raise NotImplementedError

    def __str__(self):
        return self.render()


class Nil(Value):
    """The single 'nothing' value. Use NIL rather than instantiating."""
    kind = "nil"
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def coerce_bool(self):
        return False

    def render(self, in_list=False):
        return "nil"

    def __repr__(self):
        return "NIL"

    def __eq__(self, other):
        return isinstance(other, Nil)

    def __hash__(self):
        return hash(None)


NIL = Nil()


class Int(Value):
    kind = "int"

    def __init__(self, ival):
        self.ival = ival

    def coerce_bool(self):
        return self.ival != 0

    def render(self, in_list=False):
        return str(self.ival)

    def __repr__(self):
        return f"Int({self.ival})"

    def __eq__(self, other):
        return isinstance(other, Int) and self.ival == other.ival

    def __hash__(self):
        return hash(self.ival)


class String(Value):
    kind = "string"

    def __init__(self, sval):
        self.sval = sval

    def coerce_bool(self):
        return bool(self.sval)

    def take(self, context, n):
        return String(self.sval[:n])

    def render(self, in_list=False):
        if in_list:
            return '"' + self.sval.replace("\\", "\\\\").replace('"', '\\"') + '"'
        return self.sval

    def __len__(self):
        return len(self.sval)

    def __repr__(self):
        return f"String({self.sval!r})"

    def __eq__(self, other):
        return isinstance(other, String) and self.sval == other.sval

    def __hash__(self):
        return hash(("string", self.sval))


class Symbol(Value):
    kind = "symbol"

    def __init__(self, name):
        self.name = name

    def render(self, in_list=False):
        return self.name

    def __repr__(self):
        return f"Symbol({self.name!r})"

    def __eq__(self, other):
        return isinstance(other, Symbol) and self.name == other.name

    def __hash__(self):
        return hash(("symbol", self.name))


class List(Value):
    """Ordered, finite sequence of values. Used for call expressions as well as for data and function bodies."""
    kind = "list"

    def __init__(self, items=()):
        self.items = list(items)

    @property
    def head(self):
        return self.items[0]

    def tail(self):
        """New List holding every element but the first."""
        return List(self.items[1:])

    def copy(self):
        return List(self.items)

    def truncate(self, n):
        """In-place removal of everything past the first n elements."""
        del self.items[n:]
        return self

    def drop_front(self, n):
        """In-place removal of up to n elements from the front."""
        del self.items[:n]
        return self

    def append(self, value):
        self.items.append(value)

    def extend(self, values):
        self.items.extend(values)

    def coerce_bool(self):
        return bool(self.items)

    def take(self, context, n):
        return self.copy().truncate(n)

    def render(self, in_list=False):
        return "(" + " ".join(item.render(in_list=True) for item in self.items) + ")"

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def __repr__(self):
        return f"List({self.items!r})"

    def __eq__(self, other):
        return isinstance(other, List) and self.items == other.items

    __hash__ = None


class NativeFunction(Value):
    """Capability implemented by the host. function is called as function(context, args) where args is the List of
    unevaluated argument expressions; it decides itself what to evaluate and when.
    """
    kind = "native-function"

    def __init__(self, name, function):
        self.name = name
        self.function = function

    def __call__(self, context, args):
        return self.function(context, args)

    def render(self, in_list=False):
        return f"<native-function {self.name}>"

    def __repr__(self):
        return f"NativeFunction({self.name!r})"


class Sequence(Value):
    """Lazy sequence. The generator is shared between copies of the value and never modified: popping builds a new
    generator wrapped in a new Sequence.
    """
    kind = "sequence"

    def __init__(self, generator):
        self.generator = generator

    def take(self, context, n):
        return self.generator.take(context, n)

    def render(self, in_list=False):
        return f"<sequence {self.generator.kind}>"

    def __repr__(self):
        return f"Sequence({self.generator!r})"
