"""Native functions ("intrinsics") of the Patty language.

Every intrinsic is called as function(context, args) with args the List of its unevaluated argument expressions, so
special forms (if, def, for, loop, ...) and ordinary primitives are written the same way: each one evaluates exactly
what it needs, in the order it needs it. install registers all of them in the global scope of a Context.
"""

import operator

from patty.core.evaluator import call, evaluate
from patty.core.sequence import INDEX, generator_for
from patty.core.value import NIL, Int, List, Sequence, String, Symbol, to_int64
from patty.lang.error import ArityMismatch, EndOfInput, OutOfRange, TypeMismatch, UnsupportedOperation


INTRINSICS = {}


def intrinsic(name):
    """Registers the decorated function as the native function name."""
    def decorator(function):
        INTRINSICS[name] = function
        return function
    return decorator


def install(context):
    """Registers every intrinsic in the global scope of context."""
    for name, function in INTRINSICS.items():
        context.define(name, function)
    return context


def _arg(args, idx, name):
    """Returns args[idx], raising ArityMismatch if the call is too short."""
    if idx >= len(args):
        raise ArityMismatch("'{}' expects at least {} argument(s), got {}", [name, idx + 1, len(args)])
    return args[idx]


def _expect(value, cls, name):
    """Returns value if it is a cls, raising TypeMismatch otherwise."""
    if not isinstance(value, cls):
        raise TypeMismatch("'{}' expects {}, got '{}'", [name, cls.kind, value])
    return value


def _count(context, args, name):
    """Evaluates args[0] as a non-negative Int count."""
    count = _expect(evaluate(context, _arg(args, 0, name)), Int, name)
    if count.ival < 0:
        raise OutOfRange("'{}' expects a non-negative count, got {}", [name, count])
    return count.ival


MATH_OPERATIONS = {"+": operator.add, "-": operator.sub, "*": operator.mul}

COMPARISONS = {"<": operator.lt, "<=": operator.le, "!=": operator.ne, "=": operator.eq}


def _math(name, op):
    def math(context, args):
        result = _expect(evaluate(context, _arg(args, 0, name)), Int, name).ival
        for arg in args.tail():
            result = to_int64(op(result, _expect(evaluate(context, arg), Int, name).ival))
        return Int(result)
    return math


def _comparison(name, op):
    def comparison(context, args):
        prev = _expect(evaluate(context, _arg(args, 0, name)), Int, name)
        for arg in args.tail():
            curr = _expect(evaluate(context, arg), Int, name)
            if not op(prev.ival, curr.ival):
                return Int(0)
            prev = curr
        return Int(1)
    return comparison


for _name, _op in MATH_OPERATIONS.items():
    intrinsic(_name)(_math(_name, _op))

for _name, _op in COMPARISONS.items():
    intrinsic(_name)(_comparison(_name, _op))


@intrinsic("do")
def do(context, args):
    result = NIL
    for arg in args:
        result = evaluate(context, arg)
    return result


@intrinsic("def")
def define(context, args):
    name = _expect(_arg(args, 0, "def"), Symbol, "def")
    context.assign(name.name, evaluate(context, _arg(args, 1, "def")))
    return NIL


@intrinsic("print")
def print_(context, args):
    """Prints the renderings of all arguments, unseparated, followed by a newline."""
    text = "".join(evaluate(context, arg).render() for arg in args)
    print(text, file=context.output)
    return NIL


@intrinsic("fun")
def fun(context, args):
    """(fun (formals...) body) is just the list [formals, body]; the evaluator knows how to apply it."""
    return args


@intrinsic("list")
def list_(context, args):
    return args


@intrinsic("if")
def if_(context, args):
    condition = evaluate(context, _arg(args, 0, "if"))
    if condition.coerce_bool():
        return evaluate(context, _arg(args, 1, "if"))
    if len(args) > 2:
        return evaluate(context, args[2])
    return NIL


@intrinsic("++")
def concat(context, args):
    """Flattens its evaluated arguments one level: nil adds nothing, a list adds its elements, anything else itself."""
    result = List()
    for arg in args:
        value = evaluate(context, arg)
        if isinstance(value, List):
            result.extend(value)
        elif value is not NIL:
            result.append(value)
    return result


@intrinsic("index")
def index(context, args):
    idx = _expect(evaluate(context, _arg(args, 0, "index")), Int, "index")
    collection = _expect(evaluate(context, _arg(args, 1, "index")), List, "index")
    if not 0 <= idx.ival < len(collection):
        raise OutOfRange("index {} out of range for '{}'", [idx, collection])
    return collection[idx.ival]


@intrinsic("for")
def for_(context, args):
    """(for pattern collection body): runs body once per element, each time in a fresh scope where pattern (a symbol,
    or a list of symbols destructuring the element) is bound. Elements are evaluated before being bound.
    """
    pattern = _arg(args, 0, "for")
    collection = _expect(evaluate(context, _arg(args, 1, "for")), List, "for")
    body = _arg(args, 2, "for")

    if not isinstance(pattern, (Symbol, List)):
        raise TypeMismatch("'for' expects a symbol or a list of symbols to bind, got '{}'", pattern)

    for element in collection:
        with context.local_scope():
            if isinstance(pattern, Symbol):
                context.assign(pattern.name, evaluate(context, element))
            else:
                _expect(element, List, "for")
                if len(pattern) != len(element):
                    msg = "cannot destructure '{}' into {} name(s)"
                    raise ArityMismatch(msg, [element, len(pattern)])
                for name, item in zip(pattern, element):
                    context.assign(_expect(name, Symbol, "for").name, evaluate(context, item))
            evaluate(context, body)

    return NIL


def _evaluate_lists(context, args, name):
    return [_expect(evaluate(context, arg), List, name) for arg in args]


@intrinsic("zip")
def zip_(context, args):
    lists = _evaluate_lists(context, args, "zip")
    if not lists:
        return List()
    return List(List(items) for items in zip(*lists))


@intrinsic("zip-with")
def zip_with(context, args):
    op = _arg(args, 0, "zip-with")
    lists = _evaluate_lists(context, args.tail(), "zip-with")
    if not lists:
        return List()
    return List(call(context, op, *items) for items in zip(*lists))


@intrinsic("take")
def take(context, args):
    count = _count(context, args, "take")
    source = evaluate(context, _arg(args, 1, "take"))
    return source.take(context, count)


@intrinsic("tail")
def tail(context, args):
    source = _expect(evaluate(context, _arg(args, 0, "tail")), List, "tail")
    return source.tail()


@intrinsic("fold")
def fold(context, args):
    """(fold f collection): left fold seeded with the first element, applying (f accumulator element)."""
    op = _arg(args, 0, "fold")
    collection = _expect(evaluate(context, _arg(args, 1, "fold")), List, "fold")
    if not collection:
        raise OutOfRange("'fold' needs at least one element")

    accumulator = collection.head
    for element in collection.tail():
        accumulator = call(context, op, accumulator, element)
    return accumulator


@intrinsic("loop")
def loop(context, args):
    """Evaluates its arguments in order, forever. Only an error gets out."""
    while True:
        for arg in args:
            evaluate(context, arg)


def _read_word(stream):
    """Reads one whitespace-delimited word from stream, or returns an empty string at end of input."""
    char = stream.read(1)
    while char and char.isspace():
        char = stream.read(1)

    word = ""
    while char and not char.isspace():
        word += char
        char = stream.read(1)
    return word


@intrinsic("read")
def read(context, args):
    """(read int) reads one integer from standard input."""
    kind = _expect(_arg(args, 0, "read"), Symbol, "read")
    if kind.name != "int":
        raise UnsupportedOperation("'read' does not support '{}'", kind)

    word = _read_word(context.input)
    if not word:
        raise EndOfInput("'read' reached the end of input")
    try:
        return Int(to_int64(int(word)))
    except ValueError:
        raise TypeMismatch("'read' expects int, got '{}'", word)


@intrinsic("seq")
def seq(context, args):
    generator, discarded = generator_for(args)
    if discarded:
        context.warn("'seq' ignores {} after its first non-static argument", List(discarded))
    return Sequence(generator)


def substitute(context, expr):
    """Replaces every currently bound symbol in expr (except the index symbol) by its value. Self-evaluating values go
    in directly; a list value goes in quoted as (list ...) so it survives being evaluated again. Symbols bound to
    symbols, and unbound ones, are left for call time.
    """
    if isinstance(expr, List):
        return List(substitute(context, item) for item in expr)
    if not isinstance(expr, Symbol) or expr.name == INDEX:
        return expr

    value = context.lookup(expr.name)
    if value is None or isinstance(value, Symbol):
        return expr
    if isinstance(value, List):
        return List([context.native("list"), *value])
    return value


@intrinsic("seq!")
def seq_bang(context, args):
    """Like seq, but captures the current value of every bound symbol first."""
    return context.native("seq")(context, substitute(context, args))


@intrinsic("pop")
def pop(context, args):
    count = _count(context, args, "pop")
    collection = evaluate(context, _arg(args, 1, "pop"))

    if isinstance(collection, Sequence):
        generator = collection.generator.pop(context, count)
        return NIL if generator is None else Sequence(generator)
    if isinstance(collection, List):
        return collection.copy().drop_front(count)
    raise UnsupportedOperation("pop only supports lists and sequences, got '{}'", collection)


@intrinsic("len")
def len_(context, args):
    """Length of a string, list or sequence; nil for an unbounded sequence."""
    value = evaluate(context, _arg(args, 0, "len"))
    if isinstance(value, (String, List)):
        return Int(len(value))
    if isinstance(value, Sequence):
        size = value.generator.len(context)
        return NIL if size is None else Int(size)
    raise UnsupportedOperation("len only supports strings, lists and sequences, got '{}'", value)

