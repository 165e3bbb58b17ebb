"""Reader for the Patty language: turns source text into Value trees.

Formally, the grammar can be loosely defined as follows (tried in this order):

```
<string>  ::= '"' <char>* '"'                 ; ends at the first '"' not preceded by '\', kept raw
<int>     ::= ["-"] <digit>+                  ; a lone '-' is a symbol
<symbol>  ::= <start> (<start> | <digit>)*    ; <start> is an ASCII letter or one of +-*/%$@!^&[]:;<>,.|=
<list>    ::= "(" <form>* ")"                 ; a missing ")" at the end of input closes the list
<comment> ::= "#" <char>* <newline>           ; skipped along with whitespace
```

The reader is a cursor over the text: every read consumes a prefix and leaves the rest for the next call. Nil is never
produced as a literal; it only signals "no more elements" (end of input or a closing parenthesis).
"""

import string

from patty.core.value import NIL, Int, List, String, Symbol, fits_int64
from patty.lang.error import MalformedInput


SYMBOL_PUNCTUATION = "+-*/%$@!^&[]:;<>,.|="
SYMBOL_START = frozenset(string.ascii_letters + SYMBOL_PUNCTUATION)
SYMBOL_CHARS = frozenset(string.ascii_letters + string.digits + SYMBOL_PUNCTUATION)
DIGITS = frozenset(string.digits)
WHITESPACE = frozenset(string.whitespace)


class Reader:
    """Mutable cursor over Patty source text."""

    def __init__(self, text):
        self.text = text
        self.pos = 0

    @property
    def exhausted(self):
        return self.pos >= len(self.text)

    def rest(self):
        """Returns the part of the text that has not been consumed."""
        return self.text[self.pos:]

    def _peek(self, offset=0):
        idx = self.pos + offset
        return self.text[idx] if idx < len(self.text) else ""

    def skip_blanks(self):
        """Skips whitespace and '#' comments that run to the end of the line."""
        while not self.exhausted:
            while self._peek() in WHITESPACE:
                self.pos += 1
            if self._peek() == "#":
                newline = self.text.find("\n", self.pos)
                self.pos = len(self.text) if newline == -1 else newline
            else:
                break

    def _scan_string(self):
        """Returns the raw payload of the string literal at the cursor and moves past its closing quote."""
        start = self.pos + 1
        end = start
        while True:
            end = self.text.find('"', end)
            if end == -1:
                raise MalformedInput("unterminated string literal '{}'", self.text[self.pos:self.pos + 20])
            if self.text[end - 1] != "\\":
                break
            end += 1

        self.pos = end + 1
        return self.text[start:end]

    def _scan_int(self):
        start = self.pos
        if self._peek() == "-":
            self.pos += 1
        while self._peek() in DIGITS:
            self.pos += 1

        literal = self.text[start:self.pos]
        number = int(literal)
        if not fits_int64(number):
            raise MalformedInput("integer literal '{}' does not fit in 64 bits", literal)
        return number

    def _scan_symbol(self):
        start = self.pos
        self.pos += 1
        while self._peek() in SYMBOL_CHARS:
            self.pos += 1
        return self.text[start:self.pos]

    def _starts_int(self):
        char = self._peek()
        return char in DIGITS or (char == "-" and self._peek(1) in DIGITS)

    def read(self):
        """Reads one form from the cursor. Returns NIL at the end of input or on a closing parenthesis."""
        self.skip_blanks()

        if self.exhausted:
            return NIL

        char = self._peek()
        if char == '"':
            return String(self._scan_string())

        if self._starts_int():
            return Int(self._scan_int())

        if char in SYMBOL_START:
            return Symbol(self._scan_symbol())

        if char == "(":
            self.pos += 1
            form = List()
            elem = self.read()
            while elem is not NIL:
                form.append(elem)
                elem = self.read()
            return form

        if char == ")":
            self.pos += 1
            return NIL

        raise MalformedInput("unexpected character '{}'", char)

    def read_all(self):
        """Reads every remaining top-level form. Stray closing parentheses are skipped."""
        forms = []
        while True:
            self.skip_blanks()
            if self.exhausted:
                return forms
            form = self.read()
            if form is not NIL:
                forms.append(form)

    def tokens(self):
        """Yields (kind, text) pairs for the rest of the text without building any tree."""
        while True:
            self.skip_blanks()
            if self.exhausted:
                return

            char = self._peek()
            if char == '"':
                yield "string", '"' + self._scan_string() + '"'
            elif self._starts_int():
                yield "int", str(self._scan_int())
            elif char in SYMBOL_START:
                yield "symbol", self._scan_symbol()
            elif char in "()":
                self.pos += 1
                yield "paren", char
            else:
                raise MalformedInput("unexpected character '{}'", char)


def read(text):
    """Returns the first form of text (NIL if there is none)."""
    return Reader(text).read()


def tokenize(text):
    """Returns the token list of text."""
    return list(Reader(text).tokens())
