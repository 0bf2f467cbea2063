"""Tokenizer for the sexpc language: a single left-to-right scan of raw source bytes, without backtracking.

The token grammar can be loosely defined as follows:

```
<integer>     ::= <digit>+                         ; parsed as a signed 64-bit decimal (0 if it does not fit)
<identifier>  ::= (<letter> | <digit> | "_")+      ; tried after <integer>, so "1abc" is 1 followed by abc
<string>      ::= '"' <char except '"' or LF>* '"' ; closing quote optional: a newline or EOF also ends it
<punctuation> ::= "(" | ")" | "[" | "]" | "{" | "}" | "++=" | "+=" | "-=" | "*=" | "/=" | "%=" | "=="
                | "!=" | "++" | "+" | "-" | "*" | "/" | "%" | "=" | ":"   ; tried in exactly this order
<error>       ::= <any other byte>                 ; one byte, message "?"

<whitespace>  ::= (" " | CR | LF)+                 ; skipped
<comment>     ::= "//" <char except LF>*           ; skipped
```

Token classes are tried in definition order (see Token.infer), so the order of the subclasses below is significant.
"""

from abc import abstractmethod, ABC
from collections import namedtuple


Issue = namedtuple("Issue", ["message", "start", "end"])  # a silent fallback the scan had to take

WHITESPACE = b" \r\n"
DIGITS = b"0123456789"
ID_CHARS = DIGITS + b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"

INT_MAX = 2 ** 63 - 1


def take(src, cur, chars):
    """Returns end of the maximal run of bytes in chars starting at cur, or None if the run is empty."""
    end = cur
    while end < len(src) and src[end] in chars:
        end += 1
    return end if end > cur else None


class Token(ABC):
    """Superclass that represents any lexical unit of sexpc. Tokens are immutable once produced."""

    def __init__(self, value=None):
        self.value = value
        self._cls = type(self).__name__

    @staticmethod
    @abstractmethod
    def check_grammar(src, cur):
        """This method should return the end offset of the token of this kind starting at src[cur], or None if src
        does not hold one there.
        """

    @classmethod
    def scan(cls, src, start, end, issues):
        """Builds the token spanning src[start:end]. Fallbacks taken while doing so are appended to issues."""
        return cls(src[start:end].decode(errors="replace"))

    @classmethod
    def infer(cls, src, cur):
        """Returns (token class, end offset) for the first subclass whose grammar matches at src[cur]."""
        for subclass in cls.__subclasses__():
            end = subclass.check_grammar(src, cur)
            if end is not None:
                return subclass, end
        raise AssertionError("ErrorToken matches any byte")

    def __repr__(self):
        return f"{self._cls}({self.value!r})"

    def __eq__(self, other):
        return type(self) is type(other) and self.value == other.value

    def __hash__(self):
        return hash((self._cls, self.value))


class IntegerToken(Token):
    """Run of ASCII digits. value is an int."""

    @staticmethod
    def check_grammar(src, cur):
        return take(src, cur, DIGITS)

    @classmethod
    def scan(cls, src, start, end, issues):
        value = int(src[start:end])
        if value > INT_MAX:
            issues.append(Issue("integer literal '{}' does not fit in 64 bits, read as 0", start, end))
            value = 0
        return cls(value)


class IdentifierToken(Token):
    """Run of ASCII letters, digits and underscores. value is the text."""

    @staticmethod
    def check_grammar(src, cur):
        return take(src, cur, ID_CHARS)


class StringToken(Token):
    """Double-quoted text on a single line. value is the text between the quotes."""

    @staticmethod
    def check_grammar(src, cur):
        if src[cur:cur + 1] != b'"':
            return None

        end = cur + 1
        while end < len(src) and src[end] not in b'"\n':
            end += 1

        if src[end:end + 1] == b'"':
            end += 1  # the closing quote belongs to the token
        return end

    @classmethod
    def scan(cls, src, start, end, issues):
        if end - start < 2 or src[end - 1:end] != b'"':
            issues.append(Issue("unterminated string '{}'", start, end))
            return cls(src[start + 1:end].decode(errors="replace"))
        return cls(src[start + 1:end - 1].decode(errors="replace"))


class PunctuationToken(Token):
    """Fixed symbol. value is the symbol text."""
    SYMBOLS = [b"(", b")", b"[", b"]", b"{", b"}", b"++=", b"+=", b"-=", b"*=", b"/=", b"%=", b"==", b"!=", b"++",
               b"+", b"-", b"*", b"/", b"%", b"=", b":"]  # order resolves prefixes (e.g. "+=" before "+")

    OPENING = ["(", "[", "{"]
    CLOSING = [")", "]", "}"]

    @staticmethod
    def check_grammar(src, cur):
        for symbol in PunctuationToken.SYMBOLS:
            if src.startswith(symbol, cur):
                return cur + len(symbol)

    @property
    def is_opening(self):
        return self.value in PunctuationToken.OPENING

    @property
    def is_closing(self):
        return self.value in PunctuationToken.CLOSING


class ErrorToken(Token):
    """Unrecognized byte. value is the error message."""

    @staticmethod
    def check_grammar(src, cur):
        return cur + 1

    @classmethod
    def scan(cls, src, start, end, issues):
        return cls("?")


class EndToken(Token):
    """End of input. Never matched by the scan: Tokenizer.tokenize appends exactly one."""

    @staticmethod
    def check_grammar(src, cur):
        return None

    def __repr__(self):
        return f"{self._cls}()"


class Tokenizer:
    """Scans source bytes into a list of (Token, (start, end)) pairs, ending with a single EndToken whose range is
    empty and sits at the final offset.
    """

    def __init__(self, src):
        if isinstance(src, str):
            src = src.encode()

        self.src = src
        self.cur = 0
        self.tokens = []
        self.issues = []

    def skip(self):
        """Skips whitespace and comments. Returns whether anything was skipped."""
        end = take(self.src, self.cur, WHITESPACE)
        if end is not None:
            self.cur = end
            return True

        if self.src.startswith(b"//", self.cur):
            end = self.src.find(b"\n", self.cur)
            self.cur = end if end != -1 else len(self.src)
            return True

        return False

    def tokenize(self):
        while self.cur < len(self.src):
            if self.skip():
                continue

            start = self.cur
            token_cls, self.cur = Token.infer(self.src, start)
            self.tokens.append((token_cls.scan(self.src, start, self.cur, self.issues), (start, self.cur)))

        self.tokens.append((EndToken(), (self.cur, self.cur)))
        return self.tokens


def tokenize(src):
    """Returns the (Token, (start, end)) pairs of src. See Tokenizer for non-fatal issues."""
    return Tokenizer(src).tokenize()
