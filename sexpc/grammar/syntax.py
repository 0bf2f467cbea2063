"""Bracket-aware recursive descent parser for the sexpc language.

```
<exp> ::= <open> <exp>* (<close> | <end>)   ; "application": (, [ and { are interchangeable, as are ), ] and }
        | <close>                           ; "error": unmatched bracket
        | <token>                           ; "value": any other single token, validity is checked on evaluation
```

Nodes are not nested objects: the parser appends them to a flat table and refers to children (and tokens) by index.
Children are always appended before their parent, so the last node of the table is the root of the program.
"""

from sexpc.grammar.lexical import EndToken, Issue, PunctuationToken, Tokenizer
from sexpc.lang.error import GenericException, ParseError


class Syntax:
    """Superclass for every node in the syntax table."""

    def __init__(self):
        self._cls = type(self).__name__

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)


class ErrorNode(Syntax):
    """Parse failure. Fatal only if evaluation reaches it."""

    def __init__(self, message, token):
        super().__init__()
        self.message = message
        self.token = token

    def __repr__(self):
        return f"{self._cls}({self.message!r}, token={self.token})"


class ValueNode(Syntax):
    """A single token: identifier, integer, string, or a token that is only rejected later."""

    def __init__(self, token):
        super().__init__()
        self.token = token

    def __repr__(self):
        return f"{self._cls}(token={self.token})"


class Application(Syntax):
    """Bracketed sequence. children are node indices; first and last are the indices of the opening bracket token and
    of the closing bracket token (or the EndToken if the bracket was never closed).
    """

    def __init__(self, children, first, last):
        super().__init__()
        self.children = children
        self.first = first
        self.last = last

    def __repr__(self):
        return f"{self._cls}({self.children}, first={self.first}, last={self.last})"


class Parser:
    """Builds the node table from (Token, range) pairs, with one token of lookahead."""

    def __init__(self, tokens):
        self.tokens = tokens
        self.cur = 0
        self.nodes = []
        self.issues = []

    def next(self):
        """Current token; EndToken past the end of the list."""
        if self.cur >= len(self.tokens):
            return EndToken()
        return self.tokens[self.cur][0]

    def next_is_opening(self):
        token = self.next()
        return isinstance(token, PunctuationToken) and token.is_opening

    def next_is_closing(self):
        token = self.next()
        return isinstance(token, PunctuationToken) and token.is_closing

    def push(self, node):
        """Appends node to the table and returns its index."""
        self.nodes.append(node)
        return len(self.nodes) - 1

    def _issue(self, message, first, last=None):
        """Records a non-fatal issue spanning tokens first..last."""
        last = first if last is None else last
        self.issues.append(Issue(message, self.tokens[first][1][0], self.tokens[last][1][1]))

    def read_exp(self):
        tok_id = self.cur

        if self.next_is_opening():
            opening = self.next().value
            self.cur += 1

            children = []
            while not self.next_is_closing() and not isinstance(self.next(), EndToken):
                children.append(self.read_exp())

            last = min(self.cur, len(self.tokens) - 1)
            if isinstance(self.next(), EndToken):
                self._issue("bracket '{}' is never closed", tok_id)
            else:
                closing = self.next().value
                if PunctuationToken.OPENING.index(opening) != PunctuationToken.CLOSING.index(closing):
                    self._issue("'{}' does not match the bracket it closes", self.cur)
                self.cur += 1

            return self.push(Application(children, tok_id, last))

        if self.next_is_closing():
            self.cur += 1
            return self.push(ErrorNode("Unmatched bracket", tok_id))

        self.cur += 1
        return self.push(ValueNode(tok_id))

    def parse(self):
        """Parses exactly one top-level expression. Anything after it is ignored."""
        self.read_exp()

        if self.cur < len(self.tokens) and not isinstance(self.next(), EndToken):
            self._issue("tokens after the first expression are ignored, starting at '{}'", self.cur)

        return self.nodes


class Document:
    """A parsed program: the source bytes, its (Token, range) pairs, its node table, and the issues found on the way.
    """

    def __init__(self, source):
        if isinstance(source, str):
            source = source.encode()

        tokenizer = Tokenizer(source)
        parser = Parser(tokenizer.tokenize())

        self.source = source
        self.tokens = parser.tokens
        try:
            self.nodes = parser.parse()
        except RecursionError:
            raise ParseError("expression nested too deeply", diagnosis=False)
        self.issues = tokenizer.issues + parser.issues

    @property
    def root(self):
        return len(self.nodes) - 1

    def span(self, syn_id):
        """Byte range covered by node syn_id."""
        node = self.nodes[syn_id]
        if isinstance(node, Application):
            return self.tokens[node.first][1][0], self.tokens[node.last][1][1]
        return self.tokens[node.token][1]

    def text(self, start, end):
        return self.source[start:end].decode(errors="replace")

    def warnings(self):
        """Issues as located GenericExceptions, ready for ErrorHandler.warn."""
        warnings = []
        for message, start, end in self.issues:
            warning = GenericException(message, self.text(start, end))
            warnings.append(warning.locate(self.source, start, end))
        return warnings

    def display(self):
        """Readable dump of tokens and nodes, one per line.

        Format:
        tokens:
            <index> <Token> <start>..<end>
        nodes:
            <index> <Node>
        """
        result = "tokens:"
        for tok_id, (token, (start, end)) in enumerate(self.tokens):
            result += f"\n    {tok_id} {token!r} {start}..{end}"
        result += "\nnodes:"
        for syn_id, node in enumerate(self.nodes):
            result += f"\n    {syn_id} {node!r}"
        return result
