"""Stack-based tree-walking evaluator for sexpc.

Evaluating a node pushes at most one value onto the evaluation stack. An application evaluates its children left to
right, so that its head and arguments end up on top of the stack, then pops them and dispatches on the head:

```
(head arg1 ... argN)  ->  push head, push arg1, ..., push argN  ->  BUILTINS[head.name](evaluator, [arg1 .. argN])
```

Builtins push their result, so an application counts as one value for its parent. Any failure raises a
GenericException subclass and stops the evaluation: nothing is retried or recovered.
"""

import re
import sys

from sexpc.grammar.lexical import (INT_MAX, EndToken, ErrorToken, IdentifierToken, IntegerToken, PunctuationToken,
                                   StringToken)
from sexpc.grammar.syntax import Application, ErrorNode, ValueNode
from sexpc.lang.error import (ArityError, InputExhaustedError, InputFormatError, LexError, ParseError,
                              StackUnderflowError, UnknownOperatorError, WrongTypeError)
from sexpc.lang.value import Identifier, Integer, String, Vector

BUILTINS = {}  # name: function(evaluator, values)

INTEGER_WORD = re.compile(r"[+-]?[0-9]+")


def builtin(name):
    """Registers the decorated function as the builtin called name."""
    def register(func):
        BUILTINS[name] = func
        return func
    return register


def check_arity(name, values, low, high=None):
    """Raises ArityError unless low <= len(values) <= high (high=None means unbounded)."""
    if len(values) < low or (high is not None and len(values) > high):
        if high == low:
            expected = f"exactly {low}"
        elif high is None:
            expected = f"at least {low}"
        else:
            expected = f"{low} to {high}"
        raise ArityError("'{}' takes " + expected + f" argument(s), got {len(values)}", name)


@builtin("read_int")
def read_int(evaluator, values):
    check_arity("read_int", values, 0, 0)
    word = evaluator.words.next_word()
    if not INTEGER_WORD.fullmatch(word):
        raise InputFormatError("expected an integer, got '{}'", word, diagnosis=False)

    value = int(word)
    if not -INT_MAX - 1 <= value <= INT_MAX:
        raise InputFormatError("integer '{}' does not fit in 64 bits", word, diagnosis=False)
    return Integer(value)


@builtin("read_str")
def read_str(evaluator, values):
    check_arity("read_str", values, 0, 0)
    return String(evaluator.words.next_word().encode())


@builtin("println")
def println(evaluator, values):
    for value in values:
        evaluator.stdout.write(f"{value} ")
    evaluator.stdout.write("\n")
    return Integer(0)


@builtin("sum")
def sum_(evaluator, values):
    total = 0
    for value in values:
        if not isinstance(value, Integer):
            raise WrongTypeError("sum's arguments must be integers, got '{}'", str(value))
        total += value.value
    return Integer(total)


@builtin("join")
def join(evaluator, values):
    check_arity("join", values, 1)
    separator, *items = values
    if not isinstance(separator, String):
        raise WrongTypeError("join's first argument must be a str, got '{}'", str(separator))
    return String(separator.data.join(bytes(item) for item in items))


@builtin("let")
def let(evaluator, values):
    check_arity("let", values, 2, 2)
    name, value = values
    if not isinstance(name, Identifier):
        raise WrongTypeError("let's first argument must be an identifier, got '{}'", str(name))
    evaluator.environment[name.name] = value
    return value


@builtin("vec")
def vec(evaluator, values):
    return Vector(tuple(values))


class Evaluator:
    """Evaluates the root of a Document. environment is a dict of name: Value and is updated in place by let; words is
    a WordReader; stdout is anything with write(str).
    """
    BINDERS = ["let"]  # builtins whose first argument is a name, not a value

    def __init__(self, document, environment, words, stdout, debug=False):
        self.document = document
        self.environment = environment
        self.words = words
        self.stdout = stdout
        self.debug = debug
        self.stack = []

    def run(self):
        """Evaluates the whole program. Returns the value left on top of the stack, or None if there is none."""
        self.stack = []
        try:
            self.eval_exp(self.document.root)
        except RecursionError:
            raise ParseError("expression nested too deeply", diagnosis=False)
        return self.stack[-1] if self.stack else None

    def _fail(self, error, syn_id):
        """Points error at node syn_id and returns it for raising."""
        start, end = self.document.span(syn_id)
        return error.locate(self.document.source, start, end)

    def _token(self, tok_id):
        return self.document.tokens[tok_id][0]

    def _is_binder(self, node):
        """Whether node is an application of a builtin that binds a name. A binder name that is itself bound (e.g. after
        `(let let 1)`) no longer names the builtin, so its application is evaluated like any other.
        """
        if not node.children:
            return False
        head = self.document.nodes[node.children[0]]
        if not isinstance(head, ValueNode):
            return False
        token = self._token(head.token)
        return (isinstance(token, IdentifierToken) and token.value in Evaluator.BINDERS
                and token.value not in self.environment)

    def eval_exp(self, syn_id, quoted=False):
        """Evaluates node syn_id onto the stack. If quoted, an identifier is pushed as-is even if it is bound."""
        node = self.document.nodes[syn_id]
        if self.debug:
            print(f"eval {syn_id} {node!r}", file=sys.stderr)

        if isinstance(node, ErrorNode):
            raise self._fail(ParseError(node.message), syn_id)

        elif isinstance(node, ValueNode):
            token = self._token(node.token)

            if isinstance(token, ErrorToken):
                raise self._fail(LexError(token.value), syn_id)
            elif isinstance(token, IdentifierToken):
                if not quoted and token.value in self.environment:
                    self.stack.append(self.environment[token.value])
                else:
                    self.stack.append(Identifier(token.value))
            elif isinstance(token, IntegerToken):
                self.stack.append(Integer(token.value))
            elif isinstance(token, StringToken):
                self.stack.append(String(token.value.encode()))
            elif isinstance(token, (PunctuationToken, EndToken)):
                pass  # pushes nothing

        elif isinstance(node, Application):
            binder = self._is_binder(node)
            for idx, child in enumerate(node.children):
                height = len(self.stack)
                self.eval_exp(child, quoted=binder and idx == 1)
                if len(self.stack) != height + 1:
                    msg = "operand '{}' has no value"
                    raise self._fail(StackUnderflowError(msg, self.document.text(*self.document.span(child))), child)

            try:
                self.do_app(len(node.children))
            except (ArityError, InputExhaustedError, InputFormatError, UnknownOperatorError, WrongTypeError) as error:
                raise self._fail(error, syn_id)

    def do_app(self, length):
        """Pops a head and length - 1 arguments off the stack and pushes the result of the builtin the head names."""
        if length == 0:
            return
        if len(self.stack) < length:
            raise StackUnderflowError(f"application needs {length} values, stack holds {len(self.stack)}")

        base = len(self.stack) - length
        head, values = self.stack[base], self.stack[base + 1:]
        del self.stack[base:]

        if not isinstance(head, Identifier):
            raise WrongTypeError("head must be an identifier, got '{}'", str(head))

        func = BUILTINS.get(head.name)
        if func is None:
            raise UnknownOperatorError("unknown identifier '{}'", head.name)

        self.stack.append(func(self, values))
