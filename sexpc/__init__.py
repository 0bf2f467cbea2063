"""Minimal S-expression interpreter.

Basic program flow:
    1. Tokenizer: scans the source bytes into tokens with byte ranges (see sexpc/grammar/lexical.py)
    2. Parser: builds a flat table of syntax nodes by recursive descent on brackets (see sexpc/grammar/syntax.py)
    3. Evaluator: walks the table from its last node (the root) with an explicit value stack, dispatching applications
       to builtins and pulling input words on demand (see sexpc/lang/evaluator.py)

`evaluate(source, stdin)` runs all three and returns the printed output.
"""

from sexpc.lang.session import evaluate

__all__ = ["evaluate"]
