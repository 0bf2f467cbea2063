"""Runs sexpc programs from a file, runs the built-in default program, or starts command-line mode. Also uses the error
handling context manager. Called from the sexpc console script and from `python -m sexpc`.
"""

import argparse
import sys

from sexpc.lang.error import ErrorHandler
from sexpc.lang.session import Session
from sexpc.lang.shell import Shell
from sexpc.lang.words import WordReader

# reads three integers and a word, then prints their sum and the word
DEFAULT_PROGRAM = """
(vec
    (let A (read_int))
    (let B (read_int))
    (let C (read_int))
    (let S (read_str))
    (println (sum A B C) S)
)
"""


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="sexpc", description="Minimal S-expression interpreter.")
    parser.add_argument("file", help="file to interpret and run (if empty, runs the built-in default program)",
                        nargs="?")
    parser.add_argument("-i", "--interactive", help="go to command-line mode", action="store_true")
    parser.add_argument("--max-reads", help="line reads allowed per input word (default: %(default)s)", type=int,
                        default=WordReader.MAX_READS)
    parser.add_argument("--debug", help="dump tokens and nodes and trace evaluation to stderr", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    """Runs sexpc interpreter. Exits with status 1 on any sexpc error."""
    with ErrorHandler() as error_handler:
        args = parse_args(argv)
        options = {"max_reads": args.max_reads, "debug": args.debug}

        if args.interactive:
            error_handler.fatal = False
            Shell(Session(error_handler, Session.SH_FILE, **options)).cmdloop()

        elif args.file is not None:
            Session.load(args.file, error_handler, **options).run()

        else:
            sess = Session(error_handler, Session.STR_FILE, **options)
            sess.add(DEFAULT_PROGRAM)
            sess.run()

    return 0


if __name__ == "__main__":
    sys.exit(main())
