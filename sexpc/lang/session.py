"""Session control for the sexpc language. Ties the tokenizer, parser and evaluator to one environment and one pair of
input/output streams, either for a single program (file/string mode) or for many (command-line mode).
"""

import io
import sys

from sexpc.grammar.syntax import Document
from sexpc.lang.error import GenericException
from sexpc.lang.evaluator import Evaluator
from sexpc.lang.words import WordReader


class Session:
    """Governs a sexpc session, with control over the environment shared by the programs it runs."""
    SH_FILE = "<in>"       # command-line interpreter filename
    STR_FILE = "<string>"  # filename for programs passed as strings

    def __init__(self, error_handler=None, path=STR_FILE, stdin=None, stdout=None, max_reads=WordReader.MAX_READS,
                 debug=False):
        self.error_handler = error_handler
        if self.error_handler is not None:
            self.error_handler.register_file(path)

        self.path = path    # used for error messages
        self.debug = debug  # dump tokens/nodes and trace evaluation to stderr

        self.words = WordReader(sys.stdin if stdin is None else stdin, max_reads)
        self.stdout = sys.stdout if stdout is None else stdout

        self.environment = {}  # dict of name: Value, shared by every program run in this session
        self.to_exec = []      # Documents waiting for run
        self.results = []      # values left by the programs run so far (None if a program left nothing)

    @classmethod
    def load(cls, path, *args, **kwargs):
        """Returns a Session for the program stored at path, with that program already added."""
        try:
            with open(path, "r") as file:
                source = file.read()
        except OSError:
            raise GenericException("'{}' could not be opened", path, diagnosis=False)

        sess = cls(*args, path=path, **kwargs)
        sess.add(source)
        return sess

    def add(self, source):
        """Parses source and queues it. Evaluation is delayed until run is called. Issues found while parsing are
        reported as warnings if this session has an error handler.
        """
        document = Document(source)

        if self.error_handler is not None:
            for warning in document.warnings():
                self.error_handler.warn(warning)

        if self.debug:
            print(document.display(), file=sys.stderr)

        self.to_exec.append(document)
        return document

    def run(self):
        """Runs this session's queued programs in order. Will raise any errors that are encountered; a program that
        fails is dropped from the queue. Returns the value left by the last program.
        """
        while self.to_exec:
            document = self.to_exec.pop(0)
            evaluator = Evaluator(document, self.environment, self.words, self.stdout, self.debug)
            self.results.append(evaluator.run())

        if hasattr(self.stdout, "flush"):
            self.stdout.flush()

        return self.results[-1] if self.results else None

    def pop(self):
        """Removes and returns the most recent result."""
        return self.results.pop()


def evaluate(source, stdin=""):
    """Runs source against the words in stdin with a fresh environment and returns everything it printed. Raises a
    GenericException subclass on failure, in which case the output is discarded.
    """
    stdout = io.StringIO()

    sess = Session(stdin=io.StringIO(stdin), stdout=stdout)
    sess.add(source)
    sess.run()

    return stdout.getvalue()
