"""Input supply for read_int/read_str: whitespace-delimited words pulled on demand from a line reader."""

from collections import deque

from sexpc.lang.error import InputExhaustedError


class WordReader:
    """Buffers the words of the lines read so far. stream is anything with readline() returning str ('' at EOF)."""
    MAX_READS = 10  # attempts per word before giving up on the input

    def __init__(self, stream, max_reads=MAX_READS):
        self.stream = stream
        self.max_reads = max_reads
        self.words = deque()

    def next_word(self):
        """Returns the next word, reading more lines while none is buffered. Raises InputExhaustedError if no word
        shows up within max_reads attempts (EOF keeps returning empty lines, so this also bounds EOF).
        """
        for __ in range(self.max_reads):
            if self.words:
                return self.words.popleft()

            line = self.stream.readline()
            if isinstance(line, bytes):
                line = line.decode(errors="replace")
            self.words.extend(line.split())

        raise InputExhaustedError("expected a word but none was given", diagnosis=False)
