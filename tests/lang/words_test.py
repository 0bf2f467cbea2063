import io
import unittest

from sexpc.lang.error import InputExhaustedError
from sexpc.lang.words import WordReader


class CountingStream:
    """Line reader that counts readline calls."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.reads = 0

    def readline(self):
        self.reads += 1
        return self.lines.pop(0) if self.lines else ""


class WordReaderTestCase(unittest.TestCase):

    def test_next_word(self):
        words = WordReader(io.StringIO("1 2\n\n  three\tfour\r\nfive"))
        self.assertEqual(["1", "2", "three", "four", "five"], [words.next_word() for __ in range(5)])

    def test_reads_lines_on_demand(self):
        stream = CountingStream(["a b\n", "c\n"])
        words = WordReader(stream)

        self.assertEqual("a", words.next_word())
        self.assertEqual(1, stream.reads)
        self.assertEqual("b", words.next_word())
        self.assertEqual(1, stream.reads)
        self.assertEqual("c", words.next_word())
        self.assertEqual(2, stream.reads)

    def test_skips_blank_lines(self):
        words = WordReader(CountingStream(["\n", "   \n", "x\n"]))
        self.assertEqual("x", words.next_word())

    def test_exhausted(self):
        stream = CountingStream([])
        words = WordReader(stream, max_reads=4)

        self.assertRaises(InputExhaustedError, words.next_word)
        self.assertEqual(4, stream.reads)

    def test_too_many_blank_lines(self):
        words = WordReader(CountingStream(["\n"] * 10 + ["late\n"]))
        self.assertRaises(InputExhaustedError, words.next_word)

    def test_bytes_lines(self):
        words = WordReader(io.BytesIO(b"12 ab\n"))
        self.assertEqual(["12", "ab"], [words.next_word(), words.next_word()])


if __name__ == '__main__':
    unittest.main()
