import io
import os
import tempfile
import unittest

from sexpc import evaluate
from sexpc.lang.error import ErrorHandler, GenericException, InputExhaustedError, ParseError, UnknownOperatorError
from sexpc.lang.session import Session
from sexpc.lang.value import Integer, String, Vector
from sexpc.main import DEFAULT_PROGRAM


class EvaluateTestCase(unittest.TestCase):

    def test_default_program(self):
        cases = {
            "1 2 3 abc": "6 abc \n",
            "10\n20\n30\nxyz\n": "60 xyz \n",
            "-1 1 0 zero extra words": "0 zero \n",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate(DEFAULT_PROGRAM, case), case)

    def test_default_program_exhausted(self):
        should_raise = ["", "42", "1 2 3"]
        for case in should_raise:
            self.assertRaises(InputExhaustedError, evaluate, DEFAULT_PROGRAM, case)

    def test_evaluate(self):
        cases = {
            "(println (join \"-\" a b c))": "a-b-c \n",
            "(println (sum 1 2 3) (sum))": "6 0 \n",
            "(vec (println 1) // comment\n (println \"two words\"))": "1 \ntwo words \n",
            "(sum 1 2)": "",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, evaluate(case), case)

    def test_fresh_environment(self):
        evaluate("(let X 1)")
        self.assertEqual("X \n", evaluate("(println X)"))

    def test_failure_discards_output(self):
        self.assertRaises(UnknownOperatorError, evaluate, "(vec (println 1) (frobnicate))")

    def test_deep_nesting(self):
        with self.assertRaises(ParseError) as context:
            evaluate("(vec " * 5000 + ")" * 5000)
        self.assertIn("nested too deeply", context.exception.msg)

        self.assertEqual("[[[]]] \n", evaluate("(println " + "(vec " * 3 + ")" * 4))


class SessionTestCase(unittest.TestCase):

    def test_shared_environment(self):
        stdout = io.StringIO()
        sess = Session(stdin=io.StringIO("5\n"), stdout=stdout)

        sess.add("(let A (read_int))")
        sess.add("(let B (vec A A))")
        self.assertEqual(Vector((Integer(5), Integer(5))), sess.run())
        self.assertEqual([Integer(5), Vector((Integer(5), Integer(5)))], sess.results)

        sess.add("(println B)")
        sess.run()
        self.assertEqual("[55] \n", stdout.getvalue())
        self.assertEqual(Integer(0), sess.pop())

    def test_failed_program_is_dropped(self):
        sess = Session(stdin=io.StringIO(""), stdout=io.StringIO())

        sess.add("(frobnicate)")
        self.assertRaises(UnknownOperatorError, sess.run)
        self.assertEqual([], sess.to_exec)

        sess.add("(let S \"ok\")")
        self.assertEqual(String(b"ok"), sess.run())

    def test_warnings(self):
        stream = io.StringIO()
        sess = Session(ErrorHandler(stream=stream), stdin=io.StringIO(""), stdout=io.StringIO())

        sess.add("(vec 1 2] extra")
        output = stream.getvalue()
        self.assertIn("<string>:1:9:", output)
        self.assertIn("warning:", output)
        self.assertEqual(2, output.count("warning:"))

    def test_no_warnings_without_handler(self):
        sess = Session(stdin=io.StringIO(""), stdout=io.StringIO())
        document = sess.add("(vec 1 2] extra")
        self.assertEqual(2, len(document.issues))

    def test_load(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, "prog.sx")
            with open(path, "w") as file:
                file.write("(println (sum (read_int) 1))\n")

            stdout = io.StringIO()
            sess = Session.load(path, stdin=io.StringIO("41"), stdout=stdout)
            sess.run()

        self.assertEqual(path, sess.path)
        self.assertEqual("42 \n", stdout.getvalue())

    def test_load_missing(self):
        with self.assertRaises(GenericException) as context:
            Session.load(os.path.join(tempfile.gettempdir(), "does", "not", "exist.sx"))
        self.assertIn("could not be opened", context.exception.msg)


if __name__ == '__main__':
    unittest.main()
