import unittest

from sexpc.lang.value import Float, Identifier, Integer, String, Vector


class ValueTestCase(unittest.TestCase):

    def test_display(self):
        cases = {
            Identifier("abc"): "abc",
            Integer(42): "42",
            Integer(-7): "-7",
            Float(1.5): "1.5",
            Float(2.0): "2",
            Float(float("inf")): "inf",
            Float(float("-inf")): "-inf",
            Float(-2.5): "-2.5",
            Float(1e-7): "0.0000001",
            Float(1.5e-10): "0.00000000015",
            Float(1e20): "100000000000000000000",
            String(b"hello world"): "hello world",
            String(b""): "",
            Vector(()): "[]",
            Vector((Integer(1), String(b"a"), Vector((Integer(2), Integer(3))))): "[1a[23]]",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, str(case), case)
            self.assertEqual(expected.encode(), bytes(case), case)

    def test_raw_bytes(self):
        self.assertEqual(b"\xff", bytes(String(b"\xff")))
        self.assertEqual(b"[\xff]", bytes(Vector((String(b"\xff"),))))
        self.assertEqual("�", str(String(b"\xff")))

    def test_equality(self):
        should_pass = [(Integer(1), Integer(1)), (Vector((Integer(1),)), Vector((Integer(1),)))]
        for left, right in should_pass:
            self.assertEqual(left, right)

        should_fail = [(Integer(1), Identifier("1")), (String(b"1"), Integer(1)), (Vector(()), Vector((Integer(0),)))]
        for left, right in should_fail:
            self.assertNotEqual(left, right)


if __name__ == '__main__':
    unittest.main()
