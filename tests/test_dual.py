import unittest
import torch
from dualdiff.dual import Dual, DivisionByZero, DomainError


class TestDualArithmetic(unittest.TestCase):
    def setUp(self):
        self.a = Dual(3.0, 2.0)
        self.b = Dual(5.0, -1.0)

    def test_add(self):
        self.assertEqual(self.a + self.b, Dual(8.0, 1.0))

    def test_sub(self):
        self.assertEqual(self.a - self.b, Dual(-2.0, 3.0))

    def test_mul(self):
        # ax*bϵ + aϵ*bx = 3*(-1) + 2*5 = 7
        self.assertEqual(self.a * self.b, Dual(15.0, 7.0))

    def test_div(self):
        res = self.a / self.b
        self.assertAlmostEqual(res.primal, 0.6)
        # (5*2 - 3*(-1)) / 25 = 13/25
        self.assertAlmostEqual(res.tangent, 0.52)

    def test_div_by_zero_primal(self):
        with self.assertRaises(DivisionByZero) as cm:
            self.a / Dual(0.0, 1.0)
        self.assertIn("zero primal", str(cm.exception))

    def test_div_by_zero_constant(self):
        with self.assertRaises(DivisionByZero):
            self.a / 0
        # still a ZeroDivisionError for callers that catch the builtin
        with self.assertRaises(ZeroDivisionError):
            1.0 / Dual(0.0, 1.0)

    def test_neg_pos_abs(self):
        self.assertEqual(-self.a, Dual(-3.0, -2.0))
        self.assertIs(+self.a, self.a)
        self.assertEqual(abs(Dual(-2.0, 1.5)), Dual(2.0, -1.5))
        self.assertEqual(abs(Dual(0.0, 1.5)), Dual(0.0, 0.0))

    def test_constant_power(self):
        res = Dual(2.0, 1.0) ** 3
        self.assertEqual(res, Dual(8.0, 12.0))
        res = Dual(4.0, 1.0) ** 0.5
        self.assertAlmostEqual(res.primal, 2.0)
        self.assertAlmostEqual(res.tangent, 0.25)
        self.assertEqual(Dual(0.0, 1.0) ** 0, Dual(1.0, 0.0))

    def test_power_domain(self):
        with self.assertRaises(DomainError):
            Dual(-4.0, 1.0) ** 0.5
        with self.assertRaises(DivisionByZero):
            Dual(0.0, 1.0) ** -1
        # integer powers of negative numbers are fine
        self.assertEqual(Dual(-2.0, 1.0) ** 2, Dual(4.0, -4.0))

    def test_dual_exponent(self):
        # d/dx x^x = x^x (log x + 1)
        res = Dual(2.0, 1.0) ** Dual(2.0, 1.0)
        self.assertAlmostEqual(res.primal, 4.0)
        self.assertAlmostEqual(res.tangent, 4.0 * (0.6931471805599453 + 1.0))
        with self.assertRaises(DomainError):
            Dual(-1.0, 1.0) ** Dual(2.0, 1.0)

    def test_constant_base(self):
        # d/dx 2^x = 2^x log 2
        res = 2 ** Dual(3.0, 1.0)
        self.assertAlmostEqual(res.primal, 8.0)
        self.assertAlmostEqual(res.tangent, 8.0 * 0.6931471805599453)

    def test_constant_base_domain(self):
        with self.assertRaises(DomainError):
            0 ** Dual(1.0, 1.0)
        with self.assertRaises(DomainError):
            (-2.0) ** Dual(2.0, 1.0)


class TestPromotion(unittest.TestCase):
    def test_scalar_on_either_side(self):
        x = Dual(2.0, 1.0)
        self.assertEqual(x + 5, Dual(7.0, 1.0))
        self.assertEqual(5 + x, Dual(7.0, 1.0))
        self.assertEqual(x - 5, Dual(-3.0, 1.0))
        self.assertEqual(5 - x, Dual(3.0, -1.0))
        self.assertEqual(x * 3, Dual(6.0, 3.0))
        self.assertEqual(3 * x, Dual(6.0, 3.0))
        self.assertEqual(x / 4, Dual(0.5, 0.25))
        # (4/x)' = -4/x^2
        self.assertEqual(4 / x, Dual(2.0, -1.0))

    def test_lift(self):
        self.assertEqual(Dual.lift(3), Dual(3, 0.0))
        d = Dual(1.0, 1.0)
        self.assertIs(Dual.lift(d), d)
        with self.assertRaises(TypeError):
            Dual.lift("3")

    def test_unsupported_operand(self):
        with self.assertRaises(TypeError):
            Dual(1.0, 1.0) + "a"
        with self.assertRaises(TypeError):
            [1] * Dual(1.0, 1.0)

    def test_tensor_operand(self):
        x = Dual(torch.tensor([1.0, 2.0]), torch.ones(2))
        res = torch.tensor([3.0, 4.0]) * x
        self.assertTrue(torch.equal(res.primal, torch.tensor([3.0, 8.0])))
        self.assertTrue(torch.equal(res.tangent, torch.tensor([3.0, 4.0])))


class TestValueSemantics(unittest.TestCase):
    def test_immutable(self):
        d = Dual(1.0, 2.0)
        with self.assertRaises(AttributeError):
            d.primal = 5.0
        with self.assertRaises(AttributeError):
            d.tangent = 5.0
        with self.assertRaises(AttributeError):
            d.extra = 1

    def test_operands_untouched(self):
        a, b = Dual(1.0, 2.0), Dual(3.0, 4.0)
        a * b + a / b
        self.assertEqual(a, Dual(1.0, 2.0))
        self.assertEqual(b, Dual(3.0, 4.0))

    def test_no_nesting(self):
        with self.assertRaises(TypeError):
            Dual(Dual(1.0, 1.0), 1.0)
        with self.assertRaises(TypeError):
            Dual("1", 1.0)

    def test_equality_and_hash(self):
        self.assertEqual(Dual(1.0, 2.0), Dual(1.0, 2.0))
        self.assertNotEqual(Dual(1.0, 2.0), Dual(1.0, 3.0))
        self.assertEqual(Dual(4.0, 0.0), 4.0)
        self.assertNotEqual(Dual(4.0, 1.0), 4.0)
        self.assertEqual(len({Dual(1.0, 2.0), Dual(1.0, 2.0)}), 1)

    def test_hash_matches_lifted_constant(self):
        self.assertEqual(hash(Dual(4.0, 0.0)), hash(4.0))
        self.assertEqual(hash(Dual(4, 0.0)), hash(4))
        self.assertEqual({4.0: "a"}.get(Dual(4.0, 0.0)), "a")
        self.assertIn(Dual(2.0, 0.0), {1.0, 2.0})
        self.assertNotIn(Dual(2.0, 1.0), {1.0, 2.0})

    def test_tensor_dual_unhashable(self):
        d = Dual(torch.tensor([1.0]), torch.tensor([0.0]))
        self.assertEqual(d, Dual(torch.tensor([1.0]), torch.tensor([0.0])))
        with self.assertRaises(TypeError):
            hash(d)

    def test_ordering_uses_primal(self):
        self.assertTrue(Dual(1.0, 100.0) < Dual(2.0, -100.0))
        self.assertTrue(Dual(2.0, 0.0) >= 2)
        self.assertTrue(3 > Dual(2.0, 5.0))
        self.assertFalse(Dual(2.0, 1.0) <= 1.5)

    def test_repr(self):
        self.assertEqual(repr(Dual(1.5, -2.0)), "Dual(1.5, -2.0)")


if __name__ == "__main__":
    unittest.main()
