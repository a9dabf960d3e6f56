"""Tests for polymul."""

import hypothesis
from hypothesis import strategies
from cyclofhe.cyclofhe_lib import polymul
import numpy as np

from absl.testing import absltest
from absl.testing import parameterized


def _schoolbook(lhs: list[int], rhs: list[int]) -> list[int]:
  """Direct O(m^2) reference multiplication."""
  m = len(lhs) + 1
  acc = [0] * m
  for i, a in enumerate(lhs):
    for j, b in enumerate(rhs):
      acc[(i + j) % m] += a * b
  return [c - acc[m - 1] for c in acc[: m - 1]]


@strategies.composite
def _operand_pairs(draw, max_value):
  degree = draw(strategies.sampled_from([1, 2, 4, 6, 10, 12]))
  coeffs = strategies.lists(
      strategies.integers(min_value=-max_value, max_value=max_value),
      min_size=degree,
      max_size=degree,
  )
  return draw(coeffs), draw(coeffs)


class PolymulTest(parameterized.TestCase):

  @parameterized.named_parameters(
      dict(
          testcase_name='m3_first',
          lhs=[11, -6],
          rhs=[21, 15],
          expected=[231 + 90, 165 - 126 + 90],
      ),
      dict(
          testcase_name='m3_identity', lhs=[1, 0], rhs=[5, -7], expected=[5, -7]
      ),
      # x * x = x^2 = -1 - x in Z[x]/(x^2 + x + 1)
      dict(
          testcase_name='m3_x_squared', lhs=[0, 1], rhs=[0, 1], expected=[-1, -1]
      ),
      # x^3 * x^2 = x^5 = 1 in Z[x]/(Phi_5)
      dict(
          testcase_name='m5_wraps_to_one',
          lhs=[0, 0, 0, 1],
          rhs=[0, 0, 1, 0],
          expected=[1, 0, 0, 0],
      ),
  )
  def test_known_products(self, lhs, rhs, expected):
    self.assertEqual(expected, polymul.cyclotomic_mul(lhs, rhs))
    self.assertEqual(expected, polymul.wide_cyclotomic_mul(lhs, rhs))
    self.assertEqual(expected, polymul.jit_cyclotomic_mul(lhs, rhs))

  def test_mismatched_lengths_rejected(self):
    with self.assertRaises(ValueError):
      polymul.cyclotomic_mul([1, 2], [1, 2, 3])

  def test_empty_operands_rejected(self):
    with self.assertRaises(ValueError):
      polymul.cyclotomic_mul([], [])

  def test_zero_operand_with_huge_partner(self):
    self.assertEqual([0, 0], polymul.cyclotomic_mul([0, 0], [2**70, -(2**70)]))

  def test_accumulator_bound(self):
    self.assertEqual(
        2 * 2 * 11 * 21,
        polymul.max_accumulator_magnitude([11, -6], [21, 15]),
    )

  def test_large_values_use_exact_arithmetic(self):
    big = 2**40 + 3
    lhs = [big, -big, 7]
    rhs = [big, 1, -big]
    self.assertGreaterEqual(
        polymul.max_accumulator_magnitude(lhs, rhs), polymul.INT32_BOUND
    )
    self.assertEqual(_schoolbook(lhs, rhs), polymul.cyclotomic_mul(lhs, rhs))

  @hypothesis.given(_operand_pairs(max_value=2**10))
  @hypothesis.settings(deadline=None)
  def test_kernels_agree(self, operands):
    lhs, rhs = operands
    expected = _schoolbook(lhs, rhs)
    np.testing.assert_array_equal(
        expected, polymul.jit_cyclotomic_mul(lhs, rhs)
    )
    self.assertEqual(expected, polymul.wide_cyclotomic_mul(lhs, rhs))

  @hypothesis.given(_operand_pairs(max_value=2**62))
  @hypothesis.settings(deadline=None)
  def test_wide_kernel_is_exact(self, operands):
    lhs, rhs = operands
    self.assertEqual(_schoolbook(lhs, rhs), polymul.cyclotomic_mul(lhs, rhs))


if __name__ == '__main__':
  absltest.main()
