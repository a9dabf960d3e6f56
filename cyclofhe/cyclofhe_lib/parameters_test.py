"""Tests for parameters."""

from cyclofhe.cyclofhe_lib import parameters

from absl.testing import absltest
from absl.testing import parameterized


class IsPrimeTest(parameterized.TestCase):

  @parameterized.parameters(2, 3, 5, 7, 11, 13, 97, 7919)
  def test_primes(self, n):
    self.assertTrue(parameters.is_prime(n))

  @parameterized.parameters(-7, 0, 1, 4, 9, 15, 91, 7917)
  def test_non_primes(self, n):
    self.assertFalse(parameters.is_prime(n))


class SchemeParametersTest(parameterized.TestCase):

  def test_switch_modulus_is_derived(self):
    params = parameters.SchemeParameters(
        ring_index=3, ciphertext_modulus=65, noise_stddev=2.0, boost_modulus=67
    )
    self.assertEqual(65 * 67, params.switch_modulus)

  @parameterized.parameters(0, 2, 68, -3)
  def test_invalid_boost_modulus(self, boost_modulus):
    with self.assertRaises(ValueError):
      parameters.SchemeParameters(
          ring_index=3,
          ciphertext_modulus=65,
          noise_stddev=2.0,
          boost_modulus=boost_modulus,
      )

  @parameterized.named_parameters(
      dict(testcase_name='composite_index', m=4, q=65, delta=2.0),
      dict(testcase_name='trivial_index', m=1, q=65, delta=2.0),
      dict(testcase_name='small_modulus', m=3, q=1, delta=2.0),
      dict(testcase_name='negative_noise', m=3, q=65, delta=-0.5),
  )
  def test_invalid_parameters(self, m, q, delta):
    with self.assertRaises(ValueError):
      parameters.SchemeParameters(
          ring_index=m,
          ciphertext_modulus=q,
          noise_stddev=delta,
          boost_modulus=67,
      )

  def test_parameters_are_immutable(self):
    with self.assertRaises(AttributeError):
      parameters.TOY_PARAMS_M3_Q65.ciphertext_modulus = 7

  @parameterized.parameters(
      parameters.TOY_PARAMS_M3_Q65,
      parameters.TOY_PARAMS_M3_Q257,
      parameters.TOY_PARAMS_M3_Q507,
      parameters.DEMO_PARAMS_M7,
  )
  def test_presets_have_odd_boost(self, params):
    self.assertEqual(1, params.boost_modulus % 2)


if __name__ == '__main__':
  absltest.main()
