"""Class encapsulating params for the cyclotomic lattice scheme."""

import dataclasses


def is_prime(n: int) -> bool:
  """Returns True if n is prime (trial division, fine for ring indices)."""
  if n < 2:
    return False
  if n % 2 == 0:
    return n == 2
  divisor = 3
  while divisor * divisor <= n:
    if n % divisor == 0:
      return False
    divisor += 2
  return True


@dataclasses.dataclass(frozen=True)
class SchemeParameters:
  """Scheme parameters, immutable for the lifetime of a scheme."""

  # the ring index m. Elements live in Z[x]/(Phi_m(x)) and have m-1
  # coefficients, which is only correct for prime m.
  ring_index: int

  # the ciphertext modulus q.
  ciphertext_modulus: int

  # the standard deviation of the rounded Gaussian noise.
  noise_stddev: float

  # the modulus-boost factor p used by the switch key. It must be odd so that
  # the parity-preserving rounding during relinearization is well defined.
  boost_modulus: int

  # the modulus p * q of the switch key.
  switch_modulus: int = dataclasses.field(init=False)

  def __post_init__(self) -> None:
    if not is_prime(self.ring_index):
      raise ValueError(
          f'Ring index must be prime, got {self.ring_index}. Composite indices'
          ' need degree phi(m) and are not supported.'
      )
    if self.ciphertext_modulus < 2:
      raise ValueError(
          f'Ciphertext modulus must be >= 2, got {self.ciphertext_modulus}.'
      )
    if self.noise_stddev < 0:
      raise ValueError(
          f'Noise standard deviation must be >= 0, got {self.noise_stddev}.'
      )
    if self.boost_modulus < 1 or self.boost_modulus % 2 == 0:
      raise ValueError(
          'The modulus-boost factor p must be a positive odd integer, got'
          f' {self.boost_modulus}.'
      )
    object.__setattr__(
        self, 'switch_modulus', self.boost_modulus * self.ciphertext_modulus
    )


# The following are toy parameters that should only be used for testing.
TOY_PARAMS_M3_Q65 = SchemeParameters(
    ring_index=3, ciphertext_modulus=65, noise_stddev=2.0, boost_modulus=67
)
TOY_PARAMS_M3_Q257 = SchemeParameters(
    ring_index=3, ciphertext_modulus=257, noise_stddev=2.0, boost_modulus=259
)
# Sits close to the noise boundary: multiplication occasionally decodes wrongly
# with these parameters, and more often as the noise grows past ~1.2.
TOY_PARAMS_M3_Q507 = SchemeParameters(
    ring_index=3, ciphertext_modulus=507, noise_stddev=1.1, boost_modulus=509
)
# Wide noise margins; a single multiplication decodes reliably.
DEMO_PARAMS_M7 = SchemeParameters(
    ring_index=7,
    ciphertext_modulus=1000003,
    noise_stddev=2.0,
    boost_modulus=1000005,
)
