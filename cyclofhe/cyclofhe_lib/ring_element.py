"""Elements of the cyclotomic integer ring Z[x]/(Phi_m(x)) for prime m.

For prime m the cyclotomic polynomial Phi_m has degree m-1, so an element is
stored as its m-1 coefficients, lowest degree first. Products are computed
modulo x^m - 1 and the x^(m-1) term is then eliminated (see `polymul`).

Composite m would need degree phi(m) and a different reduction rule; that is
not supported.

Elements are immutable values. Every operation returns a new element.
"""

import dataclasses
import operator
from typing import Iterable, Optional, Union

from cyclofhe.cyclofhe_lib import polymul
from cyclofhe.cyclofhe_lib import random_source


def centered_mod(value: int, modulus: int) -> int:
  """Reduces value into the centered range (-modulus/2, modulus/2].

  For modulus 5 the representatives are {-2, -1, 0, 1, 2}, and for modulus 2
  they are {0, 1}.

  Args:
    value: the integer to reduce.
    modulus: a positive modulus.

  Returns:
    The unique representative of value mod modulus in (-modulus/2, modulus/2].
  """
  if modulus < 1:
    raise ValueError(f'Modulus must be positive, got {modulus}.')
  reduced = value % modulus
  if 2 * reduced > modulus:
    reduced -= modulus
  return reduced


@dataclasses.dataclass(frozen=True, eq=False)
class RingElement:
  """An element of Z[x]/(Phi_m(x)), optionally tagged with a modulus."""

  # the ring index m, assumed prime.
  m: int

  # the m-1 coefficients, starting from lowest degree to highest.
  coefficients: tuple[int, ...]

  # the modulus the coefficients were last centered-reduced by, or None if the
  # element holds exact integers.
  q: Optional[int] = None

  def __post_init__(self) -> None:
    if self.m < 2:
      raise ValueError(f'Ring index must be at least 2, got {self.m}.')
    coefficients = tuple(operator.index(c) for c in self.coefficients)
    if len(coefficients) != self.m - 1:
      raise ValueError(
          f'Expected {self.m - 1} coefficients for m={self.m}, got'
          f' {len(coefficients)}: {list(coefficients)}'
      )
    object.__setattr__(self, 'coefficients', coefficients)

  @classmethod
  def zero(cls, m: int) -> 'RingElement':
    return cls(m, (0,) * (m - 1))

  @classmethod
  def constant(cls, m: int, value: int) -> 'RingElement':
    return cls(m, (value,) + (0,) * (m - 2))

  @classmethod
  def sample_uniform(
      cls, m: int, q: int, prg: random_source.RandomSource
  ) -> 'RingElement':
    """Samples an element with coefficients uniform in (-q/2, q/2]."""
    raw = prg.uniform(modulus=q, size=m - 1)
    return cls(m, tuple(centered_mod(c, q) for c in raw), q)

  @classmethod
  def sample_gaussian(
      cls, m: int, delta: float, prg: random_source.RandomSource
  ) -> 'RingElement':
    """Samples an element with rounded N(0, delta^2) coefficients.

    Args:
      m: the ring index.
      delta: the standard deviation of the normal distribution.
      prg: the source of randomness.

    Returns:
      An unreduced element whose coefficients are the rounded samples.
    """
    return cls(m, tuple(prg.rounded_normal(stddev=delta, size=m - 1)))

  def _check_compatible(self, other: 'RingElement') -> None:
    if self.m != other.m:
      raise ValueError(
          f'Ring index `m` must be the same: self = {self.m}, other ='
          f' {other.m}'
      )

  def _with_coefficients(
      self, coefficients: Iterable[int], q: Optional[int] = None
  ) -> 'RingElement':
    return RingElement(self.m, tuple(coefficients), self.q if q is None else q)

  def __len__(self) -> int:
    return len(self.coefficients)

  def __iter__(self):
    return iter(self.coefficients)

  def __add__(self, other: 'RingElement') -> 'RingElement':
    """Coefficient-wise sum. The result keeps self's modulus tag unreduced."""
    if not isinstance(other, RingElement):
      return NotImplemented
    self._check_compatible(other)
    return self._with_coefficients(
        a + b for a, b in zip(self.coefficients, other.coefficients)
    )

  def __sub__(self, other: 'RingElement') -> 'RingElement':
    if not isinstance(other, RingElement):
      return NotImplemented
    self._check_compatible(other)
    return self._with_coefficients(
        a - b for a, b in zip(self.coefficients, other.coefficients)
    )

  def __mul__(self, other: Union['RingElement', int]) -> 'RingElement':
    """Ring product, or scalar product when other is an int."""
    if isinstance(other, int):
      return self.scalar_mul(other)
    if not isinstance(other, RingElement):
      return NotImplemented
    self._check_compatible(other)
    return self._with_coefficients(
        polymul.cyclotomic_mul(self.coefficients, other.coefficients)
    )

  def __rmul__(self, other: int) -> 'RingElement':
    if isinstance(other, int):
      return self.scalar_mul(other)
    return NotImplemented

  def __neg__(self) -> 'RingElement':
    return self._with_coefficients(-c for c in self.coefficients)

  def __mod__(self, modulus: int) -> 'RingElement':
    if not isinstance(modulus, int):
      return NotImplemented
    return self.centered_mod(modulus)

  def scalar_mul(self, scalar: int) -> 'RingElement':
    return self._with_coefficients(c * scalar for c in self.coefficients)

  def centered_mod(self, modulus: int) -> 'RingElement':
    """Reduces every coefficient into (-modulus/2, modulus/2]."""
    return self._with_coefficients(
        (centered_mod(c, modulus) for c in self.coefficients), q=modulus
    )

  def __eq__(self, other: object) -> bool:
    """Coefficient-wise equality; the modulus tag is not compared."""
    if not isinstance(other, RingElement):
      return NotImplemented
    self._check_compatible(other)
    return self.coefficients == other.coefficients

  def __hash__(self) -> int:
    return hash((self.m, self.coefficients))

  def __str__(self) -> str:
    # this does not need to be fast because it will only be used in development.
    s = ' + '.join(
        f'{coeff} x^{power}'
        for (power, coeff) in enumerate(self.coefficients)
        if coeff != 0
    )
    return s if s else '0'
