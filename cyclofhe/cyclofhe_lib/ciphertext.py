"""Ciphertexts of the cyclotomic lattice scheme and their homomorphic algebra.

A ciphertext (c0, c1) decrypts under sk to the phase c0 - sk * c1 (mod q),
which equals plaintext + 2 * noise. The plaintext is recovered from its parity,
so addition of ciphertexts adds plaintexts mod 2 and multiplication multiplies
them, as long as the noise stays below q/4.
"""

import dataclasses

from cyclofhe.cyclofhe_lib import keys
from cyclofhe.cyclofhe_lib import ring_element

RingElement = ring_element.RingElement


@dataclasses.dataclass(frozen=True)
class Ciphertext:
  """A degree-1 ciphertext carrying what it needs to be multiplied."""

  c0: RingElement

  c1: RingElement

  # the ciphertext modulus q
  q: int

  # the odd modulus-boost factor p of the switch key
  p: int

  # each ciphertext owns the switch key so that multiply is self-contained.
  switch_key: keys.SwitchKey

  def __add__(self, other: 'Ciphertext') -> 'Ciphertext':
    if not isinstance(other, Ciphertext):
      return NotImplemented
    return add(self, other)

  def __sub__(self, other: 'Ciphertext') -> 'Ciphertext':
    if not isinstance(other, Ciphertext):
      return NotImplemented
    return sub(self, other)

  def __mul__(self, other: 'Ciphertext') -> 'Ciphertext':
    if not isinstance(other, Ciphertext):
      return NotImplemented
    return multiply(self, other)

  def __str__(self) -> str:
    # only used while debugging.
    return f'[\n {self.c0}\n {self.c1}\n] mod {self.q}'


def _check_compatible(lhs: Ciphertext, rhs: Ciphertext) -> None:
  if lhs.q != rhs.q or lhs.p != rhs.p:
    raise ValueError(
        f'Ciphertext parameters must match: lhs (q={lhs.q}, p={lhs.p}), rhs'
        f' (q={rhs.q}, p={rhs.p})'
    )
  if lhs.c0.m != rhs.c0.m:
    raise ValueError(
        f'Ring index `m` must be the same: lhs = {lhs.c0.m}, rhs = {rhs.c0.m}'
    )


def add(lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
  """Adds two ciphertexts; the plaintexts add coefficient-wise mod 2."""
  _check_compatible(lhs, rhs)
  return dataclasses.replace(
      lhs,
      c0=(lhs.c0 + rhs.c0) % lhs.q,
      c1=(lhs.c1 + rhs.c1) % lhs.q,
  )


def sub(lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
  """Subtracts two ciphertexts. Mod 2 this is the same as `add`."""
  _check_compatible(lhs, rhs)
  return dataclasses.replace(
      lhs,
      c0=(lhs.c0 - rhs.c0) % lhs.q,
      c1=(lhs.c1 - rhs.c1) % lhs.q,
  )


def parity_remainder(value: int, p: int) -> int:
  """Returns the even remainder r with value - r divisible by p.

  The remainder starts as value mod p with the sign of value (truncated
  division). An odd remainder is moved by p across zero, which makes it even
  since p is odd. Subtracting an even remainder keeps the parity of the
  quotient equal to the parity of value.

  Args:
    value: a coefficient of a p-scaled ciphertext component.
    p: the odd modulus-boost factor.

  Returns:
    An even integer r with |r| < p and (value - r) % p == 0.
  """
  rem = abs(value) % p
  if value < 0:
    rem = -rem
  if rem % 2 != 0 and rem < 0:
    rem += p
  elif rem % 2 != 0 and rem > 0:
    rem -= p
  return rem


def divide_out_boost(element: RingElement, p: int) -> RingElement:
  """Divides every coefficient by p, rounding to keep parity.

  Args:
    element: a ring element scaled up by the modulus-boost factor.
    p: the odd modulus-boost factor.

  Returns:
    The element with each coefficient c replaced by (c - r) / p, where r is
    `parity_remainder(c, p)`.

  Raises:
    ArithmeticError: if some c - r is not divisible by p. This cannot happen
      for odd p and signals broken parameters or arithmetic.
  """
  coefficients = []
  for c in element.coefficients:
    rem = parity_remainder(c, p)
    if (c - rem) % p != 0:
      raise ArithmeticError(
          f'Relinearization invariant violated: ({c} - {rem}) is not'
          f' divisible by p={p}.'
      )
    coefficients.append((c - rem) // p)
  return RingElement(element.m, tuple(coefficients), element.q)


def tensor(
    lhs: Ciphertext, rhs: Ciphertext
) -> tuple[RingElement, RingElement, RingElement]:
  """Returns the degree-2 ciphertext (d0, d1, d2) of the product.

  It decrypts as d0 - sk * d1 - sk^2 * d2 = phase(lhs) * phase(rhs) (mod q).
  """
  q = lhs.q
  d0 = (lhs.c0 * rhs.c0) % q
  d1 = (lhs.c1 * rhs.c0 + lhs.c0 * rhs.c1) % q
  d2 = -(lhs.c1 * rhs.c1) % q
  return d0, d1, d2


def scale_and_fold(
    d0: RingElement,
    d1: RingElement,
    d2: RingElement,
    switch_key: keys.SwitchKey,
    q: int,
    p: int,
) -> tuple[RingElement, RingElement]:
  """Boosts (d0, d1) to modulus p * q and folds d2 in through the switch key.

  Returns (p * d0 + B * d2, p * d1 + A * d2), centered mod p * q, where
  (A, B) is the switch key. Both results still carry the factor p.
  """
  boosted_modulus = p * q
  scaled_c0 = (d0 * p + switch_key.b * d2) % boosted_modulus
  scaled_c1 = (d1 * p + switch_key.a * d2) % boosted_modulus
  return scaled_c0, scaled_c1


def relinearize(
    d0: RingElement,
    d1: RingElement,
    d2: RingElement,
    switch_key: keys.SwitchKey,
    q: int,
    p: int,
) -> tuple[RingElement, RingElement]:
  """Switches a degree-2 ciphertext back to a degree-1 ciphertext under sk.

  The degree-1 part is boosted to modulus p * q, the sk^2 term is folded in
  through the switch key (whose B - A * sk equals -p * sk^2 + 2e), and the
  factor p is divided back out with parity-preserving rounding.

  Args:
    d0: the constant term of the degree-2 ciphertext.
    d1: the sk term of the degree-2 ciphertext.
    d2: the sk^2 term of the degree-2 ciphertext.
    switch_key: the switch key for sk.
    q: the ciphertext modulus.
    p: the odd modulus-boost factor.

  Returns:
    The components (c0, c1) of a degree-1 ciphertext, reduced mod q.
  """
  scaled_c0, scaled_c1 = scale_and_fold(d0, d1, d2, switch_key, q, p)
  c0 = divide_out_boost(scaled_c0, p) % q
  c1 = divide_out_boost(scaled_c1, p) % q
  return c0, c1


def multiply(lhs: Ciphertext, rhs: Ciphertext) -> Ciphertext:
  """Multiplies two ciphertexts; the plaintexts multiply in the ring mod 2.

  Uses lhs's switch key. The result's noise grows roughly with the product of
  the input noises; nothing checks that it stays decryptable.
  """
  _check_compatible(lhs, rhs)
  d0, d1, d2 = tensor(lhs, rhs)
  c0, c1 = relinearize(d0, d1, d2, lhs.switch_key, lhs.q, lhs.p)
  return dataclasses.replace(lhs, c0=c0, c1=c1)
