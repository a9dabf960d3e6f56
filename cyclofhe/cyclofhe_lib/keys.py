"""Key types for the cyclotomic lattice scheme.

The secret key is a bare `RingElement` with coefficients in {0, 1}.
"""

import dataclasses

from cyclofhe.cyclofhe_lib import ring_element


@dataclasses.dataclass(frozen=True)
class PublicKey:
  """A public key (a, b) with b = a * sk + 2e (mod q)."""

  # uniform mod q
  a: ring_element.RingElement

  # a * sk + 2e, reduced mod q
  b: ring_element.RingElement


@dataclasses.dataclass(frozen=True)
class SwitchKey:
  """A relinearization key (A, B) with B = A * sk - p * sk^2 + 2e (mod pq).

  Used only by ciphertext multiplication, to replace the sk^2 term of a
  degree-2 ciphertext with a term in sk.
  """

  # uniform mod p * q
  a: ring_element.RingElement

  # A * sk - p * sk^2 + 2e, reduced mod p * q
  b: ring_element.RingElement
