"""Noise diagnostics for ciphertexts.

The scheme does not track noise, and decoding silently returns garbage once the
phase c0 - sk * c1 wraps around q. These helpers measure how close a ciphertext
is to that point. They need the secret key, so they are for development and
parameter tuning only.

The measured phase is already reduced mod q, so a ciphertext whose noise has
wrapped cannot be told apart from one with small noise. The measurements are
meaningful only while the budget is positive.
"""

import math

from absl import logging
from cyclofhe.cyclofhe_lib import ciphertext
from cyclofhe.cyclofhe_lib import ring_element
from cyclofhe.cyclofhe_lib import scheme as scheme_lib


def noise_magnitude(
    scheme: scheme_lib.Scheme,
    sk: ring_element.RingElement,
    ct: ciphertext.Ciphertext,
) -> int:
  """Returns the largest absolute coefficient of the phase of ct."""
  phase = scheme.decode_without_denoising(sk, ct)
  return max(abs(c) for c in phase.coefficients)


def noise_budget_bits(
    scheme: scheme_lib.Scheme,
    sk: ring_element.RingElement,
    ct: ciphertext.Ciphertext,
) -> float:
  """Returns log2(q/4) - log2(|phase|), the remaining bits of noise budget.

  Args:
    scheme: the scheme ct was encrypted under.
    sk: the secret key.
    ct: the ciphertext to inspect.

  Returns:
    The number of bits the noise may still grow by before it reaches q/4. A
    non-positive value means further operations are likely to decode wrongly.
  """
  magnitude = noise_magnitude(scheme, sk, ct)
  # A zero phase is treated as magnitude 1 to avoid domain error.
  budget = math.log2(scheme.q / 4) - math.log2(max(1, magnitude))
  if budget <= 0:
    logging.warning(
        'Noise budget exhausted: |phase| = %d, q/4 = %s (%.2f bits).',
        magnitude,
        scheme.q / 4,
        budget,
    )
  return budget


def is_decryptable(
    scheme: scheme_lib.Scheme,
    sk: ring_element.RingElement,
    ct: ciphertext.Ciphertext,
) -> bool:
  """Returns True if the phase of ct is below q/4."""
  return 4 * noise_magnitude(scheme, sk, ct) < scheme.q
