"""Polynomial multiplication kernels for the prime cyclotomic ring.

An element of Z[x]/(Phi_m(x)) is stored as its m-1 lowest coefficients. To
multiply, the two operands are convolved modulo (x^m - 1), which yields m
accumulator slots, and then the x^(m-1) slot is eliminated using

  x^(m-1) = -(1 + x + ... + x^(m-2)),

i.e. its value is subtracted from every other slot and the slot is dropped.

Two kernels implement this and agree bit for bit:

  - `jit_cyclotomic_mul`, a jitted int32 matmul against a circulant matrix,
    used whenever every intermediate value provably fits in int32.
  - `wide_cyclotomic_mul`, an exact convolution over Python integers (NumPy
    object dtype), used otherwise.
"""

from typing import Sequence

from absl import logging
import jax
import jax.numpy as jnp
import numpy as np

# Intermediate values must stay strictly below this to use the int32 kernel.
INT32_BOUND = 2**31


def _check_lengths(lhs: Sequence[int], rhs: Sequence[int]) -> None:
  if len(lhs) != len(rhs):
    raise ValueError(
        f'Operands must have the same length: lhs={len(lhs)}, rhs={len(rhs)}'
    )
  if not lhs:
    raise ValueError('Operands must have at least one coefficient.')


def max_accumulator_magnitude(lhs: Sequence[int], rhs: Sequence[int]) -> int:
  """Bounds every intermediate value computed while multiplying lhs by rhs.

  Each accumulator slot sums at most len(lhs) products, and the elimination of
  the top slot can at most double a slot's magnitude.

  Args:
    lhs: the m-1 coefficients of the left operand.
    rhs: the m-1 coefficients of the right operand.

  Returns:
    An upper bound on the absolute value of any accumulator entry.
  """
  _check_lengths(lhs, rhs)
  lhs_max = max(abs(c) for c in lhs)
  rhs_max = max(abs(c) for c in rhs)
  return 2 * len(lhs) * lhs_max * rhs_max


@jax.named_call
@jax.jit
def _circulant(x: jnp.ndarray) -> jnp.ndarray:
  """Generates the circulant matrix of x.

  For input: [1, 9, 2], generates the following matrix:
  [[1 2 9]
   [9 1 2]
   [2 9 1]]

  Args:
    x: the 1D array of length n

  Returns:
    A 2D matrix C of shape (n, n) with C[k, i] = x[(k - i) mod n], so that
    C @ y is the cyclic convolution of x and y.
  """
  n = x.shape[0]
  indices = (jnp.arange(n)[:, None] - jnp.arange(n)[None, :]) % n
  return x[indices]


@jax.named_call
@jax.jit
def _jit_cyclotomic_mul(lhs: jnp.ndarray, rhs: jnp.ndarray) -> jnp.ndarray:
  padded_lhs = jnp.append(lhs, jnp.zeros((1,), dtype=lhs.dtype))
  padded_rhs = jnp.append(rhs, jnp.zeros((1,), dtype=rhs.dtype))
  cyclic = jnp.matmul(
      _circulant(padded_rhs),
      padded_lhs,
      preferred_element_type=jnp.int32,
  )
  return cyclic[:-1] - cyclic[-1]


def jit_cyclotomic_mul(lhs: Sequence[int], rhs: Sequence[int]) -> list[int]:
  """Multiplies with the int32 kernel.

  The caller must ensure `max_accumulator_magnitude(lhs, rhs) < INT32_BOUND`;
  jax integer arithmetic wraps silently on overflow.

  Args:
    lhs: the m-1 coefficients of the left operand.
    rhs: the m-1 coefficients of the right operand.

  Returns:
    The m-1 coefficients of the product.
  """
  _check_lengths(lhs, rhs)
  result = _jit_cyclotomic_mul(
      jnp.asarray(lhs, dtype=jnp.int32), jnp.asarray(rhs, dtype=jnp.int32)
  )
  return [int(c) for c in np.asarray(result)]


def wide_cyclotomic_mul(lhs: Sequence[int], rhs: Sequence[int]) -> list[int]:
  """Multiplies with exact (unbounded) integer arithmetic."""
  _check_lengths(lhs, rhs)
  m = len(lhs) + 1
  conv = np.convolve(np.array(lhs, dtype=object), np.array(rhs, dtype=object))

  # Fold the linear convolution modulo x^m - 1.
  cyclic = [0] * m
  for i, c in enumerate(conv):
    cyclic[i % m] += int(c)

  top = cyclic[m - 1]
  return [c - top for c in cyclic[: m - 1]]


def cyclotomic_mul(lhs: Sequence[int], rhs: Sequence[int]) -> list[int]:
  """Multiplies two ring elements given by their m-1 coefficients.

  Args:
    lhs: the m-1 coefficients of the left operand.
    rhs: the m-1 coefficients of the right operand.

  Returns:
    The m-1 coefficients of lhs * rhs in Z[x]/(Phi_m(x)).
  """
  bound = max_accumulator_magnitude(lhs, rhs)
  if bound == 0:
    return [0] * len(lhs)
  if bound < INT32_BOUND:
    return jit_cyclotomic_mul(lhs, rhs)
  logging.debug(
      'Using the wide multiplication kernel (bound=%d, degree=%d).',
      bound,
      len(lhs),
  )
  return wide_cyclotomic_mul(lhs, rhs)
