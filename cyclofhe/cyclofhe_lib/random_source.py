"""Sources of randomness for key generation and encryption.

Every sampling operation in the scheme goes through a `RandomSource`, so tests
can swap in deterministic generators (e.g. `ZeroRng` for noise-free
encryption) without touching the cryptographic code.
"""

import abc
import random
from typing import Callable, Optional, Sequence


def _shape_generator(fn: Callable[[], int], size: int) -> list[int]:
  """Calls `fn` `size` times and collects the results."""
  if size < 0:
    raise ValueError(f'Invalid size {size}, must be non-negative.')
  return [fn() for _ in range(size)]


def _check_modulus(modulus: int) -> None:
  if modulus < 1:
    raise ValueError(f'Invalid modulus {modulus}, must be at least 1.')


class RandomSource(abc.ABC):
  """An interface for the randomness needed by the lattice scheme."""

  @abc.abstractmethod
  def uniform(self, modulus: int, size: int) -> list[int]:
    """Returns `size` integers drawn uniformly from [0, modulus)."""

  @abc.abstractmethod
  def rounded_normal(self, stddev: float, size: int) -> list[int]:
    """Returns `size` samples of N(0, stddev^2), each rounded to an integer.

    Rounding uses Python's `round`, i.e. ties go to the nearest even integer.
    """


class SystemRandomSource(RandomSource):
  """A random source backed by the operating system's entropy pool."""

  def __init__(self):
    self.rng = random.SystemRandom()

  def uniform(self, modulus: int, size: int) -> list[int]:
    _check_modulus(modulus)
    return _shape_generator(lambda: self.rng.randrange(modulus), size)

  def rounded_normal(self, stddev: float, size: int) -> list[int]:
    return _shape_generator(
        lambda: round(self.rng.normalvariate(0, stddev)), size
    )


class PseudorandomSource(RandomSource):
  """A seedable, reproducible random source.

  Not suitable for generating real keys; useful for reproducing a failure.
  """

  def __init__(self, seed: Optional[int] = None):
    self.rng = random.Random(seed)

  def uniform(self, modulus: int, size: int) -> list[int]:
    _check_modulus(modulus)
    return _shape_generator(lambda: self.rng.randrange(modulus), size)

  def rounded_normal(self, stddev: float, size: int) -> list[int]:
    return _shape_generator(lambda: round(self.rng.gauss(0, stddev)), size)


# Fixed data cycled through by CycleRng.
_CYCLE_DATA = (1, 1, 0, 0, 0, 1, 1, 1, 1, 0)


class CycleRng(RandomSource):
  """A deterministic source for tests.

  Uniform draws cycle through `data` (reduced mod the requested modulus), and
  every normal draw returns `const_normal_noise`.
  """

  def __init__(
      self, const_normal_noise: int = 0, data: Sequence[int] = _CYCLE_DATA
  ):
    if not data:
      raise ValueError('CycleRng needs at least one data value.')
    self.const_normal_noise = const_normal_noise
    self.data = tuple(data)
    self._position = 0

  def _next(self) -> int:
    value = self.data[self._position % len(self.data)]
    self._position += 1
    return value

  def uniform(self, modulus: int, size: int) -> list[int]:
    _check_modulus(modulus)
    return _shape_generator(lambda: self._next() % modulus, size)

  def rounded_normal(self, stddev: float, size: int) -> list[int]:
    return _shape_generator(lambda: self.const_normal_noise, size)


class ZeroRng(RandomSource):
  """All samples are zero."""

  def uniform(self, modulus: int, size: int) -> list[int]:
    _check_modulus(modulus)
    return _shape_generator(lambda: 0, size)

  def rounded_normal(self, stddev: float, size: int) -> list[int]:
    return _shape_generator(lambda: 0, size)


ALL_RNGS = [SystemRandomSource, PseudorandomSource, CycleRng, ZeroRng]
