"""Key generation, encryption and decryption for the cyclotomic lattice scheme.

This is a Ring-LWE scheme over Z[x]/(Phi_m(x)) that encrypts the parity of
each plaintext coefficient:

  sk          uniform mod 2
  pk = (a, b) a uniform mod q,  b = a * sk + 2e (mod q)
  swk = (A, B) A uniform mod pq, B = A * sk - p * sk^2 + 2e (mod pq)
  encode(m)   c0 = b * v + 2e0 + m,  c1 = a * v + 2e1 (mod q), v uniform mod 2
  decode(c)   (c0 - sk * c1 mod q) mod 2

Decoding is correct only while the accumulated noise stays below q/4. Noise is
not tracked: when it overflows, decoding silently returns a wrong plaintext.
Choosing (q, delta, p) with enough margin is the caller's responsibility; see
the `noise` module for a diagnostic.
"""

from typing import Optional

from absl import logging
from cyclofhe.cyclofhe_lib import ciphertext
from cyclofhe.cyclofhe_lib import keys
from cyclofhe.cyclofhe_lib import parameters
from cyclofhe.cyclofhe_lib import random_source
from cyclofhe.cyclofhe_lib import ring_element

RingElement = ring_element.RingElement


class Scheme:
  """The lattice scheme for one fixed set of parameters."""

  def __init__(
      self,
      params: parameters.SchemeParameters,
      prg: Optional[random_source.RandomSource] = None,
  ) -> None:
    self._params = params
    self._prg = prg if prg is not None else random_source.SystemRandomSource()

  @property
  def params(self) -> parameters.SchemeParameters:
    return self._params

  @property
  def m(self) -> int:
    return self._params.ring_index

  @property
  def q(self) -> int:
    return self._params.ciphertext_modulus

  @property
  def delta(self) -> float:
    return self._params.noise_stddev

  @property
  def p(self) -> int:
    return self._params.boost_modulus

  def _gaussian(self) -> RingElement:
    return RingElement.sample_gaussian(self.m, self.delta, self._prg)

  def gen_secret_key(self) -> RingElement:
    """Generates a secret key with coefficients in {0, 1}."""
    logging.debug('Generating secret key for m=%d.', self.m)
    return RingElement.sample_uniform(self.m, 2, self._prg)

  def gen_public_key(self, sk: RingElement) -> keys.PublicKey:
    """Generates the public key (a, a * sk + 2e mod q)."""
    logging.debug('Generating public key for m=%d, q=%d.', self.m, self.q)
    a = RingElement.sample_uniform(self.m, self.q, self._prg)
    e = self._gaussian()
    return keys.PublicKey(a=a, b=(a * sk + e * 2) % self.q)

  def gen_switch_key(self, sk: RingElement) -> keys.SwitchKey:
    """Generates the relinearization key used by ciphertext multiplication.

    Args:
      sk: the secret key.

    Returns:
      The pair (A, B) with B = A * sk - p * sk^2 + 2e (mod p * q).
    """
    switch_modulus = self._params.switch_modulus
    logging.debug(
        'Generating switch key for m=%d, p*q=%d.', self.m, switch_modulus
    )
    a = RingElement.sample_uniform(self.m, switch_modulus, self._prg)
    e = self._gaussian()
    b = (a * sk - sk * sk * self.p + e * 2) % switch_modulus
    return keys.SwitchKey(a=a, b=b)

  def encode(
      self,
      plaintext: RingElement,
      pk: keys.PublicKey,
      switch_key: keys.SwitchKey,
  ) -> ciphertext.Ciphertext:
    """Encrypts the parity of each coefficient of plaintext.

    Args:
      plaintext: the message, normally with coefficients in {0, 1}.
      pk: the public key.
      switch_key: the switch key, copied into the ciphertext so that it can
        later be multiplied.

    Returns:
      A ciphertext (c0, c1) mod q.
    """
    v = RingElement.sample_uniform(self.m, 2, self._prg)
    e0 = self._gaussian()
    e1 = self._gaussian()
    c0 = (pk.b * v + e0 * 2 + plaintext) % self.q
    c1 = (pk.a * v + e1 * 2) % self.q
    return ciphertext.Ciphertext(
        c0=c0, c1=c1, q=self.q, p=self.p, switch_key=switch_key
    )

  def decode_without_denoising(
      self, sk: RingElement, ct: ciphertext.Ciphertext
  ) -> RingElement:
    """Returns the phase c0 - sk * c1 mod q, i.e. plaintext + 2 * noise."""
    return (ct.c0 - sk * ct.c1) % self.q

  def decode(self, sk: RingElement, ct: ciphertext.Ciphertext) -> RingElement:
    """Decrypts a ciphertext, recovering the plaintext mod 2."""
    return self.decode_without_denoising(sk, ct) % 2
