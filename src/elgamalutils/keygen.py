"""Core Key Generation Utility, focusing on safe primes and their quadratic-residue subgroups.

This module is responsible for generating ElGamal group parameters and key numbers. A group is a safe prime `p`
(`p = 2q + 1` with `q` prime) together with a generator `g` of the order-`q` subgroup of quadratic residues.
Primality is probabilistic: trial division against cached small primes, followed by a FIPS 186-5 based
Miller-Rabin test.

Typical usage example:

    p = generate_safe_prime(256)
    g = find_generator(p)
    p, g = generate_group(256)
    (p, g, h), (p, g, x) = generate_key_pair(256)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import secrets
import warnings

from elgamalutils.errors import InvalidArgument
from elgamalutils.errors import UnderlyingArithmeticFailure

MIN_BITS: int = 6
MAX_BITS: int = 1024
SECURE_BITS: int = 512

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_SAFE_PRIME_DRAWS_PER_BIT: int = 8
_GENERATOR_DRAW_CAP: int = 1000


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes to generate a set of primes up to `n`.
    Includes memory space optimization and sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    Uses `_SMALL_PRIMES` as a cache. Regeneration occurs if the requested range is greater, forced by `change` or
    the cache is empty.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order. All primes at least to `n` or more unless `change` is True.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """Check the provided `no` against the known small primes.

    Args:
         no: The number to check. Must be integer and non-negative.
         n: The number up to which to generate primes. Defaults to 10000.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime**2 > no:
            return True
        if no % prime == 0:
            return False
    return True


def _miller_rabin(w: int, iters: int) -> bool:
    """Perform Miller-Rabin primality test.

    Performs the Miller-Rabin primality test as specified in FIPS 186-5.

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w == 2 or w == 3
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for _ in range(iters):
        b = secrets.randbelow(w - 3) + 2
        z = pow(b, m, w)
        if z == 1 or z == w - 1:
            continue
        for _ in range(1, a):
            z = pow(z, 2, w)
            if z == w - 1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def _default_iterations(candidate: int) -> int:
    """Miller-Rabin rounds per FIPS 186-5 Appendix C.1, by candidate size."""
    if candidate.bit_length() <= 512:
        return 40
    if candidate.bit_length() <= 1024:
        return 56
    if candidate.bit_length() <= 1536:
        return 64
    if candidate.bit_length() <= 2048:
        return 70
    return 74


def check_prime(candidate: int, iters: None | int = None, n: int = 10000) -> bool:
    """Performs a composite Primality test, using a limited amount of trial divisions, before a Miller-Rabin test.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform.
            If not provided will use defaults as per the FIPS 186-5 Appendix C.1
        n: The number up to which to generate primes. Defaults to 10000.
            Passed to `_trial_division()`.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    if iters is None:
        iters = _default_iterations(candidate)
    return _miller_rabin(candidate, iters)


def _check_bits(bits: int) -> None:
    if isinstance(bits, bool) or not isinstance(bits, int):
        raise InvalidArgument(f"Bit length must be an integer, got {type(bits).__name__}.")
    if not MIN_BITS <= bits <= MAX_BITS:
        raise InvalidArgument(f"Bit length must be in range [{MIN_BITS}, {MAX_BITS}], got {bits}.")


def generate_safe_prime(bits: int, iters: None | int = None, n: int = 10000) -> int:
    """Generate a probable safe prime of exactly `bits` bits.

    Draws the Sophie Germain half `q` with its two top bits and its low bit set, so that `p = 2q + 1` has exactly
    `bits` bits. Both halves must survive trial division before either pays for Miller-Rabin.

    Args:
        bits: Bit length of the safe prime. Must be in range [MIN_BITS, MAX_BITS].
        iters: Number of Miller-Rabin iterations per half. Defaults per FIPS 186-5 Appendix C.1.
        n: Trial division bound. Defaults to 10000.

    Returns:
        A probable prime `p` such that `(p - 1) // 2` is a probable prime too.

    Raises:
        InvalidArgument: If `bits` is out of range.
        UnderlyingArithmeticFailure: If generation loops way beyond a reasonable time and a bit.
    """
    _check_bits(bits)
    size = bits - 1
    msk = (1 << size - 1) | (1 << size - 2) | 1
    rep_cap = _SAFE_PRIME_DRAWS_PER_BIT * bits**2
    for _ in range(rep_cap):
        q = secrets.randbits(size) | msk
        p = 2 * q + 1
        if not (_trial_division(q, n) and _trial_division(p, n)):
            continue
        q_iters = iters if iters is not None else _default_iterations(q)
        p_iters = iters if iters is not None else _default_iterations(p)
        if _miller_rabin(q, q_iters) and _miller_rabin(p, p_iters):
            return p
    raise UnderlyingArithmeticFailure(
        f"Run an improbable {rep_cap} amount of loops with no safe prime found. Check system random number generator.")


def find_generator(p: int, max_draws: int = _GENERATOR_DRAW_CAP) -> int:
    """Find a generator of the quadratic-residue subgroup modulo the safe prime `p`.

    The group modulo `p` has order `2q`, so a random element whose `q`-th and 2nd powers both differ from 1 generates
    the whole group. Its square then generates the order-`q` subgroup of quadratic residues. Roughly half of all draws
    succeed.

    Args:
        p: A safe prime, or 2 for the degenerate boundary.
        max_draws: Ceiling on the number of rejected candidates. Defaults to `_GENERATOR_DRAW_CAP`.

    Returns:
        A generator `g` of the order-`(p - 1) // 2` subgroup.

    Raises:
        InvalidArgument: If `p` is 3 or below 2.
        UnderlyingArithmeticFailure: If no generator is found within `max_draws` draws.
    """
    if p == 2:
        return pow(2, 2, p)
    if p < 5:
        raise InvalidArgument(f"{p} is not a usable safe prime.")
    q = (p - 1) // 2
    for _ in range(max_draws):
        candidate = secrets.randbelow(p - 2) + 2
        if pow(candidate, q, p) == 1:
            continue
        g = pow(candidate, 2, p)
        if g != 1:
            return g
    raise UnderlyingArithmeticFailure(
        f"No generator found modulo {p} after {max_draws} draws. Check the modulus and system random number generator.")


def generate_group(bits: int, iters: None | int = None) -> tuple[int, int]:
    """Generates ElGamal group parameters.

    Args:
        bits: Bit length of the modulus. Must be in range [MIN_BITS, MAX_BITS].
        iters: Miller-Rabin iterations, passed to `generate_safe_prime()`.

    Returns:
        A tuple (p, g) of a safe prime and a generator of its quadratic-residue subgroup.

    Raises:
        InvalidArgument: If `bits` is out of range.
    """
    _check_bits(bits)
    if bits < SECURE_BITS:
        warnings.warn(f"A {bits} bit group is toy-sized and unsecure! Please use with care.", RuntimeWarning)
    p = generate_safe_prime(bits, iters)
    return p, find_generator(p)


def generate_key_pair(bits: int, iters: None | int = None) -> tuple[tuple[int, int, int], tuple[int, int, int]]:
    """Generates an ElGamal key pair.

    Generates a fresh group, then a secret exponent `x` uniform in [2, p - 2] and the public value `h = g^x mod p`.

    Args:
        bits: Bit length of the modulus. Must be in range [MIN_BITS, MAX_BITS].
        iters: Miller-Rabin iterations, passed to `generate_group()`.

    Returns:
        A tuple of (public, private) sub-tuples, (p, g, h) and (p, g, x).
    """
    p, g = generate_group(bits, iters)
    # randbelow(p - 3) is in [0, p - 4], shifting by 2 gives [2, p - 2].
    x = secrets.randbelow(p - 3) + 2
    h = pow(g, x, p)
    return (p, g, h), (p, g, x)
