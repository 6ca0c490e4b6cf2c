"""Provides core ElGamal functionalities: key objects, encryption and decryption.

Facilitates "textbook" ElGamal over the quadratic-residue subgroup of a safe prime. Keys and ciphertexts are
immutable value objects whose fields are decimal strings, the sole interchange representation. Arithmetic happens on
native integers, converted at the edges.

Typical usage example:

    pub, priv = generate_keys(256)
    c = pub.encrypt("1234567")
    r = priv.decrypt(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import dataclasses
import re
import secrets
import warnings

from elgamalutils import keygen
from elgamalutils.errors import arithmetic_boundary
from elgamalutils.errors import InvalidArgument

_DECIMAL = re.compile(r"0|-?[1-9][0-9]*")


def _check_fields(obj: "Ciphertext | PublicKey | PrivateKey") -> None:
    """Checks that every field of a key or ciphertext is a parseable decimal string."""
    for fld in dataclasses.fields(obj):
        value = getattr(obj, fld.name)
        if not isinstance(value, str):
            raise InvalidArgument(f"Field {fld.name} must be a decimal string, got {type(value).__name__}.")
        from_decimal(value)


@dataclasses.dataclass(frozen=True)
class Ciphertext:
    """An ElGamal ciphertext pair.

    Attributes:
        c1: The ephemeral component, g^r mod p.
        c2: The masked message, h^r * m mod p.
    """
    c1: str
    c2: str

    def __post_init__(self) -> None:
        _check_fields(self)

    def numbers(self) -> tuple[int, int]:
        """Returns the parsed (c1, c2) pair."""
        return from_decimal(self.c1), from_decimal(self.c2)


@dataclasses.dataclass(frozen=True)
class PublicKey:
    """ElGamal Public Key.

    Attributes:
        p: The safe prime modulus.
        g: The generator of the quadratic-residue subgroup.
        h: The public value, g^x mod p.
    """
    p: str
    g: str
    h: str

    def __post_init__(self) -> None:
        _check_fields(self)

    def numbers(self) -> tuple[int, int, int]:
        """Returns the parsed (p, g, h) triple."""
        return from_decimal(self.p), from_decimal(self.g), from_decimal(self.h)

    def encrypt(self, message: str) -> Ciphertext:
        """Use the public key to encrypt the message.

        Every call draws a fresh ephemeral exponent r, uniform in [0, p - 1).

        Args:
            message: Decimal string of the message representative m, with 1 <= m <= p.

        Returns:
            The ciphertext pair.

        Raises:
            InvalidArgument: If the message is out of range for the current key.
            UnderlyingArithmeticFailure: If the message is not a decimal integer.
        """
        p, g, h = self.numbers()
        # Longer canonical digit strings exceed p, reject them before int() hits its conversion limit.
        if isinstance(message, str) and _DECIMAL.fullmatch(message) and len(message) > len(self.p):
            raise InvalidArgument("Message representative must be in range [1, p]")
        m = from_decimal(message)
        if not 1 <= m <= p:
            raise InvalidArgument("Message representative must be in range [1, p]")
        if m == p:
            warnings.warn("Message representative equal to p reduces to 0 and is not hidden!", RuntimeWarning)
        with arithmetic_boundary():
            r = secrets.randbelow(p - 1)
            c1 = pow(g, r, p)
            c2 = pow(h, r, p) * m % p
        return Ciphertext(to_decimal(c1), to_decimal(c2))


@dataclasses.dataclass(frozen=True)
class PrivateKey:
    """ElGamal Private Key.

    Holds the group parameters alongside the secret exponent, so the connected public key can always be re-derived.

    Attributes:
        p: The safe prime modulus.
        g: The generator of the quadratic-residue subgroup.
        x: The secret exponent, 2 <= x <= p - 2.
    """
    p: str
    g: str
    x: str = dataclasses.field(repr=False)

    def __post_init__(self) -> None:
        _check_fields(self)
        p, _, x = self.numbers()
        if not 2 <= x <= p - 2:
            raise InvalidArgument("Secret exponent must be in range [2, p - 2]")

    def numbers(self) -> tuple[int, int, int]:
        """Returns the parsed (p, g, x) triple."""
        return from_decimal(self.p), from_decimal(self.g), from_decimal(self.x)

    def public_key(self) -> PublicKey:
        """Derives the public key connected to this private key."""
        p, g, x = self.numbers()
        with arithmetic_boundary():
            h = pow(g, x, p)
        return PublicKey(self.p, self.g, to_decimal(h))

    def decrypt(self, ciphertext: Ciphertext) -> str:
        """Decrypts the ciphertext using the private key.

        The shared secret s = c1^x is inverted as s^(p - 2), by Fermat's little theorem.

        Args:
            ciphertext: The ciphertext pair to decrypt.

        Returns:
            Decimal string of the message representative.

        Raises:
            InvalidArgument: If a ciphertext component is out of range [0, p - 1].
        """
        p, _, x = self.numbers()
        c1, c2 = ciphertext.numbers()
        if not (0 <= c1 < p and 0 <= c2 < p):
            raise InvalidArgument("Ciphertext components must be in range [0, p - 1]")
        with arithmetic_boundary():
            s = pow(c1, x, p)
            m = c2 * pow(s, p - 2, p) % p
        # p is the only admissible plaintext congruent to 0.
        if m == 0:
            m = p
        return to_decimal(m)

    @classmethod
    def generate(cls, bits: int, iters: None | int = None) -> "PrivateKey":
        """Generates an ElGamal Private Key over a freshly generated group.

        Args:
            bits: Bit length of the modulus, in range [6, 1024].
            iters: Miller-Rabin iterations used during safe prime generation.

        Returns:
            A new generated ElGamal Private Key.
        """
        return generate_keys(bits, iters)[1]


def generate_keys(bits: int, iters: None | int = None) -> tuple[PublicKey, PrivateKey]:
    """Generates a key pair sharing one freshly generated group.

    Args:
        bits: Bit length of the modulus, in range [6, 1024].
        iters: Miller-Rabin iterations used during safe prime generation.

    Returns:
        A tuple of (public key, private key).

    Raises:
        InvalidArgument: If `bits` is out of range.
        UnderlyingArithmeticFailure: If the integer layer failed.
    """
    with arithmetic_boundary():
        (p, g, h), (_, _, x) = keygen.generate_key_pair(bits, iters)
    sp, sg = to_decimal(p), to_decimal(g)
    return PublicKey(sp, sg, to_decimal(h)), PrivateKey(sp, sg, to_decimal(x))


def encrypt(public_key: PublicKey, message: str) -> Ciphertext:
    """Encrypts the decimal `message` under `public_key`. See `PublicKey.encrypt()`."""
    return public_key.encrypt(message)


def decrypt(private_key: PrivateKey, ciphertext: Ciphertext) -> str:
    """Decrypts `ciphertext` under `private_key`. See `PrivateKey.decrypt()`."""
    return private_key.decrypt(ciphertext)


def check_key_pair(public_key: PublicKey, private_key: PrivateKey) -> bool:
    """Sanity check for a key pair: shared group, and a public value distinct from the secret.

    Compares the decimal strings only, this is not a proof that h = g^x mod p.
    """
    return public_key.p == private_key.p and public_key.g == private_key.g and public_key.h != private_key.x


def to_decimal(value: int) -> str:
    """Converts an integer to its decimal string representation.

    Raises:
        UnderlyingArithmeticFailure: If the integer cannot be rendered.
    """
    with arithmetic_boundary():
        return str(value)


def from_decimal(value: str) -> int:
    """Converts a decimal string to an integer.

    Args:
        value: The canonical decimal string: ASCII digits, an optional minus sign, no leading zeros.

    Returns:
        The represented integer.

    Raises:
        UnderlyingArithmeticFailure: If `value` is not a canonical decimal integer string.
    """
    with arithmetic_boundary():
        if _DECIMAL.fullmatch(value) is None:
            raise ValueError(f"invalid canonical decimal literal: {value!r}")
        return int(value)
