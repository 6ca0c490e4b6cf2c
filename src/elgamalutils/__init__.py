"""Various ElGamal Utilities in an Academic Sense.

Provides ElGamal Key Generation, Encryption and Decryption over the quadratic-residue subgroup of a safe prime.
Furthermore, provides the safe-prime and generator utilities under-the-hood.

Typical usage example:

    p, g = generate_group(256)
    pub, priv = generate_keys(256)
    c = pub.encrypt("1234567")
    r = priv.decrypt(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from elgamalutils.elgamal import check_key_pair
from elgamalutils.elgamal import Ciphertext
from elgamalutils.elgamal import decrypt
from elgamalutils.elgamal import encrypt
from elgamalutils.elgamal import generate_keys
from elgamalutils.elgamal import PrivateKey
from elgamalutils.elgamal import PublicKey
from elgamalutils.errors import ElGamalError
from elgamalutils.errors import InvalidArgument
from elgamalutils.errors import UnderlyingArithmeticFailure
from elgamalutils.keygen import check_prime
from elgamalutils.keygen import find_generator
from elgamalutils.keygen import generate_group
from elgamalutils.keygen import generate_safe_prime
from elgamalutils.keygen import get_pre_primes

__version__ = "0.0.1"
__all__ = [
    "PublicKey",
    "PrivateKey",
    "Ciphertext",
    "generate_keys",
    "encrypt",
    "decrypt",
    "check_key_pair",
    "ElGamalError",
    "InvalidArgument",
    "UnderlyingArithmeticFailure",
    "get_pre_primes",
    "check_prime",
    "generate_safe_prime",
    "find_generator",
    "generate_group",
]
