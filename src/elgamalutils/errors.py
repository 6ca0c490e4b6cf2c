"""Error taxonomy for the ElGamal utilities.

Every failure surfaced by the library derives from `ElGamalError`. Failures coming from the integer layer (parsing,
allocation, modular arithmetic) are mapped onto `UnderlyingArithmeticFailure` at the API boundary, keeping the
original exception as the cause.

Typical usage example:

    with arithmetic_boundary():
        m = from_decimal(message)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import contextlib
from typing import Iterator


class ElGamalError(Exception):
    """Base class for all errors raised by elgamalutils."""


class InvalidArgument(ElGamalError, ValueError):
    """A caller-provided value is outside the supported range (bit length, plaintext, ciphertext)."""


class UnderlyingArithmeticFailure(ElGamalError, RuntimeError):
    """The integer arithmetic layer failed.

    Attributes:
        source: The original exception, if the failure was mapped from one.
    """

    def __init__(self, message: str, source: BaseException | None = None) -> None:
        super().__init__(message)
        self.source = source

    @classmethod
    def from_error(cls, err: BaseException) -> "UnderlyingArithmeticFailure":
        """Maps an arithmetic-layer exception onto the library's error type.

        Args:
            err: The exception raised by the integer layer.

        Returns:
            A new UnderlyingArithmeticFailure wrapping `err`.
        """
        return cls(f"{type(err).__name__}: {err}", err)


@contextlib.contextmanager
def arithmetic_boundary() -> Iterator[None]:
    """Converts integer-layer failures raised inside the block into `UnderlyingArithmeticFailure`.

    Library errors pass through untouched.

    Raises:
        UnderlyingArithmeticFailure: If the block raised ValueError, TypeError, ArithmeticError or MemoryError.
    """
    try:
        yield
    except ElGamalError:
        raise
    except (ValueError, TypeError, ArithmeticError, MemoryError) as err:
        raise UnderlyingArithmeticFailure.from_error(err) from err
