"""Arithmetic in the scalar field of the BLS12-381 curve."""

from __future__ import annotations

import secrets

MODULUS = 0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001
_REPR_BITS = 256
_S = 32
_GENERATOR = 7
_ROOT_OF_UNITY = pow(_GENERATOR, (MODULUS - 1) >> _S, MODULUS)


def _le_bits(value: int) -> list[bool]:
    return [bool((value >> i) & 1) for i in range(_REPR_BITS)]


class Fr:
    """An element of the prime field of order ``MODULUS``."""

    __slots__ = ("_value",)

    MODULUS = MODULUS
    NUM_BITS = 255
    CAPACITY = 254
    S = _S

    def __init__(self, value=0):
        if isinstance(value, Fr):
            value = value._value
        elif not isinstance(value, int):
            raise TypeError(f"cannot build a field element from {type(value).__name__}")
        self._value = value % MODULUS

    @classmethod
    def zero(cls) -> Fr:
        return cls(0)

    @classmethod
    def one(cls) -> Fr:
        return cls(1)

    @classmethod
    def root_of_unity(cls) -> Fr:
        """A primitive 2**S-th root of unity."""
        return cls(_ROOT_OF_UNITY)

    @classmethod
    def multiplicative_generator(cls) -> Fr:
        return cls(_GENERATOR)

    @classmethod
    def random(cls, rng=None) -> Fr:
        """A uniformly random element, drawn from ``rng`` when one is given."""
        if rng is None:
            return cls(secrets.randbelow(MODULUS))
        return cls(rng.randrange(MODULUS))

    @classmethod
    def from_str(cls, text: str) -> Fr:
        """Parse a decimal number; leading zeros and non-digits are rejected."""
        if not text or not (text.isascii() and text.isdigit()):
            raise ValueError(f"not a decimal field element: {text!r}")
        if text != "0" and text.startswith("0"):
            raise ValueError(f"leading zeros are not allowed: {text!r}")
        return cls(int(text))

    @classmethod
    def char_le_bits(cls) -> list[bool]:
        """The bits of the field characteristic, least significant first."""
        return _le_bits(MODULUS)

    def square(self) -> Fr:
        return Fr(self._value * self._value)

    def double(self) -> Fr:
        return Fr(self._value << 1)

    def invert(self) -> Fr:
        if self._value == 0:
            raise ZeroDivisionError("zero has no inverse in the field")
        return Fr(pow(self._value, MODULUS - 2, MODULUS))

    def pow(self, exponent: int) -> Fr:
        if exponent < 0:
            return self.invert().pow(-exponent)
        return Fr(pow(self._value, exponent, MODULUS))

    def is_zero(self) -> bool:
        return self._value == 0

    def to_le_bits(self) -> list[bool]:
        """The 256-bit little-endian representation of this element."""
        return _le_bits(self._value)

    @staticmethod
    def _coerce(other):
        if isinstance(other, Fr):
            return other._value
        if isinstance(other, int):
            return other
        return None

    def __add__(self, other):
        value = self._coerce(other)
        return NotImplemented if value is None else Fr(self._value + value)

    __radd__ = __add__

    def __sub__(self, other):
        value = self._coerce(other)
        return NotImplemented if value is None else Fr(self._value - value)

    def __rsub__(self, other):
        value = self._coerce(other)
        return NotImplemented if value is None else Fr(value - self._value)

    def __mul__(self, other):
        value = self._coerce(other)
        return NotImplemented if value is None else Fr(self._value * value)

    __rmul__ = __mul__

    def __neg__(self) -> Fr:
        return Fr(-self._value)

    def __eq__(self, other):
        if not isinstance(other, Fr):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash((Fr, self._value))

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"Fr({self._value:#x})"