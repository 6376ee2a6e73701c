"""Boolean values in a circuit: constants or views of allocated bits."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .bits import AllocatedBit, field_into_allocated_bits_le
from .constraint import ConstraintSystem, LinearCombination, Unsatisfiable, Variable
from .field import Fr


class BooleanKind(Enum):
    IS = "is"
    NOT = "not"
    CONSTANT = "constant"


@dataclass(frozen=True)
class Boolean:
    """A constant, or a plain or negated view of an ``AllocatedBit``."""

    kind: BooleanKind
    bit: AllocatedBit | None = None
    constant_value: bool | None = None

    def __post_init__(self):
        if self.kind is BooleanKind.CONSTANT:
            if self.bit is not None or self.constant_value is None:
                raise ValueError("a constant boolean holds a value and no bit")
        elif self.bit is None or self.constant_value is not None:
            raise ValueError("an allocated boolean holds a bit and no constant value")

    @classmethod
    def constant(cls, value: bool) -> Boolean:
        return cls(BooleanKind.CONSTANT, constant_value=bool(value))

    @classmethod
    def from_bit(cls, bit: AllocatedBit) -> Boolean:
        return cls(BooleanKind.IS, bit=bit)

    def is_constant(self) -> bool:
        return self.kind is BooleanKind.CONSTANT

    def get_value(self):
        """The boolean's value, or ``None`` when it is not known."""
        if self.kind is BooleanKind.CONSTANT:
            return self.constant_value
        if self.bit.value is None:
            return None
        return self.bit.value if self.kind is BooleanKind.IS else not self.bit.value

    def lc(self, one: Variable, coeff) -> LinearCombination:
        """This boolean as a linear combination, scaled by ``coeff``."""
        coeff = Fr(coeff)
        zero = LinearCombination.zero()
        if self.kind is BooleanKind.CONSTANT:
            return zero + (coeff, one) if self.constant_value else zero
        if self.kind is BooleanKind.IS:
            return zero + (coeff, self.bit.variable)
        return zero + (coeff, one) - (coeff, self.bit.variable)

    def not_(self) -> Boolean:
        """The negation of this boolean; no constraints are added."""
        if self.kind is BooleanKind.CONSTANT:
            return Boolean.constant(not self.constant_value)
        if self.kind is BooleanKind.IS:
            return Boolean(BooleanKind.NOT, bit=self.bit)
        return Boolean(BooleanKind.IS, bit=self.bit)

    def _is_const(self, value: bool) -> bool:
        return self.kind is BooleanKind.CONSTANT and self.constant_value is value

    @classmethod
    def xor(cls, cs: ConstraintSystem, a: Boolean, b: Boolean) -> Boolean:
        """``a XOR b``."""
        if a._is_const(False):
            return b
        if b._is_const(False):
            return a
        if a._is_const(True):
            return b.not_()
        if b._is_const(True):
            return a.not_()
        if a.kind is not b.kind:
            # a XOR (NOT b) = NOT (a XOR b)
            is_, not_ = (a, b) if a.kind is BooleanKind.IS else (b, a)
            return cls.xor(cs, is_, not_.not_()).not_()
        # a XOR b = (NOT a) XOR (NOT b)
        return cls.from_bit(AllocatedBit.xor(cs, a.bit, b.bit))

    @classmethod
    def and_(cls, cs: ConstraintSystem, a: Boolean, b: Boolean) -> Boolean:
        """``a AND b``."""
        if a._is_const(False) or b._is_const(False):
            return cls.constant(False)
        if a._is_const(True):
            return b
        if b._is_const(True):
            return a
        if a.kind is BooleanKind.IS and b.kind is BooleanKind.IS:
            return cls.from_bit(AllocatedBit.and_(cs, a.bit, b.bit))
        if a.kind is BooleanKind.NOT and b.kind is BooleanKind.NOT:
            return cls.from_bit(AllocatedBit.nor(cs, a.bit, b.bit))
        is_, not_ = (a, b) if a.kind is BooleanKind.IS else (b, a)
        return cls.from_bit(AllocatedBit.and_not(cs, is_.bit, not_.bit))

    @classmethod
    def enforce_equal(cls, cs: ConstraintSystem, a: Boolean, b: Boolean) -> None:
        """Constrain ``a`` and ``b`` to be equal; two differing constants raise."""
        one = cs.one()
        if a.is_constant() and b.is_constant():
            if a.constant_value != b.constant_value:
                raise Unsatisfiable("constant booleans differ")
            return
        if a._is_const(True) or b._is_const(True):
            other = b if a.is_constant() else a
            cs.enforce(
                "enforce equal to one",
                lambda lc: lc,
                lambda lc: lc,
                lambda lc: lc + one - other.lc(one, Fr.one()),
            )
            return
        if a._is_const(False) or b._is_const(False):
            other = b if a.is_constant() else a
            cs.enforce(
                "enforce equal to zero",
                lambda lc: lc,
                lambda lc: lc,
                lambda _: other.lc(one, Fr.one()),
            )
            return
        cs.enforce(
            "enforce equal",
            lambda lc: lc,
            lambda lc: lc,
            lambda _: a.lc(one, Fr.one()) - b.lc(one, Fr.one()),
        )


def u64_into_boolean_vec_le(cs: ConstraintSystem, value) -> list[Boolean]:
    """Allocate the 64 bits of an unsigned integer, least significant first."""
    if value is None:
        bit_values = [None] * 64
    else:
        if not 0 <= value < 1 << 64:
            raise ValueError(f"value does not fit in 64 bits: {value}")
        bit_values = [bool((value >> i) & 1) for i in range(64)]
    return [
        Boolean.from_bit(AllocatedBit.alloc(cs.namespace(f"bit {i}"), bit))
        for i, bit in enumerate(bit_values)
    ]


def field_into_boolean_vec_le(cs: ConstraintSystem, value) -> list[Boolean]:
    """Allocate the bits of a field element as booleans, least significant first."""
    return [Boolean.from_bit(bit) for bit in field_into_allocated_bits_le(cs, value)]