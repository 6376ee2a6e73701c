"""Allocated bits: circuit variables constrained to be zero or one."""

from __future__ import annotations

from dataclasses import dataclass

from .constraint import ConstraintSystem, Variable, require
from .field import Fr


def _field_bit(value: bool) -> Fr:
    return Fr.one() if value else Fr.zero()


def _alloc_derived(cs: ConstraintSystem, annotation: str, compute):
    """Allocate a bit whose value comes from ``compute``.

    The value is only known if the constraint system asked for it.
    """
    captured = []

    def value_fn():
        result = compute()
        captured.append(result)
        return _field_bit(result)

    variable = cs.alloc(annotation, value_fn)
    return variable, (captured[0] if captured else None)


@dataclass(frozen=True)
class AllocatedBit:
    """A variable in a constraint system that is guaranteed to be zero or one."""

    variable: Variable
    value: bool | None

    @classmethod
    def alloc(cls, cs: ConstraintSystem, value) -> AllocatedBit:
        """Allocate a boolean variable, enforcing ``(1 - a) * a = 0``."""
        var = cs.alloc("boolean", lambda: _field_bit(require(value)))
        one = cs.one()
        cs.enforce(
            "boolean constraint",
            lambda lc: lc + one - var,
            lambda lc: lc + var,
            lambda lc: lc,
        )
        return cls(var, value)

    @classmethod
    def alloc_conditionally(
        cls, cs: ConstraintSystem, value, must_be_false: AllocatedBit
    ) -> AllocatedBit:
        """Allocate a boolean that must be false whenever ``must_be_false`` is true."""
        var = cs.alloc("boolean", lambda: _field_bit(require(value)))
        one = cs.one()
        # (1 - must_be_false - a) * a = 0
        cs.enforce(
            "boolean constraint",
            lambda lc: lc + one - must_be_false.variable - var,
            lambda lc: lc + var,
            lambda lc: lc,
        )
        return cls(var, value)

    @classmethod
    def xor(cls, cs: ConstraintSystem, a: AllocatedBit, b: AllocatedBit) -> AllocatedBit:
        """Allocate ``a XOR b``."""
        var, value = _alloc_derived(
            cs, "xor result", lambda: require(a.value) ^ require(b.value)
        )
        # (a + a) * b = a + b - c
        cs.enforce(
            "xor constraint",
            lambda lc: lc + a.variable + a.variable,
            lambda lc: lc + b.variable,
            lambda lc: lc + a.variable + b.variable - var,
        )
        return cls(var, value)

    @classmethod
    def and_(cls, cs: ConstraintSystem, a: AllocatedBit, b: AllocatedBit) -> AllocatedBit:
        """Allocate ``a AND b``."""
        var, value = _alloc_derived(
            cs, "and result", lambda: require(a.value) and require(b.value)
        )
        cs.enforce(
            "and constraint",
            lambda lc: lc + a.variable,
            lambda lc: lc + b.variable,
            lambda lc: lc + var,
        )
        return cls(var, value)

    @classmethod
    def and_not(cls, cs: ConstraintSystem, a: AllocatedBit, b: AllocatedBit) -> AllocatedBit:
        """Allocate ``a AND (NOT b)``."""

        def compute():
            a_val = require(a.value)
            b_val = require(b.value)
            return a_val and not b_val

        var, value = _alloc_derived(cs, "and not result", compute)
        one = cs.one()
        cs.enforce(
            "and not constraint",
            lambda lc: lc + a.variable,
            lambda lc: lc + one - b.variable,
            lambda lc: lc + var,
        )
        return cls(var, value)

    @classmethod
    def nor(cls, cs: ConstraintSystem, a: AllocatedBit, b: AllocatedBit) -> AllocatedBit:
        """Allocate ``(NOT a) AND (NOT b)``."""

        def compute():
            a_val = require(a.value)
            b_val = require(b.value)
            return not a_val and not b_val

        var, value = _alloc_derived(cs, "nor result", compute)
        one = cs.one()
        cs.enforce(
            "nor constraint",
            lambda lc: lc + one - a.variable,
            lambda lc: lc + one - b.variable,
            lambda lc: lc + var,
        )
        return cls(var, value)


def field_into_allocated_bits_le(cs: ConstraintSystem, value) -> list[AllocatedBit]:
    """Allocate the ``Fr.NUM_BITS`` bits of ``value``, least significant first."""
    if value is None:
        big_endian = [None] * Fr.NUM_BITS
    else:
        char_bits = reversed(Fr.char_le_bits())
        big_endian = []
        found_one = False
        for bit, char_bit in zip(reversed(value.to_le_bits()), char_bits):
            found_one |= char_bit
            if found_one:
                big_endian.append(bit)
        if len(big_endian) != Fr.NUM_BITS:
            raise AssertionError("unexpected bit length for a field element")

    return [
        AllocatedBit.alloc(cs.namespace(f"bit {i}"), bit)
        for i, bit in enumerate(reversed(big_endian))
    ]