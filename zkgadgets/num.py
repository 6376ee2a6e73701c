"""Numbers in the scalar field, as circuit variables or linear combinations."""

from __future__ import annotations

from dataclasses import dataclass

from .bits import AllocatedBit, field_into_allocated_bits_le
from .boolean import Boolean
from .constraint import (
    ConstraintSystem,
    DivisionByZero,
    LinearCombination,
    Variable,
    require,
)
from .field import Fr


def _alloc_captured(cs: ConstraintSystem, annotation: str, compute):
    """Allocate a variable; its value is known only if the system asked for it."""
    captured = []

    def value_fn():
        result = Fr(compute())
        captured.append(result)
        return result

    variable = cs.alloc(annotation, value_fn)
    return variable, (captured[0] if captured else None)


def _kary_and(cs: ConstraintSystem, bits: list) -> AllocatedBit:
    """AND every bit in ``bits`` together, one gate at a time."""
    if not bits:
        raise ValueError("need at least one bit")
    current = bits[0]
    for i, bit in enumerate(bits[1:], start=1):
        current = AllocatedBit.and_(cs.namespace(f"and {i}"), current, bit)
    return current


def _pack(bits_le, variable: Variable) -> LinearCombination:
    """The combination ``sum(2**i * bit_i) - variable``."""
    packed = LinearCombination.zero()
    coeff = Fr.one()
    for bit in bits_le:
        packed = packed + (coeff, bit.variable)
        coeff = coeff.double()
    return packed - variable


@dataclass(frozen=True)
class AllocatedNum:
    """A field element allocated as a variable in a constraint system."""

    value: Fr | None
    variable: Variable

    @classmethod
    def alloc(cls, cs: ConstraintSystem, value_fn) -> AllocatedNum:
        variable, value = _alloc_captured(cs, "num", value_fn)
        return cls(value, variable)

    def inputize(self, cs: ConstraintSystem) -> None:
        """Expose this number as a public input."""
        one = cs.one()
        input_var = cs.alloc_input("input variable", lambda: require(self.value))
        cs.enforce(
            "enforce input is correct",
            lambda lc: lc + input_var,
            lambda lc: lc + one,
            lambda lc: lc + self.variable,
        )

    def to_bits_le_strict(self, cs: ConstraintSystem) -> list[Boolean]:
        """Little-endian bits of this number, constrained to be below the modulus."""
        a_bits = None if self.value is None else iter(reversed(self.value.to_le_bits()))
        limit_bits = reversed((-Fr.one()).to_le_bits())

        result = []
        last_run = None
        current_run = []
        found_one = False
        i = 0

        for limit_bit in limit_bits:
            a_bit = None if a_bits is None else next(a_bits)

            found_one |= limit_bit
            if not found_one:
                if a_bit:
                    raise AssertionError("value has bits above the field size")
                continue

            if limit_bit:
                bit = AllocatedBit.alloc(cs.namespace(f"bit {i}"), a_bit)
                current_run.append(bit)
                result.append(bit)
            else:
                if current_run:
                    if last_run is not None:
                        current_run.append(last_run)
                    last_run = _kary_and(cs.namespace(f"run ending at {i}"), current_run)
                    current_run = []
                if last_run is None:
                    raise AssertionError("the characteristic always starts with a one")
                # If the run so far matches the limit, this bit must be zero.
                bit = AllocatedBit.alloc_conditionally(
                    cs.namespace(f"bit {i}"), a_bit, last_run
                )
                result.append(bit)

            i += 1

        if current_run:
            raise AssertionError("the characteristic must end on a run of zeros")

        packed = _pack(reversed(result), self.variable)
        cs.enforce("unpacking constraint", lambda lc: lc, lambda lc: lc, lambda _: packed)

        return [Boolean.from_bit(bit) for bit in reversed(result)]

    def to_bits_le(self, cs: ConstraintSystem) -> list[Boolean]:
        """Little-endian bits of this number; congruent representations are allowed."""
        bits = field_into_allocated_bits_le(cs, self.value)
        packed = _pack(bits, self.variable)
        cs.enforce("unpacking constraint", lambda lc: lc, lambda lc: lc, lambda _: packed)
        return [Boolean.from_bit(bit) for bit in bits]

    def mul(self, cs: ConstraintSystem, other: AllocatedNum) -> AllocatedNum:
        variable, value = _alloc_captured(
            cs, "product num", lambda: require(self.value) * require(other.value)
        )
        cs.enforce(
            "multiplication constraint",
            lambda lc: lc + self.variable,
            lambda lc: lc + other.variable,
            lambda lc: lc + variable,
        )
        return AllocatedNum(value, variable)

    def square(self, cs: ConstraintSystem) -> AllocatedNum:
        variable, value = _alloc_captured(
            cs, "squared num", lambda: require(self.value).square()
        )
        cs.enforce(
            "squaring constraint",
            lambda lc: lc + self.variable,
            lambda lc: lc + self.variable,
            lambda lc: lc + variable,
        )
        return AllocatedNum(value, variable)

    def assert_nonzero(self, cs: ConstraintSystem) -> None:
        """Constrain this number to have a multiplicative inverse."""

        def inverse():
            value = require(self.value)
            if value.is_zero():
                raise DivisionByZero("zero has no inverse")
            return value.invert()

        inv = cs.alloc("ephemeral inverse", inverse)
        one = cs.one()
        cs.enforce(
            "nonzero assertion constraint",
            lambda lc: lc + self.variable,
            lambda lc: lc + inv,
            lambda lc: lc + one,
        )

    @classmethod
    def conditionally_reverse(
        cls, cs: ConstraintSystem, a: AllocatedNum, b: AllocatedNum, condition: Boolean
    ) -> tuple[AllocatedNum, AllocatedNum]:
        """Return ``(b, a)`` when ``condition`` holds and ``(a, b)`` otherwise."""
        one = cs.one()
        unit = Fr.one()

        c = cls.alloc(
            cs.namespace("conditional reversal result 1"),
            lambda: require(b.value) if require(condition.get_value()) else require(a.value),
        )
        cs.enforce(
            "first conditional reversal",
            lambda lc: lc + a.variable - b.variable,
            lambda _: condition.lc(one, unit),
            lambda lc: lc + a.variable - c.variable,
        )

        d = cls.alloc(
            cs.namespace("conditional reversal result 2"),
            lambda: require(a.value) if require(condition.get_value()) else require(b.value),
        )
        cs.enforce(
            "second conditional reversal",
            lambda lc: lc + b.variable - a.variable,
            lambda _: condition.lc(one, unit),
            lambda lc: lc + b.variable - d.variable,
        )

        return c, d


@dataclass(frozen=True)
class Num:
    """A linear combination of variables together with its value, if known."""

    value: Fr | None
    combination: LinearCombination

    @classmethod
    def zero(cls) -> Num:
        return cls(Fr.zero(), LinearCombination.zero())

    @classmethod
    def from_allocated(cls, num: AllocatedNum) -> Num:
        return cls(num.value, LinearCombination.from_variable(num.variable))

    def lc(self, coeff) -> LinearCombination:
        return LinearCombination.zero() + (Fr(coeff), self.combination)

    def add_bool_with_coeff(self, one: Variable, bit: Boolean, coeff) -> Num:
        coeff = Fr(coeff)
        bit_value = bit.get_value()
        if self.value is None or bit_value is None:
            value = None
        else:
            value = self.value + coeff if bit_value else self.value
        return Num(value, self.combination + bit.lc(one, coeff))

    def add(self, other: Num) -> Num:
        if self.value is None:
            value = other.value
        elif other.value is None:
            value = self.value
        else:
            value = self.value + other.value
        return Num(value, self.combination + other.combination)

    def scale(self, scalar) -> Num:
        scalar = Fr(scalar)
        value = None if self.value is None else self.value * scalar
        return Num(value, self.combination.scaled(scalar))