"""The SHA-256 ``Ch`` and ``Maj`` functions over circuit booleans."""

from __future__ import annotations

from .bits import AllocatedBit
from .boolean import Boolean, BooleanKind
from .constraint import ConstraintSystem, require
from .field import Fr


def _field_bit(value: bool) -> Fr:
    return Fr.one() if value else Fr.zero()


def _is_const(value: Boolean, which: bool) -> bool:
    return value.kind is BooleanKind.CONSTANT and value.constant_value is which


def _known_values(*operands: Boolean):
    values = [operand.get_value() for operand in operands]
    return None if any(v is None for v in values) else values


def sha256_ch(cs: ConstraintSystem, a: Boolean, b: Boolean, c: Boolean) -> Boolean:
    """Compute ``(a AND b) XOR ((NOT a) AND c)``."""
    known = _known_values(a, b, c)
    ch_value = None
    if known is not None:
        av, bv, cv = known
        ch_value = (av and bv) ^ ((not av) and cv)

    if a.is_constant() and b.is_constant() and c.is_constant():
        return Boolean.constant(ch_value)
    if _is_const(a, False):
        return c
    if _is_const(b, False):
        return Boolean.and_(cs, a.not_(), c)
    if _is_const(c, False):
        return Boolean.and_(cs, a, b)
    if _is_const(c, True):
        # (a AND b) XOR (NOT a) = NOT (a AND (NOT b))
        return Boolean.and_(cs, a, b.not_()).not_()
    if _is_const(b, True):
        # a XOR ((NOT a) AND c) = NOT ((NOT a) AND (NOT c))
        return Boolean.and_(cs, a.not_(), c.not_()).not_()
    # Either everything is allocated, or only `a` is the constant true.

    ch = cs.alloc("ch", lambda: _field_bit(require(ch_value)))
    one = cs.one()
    unit = Fr.one()

    # a * (b - c) = ch - c
    cs.enforce(
        "ch computation",
        lambda _: b.lc(one, unit) - c.lc(one, unit),
        lambda _: a.lc(one, unit),
        lambda lc: lc + ch - c.lc(one, unit),
    )
    return Boolean.from_bit(AllocatedBit(ch, ch_value))


def sha256_maj(cs: ConstraintSystem, a: Boolean, b: Boolean, c: Boolean) -> Boolean:
    """Compute ``(a AND b) XOR (a AND c) XOR (b AND c)``."""
    known = _known_values(a, b, c)
    maj_value = None
    if known is not None:
        av, bv, cv = known
        maj_value = (av and bv) ^ (av and cv) ^ (bv and cv)

    if a.is_constant() and b.is_constant() and c.is_constant():
        return Boolean.constant(maj_value)
    if _is_const(a, False):
        return Boolean.and_(cs, b, c)
    if _is_const(b, False):
        return Boolean.and_(cs, a, c)
    if _is_const(c, False):
        return Boolean.and_(cs, a, b)
    if _is_const(c, True):
        return Boolean.and_(cs, a.not_(), b.not_()).not_()
    if _is_const(b, True):
        return Boolean.and_(cs, a.not_(), c.not_()).not_()
    if _is_const(a, True):
        return Boolean.and_(cs, b.not_(), c.not_()).not_()

    maj = cs.alloc("maj", lambda: _field_bit(require(maj_value)))

    # maj = a * (-2bc + b + c) + bc, so (2bc - b - c) * a = bc - maj
    bc = Boolean.and_(cs.namespace("b and c"), b, c)
    one = cs.one()
    unit = Fr.one()

    cs.enforce(
        "maj computation",
        lambda _: bc.lc(one, unit) + bc.lc(one, unit) - b.lc(one, unit) - c.lc(one, unit),
        lambda _: a.lc(one, unit),
        lambda _: bc.lc(one, unit) - maj,
    )
    return Boolean.from_bit(AllocatedBit(maj, maj_value))