import itertools

import pytest

from zkgadgets.bits import AllocatedBit
from zkgadgets.boolean import Boolean, BooleanKind
from zkgadgets.constraint import (
    AssignmentMissing,
    IndexKind,
    TestConstraintSystem,
    Variable,
)
from zkgadgets.field import Fr
from zkgadgets.sha256_bits import sha256_ch, sha256_maj

OPERANDS = [
    "true",
    "false",
    "allocated_true",
    "allocated_false",
    "negated_allocated_true",
    "negated_allocated_false",
]

VALUES = {
    "true": True,
    "false": False,
    "allocated_true": True,
    "allocated_false": False,
    "negated_allocated_true": False,
    "negated_allocated_false": True,
}


def _is_constant(operand):
    return operand in ("true", "false")


def _construct(cs, operand, name):
    if operand == "true":
        return Boolean.constant(True)
    if operand == "false":
        return Boolean.constant(False)
    allocated_value = operand.endswith("true")
    bit = Boolean.from_bit(AllocatedBit.alloc(cs.namespace(name), allocated_value))
    return bit.not_() if operand.startswith("negated") else bit


COMBINATIONS = list(itertools.product(OPERANDS, repeat=3))


@pytest.mark.parametrize("first,second,third", COMBINATIONS)
def test_sha256_ch(first, second, third):
    cs = TestConstraintSystem()
    av, bv, cv = VALUES[first], VALUES[second], VALUES[third]
    expected = (av and bv) ^ ((not av) and cv)

    a = _construct(cs, first, "a")
    b = _construct(cs, second, "b")
    c = _construct(cs, third, "c")

    result = sha256_ch(cs, a, b, c)

    assert cs.is_satisfied()
    assert result.get_value() == expected

    constants = [_is_constant(op) for op in (first, second, third)]
    if any(constants):
        if all(constants):
            assert cs.num_constraints() == 0
    else:
        assert cs.get("ch") == (Fr.one() if expected else Fr.zero())
        cs.set("ch", Fr.zero() if expected else Fr.one())
        assert cs.which_is_unsatisfied() == "ch computation"


@pytest.mark.parametrize("first,second,third", COMBINATIONS)
def test_sha256_maj(first, second, third):
    cs = TestConstraintSystem()
    av, bv, cv = VALUES[first], VALUES[second], VALUES[third]
    expected = (av and bv) ^ (av and cv) ^ (bv and cv)

    a = _construct(cs, first, "a")
    b = _construct(cs, second, "b")
    c = _construct(cs, third, "c")

    result = sha256_maj(cs, a, b, c)

    assert cs.is_satisfied()
    assert result.get_value() == expected

    constants = [_is_constant(op) for op in (first, second, third)]
    if any(constants):
        if all(constants):
            assert cs.num_constraints() == 0
    else:
        assert cs.get("maj") == (Fr.one() if expected else Fr.zero())
        cs.set("maj", Fr.zero() if expected else Fr.one())
        assert cs.which_is_unsatisfied() == "maj computation"


def test_ch_of_constants_is_constant():
    cs = TestConstraintSystem()
    result = sha256_ch(
        cs, Boolean.constant(True), Boolean.constant(False), Boolean.constant(True)
    )
    assert result.kind is BooleanKind.CONSTANT
    assert result.constant_value is False


def test_maj_of_constants_is_constant():
    cs = TestConstraintSystem()
    result = sha256_maj(
        cs, Boolean.constant(True), Boolean.constant(False), Boolean.constant(True)
    )
    assert result.kind is BooleanKind.CONSTANT
    assert result.constant_value is True


def test_ch_with_false_a_returns_c_unchanged():
    cs = TestConstraintSystem()
    b = _construct(cs, "allocated_true", "b")
    c = _construct(cs, "negated_allocated_true", "c")
    result = sha256_ch(cs, Boolean.constant(False), b, c)
    assert result == c


def _unknown(index):
    return Boolean.from_bit(AllocatedBit(Variable(IndexKind.AUX, index), None))


def test_ch_without_values_raises_assignment_missing():
    cs = TestConstraintSystem()
    with pytest.raises(AssignmentMissing):
        sha256_ch(cs, _unknown(0), _unknown(1), _unknown(2))


def test_maj_without_values_raises_assignment_missing():
    cs = TestConstraintSystem()
    with pytest.raises(AssignmentMissing):
        sha256_maj(cs, _unknown(0), _unknown(1), _unknown(2))