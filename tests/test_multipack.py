import random

import pytest

from zkgadgets.bits import AllocatedBit
from zkgadgets.boolean import Boolean
from zkgadgets.constraint import AssignmentMissing, TestConstraintSystem
from zkgadgets.field import Fr
from zkgadgets.multipack import (
    bytes_to_bits,
    bytes_to_bits_le,
    compute_multipacking,
    pack_bits,
    pack_into_inputs,
)


def _seeded():
    return random.Random(0x5962BE3D763D318D17DB37325406BCE5)


def _alloc_bits(cs, values):
    return [
        Boolean.from_bit(AllocatedBit.alloc(cs.namespace(f"bit {i}"), value))
        for i, value in enumerate(values)
    ]


@pytest.mark.parametrize("num_bits", [0, 1, 2, 100, 253, 254, 255, 508, 509, 700])
def test_multipacking(num_bits):
    rng = _seeded()
    cs = TestConstraintSystem()
    bits = [rng.getrandbits(1) == 1 for _ in range(num_bits)]
    circuit_bits = _alloc_bits(cs, bits)

    expected_inputs = compute_multipacking(bits)
    pack_into_inputs(cs.namespace("pack"), circuit_bits)

    assert cs.is_satisfied()
    assert cs.verify(expected_inputs)


def test_tampered_input_fails():
    cs = TestConstraintSystem()
    bits = [True, False, True, True]
    pack_into_inputs(cs.namespace("pack"), _alloc_bits(cs, bits))
    assert cs.is_satisfied()

    cs.set("pack/input 0", Fr(4))
    assert cs.which_is_unsatisfied() == "pack/packing constraint 0"
    assert not cs.verify(compute_multipacking(bits))


def test_compute_multipacking_values():
    assert compute_multipacking([]) == []
    assert compute_multipacking([True, False, True]) == [Fr(5)]
    packed = compute_multipacking([True] * 255)
    assert packed == [Fr(2**254 - 1), Fr(1)]


def test_bytes_to_bits():
    assert bytes_to_bits(b"\x01") == [False] * 7 + [True]
    assert bytes_to_bits(b"\x80\x03") == [True] + [False] * 7 + [False] * 6 + [True, True]
    assert bytes_to_bits(b"") == []


def test_bytes_to_bits_le():
    assert bytes_to_bits_le(b"\x01") == [True] + [False] * 7
    assert bytes_to_bits_le(b"\x80\x03") == [False] * 7 + [True] + [True, True] + [False] * 6


def test_bit_orders_mirror_each_byte():
    data = bytes(range(0, 256, 17))
    big = bytes_to_bits(data)
    little = bytes_to_bits_le(data)
    assert len(big) == len(little) == 8 * len(data)
    for start in range(0, len(big), 8):
        assert big[start : start + 8] == little[start : start + 8][::-1]


def test_pack_bits():
    rng = _seeded()
    cs = TestConstraintSystem()
    bits = [rng.getrandbits(1) == 1 for _ in range(100)]
    num = pack_bits(cs, _alloc_bits(cs, bits))

    assert cs.is_satisfied()
    assert num.value == compute_multipacking(bits)[0]
    assert cs.get("input/num") == num.value

    cs.set("input/num", num.value + Fr.one())
    assert cs.which_is_unsatisfied() == "packing constraint"


def test_pack_bits_truncates_to_capacity():
    cs = TestConstraintSystem()
    bits = [True] * 300
    num = pack_bits(cs, _alloc_bits(cs, bits))
    assert cs.is_satisfied()
    assert num.value == Fr(2**254 - 1)


def test_pack_bits_with_constants():
    cs = TestConstraintSystem()
    bits = [Boolean.constant(v) for v in (True, True, False, True)]
    num = pack_bits(cs, bits)
    assert cs.is_satisfied()
    assert num.value == Fr(11)


def test_unknown_bits_raise_assignment_missing():
    cs = TestConstraintSystem()
    known = _alloc_bits(cs, [True, False])
    unknown = [Boolean.from_bit(AllocatedBit(b.bit.variable, None)) for b in known]
    with pytest.raises(AssignmentMissing):
        pack_bits(cs, unknown)
    with pytest.raises(AssignmentMissing):
        pack_into_inputs(cs.namespace("pack"), unknown)