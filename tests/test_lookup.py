import random

import pytest

from zkgadgets.bits import AllocatedBit
from zkgadgets.boolean import Boolean
from zkgadgets.constraint import AssignmentMissing, TestConstraintSystem
from zkgadgets.field import Fr
from zkgadgets.lookup import lookup3_xy, lookup3_xy_with_conditional_negation, synth


def _seeded():
    return random.Random(0x5962BE3D763D318D17DB37325406BCE5)


def _alloc_bits(cs, values):
    return [
        Boolean.from_bit(AllocatedBit.alloc(cs.namespace(name), value))
        for name, value in zip("abc", values)
    ]


def test_lookup3_xy():
    rng = _seeded()
    for _ in range(100):
        cs = TestConstraintSystem()
        values = [rng.getrandbits(1) == 1 for _ in range(3)]
        bits = _alloc_bits(cs, values)
        points = [(Fr.random(rng), Fr.random(rng)) for _ in range(8)]

        res_x, res_y = lookup3_xy(cs, bits, points)

        assert cs.is_satisfied()
        index = sum(1 << k for k, v in enumerate(values) if v)
        assert res_x.value == points[index][0]
        assert res_y.value == points[index][1]


def test_lookup3_xy_with_conditional_negation():
    rng = _seeded()
    for _ in range(100):
        cs = TestConstraintSystem()
        values = [rng.getrandbits(1) == 1 for _ in range(3)]
        bits = _alloc_bits(cs, values)
        points = [(Fr.random(rng), Fr.random(rng)) for _ in range(4)]

        x, y = lookup3_xy_with_conditional_negation(cs, bits, points)

        assert cs.is_satisfied()
        index = (1 if values[0] else 0) + (2 if values[1] else 0)
        assert x.value == points[index][0]
        expected_y = -points[index][1] if values[2] else points[index][1]
        assert y.value == expected_y


def test_synth():
    rng = _seeded()
    window_size = 4
    constants = [Fr.random(rng) for _ in range(1 << window_size)]

    assignment = synth(window_size, constants)

    assert len(assignment) == 1 << window_size
    for b, constant in enumerate(constants):
        acc = sum(
            (value for j, value in enumerate(assignment) if j & b == j), Fr.zero()
        )
        assert acc == constant


def test_synth_rejects_too_many_constants():
    with pytest.raises(ValueError):
        synth(2, [Fr.one()] * 5)


def test_tampered_lookup_result_is_unsatisfied():
    rng = _seeded()
    cs = TestConstraintSystem()
    bits = _alloc_bits(cs, [True, False, True])
    points = [(Fr.random(rng), Fr.random(rng)) for _ in range(8)]

    res_x, res_y = lookup3_xy(cs, bits, points)
    assert cs.is_satisfied()

    cs.set("x/num", res_x.value + Fr.one())
    assert cs.which_is_unsatisfied() == "x-coordinate lookup"
    cs.set("x/num", res_x.value)
    cs.set("y/num", res_y.value + Fr.one())
    assert cs.which_is_unsatisfied() == "y-coordinate lookup"


def test_lookup_with_constant_bits():
    rng = _seeded()
    points = [(Fr.random(rng), Fr.random(rng)) for _ in range(8)]
    for pattern in range(8):
        cs = TestConstraintSystem()
        bits = [Boolean.constant(bool((pattern >> k) & 1)) for k in range(3)]
        res_x, res_y = lookup3_xy(cs, bits, points)
        assert cs.is_satisfied()
        assert (res_x.value, res_y.value) == points[pattern]


def test_tampered_negated_lookup_is_unsatisfied():
    rng = _seeded()
    cs = TestConstraintSystem()
    bits = _alloc_bits(cs, [False, True, True])
    points = [(Fr.random(rng), Fr.random(rng)) for _ in range(4)]

    _, y = lookup3_xy_with_conditional_negation(cs, bits, points)
    assert y.value == -points[2][1]

    cs.set("y/num", points[2][1])
    assert cs.which_is_unsatisfied() == "y-coordinate lookup"


@pytest.mark.parametrize("count", [2, 4])
def test_lookup3_xy_rejects_bad_lengths(count):
    cs = TestConstraintSystem()
    bits = _alloc_bits(cs, [True, True, False])
    with pytest.raises(ValueError):
        lookup3_xy(cs, bits, [(Fr.one(), Fr.one())] * count)
    with pytest.raises(ValueError):
        lookup3_xy(cs, bits[:2], [(Fr.one(), Fr.one())] * 8)


def test_negated_lookup_rejects_bad_lengths():
    cs = TestConstraintSystem()
    bits = _alloc_bits(cs, [True, True, False])
    with pytest.raises(ValueError):
        lookup3_xy_with_conditional_negation(cs, bits, [(Fr.one(), Fr.one())] * 8)


def test_unknown_bits_raise_assignment_missing():
    cs = TestConstraintSystem()
    known = _alloc_bits(cs, [True, True, True])
    bits = [Boolean.from_bit(AllocatedBit(b.bit.variable, None)) for b in known]
    points = [(Fr.one(), Fr.one())] * 8
    with pytest.raises(AssignmentMissing):
        lookup3_xy(cs, bits, points)