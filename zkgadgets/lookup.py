"""Window table lookup gadgets."""

from __future__ import annotations

from .boolean import Boolean
from .constraint import ConstraintSystem, require
from .field import Fr
from .num import AllocatedNum, Num


def synth(window_size: int, constants) -> list[Fr]:
    """Coefficients whose subset sums over each bit pattern give ``constants``.

    For every pattern ``b``, the sum of the returned entries at the patterns
    contained in ``b`` equals the constant at ``b``.
    """
    size = 1 << window_size
    constants = [Fr(c) for c in constants]
    if len(constants) > size:
        raise ValueError(f"at most {size} constants fit a window of {window_size} bits")

    assignment = [Fr.zero()] * size
    for i, constant in enumerate(constants):
        cur = constant - assignment[i]
        assignment[i] = cur
        for j in range(i + 1, size):
            if j & i == i:
                assignment[j] = assignment[j] + cur
    return assignment


def _index_of(bits) -> int | None:
    values = [bit.get_value() for bit in bits]
    if any(value is None for value in values):
        return None
    return sum(1 << k for k, value in enumerate(values) if value)


def _as_points(coords) -> list[tuple[Fr, Fr]]:
    return [(Fr(x), Fr(y)) for x, y in coords]


def _enforce_coordinate(cs, annotation, bits, precomp, coeffs, result, one) -> None:
    cs.enforce(
        annotation,
        lambda lc: lc
        + (coeffs[0b001], one)
        + bits[1].lc(one, coeffs[0b011])
        + bits[2].lc(one, coeffs[0b101])
        + precomp.lc(one, coeffs[0b111]),
        lambda lc: lc + bits[0].lc(one, Fr.one()),
        lambda lc: lc
        + result.variable
        - (coeffs[0b000], one)
        - bits[1].lc(one, coeffs[0b010])
        - bits[2].lc(one, coeffs[0b100])
        - precomp.lc(one, coeffs[0b110]),
    )


def lookup3_xy(
    cs: ConstraintSystem, bits, coords
) -> tuple[AllocatedNum, AllocatedNum]:
    """Look up one of eight points with three little-endian bits."""
    bits = list(bits)
    coords = _as_points(coords)
    if len(bits) != 3:
        raise ValueError("a 3-bit lookup needs exactly 3 bits")
    if len(coords) != 8:
        raise ValueError("a 3-bit lookup needs exactly 8 points")

    index = _index_of(bits)

    res_x = AllocatedNum.alloc(cs.namespace("x"), lambda: coords[require(index)][0])
    res_y = AllocatedNum.alloc(cs.namespace("y"), lambda: coords[require(index)][1])

    x_coeffs = synth(3, (x for x, _ in coords))
    y_coeffs = synth(3, (y for _, y in coords))

    precomp = Boolean.and_(cs.namespace("precomp"), bits[1], bits[2])
    one = cs.one()

    _enforce_coordinate(cs, "x-coordinate lookup", bits, precomp, x_coeffs, res_x, one)
    _enforce_coordinate(cs, "y-coordinate lookup", bits, precomp, y_coeffs, res_y, one)

    return res_x, res_y


def lookup3_xy_with_conditional_negation(cs: ConstraintSystem, bits, coords) -> tuple[Num, Num]:
    """Look up one of four points with two bits; the third bit negates ``y``."""
    bits = list(bits)
    coords = _as_points(coords)
    if len(bits) != 3:
        raise ValueError("a 3-bit lookup needs exactly 3 bits")
    if len(coords) != 4:
        raise ValueError("a conditionally negated lookup needs exactly 4 points")

    index = _index_of(bits[:2])

    def y_value():
        value = coords[require(index)][1]
        return -value if require(bits[2].get_value()) else value

    y = AllocatedNum.alloc(cs.namespace("y"), y_value)
    one = cs.one()

    x_coeffs = synth(2, (x for x, _ in coords))
    y_coeffs = synth(2, (y_ for _, y_ in coords))

    precomp = Boolean.and_(cs.namespace("precomp"), bits[0], bits[1])

    x = (
        Num.zero()
        .add_bool_with_coeff(one, Boolean.constant(True), x_coeffs[0b00])
        .add_bool_with_coeff(one, bits[0], x_coeffs[0b01])
        .add_bool_with_coeff(one, bits[1], x_coeffs[0b10])
        .add_bool_with_coeff(one, precomp, x_coeffs[0b11])
    )

    y_lc = (
        precomp.lc(one, y_coeffs[0b11])
        + bits[1].lc(one, y_coeffs[0b10])
        + bits[0].lc(one, y_coeffs[0b01])
        + (y_coeffs[0b00], one)
    )

    cs.enforce(
        "y-coordinate lookup",
        lambda lc: lc + y_lc + y_lc,
        lambda lc: lc + bits[2].lc(one, Fr.one()),
        lambda lc: lc + y_lc - y.variable,
    )

    return x, Num.from_allocated(y)