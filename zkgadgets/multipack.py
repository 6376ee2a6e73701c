"""Packing sequences of bits into scalar field elements."""

from __future__ import annotations

from .boolean import Boolean
from .constraint import ConstraintSystem, require
from .field import Fr
from .num import AllocatedNum, Num


def _chunks(items, size: int):
    items = list(items)
    for start in range(0, len(items), size):
        yield items[start : start + size]


def _pack_num(one, bits) -> Num:
    num = Num.zero()
    coeff = Fr.one()
    for bit in bits:
        num = num.add_bool_with_coeff(one, bit, coeff)
        coeff = coeff.double()
    return num


def pack_into_inputs(cs: ConstraintSystem, bits) -> None:
    """Expose a sequence of booleans as compact public inputs."""
    one = cs.one()
    for i, chunk in enumerate(_chunks(bits, Fr.CAPACITY)):
        num = _pack_num(one, chunk)
        input_var = cs.alloc_input(f"input {i}", lambda: require(num.value))
        cs.enforce(
            f"packing constraint {i}",
            lambda _: num.lc(Fr.one()),
            lambda lc: lc + one,
            lambda lc: lc + input_var,
        )


def bytes_to_bits(data: bytes) -> list[bool]:
    """The bits of ``data``, most significant bit of each byte first."""
    return [bool((byte >> i) & 1) for byte in data for i in range(7, -1, -1)]


def bytes_to_bits_le(data: bytes) -> list[bool]:
    """The bits of ``data``, least significant bit of each byte first."""
    return [bool((byte >> i) & 1) for byte in data for i in range(8)]


def compute_multipacking(bits) -> list[Fr]:
    """The field elements ``pack_into_inputs`` exposes for these bit values."""
    result = []
    for chunk in _chunks(bits, Fr.CAPACITY):
        cur = Fr.zero()
        coeff = Fr.one()
        for bit in chunk:
            if bit:
                cur = cur + coeff
            coeff = coeff.double()
        result.append(cur)
    return result


def pack_bits(cs: ConstraintSystem, bits) -> AllocatedNum:
    """Pack up to ``Fr.CAPACITY`` booleans into a single allocated number."""
    one = cs.one()
    num = _pack_num(one, list(bits)[: Fr.CAPACITY])
    alloc_num = AllocatedNum.alloc(cs.namespace("input"), lambda: require(num.value))
    cs.enforce(
        "packing constraint",
        lambda _: num.lc(Fr.one()),
        lambda lc: lc + one,
        lambda lc: lc + alloc_num.variable,
    )
    return alloc_num