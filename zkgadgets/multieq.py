"""Batching many small equalities into few constraints."""

from __future__ import annotations

from .constraint import ConstraintSystem, LinearCombination, Variable
from .field import Fr


class MultiEq(ConstraintSystem):
    """Packs equalities of bounded bit width into shared constraints.

    Each equality is shifted into its own bit range; a constraint is emitted
    whenever the field capacity would be exceeded, and on ``close``.
    """

    def __init__(self, cs: ConstraintSystem):
        self._cs = cs
        self._ops = 0
        self._bits_used = 0
        self._lhs = LinearCombination.zero()
        self._rhs = LinearCombination.zero()

    def _accumulate(self) -> None:
        lhs, rhs = self._lhs, self._rhs
        one = self._cs.one()
        self._cs.enforce(
            f"multieq {self._ops}",
            lambda _: lhs,
            lambda lc: lc + one,
            lambda _: rhs,
        )
        self._lhs = LinearCombination.zero()
        self._rhs = LinearCombination.zero()
        self._bits_used = 0
        self._ops += 1

    def enforce_equal(
        self, num_bits: int, lhs: LinearCombination, rhs: LinearCombination
    ) -> None:
        """Require ``lhs == rhs``, both being values of at most ``num_bits`` bits."""
        if Fr.CAPACITY <= self._bits_used + num_bits:
            self._accumulate()

        if Fr.CAPACITY <= self._bits_used + num_bits:
            raise ValueError(f"{num_bits} bits exceed the field capacity of {Fr.CAPACITY}")

        coeff = Fr(2).pow(self._bits_used)
        self._lhs = self._lhs + (coeff, lhs)
        self._rhs = self._rhs + (coeff, rhs)
        self._bits_used += num_bits

    def close(self) -> None:
        """Emit the pending constraint, if any equalities are waiting."""
        if self._bits_used > 0:
            self._accumulate()

    def __enter__(self) -> MultiEq:
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def one(self) -> Variable:
        return self._cs.one()

    def alloc(self, annotation: str, value_fn) -> Variable:
        return self._cs.alloc(annotation, value_fn)

    def alloc_input(self, annotation: str, value_fn) -> Variable:
        return self._cs.alloc_input(annotation, value_fn)

    def enforce(self, annotation: str, a, b, c) -> None:
        self._cs.enforce(annotation, a, b, c)

    def _alloc_at(self, path, value_fn, is_input):
        return self._cs._alloc_at(path, value_fn, is_input)

    def _enforce_at(self, path, a, b, c):
        self._cs._enforce_at(path, a, b, c)

    def _open_namespace(self, path):
        self._cs._open_namespace(path)