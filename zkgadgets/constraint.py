"""Constraint systems, variables, linear combinations and synthesis errors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from .field import Fr


class SynthesisError(Exception):
    """Raised when a circuit cannot be synthesized."""


class AssignmentMissing(SynthesisError):
    """A value needed during synthesis was not available."""


class Unsatisfiable(SynthesisError):
    """The constraints can never be satisfied."""


class DivisionByZero(SynthesisError):
    """An inversion of zero was attempted during synthesis."""


class PolynomialDegreeTooLarge(SynthesisError):
    """The evaluation domain would exceed what the field supports."""


def require(value):
    """Return ``value``, raising ``AssignmentMissing`` when it is ``None``."""
    if value is None:
        raise AssignmentMissing("an assignment for a variable could not be computed")
    return value


class IndexKind(Enum):
    INPUT = "input"
    AUX = "aux"


@dataclass(frozen=True)
class Variable:
    kind: IndexKind
    index: int


ONE = Variable(IndexKind.INPUT, 0)


@dataclass(frozen=True)
class LinearCombination:
    """A sum of variables, each with a field coefficient."""

    terms: tuple = ()

    @classmethod
    def zero(cls) -> LinearCombination:
        return cls()

    @classmethod
    def from_variable(cls, variable: Variable) -> LinearCombination:
        return cls(((variable, Fr.one()),))

    def add_term(self, variable: Variable, coeff) -> LinearCombination:
        return LinearCombination(self.terms + ((variable, Fr(coeff)),))

    def scaled(self, coeff) -> LinearCombination:
        factor = Fr(coeff)
        return LinearCombination(tuple((var, c * factor) for var, c in self.terms))

    def __iter__(self):
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)

    def _combine(self, other, sign: Fr):
        if isinstance(other, Variable):
            return self.add_term(other, sign)
        if isinstance(other, LinearCombination):
            return LinearCombination(self.terms + other.scaled(sign).terms)
        if isinstance(other, tuple) and len(other) == 2:
            coeff, target = other
            factor = Fr(coeff) * sign
            if isinstance(target, Variable):
                return self.add_term(target, factor)
            if isinstance(target, LinearCombination):
                return LinearCombination(self.terms + target.scaled(factor).terms)
        return NotImplemented

    def __add__(self, other):
        return self._combine(other, Fr.one())

    def __sub__(self, other):
        return self._combine(other, -Fr.one())


def _as_lc(value) -> LinearCombination:
    if isinstance(value, LinearCombination):
        return value
    if isinstance(value, Variable):
        return LinearCombination.from_variable(value)
    if callable(value):
        return _as_lc(value(LinearCombination.zero()))
    raise TypeError(f"cannot use {type(value).__name__} as a linear combination")


class ConstraintSystem(ABC):
    """A sink for allocated variables and rank-1 constraints."""

    def one(self) -> Variable:
        return ONE

    def alloc(self, annotation: str, value_fn) -> Variable:
        return self._alloc_at((annotation,), value_fn, False)

    def alloc_input(self, annotation: str, value_fn) -> Variable:
        return self._alloc_at((annotation,), value_fn, True)

    def enforce(self, annotation: str, a, b, c) -> None:
        """Enforce ``a * b = c``; each side is a combination or a function building one."""
        self._enforce_at((annotation,), _as_lc(a), _as_lc(b), _as_lc(c))

    def namespace(self, name: str) -> ConstraintSystem:
        self._open_namespace((name,))
        return _Namespace(self, (name,))

    @abstractmethod
    def _alloc_at(self, path: tuple, value_fn, is_input: bool) -> Variable:
        ...

    @abstractmethod
    def _enforce_at(self, path: tuple, a, b, c) -> None:
        ...

    def _open_namespace(self, path: tuple) -> None:
        """Hook for systems that record namespaces."""


class _Namespace(ConstraintSystem):
    def __init__(self, parent: ConstraintSystem, prefix: tuple):
        self._parent = parent
        self._prefix = prefix

    def _alloc_at(self, path, value_fn, is_input):
        return self._parent._alloc_at(self._prefix + path, value_fn, is_input)

    def _enforce_at(self, path, a, b, c):
        self._parent._enforce_at(self._prefix + path, a, b, c)

    def _open_namespace(self, path):
        self._parent._open_namespace(self._prefix + path)


def _compute_path(parts: tuple) -> str:
    for part in parts:
        if "/" in part:
            raise ValueError("'/' is not allowed in names")
    return "/".join(parts)


class TestConstraintSystem(ConstraintSystem):
    """A constraint system that keeps every value for inspection and checking."""

    __test__ = False

    def __init__(self):
        self._named: dict[str, object] = {"ONE": ONE}
        self._inputs: list[list] = [[Fr.one(), "ONE"]]
        self._aux: list[list] = []
        self._constraints: list[tuple] = []

    def _register(self, path: str, obj) -> None:
        if path in self._named:
            raise ValueError(f"tried to create object at existing path: {path}")
        self._named[path] = obj

    def _alloc_at(self, path, value_fn, is_input):
        name = _compute_path(path)
        if name in self._named:
            raise ValueError(f"tried to create object at existing path: {name}")
        value = Fr(value_fn())
        store, kind = (self._inputs, IndexKind.INPUT) if is_input else (self._aux, IndexKind.AUX)
        variable = Variable(kind, len(store))
        store.append([value, name])
        self._register(name, variable)
        return variable

    def _enforce_at(self, path, a, b, c):
        name = _compute_path(path)
        self._register(name, len(self._constraints))
        self._constraints.append((a, b, c, name))

    def _open_namespace(self, path):
        self._register(_compute_path(path), None)

    def _value_of(self, variable: Variable) -> Fr:
        store = self._inputs if variable.kind is IndexKind.INPUT else self._aux
        return store[variable.index][0]

    def _eval(self, lc: LinearCombination) -> Fr:
        return sum((coeff * self._value_of(var) for var, coeff in lc), Fr.zero())

    def _variable_at(self, path: str) -> Variable:
        obj = self._named.get(path)
        if not isinstance(obj, Variable):
            raise KeyError(f"no variable at path {path!r}")
        return obj

    def which_is_unsatisfied(self):
        """The path of the first violated constraint, or ``None``."""
        for a, b, c, path in self._constraints:
            if self._eval(a) * self._eval(b) != self._eval(c):
                return path
        return None

    def is_satisfied(self) -> bool:
        return self.which_is_unsatisfied() is None

    def get(self, path: str) -> Fr:
        return self._value_of(self._variable_at(path))

    def set(self, path: str, value) -> None:
        variable = self._variable_at(path)
        store = self._inputs if variable.kind is IndexKind.INPUT else self._aux
        store[variable.index][0] = Fr(value)

    def num_constraints(self) -> int:
        return len(self._constraints)

    def verify(self, expected) -> bool:
        """Check that the public inputs, after the constant one, equal ``expected``."""
        expected = list(expected)
        if len(expected) + 1 != len(self._inputs):
            return False
        if self._inputs[0][0] != Fr.one():
            return False
        return all(value == want for (value, _), want in zip(self._inputs[1:], expected))