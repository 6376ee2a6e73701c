"""Radix-2 evaluation domains for polynomial arithmetic over the scalar field."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .constraint import PolynomialDegreeTooLarge
from .field import Fr


def _default_log_cpus() -> int:
    return max((os.cpu_count() or 1).bit_length() - 1, 0)


def _resolve(log_cpus):
    return _default_log_cpus() if log_cpus is None else log_cpus


@dataclass(eq=False)
class EvaluationDomain:
    """Coefficients padded to a power of two, with the domain's roots of unity."""

    coeffs: list
    exp: int
    omega: Fr
    omegainv: Fr
    geninv: Fr
    minv: Fr

    @classmethod
    def from_coeffs(cls, coeffs) -> EvaluationDomain:
        coeffs = list(coeffs)
        m, exp = 1, 0
        while m < len(coeffs):
            m *= 2
            exp += 1
            if exp >= Fr.S:
                raise PolynomialDegreeTooLarge("polynomial degree is too large for the field")
        omega = Fr.root_of_unity().pow(1 << (Fr.S - exp))
        coeffs.extend(Fr.zero() for _ in range(m - len(coeffs)))
        return cls(
            coeffs=coeffs,
            exp=exp,
            omega=omega,
            omegainv=omega.invert(),
            geninv=Fr.multiplicative_generator().invert(),
            minv=Fr(m).invert(),
        )

    def into_coeffs(self) -> list:
        return self.coeffs

    def fft(self, log_cpus=None) -> None:
        best_fft([self.coeffs], [self.omega], [self.exp], log_cpus)

    def ifft(self, log_cpus=None) -> None:
        type(self).ifft_many([self], log_cpus)

    def coset_fft(self, log_cpus=None) -> None:
        type(self).coset_fft_many([self], log_cpus)

    def icoset_fft(self, log_cpus=None) -> None:
        geninv = self.geninv
        self.ifft(log_cpus)
        self.distribute_powers(geninv)

    @classmethod
    def fft_many(cls, domains, log_cpus=None) -> None:
        best_fft(
            [d.coeffs for d in domains],
            [d.omega for d in domains],
            [d.exp for d in domains],
            log_cpus,
        )

    @classmethod
    def ifft_many(cls, domains, log_cpus=None) -> None:
        best_fft(
            [d.coeffs for d in domains],
            [d.omegainv for d in domains],
            [d.exp for d in domains],
            log_cpus,
        )
        for domain in domains:
            minv = domain.minv
            domain.coeffs[:] = [v * minv for v in domain.coeffs]

    @classmethod
    def coset_fft_many(cls, domains, log_cpus=None) -> None:
        for domain in domains:
            domain.distribute_powers(Fr.multiplicative_generator())
        cls.fft_many(domains, log_cpus)

    def distribute_powers(self, g: Fr) -> None:
        """Multiply the i-th coefficient by ``g**i``."""
        scaled = []
        power = Fr.one()
        for v in self.coeffs:
            scaled.append(v * power)
            power = power * g
        self.coeffs[:] = scaled

    def z(self, tau: Fr) -> Fr:
        """Evaluate the vanishing polynomial ``tau**m - 1`` of this domain."""
        return tau.pow(len(self.coeffs)) - Fr.one()

    def divide_by_z_on_coset(self) -> None:
        inv = self.z(Fr.multiplicative_generator()).invert()
        self.coeffs[:] = [v * inv for v in self.coeffs]

    def mul_assign(self, other: EvaluationDomain) -> None:
        if len(self.coeffs) != len(other.coeffs):
            raise ValueError("domains differ in size")
        self.coeffs[:] = [a * b for a, b in zip(self.coeffs, other.coeffs)]

    def sub_assign(self, other: EvaluationDomain) -> None:
        if len(self.coeffs) != len(other.coeffs):
            raise ValueError("domains differ in size")
        self.coeffs[:] = [a - b for a, b in zip(self.coeffs, other.coeffs)]


def best_fft(coeffs, omegas, log_ns, log_cpus=None) -> None:
    """Transform each coefficient list in place, splitting large ones into sub-FFTs."""
    log_cpus = _resolve(log_cpus)
    for a, omega, log_n in zip(coeffs, omegas, log_ns):
        if log_n <= log_cpus:
            serial_fft(a, omega, log_n)
        else:
            parallel_fft(a, omega, log_n, log_cpus)


def _bitreverse(n: int, bits: int) -> int:
    result = 0
    for _ in range(bits):
        result = (result << 1) | (n & 1)
        n >>= 1
    return result


def serial_fft(a: list, omega: Fr, log_n: int) -> None:
    """In-place iterative Cooley-Tukey FFT of a list of length ``2**log_n``."""
    n = len(a)
    if n != 1 << log_n:
        raise ValueError(f"expected {1 << log_n} coefficients, got {n}")

    for k in range(n):
        rk = _bitreverse(k, log_n)
        if k < rk:
            a[k], a[rk] = a[rk], a[k]

    m = 1
    for _ in range(log_n):
        w_m = omega.pow(n // (2 * m))
        for k in range(0, n, 2 * m):
            w = Fr.one()
            for j in range(m):
                t = a[k + j + m] * w
                u = a[k + j]
                a[k + j + m] = u - t
                a[k + j] = u + t
                w = w * w_m
        m *= 2


def parallel_fft(a: list, omega: Fr, log_n: int, log_cpus: int) -> None:
    """FFT split into ``2**log_cpus`` independent sub-FFTs, then recombined."""
    if log_n < log_cpus:
        raise ValueError("log_n must be at least log_cpus")

    num_cpus = 1 << log_cpus
    log_new_n = log_n - log_cpus
    size = 1 << log_n
    new_omega = omega.pow(num_cpus)
    parts = []

    for j in range(num_cpus):
        omega_j = omega.pow(j)
        omega_step = omega.pow(j << log_new_n)
        sub = []
        elt = Fr.one()
        for i in range(1 << log_new_n):
            acc = Fr.zero()
            for s in range(num_cpus):
                acc = acc + a[(i + (s << log_new_n)) % size] * elt
                elt = elt * omega_step
            sub.append(acc)
            elt = elt * omega_j
        serial_fft(sub, new_omega, log_new_n)
        parts.append(sub)

    mask = num_cpus - 1
    a[:] = [parts[idx & mask][idx >> log_cpus] for idx in range(len(a))]