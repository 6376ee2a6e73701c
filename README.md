# zkgadgets

This package provides building blocks for rank-1 constraint systems over
the BLS12-381 scalar field. It also provides radix-2 evaluation domains for
polynomial arithmetic in that field. It is pure Python and needs no other
packages.

## Modules

- `zkgadgets.field` defines `Fr`, an element of the scalar field. `Fr`
  supports `+`, `-`, `*` and negation, both with other `Fr` values and with
  plain integers. It also has `square`, `double`, `invert` (which raises
  `ZeroDivisionError` for zero), `pow` and `is_zero`. For bit decomposition
  there are `to_le_bits` and `char_le_bits`, which both return 256 bits with
  the least significant bit first. The class provides the constants `zero`,
  `one`, `root_of_unity` (a primitive 2**32-th root) and
  `multiplicative_generator`. `random` draws a random element, optionally
  from a `random.Random` you pass in. `from_str` parses a decimal number
  without leading zeros.
- `zkgadgets.constraint` defines the types used to build circuits:
  - `Variable` and `IndexKind`.
  - `LinearCombination`, which is immutable. It supports `+` and `-` with a
    variable, another combination, or a `(coeff, variable_or_combination)`
    pair.
  - The `ConstraintSystem` interface, with `one`, `alloc`, `alloc_input`,
    `enforce` and `namespace`.
  - `TestConstraintSystem`, which records every assignment and constraint.
    Its `is_satisfied` and `which_is_unsatisfied` methods check the
    constraints. `get` and `set` read and overwrite variables by their
    `/`-separated path. `num_constraints` counts the constraints, and
    `verify` compares the public inputs.

  Errors raised during synthesis derive from `SynthesisError`. They are
  `AssignmentMissing`, `Unsatisfiable`, `DivisionByZero` and
  `PolynomialDegreeTooLarge`. The `require(value)` function raises
  `AssignmentMissing` when `value` is `None`.
- `zkgadgets.domain` defines `EvaluationDomain`. `from_coeffs` builds a
  domain and pads its coefficients to a power of two. The domain has `fft`,
  `ifft`, `coset_fft` and `icoset_fft`, along with the batch forms
  `fft_many`, `ifft_many` and `coset_fft_many`. It also has
  `distribute_powers`, `z`, `divide_by_z_on_coset`, `mul_assign`,
  `sub_assign` and `into_coeffs`. The module also exports the functions
  `best_fft`, `serial_fft` and `parallel_fft`.
- `zkgadgets.bits` defines `AllocatedBit`, a variable constrained to be 0
  or 1. Its methods are `alloc`, `alloc_conditionally`, `xor`, `and_`,
  `and_not` and `nor`. The module also provides
  `field_into_allocated_bits_le`.
- `zkgadgets.boolean` defines `Boolean`, which is a constant, an allocated
  bit, or the negation of one. Its methods are `constant`, `from_bit`,
  `not_`, `xor`, `and_`, `enforce_equal`, `get_value` and `lc`. Operations
  on constants are folded without adding constraints. The module also
  provides `u64_into_boolean_vec_le` and `field_into_boolean_vec_le`.
- `zkgadgets.sha256_bits` provides the SHA-256 bit functions `sha256_ch`
  and `sha256_maj`.
- `zkgadgets.num` defines two classes:
  - `AllocatedNum`, with `alloc`, `inputize`, `mul`, `square`,
    `assert_nonzero`, `conditionally_reverse`, `to_bits_le` and
    `to_bits_le_strict`. The strict form also constrains the bits to
    represent a value below the modulus.
  - `Num`, a linear combination that carries its value. Its methods are
    `zero`, `from_allocated`, `lc`, `add_bool_with_coeff`, `add` and
    `scale`.
- `zkgadgets.lookup` provides `lookup3_xy`,
  `lookup3_xy_with_conditional_negation` and the coefficient helper
  `synth`.
- `zkgadgets.multieq` defines `MultiEq`, a constraint system wrapper. It
  packs many narrow equalities (`enforce_equal`) into shared constraints.
  Call `close` to emit any pending constraint, or use the wrapper as a
  context manager, which does this on exit.
- `zkgadgets.multipack` provides `pack_into_inputs`, `pack_bits`,
  `compute_multipacking`, `bytes_to_bits` and `bytes_to_bits_le`.

## Example

```python
from zkgadgets.constraint import TestConstraintSystem
from zkgadgets.field import Fr
from zkgadgets.num import AllocatedNum

cs = TestConstraintSystem()
a = AllocatedNum.alloc(cs.namespace("a"), lambda: Fr(12))
b = AllocatedNum.alloc(cs.namespace("b"), lambda: Fr(10))
product = a.mul(cs, b)

assert cs.is_satisfied()
assert cs.get("product num") == Fr(120)

cs.set("product num", Fr(121))
assert cs.which_is_unsatisfied() == "multiplication constraint"
```

This example multiplies two polynomials through the FFT:

```python
from zkgadgets.domain import EvaluationDomain
from zkgadgets.field import Fr

a = EvaluationDomain.from_coeffs([Fr(1), Fr(2), Fr(0), Fr(0)])
b = EvaluationDomain.from_coeffs([Fr(3), Fr(4), Fr(0), Fr(0)])
a.fft(0)
b.fft(0)
a.mul_assign(b)
a.ifft(0)
assert a.into_coeffs() == [Fr(3), Fr(10), Fr(8), Fr(0)]
```

The FFT methods take a `log_cpus` argument. When it is `None`, a value is
derived from the machine's CPU count. This argument only sets how a large
transform is split into sub-transforms. The work itself runs in a single
thread.

## What it does not do

- It has no GPU acceleration and no parallel execution.
- It has no proving or verifying system. Circuits can be built and checked
  with `TestConstraintSystem`, but no proofs are produced.
- It has no hash-function circuits such as BLAKE2s or full SHA-256, and no
  32-bit word gadgets. Of SHA-256, only the `ch` and `maj` bit functions are
  provided.

## Running the tests

```
pip install -e ".[test]"
pytest
```