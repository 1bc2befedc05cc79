"""Element stamps.

A stamp is the local contribution of one element to the MNA system, written
over the element's own unknowns: ``(pos, neg)`` for resistors and capacitors,
``(pos, neg, branch)`` for voltage sources and inductors.

Stamps are kept in ``G + jωC`` form so that one stamp serves every analysis:

* ``g``   - frequency independent coefficients (conductances, KCL couplings)
* ``c``   - coefficients multiplied by ``jω`` (capacitance, -inductance)
* ``rhs`` - independent excitation
"""

from typing import Callable, NamedTuple

import jax
import jax.numpy as jnp

from mnastamp.netlist import Element, ElementType

DTYPE = jnp.complex128


class Stamp(NamedTuple):
    g: jax.Array
    c: jax.Array
    rhs: jax.Array

    @property
    def size(self) -> int:
        return self.rhs.shape[0]


def _two_terminal(y) -> jax.Array:
    return jnp.array([[y, -y], [-y, y]], dtype=DTYPE)


# KCL coupling of a branch current into (pos, neg) and the constraint row V_pos - V_neg
_BRANCH_INCIDENCE = jnp.array(
    [[0.0, 0.0, 1.0],
     [0.0, 0.0, -1.0],
     [1.0, -1.0, 0.0]],
    dtype=DTYPE,
)


def resistor_stamp(elem: Element) -> Stamp:
    """Ohm's Law: admittance y = 1/R."""
    return Stamp(_two_terminal(1.0 / elem.value), jnp.zeros((2, 2), DTYPE), jnp.zeros(2, DTYPE))


def capacitor_stamp(elem: Element) -> Stamp:
    """Open circuit in DC, admittance jωC in AC."""
    return Stamp(jnp.zeros((2, 2), DTYPE), _two_terminal(elem.value), jnp.zeros(2, DTYPE))


def inductor_stamp(elem: Element) -> Stamp:
    """
    Branch equation: V_pos - V_neg - jωL * I = 0.
    With ω = 0 this collapses to V_pos = V_neg (short circuit).
    """
    c = jnp.zeros((3, 3), DTYPE).at[2, 2].set(-elem.value)
    return Stamp(_BRANCH_INCIDENCE, c, jnp.zeros(3, DTYPE))


def voltage_source_stamp(elem: Element) -> Stamp:
    """Branch equation: V_pos - V_neg = V. The value does not depend on ω."""
    rhs = jnp.zeros(3, DTYPE).at[2].set(elem.value)
    return Stamp(_BRANCH_INCIDENCE, jnp.zeros((3, 3), DTYPE), rhs)


STAMPS: dict[ElementType, Callable[[Element], Stamp]] = {
    ElementType.RESISTOR: resistor_stamp,
    ElementType.CAPACITOR: capacitor_stamp,
    ElementType.INDUCTOR: inductor_stamp,
    ElementType.VOLTAGE_SOURCE: voltage_source_stamp,
}


def generate_stamp(etype: ElementType, elem: Element) -> Stamp:
    return STAMPS[etype](elem)


def dc_transform(stamp: Stamp) -> tuple[jax.Array, jax.Array]:
    """Local ``(matrix, vector)`` at ω = 0."""
    return stamp.g, stamp.rhs


def ac_transform(stamp: Stamp, omega: float) -> tuple[jax.Array, jax.Array]:
    """Local ``(matrix, vector)`` at angular frequency ``omega``."""
    return stamp.g + 1j * omega * stamp.c, stamp.rhs


def scatter(
    matrix: jax.Array,
    vector: jax.Array,
    indices,
    size: int,
) -> tuple[jax.Array, jax.Array]:
    """Place a local stamp into a zero ``size x size`` system.

    ``indices[k]`` is the global row/column of local unknown ``k``. Repeated
    indices (an element shorted onto a single node) add up.
    """
    idx = jnp.asarray(indices, dtype=jnp.int32)
    n = idx.shape[0]
    if matrix.shape != (n, n) or vector.shape != (n,):
        raise ValueError(
            f"Stamp of shape {matrix.shape}/{vector.shape} does not match {n} indices"
        )
    rows = jnp.broadcast_to(idx[:, None], (n, n))
    cols = jnp.broadcast_to(idx[None, :], (n, n))
    global_mat = jnp.zeros((size, size), DTYPE).at[rows, cols].add(matrix)
    global_vec = jnp.zeros(size, DTYPE).at[idx].add(vector)
    return global_mat, global_vec
