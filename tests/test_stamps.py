import jax.numpy as jnp
import pytest

from mnastamp.netlist import Element, ElementType
from mnastamp.stamps import (
    ac_transform,
    capacitor_stamp,
    dc_transform,
    generate_stamp,
    inductor_stamp,
    resistor_stamp,
    scatter,
    voltage_source_stamp,
)


def test_resistor_stamp_pattern():
    mat, vec = dc_transform(resistor_stamp(Element(1, 2, 4.0)))
    y = 0.25
    assert jnp.allclose(mat, jnp.array([[y, -y], [-y, y]]))
    assert jnp.allclose(vec, jnp.zeros(2))


@pytest.mark.parametrize("omega", [0.0, 1.0, 2 * jnp.pi * 50.0, 1e9])
def test_resistor_ac_stamp_is_frequency_independent(omega):
    stamp = resistor_stamp(Element(1, 0, 470.0))
    ac_mat, ac_vec = ac_transform(stamp, omega)
    dc_mat, dc_vec = dc_transform(stamp)
    assert jnp.array_equal(ac_mat, dc_mat)
    assert jnp.array_equal(ac_vec, dc_vec)
    assert jnp.all(ac_mat.imag == 0.0)


def test_capacitor_is_open_in_dc():
    mat, vec = dc_transform(capacitor_stamp(Element(1, 0, 1e-6)))
    assert jnp.all(mat == 0)
    assert jnp.all(vec == 0)


def test_capacitor_ac_stamp_scales_with_omega():
    C = 1e-6
    stamp = capacitor_stamp(Element(1, 0, C))
    mat_1, _ = ac_transform(stamp, 1000.0)
    mat_2, _ = ac_transform(stamp, 2000.0)

    # Purely imaginary, jwC pattern
    assert jnp.all(mat_1.real == 0.0)
    assert jnp.allclose(mat_1, 1j * 1000.0 * C * jnp.array([[1, -1], [-1, 1]]))
    assert jnp.allclose(jnp.abs(mat_2), 2.0 * jnp.abs(mat_1))


def test_inductor_stamp_dc_short_and_ac_impedance():
    L = 1e-3
    stamp = inductor_stamp(Element(2, 0, L))
    incidence = jnp.array([[0, 0, 1], [0, 0, -1], [1, -1, 0]])

    dc_mat, dc_vec = dc_transform(stamp)
    assert jnp.allclose(dc_mat, incidence)
    assert jnp.allclose(dc_vec, jnp.zeros(3))

    omega = 1e4
    ac_mat, _ = ac_transform(stamp, omega)
    expected = incidence.astype(jnp.complex128).at[2, 2].set(-1j * omega * L)
    assert jnp.allclose(ac_mat, expected)


def test_voltage_source_stamp():
    stamp = voltage_source_stamp(Element(1, 0, 9.0))
    mat, vec = dc_transform(stamp)
    assert jnp.allclose(mat, jnp.array([[0, 0, 1], [0, 0, -1], [1, -1, 0]]))
    assert jnp.allclose(vec, jnp.array([0, 0, 9.0]))

    ac_mat, ac_vec = ac_transform(stamp, 1234.0)
    assert jnp.array_equal(ac_mat, mat)
    assert jnp.array_equal(ac_vec, vec)


@pytest.mark.parametrize(
    "etype, size",
    [
        (ElementType.RESISTOR, 2),
        (ElementType.CAPACITOR, 2),
        (ElementType.INDUCTOR, 3),
        (ElementType.VOLTAGE_SOURCE, 3),
    ],
)
def test_generate_stamp_shapes(etype, size):
    stamp = generate_stamp(etype, Element(1, 0, 1.0))
    assert stamp.size == size
    assert stamp.g.shape == (size, size)
    assert stamp.c.shape == (size, size)


def test_scatter_places_entries_and_zero_pads():
    local = jnp.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0], [7.0, 8.0, 9.0]], dtype=jnp.complex128)
    vec = jnp.array([10.0, 20.0, 30.0], dtype=jnp.complex128)
    mat_g, vec_g = scatter(local, vec, [3, 1, 4], size=5)

    assert mat_g.shape == (5, 5)
    assert mat_g[3, 3] == 1.0 and mat_g[3, 1] == 2.0 and mat_g[3, 4] == 3.0
    assert mat_g[1, 3] == 4.0 and mat_g[4, 4] == 9.0
    assert jnp.allclose(vec_g, jnp.array([0, 20.0, 0, 10.0, 30.0]))

    touched = jnp.zeros((5, 5), dtype=bool).at[jnp.ix_(jnp.array([1, 3, 4]), jnp.array([1, 3, 4]))].set(True)
    assert jnp.all(jnp.where(touched, 0.0, mat_g) == 0.0)


def test_scatter_shorted_element_adds_up():
    mat, vec = dc_transform(resistor_stamp(Element(1, 1, 2.0)))
    mat_g, _ = scatter(mat, vec, [1, 1], size=2)
    assert jnp.allclose(mat_g, jnp.zeros((2, 2)))


def test_scatter_shape_mismatch():
    mat, vec = dc_transform(resistor_stamp(Element(1, 0, 2.0)))
    with pytest.raises(ValueError):
        scatter(mat, vec, [0, 1, 2], size=3)
