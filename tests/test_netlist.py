import pytest
from matplotlib.figure import Figure

from mnastamp.errors import UnsupportedElementError
from mnastamp.netlist import (
    Element,
    ElementType,
    Netlist,
    build_net_map,
    draw_circuit_graph,
    element_type,
    floating_nodes,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("R1", ElementType.RESISTOR),
        ("rload", ElementType.RESISTOR),
        ("C2", ElementType.CAPACITOR),
        ("l1", ElementType.INDUCTOR),
        ("Vin", ElementType.VOLTAGE_SOURCE),
        ("v", ElementType.VOLTAGE_SOURCE),
    ],
)
def test_element_type_from_prefix(name, expected):
    assert element_type(name) is expected


@pytest.mark.parametrize("name", ["Q1", "I1", "x", ""])
def test_element_type_rejects_unknown_prefix(name):
    with pytest.raises(UnsupportedElementError):
        element_type(name)


def test_branch_elements():
    assert ElementType.VOLTAGE_SOURCE.has_branch
    assert ElementType.INDUCTOR.has_branch
    assert not ElementType.RESISTOR.has_branch
    assert not ElementType.CAPACITOR.has_branch


def test_add_buckets_by_prefix():
    netlist = Netlist()
    netlist.add("L1", 2, 0, 1e-3)
    netlist.add("C1", 2, 0, 1e-6)
    netlist.add("R1", 1, 2, 10)
    netlist.add("V1", 1, 0, 5)

    assert netlist.v == {"V1": Element(1, 0, 5.0)}
    assert netlist.r == {"R1": Element(1, 2, 10.0)}
    assert "C1" in netlist.c and "L1" in netlist.l
    assert len(netlist) == 4
    assert netlist.nodes() == [0, 1, 2]


def test_add_rejects_unknown_prefix():
    with pytest.raises(UnsupportedElementError):
        Netlist().add("D1", 1, 0, 1.0)


def test_elements_order_is_sources_resistors_capacitors_inductors():
    netlist = Netlist()
    netlist.add("L1", 2, 0, 1e-3)
    netlist.add("C1", 2, 0, 1e-6)
    netlist.add("R2", 2, 0, 10)
    netlist.add("R1", 1, 2, 10)
    netlist.add("V1", 1, 0, 5)

    names = [name for name, _ in netlist.elements()]
    assert names == ["V1", "R2", "R1", "C1", "L1"]


def test_build_net_map(simple_lrc_net_dict):
    port_map, num_nets = build_net_map(simple_lrc_net_dict)

    assert port_map["GND,p1"] == 0
    assert port_map["V1,p2"] == 0 and port_map["C1,p2"] == 0
    assert port_map["V1,p1"] == port_map["R1,p1"]
    assert port_map["L1,p2"] == port_map["C1,p1"]
    assert num_nets == 4


def test_from_dict(simple_lrc_net_dict):
    netlist = Netlist.from_dict(simple_lrc_net_dict)

    assert netlist.v["V1"] == Element(3, 0, 5.0)
    assert netlist.r["R1"] == Element(3, 2, 10.0)
    assert netlist.l["L1"] == Element(2, 1, 5e-9)
    assert netlist.c["C1"] == Element(1, 0, 1e-11)


def test_from_dict_defaults_missing_settings():
    net_dict = {
        "instances": {"GND": {"component": "ground"}, "R1": {"component": "resistor"}},
        "connections": {"GND,p1": "R1,p2", "R1,p1": ()},
    }
    netlist = Netlist.from_dict(net_dict)
    assert netlist.r["R1"].value == 1e3


def test_from_dict_unknown_component():
    net_dict = {
        "instances": {"GND": {"component": "ground"}, "D1": {"component": "diode"}},
        "connections": {"GND,p1": "D1,p2", "D1,p1": ()},
    }
    with pytest.raises(ValueError, match="Unknown component"):
        Netlist.from_dict(net_dict)


def test_from_dict_unconnected_port():
    net_dict = {
        "instances": {"GND": {"component": "ground"}, "R1": {"component": "resistor"}},
        "connections": {"GND,p1": "R1,p2"},
    }
    with pytest.raises(ValueError, match="not connected"):
        Netlist.from_dict(net_dict)


def test_floating_nodes(divider_netlist, floating_netlist):
    assert floating_nodes(divider_netlist) == ()
    assert floating_nodes(floating_netlist) == (1, 2)


def test_draw_circuit_graph_returns_figure(rc_lowpass_netlist):
    fig = draw_circuit_graph(rc_lowpass_netlist, layout_attempts=2, show=False)
    assert isinstance(fig, Figure)
    assert len(fig.axes) >= 1
