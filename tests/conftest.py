import sys
from pathlib import Path

import jax
import matplotlib
import pytest

# Ensure project root is on sys.path so tests can import the local package
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Shared fixtures for tests
jax.config.update("jax_enable_x64", True)
matplotlib.use("Agg")


@pytest.fixture
def divider_netlist():
    """9 V source feeding a 1k/2k divider; node 2 sits at 6 V."""
    from mnastamp.netlist import Netlist

    netlist = Netlist()
    netlist.add("V1", 1, 0, 9.0)
    netlist.add("R1", 1, 2, 1000.0)
    netlist.add("R2", 2, 0, 2000.0)
    return netlist


@pytest.fixture
def rc_lowpass_netlist():
    """First order RC low-pass, corner at omega = 1/RC = 1000 rad/s."""
    from mnastamp.netlist import Netlist

    netlist = Netlist()
    netlist.add("V1", 1, 0, 1.0)
    netlist.add("R1", 1, 2, 1000.0)
    netlist.add("C1", 2, 0, 1e-6)
    return netlist


@pytest.fixture
def rl_netlist():
    from mnastamp.netlist import Netlist

    netlist = Netlist()
    netlist.add("V1", 1, 0, 1.0)
    netlist.add("R1", 1, 2, 10.0)
    netlist.add("L1", 2, 0, 1e-3)
    return netlist


@pytest.fixture
def floating_netlist():
    from mnastamp.netlist import Netlist

    netlist = Netlist()
    netlist.add("R1", 1, 2, 100.0)
    return netlist


@pytest.fixture
def simple_lrc_net_dict():
    """Instances/connections form of a series V-R-L-C loop."""
    return {
        "instances": {
            "GND": {"component": "ground"},
            "V1": {"component": "source_voltage", "settings": {"V": 5.0}},
            "R1": {"component": "resistor", "settings": {"R": 10.0}},
            "C1": {"component": "capacitor", "settings": {"C": 1e-11}},
            "L1": {"component": "inductor", "settings": {"L": 5e-9}},
        },
        "connections": {
            "GND,p1": ("V1,p2", "C1,p2"),
            "V1,p1": "R1,p1",
            "R1,p2": "L1,p1",
            "L1,p2": "C1,p1",
        },
    }
