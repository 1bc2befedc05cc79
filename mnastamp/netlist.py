"""mnastamp netlists.

The assembly engine never parses text: it consumes a :class:`Netlist`, four
per-type collections of named :class:`Element` records. Netlists can be built
element by element with :meth:`Netlist.add`, or from the instances/connections
dictionary format used throughout the examples (see :meth:`Netlist.from_dict`).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

import matplotlib as mpl
import matplotlib.pyplot as plt
import networkx as nx
import numpy as np
from natsort import natsorted

from mnastamp.errors import UnsupportedElementError

logger = logging.getLogger(__name__)

GROUND = 0


class Element(NamedTuple):
    """A two-terminal element.

    ``value`` is a resistance (Ohm), capacitance (F), inductance (H) or
    source voltage (V) depending on the element type.
    """

    pos: int
    neg: int
    value: float


class ElementType(Enum):
    RESISTOR = "r"
    CAPACITOR = "c"
    INDUCTOR = "l"
    VOLTAGE_SOURCE = "v"

    @property
    def has_branch(self) -> bool:
        """True for elements that carry a branch-current unknown."""
        return self in (ElementType.INDUCTOR, ElementType.VOLTAGE_SOURCE)


def element_type(name: str) -> ElementType:
    """Derive the element type from the first character of its name.

    Raises:
        UnsupportedElementError: If the prefix is not one of r, c, l, v.
    """
    if not name:
        raise UnsupportedElementError(name)
    try:
        return ElementType(name[0].lower())
    except ValueError:
        raise UnsupportedElementError(name) from None


# component kind -> (bucket, settings key, default value)
COMPONENT_KINDS = {
    "source_voltage": ("v", "V", 0.0),
    "resistor": ("r", "R", 1e3),
    "capacitor": ("c", "C", 1e-12),
    "inductor": ("l", "L", 1e-9),
}


@dataclass
class Netlist:
    """Per-type collections of named elements.

    Attributes:
        v: Independent voltage sources.
        r: Resistors.
        c: Capacitors.
        l: Inductors.
    """

    v: dict[str, Element] = field(default_factory=dict)
    r: dict[str, Element] = field(default_factory=dict)
    c: dict[str, Element] = field(default_factory=dict)
    l: dict[str, Element] = field(default_factory=dict)  # noqa: E741

    def add(self, name: str, pos: int, neg: int, value: float) -> Element:
        """Add an element to the collection matching its name prefix."""
        etype = element_type(name)
        elem = Element(int(pos), int(neg), float(value))
        getattr(self, etype.value)[name] = elem
        return elem

    def elements(self) -> Iterator[tuple[str, Element]]:
        """Iterate sources, then resistors, capacitors and inductors.

        This order fixes node-index assignment during assembly.
        """
        for bucket in (self.v, self.r, self.c, self.l):
            yield from bucket.items()

    def __len__(self) -> int:
        return len(self.v) + len(self.r) + len(self.c) + len(self.l)

    def nodes(self) -> list[int]:
        """Sorted ids of every real node referenced by an element."""
        found = set()
        for _, elem in self.elements():
            found.update((elem.pos, elem.neg))
        return sorted(found)

    @classmethod
    def from_dict(cls, net_dict: dict) -> Netlist:
        """Build a netlist from an instances/connections dictionary.

        Instances use the component kinds ``resistor``, ``capacitor``,
        ``inductor``, ``source_voltage`` and ``ground``. Port ``p1`` is the
        positive terminal and ``p2`` the negative one.

        Example::

            net_dict = {
                "instances": {
                    "GND": {"component": "ground"},
                    "V1": {"component": "source_voltage", "settings": {"V": 9.0}},
                    "R1": {"component": "resistor", "settings": {"R": 1e3}},
                },
                "connections": {"GND,p1": ("V1,p2", "R1,p2"), "V1,p1": "R1,p1"},
            }

        Raises:
            ValueError: For unknown component kinds or unconnected ports.
        """
        port_map, _ = build_net_map(net_dict)
        netlist = cls()
        for name, inst in net_dict.get("instances", {}).items():
            kind = inst.get("component")
            if kind == "ground":
                continue
            if kind not in COMPONENT_KINDS:
                raise ValueError(
                    f"Unknown component '{kind}' for instance '{name}'. "
                    f"Available components are {[*COMPONENT_KINDS, 'ground']}"
                )
            bucket, key, default = COMPONENT_KINDS[kind]
            terminals = []
            for port in ("p1", "p2"):
                port_str = f"{name},{port}"
                if port_str not in port_map:
                    raise ValueError(f"Port '{port_str}' is not connected.")
                terminals.append(port_map[port_str])
            value = inst.get("settings", {}).get(key, default)
            getattr(netlist, bucket)[name] = Element(terminals[0], terminals[1], float(value))
        logger.debug("Built netlist with %d elements from dict", len(netlist))
        return netlist


def build_net_map(netlist: dict) -> tuple[dict[str, int], int]:
    """Maps every port (e.g. 'R1,p1') to a generic Node Index (integer).

    Returns:
        port_to_idx: dict mapping 'Instance,Pin' -> int index
        num_nets: Total number of node indices, ground included.

    """
    g = nx.Graph()

    for src, targets in netlist.get("connections", {}).items():
        if isinstance(targets, str):
            targets = [targets]
        g.add_node(src)
        for tgt in targets:
            g.add_edge(src, tgt)

    components = list(nx.connected_components(g))
    components.sort(key=lambda x: natsorted(list(x))[0])  # Deterministic sort

    port_to_idx = {}
    current_idx = 1  # Start at 1, 0 is reserved for Ground

    for comp in components:
        is_ground = any("GND" in node for node in comp)
        net_id = GROUND if is_ground else current_idx

        for node in comp:
            port_to_idx[node] = net_id

        if not is_ground:
            current_idx += 1

    return port_to_idx, current_idx


def element_graph(netlist: Netlist) -> nx.MultiGraph:
    """Nets as graph nodes, elements as edges keyed by instance name."""
    g = nx.MultiGraph()
    g.add_node(GROUND)
    for name, elem in netlist.elements():
        g.add_edge(elem.pos, elem.neg, key=name)
    return g


def floating_nodes(netlist: Netlist) -> tuple[int, ...]:
    """Node ids with no path to ground through any element."""
    g = element_graph(netlist)
    grounded = nx.node_connected_component(g, GROUND)
    return tuple(sorted(n for n in g.nodes if n not in grounded))


def draw_circuit_graph(
    netlist: Netlist,
    layout_attempts: int = 10,
    *,
    show: bool = True,
) -> mpl.figure.Figure:
    """Visualize a netlist as a connectivity graph.

    Each net is drawn as a circle (black for ground, skyblue otherwise) and
    each element as an edge labelled with its instance name. Parallel
    elements share one edge whose label lists all of them.

    The layout is computed by running ``networkx.spring_layout`` up to
    ``layout_attempts`` times with different seeds and keeping the candidate
    with the fewest edge crossings.

    Args:
        netlist: The circuit to draw.
        layout_attempts: Number of spring-layout seeds to try.
        show: If ``True``, call ``plt.show()`` before returning.

    Returns:
        The :class:`matplotlib.figure.Figure` containing the rendered graph.

    """
    G = nx.Graph()
    G.add_node(GROUND)
    edge_labels: dict[tuple[int, int], list[str]] = {}
    for name, elem in netlist.elements():
        G.add_edge(elem.pos, elem.neg)
        edge = tuple(sorted((elem.pos, elem.neg)))
        edge_labels.setdefault(edge, []).append(name)

    def count_crossings(pos: dict[int, np.ndarray]) -> int:

        def cross(o: np.ndarray, a: np.ndarray, b: np.ndarray) -> float:
            return float((a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0]))

        edges = list(G.edges())
        crossings = 0
        for i in range(len(edges)):
            for j in range(i + 1, len(edges)):
                u1, v1 = edges[i]
                u2, v2 = edges[j]
                # Adjacent edges always meet, they never cross
                if u1 in (u2, v2) or v1 in (u2, v2):
                    continue
                p1, p2, p3, p4 = pos[u1], pos[v1], pos[u2], pos[v2]
                d1, d2 = cross(p3, p4, p1), cross(p3, p4, p2)
                d3, d4 = cross(p1, p2, p3), cross(p1, p2, p4)
                if d1 * d2 < 0 and d3 * d4 < 0:
                    crossings += 1
        return crossings

    best_pos = None
    best_crossings = float("inf")
    for seed in range(max(layout_attempts, 1)):
        rng = np.random.default_rng(seed)
        init_pos = {n: rng.uniform(-1, 1, size=2) for n in G.nodes}
        candidate_pos = nx.spring_layout(G, pos=init_pos, k=0.8, iterations=80, seed=seed)
        crossings = count_crossings(candidate_pos)
        if crossings < best_crossings:
            best_crossings = crossings
            best_pos = candidate_pos

    fig = plt.figure(figsize=(8, 6))
    nodes = list(G.nodes)
    nx.draw_networkx_nodes(
        G,
        best_pos,
        nodelist=nodes,
        node_color=["black" if n == GROUND else "skyblue" for n in nodes],
        node_size=600,
    )
    nx.draw_networkx_labels(
        G, best_pos, labels={n: "GND" if n == GROUND else str(n) for n in nodes}, font_size=9
    )
    nx.draw_networkx_edges(G, best_pos, width=1.5, edge_color="gray")
    nx.draw_networkx_edge_labels(
        G,
        best_pos,
        edge_labels={e: ", ".join(names) for e, names in edge_labels.items() if e[0] != e[1]},
        font_color="blue",
    )

    ax = plt.gca()
    ax.set_title("Circuit Connectivity Graph")
    ax.axis("off")
    fig.tight_layout()

    if show:
        plt.show()

    return fig
