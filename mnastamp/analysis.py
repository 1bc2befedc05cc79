"""High level analyses built on :class:`~mnastamp.system.CircuitSystem`.

* :func:`analyze_circuit` - one DC or AC operating point as a ``{key: value}`` map.
* :func:`ac_sweep` - the AC response over many angular frequencies, with all
  reduced systems solved in a single ``jax.vmap`` batch.
* :func:`bode` / :func:`plot_bode` - magnitude and phase of one unknown of a sweep.
"""

import logging
from collections.abc import Hashable, Sequence
from typing import NamedTuple

import jax
import jax.numpy as jnp
import matplotlib as mpl
import matplotlib.pyplot as plt

from mnastamp.errors import SingularSystemError
from mnastamp.netlist import Netlist, floating_nodes
from mnastamp.solvers.dense import solve_dense_batched
from mnastamp.system import Analysis, CircuitSystem
from mnastamp.utils import branch_label

logger = logging.getLogger(__name__)


def _singular_with_context(exc: SingularSystemError, netlist: Netlist) -> SingularSystemError:
    return SingularSystemError(exc.size, exc.rank, floating_nodes(netlist))


def analyze_circuit(
    netlist: Netlist,
    analysis: Analysis | str = Analysis.DC,
    omega: float = 0.0,
) -> dict[Hashable, complex]:
    """Assemble, ground-reduce and solve ``netlist``.

    Args:
        netlist: The circuit.
        analysis: ``"dc"`` or ``"ac"``.
        omega: Angular frequency in rad/s for AC analysis.

    Returns:
        A dict mapping every node id (ground excluded) and every
        :class:`~mnastamp.registry.BranchId` to its complex solution.

    Raises:
        SingularSystemError: If the circuit cannot be solved. Nodes with no
            path to ground are listed in the error.
    """
    system = CircuitSystem()
    system.assemble(netlist, analysis, omega)
    system.remove_ground()
    try:
        x = system.solve()
    except SingularSystemError as exc:
        raise _singular_with_context(exc, netlist) from exc
    return system.solution_map(x)


class SweepResult(NamedTuple):
    """Solutions of an AC sweep.

    Attributes:
        omegas: Angular frequencies, shape ``(F,)``.
        nodes: Unknowns, in the column order of ``solutions``.
        solutions: Complex solutions, shape ``(F, len(nodes))``.
    """

    omegas: jax.Array
    nodes: tuple[Hashable, ...]
    solutions: jax.Array

    def response(self, key: Hashable) -> jax.Array:
        """Solution of one node id or branch over every frequency."""
        try:
            col = self.nodes.index(key)
        except ValueError:
            raise KeyError(f"'{key}' is not an unknown of this sweep") from None
        return self.solutions[:, col]


def ac_sweep(netlist: Netlist, omegas: Sequence[float] | jax.Array) -> SweepResult:
    """AC analysis of ``netlist`` at each angular frequency in ``omegas``.

    Raises:
        SingularSystemError: If the system is singular at any frequency.
    """
    omegas = jnp.atleast_1d(jnp.asarray(omegas, dtype=jnp.float64))
    if omegas.shape[0] == 0:
        raise ValueError("ac_sweep needs at least one frequency")
    matrices, vectors = [], []
    nodes: tuple[Hashable, ...] = ()
    for omega in omegas.tolist():
        system = CircuitSystem()
        system.assemble(netlist, Analysis.AC, omega)
        system.remove_ground()
        matrix, vector = system.current_system()
        matrices.append(matrix)
        vectors.append(vector)
        nodes = system.nodes
    logger.debug("Solving %d frequency points of size %d", len(matrices), len(nodes))

    try:
        solutions = solve_dense_batched(jnp.stack(matrices), jnp.stack(vectors))
    except SingularSystemError as exc:
        raise _singular_with_context(exc, netlist) from exc
    return SweepResult(omegas=omegas, nodes=nodes, solutions=solutions)


def bode(sweep: SweepResult, key: Hashable) -> tuple[jax.Array, jax.Array]:
    """Magnitude (dB) and phase (degrees) of one unknown over a sweep."""
    h = sweep.response(key)
    magnitude_db = 20.0 * jnp.log10(jnp.abs(h))
    phase_deg = jnp.degrees(jnp.angle(h))
    return magnitude_db, phase_deg


def plot_bode(
    sweep: SweepResult,
    key: Hashable,
    *,
    show: bool = True,
) -> mpl.figure.Figure:
    """Plot the Bode diagram of one unknown against angular frequency.

    Args:
        sweep: Result of :func:`ac_sweep`.
        key: Node id or branch to plot.
        show: If ``True``, call ``plt.show()`` before returning.

    Returns:
        The :class:`matplotlib.figure.Figure` with magnitude and phase axes.
    """
    magnitude_db, phase_deg = bode(sweep, key)

    fig, (ax_mag, ax_phase) = plt.subplots(2, 1, sharex=True, figsize=(8, 6))
    ax_mag.semilogx(sweep.omegas, magnitude_db, "b-")
    ax_mag.set_ylabel("Magnitude (dB)")
    ax_mag.grid(True, which="both")
    ax_phase.semilogx(sweep.omegas, phase_deg, "r-")
    ax_phase.set_ylabel("Phase (deg)")
    ax_phase.set_xlabel("Angular frequency (rad/s)")
    ax_phase.grid(True, which="both")
    ax_mag.set_title(f"Bode plot of {branch_label(key)}")
    fig.tight_layout()

    if show:
        plt.show()

    return fig
