"""The MNA system and its assembler.

:class:`CircuitSystem` owns the global matrix, the excitation vector and the
registry of unknowns. It grows one row/column at a time while a netlist is
assembled, is reduced by removing the ground reference and is finally solved.

Example::

    netlist = Netlist()
    netlist.add("V1", 1, 0, 9.0)
    netlist.add("R1", 1, 2, 1000.0)
    netlist.add("R2", 2, 0, 2000.0)

    system = CircuitSystem()
    system.assemble(netlist, Analysis.DC)
    system.remove_ground()
    x = system.solve()
    x[system.index_of(2)]  # 6.0
"""

import logging
from collections.abc import Hashable
from enum import Enum

import jax
import jax.numpy as jnp

from mnastamp.errors import InvalidStateError, UnsupportedAnalysisError
from mnastamp.netlist import GROUND, Element, Netlist, element_type
from mnastamp.registry import BranchId, NodeRegistry
from mnastamp.solvers.dense import (
    remove_ground_from_matrix,
    remove_ground_from_vector,
    solve_dense,
)
from mnastamp.stamps import DTYPE, ac_transform, dc_transform, generate_stamp, scatter

logger = logging.getLogger(__name__)


class Analysis(str, Enum):
    DC = "dc"
    AC = "ac"
    TRANSIENT = "transient"


class CircuitSystem:
    """Growing dense MNA system ``matrix @ x = vector``.

    Starts as a 2x2 zero system over the placeholder nodes ``[0, 1]``; row and
    column 0 are the ground reference until :meth:`remove_ground` is called.

    Attributes:
        matrix: Square ``complex128`` admittance/constraint matrix.
        vector: ``complex128`` excitation vector.
    """

    def __init__(self) -> None:
        self.registry = NodeRegistry((GROUND, 1))
        self.matrix: jax.Array = jnp.zeros((2, 2), dtype=DTYPE)
        self.vector: jax.Array = jnp.zeros(2, dtype=DTYPE)
        self.grounded = True

    @property
    def nodes(self) -> tuple[Hashable, ...]:
        """Ordered unknowns: node ids and :class:`BranchId` entries."""
        return self.registry.keys

    def node_count(self) -> int:
        return len(self.registry)

    def index_of(self, key: Hashable) -> int:
        return self.registry.index_of(key)

    def current_system(self) -> tuple[jax.Array, jax.Array]:
        """Snapshot of ``(matrix, vector)``."""
        return jnp.array(self.matrix), jnp.array(self.vector)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def _grow(self) -> None:
        self.matrix = jnp.pad(self.matrix, ((0, 1), (0, 1)))
        self.vector = jnp.pad(self.vector, (0, 1))

    def register_node(self, node: int) -> int:
        """Index of ``node``, appending a zero row/column if it is new."""
        index, added = self.registry.register(node)
        if added:
            self._grow()
            logger.debug("Registered node %s at index %d", node, index)
        return index

    def register_branch(self, element: str | None = None) -> int:
        """Append a branch-current unknown and return its index."""
        index, branch = self.registry.register_branch(element)
        self._grow()
        logger.debug("Registered %r at index %d", branch, index)
        return index

    def branch_of(self, element: str) -> BranchId:
        """The branch-current key registered for ``element``."""
        for key in self.registry:
            if isinstance(key, BranchId) and key.element == element:
                return key
        raise KeyError(f"No branch current registered for '{element}'")

    # ------------------------------------------------------------------
    # Assembly
    # ------------------------------------------------------------------
    def assemble(
        self,
        netlist: Netlist,
        analysis: Analysis | str = Analysis.DC,
        omega: float = 0.0,
    ) -> None:
        """Stamp every element of ``netlist`` into the system.

        Args:
            netlist: Elements to assemble, visited in
                :meth:`Netlist.elements` order.
            analysis: ``Analysis.DC`` or ``Analysis.AC`` (or their string
                values). ``Analysis.TRANSIENT`` is rejected.
            omega: Angular frequency in rad/s, used only for AC.

        Raises:
            UnsupportedAnalysisError: For transient analysis, before the
                system is modified.
            UnsupportedElementError: For an element name with an unknown
                prefix. Elements visited before it remain stamped.
            InvalidStateError: If the ground reference was already removed.
        """
        try:
            analysis = Analysis(analysis.lower())
        except (AttributeError, ValueError):
            raise UnsupportedAnalysisError(analysis) from None
        if analysis is Analysis.TRANSIENT:
            raise UnsupportedAnalysisError(analysis.value)
        if not self.grounded:
            raise InvalidStateError("Cannot assemble after the ground reference was removed")

        for name, elem in netlist.elements():
            self._assemble_element(name, elem, analysis, omega)
        logger.debug(
            "Assembled %d elements (%s) into a %dx%d system",
            len(netlist), analysis.value, *self.matrix.shape,
        )

    def _assemble_element(self, name: str, elem: Element, analysis: Analysis, omega: float) -> None:
        etype = element_type(name)

        indices = [self.register_node(elem.pos), self.register_node(elem.neg)]
        if etype.has_branch:
            indices.append(self.register_branch(name))

        stamp = generate_stamp(etype, elem)
        if analysis is Analysis.AC:
            local_mat, local_vec = ac_transform(stamp, omega)
        else:
            local_mat, local_vec = dc_transform(stamp)

        size = self.node_count()
        global_mat, global_vec = scatter(local_mat, local_vec, indices, size)
        self.matrix = self.matrix + global_mat
        self.vector = self.vector + global_vec
        logger.debug("Stamped %s at %s", name, indices)

    # ------------------------------------------------------------------
    # Reduction & solve
    # ------------------------------------------------------------------
    def remove_ground(self) -> None:
        """Remove index 0 (the ground reference) from the system in place."""
        if self.node_count() < 1:
            raise InvalidStateError("Cannot remove ground from an empty system")
        self.matrix = remove_ground_from_matrix(self.matrix)
        self.vector = remove_ground_from_vector(self.vector)
        dropped = self.registry.drop_first()
        self.grounded = False
        logger.debug("Removed %s, system is now %dx%d", dropped, *self.matrix.shape)

    def solve(self) -> jax.Array:
        """Solve the system; the result is ordered like :attr:`nodes`.

        Raises:
            SingularSystemError: If the matrix is not invertible.
            InvalidStateError: If the matrix, vector and nodes disagree in size.
        """
        n = self.node_count()
        if self.matrix.shape != (n, n) or self.vector.shape != (n,):
            raise InvalidStateError(
                f"Inconsistent system: matrix {self.matrix.shape}, "
                f"vector {self.vector.shape}, {n} nodes"
            )
        return solve_dense(self.matrix, self.vector)

    def solution_map(self, x: jax.Array) -> dict[Hashable, complex]:
        """Pair each unknown in :attr:`nodes` with its entry in ``x``."""
        if x.shape != (self.node_count(),):
            raise InvalidStateError(
                f"Solution of shape {x.shape} does not match {self.node_count()} nodes"
            )
        return {key: complex(value) for key, value in zip(self.nodes, x.tolist())}
