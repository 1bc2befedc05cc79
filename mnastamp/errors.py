"""Exceptions raised by the assembly engine and the solvers.

Every exception derives from :class:`MnaError` and from the closest builtin,
so callers can catch either the package hierarchy or the usual
``ValueError``/``RuntimeError`` families.
"""

from typing import Any


class MnaError(Exception):
    """Base class for all mnastamp errors."""


class UnsupportedElementError(MnaError, ValueError):
    """The element name prefix does not map to a known element type."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Unsupported element '{name}'. "
            "Names must start with one of 'V', 'R', 'C' or 'L'."
        )


class UnsupportedAnalysisError(MnaError, NotImplementedError):
    """The requested analysis is not implemented (transient)."""

    def __init__(self, analysis: Any) -> None:
        self.analysis = analysis
        super().__init__(f"Analysis '{analysis}' is not supported.")


class SingularSystemError(MnaError, ArithmeticError):
    """The (ground-reduced) system matrix is not invertible.

    Attributes:
        size: Dimension of the system that failed to solve.
        rank: Numerical rank of the matrix, if it was computed.
        floating: Node ids with no path to ground, when known.
    """

    def __init__(
        self,
        size: int,
        rank: int | None = None,
        floating: tuple[int, ...] = (),
    ) -> None:
        self.size = size
        self.rank = rank
        self.floating = tuple(floating)
        msg = f"Singular system of size {size}"
        if rank is not None:
            msg += f" (rank {rank})"
        if self.floating:
            msg += f"; floating nodes: {list(self.floating)}"
        super().__init__(msg)


class InvalidStateError(MnaError, RuntimeError):
    """Internal consistency fault of a CircuitSystem."""
