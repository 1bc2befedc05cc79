"""Ground elimination and dense linear solvers."""

from .dense import (
    remove_ground_from_matrix,
    remove_ground_from_vector,
    solve_dense,
    solve_dense_batched,
)

__all__ = [
    "remove_ground_from_matrix",
    "remove_ground_from_vector",
    "solve_dense",
    "solve_dense_batched",
]
