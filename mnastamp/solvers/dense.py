"""Ground elimination and dense linear solves.

Dense LU (``jnp.linalg.solve``) is used throughout: MNA systems handled here
are small (a few hundred unknowns), where stability matters more than memory.
"""

import jax
import jax.numpy as jnp

from mnastamp.errors import InvalidStateError, SingularSystemError


def remove_ground_from_matrix(matrix: jax.Array) -> jax.Array:
    """Drop row 0 and column 0 (the ground reference)."""
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise InvalidStateError(f"Expected a square matrix, got shape {matrix.shape}")
    if matrix.shape[0] < 1:
        raise InvalidStateError("Cannot remove ground from an empty system")
    return matrix[1:, 1:]


def remove_ground_from_vector(vector: jax.Array) -> jax.Array:
    """Drop entry 0 (the ground reference)."""
    if vector.shape[0] < 1:
        raise InvalidStateError("Cannot remove ground from an empty system")
    return vector[1:]


def _check_shapes(matrix: jax.Array, vector: jax.Array) -> int:
    n = vector.shape[-1]
    if matrix.shape[-2:] != (n, n):
        raise InvalidStateError(
            f"Matrix of shape {matrix.shape} does not match vector of length {n}"
        )
    return n


def solve_dense(matrix: jax.Array, vector: jax.Array) -> jax.Array:
    """Solve ``matrix @ x = vector``.

    Args:
        matrix: Square system matrix of shape ``(n, n)``.
        vector: Right-hand side of shape ``(n,)``.

    Returns:
        The solution vector ``x`` of shape ``(n,)``.

    Raises:
        SingularSystemError: If the matrix is rank deficient or the solve
            produces non-finite values.
        InvalidStateError: If the matrix and vector dimensions disagree.
    """
    n = _check_shapes(matrix, vector)
    if n == 0:
        return jnp.zeros(0, dtype=vector.dtype)

    rank = int(jnp.linalg.matrix_rank(matrix))
    if rank < n:
        raise SingularSystemError(n, rank)

    x = jnp.linalg.solve(matrix, vector)
    if not bool(jnp.all(jnp.isfinite(x))):
        raise SingularSystemError(n, rank)
    return x


@jax.jit
def _batched_solve(matrices: jax.Array, vectors: jax.Array) -> tuple[jax.Array, jax.Array]:
    ranks = jax.vmap(jnp.linalg.matrix_rank)(matrices)
    xs = jax.vmap(jnp.linalg.solve)(matrices, vectors)
    return xs, ranks


def solve_dense_batched(matrices: jax.Array, vectors: jax.Array) -> jax.Array:
    """Solve a stack of systems ``matrices[k] @ x[k] = vectors[k]`` in one batch.

    Raises:
        SingularSystemError: For the first system in the batch that is
            rank deficient or whose solution is not finite.
    """
    n = _check_shapes(matrices, vectors)
    if n == 0:
        return jnp.zeros(vectors.shape, dtype=vectors.dtype)

    xs, ranks = _batched_solve(matrices, vectors)
    finite = jnp.all(jnp.isfinite(xs), axis=-1)
    for k in range(xs.shape[0]):
        if int(ranks[k]) < n or not bool(finite[k]):
            raise SingularSystemError(n, int(ranks[k]))
    return xs
