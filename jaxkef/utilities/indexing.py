import numpy as onp
from sklearn.utils import check_random_state

from ..core.typing import Array, IndexPair, RandomStateT

__all__ = ["idx_to_ai", "ai_to_idx", "check_random_state", "sub_sample_rkhs_basis", "sub_sample_rkhs_basis_points", "check_rkhs_basis_inds"]


def idx_to_ai(idx:int, D:int) -> IndexPair:
    """Decode a flattened coordinate index into (point index, dimension index)."""
    return (idx // D, idx % D)


def ai_to_idx(a:int, i:int, D:int) -> int:
    return a * D + i


def sub_sample_rkhs_basis(N:int, D:int, num_rkhs_basis:int, random_state:RandomStateT = None) -> Array:
    """Uniformly sub-sample `num_rkhs_basis` of the N*D coordinates as RKHS basis.

    Returns:
        Sorted array of distinct flattened coordinate indices.
    """
    if num_rkhs_basis < 1 or num_rkhs_basis > N * D:
        raise ValueError("Number of RKHS basis functions (%d) must be in [1, %d]." % (num_rkhs_basis, N * D))
    permutation = check_random_state(random_state).permutation(N * D)
    # sorted for sequential data reads
    return onp.sort(permutation[:num_rkhs_basis])


def sub_sample_rkhs_basis_points(N:int, D:int, num_points:int, random_state:RandomStateT = None) -> Array:
    """Uniformly sub-sample `num_points` data points and use all of their D coordinates as RKHS basis."""
    if num_points < 1 or num_points > N:
        raise ValueError("Number of basis points (%d) must be in [1, %d]." % (num_points, N))
    points = onp.sort(check_random_state(random_state).permutation(N)[:num_points])
    return (points[:, onp.newaxis] * D + onp.arange(D)[onp.newaxis, :]).ravel()


def check_rkhs_basis_inds(rkhs_basis_inds:Array, N:int, D:int) -> Array:
    inds = onp.asarray(rkhs_basis_inds)
    if inds.ndim != 1 or inds.size == 0:
        raise ValueError("RKHS basis indices must be a non-empty 1D sequence.")
    if not onp.issubdtype(inds.dtype, onp.integer):
        raise ValueError("RKHS basis indices must be integers, got %s." % str(inds.dtype))
    if inds.min() < 0 or inds.max() >= N * D:
        raise ValueError("RKHS basis indices must be in [0, %d)." % (N * D))
    if len(onp.unique(inds)) != len(inds):
        raise ValueError("RKHS basis indices must be distinct.")
    return inds.astype(onp.int64)
