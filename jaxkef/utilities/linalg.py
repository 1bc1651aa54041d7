import jax.numpy as np

from ..core.typing import Array

__all__ = ["pinv_self_adjoint"]


def pinv_self_adjoint(A:Array) -> Array:
    """Moore-Penrose pseudo-inverse of a symmetric positive semi-definite matrix.

    Eigen-directions with eigenvalue below eps * m * max(eigenvalues), the
    tolerance numpy and Octave use for their pinv, are zeroed instead of
    inverted, so near-singular matrices are handled without failure.

    Args:
        A: Square, symmetric matrix.

    Returns:
        The pseudo-inverse, a square symmetric matrix of the same size.
    """
    A = np.asarray(A, dtype=np.float64)
    if len(A.shape) != 2 or A.shape[0] != A.shape[1]:
        raise ValueError("Pseudo-inverse requires a square matrix, got shape %s." % str(A.shape))
    m = A.shape[0]

    s, V = np.linalg.eigh(A)
    pinv_tol = np.finfo(A.dtype).eps * m * s.max()

    above = s > pinv_tol
    inv_s = np.where(above, 1. / np.where(above, s, 1.), 0.)

    return (V * inv_s[np.newaxis, :]) @ V.T
