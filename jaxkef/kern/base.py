"""
Kernel interface for kernel exponential family estimators.

A kernel holds two sets of input space points, the left hand side (lhs, the
training data) and the right hand side (rhs, the points the fitted model is
evaluated at). All derivative primitives take point indices into these sets,
`x` denotes the lhs argument and `y` the rhs argument. Unless stated otherwise
derivatives are taken with respect to `x`.
"""

from abc import ABC, abstractmethod

import numpy as onp

from ..core.typing import Array


class Kernel(object):
    """A generic kernel type."""
    def __call__(self, X, Y = None, diag = False) -> Array:
        """Compute the gram matrix, i.e. the kernel evaluated at every element of X paired with each element of Y (if not None, otherwise each element of X).

        Args:
            X: input space points, one per row.
            Y: input space points, one per row. If none, default to Y = X.
            diag: if `True`, compute only the diagonal elements of the gram matrix.

        Returns:
            The gram matrix or its diagonal, depending on passed parameters."""
        raise NotImplementedError()


class DerivKernel(Kernel, ABC):
    """Kernel exposing the derivative tensors needed for score matching."""

    def __init__(self):
        self.lhs = None
        self.rhs = None

    def set_lhs(self, X:Array):
        self.lhs = self._check_points(X)

    def set_rhs(self, X:Array):
        X = self._check_points(X)
        if self.lhs is not None and self.lhs.shape[1] != X.shape[1]:
            raise ValueError("Right hand side has dimension %d, left hand side has dimension %d." % (X.shape[1], self.lhs.shape[1]))
        self.rhs = X

    @staticmethod
    def _check_points(X:Array) -> Array:
        X = onp.asarray(X, dtype=onp.float64)
        if X.ndim != 2:
            raise ValueError("Expected a 2D array of points, one per row, got shape %s." % str(X.shape))
        return X

    def get_num_lhs(self) -> int:
        return 0 if self.lhs is None else self.lhs.shape[0]

    def get_num_rhs(self) -> int:
        return 0 if self.rhs is None else self.rhs.shape[0]

    def get_num_dimensions(self) -> int:
        return self.lhs.shape[1]

    def __call__(self, X, Y = None, diag = False) -> Array:
        X = self._check_points(X)
        Y = X if Y is None else self._check_points(Y)
        if diag:
            assert X.shape == Y.shape
            return onp.array([self.kernel_value(x, y) for (x, y) in zip(X, Y)])
        return onp.array([[self.kernel_value(x, y) for y in Y] for x in X])

    @abstractmethod
    def kernel_value(self, x:Array, y:Array) -> float:
        """k(x, y) for two single input space points."""
        pass

    def kernel(self, idx_a:int, idx_b:int) -> float:
        return self.kernel_value(self.lhs[idx_a], self.rhs[idx_b])

    @abstractmethod
    def dx_component(self, idx_a:int, idx_b:int, i:int) -> float:
        """dk/dx_i"""
        pass

    @abstractmethod
    def dx_dx_component(self, idx_a:int, idx_b:int, i:int) -> float:
        """d^2k/dx_i^2"""
        pass

    @abstractmethod
    def dx_dy_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        """d^2k/dx_i dy_j"""
        pass

    @abstractmethod
    def dx_dx_dy_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        """d^3k/dx_i^2 dy_j"""
        pass

    @abstractmethod
    def dx_dx_dy_dy_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        """d^4k/dx_i^2 dy_j^2"""
        pass

    @abstractmethod
    def dx_i_dx_j_component(self, idx_a:int, idx_b:int, i:int) -> Array:
        """Vector of d^2k/dx_i dx_j for all j."""
        pass

    @abstractmethod
    def dx_i_dx_i_dx_j_component(self, idx_a:int, idx_b:int, i:int) -> Array:
        """Vector of d^3k/dx_i^2 dx_j for all j."""
        pass

    @abstractmethod
    def dx_i_dx_j_dx_k_dx_k_row_sum(self, idx_a:int, idx_b:int) -> Array:
        """Matrix with entries sum_k d^4k/dx_i dx_j dx_k^2."""
        pass

    def dx_i_dx_j_dx_k_dx_k_row_sum_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        return float(self.dx_i_dx_j_dx_k_dx_k_row_sum(idx_a, idx_b)[i, j])

    @abstractmethod
    def dx_i_dx_j_dx_k_dot_vec(self, idx_a:int, idx_b:int, vec:Array) -> Array:
        """Matrix with entries sum_k d^3k/dx_i dx_j dx_k vec_k."""
        pass

    def dx_i_dx_j_dx_k_dot_vec_component(self, idx_a:int, idx_b:int, vec:Array, i:int, j:int) -> float:
        return float(self.dx_i_dx_j_dx_k_dot_vec(idx_a, idx_b, vec)[i, j])
