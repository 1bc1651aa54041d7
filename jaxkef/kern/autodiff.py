from typing import Callable

import numpy as onp
import jax.numpy as np
from jax import jit, grad, jacfwd, hessian

from ..core.typing import Array
from ..kern.base import DerivKernel


class AutodiffKernel(DerivKernel):
    def __init__(self, kernel_fn:Callable[[Array, Array], Array]):
        """A kernel whose derivative tensors are all obtained by automatic differentiation of a scalar kernel function.

        Args:
            kernel_fn: Callable taking two single input space points (1D arrays) and returning the kernel value. Has to be differentiable four times by jax.
        """
        super().__init__()
        self.kernel_fn = kernel_fn

        dx = grad(kernel_fn, 0)
        dx_dx = hessian(kernel_fn, 0)
        dx_dx_dx = jacfwd(dx_dx, 0)
        dx_dx_dy = jacfwd(dx_dx, 1)

        self._k = jit(kernel_fn)
        self._dx = jit(dx)
        self._dx_dx = jit(dx_dx)
        self._dx_dy = jit(jacfwd(dx, 1))
        self._dx_dx_dx = jit(dx_dx_dx)
        self._dx_dx_dy = jit(dx_dx_dy)
        self._dx_dx_dy_dy = jit(jacfwd(dx_dx_dy, 1))
        self._dx_dx_dx_dx = jit(jacfwd(dx_dx_dx, 0))

    def _pts(self, idx_a:int, idx_b:int):
        return np.asarray(self.lhs[idx_a]), np.asarray(self.rhs[idx_b])

    def _eval(self, fn, idx_a:int, idx_b:int) -> Array:
        return onp.asarray(fn(*self._pts(idx_a, idx_b)), dtype=onp.float64)

    def kernel_value(self, x:Array, y:Array) -> float:
        return float(self._k(np.asarray(x), np.asarray(y)))

    def dx_component(self, idx_a:int, idx_b:int, i:int) -> float:
        return float(self._eval(self._dx, idx_a, idx_b)[i])

    def dx_dx_component(self, idx_a:int, idx_b:int, i:int) -> float:
        return float(self._eval(self._dx_dx, idx_a, idx_b)[i, i])

    def dx_dy_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        return float(self._eval(self._dx_dy, idx_a, idx_b)[i, j])

    def dx_dx_dy_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        return float(self._eval(self._dx_dx_dy, idx_a, idx_b)[i, i, j])

    def dx_dx_dy_dy_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        return float(self._eval(self._dx_dx_dy_dy, idx_a, idx_b)[i, i, j, j])

    def dx_i_dx_j_component(self, idx_a:int, idx_b:int, i:int) -> Array:
        return self._eval(self._dx_dx, idx_a, idx_b)[i]

    def dx_i_dx_i_dx_j_component(self, idx_a:int, idx_b:int, i:int) -> Array:
        return self._eval(self._dx_dx_dx, idx_a, idx_b)[i, i]

    def dx_i_dx_j_dx_k_dx_k_row_sum(self, idx_a:int, idx_b:int) -> Array:
        return onp.einsum("ijkk->ij", self._eval(self._dx_dx_dx_dx, idx_a, idx_b))

    def dx_i_dx_j_dx_k_dot_vec(self, idx_a:int, idx_b:int, vec:Array) -> Array:
        return self._eval(self._dx_dx_dx, idx_a, idx_b).dot(onp.asarray(vec, dtype=onp.float64))


class AutodiffGaussianKernel(AutodiffKernel):
    def __init__(self, sigma:float = 1.):
        """Gaussian kernel exp(-‖x - y‖² / sigma), derivatives by automatic differentiation.

        Args:
            sigma (float): Bandwidth, positive.
        """
        if not sigma > 0:
            raise ValueError("Bandwidth must be positive, got %s." % str(sigma))
        self.sigma = sigma
        super().__init__(lambda x, y: np.exp(-np.sum((x - y)**2) / sigma))


class AutodiffLinearKernel(AutodiffKernel):
    def __init__(self, c:float = 0.):
        """Linear kernel x·y + c, derivatives by automatic differentiation.
        Not stationary: derivatives with respect to y do not mirror those with respect to x.

        Args:
            c (float): Constant offset.
        """
        self.c = c
        super().__init__(lambda x, y: np.dot(x, y) + c)
