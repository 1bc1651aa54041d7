import numpy as onp

from ..core.typing import Array
from ..kern.base import DerivKernel


class GaussianKernel(DerivKernel):
    """Gaussian kernel k(x, y) = exp(-‖x - y‖² / sigma) with closed form derivatives.

    With r = x - y and s = 2 / sigma, every derivative with respect to x is a
    polynomial in r times k(x, y). Derivatives with respect to y flip the sign,
    as the kernel only depends on the difference of its arguments.
    """

    def __init__(self, sigma:float = 1.):
        super().__init__()
        if not sigma > 0:
            raise ValueError("Bandwidth must be positive, got %s." % str(sigma))
        self.sigma = sigma

    def kernel_value(self, x:Array, y:Array) -> float:
        r = x - y
        return float(onp.exp(-r.dot(r) / self.sigma))

    def difference(self, idx_a:int, idx_b:int) -> Array:
        return self.lhs[idx_a] - self.rhs[idx_b]

    def _diff_and_kernel(self, idx_a:int, idx_b:int):
        r = self.difference(idx_a, idx_b)
        return r, onp.exp(-r.dot(r) / self.sigma), 2. / self.sigma

    def dx(self, idx_a:int, idx_b:int) -> Array:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        return -s * k * r

    def dx_component(self, idx_a:int, idx_b:int, i:int) -> float:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        return -s * k * r[i]

    def dx_dx(self, idx_a:int, idx_b:int) -> Array:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        return k * (s**2 * r**2 - s)

    def dx_dx_component(self, idx_a:int, idx_b:int, i:int) -> float:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        return k * (s**2 * r[i]**2 - s)

    def dx_dy(self, idx_a:int, idx_b:int) -> Array:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        return k * (s * onp.eye(len(r)) - s**2 * onp.outer(r, r))

    def dx_dy_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        return k * (s * (i == j) - s**2 * r[i] * r[j])

    def dx_dx_dy_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        return k * (s**3 * r[i]**2 * r[j] - s**2 * (r[j] + 2 * (i == j) * r[i]))

    def dx_dx_dy_dy_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        return k * (s**4 * r[i]**2 * r[j]**2
                    - s**3 * (r[i]**2 + r[j]**2 + 4 * (i == j) * r[i] * r[j])
                    + s**2 * (1 + 2 * (i == j)))

    def dx_i_dx_j_component(self, idx_a:int, idx_b:int, i:int) -> Array:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        result = s**2 * r[i] * r
        result[i] -= s
        return k * result

    def dx_i_dx_i_dx_j_component(self, idx_a:int, idx_b:int, i:int) -> Array:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        result = s**2 * r - s**3 * r[i]**2 * r
        result[i] += 2 * s**2 * r[i]
        return k * result

    def dx_i_dx_j_dx_k_dx_k_row_sum(self, idx_a:int, idx_b:int) -> Array:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        D = len(r)
        sq_norm = r.dot(r)
        rr = onp.outer(r, r)
        eye = onp.eye(D)
        return k * (s**4 * sq_norm * rr
                    - s**3 * (sq_norm * eye + (D + 4) * rr)
                    + s**2 * (D + 2) * eye)

    def dx_i_dx_j_dx_k_dx_k_row_sum_component(self, idx_a:int, idx_b:int, i:int, j:int) -> float:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        D = len(r)
        sq_norm = r.dot(r)
        return k * (s**4 * sq_norm * r[i] * r[j]
                    - s**3 * (sq_norm * (i == j) + (D + 4) * r[i] * r[j])
                    + s**2 * (D + 2) * (i == j))

    def dx_i_dx_j_dx_k_dot_vec(self, idx_a:int, idx_b:int, vec:Array) -> Array:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        vec = onp.asarray(vec)
        r_dot_v = r.dot(vec)
        return k * (-s**3 * r_dot_v * onp.outer(r, r)
                    + s**2 * (r_dot_v * onp.eye(len(r)) + onp.outer(vec, r) + onp.outer(r, vec)))

    def dx_i_dx_j_dx_k_dot_vec_component(self, idx_a:int, idx_b:int, vec:Array, i:int, j:int) -> float:
        r, k, s = self._diff_and_kernel(idx_a, idx_b)
        r_dot_v = r.dot(vec)
        return k * (-s**3 * r_dot_v * r[i] * r[j]
                    + s**2 * (r_dot_v * (i == j) + vec[i] * r[j] + vec[j] * r[i]))
