from typing import Tuple

import numpy as onp

from ..core.log import logger
from ..core.typing import Array, IndexPair, RandomStateT
from ..kern.base import DerivKernel
from ..utilities.indexing import idx_to_ai, sub_sample_rkhs_basis, check_rkhs_basis_inds
from ..utilities.linalg import pinv_self_adjoint
from ..utilities.parallel import map_index_chunks
from .base import EstimatorBase


class Nystrom(EstimatorBase):
    """Nystrom approximation of the kernel exponential family score matching estimator.

    Instead of one basis function per data coordinate (N*D in total), the
    gradient field of the log-density is expanded in m sub-sampled coordinates
    (RKHS basis functions). Fitting solves an (m+1)x(m+1) system, the first
    coefficient `xi` weighs the data term, the remaining m weigh the basis
    functions. Evaluation only loops over the m basis functions.
    """

    def __init__(self, data:Array, kernel:DerivKernel, lmbda:float, rkhs_basis_inds:Array, num_threads:int = None):
        """Construct from user defined RKHS basis.

        Args:
            data: Training data, one point per row (N x D).
            kernel: Kernel providing the derivative primitives.
            lmbda: Non-negative regularisation parameter.
            rkhs_basis_inds: Distinct flattened coordinate indices in [0, N*D). Used in the given order.
            num_threads: Worker threads for building the system. Defaults to the global setting.
        """
        super().__init__(data, kernel, lmbda)
        self.rkhs_basis_inds = check_rkhs_basis_inds(rkhs_basis_inds, self.get_num_lhs(), self.get_num_dimensions())
        self.num_threads = num_threads

        logger.info("Using m=%d RKHS basis functions." % self.get_num_rkhs_basis())

    @classmethod
    def sub_sampled(cls,
                    data:Array,
                    kernel:DerivKernel,
                    lmbda:float,
                    num_rkhs_basis:int,
                    random_state:RandomStateT = None,
                    num_threads:int = None) -> "Nystrom":
        """Factory for a Nystrom estimator with `num_rkhs_basis` uniformly sampled RKHS basis functions.

        Args:
            num_rkhs_basis (int): Number of basis functions, at most N*D.
            random_state: Seed or `numpy.random.RandomState` used for sampling.
        """
        data = onp.asarray(data)
        if data.ndim != 2:
            raise ValueError("Data must be a 2D array, got shape %s." % str(data.shape))
        logger.info("Sampling m=%d RKHS basis functions uniformly." % num_rkhs_basis)
        inds = sub_sample_rkhs_basis(data.shape[0], data.shape[1], num_rkhs_basis, random_state)
        return cls(data, kernel, lmbda, inds, num_threads)

    def sub_sample_rkhs_basis(self, num_rkhs_basis:int, random_state:RandomStateT = None) -> Array:
        return sub_sample_rkhs_basis(self.get_num_lhs(), self.get_num_dimensions(), num_rkhs_basis, random_state)

    def get_num_rkhs_basis(self) -> int:
        return len(self.rkhs_basis_inds)

    def get_num_coefficients(self) -> int:
        return self.get_num_rkhs_basis() + 1

    def idx_to_ai(self, idx:int) -> IndexPair:
        return idx_to_ai(int(idx), self.get_num_dimensions())

    def compute_xi_norm_2(self) -> float:
        N = self.get_num_lhs()
        D = self.get_num_dimensions()

        def partial_norms(basis):
            result = onp.zeros(len(basis))
            for out, idx in enumerate(basis):
                a, i = self.idx_to_ai(self.rkhs_basis_inds[idx])
                for idx_b in range(N):
                    for j in range(D):
                        result[out] += self.kernel.dx_dx_dy_dy_component(a, idx_b, i, j)
            return result

        # one partial sum per basis function, reduced in basis order
        with self._rhs_training_data():
            partial = map_index_chunks(partial_norms, self.get_num_rkhs_basis(), self.num_threads)
        return onp.sum(partial) / (N * N)

    def compute_h(self) -> Array:
        N = self.get_num_lhs()
        D = self.get_num_dimensions()

        def h_entries(basis):
            result = onp.zeros(len(basis))
            for out, idx in enumerate(basis):
                b, j = self.idx_to_ai(self.rkhs_basis_inds[idx])
                for idx_a in range(N):
                    for i in range(D):
                        result[out] += self.kernel.dx_dx_dy_component(idx_a, b, i, j)
            return result

        with self._rhs_training_data():
            h = map_index_chunks(h_entries, self.get_num_rkhs_basis(), self.num_threads)
        return h / N

    def compute_col_sub_sampled_hessian(self) -> Array:
        """Kernel Hessians between every basis coordinate (columns) and every data coordinate (rows), N*D x m."""
        D = self.get_num_dimensions()
        ND = self.get_num_lhs() * D

        def columns(basis):
            result = onp.zeros((len(basis), ND))
            for out, idx in enumerate(basis):
                a, i = self.idx_to_ai(self.rkhs_basis_inds[idx])
                for row_idx in range(ND):
                    b, j = self.idx_to_ai(row_idx)
                    result[out, row_idx] = self.kernel.dx_dy_component(a, b, i, j)
            return result

        with self._rhs_training_data():
            return map_index_chunks(columns, self.get_num_rkhs_basis(), self.num_threads).T

    def build_system(self) -> Tuple[Array, Array]:
        N = self.get_num_lhs()
        m = self.get_num_rkhs_basis()

        logger.info("Allocating memory for system.")
        A = onp.zeros((m + 1, m + 1))
        b = onp.zeros(m + 1)

        logger.info("Computing h.")
        h = self.compute_h()

        logger.info("Computing xi norm.")
        xi_norm_2 = self.compute_xi_norm_2()

        logger.info("Creating sub-sampled kernel Hessians.")
        col_sub_sampled_hessian = self.compute_col_sub_sampled_hessian()
        sub_sampled_hessian = col_sub_sampled_hessian[self.rkhs_basis_inds, :]

        logger.info("Populating A matrix.")
        A[0, 0] = h.dot(h) / N + self.lmbda * xi_norm_2
        A[1:, 1:] = col_sub_sampled_hessian.T.dot(col_sub_sampled_hessian) / N + self.lmbda * sub_sampled_hessian
        A[1:, 0] = sub_sampled_hessian.dot(h) / N + self.lmbda * h
        A[0, 1:] = A[1:, 0]

        b[0] = -xi_norm_2
        b[1:] = -h

        return A, b

    def solve_and_store(self, A:Array, b:Array):
        self.alpha_beta = onp.asarray(pinv_self_adjoint(A)).dot(b)

    def log_pdf(self, idx_test:int) -> float:
        self._check_idx_test(idx_test)
        N = self.get_num_lhs()
        alpha_beta = self.alpha_beta

        xi = 0.
        beta_sum = 0.
        for idx, basis_ind in enumerate(self.rkhs_basis_inds):
            a, i = self.idx_to_ai(basis_ind)
            xi += self.kernel.dx_dx_component(a, idx_test, i)
            # note: sign flip due to swapped kernel argument
            beta_sum -= self.kernel.dx_component(a, idx_test, i) * alpha_beta[1 + idx]

        return alpha_beta[0] * xi / N + beta_sum

    def grad(self, idx_test:int) -> Array:
        self._check_idx_test(idx_test)
        N = self.get_num_lhs()
        D = self.get_num_dimensions()
        alpha_beta = self.alpha_beta

        xi_grad = onp.zeros(D)
        beta_sum_grad = onp.zeros(D)
        for idx, basis_ind in enumerate(self.rkhs_basis_inds):
            a, i = self.idx_to_ai(basis_ind)
            # note: sign flip due to swapped kernel argument
            xi_grad -= self.kernel.dx_i_dx_i_dx_j_component(a, idx_test, i)
            beta_sum_grad += self.kernel.dx_i_dx_j_component(a, idx_test, i) * alpha_beta[1 + idx]

        return alpha_beta[0] / N * xi_grad + beta_sum_grad

    def expanded_coefficients(self) -> Array:
        """Basis coefficients written into a dense N x D array, zero at non-basis coordinates."""
        D = self.get_num_dimensions()
        beta_full = onp.zeros(self.get_num_lhs() * D)
        beta_full[self.rkhs_basis_inds] = self.alpha_beta[1:]
        return beta_full.reshape(-1, D)

    def hessian(self, idx_test:int) -> Array:
        self._check_idx_test(idx_test)
        N = self.get_num_lhs()
        D = self.get_num_dimensions()
        alpha_beta = self.alpha_beta
        beta_full = self.expanded_coefficients()

        xi_hessian = onp.zeros((D, D))
        beta_sum_hessian = onp.zeros((D, D))

        # every data point contributes to the xi term, coefficients of
        # coordinates outside the basis are zero
        for idx_a in range(N):
            xi_hessian += self.kernel.dx_i_dx_j_dx_k_dx_k_row_sum(idx_a, idx_test)
            # note: sign flip due to swapped kernel argument
            beta_sum_hessian -= self.kernel.dx_i_dx_j_dx_k_dot_vec(idx_a, idx_test, beta_full[idx_a])

        return alpha_beta[0] / N * xi_hessian + beta_sum_hessian

    def hessian_diag(self, idx_test:int) -> Array:
        self._check_idx_test(idx_test)
        N = self.get_num_lhs()
        D = self.get_num_dimensions()
        alpha_beta = self.alpha_beta
        beta_full = self.expanded_coefficients()

        xi_hessian_diag = onp.zeros(D)
        beta_sum_hessian_diag = onp.zeros(D)

        for idx_a in range(N):
            beta_a = beta_full[idx_a]
            for i in range(D):
                xi_hessian_diag[i] += self.kernel.dx_i_dx_j_dx_k_dx_k_row_sum_component(idx_a, idx_test, i, i)
                beta_sum_hessian_diag[i] -= self.kernel.dx_i_dx_j_dx_k_dot_vec_component(idx_a, idx_test, beta_a, i, i)

        return alpha_beta[0] / N * xi_hessian_diag + beta_sum_hessian_diag

    def leverage(self) -> Array:
        raise NotImplementedError("Leverage scores are not implemented for the Nystrom estimator.")
