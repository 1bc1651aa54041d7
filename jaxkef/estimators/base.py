import copy
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Tuple

import numpy as onp

from ..core.exceptions import NotFittedError
from ..core.log import logger
from ..core.typing import Array
from ..kern.base import DerivKernel


class EstimatorBase(ABC):
    def __init__(self, data:Array, kernel:DerivKernel, lmbda:float):
        """Common state of kernel exponential family estimators.

        The training data is the kernel's left hand side. The right hand side
        holds the points the fitted model is evaluated at, initially the
        training data itself.

        Args:
            data: Training data, one point per row (N x D).
            kernel: Kernel providing the derivative primitives. A shallow copy is
                bound to the data, so one kernel instance can be passed to several estimators.
            lmbda: Non-negative regularisation parameter.
        """
        data = onp.array(data, dtype=onp.float64)
        if data.ndim != 2 or data.shape[0] == 0 or data.shape[1] == 0:
            raise ValueError("Data must be a non-empty 2D array, got shape %s." % str(data.shape))
        if not lmbda >= 0:
            raise ValueError("Regularisation parameter must be non-negative, got %s." % str(lmbda))

        self.data = data
        self.data.setflags(write=False)
        self.kernel = copy.copy(kernel)
        self.lmbda = lmbda
        self._alpha_beta = None

        self.kernel.set_lhs(self.data)
        self.kernel.set_rhs(self.data)

    def get_num_lhs(self) -> int:
        return self.data.shape[0]

    def get_num_rhs(self) -> int:
        return self.kernel.get_num_rhs()

    def get_num_dimensions(self) -> int:
        return self.data.shape[1]

    def set_test_data(self, X:Array):
        X = onp.asarray(X, dtype=onp.float64)
        if X.ndim == 1:
            X = X[onp.newaxis, :]
        if X.ndim != 2 or X.shape[1] != self.get_num_dimensions():
            raise ValueError("Test data must have %d columns, got shape %s." % (self.get_num_dimensions(), str(X.shape)))
        self.kernel.set_rhs(X)

    def reset_test_data(self):
        self.kernel.set_rhs(self.data)

    def _check_idx_test(self, idx_test:int):
        if not 0 <= idx_test < self.get_num_rhs():
            raise ValueError("Test point index %d out of range [0, %d)." % (idx_test, self.get_num_rhs()))

    @contextmanager
    def _rhs_training_data(self):
        """Temporarily evaluate the kernel against the training data on both sides."""
        rhs = self.kernel.rhs
        self.kernel.set_rhs(self.data)
        try:
            yield
        finally:
            self.kernel.rhs = rhs

    @abstractmethod
    def get_num_coefficients(self) -> int:
        pass

    @property
    def alpha_beta(self) -> Array:
        if self._alpha_beta is None:
            raise NotFittedError("This %s instance is not fitted yet." % self.__class__.__name__)
        return self._alpha_beta

    @alpha_beta.setter
    def alpha_beta(self, alpha_beta:Array):
        alpha_beta = onp.asarray(alpha_beta, dtype=onp.float64).ravel()
        if len(alpha_beta) != self.get_num_coefficients():
            raise ValueError("Expected %d coefficients, got %d." % (self.get_num_coefficients(), len(alpha_beta)))
        alpha_beta.setflags(write=False)
        self._alpha_beta = alpha_beta

    def is_fitted(self) -> bool:
        return self._alpha_beta is not None

    def fit(self):
        logger.info("Building system.")
        A, b = self.build_system()
        logger.info("Solving system of size %d." % len(b))
        self.solve_and_store(A, b)
        return self

    @abstractmethod
    def build_system(self) -> Tuple[Array, Array]:
        pass

    @abstractmethod
    def solve_and_store(self, A:Array, b:Array):
        pass

    @abstractmethod
    def log_pdf(self, idx_test:int) -> float:
        pass

    @abstractmethod
    def grad(self, idx_test:int) -> Array:
        pass

    @abstractmethod
    def hessian(self, idx_test:int) -> Array:
        pass

    @abstractmethod
    def hessian_diag(self, idx_test:int) -> Array:
        pass

    @abstractmethod
    def leverage(self) -> Array:
        pass

    def log_pdf_multiple(self) -> Array:
        return onp.array([self.log_pdf(i) for i in range(self.get_num_rhs())])

    def grad_multiple(self) -> Array:
        return onp.array([self.grad(i) for i in range(self.get_num_rhs())])

    def hessian_diag_multiple(self) -> Array:
        return onp.array([self.hessian_diag(i) for i in range(self.get_num_rhs())])

    def score(self) -> float:
        """Score matching objective on the test data,
            mean over test points of sum_d 0.5 * grad_d² + hessian_diag_d.
        """
        N_test = self.get_num_rhs()
        score = 0.
        for i in range(N_test):
            gradient = self.grad(i)
            score += 0.5 * gradient.dot(gradient) + self.hessian_diag(i).sum()
        return score / N_test
