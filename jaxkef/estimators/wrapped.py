import numpy as onp

from ..core.exceptions import NotFittedError
from ..core.log import logger
from ..core.typing import Array, RandomStateT
from ..kern.rbf import GaussianKernel
from ..utilities.indexing import sub_sample_rkhs_basis, sub_sample_rkhs_basis_points
from ..utilities.parallel import get_global_parallel
from .nystrom import Nystrom


class KernelExpFamilyNystrom(object):
    """
    Nystrom kernel exponential family with Gaussian kernel exp(-‖x - y‖² / sigma),
    operating on data matrices rather than point indices.

    With `basis="components"`, m uniformly chosen data point components form the basis,
    fitting complexity O(n m^2).
    With `basis="points"`, all D components of m uniformly chosen data points form the basis,
    fitting complexity O(n m^2 d^3).
    """
    def __init__(self, m:int, sigma:float, lmbda:float, num_threads:int = None,
                 basis:str = "components", random_state:RandomStateT = None):
        if basis not in ("components", "points"):
            raise ValueError("Wrong basis: %s" % basis)
        if num_threads is None:
            num_threads = get_global_parallel().get_num_threads()

        self.m = m
        self.sigma = sigma
        self.lmbda = lmbda
        self.num_threads = num_threads
        self.basis = basis
        self.random_state = random_state
        self.est = None

    def _create_basis(self, N:int, D:int) -> Array:
        if self.basis == "points":
            return sub_sample_rkhs_basis_points(N, D, self.m, self.random_state)
        return sub_sample_rkhs_basis(N, D, self.m, self.random_state)

    def fit(self, X:Array):
        X = onp.asarray(X, dtype=onp.float64)
        if X.ndim != 2:
            raise ValueError("Expected a 2D array of points, one per row, got shape %s." % str(X.shape))
        N, D = X.shape
        logger.info("Fitting on %dx%d array with %d threads." % (N, D, self.num_threads))

        self.est = Nystrom(X, GaussianKernel(self.sigma), self.lmbda,
                           self._create_basis(N, D), num_threads=self.num_threads)
        self.est.fit()
        return self

    def _set_test_data(self, X_test:Array):
        if self.est is None:
            raise NotFittedError("This %s instance is not fitted yet." % self.__class__.__name__)
        if X_test is None:
            self.est.reset_test_data()
        else:
            self.est.set_test_data(X_test)

    def log_pdf(self, X_test:Array = None) -> Array:
        self._set_test_data(X_test)
        return self.est.log_pdf_multiple()

    def grad(self, X_test:Array = None) -> Array:
        self._set_test_data(X_test)
        return self.est.grad_multiple()

    def hessian_diag(self, X_test:Array = None) -> Array:
        self._set_test_data(X_test)
        return self.est.hessian_diag_multiple()

    def score(self, X_test:Array = None) -> float:
        self._set_test_data(X_test)
        return self.est.score()
