import numpy as np
import pytest
from numpy.testing import assert_allclose

from jaxkef.core.exceptions import NotFittedError
from jaxkef.estimators import KernelExpFamilyNystrom

rng = np.random.RandomState(1)


@pytest.mark.parametrize('basis,m,expected_m', [("components", 10, 10), ("points", 4, 8)])
def test_fit_gaussian_samples(basis, m, expected_m):
    X = rng.randn(20, 2)
    est = KernelExpFamilyNystrom(m=m, sigma=2., lmbda=0.01, num_threads=2, basis=basis,
                                 random_state=np.random.RandomState(0))
    assert est.fit(X) is est
    assert est.est.get_num_rkhs_basis() == expected_m

    X_test = rng.randn(5, 2)
    assert est.log_pdf(X_test).shape == (5,)
    assert est.grad(X_test).shape == (5, 2)
    assert est.hessian_diag(X_test).shape == (5, 2)
    assert np.isfinite(est.score(X_test))

    # without test data, the training data is used
    assert est.log_pdf().shape == (20,)


def test_fit_is_reproducible():
    X = rng.randn(15, 3)
    results = []
    for _ in range(2):
        est = KernelExpFamilyNystrom(m=12, sigma=1.5, lmbda=0.1, num_threads=1, random_state=7).fit(X)
        results.append(est.log_pdf(X[:3]))
    assert_allclose(results[0], results[1])


def test_full_basis_recovers_full_solution():
    # with every coordinate in the basis the data term weight is -1 / lmbda
    lmbda = 0.1
    X = rng.randn(30, 2)
    est = KernelExpFamilyNystrom(m=30, sigma=2., lmbda=lmbda, num_threads=2, basis="points",
                                 random_state=0).fit(X)
    assert est.est.get_num_rkhs_basis() == 60
    assert_allclose(est.est.alpha_beta[0], -1. / lmbda, rtol=1e-3)

    log_pdfs = est.log_pdf(np.array([[0., 0.], [4., 4.]]))
    assert log_pdfs[0] > log_pdfs[1]


def test_not_fitted():
    est = KernelExpFamilyNystrom(m=3, sigma=1., lmbda=1.)
    with pytest.raises(NotFittedError):
        est.log_pdf(rng.randn(2, 2))
    with pytest.raises(NotFittedError):
        est.score()


def test_invalid_arguments():
    with pytest.raises(ValueError):
        KernelExpFamilyNystrom(m=3, sigma=1., lmbda=1., basis="rows")
    est = KernelExpFamilyNystrom(m=3, sigma=1., lmbda=1.)
    with pytest.raises(ValueError):
        est.fit(rng.randn(5))
    with pytest.raises(ValueError):
        KernelExpFamilyNystrom(m=11, sigma=1., lmbda=1.).fit(rng.randn(5, 2))
