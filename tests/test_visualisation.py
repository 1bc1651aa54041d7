import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest
from numpy.testing import assert_allclose

from jaxkef.estimators import Nystrom
from jaxkef.kern import GaussianKernel
from jaxkef.utilities.visualisation import pdf_grid, visualise_fit_2d

rng = np.random.RandomState(1)


def fitted_estimator(D=2):
    X = rng.randn(10, D)
    return Nystrom.sub_sampled(X, GaussianKernel(2.), 0.1, 6, random_state=0).fit()


def test_pdf_grid():
    est = fitted_estimator()
    Xs, Ys = np.linspace(-1, 1, 4), np.linspace(-2, 2, 3)
    G = pdf_grid(Xs, Ys, est)
    assert G.shape == (4, 3)

    est.set_test_data([Xs[1], Ys[2]])
    assert_allclose(G[1, 2], est.log_pdf(0))
    est.reset_test_data()

    G_grad = pdf_grid(Xs, Ys, est, kind="grad_norm")
    assert G_grad.shape == (4, 3)
    assert np.all(G_grad >= 0)


def test_pdf_grid_resets_test_data():
    est = fitted_estimator()
    pdf_grid(np.zeros(2), np.zeros(2), est)
    assert est.get_num_rhs() == 10

    with pytest.raises(ValueError):
        pdf_grid(np.zeros(2), np.zeros(2), est, kind="pdf")
    assert est.get_num_rhs() == 10


def test_pdf_grid_reference_vector():
    est = fitted_estimator(D=3)
    ref_vec = np.array([0., 0.5, 0.])
    G = pdf_grid(np.array([0.1]), np.array([-0.2]), est, ref_vec=ref_vec, x_ind=0, y_ind=2)
    est.set_test_data([0.1, 0.5, -0.2])
    assert_allclose(G[0, 0], est.log_pdf(0))


def test_visualise_fit_2d():
    est = fitted_estimator()
    ax = visualise_fit_2d(est, est.data, res=5)
    assert len(ax.collections) == 2
