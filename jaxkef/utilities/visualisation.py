from itertools import product

import numpy as onp
import matplotlib.pyplot as plt

from ..core.typing import Array
from ..estimators.base import EstimatorBase

__all__ = ["pdf_grid", "visualise_array_2d", "visualise_fit_2d"]


def pdf_grid(Xs:Array, Ys:Array, est:EstimatorBase, ref_vec:Array = None, x_ind:int = 0, y_ind:int = 1, kind:str = "log_pdf") -> Array:
    """Evaluate a fitted estimator on the grid Xs x Ys.

    Args:
        Xs, Ys: Grid coordinates along dimensions `x_ind` and `y_ind`.
        est: Fitted estimator, its test data is replaced by the grid.
        ref_vec: Values of the remaining dimensions if the data has more than two.
        kind: "log_pdf" or "grad_norm" (squared norm of the gradient in the two plotted dimensions).

    Returns:
        Array of shape (len(Xs), len(Ys)).
    """
    n_x = len(Xs)
    n_y = len(Ys)
    grid = onp.array(list(product(Xs, Ys)))

    if ref_vec is None:
        X_test = grid
    else:
        X_test = onp.tile(onp.asarray(ref_vec, dtype=onp.float64), (n_x * n_y, 1))
        X_test[:, [x_ind, y_ind]] = grid

    est.set_test_data(X_test)
    try:
        if kind == "log_pdf":
            values = est.log_pdf_multiple()
        elif kind == "grad_norm":
            gradients = est.grad_multiple()[:, [x_ind, y_ind]]
            values = onp.sum(gradients ** 2, axis=1)
        else:
            raise ValueError("Wrong kind: %s" % kind)
    finally:
        est.reset_test_data()
    return values.reshape(n_x, n_y)


def visualise_array_2d(Xs:Array, Ys:Array, A:Array, samples:Array = None, ax = None):
    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(111)

    vmin = onp.nanmin(A)
    vmax = onp.nanmax(A)
    heatmap = ax.pcolormesh(Xs, Ys, A.T, cmap='viridis', vmin=vmin, vmax=vmax, shading='auto')
    plt.colorbar(heatmap, ax=ax)

    if samples is not None:
        ax.scatter(samples[:, 0], samples[:, 1], c='r', s=1)
    return ax


def visualise_fit_2d(est:EstimatorBase, X:Array = None, res:int = 50, ref_vec:Array = None,
                     x_ind:int = 0, y_ind:int = 1, ax = None, kind:str = "log_pdf"):
    """Plot a fitted estimator over a square grid covering the data (or [-5, 5]² without data)."""
    lo, hi = -5., 5.
    if X is not None:
        X = onp.asarray(X)
        lo = min(X[:, x_ind].min(), X[:, y_ind].min())
        hi = max(X[:, x_ind].max(), X[:, y_ind].max())
        delta = hi - lo
        lo -= delta / 10.
        hi += delta / 10.

    Xs = onp.linspace(lo, hi, res)
    Ys = onp.linspace(lo, hi, res)
    G = pdf_grid(Xs, Ys, est, ref_vec, x_ind, y_ind, kind)

    samples = None if X is None else X[:, [x_ind, y_ind]]
    return visualise_array_2d(Xs, Ys, G, samples, ax=ax)
