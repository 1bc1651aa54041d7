import numpy as np
import pytest
from numpy.testing import assert_allclose
from scipy.linalg import pinvh

from jaxkef.utilities.indexing import (idx_to_ai, ai_to_idx, sub_sample_rkhs_basis,
                                       sub_sample_rkhs_basis_points, check_rkhs_basis_inds)
from jaxkef.utilities.linalg import pinv_self_adjoint
from jaxkef.utilities.parallel import Parallel, get_global_parallel, map_index_chunks

rng = np.random.RandomState(1)


def test_idx_to_ai_roundtrip():
    for (N, D) in [(1, 1), (4, 2), (7, 3)]:
        for idx in range(N * D):
            a, i = idx_to_ai(idx, D)
            assert 0 <= a < N and 0 <= i < D
            assert ai_to_idx(a, i, D) == idx
    assert idx_to_ai(7, 2) == (3, 1)


def test_sub_sample_rkhs_basis():
    N, D = 5, 3
    for k in (1, 4, N * D):
        inds = sub_sample_rkhs_basis(N, D, k, np.random.RandomState(0))
        assert len(inds) == k
        assert len(np.unique(inds)) == k
        assert np.all(inds[:-1] < inds[1:])
        assert inds.min() >= 0 and inds.max() < N * D
    assert np.all(sub_sample_rkhs_basis(N, D, N * D, 3) == np.arange(N * D))
    assert np.all(sub_sample_rkhs_basis(N, D, 6, 42) == sub_sample_rkhs_basis(N, D, 6, 42))

    with pytest.raises(ValueError):
        sub_sample_rkhs_basis(N, D, N * D + 1)
    with pytest.raises(ValueError):
        sub_sample_rkhs_basis(N, D, 0)


def test_sub_sample_rkhs_basis_points():
    N, D = 6, 3
    inds = sub_sample_rkhs_basis_points(N, D, 2, 0)
    assert len(inds) == 2 * D
    points = np.unique(inds // D)
    assert len(points) == 2
    assert np.all(inds == (points[:, np.newaxis] * D + np.arange(D)).ravel())
    with pytest.raises(ValueError):
        sub_sample_rkhs_basis_points(N, D, N + 1)


def test_check_rkhs_basis_inds():
    assert np.all(check_rkhs_basis_inds([5, 0, 3], 3, 2) == [5, 0, 3])
    for invalid in ([], [0, 0], [6], [-1], [[0, 1]], [0.5]):
        with pytest.raises(ValueError):
            check_rkhs_basis_inds(invalid, 3, 2)


def test_pinv_identity():
    for m in (1, 3, 6):
        assert_allclose(pinv_self_adjoint(np.eye(m)), np.eye(m), atol=1e-12)


def test_pinv_rank_deficient():
    B = rng.randn(5, 2)
    A = B @ B.T
    A_pinv = np.asarray(pinv_self_adjoint(A))

    assert_allclose(A @ A_pinv @ A, A, atol=1e-10)
    assert_allclose(A_pinv @ A @ A_pinv, A_pinv, atol=1e-10)
    assert_allclose(A_pinv, A_pinv.T, atol=1e-12)
    assert_allclose(A_pinv, pinvh(A), atol=1e-8)

    # null space of A is mapped to zero
    null = np.linalg.svd(B.T)[2][2:]
    assert_allclose(A_pinv @ null.T, np.zeros((5, 3)), atol=1e-10)


def test_pinv_full_rank_is_inverse():
    B = rng.randn(4, 4)
    A = B @ B.T + np.eye(4)
    assert_allclose(np.asarray(pinv_self_adjoint(A)), np.linalg.inv(A), atol=1e-10)


def test_pinv_zero_matrix():
    assert_allclose(pinv_self_adjoint(np.zeros((3, 3))), np.zeros((3, 3)))


def test_pinv_invalid_shape():
    with pytest.raises(ValueError):
        pinv_self_adjoint(np.ones((2, 3)))
    with pytest.raises(ValueError):
        pinv_self_adjoint(np.ones(3))


def test_map_index_chunks_order():
    def squares(chunk):
        return chunk.astype(float)**2

    for num_threads in (1, 2, 3, 10):
        assert_allclose(map_index_chunks(squares, 7, num_threads), np.arange(7.)**2)

    def rows(chunk):
        return np.vstack([np.full(2, i) for i in chunk])

    assert map_index_chunks(rows, 5, 2).shape == (5, 2)


def test_map_index_chunks_propagates_errors():
    def fail(chunk):
        raise RuntimeError("worker failed")

    with pytest.raises(RuntimeError):
        map_index_chunks(fail, 4, 2)
    with pytest.raises(ValueError):
        map_index_chunks(lambda c: c, 4, 0)


def test_parallel():
    p = Parallel(3)
    assert p.get_num_threads() == 3
    with pytest.raises(ValueError):
        p.set_num_threads(0)

    glob = get_global_parallel()
    before = glob.get_num_threads()
    try:
        glob.set_num_threads(2)
        assert get_global_parallel().get_num_threads() == 2
    finally:
        glob.set_num_threads(before)


def test_map_index_chunks_contiguous_chunks():
    seen = []

    def record(chunk):
        seen.append(chunk.copy())
        return chunk

    assert_allclose(map_index_chunks(record, 10, 3), np.arange(10))
    seen = sorted(seen, key=lambda c: c[0])
    assert [len(c) for c in seen] == [4, 3, 3]
    assert_allclose(np.concatenate(seen), np.arange(10))
    for c in seen:
        assert np.all(np.diff(c) == 1)


def test_map_index_chunks_more_threads_than_items():
    calls = []

    def record(chunk):
        calls.append(len(chunk))
        return chunk

    map_index_chunks(record, 2, 8)
    assert sorted(calls) == [1, 1]
