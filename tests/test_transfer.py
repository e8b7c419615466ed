import numpy as np
import pytest

from lightnorm.algorithm.transfer import (
    coarse_positions,
    interpolation_matrix,
    prolong_bilinear,
    restrict_full_weighting,
)


def test_shapes():
    assert restrict_full_weighting(np.zeros((8, 6))).shape == (4, 3)
    assert prolong_bilinear(np.zeros((4, 3))).shape == (8, 6)


def test_coarse_positions_span_both_fine_boundaries():
    np.testing.assert_array_equal(coarse_positions(16), [0, 2, 4, 6, 9, 11, 13, 15])
    np.testing.assert_array_equal(coarse_positions(8), [0, 2, 5, 7])
    np.testing.assert_array_equal(coarse_positions(10), [0, 2, 4, 7, 9])
    np.testing.assert_array_equal(coarse_positions(4), [0, 3])


@pytest.mark.parametrize("n", [4, 8, 12, 16])
def test_positions_are_mirror_symmetric(n):
    pos = coarse_positions(n)
    np.testing.assert_array_equal(pos[::-1], n - 1 - pos)
    P = interpolation_matrix(n)
    np.testing.assert_allclose(P[::-1, ::-1], P)


def test_constant_field_round_trip():
    c = np.full((16, 12), 3.25)
    back = prolong_bilinear(restrict_full_weighting(c))
    np.testing.assert_allclose(back, 3.25)


def test_full_weighting_stencil_in_interior():
    fine = np.random.default_rng(0).normal(size=(16, 16))
    coarse = restrict_full_weighting(fine)
    k = np.outer([1.0, 2.0, 1.0], [1.0, 2.0, 1.0]) / 16.0
    # coarse 1 -> fine 2, coarse 2 -> fine 4, coarse 6 -> fine 13
    assert coarse[1, 2] == pytest.approx(np.sum(k * fine[1:4, 3:6]))
    assert coarse[2, 6] == pytest.approx(np.sum(k * fine[3:6, 12:15]))


def test_full_weighting_renormalizes_at_edges():
    fine = np.zeros((8, 8))
    fine[0, 0] = 1.0
    fine[-1, -1] = 1.0
    coarse = restrict_full_weighting(fine)
    # per axis the end row keeps weights 1 and 1/2 -> 2/3 on the boundary pixel
    assert coarse[0, 0] == pytest.approx(4.0 / 9.0)
    assert coarse[-1, -1] == pytest.approx(4.0 / 9.0)


def test_prolongation_injects_and_interpolates():
    coarse = np.random.default_rng(1).normal(size=(4, 5))
    fine = prolong_bilinear(coarse)
    rows, cols = coarse_positions(8), coarse_positions(10)
    np.testing.assert_allclose(fine[np.ix_(rows, cols)], coarse)
    np.testing.assert_allclose(fine[0, cols], coarse[0])
    np.testing.assert_allclose(fine[-1, cols], coarse[-1])
    np.testing.assert_allclose(fine[rows, -1], coarse[:, -1])
    assert fine[1, 0] == pytest.approx(0.5 * (coarse[0, 0] + coarse[1, 0]))
    assert fine[1, 1] == pytest.approx(0.25 * coarse[0:2, 0:2].sum())
    # seam between fine rows 2 and 5
    assert fine[3, 0] == pytest.approx((2.0 * coarse[1, 0] + coarse[2, 0]) / 3.0)


def test_prolongation_is_exact_for_linear_fields():
    rows, cols = coarse_positions(10), coarse_positions(8)
    coarse = 1.0 * rows[:, None] + 1.5 * cols[None, :]
    fine = prolong_bilinear(coarse)
    a, b = np.mgrid[0:10, 0:8]
    np.testing.assert_allclose(fine, a + 1.5 * b)


@pytest.mark.parametrize("shape", [(7, 8), (8, 5), (8,)])
def test_restriction_rejects_bad_shapes(shape):
    with pytest.raises(ValueError):
        restrict_full_weighting(np.zeros(shape))
