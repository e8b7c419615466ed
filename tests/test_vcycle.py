import numpy as np
import pytest

from lightnorm.algorithm import vcycle
from lightnorm.algorithm.vcycle import mgv, solve_illumination
from lightnorm.core.config import DiffusionType, VCycleConfig
from lightnorm.core.errors import ConfigurationError, GridDimensionError
from lightnorm.core.grid import boundary_mask, enforce_dirichlet
from lightnorm.operators.assemble import build_coefficients, build_matrix
from lightnorm.operators.solve import solve_dense


def _image(h=16, w=16, seed=0):
    rng = np.random.default_rng(seed)
    rows, cols = np.mgrid[0:h, 0:w]
    return (20.0 + 5.0 * cols) * rng.uniform(0.5, 1.0, size=(h, w))


@pytest.mark.parametrize("diffusion", list(DiffusionType))
def test_single_grid_equals_direct_solve(diffusion):
    img = _image(8, 10)
    cfg = VCycleConfig(lam=5.0, n_grids=1, diffusion=diffusion)
    x = mgv(np.zeros_like(img), img, cfg.lam, 0, cfg)

    c = build_coefficients(img, cfg.lam, diffusion)
    A = build_matrix(8, 10, c)
    x_direct = solve_dense(A, enforce_dirichlet(img.copy()).ravel()).reshape(8, 10)
    np.testing.assert_allclose(x, x_direct, rtol=1e-12, atol=1e-12)


def test_boundary_is_zero_at_every_level(monkeypatch):
    img = _image(16, 16)
    cfg = VCycleConfig(lam=5.0, n_grids=3)
    seen = []
    orig = vcycle.mgv

    def spy(guess, rhs, lam, level, cfg):
        out = orig(guess, rhs, lam, level, cfg)
        seen.append((level, out))
        return out

    monkeypatch.setattr(vcycle, "mgv", spy)
    vcycle.mgv(np.zeros_like(img), img, cfg.lam, 0, cfg)

    assert sorted(level for level, _ in seen) == [0, 1, 2]
    shapes = {level: out.shape for level, out in seen}
    assert shapes == {0: (16, 16), 1: (8, 8), 2: (4, 4)}
    for _, out in seen:
        assert np.all(out[boundary_mask(out.shape)] == 0.0)


def test_mgv_does_not_modify_inputs():
    img = _image(8, 8)
    guess = np.zeros_like(img)
    img0 = img.copy()
    mgv(guess, img, 5.0, 0, VCycleConfig(n_grids=2))
    np.testing.assert_array_equal(img, img0)
    np.testing.assert_array_equal(guess, 0.0)


def test_shape_mismatch_raises():
    with pytest.raises(ValueError):
        mgv(np.zeros((4, 4)), np.ones((8, 8)), 5.0, 0, VCycleConfig())


@pytest.mark.parametrize("n_grids", [1, 2, 3])
def test_constant_image_gives_constant_light(n_grids):
    img = np.full((16, 16), 100.0)
    out = solve_illumination(img, VCycleConfig(lam=5.0, n_grids=n_grids))
    np.testing.assert_allclose(out.light[1:-1, 1:-1], 100.0, rtol=1e-4)
    assert np.all(out.light[boundary_mask(img.shape)] == 0.0)


@pytest.mark.parametrize("n_grids", [2, 3])
def test_coarse_correction_is_symmetric_under_rotation(n_grids):
    img = np.full((16, 16), 100.0)
    cfg = VCycleConfig(
        n_grids=n_grids,
        diffusion=DiffusionType.ISOTROPIC,
        smoother="red_black",
        initial_guess="zero",
    )
    light = solve_illumination(img, cfg).light
    np.testing.assert_allclose(light, np.rot90(light, 2), rtol=1e-10, atol=1e-10)
    np.testing.assert_allclose(light, light.T, rtol=1e-10, atol=1e-10)


def test_zero_and_image_guess_agree_after_enough_cycles():
    img = _image(16, 16, seed=7)
    base = VCycleConfig(n_grids=2, diffusion=DiffusionType.ISOTROPIC, n_cycles=20)
    a = solve_illumination(img, base.replace(initial_guess="zero")).light
    b = solve_illumination(img, base.replace(initial_guess="image")).light
    np.testing.assert_allclose(a, b, rtol=1e-3, atol=1e-3)


def test_multigrid_cycles_reduce_residual():
    img = _image(32, 32, seed=3)
    cfg = VCycleConfig(lam=5.0, n_grids=3, diffusion=DiffusionType.ISOTROPIC, n_cycles=4, initial_guess="zero")
    out = solve_illumination(img, cfg)
    assert len(out.rel_residuals) == 4
    assert out.rel_residuals[0] < 1.0
    assert out.rel_residuals[-1] < out.rel_residuals[0]
    assert out.light.shape == img.shape


def test_non_divisible_image_rejected_before_solving(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("recursion must not start")

    monkeypatch.setattr(vcycle, "mgv", fail)
    with pytest.raises(GridDimensionError):
        solve_illumination(np.ones((10, 12)), VCycleConfig(n_grids=3))


def test_coarse_grid_too_large_rejected():
    with pytest.raises(ConfigurationError):
        solve_illumination(np.ones((16, 16)), VCycleConfig(n_grids=1, max_coarse_unknowns=100))
