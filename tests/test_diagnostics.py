import numpy as np

from lightnorm import VCycleConfig, normalize_illumination
from lightnorm.core.config import DiffusionType
from lightnorm.diagnostics import plot_decomposition, plot_field, residual_norms, save_npz
from lightnorm.operators.assemble import build_coefficients


def test_residual_norms_keys_and_zero_guess():
    b = np.random.default_rng(0).uniform(1.0, 5.0, size=(6, 6))
    c = build_coefficients(b, 2.0, DiffusionType.ISOTROPIC)
    norms = residual_norms(c, np.zeros_like(b), b)
    assert set(norms) == {"||r||2", "||b||2", "||r||2/||b||2", "||x||2", "||r||inf"}
    assert norms["||r||2/||b||2"] == 1.0
    assert norms["||x||2"] == 0.0


def test_save_npz_creates_parents(tmp_path):
    path = tmp_path / "a" / "b" / "fields.npz"
    save_npz(path, light=np.ones((2, 2)))
    with np.load(path) as data:
        np.testing.assert_array_equal(data["light"], 1.0)


def test_plots_are_written(tmp_path):
    image = np.random.default_rng(1).uniform(10.0, 200.0, size=(8, 8))
    res = normalize_illumination(image, VCycleConfig(n_grids=2))
    plot_field(res.light, title="light", path=tmp_path / "light.png", clip_quantile=0.99)
    plot_decomposition(image, res, title="decomposition", path=tmp_path / "figs" / "dec.png")
    assert (tmp_path / "light.png").exists()
    assert (tmp_path / "figs" / "dec.png").exists()
