from __future__ import annotations
from pathlib import Path
import time
import numpy as np

from lightnorm import DiffusionType, VCycleConfig
from lightnorm.algorithm.pipeline import normalize_illumination
from lightnorm.diagnostics import save_npz, plot_field

from run_smoke import synthetic_face


def run_case(image: np.ndarray, cfg: VCycleConfig, outdir: Path) -> dict[str, float]:
    outdir.mkdir(parents=True, exist_ok=True)

    t0 = time.perf_counter()
    result = normalize_illumination(image, cfg)
    elapsed = time.perf_counter() - t0

    metrics = {
        "seconds": float(elapsed),
        "rel_residual": float(result.rel_residuals[-1]),
        "light_min": float(result.light[1:-1, 1:-1].min()),
        "light_max": float(result.light[1:-1, 1:-1].max()),
    }

    save_npz(outdir / "fields" / "light_and_output.npz",
             light=result.light, reflectance=result.reflectance, output=result.output)

    plot_field(result.light, title=f"{outdir.name} light", path=outdir / "figs" / "light.png")
    plot_field(result.output, title=f"{outdir.name} output", path=outdir / "figs" / "output.png")

    save_npz(outdir / "metrics.npz", **{k: np.array(v) for k, v in metrics.items()})
    return metrics


def main() -> None:
    base_out = Path("outputs")
    image = synthetic_face(64, 64)

    for diffusion in DiffusionType:
        for n_grids in (1, 2, 3, 4):
            cfg = VCycleConfig(lam=5.0, n_grids=n_grids, diffusion=diffusion, n_cycles=3)
            outdir = base_out / f"type_{diffusion.name.lower()}" / f"n_grids_{n_grids}"
            metrics = run_case(image, cfg, outdir)
            print(diffusion.name, n_grids, metrics)


if __name__ == "__main__":
    main()
