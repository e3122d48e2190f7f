import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src" / "scripts") not in sys.path:
    sys.path.insert(0, str(ROOT / "src" / "scripts"))

import plot_density  # noqa: E402

from ctrw_sim import dtsm, utils  # noqa: E402


def test_render_saved_run(tmp_path):
    result = dtsm(snapshots=(0.05, 0.1), verbose=False)
    npz = tmp_path / "run.npz"
    utils.save_result(npz, result)

    out = tmp_path / "run_density.png"
    plot_density.render_density(utils.load_result(npz), out, log_scale=True)
    assert out.exists()
    assert out.stat().st_size > 0
