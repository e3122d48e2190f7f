"""
Marginal density plotter for saved DTSM runs.
"""
import argparse
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from ctrw_sim import rho_table, utils


def render_density(result, output_path, log_scale=False, cmap="viridis"):
    table = rho_table(result)
    colors = plt.get_cmap(cmap)

    fig, ax = plt.subplots(figsize=(8, 5))
    num = len(table.labels)
    for k, label in enumerate(table.labels):
        color = colors(k / max(1, num - 1))
        ax.plot(table.x, table.values[:, k], color=color, label=label)

    if log_scale:
        ax.set_yscale("log")
    ax.set_xlabel("x")
    ax.set_ylabel(r"$\rho(x, t)$")
    meta = result.meta or {}
    ax.set_title(
        f"DTSM density | c={meta.get('c', '?')}, initial={meta.get('initial_condition', '?')}"
    )
    ax.legend()

    if output_path:
        fig.savefig(output_path, dpi=200, bbox_inches="tight")
        print(f"Saved to {output_path}")
    plt.close(fig)


def main():
    parser = argparse.ArgumentParser(description="Plot DTSM marginal densities")
    parser.add_argument("file", help="Input .npz file")
    parser.add_argument("--log", action="store_true", help="Logarithmic y axis")
    parser.add_argument("--cmap", default="viridis", help="Matplotlib colormap")
    parser.add_argument("--out", default=None, help="Output filename")
    args = parser.parse_args()

    result = utils.load_result(args.file)

    if args.out is None:
        input_path = Path(args.file)
        out_path = input_path.parent / (input_path.stem + "_density.png")
    else:
        out_path = args.out

    render_density(result, out_path, log_scale=args.log, cmap=args.cmap)


if __name__ == "__main__":
    main()
