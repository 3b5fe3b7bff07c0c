from __future__ import annotations

import argparse
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.tri import Triangulation

from . import analytical


def plot_mesh(ax, nodes: np.ndarray, elements: np.ndarray, color: str = "k", lw: float = 0.8):
    ax.triplot(Triangulation(nodes[:, 0], nodes[:, 1], elements), color=color, lw=lw)
    ax.set_aspect("equal")
    return ax


def plot_field(ax, nodes: np.ndarray, elements: np.ndarray, values: np.ndarray, **kw):
    """Nodal field coloured on the triangulation."""
    tri = Triangulation(nodes[:, 0], nodes[:, 1], elements)
    return ax.tripcolor(tri, values, shading="gouraud", **kw)


def _save(fig, npz_path: Path, suffix: str, save: bool) -> None:
    if save:
        fig.savefig(npz_path.with_suffix("").as_posix() + f"_{suffix}.png", dpi=200)


def main(argv=None):
    ap = argparse.ArgumentParser()
    ap.add_argument("--npz", type=str, default="result_nitsche_beam.npz", help="Path to result npz")
    ap.add_argument("--scale", type=float, default=100.0, help="Displacement magnification")
    ap.add_argument("--save", action="store_true", help="Save png figures next to npz")
    args = ap.parse_args(argv)

    npz_path = Path(args.npz)
    data = np.load(npz_path)
    node1, element1 = data["node1"], data["element1"]
    node2, element2 = data["node2"], data["element2"]
    d1 = np.column_stack([data["ux1"], data["uy1"]])
    d2 = np.column_stack([data["ux2"], data["uy2"]])
    L, c, P = float(data["L"]), float(data["c"]), float(data["P"])
    E, nu = float(data["E"]), float(data["nu"])

    # ---- Figure 1: the two meshes ----
    fig, ax = plt.subplots()
    plot_mesh(ax, node1, element1, "g")
    plot_mesh(ax, node2, element2, "r")
    ax.set_title("Non-matching meshes")
    ax.axis("off")
    _save(fig, npz_path, "mesh", args.save)

    # ---- Figure 2: deformed meshes coloured by ux ----
    fig, ax = plt.subplots()
    vmin = min(d1[:, 0].min(), d2[:, 0].min())
    vmax = max(d1[:, 0].max(), d2[:, 0].max())
    pc = plot_field(ax, node1 + args.scale * d1, element1, d1[:, 0], vmin=vmin, vmax=vmax)
    plot_field(ax, node2 + args.scale * d2, element2, d2[:, 0], vmin=vmin, vmax=vmax)
    plot_mesh(ax, node1 + args.scale * d1, element1, "k", 0.4)
    plot_mesh(ax, node2 + args.scale * d2, element2, "k", 0.4)
    fig.colorbar(pc, ax=ax, label="ux")
    ax.set_title(f"Deformed configuration (x{args.scale:g})")
    ax.axis("off")
    _save(fig, npz_path, "deformed", args.save)

    # ---- Figure 3: mid-line deflection vs exact ----
    fig, ax = plt.subplots()
    x = np.linspace(0.0, L, 200)
    ax.plot(x, analytical.midline_deflection(x, P, E, nu, L, c), "k-", lw=1.4, label="exact")
    ax.plot(data["x_mid"], data["uy_mid"], "o", mec="k", mfc="g", ms=6.5, label="coupling")
    ax.axvline(float(data["interface_x"]), color="0.6", ls="--", lw=0.8)
    ax.set_xlabel("x")
    ax.set_ylabel("w")
    ax.grid(True)
    ax.legend()
    _save(fig, npz_path, "deflection", args.save)

    # ---- Figure 4: element stresses vs exact at the element centres ----
    fig, ax = plt.subplots()
    centers = np.vstack([data["centers1"], data["centers2"]])
    stress = np.vstack([data["stress1"], data["stress2"]])
    sxx, _, sxy = analytical.stress(centers[:, 0], centers[:, 1], P, L, c)
    ax.plot(sxx, stress[:, 0], "o", mec="k", mfc="g", ms=4, label="sigma_xx")
    ax.plot(sxy, stress[:, 2], "s", mec="k", mfc="y", ms=4, label="sigma_xy")
    lim = [min(sxx.min(), sxy.min()), max(sxx.max(), sxy.max())]
    ax.plot(lim, lim, "k-", lw=1.0)
    ax.set_xlabel("exact")
    ax.set_ylabel("coupling")
    ax.grid(True)
    ax.legend()
    _save(fig, npz_path, "stress", args.save)

    plt.show()


if __name__ == "__main__":
    main()
