import json

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from nitsche_beam import plot_result, run_case


def test_run_case_writes_result(tmp_path, capsys) -> None:
    out = tmp_path / "r.npz"
    assert run_case.main(["--nx1", "6", "--ny1", "4", "--nx2", "5", "--ny2", "2", "--out", str(out)]) == 0
    data = np.load(out)
    for key in ("node1", "element1", "node2", "element2", "U", "ux1", "uy1", "ux2", "uy2",
                "x_mid", "uy_mid", "uy_mid_exact", "stress1", "centers1", "stress2", "centers2",
                "E", "nu", "L", "c", "P", "alpha", "interface_x"):
        assert key in data.files
    assert data["node1"].shape == (7 * 5, 2)
    assert data["U"].shape == (2 * (35 + 18),)
    assert float(data["alpha"]) == 1e10
    printed = capsys.readouterr().out
    assert "[RUN] max interface jump" in printed
    assert f"Saved: {out}" in printed


def test_run_case_reads_config_file(tmp_path) -> None:
    cfg = tmp_path / "case.json"
    cfg.write_text(json.dumps({"domain1": {"nx": 4, "ny": 2}, "domain2": {"nx": 4, "ny": 1}, "alpha": 1e9}))
    out = tmp_path / "r.npz"
    assert run_case.main(["--config", str(cfg), "--pairing", "ratio", "--out", str(out)]) == 0
    data = np.load(out)
    assert float(data["alpha"]) == 1e9
    assert data["node2"].shape == (10, 2)


def test_run_case_reports_invalid_input(tmp_path) -> None:
    out = tmp_path / "r.npz"
    assert run_case.main(["--alpha", "-1", "--out", str(out)]) == 1
    assert run_case.main(["--ny1", "8", "--ny2", "3", "--pairing", "ratio", "--out", str(out)]) == 1
    assert not out.exists()


def test_plot_result_saves_figures(tmp_path, monkeypatch) -> None:
    out = tmp_path / "r.npz"
    assert run_case.main(["--nx1", "4", "--ny1", "2", "--nx2", "3", "--ny2", "3", "--out", str(out)]) == 0
    monkeypatch.setattr(plt, "show", lambda: None)
    plot_result.main(["--npz", str(out), "--save", "--scale", "50"])
    for suffix in ("mesh", "deformed", "deflection", "stress"):
        assert (tmp_path / f"r_{suffix}.png").exists()
    plt.close("all")
