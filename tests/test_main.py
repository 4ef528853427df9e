import os

import pandas as pd

import main
from dtakit.samples import write_sample_csv


def test_main_runs_demo_on_sample(tmp_path):
    out = tmp_path / "out"
    code = main.main(["--demo", "--output-dir", str(out), "--log-file", "", "--no-plot"])
    assert code == 0

    results = pd.read_csv(out / "tangent_results.csv")
    assert len(results) == 2
    assert 620.0 < results["Transition Temperature (°C)"].iloc[0] < 640.0


def test_main_places_tangents_from_csv(tmp_path):
    csv_path = write_sample_csv(str(tmp_path / "trace.csv"))
    out = tmp_path / "out"
    code = main.main(
        [
            csv_path,
            "--tangent1",
            "610",
            "--tangent2",
            "635",
            "--zoom",
            "590",
            "670",
            "--output-dir",
            str(out),
            "--log-file",
            "",
        ]
    )
    assert code == 0
    assert os.path.exists(out / "dta_tangents.png")
    viewports = pd.read_csv(out / "viewports.csv")
    assert viewports["x_min"].tolist() == [590.0, 590.0]


def test_main_fails_on_missing_file(tmp_path):
    code = main.main(
        [str(tmp_path / "missing.csv"), "--output-dir", str(tmp_path), "--log-file", ""]
    )
    assert code == 1
