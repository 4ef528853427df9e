import numpy as np
import pandas as pd
import pytest

from dtakit.samples import SAMPLES, generate_melting_trace, get_sample, write_sample_csv
from dtakit.schema import COLUMNS


def test_trace_is_deterministic_and_covers_demo_window():
    first = generate_melting_trace()
    second = generate_melting_trace()
    pd.testing.assert_frame_equal(first, second)

    temps = first[COLUMNS.temperature]
    assert temps.min() < 590.0 and temps.max() > 670.0
    assert np.all(np.diff(first[COLUMNS.time]) > 0)


def test_endotherm_minimum_near_peak_center():
    info = SAMPLES["al-si"]
    frame = generate_melting_trace(info)
    idx = frame[COLUMNS.signal].idxmin()
    assert frame.loc[idx, COLUMNS.temperature] == pytest.approx(
        info.peak_center, abs=1.0
    )


def test_write_sample_csv(tmp_path):
    path = write_sample_csv(str(tmp_path / "data" / "al_si.csv"))
    frame = pd.read_csv(path)
    assert list(frame.columns) == [COLUMNS.time, COLUMNS.temperature, COLUMNS.signal]


def test_unknown_sample():
    with pytest.raises(KeyError):
        get_sample("steel")
