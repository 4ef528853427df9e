"""Bundled example traces.

The Al-Si melting sample is generated, not stored: a linear heating ramp with
a slowly drifting baseline and one endothermic dip. Its extrapolated onset by
the two-tangent construction lands close to 630 °C, and the whole event sits
inside the walkthrough's zoom window.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Dict, List

import numpy as np
import pandas as pd

from .schema import COLUMNS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleInfo:
    name: str
    description: str
    expected_temp: float
    t_start: float = 540.0
    t_end: float = 720.0
    heating_rate: float = 10.0
    peak_center: float = 642.0
    peak_width: float = 10.0
    peak_depth: float = 5.0
    baseline_offset: float = 0.5
    baseline_slope: float = 0.002


SAMPLES: Dict[str, SampleInfo] = {
    "al-si": SampleInfo(
        name="Al-Si sample melting",
        description="Synthetic DTA trace of an Al-Si alloy heated at 10 °C/min.",
        expected_temp=630.0,
    ),
}

DEFAULT_SAMPLE = "al-si"


def get_sample(key: str = DEFAULT_SAMPLE) -> SampleInfo:
    """Look up a bundled sample by key.

    Raises:
        KeyError: If ``key`` is not registered.
    """
    try:
        return SAMPLES[key]
    except KeyError:
        raise KeyError(
            f"Unknown sample '{key}'. Available: {', '.join(sorted(SAMPLES))}"
        ) from None


def generate_melting_trace(
    info: SampleInfo | None = None,
    step_seconds: float = 1.0,
    noise: float = 0.0,
    seed: int = 0,
) -> pd.DataFrame:
    """Build a deterministic DTA trace for ``info``.

    Args:
        info: Sample parameters; the default Al-Si sample when omitted.
        step_seconds: Sampling interval.
        noise: Standard deviation of Gaussian noise added to the signal.
        seed: Seed for the noise generator.

    Returns:
        pandas.DataFrame: Columns ``Time``, ``Temperature (°C)`` and
        ``DTA Signal``.
    """
    info = info or SAMPLES[DEFAULT_SAMPLE]
    rate_per_second = info.heating_rate / 60.0
    duration = (info.t_end - info.t_start) / rate_per_second
    time = np.arange(0.0, duration + step_seconds / 2, step_seconds)
    temperature = info.t_start + rate_per_second * time

    baseline = info.baseline_offset + info.baseline_slope * (temperature - info.t_start)
    dip = info.peak_depth * np.exp(
        -(((temperature - info.peak_center) / info.peak_width) ** 2)
    )
    signal = baseline - dip
    if noise > 0:
        rng = np.random.default_rng(seed)
        signal = signal + rng.normal(0.0, noise, size=signal.shape)

    return pd.DataFrame(
        {
            COLUMNS.time: np.round(time, 3),
            COLUMNS.temperature: np.round(temperature, 4),
            COLUMNS.signal: np.round(signal, 6),
        }
    )


def sample_rows(key: str = DEFAULT_SAMPLE, **kwargs) -> List[list]:
    """Return the sample as raw rows with a header, ready for ``load_rows``."""
    frame = generate_melting_trace(get_sample(key), **kwargs)
    return [list(frame.columns)] + frame.values.tolist()


def write_sample_csv(path: str, key: str = DEFAULT_SAMPLE, **kwargs) -> str:
    """Write a bundled sample to ``path`` as CSV with a header row."""
    frame = generate_melting_trace(get_sample(key), **kwargs)
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    frame.to_csv(path, index=False)
    logger.info("Wrote sample '%s' (%d rows) to %s", key, len(frame), path)
    return path
