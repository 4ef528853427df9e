"""
Handles CSV parsing, row validation, and derivative calculations.
"""

# Algorithm summary: tokenize a three-column Time/Temperature/DTA export,
# auto-detect a header row, drop malformed and non-monotonic rows (counting
# both), then difference consecutive samples to obtain dDTA/dt and dT/dt
# against temperature. Optional Savitzky-Golay smoothing is applied to the
# signal before differencing.

from __future__ import annotations

import io
import logging
import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy.signal import savgol_filter

from .config import CONFIG, AnalysisConfig
from .errors import ComputationError, IngestError, ValidationError
from .schema import COLUMNS, CurvePoint, DerivativePoint, Sample

logger = logging.getLogger(__name__)

X_CONVENTIONS = ("midpoint", "left")


@dataclass
class IngestResult:
    """Outcome of cleaning raw rows.

    Attributes:
        samples: Retained samples, strictly increasing in time.
        warnings: Human-readable notes about dropped rows.
        invalid_count: Rows dropped for being short or non-numeric.
        duplicate_count: Rows dropped for non-increasing time.
        has_header: Whether the first row was skipped as a header.
        min_points: Minimum sample count for the result to be usable.
    """

    samples: Tuple[Sample, ...]
    warnings: List[str] = field(default_factory=list)
    invalid_count: int = 0
    duplicate_count: int = 0
    has_header: bool = False
    min_points: int = CONFIG.min_data_points

    @property
    def valid(self) -> bool:
        return len(self.samples) >= self.min_points

    def require_valid(self) -> "IngestResult":
        """Return ``self`` or raise :class:`ValidationError` with row counts."""
        if not self.valid:
            raise ValidationError(
                "Not enough valid data after validation: "
                f"{len(self.samples)} usable rows (need {self.min_points}), "
                f"{self.invalid_count} invalid, "
                f"{self.duplicate_count} with non-monotonic time",
                valid_count=len(self.samples),
                invalid_count=self.invalid_count,
                duplicate_count=self.duplicate_count,
            )
        return self


@dataclass(frozen=True)
class DerivativeResult:
    """Main curve and derivative curve computed from one sample set."""

    curve_points: Tuple[CurvePoint, ...]
    derivative_points: Tuple[DerivativePoint, ...]


def _coerce_cell(value):
    """Turn a raw CSV token into a float when it looks numeric.

    Non-numeric text, including ``NaN`` and ``inf`` spellings, is kept as a
    stripped string; empty tokens become ``None``.
    """
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return None
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return text
    return number if math.isfinite(number) else text


def _rows_from_frame(frame: pd.DataFrame) -> List[list]:
    rows = []
    for raw in frame.itertuples(index=False, name=None):
        row = [_coerce_cell(v) for v in raw]
        # Short lines are padded by pandas; trim so row length reflects the line.
        while row and row[-1] is None:
            row.pop()
        if row:
            rows.append(row)
    return rows


def _read_text(filepath_or_buffer) -> str:
    if hasattr(filepath_or_buffer, "read"):
        text = filepath_or_buffer.read()
    else:
        with open(filepath_or_buffer, encoding="utf-8") as fh:
            text = fh.read()
    if isinstance(text, bytes):
        text = text.decode("utf-8")
    return text


def _read_frame(text: str, **kwargs) -> pd.DataFrame:
    return pd.read_csv(
        io.StringIO(text),
        header=None,
        sep=",",
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        engine="python",
        **kwargs,
    )


def parse_csv(filepath_or_buffer, min_fields: int = 3) -> List[list]:
    """Tokenize a comma-separated export into rows of coerced cells.

    Every line keeps its full width, however wide the first line is. Lines
    with fewer than ``min_fields`` fields, or with an empty field, are
    dropped, so title lines above the table do not count as data.

    Args:
        filepath_or_buffer: Path or readable text/bytes buffer.
        min_fields (int, optional): Minimum fields for a line to be kept.
            Defaults to ``3`` (Time, Temperature, DTA).

    Returns:
        list[list]: One list per kept line. Numeric tokens are floats and
        other tokens stripped strings.

    Raises:
        IngestError: If the stream cannot be read or holds no data.
    """
    try:
        text = _read_text(filepath_or_buffer)
        wide_lines: List[int] = []

        def record_width(bad_line):
            wide_lines.append(len(bad_line))
            return None

        frame = _read_frame(text, on_bad_lines=record_width)
        if wide_lines:
            # Column count comes from the first line; re-read at the widest.
            width = max([frame.shape[1]] + wide_lines)
            frame = _read_frame(text, names=list(range(width)))
    except pd.errors.EmptyDataError as exc:
        raise IngestError("File is empty or contains no data") from exc
    except (pd.errors.ParserError, UnicodeDecodeError, OSError) as exc:
        raise IngestError(f"Error reading file: {exc}") from exc

    parsed = _rows_from_frame(frame)
    rows = [
        row
        for row in parsed
        if len(row) >= min_fields and all(v is not None for v in row)
    ]
    logger.info(
        "Parsed %d rows (%d columns), dropped %d short or incomplete rows",
        len(rows),
        frame.shape[1],
        len(parsed) - len(rows),
    )
    return rows


def parse_csv_text(text: str) -> List[list]:
    """Tokenize CSV content held in memory."""
    return parse_csv(io.StringIO(text))


def is_valid_number(value) -> bool:
    """Return ``True`` for finite real numbers (booleans excluded)."""
    if isinstance(value, (bool, np.bool_)):
        return False
    if not isinstance(value, (int, float, np.integer, np.floating)):
        return False
    return bool(np.isfinite(value))


def _is_non_numeric_text(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        number = float(value)
    except ValueError:
        return True
    return not math.isfinite(number)


def detect_header(rows: Sequence[Sequence]) -> Tuple[bool, list]:
    """Decide whether the first row is a header.

    A header is assumed when there are at least two rows, the first row holds
    a non-numeric string, and every value of the second row is numeric.

    Returns:
        tuple[bool, list]: ``(has_header, header_row)``; ``header_row`` is
        empty when no header was found.
    """
    if len(rows) < 2:
        return False, []

    first, second = rows[0], rows[1]
    first_has_strings = any(_is_non_numeric_text(v) for v in first)
    second_all_numbers = len(second) > 0 and all(
        isinstance(v, (int, float, np.integer, np.floating))
        and not isinstance(v, (bool, np.bool_))
        for v in second
    )
    has_header = first_has_strings and second_all_numbers
    return has_header, (list(first) if has_header else [])


def validate_data_row(row) -> bool:
    """A row is valid when its first three values are finite numbers."""
    if row is None or isinstance(row, (str, bytes)):
        return False
    try:
        if len(row) < 3:
            return False
    except TypeError:
        return False
    return all(is_valid_number(row[i]) for i in range(3))


def validate_and_clean_data(
    rows: Sequence[Sequence], config: AnalysisConfig = CONFIG
) -> IngestResult:
    """Keep valid rows whose time strictly increases, counting the rest.

    Header detection is not performed here; see :func:`ingest_rows`.
    """
    cleaned: List[Sample] = []
    last_time = -math.inf
    invalid_count = 0
    duplicate_count = 0

    for row in rows:
        if not validate_data_row(row):
            invalid_count += 1
            continue

        time, temp, signal = (float(row[0]), float(row[1]), float(row[2]))
        if time <= last_time:
            duplicate_count += 1
            continue

        last_time = time
        cleaned.append(Sample(time, temp, signal))

    warnings = []
    if invalid_count > 0:
        warnings.append(f"Skipped {invalid_count} rows with invalid data")
    if duplicate_count > 0:
        warnings.append(f"Skipped {duplicate_count} rows with non-monotonic time")

    return IngestResult(
        samples=tuple(cleaned),
        warnings=warnings,
        invalid_count=invalid_count,
        duplicate_count=duplicate_count,
        min_points=int(config.min_data_points),
    )


def ingest_rows(
    rows: Sequence[Sequence], config: AnalysisConfig = CONFIG
) -> IngestResult:
    """Detect a header, clean the remaining rows, and validate the count.

    Raises:
        ValidationError: If fewer than ``config.min_data_points`` samples
            remain after cleaning.
    """
    has_header, _ = detect_header(rows)
    data_rows = list(rows[1:]) if has_header else list(rows)

    result = validate_and_clean_data(data_rows, config=config)
    result.has_header = has_header
    for message in result.warnings:
        logger.warning(message)
    result.require_valid()
    logger.info(
        "Ingested %d samples (header=%s, invalid=%d, non-monotonic=%d)",
        len(result.samples),
        has_header,
        result.invalid_count,
        result.duplicate_count,
    )
    return result


def _choose_savgol_window(n_points, min_window=5):
    """Choose a Savitzky–Golay window length based on dataset size."""

    if n_points < min_window:
        return None
    candidate = max(min_window, int(n_points // 20))
    if candidate % 2 == 0:
        candidate += 1
    max_window = max(min_window, int(n_points // 2))
    if max_window % 2 == 0:
        max_window -= 1
    if candidate > max_window:
        candidate = max_window
    return candidate if candidate >= min_window else None


def calculate_derivatives(
    samples: Sequence[Sample],
    config: AnalysisConfig = CONFIG,
    x_convention: str | None = None,
    smooth: bool = False,
    polyorder: int = 2,
) -> DerivativeResult:
    """Build the signal-vs-temperature curve and its time derivative.

    For each adjacent pair with ``dt > 0`` one derivative point is produced
    with ``y = dSignal/dt`` and ``temp_gradient = dTemperature/dt``. Pairs
    with ``dt <= 0`` are skipped.

    Args:
        samples: Cleaned samples in time order.
        config: Thresholds; ``min_derivative_points`` is enforced.
        x_convention: ``"midpoint"`` or ``"left"``; defaults to
            ``config.derivative_x_convention``.
        smooth: Smooth the signal with Savitzky–Golay before differencing.
            The main curve always keeps the raw signal.
        polyorder: Polynomial order for the Savitzky–Golay filter.

    Returns:
        DerivativeResult: ``curve_points`` one-to-one with ``samples`` and the
        derivative points in order.

    Raises:
        ComputationError: If fewer than ``config.min_derivative_points``
            derivative points result.
        ValueError: If ``x_convention`` is unknown.
    """
    convention = x_convention or config.derivative_x_convention
    if convention not in X_CONVENTIONS:
        raise ValueError(
            f"Unknown derivative x convention '{convention}'. "
            f"Expected one of {X_CONVENTIONS}"
        )

    data = np.asarray(samples, dtype=float).reshape(-1, 3)
    times, temps, signals = data[:, 0], data[:, 1], data[:, 2]

    curve_points = tuple(
        CurvePoint(float(t), float(s)) for t, s in zip(temps, signals)
    )

    signal_for_diff = signals
    window_length = _choose_savgol_window(len(signals))
    if smooth and window_length is not None and window_length > polyorder:
        signal_for_diff = savgol_filter(signals, window_length, polyorder)

    dt = np.diff(times)
    keep = dt > 0
    d_signal = np.diff(signal_for_diff)[keep] / dt[keep]
    d_temp = np.diff(temps)[keep] / dt[keep]
    if convention == "left":
        xs = temps[:-1][keep]
    else:
        xs = 0.5 * (temps[:-1] + temps[1:])[keep]

    derivative_points = tuple(
        DerivativePoint(float(x), float(y), float(g))
        for x, y, g in zip(xs, d_signal, d_temp)
    )

    skipped = int(np.sum(~keep))
    if skipped:
        logger.warning("Skipped %d sample pairs with non-positive dt", skipped)

    if len(derivative_points) < config.min_derivative_points:
        raise ComputationError(
            "Cannot compute derivative: not enough data "
            f"({len(derivative_points)} derivative points)",
            derivative_count=len(derivative_points),
        )

    logger.info(
        "Computed %d curve points and %d derivative points (T %.2f..%.2f)",
        len(curve_points),
        len(derivative_points),
        float(np.min(temps)),
        float(np.max(temps)),
    )
    return DerivativeResult(curve_points, derivative_points)


def samples_frame(samples: Sequence[Sample]) -> pd.DataFrame:
    """Return samples as a tidy DataFrame."""
    data = np.asarray(samples, dtype=float).reshape(-1, 3)
    return pd.DataFrame(
        {
            COLUMNS.time: data[:, 0],
            COLUMNS.temperature: data[:, 1],
            COLUMNS.signal: data[:, 2],
        }
    )


def curve_frame(curve_points: Sequence[CurvePoint]) -> pd.DataFrame:
    """Return main-curve points as a DataFrame."""
    data = np.asarray(curve_points, dtype=float).reshape(-1, 2)
    return pd.DataFrame({COLUMNS.temperature: data[:, 0], COLUMNS.signal: data[:, 1]})


def derivative_frame(derivative_points: Sequence[DerivativePoint]) -> pd.DataFrame:
    """Return derivative points as a DataFrame."""
    data = np.asarray(derivative_points, dtype=float).reshape(-1, 3)
    return pd.DataFrame(
        {
            COLUMNS.temperature: data[:, 0],
            COLUMNS.derivative: data[:, 1],
            COLUMNS.temp_gradient: data[:, 2],
        }
    )
