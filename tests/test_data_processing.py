import logging

import pytest

from dtakit.data_processing import (
    detect_header,
    ingest_rows,
    parse_csv,
    parse_csv_text,
    validate_and_clean_data,
    validate_data_row,
)
from dtakit.errors import IngestError, ValidationError
from dtakit.session import Session, load_rows


def test_detect_header_with_text_first_row():
    rows = [["Time", "Temperature", "DTA"], [0.0, 600.0, 10.0], [1.0, 605.0, 12.0]]
    has_header, header = detect_header(rows)
    assert has_header
    assert header == ["Time", "Temperature", "DTA"]


def test_detect_header_requires_numeric_second_row():
    rows = [["a", 1.0, 2.0], ["b", 3.0, 4.0]]
    assert detect_header(rows) == (False, [])
    assert detect_header([["Time", "T", "DTA"]]) == (False, [])


def test_validate_data_row():
    assert validate_data_row([0.0, 600.0, 1.5])
    assert validate_data_row([0.0, 600.0, 1.5, "extra"])
    assert not validate_data_row([0.0, 600.0])
    assert not validate_data_row([0.0, "x", 1.0])
    assert not validate_data_row([0.0, float("nan"), 1.0])
    assert not validate_data_row([True, 600.0, 1.0])
    assert not validate_data_row(None)


def test_clean_counts_invalid_and_non_monotonic_rows():
    rows = [
        [0.0, 600.0, 1.0],
        [1.0, 601.0, 2.0],
        ["x", 602.0, 3.0],
        [1.0, 603.0, 4.0],
        [2.0, 604.0, 5.0],
        [1.5, 605.0, 6.0],
    ]
    result = validate_and_clean_data(rows)
    assert [s.time for s in result.samples] == [0.0, 1.0, 2.0]
    assert result.invalid_count == 1
    assert result.duplicate_count == 2
    assert result.warnings == [
        "Skipped 1 rows with invalid data",
        "Skipped 2 rows with non-monotonic time",
    ]


def test_ingest_two_rows_raises_validation_error():
    with pytest.raises(ValidationError) as excinfo:
        ingest_rows([[0.0, 600.0, 10.0], [1.0, 605.0, 12.0]])
    assert excinfo.value.valid_count == 2
    assert excinfo.value.invalid_count == 0


def test_ingest_skips_header_and_logs_warnings(caplog):
    caplog.set_level(logging.WARNING)
    rows = [
        ["Time", "Temperature", "DTA"],
        [0.0, 600.0, 10.0],
        [1.0, 605.0, 12.0],
        [1.0, 606.0, 12.5],
        [2.0, 610.0, 20.0],
    ]
    result = ingest_rows(rows)
    assert result.has_header
    assert len(result.samples) == 3
    assert any("non-monotonic" in rec.message for rec in caplog.records)


def test_parse_csv_text_coerces_numbers_and_skips_blank_lines():
    rows = parse_csv_text("Time,Temperature,DTA\n0,600,10\n\n1,605,12.5\n")
    assert rows == [["Time", "Temperature", "DTA"], [0.0, 600.0, 10.0], [1.0, 605.0, 12.5]]


def test_parse_csv_drops_short_rows(tmp_path):
    path = tmp_path / "short.csv"
    path.write_text("0,600,10\n1,605\n2,610,20\n3,,22\n4,620,24\n", encoding="utf-8")
    rows = parse_csv(str(path))
    assert rows == [[0.0, 600.0, 10.0], [2.0, 610.0, 20.0], [4.0, 620.0, 24.0]]


def test_parse_csv_keeps_full_width_after_narrow_title_line():
    text = (
        "DTA export AlSi,run 3\n"
        "Time,Temperature,DTA\n"
        "0,600,10\n"
        "1,605,12\n"
        "2,610,20,note\n"
        "3,615,22\n"
    )
    rows = parse_csv_text(text)
    assert rows[0] == ["Time", "Temperature", "DTA"]
    assert rows[1:] == [
        [0.0, 600.0, 10.0],
        [1.0, 605.0, 12.0],
        [2.0, 610.0, 20.0, "note"],
        [3.0, 615.0, 22.0],
    ]

    session = Session()
    result = load_rows(session, rows)
    assert result.ok
    assert result.valid_count == 4
    assert [p.y for p in session.curve_points] == [10.0, 12.0, 20.0, 22.0]


def test_header_detection_treats_non_finite_text_as_text():
    assert detect_header([["NaN", "inf", "x"], [0.0, 600.0, 10.0]])[0]
    assert detect_header([["nan", "-inf", "Infinity"], [0.0, 600.0, 10.0]])[0]
    assert not detect_header([["1e3", "2", "3"], [0.0, 600.0, 10.0]])[0]


def test_parse_csv_empty_input_raises_ingest_error():
    with pytest.raises(IngestError):
        parse_csv_text("")


def test_parse_csv_missing_file_raises_ingest_error(tmp_path):
    with pytest.raises(IngestError):
        parse_csv(str(tmp_path / "missing.csv"))


def test_parse_csv_keeps_non_finite_tokens_as_text():
    rows = parse_csv_text("NaN,inf,DTA\n0,600,10\n1,605,NaN\n2,610,20\n")
    assert rows[0] == ["NaN", "inf", "DTA"]
    assert rows[2] == [1.0, 605.0, "NaN"]
    assert detect_header(rows)[0]

    result = validate_and_clean_data(rows[1:])
    assert result.invalid_count == 1
