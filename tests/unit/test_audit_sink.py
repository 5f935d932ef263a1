"""Tests for the spreadsheet audit sink."""

from pathlib import Path

import pytest
from openpyxl import Workbook, load_workbook

from bibaudit.audit.sink import HEADER, MIN_COLUMN_WIDTH, SHEET_TITLE, AuditSink
from bibaudit.models import AuditFlag


def _rows(path: Path) -> list[tuple]:
    workbook = load_workbook(path)
    try:
        return list(workbook[SHEET_TITLE].iter_rows(values_only=True))
    finally:
        workbook.close()


def _fill_colors(path: Path) -> list[str | None]:
    """Return the fill colour of column A for every data row."""
    workbook = load_workbook(path)
    try:
        sheet = workbook[SHEET_TITLE]
        colors = []
        for row in sheet.iter_rows(min_row=2, max_col=1):
            fill = row[0].fill
            colors.append(fill.fgColor.rgb if fill.fill_type == "solid" else None)
        return colors
    finally:
        workbook.close()


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "audit.xlsx"


@pytest.mark.unit
def test_header_and_rows_written(log_path: Path) -> None:
    """Test rows are persisted after each append under the header row."""
    sink = AuditSink(log_path, autosave=True)
    sink.reset()
    sink.record_result("@book{a,\n}", "@book{a,\n}", "ok")

    # Autosave makes the row durable without close()
    assert _rows(log_path) == [HEADER, ("@book{a,\n}", "@book{a,\n}", "ok")]
    sink.close()


@pytest.mark.unit
def test_row_fills_follow_outcome(log_path: Path) -> None:
    """Test error rows and warning rows get distinct fills."""
    with AuditSink(log_path) as sink:
        sink.reset()
        sink.record_result("o1", "u1", "ok")
        sink.record_result("o2", "u2", "warning: pages format error")
        sink.record_result("o3", "u3", "error: undefined type")

    colors = _fill_colors(log_path)

    assert colors[0] is None
    assert colors[1].endswith("FFEB9C")
    assert colors[2].endswith("FFC7CE")


@pytest.mark.unit
def test_record_result_returns_flagged_row(log_path: Path) -> None:
    """Test the returned row carries the flag derived from the description."""
    with AuditSink(log_path) as sink:
        row = sink.record_result("o", "u", "Error: missing fields: year")

    assert row.flag is AuditFlag.ERROR
    assert sink.rows == [row]
    assert sink.row_count == 1


@pytest.mark.unit
def test_reset_deletes_previous_log(log_path: Path) -> None:
    """Test reset() drops rows from an earlier run."""
    with AuditSink(log_path) as sink:
        sink.reset()
        sink.record_result("old", "old", "ok")

    with AuditSink(log_path) as sink:
        sink.reset()
        sink.record_result("new", "new", "ok")

    assert _rows(log_path) == [HEADER, ("new", "new", "ok")]


@pytest.mark.unit
def test_appends_to_existing_log_without_reset(log_path: Path) -> None:
    """Test a sink opened on an existing file appends below its rows."""
    with AuditSink(log_path) as sink:
        sink.reset()
        sink.record_result("first", "first", "ok")

    with AuditSink(log_path) as sink:
        sink.record_result("second", "second", "warning: misc rewritten to www")

    rows = _rows(log_path)
    assert len(rows) == 3
    assert rows[2][0] == "second"


@pytest.mark.unit
def test_column_widths_are_capped(log_path: Path) -> None:
    """Test long values widen columns only up to max_column_width."""
    with AuditSink(log_path, max_column_width=40) as sink:
        sink.reset()
        sink.record_result("x" * 200, "short", "ok")

    workbook = load_workbook(log_path)
    sheet = workbook[SHEET_TITLE]
    widths = [sheet.column_dimensions[letter].width for letter in "ABC"]
    workbook.close()

    assert widths[0] == 40
    assert MIN_COLUMN_WIDTH <= widths[1] < 40
    assert widths[2] == MIN_COLUMN_WIDTH


@pytest.mark.unit
def test_width_uses_longest_line(log_path: Path) -> None:
    """Test multi-line cells are measured by their longest line."""
    with AuditSink(log_path) as sink:
        sink.reset()
        sink.record_result("a" * 30 + "\n" + "b" * 5, "u", "ok")
        width = sink._sheet.column_dimensions["A"].width

    assert width == 32


@pytest.mark.unit
def test_invalid_max_width(log_path: Path) -> None:
    """Test max_column_width below the minimum is rejected."""
    with pytest.raises(ValueError, match="max_column_width"):
        AuditSink(log_path, max_column_width=MIN_COLUMN_WIDTH - 1)


@pytest.mark.unit
def test_no_file_without_rows(log_path: Path) -> None:
    """Test a sink that never opened a workbook writes nothing."""
    with AuditSink(log_path):
        pass

    assert not log_path.exists()


@pytest.mark.unit
def test_saved_once_on_close_by_default(log_path: Path) -> None:
    """Test the default sink defers writing until close()."""
    sink = AuditSink(log_path)
    sink.reset()
    sink.record_result("o", "u", "ok")

    assert not log_path.exists()

    sink.close()
    assert len(_rows(log_path)) == 2


@pytest.fixture
def save_calls(monkeypatch: pytest.MonkeyPatch) -> list[object]:
    """Record every workbook save."""
    calls: list[object] = []
    original = Workbook.save

    def _counting_save(self: Workbook, filename: object) -> None:
        calls.append(filename)
        original(self, filename)

    monkeypatch.setattr(Workbook, "save", _counting_save)
    return calls


@pytest.mark.unit
def test_workbook_saves_do_not_grow_with_rows(log_path: Path, save_calls: list[object]) -> None:
    """Test a default sink writes the workbook once however many rows it gets."""
    with AuditSink(log_path) as sink:
        sink.reset()
        for i in range(50):
            sink.record_result(f"o{i}", f"u{i}", "ok")

    assert len(save_calls) == 1
    assert len(_rows(log_path)) == 51


@pytest.mark.unit
def test_autosave_saves_every_row(log_path: Path, save_calls: list[object]) -> None:
    """Test autosave writes after each append and once more on close."""
    with AuditSink(log_path, autosave=True) as sink:
        sink.reset()
        for i in range(5):
            sink.record_result(f"o{i}", f"u{i}", "ok")

    assert len(save_calls) == 6
