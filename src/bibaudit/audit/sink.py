"""Spreadsheet audit sink.

Every processed record is appended as one row (original text, canonical
text, outcome description) to an ``.xlsx`` workbook. Rows whose outcome
is an error or a warning get a distinct background fill so reviewers can
scan the log quickly.
"""

from pathlib import Path
from typing import Any

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from bibaudit.models import AuditFlag, AuditRow

__all__ = [
    "AuditSink",
    "HEADER",
    "DEFAULT_MAX_COLUMN_WIDTH",
    "FLAG_FILLS",
]

HEADER = ("Original", "Updated", "Record")
SHEET_TITLE = "Audit"

DEFAULT_MAX_COLUMN_WIDTH = 100
MIN_COLUMN_WIDTH = 10
# Extra characters added to the longest line of a column
WIDTH_PADDING = 2

FLAG_FILLS: dict[AuditFlag, PatternFill] = {
    AuditFlag.ERROR: PatternFill(fill_type="solid", start_color="FFC7CE", end_color="FFC7CE"),
    AuditFlag.WARNING: PatternFill(fill_type="solid", start_color="FFEB9C", end_color="FFEB9C"),
}

_WRAP = Alignment(wrap_text=True, vertical="top")


def _text_width(value: Any) -> int:
    if value is None:
        return 0
    return max((len(line) for line in str(value).split("\n")), default=0)


class AuditSink:
    """Append-only tabular audit log backed by an openpyxl workbook.

    The workbook is opened lazily: an existing file is loaded and appended
    to, unless ``reset()`` was called first, which deletes it and starts a
    fresh log with a header row. Rows reach the file when the sink is
    closed, or after every append with ``autosave``.

    Attributes
    ----------
    path : Path
        Location of the ``.xlsx`` file.
    max_column_width : int
        Upper bound for auto-computed column widths.
    autosave : bool
        Save the workbook after every appended row, not only on close.
    rows : list[AuditRow]
        Rows appended through this sink instance, in order.
    """

    def __init__(
        self,
        path: Path | str,
        max_column_width: int = DEFAULT_MAX_COLUMN_WIDTH,
        autosave: bool = False,
    ) -> None:
        """Initialize the sink without touching the file system.

        Parameters
        ----------
        path : Path | str
            Location of the ``.xlsx`` file.
        max_column_width : int, optional
            Upper bound for column widths, by default 100.
        autosave : bool, optional
            Save after every append instead of only on close, by default
            False. Each save rewrites the whole workbook.
        """
        if max_column_width < MIN_COLUMN_WIDTH:
            raise ValueError(
                f"max_column_width must be >= {MIN_COLUMN_WIDTH}, got {max_column_width}"
            )
        self.path = Path(path)
        self.max_column_width = max_column_width
        self.autosave = autosave
        self.rows: list[AuditRow] = []
        self._workbook: Workbook | None = None
        self._sheet: Worksheet | None = None
        self._widths: list[int] = [0] * len(HEADER)

    def __enter__(self) -> "AuditSink":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and save."""
        self.close()

    @property
    def row_count(self) -> int:
        """Number of rows appended through this sink."""
        return len(self.rows)

    def reset(self) -> None:
        """Delete any log left by a previous run and start a fresh workbook."""
        if self.path.exists():
            self.path.unlink()
        self.rows = []
        self._new_workbook()

    def record_result(
        self,
        original_text: str,
        canonical_text: str,
        outcome_description: str,
    ) -> AuditRow:
        """Append one record's audit row.

        Parameters
        ----------
        original_text : str
            Record as parsed.
        canonical_text : str
            Canonical rewrite of the record.
        outcome_description : str
            Outcome description; a leading ``error`` or ``warning`` marker
            selects the row fill.

        Returns
        -------
        AuditRow
            Row as written, including its flag.
        """
        row = AuditRow.from_texts(original_text, canonical_text, outcome_description)
        self.append(row)
        return row

    def append(self, row: AuditRow) -> None:
        """Append a prepared row, restyle it, and refresh column widths."""
        sheet = self._ensure_sheet()
        sheet.append(list(row.as_cells()))
        row_index = sheet.max_row

        fill = FLAG_FILLS.get(row.flag)
        for column_index in range(1, len(HEADER) + 1):
            cell = sheet.cell(row=row_index, column=column_index)
            cell.alignment = _WRAP
            if fill is not None:
                cell.fill = fill

        self._update_widths(row.as_cells())
        self.rows.append(row)

        if self.autosave:
            self.save()

    def save(self) -> None:
        """Write the workbook to disk."""
        if self._workbook is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._workbook.save(self.path)

    def close(self) -> None:
        """Save and release the workbook."""
        self.save()
        if self._workbook is not None:
            self._workbook.close()
        self._workbook = None
        self._sheet = None

    def _ensure_sheet(self) -> Worksheet:
        if self._sheet is None:
            if self.path.exists():
                self._load_workbook()
            else:
                self._new_workbook()
        assert self._sheet is not None
        return self._sheet

    def _new_workbook(self) -> None:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = SHEET_TITLE
        sheet.append(list(HEADER))
        for cell in sheet[1]:
            cell.font = Font(bold=True)
        sheet.freeze_panes = "A2"

        self._workbook = workbook
        self._sheet = sheet
        self._widths = [0] * len(HEADER)
        self._update_widths(HEADER)

    def _load_workbook(self) -> None:
        workbook = load_workbook(self.path)
        sheet = workbook[SHEET_TITLE] if SHEET_TITLE in workbook.sheetnames else workbook.active

        self._workbook = workbook
        self._sheet = sheet
        self._widths = [0] * len(HEADER)
        for values in sheet.iter_rows(max_col=len(HEADER), values_only=True):
            self._update_widths(values)

    def _update_widths(self, values: Any) -> None:
        assert self._sheet is not None
        for offset, value in enumerate(values):
            width = min(_text_width(value) + WIDTH_PADDING, self.max_column_width)
            if width > self._widths[offset]:
                self._widths[offset] = width
            letter = get_column_letter(offset + 1)
            column_width = max(self._widths[offset], MIN_COLUMN_WIDTH)
            self._sheet.column_dimensions[letter].width = column_width
