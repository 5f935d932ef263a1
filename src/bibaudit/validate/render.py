"""Textual rendering of records as parsed, used in audit rows."""

from bibaudit.models import RawRecord, render_entry

__all__ = ["render_original"]


def render_original(record: RawRecord) -> str:
    """Render a record as parsed, fields in source order.

    Entries the parser could not read are reproduced from their source
    text.
    """
    if record.source_text is not None:
        return record.source_text
    return render_entry(record.entry_type, record.key, record.fields.items())
