"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from bibaudit.models import RawRecord  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "synthetic"

_COMPLETE_FIELDS: dict[str, dict[str, str]] = {
    "article": {
        "title": "Gradient-based learning applied to document recognition",
        "author": "LeCun, Yann and Bottou, Leon",
        "journal": "Proceedings of the IEEE",
        "volume": "86",
        "number": "11",
        "pages": "2278--2324 (1998)",
        "year": "1998",
    },
    "arxiv": {
        "title": "Attention Is All You Need",
        "author": "Vaswani, Ashish",
        "journal": "arXiv preprint arXiv:1706.03762",
        "year": "2017",
    },
    "misc": {
        "author": "PyTorch Contributors",
        "year": "2023",
        "title": "PyTorch",
        "url": "https://pytorch.org",
    },
    "inproceedings": {
        "title": "Deep Residual Learning for Image Recognition",
        "author": "He, Kaiming",
        "booktitle": "Proceedings of CVPR",
        "year": "2016",
        "pages": "770--778 (2016)",
    },
    "book": {
        "author": "Goodfellow, Ian",
        "title": "Deep Learning",
        "publisher": "MIT Press",
        "year": "2016",
        "address": "Cambridge, MA",
        "edition": "1",
    },
    "techreport": {
        "author": "Smith, Jane",
        "title": "A Technical Report",
        "institution": "Example University",
        "year": "2020",
        "address": "Springfield",
    },
}


@pytest.fixture
def make_record() -> Callable[..., RawRecord]:
    """Factory for records that are complete and valid unless overridden.

    ``kind`` selects a complete field set (``arxiv`` builds an article with
    an arXiv journal); ``drop`` removes fields and keyword arguments
    override or add field values.
    """

    def _factory(
        kind: str = "book",
        *,
        entry_type: str | None = None,
        key: str = "rec001",
        drop: tuple[str, ...] = (),
        index: int = 0,
        **overrides: str,
    ) -> RawRecord:
        fields = dict(_COMPLETE_FIELDS.get(kind, {}))
        for name in drop:
            fields.pop(name, None)
        fields.update(overrides)
        if entry_type is None:
            entry_type = "article" if kind == "arxiv" else kind
        return RawRecord(entry_type=entry_type, key=key, fields=fields, index=index)

    return _factory


@pytest.fixture
def sample_bib() -> Path:
    """Path to the synthetic sample database."""
    return FIXTURES_DIR / "sample.bib"
