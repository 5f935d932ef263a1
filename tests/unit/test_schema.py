"""Tests for the schema registry and rule objects."""

import re

import pytest

from bibaudit.models import RawRecord
from bibaudit.schema import (
    ARTICLE_RULE,
    ARXIV_ARTICLE_RULE,
    BOOK_RULE,
    INPROCEEDINGS_RULE,
    TECHREPORT_RULE,
    WWW_RULE,
    FormatConstraint,
    SchemaRegistry,
    SchemaRule,
)


def _lookup(registry: SchemaRegistry, entry_type: str, **fields: str) -> SchemaRule | None:
    record = RawRecord(entry_type=entry_type, fields=fields)
    return registry.lookup(entry_type, record)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("entry_type", "expected"),
    [
        ("book", BOOK_RULE),
        ("BOOK", BOOK_RULE),
        ("techreport", TECHREPORT_RULE),
        ("inproceedings", INPROCEEDINGS_RULE),
        ("misc", WWW_RULE),
        ("www", WWW_RULE),
    ],
)
def test_registry_fixed_rules(
    registry: SchemaRegistry,
    entry_type: str,
    expected: SchemaRule,
) -> None:
    """Test fixed rules resolve case-insensitively."""
    assert _lookup(registry, entry_type) is expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "journal",
    [
        "arXiv preprint arXiv:1706.03762",
        "ARXIV",
        "CoRR (arxiv)",
    ],
)
def test_registry_article_arxiv_split(registry: SchemaRegistry, journal: str) -> None:
    """Test any journal mentioning arXiv selects the four-field short form."""
    rule = _lookup(registry, "article", journal=journal)

    assert rule is ARXIV_ARTICLE_RULE
    assert rule.required == ("title", "author", "year", "journal")


@pytest.mark.unit
def test_registry_article_full_form(registry: SchemaRegistry) -> None:
    """Test other journals, or no journal at all, select the full form."""
    assert _lookup(registry, "article", journal="Nature") is ARTICLE_RULE
    assert _lookup(registry, "article") is ARTICLE_RULE
    assert len(ARTICLE_RULE.required) == 7


@pytest.mark.unit
def test_registry_unknown_type_fails_closed(registry: SchemaRegistry) -> None:
    """Test unknown tags return no rule instead of raising."""
    assert _lookup(registry, "phdthesis") is None
    assert _lookup(registry, "") is None
    assert "phdthesis" not in registry
    assert "Article" in registry


@pytest.mark.unit
def test_registry_rules_listing(registry: SchemaRegistry) -> None:
    """Test the listing expands the article selector into both forms."""
    listing = registry.rules()

    assert registry.types() == ["article", "book", "inproceedings", "misc", "techreport", "www"]
    assert listing["article"] == [ARTICLE_RULE, ARXIV_ARTICLE_RULE]
    assert listing["misc"] == [WWW_RULE]


@pytest.mark.unit
def test_registry_register_custom_rule() -> None:
    """Test new types can be registered without touching control flow."""
    registry = SchemaRegistry()
    thesis = SchemaRule(name="phdthesis", output_type="phdthesis", required=("author", "school"))
    registry.register("PhDThesis", thesis)

    assert _lookup(registry, "phdthesis") is thesis
    assert len(registry) == 1

    with pytest.raises(ValueError):
        registry.register("  ", thesis)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("2278--2324 (1998)", True),
        ("1-20 (x)  ", True),
        ("1-20", False),
        ("(1998) 1-20", False),
        (None, False),
    ],
)
def test_parenthesized_suffix_constraint(value: str | None, expected: bool) -> None:
    """Test the loose 'ends with a parenthesized segment' heuristic."""
    assert INPROCEEDINGS_RULE.constraint is not None
    assert INPROCEEDINGS_RULE.constraint.check(value) is expected


@pytest.mark.unit
@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("arXiv preprint arXiv:1706.03762", True),
        ("arXiv preprint arXiv:2101.00001v2", True),
        ("arXiv preprint arXiv:1706.0376", False),
        ("ArXiv preprint arXiv:1706.03762", False),
        ("arXiv:1706.03762", False),
    ],
)
def test_arxiv_journal_constraint(value: str, expected: bool) -> None:
    """Test the arXiv journal must use the literal preprint prefix."""
    assert ARXIV_ARTICLE_RULE.constraint is not None
    assert ARXIV_ARTICLE_RULE.constraint.check(value) is expected


@pytest.mark.unit
def test_rule_rejects_inconsistent_definitions() -> None:
    """Test rules validate their own shape."""
    constraint = FormatConstraint(field="pages", pattern=re.compile(r"\d"))

    with pytest.raises(ValueError, match="at least one"):
        SchemaRule(name="empty", output_type="x", required=())
    with pytest.raises(ValueError, match="twice"):
        SchemaRule(name="dup", output_type="x", required=("a", "a"))
    with pytest.raises(ValueError, match="not a required field"):
        SchemaRule(name="bad", output_type="x", required=("title",), constraint=constraint)


@pytest.mark.unit
def test_rule_to_dict() -> None:
    """Test rules serialize with their constraint pattern."""
    data = ARTICLE_RULE.to_dict()

    assert data["output_type"] == "article"
    assert data["constraint"]["field"] == "pages"
    assert WWW_RULE.to_dict()["demote_reason"] == "misc rewritten to www"
