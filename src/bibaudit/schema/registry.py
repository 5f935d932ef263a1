"""Schema registry mapping record type tags to rules.

The registry is the single source of truth for validation and
normalization rules. Lookups are pure and fail closed: an unknown type
tag yields no rule, and callers report it as an undefined type.
"""

from collections.abc import Callable

from bibaudit.models import RawRecord
from bibaudit.schema.rules import (
    ARXIV_JOURNAL_RE,
    PARENTHESIZED_SUFFIX_RE,
    FormatConstraint,
    SchemaRule,
    SubstringSwitch,
)

__all__ = [
    "RuleSelector",
    "SchemaRegistry",
    "default_registry",
    "select_article_rule",
    "MISC_REWRITE_REASON",
    "ARTICLE_RULE",
    "ARXIV_ARTICLE_RULE",
    "WWW_RULE",
    "INPROCEEDINGS_RULE",
    "BOOK_RULE",
    "TECHREPORT_RULE",
]

RuleSelector = Callable[[RawRecord], SchemaRule]

MISC_REWRITE_REASON = "misc rewritten to www"

ARXIV_ARTICLE_RULE = SchemaRule(
    name="article_arxiv",
    output_type="article",
    required=("title", "author", "year", "journal"),
    constraint=FormatConstraint(
        field="journal",
        pattern=ARXIV_JOURNAL_RE,
        description="arXiv preprint arXiv:NNNN.NNNNN",
    ),
)

ARTICLE_RULE = SchemaRule(
    name="article",
    output_type="article",
    required=("title", "author", "journal", "volume", "number", "pages", "year"),
    constraint=FormatConstraint(
        field="pages",
        pattern=PARENTHESIZED_SUFFIX_RE,
        description="ends with a parenthesized segment",
    ),
)

WWW_RULE = SchemaRule(
    name="www",
    output_type="www",
    required=("author", "year", "title", "url"),
    demote_reason=MISC_REWRITE_REASON,
)

INPROCEEDINGS_RULE = SchemaRule(
    name="inproceedings",
    output_type="inproceedings",
    required=("title", "author", "booktitle", "year", "pages"),
    constraint=FormatConstraint(
        field="pages",
        pattern=PARENTHESIZED_SUFFIX_RE,
        description="ends with a parenthesized segment",
    ),
)

BOOK_RULE = SchemaRule(
    name="book",
    output_type="book",
    required=("author", "title", "publisher", "year", "address", "edition"),
)

TECHREPORT_RULE = SchemaRule(
    name="techreport",
    output_type="techreport",
    required=("author", "title", "institution", "year", "address"),
)

# Short arXiv form when the journal mentions arXiv in any letter case
select_article_rule = SubstringSwitch(
    field="journal",
    needle="arxiv",
    matched=ARXIV_ARTICLE_RULE,
    otherwise=ARTICLE_RULE,
)


class SchemaRegistry:
    """Mapping from lower-cased type tag to a rule or rule selector.

    A registered value is either a fixed ``SchemaRule`` or a callable that
    picks a rule from the record's own fields.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SchemaRule | RuleSelector] = {}

    def register(self, type_tag: str, rule: SchemaRule | RuleSelector) -> None:
        """Register a rule or selector for a type tag.

        Parameters
        ----------
        type_tag : str
            Record type tag (case-insensitive).
        rule : SchemaRule | RuleSelector
            Fixed rule, or callable choosing a rule per record.

        Raises
        ------
        ValueError
            If the type tag is blank.
        """
        tag = type_tag.strip().lower()
        if not tag:
            raise ValueError("Type tag must not be empty")
        self._entries[tag] = rule

    def lookup(self, type_tag: str, record: RawRecord) -> SchemaRule | None:
        """Resolve the rule for a type tag.

        Parameters
        ----------
        type_tag : str
            Record type tag (case-insensitive).
        record : RawRecord
            Record passed to rule selectors.

        Returns
        -------
        SchemaRule | None
            Applicable rule, or None for an unknown type.
        """
        entry = self._entries.get(type_tag.strip().lower())
        if entry is None:
            return None
        if isinstance(entry, SchemaRule):
            return entry
        return entry(record)

    def types(self) -> list[str]:
        """Return registered type tags in sorted order."""
        return sorted(self._entries)

    def rules(self) -> dict[str, list[SchemaRule]]:
        """Return every rule reachable from each type tag.

        Selectors exposing ``candidates`` are expanded; fixed rules map
        to a single-item list.
        """
        listing: dict[str, list[SchemaRule]] = {}
        for tag in self.types():
            entry = self._entries[tag]
            if isinstance(entry, SchemaRule):
                listing[tag] = [entry]
            else:
                listing[tag] = list(getattr(entry, "candidates", ()))
        return listing

    def __contains__(self, type_tag: object) -> bool:
        return isinstance(type_tag, str) and type_tag.strip().lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def default_registry() -> SchemaRegistry:
    """Build the registry with the standard rule set.

    Returns
    -------
    SchemaRegistry
        Registry covering article, misc, www, inproceedings, book and
        techreport.
    """
    registry = SchemaRegistry()
    registry.register("article", select_article_rule)
    registry.register("misc", WWW_RULE)
    registry.register("www", WWW_RULE)
    registry.register("inproceedings", INPROCEEDINGS_RULE)
    registry.register("book", BOOK_RULE)
    registry.register("techreport", TECHREPORT_RULE)
    return registry
