"""Schema registry: per-type required fields and format constraints."""

from bibaudit.schema.registry import (
    ARTICLE_RULE,
    ARXIV_ARTICLE_RULE,
    BOOK_RULE,
    INPROCEEDINGS_RULE,
    MISC_REWRITE_REASON,
    TECHREPORT_RULE,
    WWW_RULE,
    RuleSelector,
    SchemaRegistry,
    default_registry,
    select_article_rule,
)
from bibaudit.schema.rules import FormatConstraint, SchemaRule, SubstringSwitch

__all__ = [
    "FormatConstraint",
    "SchemaRule",
    "SubstringSwitch",
    "SchemaRegistry",
    "RuleSelector",
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
