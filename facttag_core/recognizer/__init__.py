"""
Citation-flag template recognition.

Components:
- TAG_FAMILIES / DEFAULT_CATALOG: declarative family table and its compiled rules
- FactTagCounter: counts, breakdowns and category grouping over wikitext
"""
from facttag_core.recognizer.catalog import (
    TAG_FAMILIES,
    DEFAULT_CATALOG,
    build_catalog,
)
from facttag_core.recognizer.tag_counter import FactTagCounter

__all__ = [
    "TAG_FAMILIES",
    "DEFAULT_CATALOG",
    "build_catalog",
    "FactTagCounter",
]
