"""
Citation-flag template catalog.

Declarative table of template families and the category each belongs to.
Every family is matched by one case-insensitive rule covering both the bare
form ``{{name}}`` and the parameterized form ``{{name|...}}``, so a literal
occurrence is counted exactly once.

Families start right after ``{{`` and end at ``|`` or ``}}``, so no two
families can claim the same span ("cn" never matches inside
"citation needed", "who?" never matches inside "by whom?").

The parameter block is any run of characters other than ``}``.
"""
import re

from facttag_core.models import TagCategory, TagPattern

C = TagCategory

# Ordered: detailed breakdowns and example lists follow this order.
TAG_FAMILIES: tuple[tuple[str, TagCategory], ...] = (
    # Core citation needed tags
    ("fact", C.CITATION_NEEDED),
    ("citation needed", C.CITATION_NEEDED),
    ("cn", C.CITATION_NEEDED),

    # Source quality
    ("better source needed", C.SOURCE_QUALITY),
    ("unreliable source?", C.SOURCE_QUALITY),
    ("verify source", C.SOURCE_QUALITY),
    ("primary source needed", C.SOURCE_QUALITY),
    ("third-party needed", C.SOURCE_QUALITY),
    ("sources needed", C.SOURCE_QUALITY),

    ("dubious", C.VERIFICATION),

    # Bracketed wh-questions
    ("according to whom?", C.CLARIFICATION),
    ("by whom?", C.CLARIFICATION),
    ("when?", C.CLARIFICATION),
    ("where?", C.CLARIFICATION),
    ("which?", C.CLARIFICATION),
    ("who?", C.CLARIFICATION),
    ("how?", C.CLARIFICATION),
    ("why?", C.CLARIFICATION),

    # Verification outcomes
    ("failed verification", C.VERIFICATION),
    ("page needed", C.VERIFICATION),
    ("full citation needed", C.VERIFICATION),
)


def compile_family(name: str) -> re.Pattern:
    """Build the matcher for ``{{name}}`` / ``{{name|params}}``."""
    return re.compile(r"\{\{" + re.escape(name) + r"(?:\|[^}]*)?\}\}", re.IGNORECASE)


def build_catalog(
    families: tuple[tuple[str, TagCategory], ...] = TAG_FAMILIES
) -> tuple[TagPattern, ...]:
    seen: set[str] = set()
    patterns = []
    for name, category in families:
        key = name.lower()
        if key in seen:
            raise ValueError(f"Duplicate template family: {name}")
        seen.add(key)
        patterns.append(TagPattern(name=name, category=category, regex=compile_family(name)))
    return tuple(patterns)


# Process-wide, built once at import
DEFAULT_CATALOG: tuple[TagPattern, ...] = build_catalog()
