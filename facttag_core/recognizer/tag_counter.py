"""
Fact Tag Counter.

Scans raw wikitext for citation-flag templates ({{citation needed}},
{{fact|date=...}}, {{dubious}}, {{who?}}, ...) and reports exact counts,
per-family breakdowns and a per-category grouping.

Design:
- One compiled rule per template family, taken from the catalog
- Counting is global and case-insensitive; every occurrence counts
- Bare and parameterized forms of a family accumulate additively
- Categorization reuses the same rules, so category totals equal count_tags

Total function: non-text input (None, bytes, numbers) yields a zero result
instead of raising.

Usage:
    counter = FactTagCounter()
    counter.count_tags("Born in 1985{{citation needed}}")   # 1
    detailed = counter.count_tags_detailed(wikitext)
    for entry in detailed.breakdown:
        print(f"{entry.name}: {entry.count}")
"""
from typing import Any

from facttag_core.models import (
    DetailedCount,
    PatternBreakdown,
    TagCategory,
    TagMatch,
    TagPattern,
)
from facttag_core.recognizer.catalog import DEFAULT_CATALOG

EXAMPLES_PER_PATTERN = 2
MAX_EXAMPLES = 15


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


class FactTagCounter:
    """
    Count citation-flag templates in wikitext.

    Stateless apart from the pattern catalog, which is immutable; a single
    instance can be shared across threads.
    """

    def __init__(self, catalog: tuple[TagPattern, ...] = DEFAULT_CATALOG):
        self.patterns = catalog

    def count_tags(self, text: Any) -> int:
        """
        Total number of template occurrences in text.

        Args:
            text: Raw wikitext (anything else counts as 0)

        Returns:
            Sum of matches across all families
        """
        if not _is_text(text):
            return 0

        return sum(len(pattern.regex.findall(text)) for pattern in self.patterns)

    def count_tags_detailed(self, text: Any) -> DetailedCount:
        """
        Count templates with a per-family breakdown.

        Breakdown entries and the global example list follow catalog order,
        not position in the text. Each family contributes at most
        EXAMPLES_PER_PATTERN examples; the global list is capped at MAX_EXAMPLES.

        Args:
            text: Raw wikitext

        Returns:
            DetailedCount with total, breakdown (matching families only) and examples
        """
        if not _is_text(text):
            return DetailedCount(total=0)

        total = 0
        breakdown = []
        all_examples: list[str] = []

        for pattern in self.patterns:
            matches = pattern.findall(text)
            if not matches:
                continue

            total += len(matches)
            examples = tuple(matches[:EXAMPLES_PER_PATTERN])
            breakdown.append(PatternBreakdown(
                name=pattern.name,
                category=pattern.category,
                pattern=pattern.source,
                count=len(matches),
                examples=examples,
            ))
            all_examples.extend(examples)

        return DetailedCount(
            total=total,
            breakdown=tuple(breakdown),
            examples=tuple(all_examples[:MAX_EXAMPLES]),
        )

    def categorize(self, text: Any) -> dict[TagCategory, list[str]]:
        """
        Group matched literals by category.

        All four categories are always present, in enum order.

        Args:
            text: Raw wikitext

        Returns:
            Dict mapping category to the literal matches it collected
        """
        categories: dict[TagCategory, list[str]] = {category: [] for category in TagCategory}

        if not _is_text(text):
            return categories

        for pattern in self.patterns:
            categories[pattern.category].extend(pattern.findall(text))

        return categories

    def find_tags(self, text: Any) -> list[TagMatch]:
        """Every occurrence with its offset, ordered by position in the text."""
        if not _is_text(text):
            return []

        matches = [
            TagMatch(
                category=pattern.category,
                name=pattern.name,
                text=m.group(0),
                position=m.start(),
            )
            for pattern in self.patterns
            for m in pattern.regex.finditer(text)
        ]
        return sorted(matches, key=lambda match: match.position)
