"""
Tests for the plain-text report and its formatting helpers.
"""
from datetime import datetime, timezone

import pytest

from facttag_core.estimation import SamplingEstimator
from facttag_core.reports import render_report
from facttag_core.reports.text import format_mode, format_number, format_relative_margin

GENERATED_AT = datetime(2025, 7, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def report(golden_result) -> str:
    return render_report(golden_result, corpus_label="Category:Test", generated_at=GENERATED_AT)


def test_header_and_timestamp(report):
    assert "=== WIKIPEDIA FACT TAGS ESTIMATION REPORT ===" in report
    assert "Generated: 2025-07-01T12:00:00+00:00" in report


def test_methodology(report):
    assert "• Random sampling from Category:Test" in report
    assert "• Sample size: 3 articles" in report
    assert "• Population: 100 articles with fact tags" in report


def test_sample_statistics(report):
    assert "• Mean tags per article: 2.000" in report
    assert "• Standard deviation: 1.000" in report
    assert "• Standard error: 0.577" in report
    assert "• Median: 2" in report
    assert "• Mode: No mode" in report
    assert "• Range: 1 - 3 tags per article" in report
    assert "• Articles with zero tags: 0" in report
    assert "• Articles with multiple tags: 2" in report


def test_distribution(report):
    assert "• 25th percentile: 1.5 tags" in report
    assert "• 50th percentile: 2.0 tags" in report
    assert "• 75th percentile: 2.5 tags" in report
    assert "• 90th percentile: 2.8 tags" in report
    assert "• 95th percentile: 2.9 tags" in report
    assert "• 99th percentile: 3.0 tags" in report


def test_estimation_results(report):
    assert "• Estimated total fact tags: 200" in report
    assert "• 95% Confidence interval: 39 - 361" in report
    assert "• Margin of error: ±161 tags" in report
    assert "• Relative margin of error: ±80.3%" in report
    assert "• Critical value (t, df=2): 2.780" in report
    assert "between 39 and 361" in report


def test_template_names_rendered_literally(report):
    assert "{{citation needed}}" in report
    assert "{{fact}}" in report


def test_large_numbers_use_separators():
    result = SamplingEstimator().estimate([1, 3, 2], population_size=553000)
    report = render_report(result, generated_at=GENERATED_AT)

    assert "• Population: 553,000 articles with fact tags" in report
    assert "• Estimated total fact tags: 1,106,000" in report


def test_zero_estimate_report():
    result = SamplingEstimator().estimate([0, 0, 0], population_size=100)
    report = render_report(result, generated_at=GENERATED_AT)

    assert "• Estimated total fact tags: 0" in report
    assert "• Relative margin of error: n/a" in report


@pytest.mark.parametrize("mode,expected", [
    (None, "No mode"),
    ((1,), "1"),
    ((0, 2), "0, 2"),
])
def test_format_mode(mode, expected):
    assert format_mode(mode) == expected


@pytest.mark.parametrize("value,expected", [
    (0.4, "0"),
    (39.4966, "39"),
    (360.5034, "361"),
    (1234567.0, "1,234,567"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_relative_margin(golden_result):
    assert format_relative_margin(golden_result) == "±80.3%"
