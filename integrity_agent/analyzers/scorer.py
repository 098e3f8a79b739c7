"""Aggregate issue counts for sweep reports and logs."""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List

from ..utils.issues import Issue, Severity


def summarize(issues: Iterable[Issue]) -> Dict[str, int]:
    """Count issues by severity, by category and by category:severity."""
    counts = defaultdict(int)
    for issue in issues:
        counts[issue.severity.value] += 1
        counts[issue.category.value] += 1
        counts[f"{issue.category.value}:{issue.severity.value}"] += 1
        if issue.auto_fixable:
            counts["auto_fixable"] += 1
    return dict(counts)


def severity_counts(summary: Dict[str, int]) -> Dict[str, int]:
    return {severity.value: summary.get(severity.value, 0) for severity in Severity}


def by_urgency(issues: Iterable[Issue]) -> List[Issue]:
    """Issues ordered errors first; detection order is kept within a severity."""
    return sorted(issues, key=lambda issue: issue.severity.rank)
