"""Grouping and totals over search results for display."""

import math
from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping

from student_hours.domain.student_records.constants import CATEGORY_A, CATEGORY_B
from student_hours.domain.student_records.models import SearchResult


def group_by_period(results: Iterable[SearchResult]) -> Dict[str, List[SearchResult]]:
    """
    Group results by ``"YYYY-MM"``, newest period first.

    Results keep their original order inside each period.
    """
    grouped: Dict[str, List[SearchResult]] = {}
    for result in results:
        grouped.setdefault(result.period.key, []).append(result)
    return OrderedDict(
        (key, grouped[key]) for key in sorted(grouped, reverse=True)
    )


def _numeric(value: str) -> float:
    try:
        number = float(str(value).strip().replace(",", "."))
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def sum_category(values: Mapping[str, str]) -> float:
    """Sum the numeric values of a category mapping; text counts as zero."""
    return sum(_numeric(value) for value in values.values())


def summarize_hours(results: Iterable[SearchResult]) -> Dict[str, Dict[str, float]]:
    """
    Total hours per period and category.

    Example:
        >>> summarize_hours(results)  # doctest: +SKIP
        {'2024-03': {'cocurriculares': 5.0, 'liderazgo': 2.0}}
    """
    summary: Dict[str, Dict[str, float]] = OrderedDict()
    for key, period_results in group_by_period(results).items():
        summary[key] = {
            CATEGORY_A: sum(sum_category(r.cocurriculares) for r in period_results),
            CATEGORY_B: sum(sum_category(r.liderazgo) for r in period_results),
        }
    return summary
