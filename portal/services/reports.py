"""Tallies behind the reports screen."""
from __future__ import annotations

from collections import Counter
from typing import Iterable

from ..upstream import icu_admissions, lab_tests, ot_allocations, room_admissions
from ..upstream.ot_allocations import OPERATION_STATUSES


def operation_status_counts(allocations: Iterable[dict]) -> dict:
    counts = Counter(a.get('operationStatus') for a in allocations if a.get('status') == 'Active')
    return {s: counts.get(s, 0) for s in OPERATION_STATUSES}


def tests_per_category(tests: Iterable[dict]) -> dict:
    counts = Counter(t.get('testCategory') or 'Uncategorised' for t in tests if t.get('status') != 'inactive')
    return dict(sorted(counts.items()))


def build_report() -> dict:
    return {
        'ipd': room_admissions.get_dashboard_metrics(),
        'roomCapacity': room_admissions.get_capacity_overview(),
        'icu': icu_admissions.icu_summary(),
        'operations': operation_status_counts(ot_allocations.list_allocations()),
        'labTests': tests_per_category(lab_tests.list_lab_tests()),
    }
