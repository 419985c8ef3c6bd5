"""Emergency triage ordering and priority counts."""
from __future__ import annotations

from typing import Iterable

from .occupancy import TERMINAL_STATUSES, TRANSFER_STATUSES

PRIORITY_ORDER = {'Critical': 0, 'High': 1, 'Medium': 2, 'Low': 3}
CONDITION_ORDER = {'Critical': 0, 'Stable': 1}
UNKNOWN_PRIORITY_RANK = 2
UNKNOWN_CONDITION_RANK = 2


def priority_rank(admission: dict) -> int:
    return PRIORITY_ORDER.get(admission.get('priority') or 'Medium', UNKNOWN_PRIORITY_RANK)


def condition_rank(admission: dict) -> int:
    return CONDITION_ORDER.get(admission.get('patientCondition'), UNKNOWN_CONDITION_RANK)


def sort_by_condition(admissions: Iterable[dict]) -> list[dict]:
    """Critical first, then Stable, then anything else; newest admission first within a group."""
    # two stable passes: date descending, then condition ascending
    by_date = sorted(admissions, key=lambda a: a.get('emergencyAdmissionDate') or '', reverse=True)
    return sorted(by_date, key=condition_rank)


def priority_queue(admissions: Iterable[dict]) -> list[dict]:
    waiting = [a for a in admissions if a.get('status') == 'Active' and a.get('emergencyStatus') == 'Admitted']
    return sorted(sort_by_condition(waiting), key=priority_rank)


def in_emergency(admission: dict) -> bool:
    if admission.get('status') != 'Active':
        return False
    return admission.get('emergencyStatus') not in TERMINAL_STATUSES | TRANSFER_STATUSES


def priority_counts(admissions: Iterable[dict]) -> dict:
    counts = {name: 0 for name in PRIORITY_ORDER}
    total = 0
    for admission in admissions:
        if not in_emergency(admission):
            continue
        total += 1
        priority = admission.get('priority') or 'Medium'
        if priority in counts:
            counts[priority] += 1
    counts['total'] = total
    return counts
