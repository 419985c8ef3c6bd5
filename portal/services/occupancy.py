"""
Emergency bed occupancy derived from admissions.

A bed or slot is occupied when at least one admission references it with
``status == "Active"`` and an ``emergencyStatus`` that still holds the
bed.  Occupancy is recomputed from the full admissions list on every call;
the upstream bed ``Status`` field is never consulted.

Admissions may reference a bed directly (``emergencyBedId``) or through a
slot (``emergencyBedSlotId``, older records); both are honoured.

IPD room beds follow the same rule with room admissions: a room bed is
taken while an ``Active`` room admission points at it by ``roomBedId`` or,
for admissions without one, by bed number.
"""
from __future__ import annotations

from typing import Iterable, Optional

TERMINAL_STATUSES = frozenset({'Discharged', 'Movedout'})
TRANSFER_STATUSES = frozenset({'IPD', 'OT', 'ICU'})


def holds_bed(admission: dict, *, transfers_release: bool = False) -> bool:
    """Whether ``admission`` still keeps its bed.

    With ``transfers_release`` an admission moved to IPD, OT or ICU no
    longer counts, matching the emergency overview screen.
    """
    if admission.get('status') != 'Active':
        return False
    emergency_status = admission.get('emergencyStatus')
    if emergency_status in TERMINAL_STATUSES:
        return False
    if transfers_release and emergency_status in TRANSFER_STATUSES:
        return False
    return True


def _slot_admission(slot_id, admissions: Iterable[dict], transfers_release: bool = False) -> Optional[dict]:
    if slot_id is None:
        return None
    for admission in admissions:
        if admission.get('emergencyBedSlotId') == slot_id and holds_bed(admission, transfers_release=transfers_release):
            return admission
    return None


def is_slot_occupied(slot_id, admissions: Iterable[dict], *, transfers_release: bool = False) -> bool:
    return _slot_admission(slot_id, admissions, transfers_release) is not None


def occupant(admission: Optional[dict]) -> Optional[dict]:
    if admission is None:
        return None
    return {
        'patientName': admission.get('patientName') or 'Unknown',
        'patientNo': admission.get('patientNo') or '',
        'emergencyStatus': admission.get('emergencyStatus'),
    }


def slot_occupant(slot_id, admissions: Iterable[dict], *, transfers_release: bool = False) -> Optional[dict]:
    return occupant(_slot_admission(slot_id, admissions, transfers_release))


def bed_admission(bed: dict, admissions: Iterable[dict], slots: Iterable[dict] = (), *,
                  transfers_release: bool = False) -> Optional[dict]:
    """The admission holding ``bed``, directly or via one of its slots."""
    bed_id = bed.get('id')
    slot_ids = {s.get('id') for s in slots if s.get('emergencyBedId') == bed_id}
    for admission in admissions:
        if not holds_bed(admission, transfers_release=transfers_release):
            continue
        if bed_id is not None and admission.get('emergencyBedId') == bed_id:
            return admission
        if admission.get('emergencyBedSlotId') in slot_ids:
            return admission
    return None


def is_bed_occupied(bed: dict, admissions: Iterable[dict], slots: Iterable[dict] = (), *,
                    transfers_release: bool = False) -> bool:
    return bed_admission(bed, admissions, slots, transfers_release=transfers_release) is not None


def partition_slots(slots: Iterable[dict], admissions: list[dict], *,
                    transfers_release: bool = False) -> tuple[list[dict], list[dict]]:
    """Split Active slots into ``(occupied, unoccupied)``, each annotated."""
    occupied: list[dict] = []
    unoccupied: list[dict] = []
    for slot in slots:
        if slot.get('status') != 'Active':
            continue
        holder = slot_occupant(slot.get('id'), admissions, transfers_release=transfers_release)
        annotated = {**slot, 'occupied': holder is not None, 'occupant': holder}
        (occupied if holder else unoccupied).append(annotated)
    return occupied, unoccupied


def partition_beds(beds: Iterable[dict], admissions: list[dict], slots: Iterable[dict] = (), *,
                   transfers_release: bool = False) -> tuple[list[dict], list[dict]]:
    """Split non-inactive beds into ``(occupied, unoccupied)``, each annotated."""
    slots = list(slots)
    occupied: list[dict] = []
    unoccupied: list[dict] = []
    for bed in beds:
        if str(bed.get('status') or '').lower() == 'inactive':
            continue
        holder = occupant(bed_admission(bed, admissions, slots, transfers_release=transfers_release))
        annotated = {**bed, 'occupied': holder is not None, 'occupant': holder}
        (occupied if holder else unoccupied).append(annotated)
    return occupied, unoccupied


def bed_board(beds: Iterable[dict], admissions: list[dict], slots: Iterable[dict] = (), *,
              transfers_release: bool = False) -> dict:
    occupied, unoccupied = partition_beds(beds, admissions, slots, transfers_release=transfers_release)
    return {
        'occupied': occupied,
        'unoccupied': unoccupied,
        'counts': {
            'occupied': len(occupied),
            'unoccupied': len(unoccupied),
            'total': len(occupied) + len(unoccupied),
        },
    }


def room_bed_admission(bed: dict, admissions: Iterable[dict]) -> Optional[dict]:
    bed_id = bed.get('roomBedId')
    bed_no = bed.get('bedNo')
    for admission in admissions:
        if admission.get('status') != 'Active':
            continue
        if bed_id and admission.get('roomBedId'):
            if admission['roomBedId'] == bed_id:
                return admission
        elif bed_no and admission.get('bedNumber') == bed_no:
            return admission
    return None


def room_bed_board(beds: Iterable[dict], admissions: list[dict]) -> dict:
    occupied: list[dict] = []
    unoccupied: list[dict] = []
    for bed in beds:
        if bed.get('status') == 'Inactive':
            continue
        admission = room_bed_admission(bed, admissions)
        holder = None if admission is None else {
            'patientName': admission.get('patientName') or 'Unknown',
            'patientNo': admission.get('patientNo') or '',
            'admissionId': admission.get('id'),
        }
        (occupied if holder else unoccupied).append({**bed, 'occupied': holder is not None, 'occupant': holder})
    return {
        'occupied': occupied,
        'unoccupied': unoccupied,
        'counts': {
            'occupied': len(occupied),
            'unoccupied': len(unoccupied),
            'total': len(occupied) + len(unoccupied),
        },
    }
