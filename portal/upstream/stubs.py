"""
Fallback fixtures served when the upstream API is unreachable and
``HMS_ENABLE_STUB_DATA`` is on.

Every accessor returns a fresh copy so callers may mutate the result.
Emergency admissions are kept in upstream (PascalCase) shape in a
process-local list; create, update and delete operate on that list.
"""
from __future__ import annotations

import copy
import threading
from typing import Optional

DASHBOARD_STATS = {
    'opdPatientsToday': 0,
    'activeTokens': 0,
    'ipdAdmissions': 0,
    'otScheduled': 0,
    'icuOccupied': '0/0',
    'totalPatients': 0,
}

OPD_FLOW = [
    {'day': 'Mon', 'patients': 98},
    {'day': 'Tue', 'patients': 112},
    {'day': 'Wed', 'patients': 95},
    {'day': 'Thu', 'patients': 124},
    {'day': 'Fri', 'patients': 108},
    {'day': 'Sat', 'patients': 87},
    {'day': 'Sun', 'patients': 45},
]

ROOM_DISTRIBUTION = [
    {'name': 'Regular Ward', 'value': 45, 'color': '#3b82f6'},
    {'name': 'Special Room', 'value': 28, 'color': '#8b5cf6'},
    {'name': 'Shared Room', 'value': 16, 'color': '#06b6d4'},
]

DOCTOR_QUEUE = [
    {'doctor': 'Dr. Sarah Johnson', 'specialty': 'Cardiology', 'type': 'inhouse', 'waiting': 8, 'consulting': 1, 'completed': 15},
    {'doctor': 'Dr. Michael Chen', 'specialty': 'Orthopedics', 'type': 'inhouse', 'waiting': 12, 'consulting': 1, 'completed': 11},
    {'doctor': 'Dr. James Miller', 'specialty': 'Neurology', 'type': 'consulting', 'waiting': 6, 'consulting': 1, 'completed': 9},
    {'doctor': 'Dr. Emily Davis', 'specialty': 'General Medicine', 'type': 'inhouse', 'waiting': 15, 'consulting': 1, 'completed': 18},
    {'doctor': 'Dr. Robert Lee', 'specialty': 'Pediatrics', 'type': 'consulting', 'waiting': 6, 'consulting': 1, 'completed': 12},
]

ROOM_CAPACITY = [
    {'roomType': 'Regular Ward', 'total': 50, 'occupied': 35, 'available': 15},
    {'roomType': 'Special Shared Room', 'total': 20, 'occupied': 14, 'available': 6},
    {'roomType': 'Special Room', 'total': 15, 'occupied': 8, 'available': 7},
]

ROLES = [
    {'RoleId': 'stub-1', 'RoleName': 'Superadmin', 'RoleDescription': 'Full administrative access to all hospital systems and data'},
    {'RoleId': 'stub-2', 'RoleName': 'Frontdeskadmin', 'RoleDescription': 'Front desk operations, patient registration and token generation'},
    {'RoleId': 'stub-3', 'RoleName': 'Doctorinhouse', 'RoleDescription': 'Inhouse doctor with access to consultations and medical records'},
    {'RoleId': 'stub-4', 'RoleName': 'Labadmin', 'RoleDescription': 'Laboratory operations, test orders and results'},
    {'RoleId': 'stub-5', 'RoleName': 'Nurse', 'RoleDescription': 'Nursing staff with access to patient care and monitoring'},
]

ICU_BEDS = [
    {
        'ICUBedId': 50, 'ICUId': 50, 'ICUBedNo': 'B50', 'ICUType': 'Surgical', 'ICURoomNameNo': 'R205',
        'ICUDescription': 'DummyData', 'IsVentilatorAttached': 'No', 'Status': 'Inactive',
        'CreatedAt': '2025-01-01T10:00:00Z', 'CreatedDate': '2025-01-01',
    },
]

_EMERGENCY_ADMISSIONS_SEED = [
    {
        'EmergencyAdmissionId': 1,
        'DoctorId': 1,
        'PatientId': '00000000-0000-0000-0000-000000000001',
        'EmergencyBedSlotId': 1,
        'EmergencyAdmissionDate': '2025-01-15',
        'EmergencyStatus': 'Admitted',
        'Diagnosis': 'Acute Appendicitis',
        'TreatementDetails': 'Emergency surgery required',
        'PatientCondition': 'Critical',
        'Priority': 'Critical',
        'Status': 'Active',
    },
    {
        'EmergencyAdmissionId': 2,
        'DoctorId': 2,
        'PatientId': '00000000-0000-0000-0000-000000000002',
        'EmergencyBedSlotId': 2,
        'EmergencyAdmissionDate': '2025-01-16',
        'EmergencyStatus': 'IPD',
        'Diagnosis': 'Fractured Leg',
        'TreatementDetails': 'Surgery completed, recovery in progress',
        'PatientCondition': 'Stable',
        'Priority': 'High',
        'TransferTo': 'IPD Room Admission',
        'TransferDetails': 'Transferred to Room 101, Bed 1',
        'Status': 'Active',
    },
]

_lock = threading.Lock()
_emergency_admissions: list[dict] = copy.deepcopy(_EMERGENCY_ADMISSIONS_SEED)


def dashboard_stats() -> dict:
    return dict(DASHBOARD_STATS)


def opd_flow() -> list[dict]:
    return copy.deepcopy(OPD_FLOW)


def room_distribution() -> list[dict]:
    return copy.deepcopy(ROOM_DISTRIBUTION)


def doctor_queue() -> list[dict]:
    return copy.deepcopy(DOCTOR_QUEUE)


def room_capacity() -> list[dict]:
    return copy.deepcopy(ROOM_CAPACITY)


def roles() -> list[dict]:
    return copy.deepcopy(ROLES)


def icu_beds() -> list[dict]:
    return copy.deepcopy(ICU_BEDS)


def emergency_admissions(status: Optional[str] = None, emergency_status: Optional[str] = None) -> list[dict]:
    with _lock:
        rows = copy.deepcopy(_emergency_admissions)
    if status:
        rows = [r for r in rows if (r.get('Status') or '').lower() == status.lower()]
    if emergency_status:
        rows = [r for r in rows if (r.get('EmergencyStatus') or '').lower() == emergency_status.lower()]
    return rows


def find_emergency_admission(admission_id: int) -> Optional[dict]:
    with _lock:
        for row in _emergency_admissions:
            if row.get('EmergencyAdmissionId') == admission_id:
                return copy.deepcopy(row)
    return None


def add_emergency_admission(body: dict) -> dict:
    with _lock:
        next_id = max((r.get('EmergencyAdmissionId') or 0 for r in _emergency_admissions), default=0) + 1
        row = {**body, 'EmergencyAdmissionId': next_id}
        row.setdefault('Status', 'Active')
        _emergency_admissions.append(row)
        return copy.deepcopy(row)


def change_emergency_admission(admission_id: int, body: dict) -> Optional[dict]:
    with _lock:
        for row in _emergency_admissions:
            if row.get('EmergencyAdmissionId') == admission_id:
                row.update(body)
                return copy.deepcopy(row)
    return None


def remove_emergency_admission(admission_id: int) -> bool:
    with _lock:
        before = len(_emergency_admissions)
        _emergency_admissions[:] = [r for r in _emergency_admissions if r.get('EmergencyAdmissionId') != admission_id]
        return len(_emergency_admissions) != before


def reset() -> None:
    """Restore the seed admissions (used by tests)."""
    with _lock:
        _emergency_admissions[:] = copy.deepcopy(_EMERGENCY_ADMISSIONS_SEED)
