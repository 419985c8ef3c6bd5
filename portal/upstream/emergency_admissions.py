"""
Emergency admissions adapter (``/emergency-admissions``) and the vitals
sub-resource recorded against each admission.

The upstream spells the treatment field ``TreatementDetails``; records
here use ``treatmentDetails`` and the typo is restored on the way back.
When the live API fails and stub data is enabled, admissions are served
from (and written to) the in-process fixture list in :mod:`.stubs`.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from . import stubs
from .base import ApiError, InvalidRequest, api_request, with_stub_fallback
from .normalize import (
    F, extract_records, format_upstream_datetime, normalize_record, pick, to_float, to_int, to_iso, to_str,
)

EMERGENCY_STATUSES = ('Admitted', 'IPD', 'OT', 'ICU', 'Discharged', 'Movedout')
PATIENT_CONDITIONS = ('Critical', 'Stable')
PRIORITIES = ('Low', 'Medium', 'High', 'Critical')


def _optional_int(value: Any) -> Optional[int]:
    number = to_int(value, default=-1)
    return None if number < 0 else number


def _date_only(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return to_str(value)


ADMISSION_FIELDS = (
    F('emergencyAdmissionId', 'EmergencyAdmissionId', 'emergencyAdmissionId', coerce=to_int, default=0),
    F('doctorId', 'DoctorId', 'doctorId', coerce=to_int, default=0),
    F('patientId', 'PatientId', 'patientId', coerce=to_str, default=''),
    F('emergencyBedSlotId', 'EmergencyBedSlotId', 'emergencyBedSlotId', coerce=_optional_int),
    F('emergencyBedId', 'EmergencyBedId', 'emergencyBedId', coerce=_optional_int),
    F('emergencyAdmissionDate', 'EmergencyAdmissionDate', 'emergencyAdmissionDate', coerce=_date_only, default=''),
    F('emergencyStatus', 'EmergencyStatus', 'emergencyStatus', coerce=to_str, default='Admitted'),
    F('allocationFromDate', 'AllocationFromDate', 'allocationFromDate', coerce=_date_only),
    F('allocationToDate', 'AllocationToDate', 'allocationToDate', coerce=_date_only),
    F('numberOfDays', 'NumberOfDays', 'numberOfDays', coerce=_optional_int),
    F('diagnosis', 'Diagnosis', 'diagnosis', coerce=to_str),
    F('treatmentDetails', 'TreatementDetails', 'TreatmentDetails', 'treatmentDetails', coerce=to_str),
    F('patientCondition', 'PatientCondition', 'patientCondition', coerce=to_str, default='Stable'),
    F('priority', 'Priority', 'priority', coerce=to_str, default='Medium'),
    F('transferToIPD', 'TransferToIPD', 'transferToIPD', coerce=to_str),
    F('transferToOT', 'TransferToOT', 'transferToOT', coerce=to_str),
    F('transferToICU', 'TransferToICU', 'transferToICU', coerce=to_str),
    F('transferTo', 'TransferTo', 'transferTo', coerce=to_str),
    F('transferDetails', 'TransferDetails', 'transferDetails', coerce=to_str),
    F('admissionCreatedBy', 'AdmissionCreatedBy', 'admissionCreatedBy', coerce=_optional_int),
    F('admissionCreatedAt', 'AdmissionCreatedAt', 'admissionCreatedAt', coerce=to_iso),
    F('status', 'Status', 'status', coerce=to_str, default=''),
    F('patientName', 'PatientName', 'patientName', coerce=to_str),
    F('patientNo', 'PatientNo', 'patientNo', coerce=to_str),
    F('doctorName', 'DoctorName', 'doctorName', coerce=to_str),
    F('emergencyBedSlotNo', 'EmergencyBedSlotNo', 'emergencyBedSlotNo', coerce=to_str),
    F('emergencyBedNo', 'EmergencyBedNo', 'emergencyBedNo', coerce=to_str),
    F('createdByName', 'CreatedByName', 'createdByName', coerce=to_str),
)

# camelCase DTO key -> upstream key
ADMISSION_TO_BACKEND = {
    'doctorId': 'DoctorId',
    'patientId': 'PatientId',
    'emergencyBedId': 'EmergencyBedId',
    'emergencyAdmissionDate': 'EmergencyAdmissionDate',
    'emergencyStatus': 'EmergencyStatus',
    'allocationFromDate': 'AllocationFromDate',
    'allocationToDate': 'AllocationToDate',
    'numberOfDays': 'NumberOfDays',
    'diagnosis': 'Diagnosis',
    'treatmentDetails': 'TreatementDetails',
    'patientCondition': 'PatientCondition',
    'priority': 'Priority',
    'transferToIPD': 'TransferToIPD',
    'transferToOT': 'TransferToOT',
    'transferToICU': 'TransferToICU',
    'transferTo': 'TransferTo',
    'transferDetails': 'TransferDetails',
    'admissionCreatedBy': 'AdmissionCreatedBy',
    'status': 'Status',
}

CREATE_DEFAULTS = {
    'TransferToIPD': 'No',
    'TransferToOT': 'No',
    'TransferToICU': 'No',
    'Status': 'Active',
}


def transfer_requested(record: dict) -> bool:
    """True when any transfer flag is ``Yes`` or a destination is set."""
    flags = (pick(record, (k, k[:1].lower() + k[1:])) for k in ('TransferToIPD', 'TransferToOT', 'TransferToICU'))
    if any(to_str(flag) == 'Yes' for flag in flags):
        return True
    return bool(pick(record, ('TransferTo', 'transferTo')))


def map_admission(record: dict) -> dict:
    admission = normalize_record(record, ADMISSION_FIELDS)
    admission['id'] = admission['emergencyAdmissionId']
    admission['transferToIPDOTICU'] = transfer_requested(record)
    return admission


def to_backend_admission(data: dict, *, creating: bool = False) -> dict:
    """Build the upstream body.

    Creation sends every known key (``null`` when absent) with the
    transfer flags defaulting to ``No``; updates send only the keys the
    caller supplied, so ``None`` there clears a value.
    """
    body: dict = {}
    for src, dst in ADMISSION_TO_BACKEND.items():
        if src in data:
            value = data[src]
            body[dst] = value.strip() if isinstance(value, str) else value
        elif creating:
            body[dst] = None
    if creating:
        for key, default in CREATE_DEFAULTS.items():
            if body.get(key) is None:
                body[key] = default
    return body


def _one(payload: Any, message: str) -> dict:
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict) or payload.get('success') is False:
        raise ApiError(message, 502, payload)
    return map_admission(data)


def list_admissions(*, status: Optional[str] = None, emergency_status: Optional[str] = None,
                    patient_id: Optional[str] = None, doctor_id: Optional[int] = None,
                    emergency_bed_slot_id: Optional[int] = None) -> list[dict]:
    params = {
        'status': status,
        'emergencyStatus': emergency_status,
        'patientId': patient_id,
        'doctorId': doctor_id,
        'emergencyBedSlotId': emergency_bed_slot_id,
    }

    def live() -> list[dict]:
        payload = api_request('/emergency-admissions', params=params)
        if isinstance(payload, dict) and payload.get('success') is False:
            return []
        return [map_admission(r) for r in extract_records(payload) or [] if isinstance(r, dict)]

    def stub() -> list[dict]:
        return [map_admission(r) for r in stubs.emergency_admissions(status, emergency_status)]

    return with_stub_fallback(live, stub, label='emergency admissions')


def get_admission(admission_id: int) -> dict:
    def stub() -> dict:
        row = stubs.find_emergency_admission(admission_id)
        if row is None:
            raise ApiError('Emergency admission not found', 404)
        return map_admission(row)

    return with_stub_fallback(
        lambda: _one(api_request(f'/emergency-admissions/{admission_id}'), 'Emergency admission not found'),
        stub, label=f'emergency admission {admission_id}',
    )


def create_admission(data: dict) -> dict:
    for field in ('doctorId', 'patientId', 'emergencyBedId', 'emergencyAdmissionDate'):
        if data.get(field) in (None, ''):
            raise InvalidRequest(f'{field} is required')
    body = to_backend_admission(data, creating=True)

    def stub() -> dict:
        stub_body = {k: v for k, v in body.items() if v is not None}
        return map_admission(stubs.add_emergency_admission(stub_body))

    return with_stub_fallback(
        lambda: _one(api_request('/emergency-admissions', 'POST', json_body=body),
                     'Failed to create emergency admission'),
        stub, label='emergency admission create',
    )


def update_admission(admission_id: int, data: dict) -> dict:
    body = to_backend_admission(data)

    def stub() -> dict:
        row = stubs.change_emergency_admission(admission_id, body)
        if row is None:
            raise ApiError('Emergency admission not found', 404)
        return map_admission(row)

    return with_stub_fallback(
        lambda: _one(api_request(f'/emergency-admissions/{admission_id}', 'PUT', json_body=body),
                     'Failed to update emergency admission'),
        stub, label=f'emergency admission {admission_id} update',
    )


def delete_admission(admission_id: int) -> None:
    def stub() -> None:
        if not stubs.remove_emergency_admission(admission_id):
            raise ApiError('Emergency admission not found', 404)

    with_stub_fallback(
        lambda: api_request(f'/emergency-admissions/{admission_id}', 'DELETE'),
        stub, label=f'emergency admission {admission_id} delete',
    )


# -----------------------------------------------------------------------------
# Vitals
# -----------------------------------------------------------------------------
VITALS_FIELDS = (
    F('emergencyAdmissionVitalsId', 'EmergencyAdmissionVitalsId', 'emergencyAdmissionVitalsId',
      coerce=to_int, default=0),
    F('emergencyAdmissionId', 'EmergencyAdmissionId', 'emergencyAdmissionId', coerce=to_int, default=0),
    F('nurseId', 'NurseId', 'nurseId', coerce=to_int, default=0),
    F('recordedDateTime', 'RecordedDateTime', 'recordedDateTime', coerce=to_iso, default=''),
    F('heartRate', 'HeartRate', 'heartRate', coerce=to_int),
    F('bloodPressure', 'BloodPressure', 'bloodPressure', coerce=to_str),
    F('temperature', 'Temperature', 'temperature', coerce=to_float),
    F('o2Saturation', 'O2Saturation', 'o2Saturation', coerce=to_float),
    F('respiratoryRate', 'RespiratoryRate', 'respiratoryRate', coerce=to_int),
    F('pulseRate', 'PulseRate', 'pulseRate', coerce=to_int),
    F('vitalsStatus', 'VitalsStatus', 'vitalsStatus', coerce=to_str, default=''),
    F('vitalsRemarks', 'VitalsRemarks', 'vitalsRemarks', coerce=to_str),
    F('vitalsCreatedBy', 'VitalsCreatedBy', 'vitalsCreatedBy', coerce=_optional_int),
    F('vitalsCreatedAt', 'VitalsCreatedAt', 'vitalsCreatedAt', coerce=to_iso),
    F('status', 'Status', 'status', coerce=to_str),
    F('nurseName', 'NurseName', 'nurseName', coerce=to_str),
    F('createdByName', 'CreatedByName', 'createdByName', coerce=to_str),
)

VITALS_TO_BACKEND = {
    'nurseId': 'NurseId',
    'recordedDateTime': 'RecordedDateTime',
    'heartRate': 'HeartRate',
    'bloodPressure': 'BloodPressure',
    'temperature': 'Temperature',
    'o2Saturation': 'O2Saturation',
    'respiratoryRate': 'RespiratoryRate',
    'pulseRate': 'PulseRate',
    'vitalsStatus': 'VitalsStatus',
    'vitalsRemarks': 'VitalsRemarks',
    'vitalsCreatedBy': 'VitalsCreatedBy',
    'status': 'Status',
}


def map_vitals(record: dict) -> dict:
    return normalize_record(record, VITALS_FIELDS)


def to_backend_vitals(data: dict) -> dict:
    body = {dst: data[src] for src, dst in VITALS_TO_BACKEND.items() if src in data and data[src] is not None}
    if 'RecordedDateTime' in body:
        body['RecordedDateTime'] = format_upstream_datetime(body['RecordedDateTime'])
    return body


def _one_vitals(payload: Any, message: str) -> dict:
    data = payload.get('data') if isinstance(payload, dict) else None
    if not isinstance(data, dict):
        raise ApiError(message, 502, payload)
    return map_vitals(data)


def list_vitals(admission_id: int) -> list[dict]:
    def live() -> list[dict]:
        payload = api_request(f'/emergency-admission-vitals/by-emergency-admission/{admission_id}')
        return [map_vitals(r) for r in extract_records(payload) or [] if isinstance(r, dict)]

    return with_stub_fallback(live, list, label=f'vitals for emergency admission {admission_id}')


def get_vitals(admission_id: int, vitals_id: int) -> dict:
    return _one_vitals(api_request(f'/emergency-admissions/{admission_id}/vitals/{vitals_id}'),
                       'Emergency admission vitals not found')


def create_vitals(admission_id: int, data: dict) -> dict:
    for field in ('nurseId', 'recordedDateTime', 'vitalsStatus'):
        if data.get(field) in (None, ''):
            raise InvalidRequest(f'{field} is required')
    body = {'EmergencyAdmissionId': admission_id, **to_backend_vitals(data)}
    return _one_vitals(api_request('/emergency-admission-vitals', 'POST', json_body=body),
                       'Failed to create emergency admission vitals')


def update_vitals(admission_id: int, vitals_id: int, data: dict) -> dict:
    body = to_backend_vitals({k: v for k, v in data.items() if k != 'vitalsCreatedBy'})
    return _one_vitals(api_request(f'/emergency-admissions/{admission_id}/vitals/{vitals_id}', 'PUT', json_body=body),
                       'Failed to update emergency admission vitals')


def delete_vitals(admission_id: int, vitals_id: int) -> None:
    api_request(f'/emergency-admissions/{admission_id}/vitals/{vitals_id}', 'DELETE')
