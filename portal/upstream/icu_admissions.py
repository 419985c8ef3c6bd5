"""
ICU patient admissions adapter (``/patient-icu-admissions``).

Besides the admission list this module reads the ICU counters the
backend exposes (critical patients, ventilated patients, free beds) and
the per-bed layout, and folds them into one ICU summary.
"""
from __future__ import annotations

import logging
from typing import Any

from . import icu_beds
from .base import ApiError, InvalidRequest, api_request, ensure_success
from .normalize import (
    F, extract_records, normalize_record, pick, to_backend, to_bool, to_int, to_iso, to_str, unwrap, yes_no,
)

logger = logging.getLogger(__name__)

CRITICAL_KEYS = ('criticalCount', 'CriticalCount', 'criticalPatients', 'count', 'Count', 'totalCritical')
VENTILATOR_KEYS = ('onVentilatorCount', 'OnVentilatorCount', 'onVentilatorPatients', 'ventilatorCount',
                   'count', 'Count')
AVAILABLE_KEYS = ('availableICUBeds', 'AvailableICUBeds', 'availableBeds', 'AvailableBeds',
                  'icuAvailableBeds', 'count', 'Count')
ADMISSION_KEYS = ('patientICUAdmission', 'PatientICUAdmission', 'icuAdmission', 'ICUAdmission',
                  'admission', 'Admission')

ICU_ADMISSION_FIELDS = (
    F('id', 'PatientICUAdmissionId', 'patientICUAdmissionId', 'ICUAdmissionId', 'icuAdmissionId', 'id',
      coerce=to_int, default=0),
    F('patientId', 'PatientId', 'patientId', coerce=to_str, default=''),
    F('patientName', 'PatientName', 'patientName', coerce=to_str, default=''),
    F('patientNo', 'PatientNo', 'patientNo', coerce=to_str, default=''),
    F('icuId', 'ICUId', 'icuId', coerce=to_int, default=0),
    F('icuBedId', 'ICUBedId', 'icuBedId', coerce=to_int, default=0),
    F('icuBedNo', 'ICUBedNo', 'icuBedNo', coerce=to_str, default=''),
    F('icuPatientStatus', 'ICUPatientStatus', 'icuPatientStatus', coerce=to_str, default=''),
    F('icuAllocationFromDate', 'ICUAllocationFromDate', 'icuAllocationFromDate', coerce=to_iso, default=''),
    F('icuAllocationToDate', 'ICUAllocationToDate', 'icuAllocationToDate', coerce=to_iso, default=''),
    F('diagnosis', 'Diagnosis', 'diagnosis', coerce=to_str, default=''),
    F('treatmentDetails', 'TreatementDetails', 'TreatmentDetails', 'treatmentDetails', coerce=to_str, default=''),
    F('patientCondition', 'PatientCondition', 'patientCondition', coerce=to_str, default=''),
    F('onVentilator', 'OnVentilator', 'onVentilator', coerce=to_bool, default=False),
    F('icuAdmissionStatus', 'ICUAdmissionStatus', 'icuAdmissionStatus', coerce=to_str, default='Occupied'),
    F('status', 'Status', 'status', coerce=to_str, default='Active'),
)

TO_BACKEND = {
    'patientId': 'PatientId',
    'icuId': 'ICUId',
    'icuBedId': 'ICUBedId',
    'icuBedNo': 'ICUBedNo',
    'icuPatientStatus': 'ICUPatientStatus',
    'icuAllocationFromDate': 'ICUAllocationFromDate',
    'icuAllocationToDate': 'ICUAllocationToDate',
    'diagnosis': 'Diagnosis',
    'treatmentDetails': 'TreatementDetails',
    'patientCondition': 'PatientCondition',
    'icuAdmissionStatus': 'ICUAdmissionStatus',
    'createdBy': 'CreatedBy',
}


def map_icu_admission(record: dict) -> dict:
    return normalize_record(record, ICU_ADMISSION_FIELDS)


def read_count(payload: Any, keys) -> int:
    """A counter may come back bare (``7``, ``"7"``) or under one of ``keys``."""
    data = unwrap(payload)
    if isinstance(data, dict):
        data = pick(data, ('data', *keys))
    return to_int(data)


def list_icu_admissions() -> list[dict]:
    payload = ensure_success(api_request('/patient-icu-admissions/'), 'Failed to fetch ICU admissions')
    return [map_icu_admission(r) for r in extract_records(payload) or [] if isinstance(r, dict)]


def is_icu_occupied(icu_id: int, from_date: str) -> bool:
    payload = api_request('/patient-icu-admissions/check-occupied',
                          params={'ICUId': icu_id, 'ICUAllocationFromDate': from_date})
    data = unwrap(payload)
    if not isinstance(data, dict):
        return False
    if to_bool(pick(data, ('isOccupied', 'IsOccupied', 'occupied', 'Occupied'))):
        return True
    return to_str(data.get('status')).lower() == 'occupied'


def create_icu_admission(data: dict) -> dict:
    if not to_str(data.get('patientId')):
        raise InvalidRequest('PatientId is required')
    if not data.get('icuId'):
        raise InvalidRequest('ICU ID is required. Please select an ICU.')
    if not to_str(data.get('icuAllocationFromDate')):
        raise InvalidRequest('ICU Allocation From Date is required.')
    try:
        occupied = is_icu_occupied(data['icuId'], to_str(data['icuAllocationFromDate']))
    except ApiError as e:
        # an unreachable availability check does not block the admission
        logger.warning('ICU occupancy check failed for ICU %s: %s', data['icuId'], e)
        occupied = False
    if occupied:
        raise InvalidRequest(f'ICU {data["icuId"]} is already occupied from {data["icuAllocationFromDate"]}')
    body = to_backend(data, TO_BACKEND)
    body['OnVentilator'] = yes_no(data.get('onVentilator'))
    payload = ensure_success(api_request('/patient-icu-admissions', 'POST', json_body=body),
                             'Failed to create ICU admission')
    record = unwrap(payload)
    if not isinstance(record, dict):
        raise ApiError('Failed to create ICU admission', 502, payload)
    admission = map_icu_admission(record)
    logger.info('ICU admission %s created for patient %s', admission['id'], admission['patientId'])
    return admission


def count_critical() -> int:
    return read_count(api_request('/patient-icu-admissions/count/critical'), CRITICAL_KEYS)


def count_on_ventilator() -> int:
    return read_count(api_request('/patient-icu-admissions/count/on-ventilator'), VENTILATOR_KEYS)


def available_beds() -> int:
    return read_count(api_request('/patient-icu-admissions/available-beds'), AVAILABLE_KEYS)


def _bed_admission(bed: dict):
    admission = pick(bed, ADMISSION_KEYS)
    if isinstance(admission, dict):
        return map_icu_admission(admission)
    patient = pick(bed, ('patient', 'Patient', 'patientData', 'PatientData'))
    if isinstance(patient, dict) and pick(patient, ('patientICUAdmissionId', 'PatientICUAdmissionId', 'id')):
        return map_icu_admission(patient)
    return None


def map_bed_layout(record: dict) -> dict:
    admission = _bed_admission(record)
    return {
        'icuBedId': to_int(pick(record, ('ICUBedId', 'icuBedId', 'id'))),
        'icuBedNo': to_str(pick(record, ('ICUBedNo', 'icuBedNo', 'bedNo'))),
        'icuType': to_str(pick(record, ('ICUType', 'icuType'))),
        'icuRoomNameNo': to_str(pick(record, ('ICURoomNameNo', 'icuRoomNameNo'))),
        'occupied': admission is not None,
        'admission': admission,
    }


def bed_layout() -> list[dict]:
    payload = api_request('/patient-icu-admissions/icu-beds-details')
    return [map_bed_layout(r) for r in extract_records(payload) or [] if isinstance(r, dict)]


def bed_details(icu_bed_id: int) -> dict:
    if not icu_bed_id or icu_bed_id <= 0:
        raise InvalidRequest(f'Invalid ICU Bed ID: {icu_bed_id}. Cannot fetch bed details.')
    data = unwrap(api_request(f'/patient-icu-admissions/icu-beds-details/{icu_bed_id}'))
    if not isinstance(data, dict):
        raise ApiError(f'ICU bed {icu_bed_id} not found', 404)
    return map_bed_layout(data)


def icu_summary() -> dict:
    occupancy = icu_beds.get_occupancy()
    return {
        **occupancy,
        'criticalPatients': count_critical(),
        'onVentilator': count_on_ventilator(),
        'freeBedsReported': available_beds(),
    }
