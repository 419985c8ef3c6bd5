import pytest

from portal.upstream.normalize import (
    F, extract_records, format_upstream_datetime, normalize_records, pick, to_backend, to_bool, to_choice, to_int,
    yes_no,
)
from portal.upstream.patients import map_patient

ROWS = [
    {'PatientId': 'p-1', 'PatientName': 'Asha', 'PhoneNo': '9000000001', 'Age': '34'},
    {'patientId': 'p-2', 'patientName': 'Ravi', 'phoneNo': '9000000002', 'age': 41},
]

FIELDS = (
    F('patientId', 'PatientId', 'patientId'),
    F('patientName', 'PatientName', 'patientName', coerce=str, default=''),
    F('age', 'Age', 'age', coerce=to_int, default=0),
)


@pytest.mark.parametrize('payload', [
    ROWS,
    {'data': ROWS},
    {'success': True, 'patients': ROWS},
    {'message': 'ok', 'items': ROWS, 'count': 2},
])
def test_records_do_not_depend_on_the_envelope(payload):
    assert normalize_records(payload, FIELDS) == [
        {'patientId': 'p-1', 'patientName': 'Asha', 'age': 34},
        {'patientId': 'p-2', 'patientName': 'Ravi', 'age': 41},
    ]


def test_extract_records_tells_unknown_shapes_from_empty():
    assert extract_records({'data': []}) == []
    assert extract_records({'success': True, 'message': 'nothing'}) is None
    assert extract_records('garbage') is None
    # status/error lists are never mistaken for records
    assert extract_records({'errors': ['bad'], 'status': []}) is None


def test_extract_records_prefers_listed_keys():
    payload = {'other': [1], 'weeklyData': [2]}
    assert extract_records(payload, ('weeklyData',)) == [2]


def test_pick_skips_blank_values():
    record = {'PatientName': '', 'patientName': None, 'name': 'Asha'}
    assert pick(record, ('PatientName', 'patientName', 'name')) == 'Asha'
    assert pick(record, ('missing',), 'fallback') == 'fallback'
    assert pick(None, ('x',)) is None


def test_mixed_case_patient_records_map_alike():
    upper = map_patient({'PatientId': 'p-9', 'PatientName': 'Meera', 'Gender': 'F', 'Age': 30})
    lower = map_patient({'patientId': 'p-9', 'patientName': 'Meera', 'gender': 'F', 'age': '30'})
    assert upper == lower
    assert upper['id'] == 'p-9'
    assert upper['status'] == 'Active'


def test_patient_without_id_gets_a_temporary_one():
    assert map_patient({'PatientName': 'X'}, 3)['patientId'] == 'PAT-TEMP-3'


@pytest.mark.parametrize('value,expected', [
    ('Yes', True), ('no', False), ('TRUE', True), (0, False), (1, True), (True, True), ('maybe', False),
])
def test_to_bool(value, expected):
    assert to_bool(value) is expected


def test_coercions_tolerate_junk():
    assert to_int('12.0') == 12
    assert to_int('n/a', 7) == 7
    assert to_int('1e999', 5) == 5
    assert to_int(float('inf')) == 0
    assert to_int(float('nan'), 3) == 3
    assert to_choice('inactive', ('Active', 'InActive'), 'Active') == 'InActive'
    assert to_choice('???', ('Active', 'InActive'), 'Active') == 'Active'
    assert yes_no('true') == 'Yes'
    assert yes_no(None) == 'No'


def test_to_backend_drops_blanks_and_trims():
    body = to_backend(
        {'patientName': '  Asha ', 'address': '', 'age': None, 'unknown': 'x'},
        {'patientName': 'PatientName', 'address': 'Address', 'age': 'Age'},
    )
    assert body == {'PatientName': 'Asha'}


def test_format_upstream_datetime_uses_local_time_zone(settings):
    settings.TIME_ZONE = 'Asia/Kolkata'
    assert format_upstream_datetime('2025-01-15T04:30:00Z') == '2025-01-15 10:00:00'
    assert format_upstream_datetime('2025-01-15T10:00:00') == '2025-01-15 10:00:00'
    assert format_upstream_datetime('not a date') == 'not a date'
