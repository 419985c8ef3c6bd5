"""
Upstream adapter tests.

HTTP is replaced by the ``upstream`` fixture (see ``conftest.py``), so
these tests exercise request building, response decoding, normalization
and the stub fallback rules together.
"""
import datetime

import pytest

from portal.upstream import (
    appointments, base, dashboard, departments, emergency_admissions, emergency_beds, icu_admissions, icu_beds,
    lab_tests, ot_allocations, ot_rooms, ot_slots, patients, roles, room_admissions, room_beds, staff, stubs,
)
from portal.upstream.base import ApiError, InvalidRequest


# -----------------------------------------------------------------------------
# base
# -----------------------------------------------------------------------------
def test_api_request_drops_empty_params(upstream):
    upstream.add('GET', '/patients', {'data': []})
    base.api_request('/patients', params={'page': 1, 'phone': None, 'q': ''})
    assert upstream.last('GET', '/patients')['params'] == {'page': 1}


def test_http_error_carries_upstream_message(upstream):
    upstream.add('GET', '/users/7', (422, {'message': 'Bad user', 'errors': ['UserName required']}))
    with pytest.raises(ApiError) as exc:
        base.api_request('/users/7')
    assert exc.value.status == 422
    assert exc.value.message == 'Bad user'
    assert base.describe_error(exc.value, 'x') == 'Bad user: UserName required'


def test_http_error_without_body(upstream):
    upstream.add('GET', '/icu', (500, None))
    with pytest.raises(ApiError, match='HTTP error! status: 500'):
        base.api_request('/icu')


def test_network_failure_has_status_zero(upstream):
    with pytest.raises(ApiError) as exc:
        base.api_request('/nowhere')
    assert exc.value.status == 0
    assert exc.value.message.startswith('Network error')


def test_empty_body_decodes_to_none(upstream):
    upstream.add('DELETE', '/room-beds/4', (204, None))
    assert base.api_request('/room-beds/4', 'DELETE') is None


def test_ensure_success_rejects_soft_failures():
    with pytest.raises(ApiError, match='nope'):
        base.ensure_success({'success': False, 'message': 'nope'}, 'default')
    assert base.ensure_success({'success': True}, 'default') == {'success': True}


# -----------------------------------------------------------------------------
# stub fallback
# -----------------------------------------------------------------------------
def test_fallback_only_when_live_call_fails_and_stubs_enabled(settings):
    settings.HMS_ENABLE_STUB_DATA = True
    assert base.with_stub_fallback(lambda: 'live', lambda: 'stub', label='t') == 'live'

    def boom():
        raise ApiError('down', 0)

    assert base.with_stub_fallback(boom, lambda: 'stub', label='t') == 'stub'
    settings.HMS_ENABLE_STUB_DATA = False
    with pytest.raises(ApiError):
        base.with_stub_fallback(boom, lambda: 'stub', label='t')


def test_admissions_propagate_errors_without_stubs(upstream):
    upstream.add('GET', '/emergency-admissions', (503, {'message': 'maintenance'}))
    with pytest.raises(ApiError, match='maintenance'):
        emergency_admissions.list_admissions()


def test_admissions_fall_back_to_stub_store(upstream, settings):
    settings.HMS_ENABLE_STUB_DATA = True
    rows = emergency_admissions.list_admissions(emergency_status='admitted')
    assert [r['id'] for r in rows] == [1]
    assert rows[0]['treatmentDetails'] == 'Emergency surgery required'

    created = emergency_admissions.create_admission({
        'doctorId': 3, 'patientId': 'p-3', 'emergencyBedId': 5, 'emergencyAdmissionDate': '2025-02-01',
    })
    assert created['id'] == 3
    assert created['status'] == 'Active'
    assert created['transferToIPD'] == 'No'

    updated = emergency_admissions.update_admission(3, {'emergencyStatus': 'Discharged'})
    assert updated['emergencyStatus'] == 'Discharged'

    emergency_admissions.delete_admission(3)
    assert stubs.find_emergency_admission(3) is None
    with pytest.raises(ApiError) as exc:
        emergency_admissions.get_admission(3)
    assert exc.value.status == 404


def test_live_admissions_are_used_when_available(upstream, settings):
    settings.HMS_ENABLE_STUB_DATA = True
    upstream.add('GET', '/emergency-admissions', {'success': True, 'data': [
        {'EmergencyAdmissionId': 42, 'EmergencyBedId': 7, 'Status': 'Active', 'TransferToICU': 'Yes'},
    ]})
    rows = emergency_admissions.list_admissions(status='Active')
    assert [r['id'] for r in rows] == [42]
    assert rows[0]['transferToIPDOTICU'] is True
    assert upstream.last('GET', '/emergency-admissions')['params'] == {'status': 'Active'}


def test_one_unreadable_number_does_not_sink_the_list(upstream):
    upstream.add('GET', '/emergency-admissions', {'success': True, 'data': [
        {'EmergencyAdmissionId': 1, 'EmergencyBedId': '1e999', 'Status': 'Active'},
        {'EmergencyAdmissionId': 2, 'EmergencyBedId': 4, 'Status': 'Active'},
    ]})
    rows = emergency_admissions.list_admissions()
    assert [(r['id'], r['emergencyBedId']) for r in rows] == [(1, None), (2, 4)]


def test_create_admission_sends_defaults_and_typo_field(upstream):
    upstream.add('POST', '/emergency-admissions', {'success': True, 'data': {'EmergencyAdmissionId': 9}})
    emergency_admissions.create_admission({
        'doctorId': 1, 'patientId': 'p', 'emergencyBedId': 2, 'emergencyAdmissionDate': '2025-01-01',
        'treatmentDetails': ' IV fluids ',
    })
    body = upstream.last('POST', '/emergency-admissions')['json']
    assert body['TreatementDetails'] == 'IV fluids'
    assert body['TransferToIPD'] == 'No' and body['Status'] == 'Active'
    assert body['Diagnosis'] is None


def test_create_admission_requires_core_fields(upstream):
    with pytest.raises(InvalidRequest, match='emergencyBedId'):
        emergency_admissions.create_admission({'doctorId': 1, 'patientId': 'p', 'emergencyAdmissionDate': 'x'})
    assert upstream.calls == []


def test_vitals_list_falls_back_to_empty(upstream, settings):
    settings.HMS_ENABLE_STUB_DATA = True
    assert emergency_admissions.list_vitals(1) == []


def test_create_vitals_formats_recorded_time(upstream, settings):
    settings.TIME_ZONE = 'Asia/Kolkata'
    upstream.add('POST', '/emergency-admission-vitals', {'data': {'EmergencyAdmissionVitalsId': 5, 'HeartRate': 88}})
    vitals = emergency_admissions.create_vitals(1, {
        'nurseId': 4, 'recordedDateTime': '2025-01-15T04:30:00Z', 'vitalsStatus': 'Stable', 'heartRate': 88,
    })
    assert vitals['emergencyAdmissionVitalsId'] == 5
    body = upstream.last('POST', '/emergency-admission-vitals')['json']
    assert body['EmergencyAdmissionId'] == 1
    assert body['RecordedDateTime'] == '2025-01-15 10:00:00'


# -----------------------------------------------------------------------------
# dashboard
# -----------------------------------------------------------------------------
def test_dashboard_stats_tolerate_failing_counts(upstream):
    upstream.add('GET', '/dashboard/count/today-opd', {'count': 12})
    upstream.add('GET', '/dashboard/count/active-tokens', {'data': {'ActiveTokens': '5'}})
    upstream.add('GET', '/dashboard/icu-occupied-count', {'occupied': 3})
    upstream.add('GET', '/dashboard/icu-total-count', {'TotalICUBeds': 10})
    stats = dashboard.get_stats()
    assert stats['opdPatientsToday'] == 12
    assert stats['activeTokens'] == 5
    assert stats['ipdAdmissions'] == 0
    assert stats['icuOccupied'] == '3/10'


def test_dashboard_charts_fall_back_even_without_stub_flag(upstream):
    assert dashboard.get_opd_flow() == stubs.OPD_FLOW
    upstream.add('GET', '/dashboard/ipd-room-distribution', {'success': True})
    assert dashboard.get_room_distribution() == stubs.ROOM_DISTRIBUTION
    upstream.add('GET', '/dashboard/doctor-wise-appointment-counts', [])
    assert dashboard.get_doctor_queue() == stubs.DOCTOR_QUEUE


def test_dashboard_maps_live_chart_data(upstream):
    upstream.add('GET', '/dashboard/opd-patient-flow-weekly', {'weeklyData': [
        {'DayName': 'Mon', 'PatientCount': '7'}, {'Day': 'Tue', 'count': 'n/a'}, {'Date': 'Wed'},
    ]})
    assert dashboard.get_opd_flow() == [{'day': 'Mon', 'patients': 7}, {'day': 'Wed', 'patients': 0}]

    upstream.add('GET', '/dashboard/ipd-room-distribution', [{'RoomType': 'Deluxe', 'Count': 4}])
    assert dashboard.get_room_distribution() == [{'name': 'Deluxe', 'value': 4, 'color': '#3b82f6'}]

    upstream.add('GET', '/dashboard/doctor-wise-appointment-counts', {'data': [
        {'DoctorName': 'Dr. Rao', 'DepartmentName': 'ENT', 'Type': 'Consulting', 'WaitingCount': 2},
    ]})
    assert dashboard.get_doctor_queue() == [{
        'doctor': 'Dr. Rao', 'specialty': 'ENT', 'type': 'consulting', 'waiting': 2, 'consulting': 0, 'completed': 0,
    }]


# -----------------------------------------------------------------------------
# resources
# -----------------------------------------------------------------------------
def test_list_patients_server_paginated(upstream):
    upstream.add('GET', '/patients', {'data': [{'PatientId': 'a'}, {'PatientId': 'a'}], 'totalCount': 25})
    page = patients.list_patients(1, 10)
    assert page['total'] == 25
    assert page['hasMore'] is True
    assert [p['id'] for p in page['data']] == ['a', 'a-1']


def test_list_patients_slices_unpaginated_backends(upstream):
    upstream.add('GET', '/patients', [{'PatientId': f'p{i}'} for i in range(25)])
    first = patients.list_patients(1, 10)
    third = patients.list_patients(3, 10)
    assert [p['id'] for p in first['data']] == [f'p{i}' for i in range(10)]
    assert first['total'] == 25 and first['hasMore'] is True
    assert [p['id'] for p in third['data']] == [f'p{i}' for i in range(20, 25)]
    assert third['hasMore'] is False
    assert patients.list_patients(4, 10)['data'] == []


def test_create_patient_validates_before_calling(upstream):
    with pytest.raises(InvalidRequest, match='Age'):
        patients.create_patient({'patientName': 'A', 'phoneNo': '1', 'gender': 'F', 'age': 0})
    assert upstream.calls == []


def test_create_patient_defaults_registered_by(upstream):
    upstream.add('POST', '/patients', {'data': {'PatientId': 'new', 'PatientName': 'A'}})
    created = patients.create_patient({'patientName': 'A', 'phoneNo': '1', 'gender': 'F', 'age': '20',
                                       'status': 'Active'})
    assert created['patientId'] == 'new'
    body = upstream.last('POST', '/patients')['json']
    assert body['RegisteredBy'] == 1 and body['Age'] == 20 and 'Status' not in body


def test_find_patient_by_phone(upstream):
    upstream.add('GET', '/patients', [{'PatientId': 'x', 'PhoneNo': '9000'}])
    assert patients.find_by_phone('9000')['patientId'] == 'x'
    assert upstream.last('GET', '/patients')['params'] == {'phone': '9000'}


def test_staff_soft_failure_is_an_error(upstream):
    upstream.add('GET', '/users/3', {'success': False, 'message': 'User not found'})
    with pytest.raises(ApiError, match='User not found'):
        staff.get_staff(3)


def test_staff_create_defaults_to_active(upstream):
    upstream.add('POST', '/users', {'success': True, 'data': {'UserId': 11, 'UserName': 'nurse', 'Status': 'active'}})
    member = staff.create_staff({'userName': 'nurse', 'roleId': 'R2'})
    assert member['userId'] == 11 and member['status'] == 'Active'
    assert upstream.last('POST', '/users')['json']['Status'] == 'Active'


def test_departments_category_filter_and_partial_update(upstream):
    upstream.add('GET', '/doctor-departments', {'success': True, 'data': [
        {'DoctorDepartmentId': 1, 'DepartmentName': 'Cardiology', 'Status': 'Active'},
    ]})
    rows = departments.list_departments('Clinical')
    assert rows[0]['name'] == 'Cardiology' and rows[0]['status'] == 'active'
    assert upstream.last('GET', '/doctor-departments')['params'] == {'category': 'Clinical'}
    assert departments.to_backend_department({'description': ''}) == {'Description': None}


def test_emergency_bed_status_mapping(upstream):
    upstream.add('GET', '/emergency-beds', {'data': [
        {'EmergencyBedId': 1, 'EmergencyBedNo': 'E1', 'Status': 'Unoccupied'},
        {'EmergencyBedId': 2, 'EmergencyBedNo': 'E2', 'Status': 'Occupied'},
    ]})
    beds = emergency_beds.list_beds()
    assert [b['status'] for b in beds] == ['active', 'occupied']
    assert beds[0]['emergencyBedId'] == '1'
    assert emergency_beds.to_backend_bed({'status': 'occupied'}, creating=True) == {'Status': 'Inactive'}
    assert emergency_beds.to_backend_bed({'status': 'occupied'}) == {'Status': 'Occupied'}


def test_emergency_beds_unknown_shape_is_an_error(upstream):
    upstream.add('GET', '/emergency-beds', {'success': True, 'message': 'ok'})
    with pytest.raises(ApiError):
        emergency_beds.list_beds()


def test_icu_beds_stub_fallback(upstream, settings):
    settings.HMS_ENABLE_STUB_DATA = True
    beds = icu_beds.list_icu_beds()
    assert beds[0]['icuBedNo'] == 'B50'
    assert beds[0]['isVentilatorAttached'] is False
    assert icu_beds.list_by_type('Surgical') == []


def test_icu_update_always_sends_ventilator_flag(upstream):
    upstream.add('PUT', '/icu/5', {'data': {'ICUBedId': 5, 'IsVentilatorAttached': 'Yes'}})
    bed = icu_beds.update_icu_bed(5, {'status': 'in active', 'isVentilatorAttached': True})
    assert bed['isVentilatorAttached'] is True
    body = upstream.last('PUT', '/icu/5')['json']
    assert body == {'IsVentilatorAttached': 'Yes', 'Status': 'Inactive'}


def test_icu_occupancy_clamps_to_total(upstream):
    upstream.add('GET', '/patient-icu-admissions/occupancy', {'data': {'occupiedBeds': 20, 'totalBeds': 12}})
    assert icu_beds.get_occupancy() == {'totalPatients': 12, 'occupiedBeds': 12, 'totalBeds': 12, 'availableBeds': 0}


def test_icu_occupancy_ignores_infinite_counts(upstream):
    upstream.add('GET', '/patient-icu-admissions/occupancy', {'occupiedBeds': float('inf'), 'totalBeds': 10})
    assert icu_beds.get_occupancy()['occupiedBeds'] == 0


def test_room_bed_ids_are_validated(upstream):
    with pytest.raises(InvalidRequest):
        room_beds.get_room_bed(0)
    upstream.add('GET', '/room-beds', [{'RoomBedsId': 3, 'BedNo': 'B3', 'Status': 'maintenance'}])
    bed = room_beds.list_room_beds(room_no='101')[0]
    assert bed['roomBedId'] == 3 and bed['status'] == 'Inactive' and bed['numberOfBeds'] == 1


def test_ot_rooms_pagination_and_lookup(upstream):
    upstream.add('GET', '/ot', {'success': True, 'totalCount': 1, 'totalPages': 1, 'data': [
        {'OTId': 4, 'OTNo': 'OT4', 'Status': 'Active'},
    ]})
    page = ot_rooms.list_ot_rooms()
    assert page['data'][0]['otId'] == 'OT-04'
    assert page['data'][0]['startTimeofDay'] == '08:00'
    assert page['hasMore'] is False
    assert ot_rooms.get_ot_room(4)['otNo'] == 'OT4'
    with pytest.raises(ApiError) as exc:
        ot_rooms.get_ot_room(5)
    assert exc.value.status == 404
    assert len(ot_rooms.list_all_ot_rooms()) == 1


# -----------------------------------------------------------------------------
# room & ICU admissions
# -----------------------------------------------------------------------------
@pytest.mark.parametrize('raw,expected', [
    ('Admitted', 'Active'),
    ('inpatient', 'Active'),
    (None, 'Active'),
    ('discharged', 'Discharged'),
    ('transferred_to_icu', 'Moved to ICU'),
    ('OT Scheduled', 'Surgery Scheduled'),
    ('surgery_scheduled', 'Surgery Scheduled'),
])
def test_room_admission_status_spellings(raw, expected):
    assert room_admissions.admission_status(raw) == expected


def test_room_type_spellings():
    assert room_admissions.room_type('special shared') == 'Special Shared Room'
    assert room_admissions.room_type('SPECIAL') == 'Special Room'
    assert room_admissions.room_type('General') == 'Regular Ward'


def test_room_admission_create_body(upstream):
    upstream.add('POST', '/room-admissions', {'success': True, 'data': {
        'RoomAdmissionId': 12, 'BedNo': 'B1', 'AdmissionStatus': 'admitted'}})
    admission = room_admissions.create_admission({
        'patientId': 'p1', 'patientName': 'Asha', 'bedNumber': 'B1', 'admittedBy': 'Dr. Rao',
        'roomBedId': 4, 'doctorId': 3, 'scheduleOT': 'Yes', 'roomType': 'special shared',
    })
    assert admission['id'] == 12 and admission['status'] == 'Active'
    assert upstream.last('POST', '/room-admissions')['json'] == {
        'PatientId': 'p1', 'PatientName': 'Asha', 'BedNo': 'B1', 'AdmittedBy': 'Dr. Rao',
        'RoomType': 'Special Shared Room', 'RoomBedsId': 4, 'AdmittingDoctorId': 3, 'ScheduleOT': 'Yes',
        'AdmissionStatus': 'Active',
    }


def test_room_admission_create_requires_bed_and_doctor(upstream):
    with pytest.raises(InvalidRequest, match='BedNo, AdmittedBy'):
        room_admissions.create_admission({'patientId': 'p1', 'patientName': 'Asha'})
    assert upstream.calls == []


def test_room_admissions_status_filter_and_delete_path(upstream):
    upstream.add('GET', '/room-admissions/data', {'success': True, 'data': [
        {'RoomAdmissionId': 1, 'AdmissionStatus': 'Active'},
        {'RoomAdmissionId': 2, 'AdmissionStatus': 'Discharged'},
    ]})
    upstream.add('DELETE', '/admissions/2', {'success': True})
    assert [a['id'] for a in room_admissions.list_admissions('discharged')] == [2]
    room_admissions.delete_admission(2)
    assert upstream.last('DELETE', '/admissions/2')


def test_room_capacity_accepts_keyed_and_listed_shapes(upstream):
    upstream.add('GET', '/room-admissions/capacity-overview', {'data': {
        'Regular Ward': {'total': 10, 'occupied': 4},
        'Special Room': {'total': 5, 'occupied': 5, 'available': 0},
    }})
    assert room_admissions.get_capacity_overview() == [
        {'roomType': 'Regular Ward', 'total': 10, 'occupied': 4, 'available': 6},
        {'roomType': 'Special Room', 'total': 5, 'occupied': 5, 'available': 0},
    ]
    upstream.add('GET', '/room-admissions/capacity-overview', [{'roomType': 'Special Shared', 'total': 20, 'occupied': 14}])
    assert room_admissions.get_capacity_overview()[0] == {
        'roomType': 'Special Shared Room', 'total': 20, 'occupied': 14, 'available': 6}


def test_room_capacity_stub_only_when_enabled(upstream, settings):
    with pytest.raises(ApiError):
        room_admissions.get_capacity_overview()
    settings.HMS_ENABLE_STUB_DATA = True
    assert [r['total'] for r in room_admissions.get_capacity_overview()] == [50, 20, 15]


def test_room_admission_metrics_derive_free_beds(upstream):
    upstream.add('GET', '/room-admissions/dashboard-metrics', {'data': {
        'totalAdmissions': 40, 'activePatients': 30, 'totalOccupied': 57, 'totalCapacity': 85, 'avgStay': '4.2 days'}})
    metrics = room_admissions.get_dashboard_metrics()
    assert metrics['availableBeds'] == 28
    assert metrics['bedOccupancy'] == 67
    assert metrics['avgStay'] == '4.2 days'


@pytest.mark.parametrize('payload,expected', [
    (7, 7),
    ('7', 7),
    ({'data': 5}, 5),
    ({'data': {'criticalCount': 3}}, 3),
    ({'success': True, 'count': 2}, 2),
    ({'unexpected': 'shape'}, 0),
])
def test_icu_counters_accept_bare_and_keyed_values(payload, expected):
    assert icu_admissions.read_count(payload, icu_admissions.CRITICAL_KEYS) == expected


def test_icu_admission_refused_when_icu_is_taken(upstream):
    upstream.add('GET', '/patient-icu-admissions/check-occupied', {'isOccupied': True})
    with pytest.raises(InvalidRequest, match='already occupied'):
        icu_admissions.create_icu_admission({'patientId': 'p1', 'icuId': 2, 'icuAllocationFromDate': '2025-01-02'})
    assert upstream.last('GET', '/patient-icu-admissions/check-occupied')['params'] == {
        'ICUId': 2, 'ICUAllocationFromDate': '2025-01-02'}
    assert not [c for c in upstream.calls if c['method'] == 'POST']


def test_icu_admission_proceeds_when_check_is_unreachable(upstream):
    upstream.add('POST', '/patient-icu-admissions', {'success': True, 'data': {
        'PatientICUAdmissionId': 9, 'PatientId': 'p1', 'OnVentilator': 'Yes'}})
    admission = icu_admissions.create_icu_admission({
        'patientId': 'p1', 'icuId': 2, 'icuAllocationFromDate': '2025-01-02', 'onVentilator': True,
        'treatmentDetails': 'Oxygen support',
    })
    assert admission['id'] == 9 and admission['onVentilator'] is True
    body = upstream.last('POST', '/patient-icu-admissions')['json']
    assert body['OnVentilator'] == 'Yes'
    assert body['TreatementDetails'] == 'Oxygen support'


def test_icu_bed_layout_marks_beds_with_an_admission(upstream):
    upstream.add('GET', '/patient-icu-admissions/icu-beds-details', {'data': [
        {'ICUBedId': 1, 'ICUBedNo': 'B1', 'patientICUAdmission': {'PatientICUAdmissionId': 4, 'PatientName': 'Asha'}},
        {'ICUBedId': 2, 'ICUBedNo': 'B2'},
    ]})
    layout = icu_admissions.bed_layout()
    assert [b['occupied'] for b in layout] == [True, False]
    assert layout[0]['admission']['patientName'] == 'Asha'
    with pytest.raises(InvalidRequest):
        icu_admissions.bed_details(0)


def test_icu_summary_combines_counters(upstream):
    upstream.add('GET', '/patient-icu-admissions/occupancy', {'occupied': 4, 'capacity': 10})
    upstream.add('GET', '/patient-icu-admissions/count/critical', {'data': {'criticalCount': 2}})
    upstream.add('GET', '/patient-icu-admissions/count/on-ventilator', 1)
    upstream.add('GET', '/patient-icu-admissions/available-beds', {'availableICUBeds': 6})
    assert icu_admissions.icu_summary() == {
        'totalPatients': 4, 'occupiedBeds': 4, 'totalBeds': 10, 'availableBeds': 6,
        'criticalPatients': 2, 'onVentilator': 1, 'freeBedsReported': 6,
    }


# -----------------------------------------------------------------------------
# OT scheduling
# -----------------------------------------------------------------------------
def test_ot_slot_ids_and_occupancy():
    slot = ot_slots.map_ot_slot({'OTSlotId': 7, 'OTId': 1, 'OTSlotNo': 'S7', 'Status': 'active', 'IsAvailable': False})
    assert slot['otSlotId'] == 'OT-01-SLOT007'
    assert slot['otId'] == 'OT-01'
    assert slot['status'] == 'Active'
    assert slot['isOccupied'] is True
    assert ot_slots.map_ot_slot({'OTSlotId': 8, 'OTId': 1, 'IsAvailable': True})['isOccupied'] is False
    taken = ot_slots.map_ot_slot({'OTSlotId': 9, 'OTId': 1, 'IsAvailable': True, 'PatientOTAllocationId': 3,
                                  'PatientId': 'p1'})
    assert taken['isOccupied'] is True and taken['patientId'] == 'p1'


def test_ot_slot_filters_use_numeric_ot_and_day_first_date(upstream):
    upstream.add('GET', '/ot-slots', {'success': True, 'count': 1, 'data': [{'OTSlotId': 1, 'OTId': 2}]})
    assert len(ot_slots.list_ot_slots(ot_id='OT-02', date='2025-03-09')) == 1
    assert upstream.last('GET', '/ot-slots')['params'] == {'otId': 2, 'date': '09-03-2025'}
    upstream.add('GET', '/ot-slots', {'success': False, 'data': []})
    assert ot_slots.list_ot_slots() == []
    with pytest.raises(InvalidRequest):
        ot_slots.parse_ot_id('theatre-x')


def test_ot_slot_create_defaults_to_active(upstream):
    upstream.add('POST', '/ot-slots', {'success': True, 'data': {'OTSlotId': 4, 'OTId': 3}})
    ot_slots.create_ot_slot({'otId': 'OT-03', 'slotStartTime': '09:00', 'slotEndTime': '10:00'})
    assert upstream.last('POST', '/ot-slots')['json'] == {
        'OTId': 3, 'SlotStartTime': '09:00', 'SlotEndTime': '10:00', 'Status': 'Active'}
    upstream.add('PUT', '/ot-slots/4', {'success': False, 'message': 'Slot overlaps'})
    with pytest.raises(ApiError, match='Slot overlaps'):
        ot_slots.update_ot_slot(4, {'slotEndTime': '11:00'})


def test_ot_allocation_in_progress_round_trip(upstream):
    allocation = ot_allocations.map_allocation({
        'PatientOTAllocationId': 5, 'OperationStatus': 'In Progress', 'Status': 'active', 'OTSlotIds': [1, 2]})
    assert allocation['operationStatus'] == 'InProgress'
    assert allocation['status'] == 'Active'
    assert allocation['otSlotIds'] == [1, 2]

    upstream.add('POST', '/patient-ot-allocations', {'success': True, 'data': {'PatientOTAllocationId': 6}})
    ot_allocations.create_allocation({
        'patientId': 'p1', 'otId': 1, 'leadSurgeonId': 3, 'otAllocationDate': '2025-03-09',
        'operationStatus': 'InProgress', 'otSlotIds': [],
    })
    body = upstream.last('POST', '/patient-ot-allocations')['json']
    assert body['OperationStatus'] == 'In Progress'
    assert body['Status'] == 'Active'
    assert 'OTSlotIds' not in body


def test_ot_allocation_requires_surgeon_and_date(upstream):
    with pytest.raises(InvalidRequest, match='LeadSurgeonId, OTAllocationDate'):
        ot_allocations.create_allocation({'patientId': 'p1', 'otId': 1})
    assert upstream.calls == []


# -----------------------------------------------------------------------------
# appointments, lab tests, roles
# -----------------------------------------------------------------------------
def test_appointments_server_paginated(upstream):
    upstream.add('GET', '/patient-appointments', {'success': True, 'count': 1, 'totalCount': 12, 'totalPages': 2, 'data': [
        {'PatientAppointmentId': 3, 'PatientId': 'p1', 'DoctorId': 4, 'AppointmentDate': '2025-02-01T00:00:00.000Z',
         'TokenNo': 'T-0003', 'ToBeAdmitted': 'Yes'},
    ]})
    page = appointments.list_appointments(1, 10, doctor_id=4)
    assert page['total'] == 12 and page['hasMore'] is True
    row = page['data'][0]
    assert row['patientAppointmentId'] == 'PA-3'
    assert row['appointmentDate'] == '2025-02-01'
    assert row['doctorId'] == '4'
    assert row['toBeAdmitted'] is True and row['referToAnotherDoctor'] is False
    assert upstream.last('GET', '/patient-appointments')['params'] == {'doctorId': 4, 'page': 1, 'limit': 10}


def test_appointments_sliced_when_backend_returns_everything(upstream):
    upstream.add('GET', '/patient-appointments', {'success': True, 'data': [
        {'PatientAppointmentId': i} for i in range(1, 16)
    ]})
    page = appointments.list_appointments(2, 10)
    assert [a['id'] for a in page['data']] == [11, 12, 13, 14, 15]
    assert page['total'] == 15 and page['hasMore'] is False


def test_appointment_create_fills_flags(upstream):
    upstream.add('POST', '/patient-appointments', {'success': True, 'data': {'PatientAppointmentId': 8, 'TokenNo': 'T-0008'}})
    appointments.create_appointment({
        'patientId': 'p1', 'doctorId': 4, 'appointmentDate': '2025-02-01', 'appointmentTime': '10:30',
        'toBeAdmitted': True,
    })
    body = upstream.last('POST', '/patient-appointments')['json']
    assert body['DoctorId'] == 4
    assert body['AppointmentStatus'] == 'Waiting'
    assert body['ToBeAdmitted'] == 'Yes'
    assert body['ReferToAnotherDoctor'] == 'No'
    assert body['Status'] == 'Active'
    with pytest.raises(InvalidRequest, match='ReferredDoctorId'):
        appointments.create_appointment({
            'patientId': 'p1', 'doctorId': 4, 'appointmentDate': '2025-02-01', 'appointmentTime': '10:30',
            'referToAnotherDoctor': True,
        })


def test_lab_display_ids_continue_todays_sequence():
    today = datetime.date(2025, 3, 9)
    existing = [
        {'displayTestId': 'LAB_2025_03_09_01'},
        {'displayTestId': 'LAB_2025_03_09_07'},
        {'displayTestId': 'LAB_2025_03_08_12'},
        {'displayTestId': ''},
    ]
    assert lab_tests.next_display_test_id(existing, today) == 'LAB_2025_03_09_08'
    assert lab_tests.next_display_test_id([], today) == 'LAB_2025_03_09_01'


def test_lab_test_create_numbers_and_normalizes_status(upstream):
    upstream.add('POST', '/lab-tests', {'data': {'LabTestsId': 3, 'TestName': 'CBC', 'Charges': '250'}})
    test = lab_tests.create_lab_test({'testName': 'CBC', 'testCategory': 'Blood', 'charges': 250, 'status': 'inactive'})
    assert test['labTestId'] == 3 and test['charges'] == 250.0
    body = upstream.last('POST', '/lab-tests')['json']
    assert body['DisplayTestId'].startswith('LAB_')
    assert body['Status'] == 'InActive'
    with pytest.raises(InvalidRequest):
        lab_tests.create_lab_test({'testName': 'CBC', 'testCategory': 'Blood', 'charges': -1})


def test_lab_tests_fall_back_to_empty_catalogue(upstream, settings):
    with pytest.raises(ApiError):
        lab_tests.list_lab_tests()
    settings.HMS_ENABLE_STUB_DATA = True
    assert lab_tests.list_lab_tests() == []


def test_roles_stub_fallback_and_validation(upstream, settings):
    settings.HMS_ENABLE_STUB_DATA = True
    listed = roles.list_roles()
    assert listed[0]['name'] == 'Superadmin' and listed[0]['isSuperAdmin'] is True
    assert not any(r['isSuperAdmin'] for r in listed[1:])
    with pytest.raises(InvalidRequest):
        roles.create_role({'description': 'no name'})
