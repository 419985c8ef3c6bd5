"""
Integration tests for the portal API.

Requests go through the real URL routing, permissions, serializers and
exception handler; only the upstream HMS server is faked.

To run the tests:

```
pytest -q portal/tests
```
"""
import pytest
from django.urls import reverse
from rest_framework import status

pytestmark = pytest.mark.django_db


def test_healthz_is_public(client):
    r = client.get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json()['ok'] is True
    assert r.json()['db'] is True


class TestDashboard:
    def test_overview_always_renders(self, client_for, upstream):
        r = client_for('frontdesk').get(reverse('dashboard'))
        assert r.status_code == status.HTTP_200_OK
        assert set(r.data) == {'stats', 'opdFlow', 'roomDistribution', 'doctorQueue'}
        assert r.data['stats']['icuOccupied'] == '0/0'
        assert len(r.data['doctorQueue']) == 5

    def test_stats(self, client_for, upstream):
        upstream.add('GET', '/dashboard/active-patients-count', {'count': 321})
        r = client_for('doctor').get(reverse('dashboard_stats'))
        assert r.data['totalPatients'] == 321


class TestPatients:
    def test_list_passes_paging_and_phone(self, client_for, upstream):
        upstream.add('GET', '/patients', [{'PatientId': 'p1', 'PatientName': 'Asha', 'PhoneNo': '9000'}])
        r = client_for('frontdesk').get(reverse('patient_list'), {'page': 1, 'limit': 5, 'phone': '9000'})
        assert r.status_code == 200
        assert r.data['data'][0]['patientName'] == 'Asha'
        assert r.data['hasMore'] is False
        assert upstream.last('GET', '/patients')['params'] == {'page': 1, 'limit': 5, 'phone': '9000'}

    def test_create_cleans_markup_and_uses_portal_user(self, client_for, upstream):
        upstream.add('POST', '/patients', {'data': {'PatientId': 'p2', 'PatientName': 'Ravi'}})
        client = client_for('frontdesk', upstream_user_id=17)
        r = client.post(reverse('patient_list'), {
            'patientName': '<b>Ravi</b>', 'phoneNo': '9000000002', 'gender': 'M', 'age': 40,
        }, format='json')
        assert r.status_code == status.HTTP_201_CREATED
        body = upstream.last('POST', '/patients')['json']
        assert body['PatientName'] == 'Ravi'
        assert body['RegisteredBy'] == 17

    def test_create_missing_fields_is_400(self, client_for, upstream):
        r = client_for('frontdesk').post(reverse('patient_list'), {'patientName': 'X'}, format='json')
        assert r.status_code == 400
        assert r.data['ok'] is False
        assert r.data['error']['code'] == 'invalid_request'
        assert upstream.calls == []

    def test_unknown_patient_is_404(self, client_for, upstream):
        upstream.add('GET', '/patients/nope', (404, {'message': 'Patient not found'}))
        r = client_for('frontdesk').get(reverse('patient_detail', args=['nope']))
        assert r.status_code == 404
        assert r.data['error'] == {'code': 'not_found', 'message': 'Patient not found'}

    def test_follow_up(self, client_for, upstream):
        upstream.add('POST', '/patients/p1/follow-up', {'data': {'PatientId': 'p1', 'PatientType': 'FollowUp'}})
        r = client_for('doctor').post(reverse('patient_follow_up', args=['p1']))
        assert r.status_code == 200
        assert r.data['patientType'] == 'FollowUp'


class TestUpstreamErrors:
    def test_upstream_failure_is_502(self, client_for, upstream):
        upstream.add('GET', '/users', (500, {'message': 'db down'}))
        r = client_for('admin').get(reverse('staff_list'))
        assert r.status_code == 502
        assert r.data['error'] == {'code': 'upstream_error', 'message': 'db down'}

    def test_unreachable_upstream_is_503(self, client_for, upstream):
        r = client_for('admin').get(reverse('room_bed_list'))
        assert r.status_code == 503
        assert r.data['error']['message'].startswith('Network error')

    def test_serializer_errors_are_wrapped(self, client_for, upstream):
        r = client_for('admin').post(reverse('departments'), {'noOfDoctors': -1}, format='json')
        assert r.status_code == 400
        assert r.data['ok'] is False
        assert 'noOfDoctors' in r.data['error']['message']


class TestEmergency:
    BEDS = {'data': [
        {'EmergencyBedId': 1, 'EmergencyBedNo': 'ER-1', 'Status': 'Unoccupied'},
        {'EmergencyBedId': 2, 'EmergencyBedNo': 'ER-2', 'Status': 'Occupied'},
        {'EmergencyBedId': 3, 'EmergencyBedNo': 'ER-3', 'Status': 'Inactive'},
    ]}
    SLOTS = {'success': True, 'data': [
        {'EmergencyBedSlotId': 11, 'EmergencyBedId': 1, 'EBedSlotNo': 'S1', 'Status': 'Active'},
    ]}
    ADMISSIONS = {'success': True, 'data': [
        {'EmergencyAdmissionId': 1, 'EmergencyBedSlotId': 11, 'EmergencyStatus': 'Admitted', 'Status': 'Active',
         'PatientName': 'Asha', 'PatientNo': 'P-1', 'PatientCondition': 'Stable', 'Priority': 'Low',
         'EmergencyAdmissionDate': '2025-01-02'},
        {'EmergencyAdmissionId': 2, 'EmergencyBedId': 2, 'EmergencyStatus': 'ICU', 'Status': 'Active',
         'PatientName': 'Ravi', 'PatientCondition': 'Critical', 'Priority': 'Critical',
         'EmergencyAdmissionDate': '2025-01-01'},
    ]}

    @pytest.fixture
    def live(self, upstream):
        upstream.add('GET', '/emergency-beds', self.BEDS)
        upstream.add('GET', '/emergency-bed-slots', self.SLOTS)
        upstream.add('GET', '/emergency-admissions', self.ADMISSIONS)
        return upstream

    def test_bed_board(self, client_for, live):
        r = client_for('nurse').get(reverse('emergency_bed_board'))
        assert r.status_code == 200
        assert [b['emergencyBedNo'] for b in r.data['occupied']] == ['ER-1', 'ER-2']
        assert r.data['counts'] == {'occupied': 2, 'unoccupied': 0, 'total': 2}
        assert r.data['occupied'][0]['occupant'] == {'patientName': 'Asha', 'patientNo': 'P-1',
                                                      'emergencyStatus': 'Admitted'}
        assert [s['id'] for s in r.data['slots']['occupied']] == [11]

    def test_bed_board_transfers_release(self, client_for, live):
        r = client_for('nurse').get(reverse('emergency_bed_board'), {'transfersRelease': '1'})
        assert [b['emergencyBedNo'] for b in r.data['unoccupied']] == ['ER-2']

    def test_overview(self, client_for, live):
        r = client_for('doctor').get(reverse('emergency_overview'))
        assert r.status_code == 200
        assert [a['id'] for a in r.data['admissions']] == [2, 1]
        assert [a['id'] for a in r.data['queue']] == [1]
        assert r.data['counts']['total'] == 1
        assert r.data['counts']['Low'] == 1
        assert r.data['beds']['counts']['occupied'] == 1
        assert live.last('GET', '/emergency-admissions')['params'] == {'status': 'Active'}

    def test_admission_create(self, client_for, upstream):
        upstream.add('POST', '/emergency-admissions', {'success': True, 'data': {
            'EmergencyAdmissionId': 5, 'EmergencyBedId': 1, 'Status': 'Active', 'Priority': 'High'}})
        r = client_for('doctor', upstream_user_id=3).post(reverse('emergency_admission_list'), {
            'doctorId': 3, 'patientId': 'p1', 'emergencyBedId': 1, 'emergencyAdmissionDate': '2025-01-02',
            'priority': 'High',
        }, format='json')
        assert r.status_code == 201
        assert r.data['id'] == 5
        assert upstream.last('POST', '/emergency-admissions')['json']['AdmissionCreatedBy'] == 3

    def test_admission_rejects_unknown_priority(self, client_for, upstream):
        r = client_for('doctor').post(reverse('emergency_admission_list'), {'priority': 'Whenever'}, format='json')
        assert r.status_code == 400

    def test_stub_admissions_when_enabled(self, client_for, upstream, settings):
        settings.HMS_ENABLE_STUB_DATA = True
        r = client_for('nurse').get(reverse('emergency_admission_list'), {'emergencyStatus': 'IPD'})
        assert r.status_code == 200
        assert [a['id'] for a in r.data] == [2]

    def test_vitals_roundtrip_paths(self, client_for, upstream):
        upstream.add('GET', '/emergency-admission-vitals/by-emergency-admission/4', {'data': [
            {'EmergencyAdmissionVitalsId': 1, 'EmergencyAdmissionId': 4, 'HeartRate': '90'},
        ]})
        upstream.add('DELETE', '/emergency-admissions/4/vitals/1', (204, None))
        client = client_for('nurse')
        r = client.get(reverse('vitals_list', args=[4]))
        assert r.data[0]['heartRate'] == 90
        r = client.delete(reverse('vitals_detail', args=[4, 1]))
        assert r.status_code == 200 and r.data == {'ok': True}


class TestBedsAndRooms:
    def test_icu_occupancy(self, client_for, upstream):
        upstream.add('GET', '/patient-icu-admissions/occupancy', {'occupied': 4, 'capacity': 10})
        r = client_for('nurse').get(reverse('icu_occupancy'))
        assert r.data == {'totalPatients': 4, 'occupiedBeds': 4, 'totalBeds': 10, 'availableBeds': 6}

    def test_icu_by_type(self, client_for, upstream):
        upstream.add('GET', '/icu', [{'ICUBedId': 8, 'ICUBedNo': 'B8', 'ICUType': 'Medical'}])
        r = client_for('admin').get(reverse('icu_bed_list'), {'type': 'Medical'})
        assert r.data[0]['icuBedId'] == 8
        assert upstream.last('GET', '/icu')['params'] == {'type': 'Medical'}

    def test_room_bed_create(self, client_for, upstream):
        upstream.add('POST', '/room-beds', {'data': {'RoomBedsId': 9, 'BedNo': 'B9', 'ChargesPerDay': '1500'}})
        r = client_for('nurse', upstream_user_id=2).post(reverse('room_bed_list'), {
            'bedNo': 'B9', 'roomNo': '101', 'roomCategory': 'AC', 'roomType': 'Special', 'chargesPerDay': 1500,
        }, format='json')
        assert r.status_code == 201
        assert r.data['chargesPerDay'] == 1500.0
        assert upstream.last('POST', '/room-beds')['json']['CreatedBy'] == '2'

    def test_ot_rooms_page(self, client_for, upstream):
        upstream.add('GET', '/ot', {'success': True, 'totalCount': 30, 'totalPages': 3, 'data': [{'OTId': 1}]})
        r = client_for('admin').get(reverse('ot_room_list'), {'page': 2, 'limit': 10, 'status': 'Active'})
        assert r.data['hasMore'] is True
        assert upstream.last('GET', '/ot')['params'] == {'page': 2, 'limit': 10, 'status': 'Active'}


class TestPatientLookupAndBedSlots:
    def test_lookup_by_phone(self, client_for, upstream):
        upstream.add('GET', '/patients', [{'PatientId': 'p7', 'PatientName': 'Asha', 'PhoneNo': '9000'}])
        r = client_for('frontdesk').get(reverse('patient_lookup'), {'phone': '9000'})
        assert r.status_code == 200
        assert r.data['patientId'] == 'p7'
        assert upstream.last('GET', '/patients')['params'] == {'phone': '9000'}

    def test_lookup_without_a_match_is_404(self, client_for, upstream):
        upstream.add('GET', '/patients', {'data': []})
        r = client_for('frontdesk').get(reverse('patient_lookup'), {'phone': '9111'})
        assert r.status_code == 404
        assert r.data['error']['code'] == 'not_found'

    def test_lookup_needs_a_phone(self, client_for, upstream):
        r = client_for('frontdesk').get(reverse('patient_lookup'))
        assert r.status_code == 400
        assert upstream.calls == []

    def test_slots_of_one_bed(self, client_for, upstream):
        upstream.add('GET', '/emergency-bed-slots', {'success': True, 'data': [
            {'EmergencyBedSlotId': 11, 'EmergencyBedId': 1, 'EBedSlotNo': 'S1'},
        ]})
        r = client_for('nurse').get(reverse('emergency_bed_slots', args=[1]))
        assert r.status_code == 200
        assert [s['id'] for s in r.data] == [11]
        assert upstream.last('GET', '/emergency-bed-slots')['params'] == {'emergencyBedId': 1}


class TestAdmissions:
    def test_room_bed_board(self, client_for, upstream):
        upstream.add('GET', '/room-beds', {'data': [
            {'RoomBedsId': 1, 'BedNo': 'B1', 'Status': 'Active'},
            {'RoomBedsId': 2, 'BedNo': 'B2', 'Status': 'Active'},
        ]})
        upstream.add('GET', '/room-admissions/data', {'success': True, 'data': [
            {'RoomAdmissionId': 5, 'RoomBedsId': 1, 'PatientName': 'Asha', 'AdmissionStatus': 'Admitted'},
            {'RoomAdmissionId': 6, 'RoomBedsId': 2, 'PatientName': 'Ravi', 'AdmissionStatus': 'Discharged'},
        ]})
        r = client_for('nurse').get(reverse('room_bed_board'))
        assert r.status_code == 200
        assert [b['bedNo'] for b in r.data['occupied']] == ['B1']
        assert r.data['occupied'][0]['occupant']['admissionId'] == 5
        assert r.data['counts'] == {'occupied': 1, 'unoccupied': 1, 'total': 2}

    def test_room_admission_create_uses_portal_user(self, client_for, upstream):
        upstream.add('POST', '/room-admissions', {'success': True, 'data': {'RoomAdmissionId': 7, 'BedNo': 'B1'}})
        r = client_for('doctor', upstream_user_id=3).post(reverse('room_admission_list'), {
            'patientId': 'p1', 'patientName': 'Asha', 'bedNumber': 'B1', 'admittedBy': 'Dr. Rao', 'roomBedId': 1,
        }, format='json')
        assert r.status_code == 201
        assert r.data['id'] == 7
        assert upstream.last('POST', '/room-admissions')['json']['AllocationCreatedBy'] == 3

    def test_room_capacity_stub(self, client_for, upstream, settings):
        settings.HMS_ENABLE_STUB_DATA = True
        r = client_for('doctor').get(reverse('room_capacity'))
        assert r.status_code == 200
        assert r.data[0]['roomType'] == 'Regular Ward'

    def test_icu_summary(self, client_for, upstream):
        upstream.add('GET', '/patient-icu-admissions/occupancy', {'occupied': 3, 'capacity': 8})
        upstream.add('GET', '/patient-icu-admissions/count/critical', 2)
        upstream.add('GET', '/patient-icu-admissions/count/on-ventilator', {'count': 1})
        upstream.add('GET', '/patient-icu-admissions/available-beds', {'availableBeds': 5})
        r = client_for('nurse').get(reverse('icu_summary'))
        assert r.status_code == 200
        assert r.data['criticalPatients'] == 2
        assert r.data['onVentilator'] == 1
        assert r.data['freeBedsReported'] == 5
        assert r.data['availableBeds'] == 5

    def test_icu_admission_refused_when_taken(self, client_for, upstream):
        upstream.add('GET', '/patient-icu-admissions/check-occupied', {'occupied': True})
        r = client_for('doctor').post(reverse('icu_admission_list'), {
            'patientId': 'p1', 'icuId': 2, 'icuAllocationFromDate': '2025-01-02',
        }, format='json')
        assert r.status_code == 400
        assert r.data['error']['code'] == 'invalid_request'


class TestOperationTheatre:
    def test_slot_filters(self, client_for, upstream):
        upstream.add('GET', '/ot-slots', {'success': True, 'data': [{'OTSlotId': 3, 'OTId': 2}]})
        r = client_for('doctor').get(reverse('ot_slot_list'), {'otId': 'OT-02', 'date': '2025-03-09'})
        assert r.status_code == 200
        assert r.data[0]['otSlotId'] == 'OT-02-SLOT003'
        assert upstream.last('GET', '/ot-slots')['params'] == {'otId': 2, 'date': '09-03-2025'}

    def test_slot_filter_rejects_bad_date(self, client_for, upstream):
        r = client_for('doctor').get(reverse('ot_slot_list'), {'date': '09/03/2025'})
        assert r.status_code == 400
        assert upstream.calls == []

    def test_allocation_create(self, client_for, upstream):
        upstream.add('POST', '/patient-ot-allocations', {'success': True, 'data': {
            'PatientOTAllocationId': 4, 'PatientId': 'p1', 'OperationStatus': 'Scheduled', 'Status': 'Active'}})
        r = client_for('doctor', upstream_user_id=3).post(reverse('ot_allocation_list'), {
            'patientId': 'p1', 'otId': 1, 'leadSurgeonId': 3, 'otAllocationDate': '2025-03-09',
            'otSlotIds': [1, 2],
        }, format='json')
        assert r.status_code == 201
        body = upstream.last('POST', '/patient-ot-allocations')['json']
        assert body['OTAllocationCreatedBy'] == 3
        assert body['OTSlotIds'] == [1, 2]


class TestFrontDeskAndClinic:
    APPOINTMENTS = {'success': True, 'data': [{'PatientAppointmentId': 1, 'TokenNo': 'T-0001'}]}

    @pytest.mark.parametrize('role', ['frontdesk', 'doctor'])
    def test_appointments_open_to_front_desk_and_doctors(self, client_for, upstream, role):
        upstream.add('GET', '/patient-appointments', self.APPOINTMENTS)
        r = client_for(role).get(reverse('appointment_list'))
        assert r.status_code == 200
        assert r.data['data'][0]['tokenNo'] == 'T-0001'

    def test_appointments_of_one_patient(self, client_for, upstream):
        upstream.add('GET', '/patient-appointments/patient/p1', self.APPOINTMENTS)
        r = client_for('doctor').get(reverse('patient_appointments', args=['p1']))
        assert [a['patientAppointmentId'] for a in r.data] == ['PA-1']

    def test_lab_tests_by_category(self, client_for, upstream):
        upstream.add('GET', '/lab-tests', {'data': [{'LabTestsId': 2, 'TestName': 'CBC', 'TestCategory': 'Blood'}]})
        r = client_for('lab').get(reverse('lab_test_list'), {'category': 'Blood'})
        assert r.data[0]['labTestId'] == 2
        assert upstream.last('GET', '/lab-tests')['params'] == {'category': 'Blood'}

    def test_role_create(self, client_for, upstream):
        upstream.add('POST', '/roles', {'success': True, 'data': {'RoleId': 'r-1', 'RoleName': 'Otadmin'}})
        r = client_for('admin', upstream_user_id=1).post(reverse('role_list'), {'name': 'Otadmin'}, format='json')
        assert r.status_code == 201
        assert r.data['id'] == 'r-1'
        assert upstream.last('POST', '/roles')['json'] == {'RoleName': 'Otadmin', 'CreatedBy': 1}

    def test_report(self, client_for, upstream):
        upstream.add('GET', '/room-admissions/dashboard-metrics', {'totalOccupied': 5, 'totalCapacity': 10})
        upstream.add('GET', '/room-admissions/capacity-overview', [])
        upstream.add('GET', '/patient-icu-admissions/occupancy', {'occupied': 1, 'capacity': 4})
        upstream.add('GET', '/patient-icu-admissions/count/critical', 0)
        upstream.add('GET', '/patient-icu-admissions/count/on-ventilator', 0)
        upstream.add('GET', '/patient-icu-admissions/available-beds', 3)
        upstream.add('GET', '/patient-ot-allocations', {'success': True, 'data': [
            {'PatientOTAllocationId': 1, 'OperationStatus': 'Completed', 'Status': 'Active'}]})
        upstream.add('GET', '/lab-tests', [{'LabTestsId': 1, 'TestCategory': 'Blood'}])
        r = client_for('lab').get(reverse('report_summary'))
        assert r.status_code == 200
        assert r.data['ipd']['bedOccupancy'] == 50
        assert r.data['operations']['Completed'] == 1
        assert r.data['labTests'] == {'Blood': 1}
