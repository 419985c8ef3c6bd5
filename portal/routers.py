"""
URL mappings for the portal API.

Every resource path mirrors the upstream resource it proxies.  Trailing
slashes are deliberately omitted (``APPEND_SLASH`` is off).
"""
from django.urls import path, include

from .auth_views import login_view, me_view
from .views import (
    admissions, appointments, dashboard, emergency, health, icu, laboratory, navigation, ot, ot_rooms, patients,
    reports, roles, room_beds, staff,
)
from .views.departments import departments, department_detail


urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Auth
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/me', me_view, name='me_view'),
    path('api/navigation', navigation.navigation, name='navigation'),

    # Dashboard
    path('api/dashboard', dashboard.dashboard_overview, name='dashboard'),
    path('api/dashboard/stats', dashboard.dashboard_stats, name='dashboard_stats'),
    path('api/dashboard/opd-flow', dashboard.dashboard_opd_flow, name='dashboard_opd_flow'),
    path('api/dashboard/room-distribution', dashboard.dashboard_room_distribution,
         name='dashboard_room_distribution'),
    path('api/dashboard/doctor-queue', dashboard.dashboard_doctor_queue, name='dashboard_doctor_queue'),

    # Patients
    path('api/patients', patients.patient_list, name='patient_list'),
    path('api/patients/lookup', patients.patient_lookup, name='patient_lookup'),
    path('api/patients/<str:patient_id>', patients.patient_detail, name='patient_detail'),
    path('api/patients/<str:patient_id>/follow-up', patients.patient_follow_up, name='patient_follow_up'),

    # Staff & departments
    path('api/staff', staff.staff_list, name='staff_list'),
    path('api/staff/<int:user_id>', staff.staff_detail, name='staff_detail'),
    path('api/departments', departments, name='departments'),
    path('api/departments/<int:department_id>', department_detail, name='department_detail'),

    # Emergency beds & slots
    path('api/emergency-beds', emergency.bed_list, name='emergency_bed_list'),
    path('api/emergency-beds/board', emergency.bed_board, name='emergency_bed_board'),
    path('api/emergency-beds/<int:bed_id>', emergency.bed_detail, name='emergency_bed_detail'),
    path('api/emergency-beds/<int:bed_id>/slots', emergency.bed_slots, name='emergency_bed_slots'),
    path('api/emergency-bed-slots', emergency.slot_list, name='emergency_slot_list'),
    path('api/emergency-bed-slots/<int:slot_id>', emergency.slot_detail, name='emergency_slot_detail'),

    # Emergency admissions & vitals
    path('api/emergency-admissions', emergency.admission_list, name='emergency_admission_list'),
    path('api/emergency-admissions/<int:admission_id>', emergency.admission_detail,
         name='emergency_admission_detail'),
    path('api/emergency-admissions/<int:admission_id>/vitals', emergency.vitals_list, name='vitals_list'),
    path('api/emergency-admissions/<int:admission_id>/vitals/<int:vitals_id>', emergency.vitals_detail,
         name='vitals_detail'),
    path('api/emergency/overview', emergency.emergency_overview, name='emergency_overview'),

    # ICU
    path('api/icu-beds', icu.icu_bed_list, name='icu_bed_list'),
    path('api/icu-beds/occupancy', icu.icu_occupancy, name='icu_occupancy'),
    path('api/icu-beds/<int:icu_bed_id>', icu.icu_bed_detail, name='icu_bed_detail'),
    path('api/icu/admissions', icu.icu_admission_list, name='icu_admission_list'),
    path('api/icu/bed-layout', icu.icu_bed_layout, name='icu_bed_layout'),
    path('api/icu/bed-layout/<int:icu_bed_id>', icu.icu_bed_layout_detail, name='icu_bed_layout_detail'),
    path('api/icu/summary', icu.icu_summary, name='icu_summary'),

    # IPD room beds
    path('api/room-beds', room_beds.room_bed_list, name='room_bed_list'),
    path('api/room-beds/<int:room_bed_id>', room_beds.room_bed_detail, name='room_bed_detail'),

    # IPD room admissions
    path('api/room-admissions', admissions.room_admission_list, name='room_admission_list'),
    path('api/room-admissions/bed-board', admissions.room_bed_board, name='room_bed_board'),
    path('api/room-admissions/capacity', admissions.room_capacity, name='room_capacity'),
    path('api/room-admissions/metrics', admissions.room_admission_metrics, name='room_admission_metrics'),
    path('api/room-admissions/<int:admission_id>', admissions.room_admission_detail, name='room_admission_detail'),

    # OT rooms
    path('api/ot-rooms', ot_rooms.ot_room_list, name='ot_room_list'),
    path('api/ot-rooms/<int:ot_id>', ot_rooms.ot_room_detail, name='ot_room_detail'),

    # OT scheduling
    path('api/ot-slots', ot.ot_slot_list, name='ot_slot_list'),
    path('api/ot-slots/<int:slot_id>', ot.ot_slot_detail, name='ot_slot_detail'),
    path('api/ot-allocations', ot.ot_allocation_list, name='ot_allocation_list'),
    path('api/ot-allocations/<int:allocation_id>', ot.ot_allocation_detail, name='ot_allocation_detail'),

    # Appointments, laboratory, roles & reports
    path('api/appointments', appointments.appointment_list, name='appointment_list'),
    path('api/appointments/<int:appointment_id>', appointments.appointment_detail, name='appointment_detail'),
    path('api/patients/<str:patient_id>/appointments', appointments.patient_appointments,
         name='patient_appointments'),
    path('api/lab-tests', laboratory.lab_test_list, name='lab_test_list'),
    path('api/lab-tests/<int:lab_test_id>', laboratory.lab_test_detail, name='lab_test_detail'),
    path('api/roles', roles.role_list, name='role_list'),
    path('api/roles/<str:role_id>', roles.role_detail, name='role_detail'),
    path('api/reports', reports.report_summary, name='report_summary'),
]
