"""
Role-gated navigation.

``SCREENS`` is the sidebar in display order.  Each portal API endpoint is
gated by one screen key (see ``portal.permissions``), so the list a user
sees and the endpoints they may call always agree.
"""
from __future__ import annotations

SCREENS = (
    ('dashboard', '/dashboard', 'Dashboard'),
    ('frontdesk', '/frontdesk', 'Front Desk'),
    ('patient-registration', '/patient-registration', 'Patient Registration'),
    ('consultation', '/consultation', 'Doctor Consultation'),
    ('laboratory', '/laboratory', 'Laboratory'),
    ('emergency', '/emergency', 'Emergency'),
    ('admissions', '/admissions', 'Admissions (IPD)'),
    ('ot', '/ot', 'OT Management'),
    ('ot-rooms', '/ot-rooms', 'OT Rooms Management'),
    ('icu', '/icu', 'ICU Management'),
    ('reports', '/reports', 'Reports'),
    ('roles', '/roles', 'Roles'),
    ('departments', '/departments', 'Departments'),
    ('staff', '/staff', 'Staff'),
    ('room-beds', '/room-beds', 'IPD Beds & Rooms'),
    ('icu-beds', '/icu-beds', 'ICU Bed Management'),
    ('emergency-beds', '/emergency-beds', 'Emergency Bed Management'),
)

SCREEN_KEYS = tuple(key for key, _, _ in SCREENS)
ALL_SCREENS = frozenset(SCREEN_KEYS)

ROLE_SCREENS = {
    'superadmin': ALL_SCREENS,
    'admin': ALL_SCREENS,
    'doctor': frozenset({
        'dashboard', 'patient-registration', 'consultation', 'laboratory', 'emergency',
        'admissions', 'ot', 'icu', 'reports',
    }),
    'nurse': frozenset({
        'dashboard', 'emergency', 'admissions', 'icu', 'room-beds', 'icu-beds', 'emergency-beds',
    }),
    'frontdesk': frozenset({
        'dashboard', 'frontdesk', 'patient-registration', 'emergency',
    }),
    'lab': frozenset({
        'dashboard', 'laboratory', 'reports',
    }),
}


def allowed_screens(role) -> frozenset:
    return ROLE_SCREENS.get(role, frozenset())


def can_access(role, screen: str) -> bool:
    return screen in allowed_screens(role)


def navigation_for(role) -> list[dict]:
    """Sidebar entries for ``role``, in display order; unknown roles get none."""
    allowed = allowed_screens(role)
    return [{'key': key, 'path': path, 'label': label} for key, path, label in SCREENS if key in allowed]
