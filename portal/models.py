"""
Database models for the MediCare HMS portal.

Every hospital resource (patients, beds, admissions ...) lives in the
upstream HMS backend and is fetched on demand.  The only table the portal
owns is its user table, which carries the role used to gate screens.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Portal user with a single hospital role.

    Roles mirror the staff roles of the hospital: super administrators
    and administrators see every screen, the clinical and desk roles see
    the screens listed in :mod:`portal.services.navigation`.
    """
    ROLE_CHOICES = [
        ('superadmin', 'Super Administrator'),
        ('admin', 'Administrator'),
        ('doctor', 'Doctor'),
        ('nurse', 'Nurse'),
        ('frontdesk', 'Front Desk'),
        ('lab', 'Lab Technician'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='frontdesk', db_index=True)
    # Upstream UserId of the matching staff record, used as CreatedBy on writes
    upstream_user_id = models.PositiveIntegerField(null=True, blank=True)

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"
