"""Portal application for the MediCare HMS.

This package contains the upstream API adapters, the derived-state
services, and the role-gated views and routes consumed by the
front-end application.
"""
