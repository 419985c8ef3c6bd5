"""
ASGI config for the MediCare HMS portal.

The portal serves plain HTTP only; this module exists so the project can
run under an ASGI server such as uvicorn or daphne.
"""
import os

from django.core.asgi import get_asgi_application  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "medicare.settings")

application = get_asgi_application()
