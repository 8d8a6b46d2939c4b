"""Top-level package for Django configuration.

Contains the settings modules for each environment, the URL configuration
and the WSGI/ASGI entry points of the TripNest platform.
"""

# Import the Celery application as soon as Django starts. Without this
# the shared task registry will not be populated.
from .celery import app as celery_app  # noqa: F401
