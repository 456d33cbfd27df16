"""Top-level package for Django configuration.

Holds the settings modules for each environment and the WSGI/ASGI entry
points of the hotel calendar engine.
"""

# Import the Celery application as soon as Django starts so that the
# shared task registry is populated.
from .celery import app as celery_app  # noqa: F401
