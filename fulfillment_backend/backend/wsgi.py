# backend/wsgi.py
"""
WSGI entrypoint for the fulfillment API (gunicorn backend.wsgi:application).

Falls back to dev settings; deployments set
DJANGO_SETTINGS_MODULE=backend.settings.prod, which fails closed on missing
secrets.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.dev")

application = get_wsgi_application()
