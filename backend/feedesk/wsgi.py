"""WSGI config for the feedesk project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "feedesk.settings")

application = get_wsgi_application()
