"""
WSGI config for rewearBackend project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "rewearBackend.settings")

application = get_wsgi_application()
