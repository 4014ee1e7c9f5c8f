"""
WSGI config for the Slotkeeper booking platform.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'slotkeeper.settings.production')

application = get_wsgi_application()
