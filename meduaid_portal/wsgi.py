"""
WSGI config for meduaid_portal.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'meduaid_portal.settings')

application = get_wsgi_application()
