"""
WSGI config for the Salon Booking core.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'salonbook.settings.production')

application = get_wsgi_application()
