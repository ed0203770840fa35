"""
WSGI config for hirenest project.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hirenest.settings')

application = get_wsgi_application()
