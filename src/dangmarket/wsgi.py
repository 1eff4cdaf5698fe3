"""WSGI config for the Dang Market storefront."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "dangmarket.settings.prod")

application = get_wsgi_application()
