"""
Root URL configuration for the MeduAid QB Portal.
"""
from django.conf import settings
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Secret admin URL – path driven entirely by SECRET_ADMIN_URL in .env
    path(f"{settings.SECRET_ADMIN_URL}/", admin.site.urls),
    path('api/auth/', include('core.urls')),
    path('api/', include('portal.api_urls')),
]

# Custom error handlers
handler404 = 'core.error_handlers.handler404'
handler500 = 'core.error_handlers.handler500'
handler403 = 'core.error_handlers.handler403'
handler400 = 'core.error_handlers.handler400'
