from django.urls import path

from modules.core.views import PlatformSettingsView, health_check

urlpatterns = [
    path("health", health_check, name="health_check"),
    path("api/v1/settings", PlatformSettingsView.as_view(), name="platform_settings"),
]
