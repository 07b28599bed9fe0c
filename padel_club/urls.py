from django.contrib import admin
from django.urls import path, include
from django.conf import settings

from club.views import healthz

urlpatterns = [
    path("admin/", admin.site.urls),
    path("", include("club.urls")),
    path("healthz", healthz, name="healthz"),
]

if settings.DEBUG and "debug_toolbar" in settings.INSTALLED_APPS:
    import debug_toolbar
    urlpatterns += [
        path("__debug__/", include(debug_toolbar.urls)),
    ]
