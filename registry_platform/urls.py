from django.contrib import admin
from django.urls import path, include

from registry.views.health import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path('health/', health_check, name='health'),
    path('api/', include('accounts.urls')),
    path('api/', include('registry.urls')),
]
