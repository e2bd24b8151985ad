from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),

    # --- Authentication & profile ---
    path('api/', include('users.urls')),

    # --- Attempts, answers & evaluation ---
    path('api/', include('assessments.urls')),

    # --- Admin audit trail ---
    path('api/', include('cores.urls')),
]
