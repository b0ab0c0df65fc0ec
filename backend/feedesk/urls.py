"""Root URL configuration for the fee desk project."""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

admin.site.site_header = "Fee Desk administration"
admin.site.site_title = "Fee Desk"

urlpatterns = [
    path("", RedirectView.as_view(url="/api/", permanent=False)),
    path("admin/", admin.site.urls),
    path("api/", include("campus.urls")),
]
