"""
File: backend/campus/urls.py
API routing configuration.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

from .views_academics import DepartmentViewSet, SpecialityViewSet
from .views_fees import FeeViewSet, DashboardView
from .views_staff import EmployeeViewSet
from .views_students import StudentViewSet

# ---------------------------------------------
# ROUTER REGISTRATIONS
# ---------------------------------------------

router = DefaultRouter()
router.register(r'departments', DepartmentViewSet, basename='departments')
router.register(r'specialities', SpecialityViewSet, basename='specialities')
router.register(r'students', StudentViewSet, basename='students')
router.register(r'fees', FeeViewSet, basename='fees')
router.register(r'employees', EmployeeViewSet, basename='employees')

urlpatterns = [
    # --- AUTH (JWT) ---
    path('token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('token/verify/', TokenVerifyView.as_view(), name='token_verify'),

    # --- DASHBOARD ---
    path('dashboard/', DashboardView.as_view(), name='dashboard'),

    path('', include(router.urls)),
]
