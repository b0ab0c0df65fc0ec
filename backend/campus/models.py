"""Model registry for the campus app.

Models live in the domain_* modules; this module re-exports them so Django
discovers them and callers can keep using ``from campus.models import ...``.
"""
from .domain_core import Department, Speciality
from .domain_students import Student, FEE_COMPONENT_FIELDS
from .domain_fees import Fee, FeeStatus
from .domain_logs import UserActivityLog, ErrorLog
from .domain_staff import Employee

__all__ = [
    'Department', 'Speciality', 'Student', 'FEE_COMPONENT_FIELDS',
    'Fee', 'FeeStatus', 'UserActivityLog', 'ErrorLog', 'Employee',
]
