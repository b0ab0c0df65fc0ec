"""Domain Student Model
The roll number is the natural key used by bulk imports to match existing rows.
"""
from django.contrib.auth.models import User
from django.db import models
from .domain_core import Department, Speciality

__all__ = ['Student', 'FEE_COMPONENT_FIELDS']

# Breakdown columns that add up (loosely) to total_fee
FEE_COMPONENT_FIELDS = (
    'tuition_fee',
    'hostel_fee',
    'security_fee',
    'miscellaneous_fee',
    'ac_charge',
)


class Student(models.Model):
    id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=255)
    roll_number = models.CharField(max_length=100, unique=True, db_index=True)
    section = models.CharField(max_length=50, blank=True, default='')
    phone = models.CharField(max_length=50)
    email = models.CharField(max_length=255, blank=True, default='')
    address = models.TextField(blank=True, default='')
    parent_name = models.CharField(max_length=255)
    parent_phone = models.CharField(max_length=50)
    admission_date = models.DateField()
    date_of_birth = models.DateField(null=True, blank=True)

    department = models.ForeignKey(Department, on_delete=models.PROTECT, related_name='students')
    speciality = models.ForeignKey(
        Speciality,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='students'
    )

    # Fees
    total_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    fee_type = models.CharField(max_length=50, default='Annual')
    tuition_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    hostel_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    security_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    miscellaneous_fee = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    ac_charge = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    is_active = models.BooleanField(default=True)

    # Audit
    added_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='added_students'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'student'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['department'], name='student_departm_3b1f2e_idx'),
            models.Index(fields=['is_active'], name='student_is_acti_8c4d1a_idx'),
        ]

    def __str__(self):
        return f"{self.roll_number} - {self.name}"
