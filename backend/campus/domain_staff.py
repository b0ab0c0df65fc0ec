"""Domain Staff Model
Employees are college staff accounts. Each one is backed by an auth user
(username = email) so staff sign in through the same JWT token endpoint.
"""
from django.contrib.auth.models import User
from django.db import models
from .domain_core import Department

__all__ = ['Employee']


class Employee(models.Model):
    id = models.BigAutoField(primary_key=True)
    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='employee'
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255, unique=True)
    departments = models.ManyToManyField(Department, blank=True, related_name='employees')

    # stored for display; request handling does not consult them
    student_management = models.BooleanField(default=False)
    fee_management = models.BooleanField(default=False)

    added_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='added_employees'
    )
    date_of_adding = models.DateTimeField(auto_now_add=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'employee'
        ordering = ['-created_at', '-id']

    def save(self, *args, **kwargs):
        self.email = (self.email or '').strip().lower()
        super().save(*args, **kwargs)

    @property
    def display_permissions(self):
        labels = []
        if self.student_management:
            labels.append('Student Management')
        if self.fee_management:
            labels.append('Fee Management')
        return ', '.join(labels) if labels else 'No Permissions'

    def __str__(self):
        return f"{self.name} <{self.email}>"
