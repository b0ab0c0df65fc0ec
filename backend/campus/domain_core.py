"""Domain Core Models
Contains the academic structure: Department and Speciality.
"""
from django.db import models

__all__ = [
    'Department', 'Speciality'
]


class Department(models.Model):
    id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'department'
        ordering = ['name']

    def __str__(self):
        return self.name


class Speciality(models.Model):
    id = models.BigAutoField(primary_key=True)
    name = models.CharField(max_length=255)
    department = models.ForeignKey(Department, on_delete=models.CASCADE, related_name='specialities')
    total_seats = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'speciality'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(fields=['name', 'department'], name='uniq_speciality_per_department'),
        ]

    def __str__(self):
        return f"{self.name} ({self.department.name})"
