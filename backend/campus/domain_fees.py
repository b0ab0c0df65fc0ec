from django.db import models
from django.contrib.auth.models import User
from .domain_students import Student

__all__ = ['Fee', 'FeeStatus']


class FeeStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    OVERDUE = 'overdue', 'Overdue'


class Fee(models.Model):
    id = models.BigAutoField(primary_key=True)

    student = models.ForeignKey(
        Student,
        on_delete=models.CASCADE,
        related_name='fees'
    )

    # e.g. Tuition, Hostel, Exam Fee
    fee_type = models.CharField(max_length=100)

    amount = models.DecimalField(max_digits=12, decimal_places=2)
    due_date = models.DateField(db_index=True)
    paid_date = models.DateField(null=True, blank=True)
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    status = models.CharField(
        max_length=10,
        choices=FeeStatus.choices,
        default=FeeStatus.PENDING,
        db_index=True
    )

    description = models.TextField(null=True, blank=True)
    payment_method = models.CharField(max_length=50, null=True, blank=True)
    transaction_id = models.CharField(max_length=100, null=True, blank=True)

    # Audit
    added_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='added_fees'
    )
    updated_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='updated_fees'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'fee'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['student'], name='fee_student_5e7a90_idx'),
            models.Index(fields=['status', 'due_date'], name='fee_status_2c9b41_idx'),
        ]

    def __str__(self):
        roll_number = getattr(self.student, 'roll_number', None)
        return f"{roll_number or '-'} | {self.fee_type} | {self.amount} | {self.status}"
