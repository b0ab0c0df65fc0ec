"""Fee status helpers shared by the fee views, dashboard and the overdue command."""
from decimal import Decimal

from django.db.models import F
from django.utils import timezone

from .domain_fees import Fee, FeeStatus


def is_fee_fully_paid(fee):
    return (fee.paid_amount or Decimal("0")) >= fee.amount


def get_remaining_amount(fee):
    return max(Decimal("0"), fee.amount - (fee.paid_amount or Decimal("0")))


def get_fee_status(fee, today=None):
    if is_fee_fully_paid(fee):
        return FeeStatus.PAID
    today = today or timezone.localdate()
    if fee.due_date and fee.due_date < today:
        return FeeStatus.OVERDUE
    return FeeStatus.PENDING


def update_overdue_fees(today=None):
    """Flip pending fees past their due date (and not fully paid) to overdue. Returns rows updated."""
    today = today or timezone.localdate()
    return Fee.objects.filter(
        status=FeeStatus.PENDING,
        due_date__lt=today,
        paid_amount__lt=F("amount"),
    ).update(status=FeeStatus.OVERDUE, updated_at=timezone.now())
