"""Audit tables written by campus.middleware_logs."""
from django.db import models
from django.contrib.auth.models import User
from django.utils import timezone

__all__ = ['UserActivityLog', 'ErrorLog']


class AuditEntry(models.Model):
    id = models.BigAutoField(primary_key=True)
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    path = models.CharField(max_length=1000, blank=True, null=True)
    method = models.CharField(max_length=10, blank=True, null=True)
    remote_addr = models.CharField(max_length=64, blank=True, null=True)
    # JSON request body with credential keys masked
    payload = models.JSONField(blank=True, null=True)
    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']

    @property
    def actor(self):
        return self.user.username if self.user else 'Anonymous'


class UserActivityLog(AuditEntry):
    """One mutating API call (POST/PUT/PATCH/DELETE under /api/)."""
    module = models.CharField(max_length=200, blank=True, null=True)
    action = models.CharField(max_length=50, blank=True, null=True)
    status_code = models.IntegerField(blank=True, null=True)
    note = models.TextField(blank=True, null=True)

    class Meta(AuditEntry.Meta):
        db_table = 'user_activity_log'

    def __str__(self):
        return f"{self.actor} {self.method or ''} {self.path or ''} -> {self.status_code} @ {self.created_at}"


class ErrorLog(AuditEntry):
    """Unhandled exception raised while serving a request."""
    exception_type = models.CharField(max_length=200, blank=True, null=True)
    message = models.TextField(blank=True, null=True)
    stack = models.TextField(blank=True, null=True)

    class Meta(AuditEntry.Meta):
        db_table = 'error_log'

    def __str__(self):
        return f"{self.exception_type or 'Error'} by {self.actor} on {self.path or 'unknown'} @ {self.created_at}"
