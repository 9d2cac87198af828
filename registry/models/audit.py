import logging
import random
import time
from datetime import timedelta

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models, transaction
from django.db.models import Q
from django.utils import timezone

from ..constants import AUDIT_RETENTION_DAYS, REGION_CHOICES

logger = logging.getLogger(__name__)


class ImmutableAuditLogError(Exception):
    """Raised on any attempt to rewrite or delete an audit entry."""


def generate_event_id():
    return f"AUD-{timezone.now().year}-{int(time.time() * 1000)}{random.randint(0, 9999):04d}"


class AuditLogManager(models.Manager):

    def log_event(self, **event_data):
        """
        Append an audit entry. Never raises: a failure is logged and None returned
        so the operation being audited is not rolled back.
        """
        try:
            with transaction.atomic():
                event_data.setdefault("timestamp", timezone.now())
                return self.create(event_id=generate_event_id(), **event_data)
        except Exception:
            logger.exception(f"Error creating audit log for event {event_data.get('event_type')}")
            return None

    def find_by_date_range(self, start, end, **filters):
        return self.filter(timestamp__gte=start, timestamp__lte=end, **filters).order_by('-timestamp')

    def find_suspicious(self, days=30):
        since = timezone.now() - timedelta(days=days)
        return self.filter(
            Q(suspicious_activity=True) | Q(fraud_indicator=True) | Q(severity=AuditLog.Severity.CRITICAL),
            timestamp__gte=since,
        ).order_by('-timestamp')


class AuditLog(models.Model):
    """
    Append-only compliance trail. Only the review fields may change after
    an entry is written, and entries are never deleted.
    """

    class EventType(models.TextChoices):
        PARCEL_CREATED = 'parcel_created', 'Parcel created'
        PARCEL_UPDATED = 'parcel_updated', 'Parcel updated'
        PARCEL_DELETED = 'parcel_deleted', 'Parcel deleted'
        OWNERSHIP_TRANSFERRED = 'ownership_transferred', 'Ownership transferred'
        TRANSFER_APPROVED = 'transfer_approved', 'Transfer approved'
        TRANSFER_REJECTED = 'transfer_rejected', 'Transfer rejected'
        DISPUTE_FILED = 'dispute_filed', 'Dispute filed'
        DISPUTE_RESOLVED = 'dispute_resolved', 'Dispute resolved'
        MORTGAGE_CREATED = 'mortgage_created', 'Mortgage created'
        MORTGAGE_UPDATED = 'mortgage_updated', 'Mortgage updated'
        PAYMENT_RECORDED = 'payment_recorded', 'Payment recorded'
        USER_LOGIN = 'user_login', 'User login'
        USER_LOGOUT = 'user_logout', 'User logout'
        USER_CREATED = 'user_created', 'User created'
        USER_UPDATED = 'user_updated', 'User updated'
        PERMISSION_CHANGED = 'permission_changed', 'Permission changed'
        FRAUD_DETECTED = 'fraud_detected', 'Fraud detected'
        BLOCKCHAIN_RECORDED = 'blockchain_recorded', 'Blockchain recorded'
        REPORT_GENERATED = 'report_generated', 'Report generated'
        DOCUMENT_UPLOADED = 'document_uploaded', 'Document uploaded'
        DOCUMENT_VERIFIED = 'document_verified', 'Document verified'
        SYSTEM_CONFIGURATION = 'system_configuration', 'System configuration'
        DATA_EXPORT = 'data_export', 'Data export'
        DATA_IMPORT = 'data_import', 'Data import'
        BACKUP_CREATED = 'backup_created', 'Backup created'
        OTHER = 'other', 'Other'

    class TargetModel(models.TextChoices):
        PARCEL = 'Parcel', 'Parcel'
        OWNER = 'Owner', 'Owner'
        OWNERSHIP_HISTORY = 'OwnershipHistory', 'Ownership history'
        TRANSFER = 'Transfer', 'Transfer'
        DISPUTE = 'Dispute', 'Dispute'
        MORTGAGE = 'Mortgage', 'Mortgage'
        SUBSIDY = 'Subsidy', 'Subsidy'
        USER = 'User', 'User'
        SYSTEM = 'System', 'System'

    class Status(models.TextChoices):
        SUCCESS = 'success', 'Success'
        FAILURE = 'failure', 'Failure'
        PARTIAL = 'partial', 'Partial'
        WARNING = 'warning', 'Warning'

    class Severity(models.TextChoices):
        INFO = 'info', 'Info'
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'
        CRITICAL = 'critical', 'Critical'

    class RiskLevel(models.TextChoices):
        NONE = 'none', 'None'
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'

    REVIEW_FIELDS = ('is_reviewed', 'reviewed_by', 'review_date', 'review_notes')

    event_id = models.CharField(max_length=40, unique=True, default=generate_event_id)
    event_type = models.CharField(max_length=30, choices=EventType.choices, db_index=True)
    action = models.CharField(max_length=500)

    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='audit_events'
    )
    user_role = models.CharField(max_length=20, blank=True)

    target_model = models.CharField(max_length=20, choices=TargetModel.choices)
    target_id = models.CharField(max_length=64, blank=True)
    target_description = models.CharField(max_length=255, blank=True)

    changes = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder, help_text="{'before': {...}, 'after': {...}}")
    fields_changed = models.JSONField(default=list, blank=True)

    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=255, blank=True)
    region = models.CharField(max_length=50, choices=REGION_CHOICES, blank=True, db_index=True)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.SUCCESS)
    error_message = models.TextField(blank=True)
    severity = models.CharField(max_length=10, choices=Severity.choices, default=Severity.INFO, db_index=True)

    fraud_indicator = models.BooleanField(default=False)
    suspicious_activity = models.BooleanField(default=False)
    risk_level = models.CharField(max_length=10, choices=RiskLevel.choices, default=RiskLevel.NONE)

    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    metadata = models.JSONField(default=dict, blank=True, encoder=DjangoJSONEncoder)

    is_reviewed = models.BooleanField(default=False)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='reviewed_audit_events'
    )
    review_date = models.DateTimeField(null=True, blank=True)
    review_notes = models.TextField(blank=True)

    retention_period = models.PositiveIntegerField(default=AUDIT_RETENTION_DAYS, help_text="Days")
    expiry_date = models.DateTimeField(null=True, blank=True)
    is_archived = models.BooleanField(default=False)

    objects = AuditLogManager()

    class Meta:
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['event_type', 'region', '-timestamp'], name='audit_type_region_time_idx'),
            models.Index(fields=['performed_by', 'event_type', '-timestamp'], name='audit_actor_type_time_idx'),
        ]

    def __str__(self):
        return f"{self.event_id} {self.event_type}"

    def save(self, *args, **kwargs):
        if self.pk is not None and not self._state.adding:
            update_fields = kwargs.get('update_fields')
            if not update_fields or not set(update_fields) <= set(self.REVIEW_FIELDS):
                raise ImmutableAuditLogError("Audit log entries cannot be modified")
        if not self.expiry_date and self.retention_period:
            self.expiry_date = self.timestamp + timedelta(days=self.retention_period)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableAuditLogError("Audit log entries cannot be deleted")

    def mark_reviewed(self, user, notes=''):
        self.is_reviewed = True
        self.reviewed_by = user
        self.review_date = timezone.now()
        self.review_notes = notes
        self.save(update_fields=list(self.REVIEW_FIELDS))
