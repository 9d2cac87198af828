from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from ..constants import REGION_CHOICES
from .base import TimestampedModel, ceil_days, generate_record_id
from .owners import Owner
from .parcels import Parcel


def generate_dispute_id():
    return generate_record_id('DSP')


class Dispute(TimestampedModel):
    """ A legal contest over a parcel's ownership, boundaries or registration. """

    class DisputeType(models.TextChoices):
        OWNERSHIP_CLAIM = 'ownership_claim', 'Ownership claim'
        BOUNDARY_DISPUTE = 'boundary_dispute', 'Boundary dispute'
        INHERITANCE_DISPUTE = 'inheritance_dispute', 'Inheritance dispute'
        FRAUD_ALLEGATION = 'fraud_allegation', 'Fraud allegation'
        CONTRACT_BREACH = 'contract_breach', 'Contract breach'
        ZONING_VIOLATION = 'zoning_violation', 'Zoning violation'
        EASEMENT_DISPUTE = 'easement_dispute', 'Easement dispute'
        MORTGAGE_DISPUTE = 'mortgage_dispute', 'Mortgage dispute'
        REGISTRATION_ERROR = 'registration_error', 'Registration error'
        OTHER = 'other', 'Other'

    class Status(models.TextChoices):
        OPEN = 'Open', 'Open'
        INVESTIGATION = 'Investigation', 'Investigation'
        COURT = 'Court', 'Court'
        RESOLVED = 'Resolved', 'Resolved'
        WITHDRAWN = 'Withdrawn', 'Withdrawn'
        DISMISSED = 'Dismissed', 'Dismissed'

    class Priority(models.TextChoices):
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'
        CRITICAL = 'critical', 'Critical'

    class Outcome(models.TextChoices):
        CLAIMANT_FAVOR = 'claimant_favor', 'In favour of claimant'
        DEFENDANT_FAVOR = 'defendant_favor', 'In favour of defendant'
        SETTLEMENT = 'settlement', 'Settlement'
        DISMISSED = 'dismissed', 'Dismissed'
        WITHDRAWN = 'withdrawn', 'Withdrawn'

    # Statuses counted as "active" on dashboards
    ACTIVE_STATUSES = (Status.OPEN, Status.INVESTIGATION, Status.COURT)

    dispute_id = models.CharField(max_length=20, unique=True, default=generate_dispute_id)
    parcel = models.ForeignKey(Parcel, on_delete=models.PROTECT, related_name='disputes')
    claimant = models.ForeignKey(Owner, on_delete=models.PROTECT, related_name='claims_filed')
    defendant = models.ForeignKey(
        Owner, on_delete=models.PROTECT, null=True, blank=True, related_name='claims_against'
    )

    dispute_type = models.CharField(max_length=30, choices=DisputeType.choices, db_index=True)
    description = models.TextField()
    claimed_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'))

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.OPEN, db_index=True)
    priority = models.CharField(max_length=10, choices=Priority.choices, default=Priority.MEDIUM)

    filing_date = models.DateTimeField(default=timezone.now, db_index=True)
    investigation_start_date = models.DateTimeField(null=True, blank=True)
    court_filing_date = models.DateTimeField(null=True, blank=True)
    resolution_date = models.DateTimeField(null=True, blank=True)
    expected_resolution_date = models.DateTimeField(null=True, blank=True)

    court_name = models.CharField(max_length=255, blank=True)
    case_number = models.CharField(max_length=50, blank=True)
    judge = models.CharField(max_length=255, blank=True)

    resolution_outcome = models.CharField(max_length=20, choices=Outcome.choices, blank=True)
    resolution_description = models.TextField(blank=True)
    compensation_amount = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)
    terms_of_settlement = models.TextField(blank=True)

    estimated_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    actual_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))

    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='assigned_disputes'
    )
    investigator = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='investigated_disputes'
    )
    region = models.CharField(max_length=50, choices=REGION_CHOICES, db_index=True)

    internal_notes = models.TextField(blank=True)
    is_public = models.BooleanField(default=False)
    requires_mediation = models.BooleanField(default=False)
    is_urgent = models.BooleanField(default=False)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='created_disputes'
    )

    class Meta:
        ordering = ['-filing_date']
        indexes = [
            models.Index(fields=['status', 'priority'], name='dispute_status_priority_idx'),
            models.Index(fields=['region', 'status'], name='dispute_region_status_idx'),
        ]

    def __str__(self):
        return self.dispute_id

    @property
    def days_since_filing(self):
        return ceil_days(self.filing_date, timezone.now())

    def get_duration(self):
        """ Days from filing to resolution, or to now while unresolved. """
        end = self.resolution_date or timezone.now()
        return ceil_days(self.filing_date, end)


class DisputeUpdate(models.Model):
    """ Case-log entry recorded whenever a dispute changes hands or status. """
    dispute = models.ForeignKey(Dispute, on_delete=models.CASCADE, related_name='updates')
    date = models.DateTimeField(default=timezone.now)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='dispute_updates'
    )
    status_change = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['date']

    def __str__(self):
        return f"{self.dispute} {self.status_change}"
