from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from ..constants import DEFAULT_TRANSFER_TAX_RATE, REGION_CHOICES
from .base import TimestampedModel, ceil_days, generate_record_id
from .owners import Owner
from .parcels import Parcel


def generate_transfer_id():
    return generate_record_id('TRF')


class OwnershipHistory(TimestampedModel):
    """ One link in a parcel's chain of title. """

    class TransactionType(models.TextChoices):
        PURCHASE = 'purchase', 'Purchase'
        SALE = 'sale', 'Sale'
        INHERITANCE = 'inheritance', 'Inheritance'
        GIFT = 'gift', 'Gift'
        EXPROPRIATION = 'expropriation', 'Expropriation'
        COURT_ORDER = 'court_order', 'Court order'
        RESTITUTION = 'restitution', 'Restitution'
        MERGER = 'merger', 'Merger'
        DIVISION = 'division', 'Division'
        INITIAL_REGISTRATION = 'initial_registration', 'Initial registration'
        CORRECTION = 'correction', 'Correction'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'
        UNDER_REVIEW = 'under_review', 'Under review'

    parcel = models.ForeignKey(Parcel, on_delete=models.CASCADE, related_name='ownership_history')
    previous_owner = models.ForeignKey(
        Owner, on_delete=models.PROTECT, null=True, blank=True, related_name='ownership_given'
    )
    new_owner = models.ForeignKey(Owner, on_delete=models.PROTECT, related_name='ownership_received')

    transaction_type = models.CharField(max_length=30, choices=TransactionType.choices)
    transaction_date = models.DateTimeField()
    registration_date = models.DateTimeField(default=timezone.now)
    transaction_value = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'))
    tax_paid = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'))
    legal_basis = models.CharField(max_length=255)
    contract_number = models.CharField(max_length=50, blank=True)
    notary_id = models.CharField(max_length=50, blank=True)
    court_decision_number = models.CharField(max_length=50, blank=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='approved_ownership_records'
    )
    approval_date = models.DateTimeField(null=True, blank=True)
    approval_notes = models.TextField(blank=True)
    rejection_reason = models.TextField(blank=True)

    blockchain_hash = models.CharField(max_length=128, blank=True, db_index=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='created_ownership_records'
    )

    is_fraudulent = models.BooleanField(default=False)
    fraud_detection_date = models.DateTimeField(null=True, blank=True)
    fraud_notes = models.TextField(blank=True)
    notes = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ['-transaction_date']
        verbose_name_plural = "Ownership history"
        indexes = [
            models.Index(fields=['parcel', '-transaction_date'], name='history_parcel_date_idx'),
            models.Index(fields=['transaction_type', 'status'], name='history_type_status_idx'),
        ]

    def __str__(self):
        return f"{self.parcel} {self.transaction_type} {self.transaction_date:%Y-%m-%d}"

    def mark_as_fraudulent(self, reason):
        self.is_fraudulent = True
        self.fraud_detection_date = timezone.now()
        self.fraud_notes = reason
        self.status = self.Status.REJECTED
        self.save()


class Transfer(TimestampedModel):
    """
    An application to move a parcel from seller to buyer.

    Status flow: initiated -> pending_approval -> approved -> completed,
    with rejected and cancelled as terminal exits.
    """

    class TransferType(models.TextChoices):
        SALE = 'sale', 'Sale'
        GIFT = 'gift', 'Gift'
        INHERITANCE = 'inheritance', 'Inheritance'
        EXCHANGE = 'exchange', 'Exchange'
        EXPROPRIATION = 'expropriation', 'Expropriation'
        COURT_ORDER = 'court_order', 'Court order'
        OTHER = 'other', 'Other'

    class Status(models.TextChoices):
        INITIATED = 'initiated', 'Initiated'
        PENDING_APPROVAL = 'pending_approval', 'Pending approval'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    class PaymentStatus(models.TextChoices):
        UNPAID = 'unpaid', 'Unpaid'
        PARTIAL = 'partial', 'Partial'
        PAID = 'paid', 'Paid'
        REFUNDED = 'refunded', 'Refunded'

    class PaymentMethod(models.TextChoices):
        BANK_TRANSFER = 'bank_transfer', 'Bank transfer'
        CASH = 'cash', 'Cash'
        CHECK = 'check', 'Check'
        ESCROW = 'escrow', 'Escrow'
        OTHER = 'other', 'Other'

    class ProcessingStage(models.TextChoices):
        DOCUMENT_SUBMISSION = 'document_submission', 'Document submission'
        DOCUMENT_VERIFICATION = 'document_verification', 'Document verification'
        LEGAL_REVIEW = 'legal_review', 'Legal review'
        TAX_ASSESSMENT = 'tax_assessment', 'Tax assessment'
        APPROVAL_PENDING = 'approval_pending', 'Approval pending'
        REGISTRATION = 'registration', 'Registration'
        COMPLETED = 'completed', 'Completed'

    transfer_id = models.CharField(max_length=20, unique=True, default=generate_transfer_id)
    parcel = models.ForeignKey(Parcel, on_delete=models.PROTECT, related_name='transfers')
    ownership_history = models.OneToOneField(
        OwnershipHistory, on_delete=models.SET_NULL, null=True, blank=True, related_name='transfer'
    )
    seller = models.ForeignKey(Owner, on_delete=models.PROTECT, related_name='sales')
    buyer = models.ForeignKey(Owner, on_delete=models.PROTECT, related_name='purchases')

    transfer_type = models.CharField(max_length=20, choices=TransferType.choices)
    transfer_status = models.CharField(max_length=20, choices=Status.choices, default=Status.INITIATED, db_index=True)

    # Prices (EUR)
    agreed_price = models.DecimalField(max_digits=16, decimal_places=2)
    registered_price = models.DecimalField(max_digits=16, decimal_places=2)
    market_value = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)
    transfer_tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=DEFAULT_TRANSFER_TAX_RATE, help_text="Percent")
    transfer_tax_amount = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)
    registration_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    notary_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    total_fees = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'))

    payment_status = models.CharField(max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.UNPAID)
    payment_date = models.DateTimeField(null=True, blank=True)
    payment_method = models.CharField(max_length=20, choices=PaymentMethod.choices, blank=True)

    contract_date = models.DateTimeField()
    contract_number = models.CharField(max_length=50)
    notary_id = models.CharField(max_length=50, blank=True)
    notary_name = models.CharField(max_length=255, blank=True)
    notarization_date = models.DateTimeField(null=True, blank=True)

    application_date = models.DateTimeField(default=timezone.now, db_index=True)
    approval_date = models.DateTimeField(null=True, blank=True)
    registration_date = models.DateTimeField(null=True, blank=True)
    completion_date = models.DateTimeField(null=True, blank=True)
    expected_completion_date = models.DateTimeField(null=True, blank=True)

    processing_stage = models.CharField(
        max_length=30, choices=ProcessingStage.choices, default=ProcessingStage.DOCUMENT_SUBMISSION
    )
    assigned_officer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='assigned_transfers'
    )
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='reviewed_transfers'
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='approved_transfers'
    )

    encumbrances_checked = models.BooleanField(default=False)
    encumbrances_cleared = models.BooleanField(default=False)

    region = models.CharField(max_length=50, choices=REGION_CHOICES, db_index=True)
    registry_office = models.CharField(max_length=100)
    blockchain_hash = models.CharField(max_length=128, blank=True)

    rejection_reason = models.TextField(blank=True)
    rejection_date = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True)
    cancellation_date = models.DateTimeField(null=True, blank=True)

    processing_time = models.PositiveIntegerField(null=True, blank=True, help_text="Days from application to completion")
    is_priority = models.BooleanField(default=False)
    requires_additional_review = models.BooleanField(default=False)
    is_suspicious = models.BooleanField(default=False, db_index=True)
    suspicious_flags = models.JSONField(default=list, blank=True)

    processing_notes = models.TextField(blank=True)
    internal_notes = models.TextField(blank=True)
    public_notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='created_transfers'
    )

    class Meta:
        ordering = ['-application_date']
        indexes = [
            models.Index(fields=['transfer_status', 'region'], name='transfer_status_region_idx'),
            models.Index(fields=['processing_stage'], name='transfer_stage_idx'),
        ]

    def __str__(self):
        return self.transfer_id

    def save(self, *args, **kwargs):
        self.total_fees = (
            (self.transfer_tax_amount or Decimal('0'))
            + (self.registration_fee or Decimal('0'))
            + (self.notary_fee or Decimal('0'))
        )
        if self.completion_date and self.application_date:
            self.processing_time = ceil_days(self.application_date, self.completion_date)
        super().save(*args, **kwargs)

    def calculate_transfer_tax(self):
        if self.transfer_tax_rate and self.registered_price:
            self.transfer_tax_amount = (
                Decimal(self.registered_price) * Decimal(self.transfer_tax_rate) / Decimal('100')
            ).quantize(Decimal('0.01'))
        return self.transfer_tax_amount
