import logging
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.conf import settings
from django.db import models, transaction
from django.utils import timezone

from ..constants import REGION_CHOICES
from .base import TimestampedModel, generate_record_id
from .owners import Owner
from .parcels import Parcel

logger = logging.getLogger(__name__)


def generate_mortgage_id():
    return generate_record_id('MTG')


class Mortgage(TimestampedModel):
    """ A lien registered against a parcel, with its repayment schedule. """

    class LenderType(models.TextChoices):
        BANK = 'bank', 'Bank'
        CREDIT_UNION = 'credit_union', 'Credit union'
        PRIVATE_LENDER = 'private_lender', 'Private lender'
        GOVERNMENT = 'government', 'Government'
        OTHER = 'other', 'Other'

    class MortgageType(models.TextChoices):
        RESIDENTIAL = 'residential', 'Residential'
        COMMERCIAL = 'commercial', 'Commercial'
        AGRICULTURAL = 'agricultural', 'Agricultural'
        CONSTRUCTION = 'construction', 'Construction'
        REFINANCE = 'refinance', 'Refinance'

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        PAID_OFF = 'paid_off', 'Paid off'
        DEFAULTED = 'defaulted', 'Defaulted'
        FORECLOSED = 'foreclosed', 'Foreclosed'
        SUSPENDED = 'suspended', 'Suspended'
        CANCELLED = 'cancelled', 'Cancelled'

    class InterestType(models.TextChoices):
        FIXED = 'fixed', 'Fixed'
        VARIABLE = 'variable', 'Variable'
        MIXED = 'mixed', 'Mixed'

    class RiskRating(models.TextChoices):
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'
        VERY_HIGH = 'very_high', 'Very high'

    mortgage_id = models.CharField(max_length=20, unique=True, default=generate_mortgage_id)
    parcel = models.ForeignKey(Parcel, on_delete=models.PROTECT, related_name='mortgages')
    borrower = models.ForeignKey(Owner, on_delete=models.PROTECT, related_name='mortgages')

    lender_name = models.CharField(max_length=255, db_index=True)
    lender_type = models.CharField(max_length=20, choices=LenderType.choices)
    lender_registration_number = models.CharField(max_length=50, blank=True)

    mortgage_type = models.CharField(max_length=20, choices=MortgageType.choices)
    mortgage_status = models.CharField(max_length=20, choices=Status.choices, default=Status.ACTIVE, db_index=True)

    principal_amount = models.DecimalField(max_digits=16, decimal_places=2)
    outstanding_balance = models.DecimalField(max_digits=16, decimal_places=2)
    interest_rate = models.DecimalField(max_digits=5, decimal_places=2, help_text="Percent per year")
    interest_type = models.CharField(max_length=10, choices=InterestType.choices, default=InterestType.FIXED)
    term_years = models.PositiveIntegerField(null=True, blank=True)
    term_months = models.PositiveIntegerField(null=True, blank=True)
    monthly_payment = models.DecimalField(max_digits=12, decimal_places=2)

    origination_date = models.DateTimeField(db_index=True)
    maturity_date = models.DateTimeField()
    registration_date = models.DateTimeField(default=timezone.now)
    last_payment_date = models.DateTimeField(null=True, blank=True)
    next_payment_due_date = models.DateTimeField(null=True, blank=True, db_index=True)

    total_paid = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'))
    total_interest_paid = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'))
    is_current_on_payments = models.BooleanField(default=True)
    days_past_due = models.PositiveIntegerField(default=0)
    missed_payments = models.PositiveIntegerField(default=0)
    default_date = models.DateTimeField(null=True, blank=True)
    default_reason = models.TextField(blank=True)

    property_value_at_origination = models.DecimalField(max_digits=16, decimal_places=2)
    current_property_value = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)
    loan_to_value_ratio = models.DecimalField(max_digits=6, decimal_places=2, help_text="Percent")

    mortgage_deed_number = models.CharField(max_length=50)
    lien_priority = models.PositiveSmallIntegerField(default=1, help_text="1 = first mortgage, 2 = second, ...")
    region = models.CharField(max_length=50, choices=REGION_CHOICES, db_index=True)
    registry_office = models.CharField(max_length=100, blank=True)

    risk_rating = models.CharField(max_length=10, choices=RiskRating.choices, default=RiskRating.LOW)
    risk_factors = models.JSONField(default=list, blank=True)
    is_under_review = models.BooleanField(default=False)
    requires_action = models.BooleanField(default=False)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='created_mortgages'
    )

    class Meta:
        ordering = ['-origination_date']
        indexes = [
            models.Index(fields=['region', 'mortgage_status'], name='mortgage_region_status_idx'),
        ]

    def __str__(self):
        return self.mortgage_id

    @property
    def remaining_months(self):
        if not self.maturity_date:
            return 0
        days = (self.maturity_date - timezone.now()).total_seconds() / 86400
        return max(0, int(days // 30))

    def update_payment_status(self, now=None):
        if not self.next_payment_due_date:
            return
        now = now or timezone.now()
        days_late = int((now - self.next_payment_due_date).total_seconds() // 86400)
        if days_late > 0:
            self.is_current_on_payments = False
            self.days_past_due = days_late
        else:
            self.is_current_on_payments = True
            self.days_past_due = 0

    @transaction.atomic
    def record_payment(self, payment_date, amount, principal, interest,
                       late_fee=Decimal('0'), payment_method='', receipt_number=''):
        """
        Book a repayment: reduce the balance by the principal portion,
        roll the due date forward one month and refresh arrears.

        Returns:
            MortgagePayment: the stored payment
        """
        payment = self.payments.create(
            payment_date=payment_date,
            amount=amount,
            principal=principal,
            interest=interest,
            late_fee=late_fee,
            payment_method=payment_method,
            receipt_number=receipt_number,
        )
        self.outstanding_balance = max(Decimal('0'), self.outstanding_balance - Decimal(principal))
        self.total_paid += Decimal(amount)
        self.total_interest_paid += Decimal(interest)
        self.last_payment_date = payment_date
        self.next_payment_due_date = payment_date + relativedelta(months=1)
        self.update_payment_status()
        if self.outstanding_balance == 0:
            self.mortgage_status = self.Status.PAID_OFF
            logger.info(f"Mortgage {self.mortgage_id} paid off")
        self.save()
        return payment


class MortgagePayment(models.Model):
    mortgage = models.ForeignKey(Mortgage, on_delete=models.CASCADE, related_name='payments')
    payment_date = models.DateTimeField()
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    principal = models.DecimalField(max_digits=14, decimal_places=2)
    interest = models.DecimalField(max_digits=14, decimal_places=2)
    late_fee = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0'))
    payment_method = models.CharField(max_length=50, blank=True)
    receipt_number = models.CharField(max_length=50, blank=True)

    class Meta:
        ordering = ['-payment_date']

    def __str__(self):
        return f"{self.mortgage} {self.amount} on {self.payment_date:%Y-%m-%d}"
