from decimal import Decimal

from django.conf import settings
from django.db import models, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from ..constants import REGION_CHOICES
from .base import TimestampedModel, ceil_days, generate_record_id
from .owners import Owner
from .parcels import Parcel


def generate_subsidy_id():
    return generate_record_id('SUB')


class SubsidyQuerySet(models.QuerySet):

    def program_stats(self, program_name=None, year=None):
        """
        Totals per housing program for one program year (default: current year).

        Returns:
            List of dicts with program_name, total_allocated, total_approved,
            total_disbursed, count, completed_count and fraud_count
        """
        year = year or timezone.now().year
        queryset = self.filter(program_year=year)
        if program_name:
            queryset = queryset.filter(program_name=program_name)
        return list(
            queryset.values('program_name')
            .annotate(
                total_allocated=Sum('allocated_amount'),
                total_approved=Sum('approved_amount'),
                total_disbursed=Sum('disbursed_amount'),
                count=Count('id'),
                completed_count=Count('id', filter=Q(status=Subsidy.Status.COMPLETED)),
                fraud_count=Count('id', filter=Q(is_legitimate=False)),
            )
            .order_by('program_name')
        )


class Subsidy(TimestampedModel):
    """ A government housing grant awarded to a beneficiary, optionally tied to a parcel. """

    class Program(models.TextChoices):
        FIRST_TIME_HOMEBUYER = 'First-Time Homebuyer', 'First-Time Homebuyer'
        RURAL_DEVELOPMENT = 'Rural Development', 'Rural Development'
        LOW_INCOME_HOUSING = 'Low-Income Housing', 'Low-Income Housing'
        VETERANS_HOUSING = 'Veterans Housing', 'Veterans Housing'
        DISABILITY_HOUSING = 'Disability Housing', 'Disability Housing'
        YOUNG_FAMILIES = 'Young Families', 'Young Families'
        AGRICULTURAL_LAND = 'Agricultural Land', 'Agricultural Land'
        ENERGY_EFFICIENCY_RETROFIT = 'Energy Efficiency Retrofit', 'Energy Efficiency Retrofit'

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        DISBURSED = 'disbursed', 'Disbursed'
        COMPLETED = 'completed', 'Completed'
        REJECTED = 'rejected', 'Rejected'
        CANCELLED = 'cancelled', 'Cancelled'
        EXPIRED = 'expired', 'Expired'

    # Statuses counted as approved on dashboards
    APPROVED_STATUSES = (Status.APPROVED, Status.DISBURSED, Status.COMPLETED)

    subsidy_id = models.CharField(max_length=20, unique=True, default=generate_subsidy_id)
    program_name = models.CharField(max_length=50, choices=Program.choices, db_index=True)
    program_year = models.PositiveIntegerField(db_index=True)

    beneficiary = models.ForeignKey(Owner, on_delete=models.PROTECT, related_name='subsidies')
    parcel = models.ForeignKey(Parcel, on_delete=models.SET_NULL, null=True, blank=True, related_name='subsidies')

    allocated_amount = models.DecimalField(max_digits=16, decimal_places=2)
    approved_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'))
    disbursed_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'))
    remaining_amount = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'))

    application_date = models.DateTimeField(default=timezone.now, db_index=True)
    approval_date = models.DateTimeField(null=True, blank=True)
    disbursement_date = models.DateTimeField(null=True, blank=True)
    completion_date = models.DateTimeField(null=True, blank=True)
    expiry_date = models.DateTimeField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)

    is_eligible = models.BooleanField(default=True)
    eligibility_criteria = models.JSONField(default=dict, blank=True)
    is_verified = models.BooleanField(default=False)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='verified_subsidies'
    )
    verification_date = models.DateTimeField(null=True, blank=True)
    is_legitimate = models.BooleanField(default=True, db_index=True)

    region = models.CharField(max_length=50, choices=REGION_CHOICES, db_index=True)
    municipality = models.CharField(max_length=100, blank=True)
    processing_officer = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='processed_subsidies'
    )
    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='approved_subsidies'
    )

    utilization_rate = models.DecimalField(max_digits=6, decimal_places=2, default=Decimal('0'), help_text="Percent")
    processing_time = models.PositiveIntegerField(default=0, help_text="Days from application to approval")

    notes = models.TextField(blank=True)
    rejection_reason = models.TextField(blank=True)
    cancellation_reason = models.TextField(blank=True)

    objects = SubsidyQuerySet.as_manager()

    class Meta:
        ordering = ['-application_date']
        verbose_name_plural = "Subsidies"
        indexes = [
            models.Index(fields=['program_name', 'status'], name='subsidy_program_status_idx'),
            models.Index(fields=['region', 'program_year'], name='subsidy_region_year_idx'),
        ]

    def __str__(self):
        return self.subsidy_id

    def save(self, *args, **kwargs):
        self.remaining_amount = Decimal(self.approved_amount) - Decimal(self.disbursed_amount)
        if self.approved_amount and Decimal(self.approved_amount) > 0:
            rate = Decimal(self.disbursed_amount) / Decimal(self.approved_amount) * 100
            self.utilization_rate = rate.quantize(Decimal('0.01'))
        if self.approval_date and self.application_date:
            self.processing_time = ceil_days(self.application_date, self.approval_date)
        super().save(*args, **kwargs)

    @transaction.atomic
    def record_disbursement(self, amount, method, reference_number=''):
        disbursement = self.disbursements.create(
            amount=amount,
            disbursement_date=timezone.now(),
            method=method,
            reference_number=reference_number,
        )
        self.disbursed_amount = Decimal(self.disbursed_amount) + Decimal(amount)
        self.disbursement_date = disbursement.disbursement_date
        if self.disbursed_amount >= Decimal(self.approved_amount):
            self.status = self.Status.COMPLETED
            self.completion_date = timezone.now()
        else:
            self.status = self.Status.DISBURSED
        self.save()
        return disbursement

    @transaction.atomic
    def flag_as_fraud(self, flag_type, description):
        flag = self.fraud_flags.create(flag_type=flag_type, description=description)
        self.is_legitimate = False
        self.status = self.Status.CANCELLED
        self.save()
        return flag


class SubsidyDisbursement(models.Model):

    class Method(models.TextChoices):
        BANK_TRANSFER = 'bank_transfer', 'Bank transfer'
        CHECK = 'check', 'Check'
        DIRECT_PAYMENT = 'direct_payment', 'Direct payment'

    subsidy = models.ForeignKey(Subsidy, on_delete=models.CASCADE, related_name='disbursements')
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    disbursement_date = models.DateTimeField(default=timezone.now)
    method = models.CharField(max_length=20, choices=Method.choices)
    reference_number = models.CharField(max_length=50, blank=True)
    recipient = models.CharField(max_length=100, default='Beneficiary')

    class Meta:
        ordering = ['disbursement_date']

    def __str__(self):
        return f"{self.subsidy} {self.amount}"


class SubsidyFraudFlag(models.Model):

    class FlagType(models.TextChoices):
        DUPLICATE_APPLICATION = 'duplicate_application', 'Duplicate application'
        FALSE_DOCUMENTATION = 'false_documentation', 'False documentation'
        INCOME_MISREPRESENTATION = 'income_misrepresentation', 'Income misrepresentation'
        PROPERTY_OVERVALUATION = 'property_overvaluation', 'Property overvaluation'
        INELIGIBLE_BENEFICIARY = 'ineligible_beneficiary', 'Ineligible beneficiary'

    subsidy = models.ForeignKey(Subsidy, on_delete=models.CASCADE, related_name='fraud_flags')
    flag_type = models.CharField(max_length=30, choices=FlagType.choices)
    flag_date = models.DateTimeField(default=timezone.now)
    description = models.TextField(blank=True)
    is_resolved = models.BooleanField(default=False)

    class Meta:
        ordering = ['-flag_date']

    def __str__(self):
        return f"{self.subsidy} {self.flag_type}"
