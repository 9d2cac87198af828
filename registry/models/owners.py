import logging
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.db.models import Sum

from .base import TimestampedModel

logger = logging.getLogger(__name__)


class Owner(TimestampedModel):
    """ An individual or legal entity that can hold title to parcels. """

    class OwnerType(models.TextChoices):
        INDIVIDUAL = 'individual', 'Individual'
        CORPORATION = 'corporation', 'Corporation'
        GOVERNMENT = 'government', 'Government'
        COOPERATIVE = 'cooperative', 'Cooperative'
        FOUNDATION = 'foundation', 'Foundation'

    class LegalForm(models.TextChoices):
        LLC = 'LLC', 'LLC'
        JSC = 'JSC', 'JSC'
        PARTNERSHIP = 'Partnership', 'Partnership'
        SOLE_PROPRIETORSHIP = 'Sole Proprietorship', 'Sole Proprietorship'
        NGO = 'NGO', 'NGO'
        OTHER = 'Other', 'Other'

    class ResidencyStatus(models.TextChoices):
        RESIDENT = 'resident', 'Resident'
        NON_RESIDENT = 'non-resident', 'Non-resident'
        FOREIGN = 'foreign', 'Foreign'

    class LegalCapacity(models.TextChoices):
        FULL = 'full', 'Full'
        LIMITED = 'limited', 'Limited'
        NONE = 'none', 'None'

    owner_type = models.CharField(max_length=20, choices=OwnerType.choices, db_index=True)

    # Individuals
    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True, db_index=True)
    date_of_birth = models.DateField(null=True, blank=True)
    national_id = models.CharField(max_length=20, unique=True, null=True, blank=True, help_text="JMBG for Serbian citizens")
    tax_id = models.CharField(max_length=20, blank=True)

    # Legal entities
    company_name = models.CharField(max_length=255, blank=True)
    registration_number = models.CharField(max_length=50, blank=True)
    legal_form = models.CharField(max_length=30, choices=LegalForm.choices, blank=True)
    incorporation_date = models.DateField(null=True, blank=True)

    # Contact
    email = models.EmailField(blank=True)
    phone = models.CharField(max_length=30, blank=True)
    mobile = models.CharField(max_length=30, blank=True)
    street = models.CharField(max_length=255, blank=True)
    street_number = models.CharField(max_length=20, blank=True)
    postal_code = models.CharField(max_length=10, blank=True)
    city = models.CharField(max_length=100, blank=True)
    country = models.CharField(max_length=100, default='Serbia')

    # Legal standing
    citizenship = models.CharField(max_length=100, default='Serbian')
    residency_status = models.CharField(max_length=20, choices=ResidencyStatus.choices, default=ResidencyStatus.RESIDENT)
    legal_capacity = models.CharField(max_length=10, choices=LegalCapacity.choices, default=LegalCapacity.FULL)
    is_blacklisted = models.BooleanField(default=False)
    blacklist_reason = models.TextField(blank=True)

    # Portfolio, refreshed by update_property_stats()
    total_land_area = models.DecimalField(max_digits=16, decimal_places=2, default=Decimal('0'))
    total_property_value = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal('0'))

    credit_score = models.PositiveIntegerField(
        null=True, blank=True,
        validators=[MinValueValidator(300), MaxValueValidator(850)]
    )
    outstanding_mortgages = models.PositiveIntegerField(default=0)

    # Verification
    is_verified = models.BooleanField(default=False, db_index=True)
    verification_date = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='verified_owners'
    )
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['last_name', 'first_name', 'company_name']

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        if self.owner_type == self.OwnerType.INDIVIDUAL:
            return f"{self.first_name} {self.last_name}".strip()
        if self.owner_type == self.OwnerType.CORPORATION:
            return self.company_name
        return 'Unknown Owner'

    def update_property_stats(self):
        """ Recompute land area and property value from the owner's active parcels. """
        totals = self.parcels.filter(is_active=True).aggregate(
            area=Sum('area'),
            value=Sum('market_value'),
        )
        self.total_land_area = totals['area'] or Decimal('0')
        self.total_property_value = totals['value'] or Decimal('0')
        self.save(update_fields=['total_land_area', 'total_property_value', 'updated_at'])
        logger.debug(f"Refreshed property stats for owner {self.pk}")
