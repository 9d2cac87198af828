from django.conf import settings
from django.db import models
from django.utils import timezone

from ..constants import REGION_CHOICES
from .base import TimestampedModel
from .owners import Owner


class Parcel(TimestampedModel):
    """ A cadastral land parcel. Parcels are never hard-deleted; see is_active. """

    class LandType(models.TextChoices):
        AGRICULTURAL = 'agricultural', 'Agricultural'
        RESIDENTIAL = 'residential', 'Residential'
        COMMERCIAL = 'commercial', 'Commercial'
        INDUSTRIAL = 'industrial', 'Industrial'
        FOREST = 'forest', 'Forest'
        MIXED = 'mixed', 'Mixed'

    class LandUse(models.TextChoices):
        BUILDING = 'building', 'Building'
        FARMING = 'farming', 'Farming'
        VACANT = 'vacant', 'Vacant'
        DEVELOPED = 'developed', 'Developed'
        PROTECTED = 'protected', 'Protected'

    class OwnershipType(models.TextChoices):
        PRIVATE = 'private', 'Private'
        STATE = 'state', 'State'
        MUNICIPAL = 'municipal', 'Municipal'
        COOPERATIVE = 'cooperative', 'Cooperative'
        SHARED = 'shared', 'Shared'

    class LegalStatus(models.TextChoices):
        VERIFIED = 'verified', 'Verified'
        PENDING = 'pending', 'Pending'
        DISPUTED = 'disputed', 'Disputed'
        RESTRICTED = 'restricted', 'Restricted'
        CLEAN = 'clean', 'Clean'

    parcel_id = models.CharField(max_length=20, unique=True, help_text="Format RS-XX-000000 (country, region code, number)")

    # Location
    region = models.CharField(max_length=50, choices=REGION_CHOICES, db_index=True)
    district = models.CharField(max_length=100)
    municipality = models.CharField(max_length=100)
    cadastral_municipality = models.CharField(max_length=100)
    street = models.CharField(max_length=255, blank=True)
    street_number = models.CharField(max_length=20, blank=True)
    postal_code = models.CharField(max_length=10, blank=True)
    city = models.CharField(max_length=100, blank=True, db_index=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6)
    longitude = models.DecimalField(max_digits=9, decimal_places=6)

    area = models.DecimalField(max_digits=14, decimal_places=2, help_text="Square meters")
    land_type = models.CharField(max_length=20, choices=LandType.choices, db_index=True)
    land_use = models.CharField(max_length=20, choices=LandUse.choices)

    current_owner = models.ForeignKey(Owner, on_delete=models.PROTECT, related_name='parcels')
    ownership_type = models.CharField(max_length=20, choices=OwnershipType.choices)
    legal_status = models.CharField(max_length=20, choices=LegalStatus.choices, default=LegalStatus.PENDING, db_index=True)

    # Valuation (EUR)
    market_value = models.DecimalField(max_digits=16, decimal_places=2)
    tax_value = models.DecimalField(max_digits=16, decimal_places=2)
    last_valuation_date = models.DateTimeField(default=timezone.now)

    # Encumbrances
    has_mortgage = models.BooleanField(default=False)
    has_lien = models.BooleanField(default=False)
    has_easement = models.BooleanField(default=False)

    blockchain_hash = models.CharField(max_length=128, blank=True, db_index=True)
    last_verified_date = models.DateTimeField(default=timezone.now)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL,
        null=True, blank=True, related_name='verified_parcels'
    )

    is_active = models.BooleanField(default=True, db_index=True)
    is_fraudulent = models.BooleanField(default=False)

    registration_date = models.DateTimeField(default=timezone.now, db_index=True)
    last_modified = models.DateTimeField(auto_now=True)
    notes = models.TextField(blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['region', 'legal_status'], name='parcel_region_status_idx'),
            models.Index(fields=['latitude', 'longitude'], name='parcel_coordinates_idx'),
        ]

    def __str__(self):
        return self.parcel_id


class ParcelRestriction(models.Model):
    """ An encumbrance or legal restriction registered against a parcel. """

    class RestrictionType(models.TextChoices):
        MORTGAGE = 'mortgage', 'Mortgage'
        LIEN = 'lien', 'Lien'
        EASEMENT = 'easement', 'Easement'
        ZONING = 'zoning', 'Zoning'
        ENVIRONMENTAL = 'environmental', 'Environmental'
        LEGAL = 'legal', 'Legal'

    parcel = models.ForeignKey(Parcel, on_delete=models.CASCADE, related_name='restrictions')
    restriction_type = models.CharField(max_length=20, choices=RestrictionType.choices)
    description = models.TextField(blank=True)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    amount = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)

    class Meta:
        ordering = ['start_date']

    def __str__(self):
        return f"{self.parcel_id} {self.restriction_type}"
