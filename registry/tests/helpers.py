"""
Shared record builders for the registry test modules.
"""

import itertools
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

from accounts.models import CustomUser, PermissionChoices, RoleChoices
from registry.models import Dispute, Mortgage, Owner, Parcel, Transfer

_sequence = itertools.count(1)


def next_number():
    return next(_sequence)


def make_user(role=RoleChoices.VIEWER, permissions=None, regions=None, **extra):
    number = next_number()
    return CustomUser.objects.create_user(
        email=extra.pop('email', f"{role}{number}@land.gov.rs"),
        password=extra.pop('password', 'Registry@123'),
        first_name=extra.pop('first_name', 'Test'),
        last_name=extra.pop('last_name', f"User{number}"),
        role=role,
        permissions=list(permissions or []),
        assigned_regions=list(regions or []),
        is_verified=True,
        **extra
    )


def make_admin(**extra):
    return make_user(RoleChoices.ADMIN, permissions=PermissionChoices.values, **extra)


def make_owner(**extra):
    number = next_number()
    defaults = {
        'owner_type': Owner.OwnerType.INDIVIDUAL,
        'first_name': 'Jovan',
        'last_name': f"Petrović{number}",
        'national_id': f"{number:013d}",
        'city': 'Beograd',
        'is_verified': True,
    }
    defaults.update(extra)
    return Owner.objects.create(**defaults)


def make_parcel(owner=None, region='Belgrade', **extra):
    number = next_number()
    defaults = {
        'parcel_id': f"RS-BG-{number:06d}",
        'region': region,
        'district': region,
        'municipality': 'Stari Grad',
        'cadastral_municipality': 'Stari Grad',
        'city': 'Beograd',
        'latitude': Decimal('44.816700'),
        'longitude': Decimal('20.460000'),
        'area': Decimal('500.00'),
        'land_type': Parcel.LandType.RESIDENTIAL,
        'land_use': Parcel.LandUse.BUILDING,
        'ownership_type': Parcel.OwnershipType.PRIVATE,
        'legal_status': Parcel.LegalStatus.VERIFIED,
        'market_value': Decimal('150000.00'),
        'tax_value': Decimal('120000.00'),
    }
    defaults.update(extra)
    return Parcel.objects.create(current_owner=owner or make_owner(), **defaults)


def make_transfer(parcel, buyer=None, **extra):
    defaults = {
        'seller': parcel.current_owner,
        'buyer': buyer or make_owner(),
        'transfer_type': Transfer.TransferType.SALE,
        'agreed_price': Decimal('160000.00'),
        'registered_price': Decimal('160000.00'),
        'contract_date': timezone.now() - timedelta(days=3),
        'contract_number': f"UG-{next_number():05d}",
        'region': parcel.region,
        'registry_office': f"{parcel.region} Registry Office",
    }
    defaults.update(extra)
    return Transfer.objects.create(parcel=parcel, **defaults)


def make_dispute(parcel, claimant=None, **extra):
    defaults = {
        'claimant': claimant or make_owner(),
        'defendant': parcel.current_owner,
        'dispute_type': Dispute.DisputeType.BOUNDARY_DISPUTE,
        'description': 'Fence built two metres inside the neighbouring parcel.',
        'region': parcel.region,
    }
    defaults.update(extra)
    return Dispute.objects.create(parcel=parcel, **defaults)


def make_mortgage(parcel, **extra):
    now = timezone.now()
    defaults = {
        'borrower': parcel.current_owner,
        'lender_name': 'Komercijalna Banka',
        'lender_type': Mortgage.LenderType.BANK,
        'mortgage_type': Mortgage.MortgageType.RESIDENTIAL,
        'principal_amount': Decimal('100000.00'),
        'outstanding_balance': Decimal('100000.00'),
        'interest_rate': Decimal('4.50'),
        'term_years': 20,
        'monthly_payment': Decimal('632.65'),
        'origination_date': now - timedelta(days=60),
        'maturity_date': now + timedelta(days=365 * 20),
        'property_value_at_origination': parcel.market_value,
        'loan_to_value_ratio': Decimal('66.67'),
        'mortgage_deed_number': f"HIP-{next_number():06d}",
        'region': parcel.region,
    }
    defaults.update(extra)
    return Mortgage.objects.create(parcel=parcel, **defaults)
