import logging
import random
from datetime import date, datetime, timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone
from django.utils.text import slugify

from accounts.models import PermissionChoices, RoleChoices
from ...constants import REGIONS
from ...fixtures.seed_data import (
    BANK_NAMES,
    CITIES,
    COMPANY_NAMES,
    COORDINATE_BOUNDS,
    DEMO_USERS,
    FIRST_NAMES_FEMALE,
    FIRST_NAMES_MALE,
    LAST_NAMES,
    REGIONAL_REGISTRAR_PASSWORD,
    REGIONAL_REGISTRAR_PERMISSIONS,
    STREET_NAMES,
    SUBSIDY_PROGRAMS,
)
from ...models import (
    AuditLog,
    Dispute,
    DisputeUpdate,
    Mortgage,
    MortgagePayment,
    Owner,
    OwnershipHistory,
    Parcel,
    ParcelRestriction,
    Subsidy,
    SubsidyDisbursement,
    SubsidyFraudFlag,
    Transfer,
)

logger = logging.getLogger(__name__)

User = get_user_model()

SEED_EMAIL_DOMAIN = '@land.gov.rs'


def _money(value):
    return Decimal(str(round(value, 2)))


def _aware(year, month=1, day=1):
    return timezone.make_aware(datetime(year, month, day))


def region_code(region):
    """Two ASCII letters for parcel numbers, e.g. 'Šumadija' -> 'SU'."""
    return slugify(region).replace('-', '')[:2].upper()


class Command(BaseCommand):
    help = 'Populates the registry with a randomized demo dataset (users, parcels, transfers, disputes, mortgages, subsidies)'

    def add_arguments(self, parser):
        parser.add_argument('--clear', action='store_true', help='Delete existing registry data and demo users first')
        parser.add_argument('--owners', type=int, default=500, help='Number of owners to create')
        parser.add_argument('--parcels', type=int, default=1000, help='Number of parcels to create')
        parser.add_argument('--seed', type=int, help='Random seed for a reproducible dataset')

    def handle(self, *args, **options):
        if options['owners'] < 1 or options['parcels'] < 1:
            raise CommandError('--owners and --parcels must be at least 1')

        self.rng = random.Random(options['seed'])
        self.now = timezone.now()

        try:
            with transaction.atomic():
                if options['clear']:
                    self.clear_data()

                users = self.create_users()
                self.stdout.write(self.style.SUCCESS(f"Created {len(users)} users"))

                owners = self.create_owners(options['owners'])
                self.stdout.write(self.style.SUCCESS(f"Created {len(owners)} owners"))

                parcels = self.create_parcels(options['parcels'], owners, users)
                self.stdout.write(self.style.SUCCESS(f"Created {len(parcels)} parcels"))

                histories = self.create_ownership_history(parcels[:max(1, len(parcels) // 2)], owners, users)
                self.stdout.write(self.style.SUCCESS(f"Created {len(histories)} ownership history records"))

                disputes = self.create_disputes(parcels, owners, users)
                self.stdout.write(self.style.SUCCESS(f"Created {len(disputes)} disputes"))

                transfers = self.create_transfers(parcels, owners, users)
                self.stdout.write(self.style.SUCCESS(f"Created {len(transfers)} transfers"))

                mortgages = self.create_mortgages(parcels, users)
                self.stdout.write(self.style.SUCCESS(f"Created {len(mortgages)} mortgages"))

                subsidies = self.create_subsidies(parcels, owners, users)
                self.stdout.write(self.style.SUCCESS(f"Created {len(subsidies)} subsidies"))

                for owner in owners:
                    owner.outstanding_mortgages = owner.mortgages.filter(
                        mortgage_status=Mortgage.Status.ACTIVE
                    ).count()
                    owner.save(update_fields=['outstanding_mortgages', 'updated_at'])
                    owner.update_property_stats()

                events = self.create_audit_events(users, parcels, transfers, disputes)
                self.stdout.write(self.style.SUCCESS(f"Created {events} audit events"))
        except CommandError:
            raise
        except Exception as e:
            logger.error(f"Seeding failed: {e}", exc_info=True)
            raise CommandError(f"Error seeding database: {e}")

        self.stdout.write(self.style.SUCCESS("\nDatabase seeding completed successfully"))
        self.stdout.write("\nDemo credentials:")
        for entry in DEMO_USERS:
            self.stdout.write(f"  {entry['role']:<10} {entry['email']} / {entry['password']}")

    def clear_data(self):
        self.stdout.write(self.style.WARNING('Clearing existing registry data...'))
        # Queryset deletes skip AuditLog.delete(), which refuses single-row deletes
        AuditLog.objects.all().delete()
        Subsidy.objects.all().delete()
        Mortgage.objects.all().delete()
        Transfer.objects.all().delete()
        Dispute.objects.all().delete()
        OwnershipHistory.objects.all().delete()
        Parcel.objects.all().delete()
        Owner.objects.all().delete()
        User.objects.filter(email__endswith=SEED_EMAIL_DOMAIN, is_superuser=False).delete()

    # ------------------------------------------------------------------
    # Random helpers
    # ------------------------------------------------------------------

    def random_date(self, start, end):
        span = (end - start).total_seconds()
        return start + timedelta(seconds=self.rng.uniform(0, max(span, 0)))

    def days_after(self, start, low, high):
        """start plus a random number of days, never later than now."""
        return min(start + timedelta(days=self.rng.randint(low, high)), self.now)

    def random_phone(self):
        return f"+381{self.rng.randint(10, 69)}{self.rng.randint(100000, 999999)}"

    def random_hash(self):
        return f"0x{self.rng.getrandbits(256):064x}"

    def pick_registrar(self, users):
        return self.rng.choice([u for u in users if u.role == RoleChoices.REGISTRAR])

    # ------------------------------------------------------------------
    # Generators
    # ------------------------------------------------------------------

    def _get_or_create_user(self, email, password, permissions, assigned_regions, hire_date, **fields):
        existing = User.objects.filter(email=email).first()
        if existing:
            return existing
        if permissions == 'all':
            permissions = list(PermissionChoices.values)
        if assigned_regions == 'all':
            assigned_regions = list(REGIONS)
        if isinstance(hire_date, str):
            hire_date = date.fromisoformat(hire_date)
        return User.objects.create_user(
            email,
            password,
            permissions=permissions,
            assigned_regions=assigned_regions,
            hire_date=hire_date,
            is_verified=True,
            **fields
        )

    def create_users(self):
        users = [self._get_or_create_user(**entry) for entry in DEMO_USERS]
        demo_emails = {entry['email'] for entry in DEMO_USERS}

        for region in REGIONS:
            email = f"registrar.{slugify(region).replace('-', '')}{SEED_EMAIL_DOMAIN}"
            if email in demo_emails:
                continue
            users.append(self._get_or_create_user(
                email=email,
                password=REGIONAL_REGISTRAR_PASSWORD,
                permissions=list(REGIONAL_REGISTRAR_PERMISSIONS),
                assigned_regions=[region],
                hire_date=self.random_date(_aware(2015), _aware(2023, 12, 31)).date(),
                first_name=self.rng.choice(FIRST_NAMES_MALE + FIRST_NAMES_FEMALE),
                last_name=self.rng.choice(LAST_NAMES),
                role=RoleChoices.REGISTRAR,
                department='land_registry',
                position='Regional Registrar',
                primary_office=region,
            ))
        return users

    def create_owners(self, count):
        owners = []
        national_ids = set(Owner.objects.exclude(national_id=None).values_list('national_id', flat=True))

        for i in range(count):
            region = self.rng.choice(REGIONS)
            common = {
                'phone': self.random_phone(),
                'street': self.rng.choice(STREET_NAMES),
                'street_number': str(self.rng.randint(1, 200)),
                'city': self.rng.choice(CITIES[region]),
                'postal_code': str(self.rng.randint(11000, 38000)),
                'tax_id': str(self.rng.randint(100000000, 999999999)),
            }

            if self.rng.random() > 0.8:
                is_verified = self.rng.random() > 0.05
                owner = Owner.objects.create(
                    owner_type=Owner.OwnerType.CORPORATION,
                    company_name=self.rng.choice(COMPANY_NAMES),
                    registration_number=str(self.rng.randint(10000000, 99999999)),
                    legal_form=self.rng.choice(['LLC', 'JSC', 'Partnership']),
                    incorporation_date=self.random_date(_aware(1990), _aware(2020, 12, 31)).date(),
                    email=f"company{i}@example.rs",
                    is_verified=is_verified,
                    verification_date=self.now if is_verified else None,
                    **common
                )
            else:
                national_id = None
                while national_id is None or national_id in national_ids:
                    national_id = f"{self.rng.randint(0, 3)}{self.rng.randint(100000000, 999999999)}"
                national_ids.add(national_id)

                first_names = FIRST_NAMES_MALE if self.rng.random() > 0.5 else FIRST_NAMES_FEMALE
                is_verified = self.rng.random() > 0.1
                owner = Owner.objects.create(
                    owner_type=Owner.OwnerType.INDIVIDUAL,
                    first_name=self.rng.choice(first_names),
                    last_name=self.rng.choice(LAST_NAMES),
                    date_of_birth=self.random_date(_aware(1950), _aware(2000, 12, 31)).date(),
                    national_id=national_id,
                    email=f"owner{i}@example.rs",
                    mobile=f"+38160{self.rng.randint(100000, 999999)}",
                    credit_score=self.rng.randint(400, 800),
                    is_verified=is_verified,
                    verification_date=self.now if is_verified else None,
                    **common
                )
            owners.append(owner)
        return owners

    def create_parcels(self, count, owners, users):
        parcels = []
        parcel_ids = set(Parcel.objects.values_list('parcel_id', flat=True))

        for _ in range(count):
            region = self.rng.choice(REGIONS)
            city = self.rng.choice(CITIES[region])
            owner = self.rng.choice(owners)
            (lat_min, lat_max), (lng_min, lng_max) = COORDINATE_BOUNDS[region]

            parcel_id = None
            while parcel_id is None or parcel_id in parcel_ids:
                parcel_id = f"RS-{region_code(region)}-{self.rng.randint(1, 999999):06d}"
            parcel_ids.add(parcel_id)

            if owner.owner_type == Owner.OwnerType.CORPORATION:
                ownership_type = Parcel.OwnershipType.PRIVATE
            else:
                ownership_type = self.rng.choice([Parcel.OwnershipType.PRIVATE, Parcel.OwnershipType.SHARED])

            parcel = Parcel.objects.create(
                parcel_id=parcel_id,
                region=region,
                district=region,
                municipality=city,
                cadastral_municipality=city,
                street=self.rng.choice(STREET_NAMES),
                street_number=str(self.rng.randint(1, 300)),
                postal_code=str(self.rng.randint(11000, 38000)),
                city=city,
                latitude=Decimal(str(round(self.rng.uniform(lat_min, lat_max), 6))),
                longitude=Decimal(str(round(self.rng.uniform(lng_min, lng_max), 6))),
                area=self.rng.randint(200, 50000),
                land_type=self.rng.choice(['agricultural', 'residential', 'commercial', 'industrial', 'mixed']),
                land_use=self.rng.choice(['building', 'farming', 'vacant', 'developed']),
                current_owner=owner,
                ownership_type=ownership_type,
                legal_status=self.rng.choice(['verified'] * 4 + ['clean', 'disputed', 'pending']),
                market_value=self.rng.randint(20000, 500000),
                tax_value=self.rng.randint(15000, 400000),
                last_valuation_date=self.random_date(_aware(2022), self.now),
                has_mortgage=self.rng.random() > 0.6,
                has_lien=self.rng.random() > 0.9,
                has_easement=self.rng.random() > 0.85,
                blockchain_hash=self.random_hash(),
                last_verified_date=self.random_date(_aware(2023), self.now),
                verified_by=self.pick_registrar(users),
                registration_date=self.random_date(_aware(2000), self.now),
            )

            restrictions = []
            if parcel.has_lien:
                restrictions.append(ParcelRestriction(
                    parcel=parcel,
                    restriction_type=ParcelRestriction.RestrictionType.LIEN,
                    description='Registered tax lien',
                    start_date=parcel.last_valuation_date.date(),
                    amount=self.rng.randint(1000, 20000),
                ))
            if parcel.has_easement:
                restrictions.append(ParcelRestriction(
                    parcel=parcel,
                    restriction_type=ParcelRestriction.RestrictionType.EASEMENT,
                    description='Right of way for neighbouring parcel',
                    start_date=parcel.registration_date.date(),
                ))
            if restrictions:
                ParcelRestriction.objects.bulk_create(restrictions)

            parcels.append(parcel)
        return parcels

    def create_ownership_history(self, parcels, owners, users):
        histories = []
        for parcel in parcels:
            current_date = parcel.registration_date
            previous_owner = None
            links = self.rng.randint(1, 5)

            for i in range(links):
                new_owner = parcel.current_owner if i == links - 1 else self.rng.choice(owners)
                transaction_date = current_date + relativedelta(months=self.rng.randint(6, 60))
                if transaction_date > self.now:
                    break

                histories.append(OwnershipHistory(
                    parcel=parcel,
                    transaction_type=self.rng.choice(['purchase', 'purchase', 'sale', 'inheritance', 'gift']),
                    previous_owner=previous_owner,
                    new_owner=new_owner,
                    transaction_date=transaction_date,
                    registration_date=self.days_after(transaction_date, 1, 14),
                    transaction_value=self.rng.randint(10000, int(parcel.market_value)),
                    tax_paid=self.rng.randint(500, 10000),
                    legal_basis=f"Purchase Contract #{self.rng.randint(10000, 99999)}",
                    contract_number=f"CTR-{transaction_date.year}-{self.rng.randint(10000, 99999)}",
                    notary_id=f"NOT-{self.rng.randint(1000, 9999)}",
                    status=OwnershipHistory.Status.APPROVED,
                    approved_by=self.pick_registrar(users),
                    approval_date=self.days_after(transaction_date, 1, 7),
                    blockchain_hash=self.random_hash(),
                    created_by=self.pick_registrar(users),
                ))
                previous_owner = new_owner
                current_date = transaction_date

        return OwnershipHistory.objects.bulk_create(histories)

    def create_disputes(self, parcels, owners, users):
        disputes = []
        count = min(150, int(len(parcels) * 0.15))
        handlers = [u for u in users if u.role in (RoleChoices.REGISTRAR, RoleChoices.JUDGE)]

        for i in range(count):
            parcel = self.rng.choice(parcels)
            claimants = [o for o in owners if o.pk != parcel.current_owner_id] or owners
            filing_date = self.random_date(_aware(2020), self.now)
            age_days = (self.now - filing_date).days

            if age_days < 30:
                status = Dispute.Status.OPEN
            elif age_days < 90:
                status = self.rng.choice([Dispute.Status.OPEN, Dispute.Status.INVESTIGATION])
            elif age_days < 180:
                status = self.rng.choice([Dispute.Status.INVESTIGATION, Dispute.Status.COURT])
            else:
                status = self.rng.choice([Dispute.Status.COURT, Dispute.Status.COURT, Dispute.Status.RESOLVED])

            resolved = status == Dispute.Status.RESOLVED
            dispute = Dispute.objects.create(
                dispute_id=f"DSP-{filing_date.year}-{i + 1:06d}",
                parcel=parcel,
                claimant=self.rng.choice(claimants),
                defendant=parcel.current_owner,
                dispute_type=self.rng.choice([
                    'ownership_claim', 'boundary_dispute', 'inheritance_dispute',
                    'fraud_allegation', 'contract_breach',
                ]),
                description='Dispute regarding property ownership and boundaries.',
                claimed_amount=self.rng.randint(5000, 200000),
                status=status,
                priority=self.rng.choice(['low', 'low', 'medium', 'medium', 'high']),
                filing_date=filing_date,
                region=parcel.region,
                investigation_start_date=(
                    self.days_after(filing_date, 5, 20)
                    if status != Dispute.Status.OPEN else None
                ),
                court_filing_date=(
                    self.days_after(filing_date, 60, 150)
                    if status in (Dispute.Status.COURT, Dispute.Status.RESOLVED) else None
                ),
                resolution_date=self.days_after(filing_date, 180, 400) if resolved else None,
                resolution_outcome=(
                    self.rng.choice(['claimant_favor', 'defendant_favor', 'settlement', 'dismissed'])
                    if resolved else ''
                ),
                resolution_description='Dispute resolved through court decision.' if resolved else '',
                compensation_amount=self.rng.randint(0, 50000) if resolved else None,
                estimated_cost=self.rng.randint(2000, 50000),
                actual_cost=self.rng.randint(2000, 50000) if resolved else 0,
                assigned_to=self.rng.choice(handlers),
                created_by=self.pick_registrar(users),
                is_urgent=self.rng.random() > 0.9,
            )

            updates = [DisputeUpdate(
                dispute=dispute, date=filing_date, updated_by=dispute.created_by,
                status_change=Dispute.Status.OPEN, notes='Dispute filed',
            )]
            if dispute.investigation_start_date:
                updates.append(DisputeUpdate(
                    dispute=dispute, date=dispute.investigation_start_date, updated_by=dispute.assigned_to,
                    status_change=Dispute.Status.INVESTIGATION, notes='Investigation opened',
                ))
            if dispute.court_filing_date:
                updates.append(DisputeUpdate(
                    dispute=dispute, date=dispute.court_filing_date, updated_by=dispute.assigned_to,
                    status_change=Dispute.Status.COURT, notes='Referred to court',
                ))
            if resolved:
                updates.append(DisputeUpdate(
                    dispute=dispute, date=dispute.resolution_date, updated_by=dispute.assigned_to,
                    status_change=Dispute.Status.RESOLVED, notes=dispute.resolution_description,
                ))
            DisputeUpdate.objects.bulk_create(updates)
            disputes.append(dispute)
        return disputes

    def create_transfers(self, parcels, owners, users):
        transfers = []
        count = min(300, int(len(parcels) * 0.3))

        for i in range(count):
            parcel = self.rng.choice(parcels)
            buyers = [o for o in owners if o.pk != parcel.current_owner_id]
            if not buyers:
                continue
            application_date = self.random_date(_aware(2023), self.now)
            age_days = (self.now - application_date).days

            if age_days < 7:
                status, stage = Transfer.Status.INITIATED, Transfer.ProcessingStage.DOCUMENT_SUBMISSION
            elif age_days < 14:
                status = Transfer.Status.PENDING_APPROVAL
                stage = self.rng.choice(['document_verification', 'legal_review'])
            elif age_days < 30:
                status = self.rng.choice([Transfer.Status.PENDING_APPROVAL, Transfer.Status.APPROVED])
                stage = self.rng.choice(['tax_assessment', 'approval_pending', 'registration'])
            else:
                status = self.rng.choice([Transfer.Status.APPROVED, Transfer.Status.COMPLETED, Transfer.Status.COMPLETED])
                stage = 'completed' if status == Transfer.Status.COMPLETED else 'registration'

            agreed_price = self.rng.randint(20000, int(parcel.market_value * Decimal('1.2')))
            approved = status in (Transfer.Status.APPROVED, Transfer.Status.COMPLETED)
            completed = status == Transfer.Status.COMPLETED
            approval_date = self.days_after(application_date, 7, 20) if approved else None
            completion_date = self.days_after(application_date, 14, 45) if completed else None

            transfer = Transfer(
                transfer_id=f"TRF-{application_date.year}-{i + 1:06d}",
                parcel=parcel,
                seller=parcel.current_owner,
                buyer=self.rng.choice(buyers),
                transfer_type=self.rng.choice(['sale', 'sale', 'sale', 'gift', 'inheritance']),
                transfer_status=status,
                agreed_price=agreed_price,
                registered_price=agreed_price,
                market_value=parcel.market_value,
                registration_fee=self.rng.randint(100, 500),
                notary_fee=self.rng.randint(200, 1000),
                payment_status='paid' if completed else self.rng.choice(['unpaid', 'partial', 'paid']),
                contract_date=application_date - timedelta(days=self.rng.randint(5, 30)),
                contract_number=f"CTR-{application_date.year}-{self.rng.randint(10000, 99999)}",
                application_date=application_date,
                approval_date=approval_date,
                approved_by=self.pick_registrar(users) if approved else None,
                completion_date=completion_date,
                registration_date=completion_date,
                processing_stage=stage,
                region=parcel.region,
                registry_office=f"{parcel.region} Registry Office",
                blockchain_hash=self.random_hash() if completed else '',
                assigned_officer=self.pick_registrar(users),
                created_by=self.pick_registrar(users),
                is_priority=self.rng.random() > 0.9,
                is_suspicious=self.rng.random() > 0.97,
            )
            transfer.calculate_transfer_tax()
            transfer.save()
            transfers.append(transfer)
        return transfers

    def create_mortgages(self, parcels, users):
        mortgages = []
        candidates = [p for p in parcels if p.has_mortgage]
        if not candidates:
            return mortgages
        count = min(200, int(len(parcels) * 0.25))

        for i in range(count):
            parcel = self.rng.choice(candidates)
            origination_date = self.random_date(_aware(2015), _aware(2024))
            term_years = self.rng.choice([10, 15, 20, 25, 30])
            total_months = term_years * 12
            market_value = float(parcel.market_value)

            principal = self.rng.randint(10000, max(10000, int(market_value * 0.8)))
            months_passed = (self.now - origination_date).days // 30
            monthly_payment = principal / total_months * 1.05
            outstanding = max(0.0, principal - monthly_payment * months_passed * 0.7)

            if outstanding == 0:
                status = Mortgage.Status.PAID_OFF
            elif self.rng.random() > 0.95:
                status = Mortgage.Status.DEFAULTED
            else:
                status = Mortgage.Status.ACTIVE

            mortgage = Mortgage.objects.create(
                mortgage_id=f"MTG-{origination_date.year}-{i + 1:06d}",
                parcel=parcel,
                borrower=parcel.current_owner,
                lender_name=self.rng.choice(BANK_NAMES),
                lender_type=Mortgage.LenderType.BANK,
                lender_registration_number=str(self.rng.randint(10000000, 99999999)),
                mortgage_type='commercial' if parcel.land_type == 'commercial' else 'residential',
                mortgage_status=status,
                principal_amount=principal,
                outstanding_balance=_money(outstanding),
                interest_rate=_money(self.rng.uniform(2.5, 6.5)),
                interest_type=self.rng.choice(['fixed', 'variable']),
                term_years=term_years,
                term_months=total_months,
                monthly_payment=_money(monthly_payment),
                origination_date=origination_date,
                maturity_date=origination_date + relativedelta(years=term_years),
                registration_date=origination_date,
                last_payment_date=self.now - timedelta(days=self.rng.randint(1, 30)),
                next_payment_due_date=self.now + timedelta(days=self.rng.randint(1, 30)),
                total_paid=_money(min(principal, monthly_payment * months_passed)),
                property_value_at_origination=_money(market_value * self.rng.uniform(0.8, 1.0)),
                current_property_value=parcel.market_value,
                loan_to_value_ratio=_money(principal / market_value * 100),
                mortgage_deed_number=f"MTG-DEED-{self.rng.randint(100000, 999999)}",
                region=parcel.region,
                risk_rating='high' if outstanding > principal * 0.9 else 'low',
                created_by=self.pick_registrar(users),
                is_under_review=self.rng.random() > 0.95,
            )

            interest_share = float(mortgage.interest_rate) / 100 / 12 * outstanding
            payments = []
            for month in range(1, min(months_passed, 3) + 1):
                payments.append(MortgagePayment(
                    mortgage=mortgage,
                    payment_date=mortgage.last_payment_date - relativedelta(months=month - 1),
                    amount=mortgage.monthly_payment,
                    principal=_money(max(0.0, monthly_payment - interest_share)),
                    interest=_money(min(monthly_payment, interest_share)),
                    payment_method='bank_transfer',
                    receipt_number=f"RCP-{self.rng.randint(100000, 999999)}",
                ))
            MortgagePayment.objects.bulk_create(payments)
            mortgages.append(mortgage)
        return mortgages

    def create_subsidies(self, parcels, owners, users):
        subsidies = []
        individuals = [o for o in owners if o.owner_type == Owner.OwnerType.INDIVIDUAL]
        if not individuals:
            return subsidies
        year = self.now.year

        for i in range(250):
            parcel = self.rng.choice(parcels)
            application_date = self.random_date(_aware(year - 1), self.now)
            age_days = (self.now - application_date).days
            allocated = self.rng.randint(5000, 50000)
            approved_amount = allocated * self.rng.uniform(0.7, 1.0)
            disbursed = 0.0

            if age_days < 30:
                status = Subsidy.Status.PENDING
            elif age_days < 60:
                status = self.rng.choice([Subsidy.Status.PENDING, Subsidy.Status.APPROVED])
            elif age_days < 120:
                status = self.rng.choice([Subsidy.Status.APPROVED, Subsidy.Status.DISBURSED])
                if status == Subsidy.Status.DISBURSED:
                    disbursed = approved_amount * self.rng.uniform(0.3, 0.8)
            else:
                status = self.rng.choice([Subsidy.Status.DISBURSED, Subsidy.Status.COMPLETED, Subsidy.Status.COMPLETED])
                if status == Subsidy.Status.COMPLETED:
                    disbursed = approved_amount
                else:
                    disbursed = approved_amount * self.rng.uniform(0.5, 0.95)

            is_legitimate = self.rng.random() > 0.03
            if not is_legitimate:
                status = Subsidy.Status.CANCELLED

            approval_date = disbursement_date = completion_date = None
            if status != Subsidy.Status.PENDING:
                approval_date = self.days_after(application_date, 10, 40)
            if status in (Subsidy.Status.DISBURSED, Subsidy.Status.COMPLETED):
                disbursement_date = self.days_after(approval_date, 5, 20)
            if status == Subsidy.Status.COMPLETED:
                completion_date = self.days_after(disbursement_date, 10, 60)

            approver = self.pick_registrar(users) if approval_date else None
            subsidy = Subsidy.objects.create(
                subsidy_id=f"SUB-{year}-{i + 1:06d}",
                program_name=self.rng.choice(SUBSIDY_PROGRAMS),
                program_year=year,
                beneficiary=self.rng.choice(individuals),
                parcel=parcel,
                allocated_amount=allocated,
                approved_amount=_money(approved_amount),
                disbursed_amount=_money(disbursed),
                application_date=application_date,
                approval_date=approval_date,
                disbursement_date=disbursement_date,
                completion_date=completion_date,
                status=status,
                region=parcel.region,
                municipality=parcel.municipality,
                is_verified=status != Subsidy.Status.PENDING,
                verified_by=approver,
                verification_date=approval_date,
                approved_by=approver,
                is_legitimate=is_legitimate,
                processing_officer=self.pick_registrar(users),
            )

            if disbursed and disbursement_date:
                SubsidyDisbursement.objects.create(
                    subsidy=subsidy,
                    amount=subsidy.disbursed_amount,
                    disbursement_date=disbursement_date,
                    method=SubsidyDisbursement.Method.BANK_TRANSFER,
                    reference_number=f"DSB-{self.rng.randint(100000, 999999)}",
                )
            if not is_legitimate:
                SubsidyFraudFlag.objects.create(
                    subsidy=subsidy,
                    flag_type=self.rng.choice(['duplicate_application', 'false_documentation', 'income_misrepresentation']),
                    description='Fraudulent activity detected during verification',
                )
            subsidies.append(subsidy)
        return subsidies

    def create_audit_events(self, users, parcels, transfers, disputes):
        created = 0

        def log(**event):
            nonlocal created
            if AuditLog.objects.log_event(**event) is not None:
                created += 1

        for user in users:
            log(
                event_type=AuditLog.EventType.USER_LOGIN,
                action=f"User {user.email} logged in",
                performed_by=user,
                user_role=user.role,
                target_model=AuditLog.TargetModel.USER,
                target_id=str(user.pk),
                target_description=user.email,
                ip_address=f"10.0.{self.rng.randint(0, 255)}.{self.rng.randint(1, 254)}",
                timestamp=self.random_date(self.now - timedelta(days=30), self.now),
            )

        for parcel in parcels[:50]:
            actor = parcel.verified_by
            log(
                event_type=AuditLog.EventType.PARCEL_CREATED,
                action=f"Parcel {parcel.parcel_id} registered",
                performed_by=actor,
                user_role=getattr(actor, 'role', '') or '',
                target_model=AuditLog.TargetModel.PARCEL,
                target_id=str(parcel.pk),
                target_description=parcel.parcel_id,
                region=parcel.region,
                changes={'after': {'parcel_id': parcel.parcel_id, 'current_owner': parcel.current_owner_id}},
                timestamp=parcel.registration_date,
            )

        for transfer in transfers:
            if transfer.transfer_status == Transfer.Status.COMPLETED:
                log(
                    event_type=AuditLog.EventType.OWNERSHIP_TRANSFERRED,
                    action=f"Ownership of {transfer.parcel.parcel_id} transferred ({transfer.transfer_id})",
                    performed_by=transfer.approved_by,
                    user_role=RoleChoices.REGISTRAR,
                    target_model=AuditLog.TargetModel.TRANSFER,
                    target_id=str(transfer.pk),
                    target_description=transfer.transfer_id,
                    region=transfer.region,
                    severity=AuditLog.Severity.HIGH,
                    timestamp=transfer.completion_date,
                )
            if transfer.is_suspicious:
                log(
                    event_type=AuditLog.EventType.FRAUD_DETECTED,
                    action=f"Suspicious pricing on transfer {transfer.transfer_id}",
                    target_model=AuditLog.TargetModel.TRANSFER,
                    target_id=str(transfer.pk),
                    target_description=transfer.transfer_id,
                    region=transfer.region,
                    severity=AuditLog.Severity.CRITICAL,
                    fraud_indicator=True,
                    suspicious_activity=True,
                    risk_level=AuditLog.RiskLevel.HIGH,
                    timestamp=self.random_date(transfer.application_date, self.now),
                )

        for dispute in disputes:
            is_fraud = dispute.dispute_type == Dispute.DisputeType.FRAUD_ALLEGATION
            log(
                event_type=AuditLog.EventType.DISPUTE_FILED,
                action=f"Dispute {dispute.dispute_id} filed on {dispute.parcel.parcel_id}",
                performed_by=dispute.created_by,
                user_role=RoleChoices.REGISTRAR,
                target_model=AuditLog.TargetModel.DISPUTE,
                target_id=str(dispute.pk),
                target_description=dispute.dispute_id,
                region=dispute.region,
                severity=AuditLog.Severity.HIGH if is_fraud else AuditLog.Severity.MEDIUM,
                fraud_indicator=is_fraud,
                timestamp=dispute.filing_date,
            )
            if dispute.status == Dispute.Status.RESOLVED:
                log(
                    event_type=AuditLog.EventType.DISPUTE_RESOLVED,
                    action=f"Dispute {dispute.dispute_id} resolved: {dispute.resolution_outcome}",
                    performed_by=dispute.assigned_to,
                    user_role=getattr(dispute.assigned_to, 'role', '') or '',
                    target_model=AuditLog.TargetModel.DISPUTE,
                    target_id=str(dispute.pk),
                    target_description=dispute.dispute_id,
                    region=dispute.region,
                    timestamp=dispute.resolution_date,
                )
        return created
