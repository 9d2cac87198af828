from decimal import Decimal

import django.core.serializers.json
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import registry.models.audit
import registry.models.disputes
import registry.models.mortgages
import registry.models.subsidies
import registry.models.transfers
from django.conf import settings
from django.db import migrations, models

REGION_CHOICES = [
    ('Belgrade', 'Belgrade'), ('Šumadija', 'Šumadija'), ('Kolubara', 'Kolubara'), ('Zlatibor', 'Zlatibor'),
    ('Podunavlje', 'Podunavlje'), ('Braničevo', 'Braničevo'), ('Nišava', 'Nišava'), ('Jablanica', 'Jablanica'),
    ('Pčinja', 'Pčinja'), ('Mačva', 'Mačva'), ('Moravica', 'Moravica'), ('Raška', 'Raška'), ('Rasina', 'Rasina'),
    ('Pomoravlje', 'Pomoravlje'), ('Bor', 'Bor'), ('Zaječar', 'Zaječar'), ('Toplica', 'Toplica'), ('Pirot', 'Pirot'),
    ('Srem', 'Srem'), ('Južna Bačka', 'Južna Bačka'), ('Severna Bačka', 'Severna Bačka'),
    ('Zapadna Bačka', 'Zapadna Bačka'), ('Severni Banat', 'Severni Banat'), ('Srednji Banat', 'Srednji Banat'),
    ('Južni Banat', 'Južni Banat'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Owner',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner_type', models.CharField(choices=[('individual', 'Individual'), ('corporation', 'Corporation'), ('government', 'Government'), ('cooperative', 'Cooperative'), ('foundation', 'Foundation')], db_index=True, max_length=20)),
                ('first_name', models.CharField(blank=True, max_length=100)),
                ('last_name', models.CharField(blank=True, db_index=True, max_length=100)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('national_id', models.CharField(blank=True, help_text='JMBG for Serbian citizens', max_length=20, null=True, unique=True)),
                ('tax_id', models.CharField(blank=True, max_length=20)),
                ('company_name', models.CharField(blank=True, max_length=255)),
                ('registration_number', models.CharField(blank=True, max_length=50)),
                ('legal_form', models.CharField(blank=True, choices=[('LLC', 'LLC'), ('JSC', 'JSC'), ('Partnership', 'Partnership'), ('Sole Proprietorship', 'Sole Proprietorship'), ('NGO', 'NGO'), ('Other', 'Other')], max_length=30)),
                ('incorporation_date', models.DateField(blank=True, null=True)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('phone', models.CharField(blank=True, max_length=30)),
                ('mobile', models.CharField(blank=True, max_length=30)),
                ('street', models.CharField(blank=True, max_length=255)),
                ('street_number', models.CharField(blank=True, max_length=20)),
                ('postal_code', models.CharField(blank=True, max_length=10)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('country', models.CharField(default='Serbia', max_length=100)),
                ('citizenship', models.CharField(default='Serbian', max_length=100)),
                ('residency_status', models.CharField(choices=[('resident', 'Resident'), ('non-resident', 'Non-resident'), ('foreign', 'Foreign')], default='resident', max_length=20)),
                ('legal_capacity', models.CharField(choices=[('full', 'Full'), ('limited', 'Limited'), ('none', 'None')], default='full', max_length=10)),
                ('is_blacklisted', models.BooleanField(default=False)),
                ('blacklist_reason', models.TextField(blank=True)),
                ('total_land_area', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16)),
                ('total_property_value', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=18)),
                ('credit_score', models.PositiveIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(300), django.core.validators.MaxValueValidator(850)])),
                ('outstanding_mortgages', models.PositiveIntegerField(default=0)),
                ('is_verified', models.BooleanField(db_index=True, default=False)),
                ('verification_date', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('verified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='verified_owners', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['last_name', 'first_name', 'company_name'],
            },
        ),
        migrations.CreateModel(
            name='Parcel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('parcel_id', models.CharField(help_text='Format RS-XX-000000 (country, region code, number)', max_length=20, unique=True)),
                ('region', models.CharField(choices=REGION_CHOICES, db_index=True, max_length=50)),
                ('district', models.CharField(max_length=100)),
                ('municipality', models.CharField(max_length=100)),
                ('cadastral_municipality', models.CharField(max_length=100)),
                ('street', models.CharField(blank=True, max_length=255)),
                ('street_number', models.CharField(blank=True, max_length=20)),
                ('postal_code', models.CharField(blank=True, max_length=10)),
                ('city', models.CharField(blank=True, db_index=True, max_length=100)),
                ('latitude', models.DecimalField(decimal_places=6, max_digits=9)),
                ('longitude', models.DecimalField(decimal_places=6, max_digits=9)),
                ('area', models.DecimalField(decimal_places=2, help_text='Square meters', max_digits=14)),
                ('land_type', models.CharField(choices=[('agricultural', 'Agricultural'), ('residential', 'Residential'), ('commercial', 'Commercial'), ('industrial', 'Industrial'), ('forest', 'Forest'), ('mixed', 'Mixed')], db_index=True, max_length=20)),
                ('land_use', models.CharField(choices=[('building', 'Building'), ('farming', 'Farming'), ('vacant', 'Vacant'), ('developed', 'Developed'), ('protected', 'Protected')], max_length=20)),
                ('ownership_type', models.CharField(choices=[('private', 'Private'), ('state', 'State'), ('municipal', 'Municipal'), ('cooperative', 'Cooperative'), ('shared', 'Shared')], max_length=20)),
                ('legal_status', models.CharField(choices=[('verified', 'Verified'), ('pending', 'Pending'), ('disputed', 'Disputed'), ('restricted', 'Restricted'), ('clean', 'Clean')], db_index=True, default='pending', max_length=20)),
                ('market_value', models.DecimalField(decimal_places=2, max_digits=16)),
                ('tax_value', models.DecimalField(decimal_places=2, max_digits=16)),
                ('last_valuation_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('has_mortgage', models.BooleanField(default=False)),
                ('has_lien', models.BooleanField(default=False)),
                ('has_easement', models.BooleanField(default=False)),
                ('blockchain_hash', models.CharField(blank=True, db_index=True, max_length=128)),
                ('last_verified_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('is_active', models.BooleanField(db_index=True, default=True)),
                ('is_fraudulent', models.BooleanField(default=False)),
                ('registration_date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('last_modified', models.DateTimeField(auto_now=True)),
                ('notes', models.TextField(blank=True)),
                ('current_owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='parcels', to='registry.owner')),
                ('verified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='verified_parcels', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['region', 'legal_status'], name='parcel_region_status_idx'),
                    models.Index(fields=['latitude', 'longitude'], name='parcel_coordinates_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ParcelRestriction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('restriction_type', models.CharField(choices=[('mortgage', 'Mortgage'), ('lien', 'Lien'), ('easement', 'Easement'), ('zoning', 'Zoning'), ('environmental', 'Environmental'), ('legal', 'Legal')], max_length=20)),
                ('description', models.TextField(blank=True)),
                ('start_date', models.DateField(blank=True, null=True)),
                ('end_date', models.DateField(blank=True, null=True)),
                ('amount', models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True)),
                ('parcel', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='restrictions', to='registry.parcel')),
            ],
            options={
                'ordering': ['start_date'],
            },
        ),
        migrations.CreateModel(
            name='OwnershipHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('transaction_type', models.CharField(choices=[('purchase', 'Purchase'), ('sale', 'Sale'), ('inheritance', 'Inheritance'), ('gift', 'Gift'), ('expropriation', 'Expropriation'), ('court_order', 'Court order'), ('restitution', 'Restitution'), ('merger', 'Merger'), ('division', 'Division'), ('initial_registration', 'Initial registration'), ('correction', 'Correction')], max_length=30)),
                ('transaction_date', models.DateTimeField()),
                ('registration_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('transaction_value', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16)),
                ('tax_paid', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16)),
                ('legal_basis', models.CharField(max_length=255)),
                ('contract_number', models.CharField(blank=True, max_length=50)),
                ('notary_id', models.CharField(blank=True, max_length=50)),
                ('court_decision_number', models.CharField(blank=True, max_length=50)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('under_review', 'Under review')], default='pending', max_length=20)),
                ('approval_date', models.DateTimeField(blank=True, null=True)),
                ('approval_notes', models.TextField(blank=True)),
                ('rejection_reason', models.TextField(blank=True)),
                ('blockchain_hash', models.CharField(blank=True, db_index=True, max_length=128)),
                ('is_fraudulent', models.BooleanField(default=False)),
                ('fraud_detection_date', models.DateTimeField(blank=True, null=True)),
                ('fraud_notes', models.TextField(blank=True)),
                ('notes', models.TextField(blank=True)),
                ('is_active', models.BooleanField(default=True)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='approved_ownership_records', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_ownership_records', to=settings.AUTH_USER_MODEL)),
                ('new_owner', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='ownership_received', to='registry.owner')),
                ('parcel', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ownership_history', to='registry.parcel')),
                ('previous_owner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='ownership_given', to='registry.owner')),
            ],
            options={
                'verbose_name_plural': 'Ownership history',
                'ordering': ['-transaction_date'],
                'indexes': [
                    models.Index(fields=['parcel', '-transaction_date'], name='history_parcel_date_idx'),
                    models.Index(fields=['transaction_type', 'status'], name='history_type_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Transfer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('transfer_id', models.CharField(default=registry.models.transfers.generate_transfer_id, max_length=20, unique=True)),
                ('transfer_type', models.CharField(choices=[('sale', 'Sale'), ('gift', 'Gift'), ('inheritance', 'Inheritance'), ('exchange', 'Exchange'), ('expropriation', 'Expropriation'), ('court_order', 'Court order'), ('other', 'Other')], max_length=20)),
                ('transfer_status', models.CharField(choices=[('initiated', 'Initiated'), ('pending_approval', 'Pending approval'), ('approved', 'Approved'), ('rejected', 'Rejected'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], db_index=True, default='initiated', max_length=20)),
                ('agreed_price', models.DecimalField(decimal_places=2, max_digits=16)),
                ('registered_price', models.DecimalField(decimal_places=2, max_digits=16)),
                ('market_value', models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True)),
                ('transfer_tax_rate', models.DecimalField(decimal_places=2, default=Decimal('2.5'), help_text='Percent', max_digits=5)),
                ('transfer_tax_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True)),
                ('registration_fee', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('notary_fee', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('total_fees', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16)),
                ('payment_status', models.CharField(choices=[('unpaid', 'Unpaid'), ('partial', 'Partial'), ('paid', 'Paid'), ('refunded', 'Refunded')], default='unpaid', max_length=10)),
                ('payment_date', models.DateTimeField(blank=True, null=True)),
                ('payment_method', models.CharField(blank=True, choices=[('bank_transfer', 'Bank transfer'), ('cash', 'Cash'), ('check', 'Check'), ('escrow', 'Escrow'), ('other', 'Other')], max_length=20)),
                ('contract_date', models.DateTimeField()),
                ('contract_number', models.CharField(max_length=50)),
                ('notary_id', models.CharField(blank=True, max_length=50)),
                ('notary_name', models.CharField(blank=True, max_length=255)),
                ('notarization_date', models.DateTimeField(blank=True, null=True)),
                ('application_date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('approval_date', models.DateTimeField(blank=True, null=True)),
                ('registration_date', models.DateTimeField(blank=True, null=True)),
                ('completion_date', models.DateTimeField(blank=True, null=True)),
                ('expected_completion_date', models.DateTimeField(blank=True, null=True)),
                ('processing_stage', models.CharField(choices=[('document_submission', 'Document submission'), ('document_verification', 'Document verification'), ('legal_review', 'Legal review'), ('tax_assessment', 'Tax assessment'), ('approval_pending', 'Approval pending'), ('registration', 'Registration'), ('completed', 'Completed')], default='document_submission', max_length=30)),
                ('encumbrances_checked', models.BooleanField(default=False)),
                ('encumbrances_cleared', models.BooleanField(default=False)),
                ('region', models.CharField(choices=REGION_CHOICES, db_index=True, max_length=50)),
                ('registry_office', models.CharField(max_length=100)),
                ('blockchain_hash', models.CharField(blank=True, max_length=128)),
                ('rejection_reason', models.TextField(blank=True)),
                ('rejection_date', models.DateTimeField(blank=True, null=True)),
                ('cancellation_reason', models.TextField(blank=True)),
                ('cancellation_date', models.DateTimeField(blank=True, null=True)),
                ('processing_time', models.PositiveIntegerField(blank=True, help_text='Days from application to completion', null=True)),
                ('is_priority', models.BooleanField(default=False)),
                ('requires_additional_review', models.BooleanField(default=False)),
                ('is_suspicious', models.BooleanField(db_index=True, default=False)),
                ('suspicious_flags', models.JSONField(blank=True, default=list)),
                ('processing_notes', models.TextField(blank=True)),
                ('internal_notes', models.TextField(blank=True)),
                ('public_notes', models.TextField(blank=True)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='approved_transfers', to=settings.AUTH_USER_MODEL)),
                ('assigned_officer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_transfers', to=settings.AUTH_USER_MODEL)),
                ('buyer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchases', to='registry.owner')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_transfers', to=settings.AUTH_USER_MODEL)),
                ('ownership_history', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transfer', to='registry.ownershiphistory')),
                ('parcel', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transfers', to='registry.parcel')),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_transfers', to=settings.AUTH_USER_MODEL)),
                ('seller', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales', to='registry.owner')),
            ],
            options={
                'ordering': ['-application_date'],
                'indexes': [
                    models.Index(fields=['transfer_status', 'region'], name='transfer_status_region_idx'),
                    models.Index(fields=['processing_stage'], name='transfer_stage_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Dispute',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('dispute_id', models.CharField(default=registry.models.disputes.generate_dispute_id, max_length=20, unique=True)),
                ('dispute_type', models.CharField(choices=[('ownership_claim', 'Ownership claim'), ('boundary_dispute', 'Boundary dispute'), ('inheritance_dispute', 'Inheritance dispute'), ('fraud_allegation', 'Fraud allegation'), ('contract_breach', 'Contract breach'), ('zoning_violation', 'Zoning violation'), ('easement_dispute', 'Easement dispute'), ('mortgage_dispute', 'Mortgage dispute'), ('registration_error', 'Registration error'), ('other', 'Other')], db_index=True, max_length=30)),
                ('description', models.TextField()),
                ('claimed_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16)),
                ('status', models.CharField(choices=[('Open', 'Open'), ('Investigation', 'Investigation'), ('Court', 'Court'), ('Resolved', 'Resolved'), ('Withdrawn', 'Withdrawn'), ('Dismissed', 'Dismissed')], db_index=True, default='Open', max_length=20)),
                ('priority', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('critical', 'Critical')], default='medium', max_length=10)),
                ('filing_date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('investigation_start_date', models.DateTimeField(blank=True, null=True)),
                ('court_filing_date', models.DateTimeField(blank=True, null=True)),
                ('resolution_date', models.DateTimeField(blank=True, null=True)),
                ('expected_resolution_date', models.DateTimeField(blank=True, null=True)),
                ('court_name', models.CharField(blank=True, max_length=255)),
                ('case_number', models.CharField(blank=True, max_length=50)),
                ('judge', models.CharField(blank=True, max_length=255)),
                ('resolution_outcome', models.CharField(blank=True, choices=[('claimant_favor', 'In favour of claimant'), ('defendant_favor', 'In favour of defendant'), ('settlement', 'Settlement'), ('dismissed', 'Dismissed'), ('withdrawn', 'Withdrawn')], max_length=20)),
                ('resolution_description', models.TextField(blank=True)),
                ('compensation_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True)),
                ('terms_of_settlement', models.TextField(blank=True)),
                ('estimated_cost', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
                ('actual_cost', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
                ('region', models.CharField(choices=REGION_CHOICES, db_index=True, max_length=50)),
                ('internal_notes', models.TextField(blank=True)),
                ('is_public', models.BooleanField(default=False)),
                ('requires_mediation', models.BooleanField(default=False)),
                ('is_urgent', models.BooleanField(default=False)),
                ('assigned_to', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_disputes', to=settings.AUTH_USER_MODEL)),
                ('claimant', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='claims_filed', to='registry.owner')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_disputes', to=settings.AUTH_USER_MODEL)),
                ('defendant', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='claims_against', to='registry.owner')),
                ('investigator', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='investigated_disputes', to=settings.AUTH_USER_MODEL)),
                ('parcel', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='disputes', to='registry.parcel')),
            ],
            options={
                'ordering': ['-filing_date'],
                'indexes': [
                    models.Index(fields=['status', 'priority'], name='dispute_status_priority_idx'),
                    models.Index(fields=['region', 'status'], name='dispute_region_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DisputeUpdate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('status_change', models.CharField(blank=True, max_length=100)),
                ('notes', models.TextField(blank=True)),
                ('dispute', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='updates', to='registry.dispute')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='dispute_updates', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['date'],
            },
        ),
        migrations.CreateModel(
            name='Mortgage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('mortgage_id', models.CharField(default=registry.models.mortgages.generate_mortgage_id, max_length=20, unique=True)),
                ('lender_name', models.CharField(db_index=True, max_length=255)),
                ('lender_type', models.CharField(choices=[('bank', 'Bank'), ('credit_union', 'Credit union'), ('private_lender', 'Private lender'), ('government', 'Government'), ('other', 'Other')], max_length=20)),
                ('lender_registration_number', models.CharField(blank=True, max_length=50)),
                ('mortgage_type', models.CharField(choices=[('residential', 'Residential'), ('commercial', 'Commercial'), ('agricultural', 'Agricultural'), ('construction', 'Construction'), ('refinance', 'Refinance')], max_length=20)),
                ('mortgage_status', models.CharField(choices=[('active', 'Active'), ('paid_off', 'Paid off'), ('defaulted', 'Defaulted'), ('foreclosed', 'Foreclosed'), ('suspended', 'Suspended'), ('cancelled', 'Cancelled')], db_index=True, default='active', max_length=20)),
                ('principal_amount', models.DecimalField(decimal_places=2, max_digits=16)),
                ('outstanding_balance', models.DecimalField(decimal_places=2, max_digits=16)),
                ('interest_rate', models.DecimalField(decimal_places=2, help_text='Percent per year', max_digits=5)),
                ('interest_type', models.CharField(choices=[('fixed', 'Fixed'), ('variable', 'Variable'), ('mixed', 'Mixed')], default='fixed', max_length=10)),
                ('term_years', models.PositiveIntegerField(blank=True, null=True)),
                ('term_months', models.PositiveIntegerField(blank=True, null=True)),
                ('monthly_payment', models.DecimalField(decimal_places=2, max_digits=12)),
                ('origination_date', models.DateTimeField(db_index=True)),
                ('maturity_date', models.DateTimeField()),
                ('registration_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('last_payment_date', models.DateTimeField(blank=True, null=True)),
                ('next_payment_due_date', models.DateTimeField(blank=True, db_index=True, null=True)),
                ('total_paid', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16)),
                ('total_interest_paid', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16)),
                ('is_current_on_payments', models.BooleanField(default=True)),
                ('days_past_due', models.PositiveIntegerField(default=0)),
                ('missed_payments', models.PositiveIntegerField(default=0)),
                ('default_date', models.DateTimeField(blank=True, null=True)),
                ('default_reason', models.TextField(blank=True)),
                ('property_value_at_origination', models.DecimalField(decimal_places=2, max_digits=16)),
                ('current_property_value', models.DecimalField(blank=True, decimal_places=2, max_digits=16, null=True)),
                ('loan_to_value_ratio', models.DecimalField(decimal_places=2, help_text='Percent', max_digits=6)),
                ('mortgage_deed_number', models.CharField(max_length=50)),
                ('lien_priority', models.PositiveSmallIntegerField(default=1, help_text='1 = first mortgage, 2 = second, ...')),
                ('region', models.CharField(choices=REGION_CHOICES, db_index=True, max_length=50)),
                ('registry_office', models.CharField(blank=True, max_length=100)),
                ('risk_rating', models.CharField(choices=[('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('very_high', 'Very high')], default='low', max_length=10)),
                ('risk_factors', models.JSONField(blank=True, default=list)),
                ('is_under_review', models.BooleanField(default=False)),
                ('requires_action', models.BooleanField(default=False)),
                ('notes', models.TextField(blank=True)),
                ('borrower', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='mortgages', to='registry.owner')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_mortgages', to=settings.AUTH_USER_MODEL)),
                ('parcel', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='mortgages', to='registry.parcel')),
            ],
            options={
                'ordering': ['-origination_date'],
                'indexes': [
                    models.Index(fields=['region', 'mortgage_status'], name='mortgage_region_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MortgagePayment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('payment_date', models.DateTimeField()),
                ('amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('principal', models.DecimalField(decimal_places=2, max_digits=14)),
                ('interest', models.DecimalField(decimal_places=2, max_digits=14)),
                ('late_fee', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12)),
                ('payment_method', models.CharField(blank=True, max_length=50)),
                ('receipt_number', models.CharField(blank=True, max_length=50)),
                ('mortgage', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='registry.mortgage')),
            ],
            options={
                'ordering': ['-payment_date'],
            },
        ),
        migrations.CreateModel(
            name='Subsidy',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('subsidy_id', models.CharField(default=registry.models.subsidies.generate_subsidy_id, max_length=20, unique=True)),
                ('program_name', models.CharField(choices=[('First-Time Homebuyer', 'First-Time Homebuyer'), ('Rural Development', 'Rural Development'), ('Low-Income Housing', 'Low-Income Housing'), ('Veterans Housing', 'Veterans Housing'), ('Disability Housing', 'Disability Housing'), ('Young Families', 'Young Families'), ('Agricultural Land', 'Agricultural Land'), ('Energy Efficiency Retrofit', 'Energy Efficiency Retrofit')], db_index=True, max_length=50)),
                ('program_year', models.PositiveIntegerField(db_index=True)),
                ('allocated_amount', models.DecimalField(decimal_places=2, max_digits=16)),
                ('approved_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16)),
                ('disbursed_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16)),
                ('remaining_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=16)),
                ('application_date', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('approval_date', models.DateTimeField(blank=True, null=True)),
                ('disbursement_date', models.DateTimeField(blank=True, null=True)),
                ('completion_date', models.DateTimeField(blank=True, null=True)),
                ('expiry_date', models.DateTimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('disbursed', 'Disbursed'), ('completed', 'Completed'), ('rejected', 'Rejected'), ('cancelled', 'Cancelled'), ('expired', 'Expired')], db_index=True, default='pending', max_length=20)),
                ('is_eligible', models.BooleanField(default=True)),
                ('eligibility_criteria', models.JSONField(blank=True, default=dict)),
                ('is_verified', models.BooleanField(default=False)),
                ('verification_date', models.DateTimeField(blank=True, null=True)),
                ('is_legitimate', models.BooleanField(db_index=True, default=True)),
                ('region', models.CharField(choices=REGION_CHOICES, db_index=True, max_length=50)),
                ('municipality', models.CharField(blank=True, max_length=100)),
                ('utilization_rate', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Percent', max_digits=6)),
                ('processing_time', models.PositiveIntegerField(default=0, help_text='Days from application to approval')),
                ('notes', models.TextField(blank=True)),
                ('rejection_reason', models.TextField(blank=True)),
                ('cancellation_reason', models.TextField(blank=True)),
                ('approved_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='approved_subsidies', to=settings.AUTH_USER_MODEL)),
                ('beneficiary', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='subsidies', to='registry.owner')),
                ('parcel', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='subsidies', to='registry.parcel')),
                ('processing_officer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='processed_subsidies', to=settings.AUTH_USER_MODEL)),
                ('verified_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='verified_subsidies', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name_plural': 'Subsidies',
                'ordering': ['-application_date'],
                'indexes': [
                    models.Index(fields=['program_name', 'status'], name='subsidy_program_status_idx'),
                    models.Index(fields=['region', 'program_year'], name='subsidy_region_year_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='SubsidyDisbursement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('disbursement_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('method', models.CharField(choices=[('bank_transfer', 'Bank transfer'), ('check', 'Check'), ('direct_payment', 'Direct payment')], max_length=20)),
                ('reference_number', models.CharField(blank=True, max_length=50)),
                ('recipient', models.CharField(default='Beneficiary', max_length=100)),
                ('subsidy', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='disbursements', to='registry.subsidy')),
            ],
            options={
                'ordering': ['disbursement_date'],
            },
        ),
        migrations.CreateModel(
            name='SubsidyFraudFlag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('flag_type', models.CharField(choices=[('duplicate_application', 'Duplicate application'), ('false_documentation', 'False documentation'), ('income_misrepresentation', 'Income misrepresentation'), ('property_overvaluation', 'Property overvaluation'), ('ineligible_beneficiary', 'Ineligible beneficiary')], max_length=30)),
                ('flag_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('description', models.TextField(blank=True)),
                ('is_resolved', models.BooleanField(default=False)),
                ('subsidy', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='fraud_flags', to='registry.subsidy')),
            ],
            options={
                'ordering': ['-flag_date'],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('event_id', models.CharField(default=registry.models.audit.generate_event_id, max_length=40, unique=True)),
                ('event_type', models.CharField(choices=[('parcel_created', 'Parcel created'), ('parcel_updated', 'Parcel updated'), ('parcel_deleted', 'Parcel deleted'), ('ownership_transferred', 'Ownership transferred'), ('transfer_approved', 'Transfer approved'), ('transfer_rejected', 'Transfer rejected'), ('dispute_filed', 'Dispute filed'), ('dispute_resolved', 'Dispute resolved'), ('mortgage_created', 'Mortgage created'), ('mortgage_updated', 'Mortgage updated'), ('payment_recorded', 'Payment recorded'), ('user_login', 'User login'), ('user_logout', 'User logout'), ('user_created', 'User created'), ('user_updated', 'User updated'), ('permission_changed', 'Permission changed'), ('fraud_detected', 'Fraud detected'), ('blockchain_recorded', 'Blockchain recorded'), ('report_generated', 'Report generated'), ('document_uploaded', 'Document uploaded'), ('document_verified', 'Document verified'), ('system_configuration', 'System configuration'), ('data_export', 'Data export'), ('data_import', 'Data import'), ('backup_created', 'Backup created'), ('other', 'Other')], db_index=True, max_length=30)),
                ('action', models.CharField(max_length=500)),
                ('user_role', models.CharField(blank=True, max_length=20)),
                ('target_model', models.CharField(choices=[('Parcel', 'Parcel'), ('Owner', 'Owner'), ('OwnershipHistory', 'Ownership history'), ('Transfer', 'Transfer'), ('Dispute', 'Dispute'), ('Mortgage', 'Mortgage'), ('Subsidy', 'Subsidy'), ('User', 'User'), ('System', 'System')], max_length=20)),
                ('target_id', models.CharField(blank=True, max_length=64)),
                ('target_description', models.CharField(blank=True, max_length=255)),
                ('changes', models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder, help_text="{'before': {...}, 'after': {...}}")),
                ('fields_changed', models.JSONField(blank=True, default=list)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.CharField(blank=True, max_length=255)),
                ('region', models.CharField(blank=True, choices=REGION_CHOICES, db_index=True, max_length=50)),
                ('status', models.CharField(choices=[('success', 'Success'), ('failure', 'Failure'), ('partial', 'Partial'), ('warning', 'Warning')], default='success', max_length=10)),
                ('error_message', models.TextField(blank=True)),
                ('severity', models.CharField(choices=[('info', 'Info'), ('low', 'Low'), ('medium', 'Medium'), ('high', 'High'), ('critical', 'Critical')], db_index=True, default='info', max_length=10)),
                ('fraud_indicator', models.BooleanField(default=False)),
                ('suspicious_activity', models.BooleanField(default=False)),
                ('risk_level', models.CharField(choices=[('none', 'None'), ('low', 'Low'), ('medium', 'Medium'), ('high', 'High')], default='none', max_length=10)),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('metadata', models.JSONField(blank=True, default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder)),
                ('is_reviewed', models.BooleanField(default=False)),
                ('review_date', models.DateTimeField(blank=True, null=True)),
                ('review_notes', models.TextField(blank=True)),
                ('retention_period', models.PositiveIntegerField(default=2555, help_text='Days')),
                ('expiry_date', models.DateTimeField(blank=True, null=True)),
                ('is_archived', models.BooleanField(default=False)),
                ('performed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='audit_events', to=settings.AUTH_USER_MODEL)),
                ('reviewed_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='reviewed_audit_events', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-timestamp'],
                'indexes': [
                    models.Index(fields=['event_type', 'region', '-timestamp'], name='audit_type_region_time_idx'),
                    models.Index(fields=['performed_by', 'event_type', '-timestamp'], name='audit_actor_type_time_idx'),
                ],
            },
        ),
    ]
