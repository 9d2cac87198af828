from decimal import Decimal
from io import StringIO

from django.core.management import CommandError, call_command
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import CustomUser, RoleChoices
from registry.management.commands.seed_database import region_code
from registry.models import Dispute, Parcel, Subsidy, Transfer
from .helpers import make_dispute, make_owner, make_parcel, make_transfer, make_user


class DashboardApiTest(TestCase):
    """Dashboard endpoints aggregate within the caller's regions"""

    def setUp(self):
        self.client = APIClient()
        self.registrar = make_user(RoleChoices.REGISTRAR, regions=['Belgrade', 'Kolubara'])
        self.minister = make_user(RoleChoices.MINISTER)
        self.verified = make_parcel()
        self.disputed = make_parcel(legal_status=Parcel.LegalStatus.DISPUTED)
        self.pirot = make_parcel(region='Pirot', market_value=Decimal('90000.00'))
        self.client.force_authenticate(user=self.registrar)

    def test_stats_are_scoped(self):
        response = self.client.get(reverse('dashboard-stats'), {'time_range': '7days'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['parcels'], {'total': 2, 'verified': 1, 'disputed': 1, 'verification_rate': 50.0})
        self.assertEqual(data['land_area'], {'total': 1000.0, 'unit': 'sqm'})
        self.assertEqual(data['market_value']['total'], 300000.0)
        self.assertEqual(data['new_registrations'], 2)
        self.assertEqual(data['time_range']['range'], '7days')
        # Owners are counted across the whole registry
        self.assertEqual(data['owners']['total'], 3)

    def test_stats_without_time_range(self):
        response = self.client.get(reverse('dashboard-stats'))
        self.assertNotIn('time_range', response.data['data'])
        self.assertNotIn('new_registrations', response.data['data'])

    def test_minister_sees_every_region(self):
        self.client.force_authenticate(user=self.minister)
        response = self.client.get(reverse('dashboard-stats'), {'region': 'All Regions'})
        self.assertEqual(response.data['data']['parcels']['total'], 3)

    def test_region_outside_assignment_is_forbidden(self):
        response = self.client.get(reverse('dashboard-regional-data'), {'region': 'Pirot'})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data['success'])

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('dashboard-stats'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_affordability(self):
        """Test ratios use the scoped average and the price table covers every region"""
        response = self.client.get(reverse('dashboard-affordability'))

        data = response.data['data']
        self.assertEqual(data['average_ratio'], 7.2)
        self.assertEqual(data['overall_score'], 78)
        self.assertEqual(data['income_categories'][2]['avg_property_price'], 150000)
        self.assertEqual(
            [row['region'] for row in data['avg_prices_by_region']],
            ['Belgrade', 'Pirot'],
        )
        self.assertEqual(data['avg_prices_by_region'][1]['affordability_ratio'], 3.0)

    def test_subsidy_effectiveness(self):
        year = timezone.now().year
        beneficiary = make_owner()
        Subsidy.objects.create(
            program_name=Subsidy.Program.YOUNG_FAMILIES, program_year=year, beneficiary=beneficiary,
            allocated_amount=Decimal('10000'), approved_amount=Decimal('10000'),
            disbursed_amount=Decimal('5000'), status=Subsidy.Status.DISBURSED, region='Belgrade',
        )
        Subsidy.objects.create(
            program_name=Subsidy.Program.YOUNG_FAMILIES, program_year=year, beneficiary=beneficiary,
            allocated_amount=Decimal('50000'), region='Pirot',
        )

        response = self.client.get(reverse('dashboard-subsidy'))

        data = response.data['data']
        self.assertEqual(data['year'], year)
        self.assertEqual(data['total_applications'], 1)
        self.assertEqual(data['utilization_rate'], 50.0)
        self.assertEqual(data['leakage_rate'], 0.0)
        self.assertEqual(data['interpretation']['utilization_level'], 'Low')
        self.assertEqual(data['by_program'][0]['program_name'], Subsidy.Program.YOUNG_FAMILIES)
        self.assertEqual(data['by_program'][0]['beneficiaries'], 1)

    def test_subsidy_rejects_non_numeric_year(self):
        response = self.client.get(reverse('dashboard-subsidy'), {'year': 'abc'})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

    def test_subsidy_year_without_data_uses_fallbacks(self):
        response = self.client.get(reverse('dashboard-subsidy'), {'year': '1999'})

        self.assertEqual(response.data['data']['year'], 1999)
        self.assertEqual(response.data['data']['utilization_rate'], 74.0)

    def test_bubble_risk(self):
        response = self.client.get(reverse('dashboard-bubble-risk'))

        data = response.data['data']
        self.assertEqual(data['current_avg_price'], 150000)
        self.assertEqual(data['current_price_growth'], 7.2)
        self.assertEqual(data['risk_score'], 78)
        self.assertEqual(len(data['monthly_trends']), 12)

    def test_regional_data(self):
        make_dispute(self.verified)
        make_transfer(self.verified, transfer_status=Transfer.Status.COMPLETED)
        make_dispute(self.pirot)

        response = self.client.get(reverse('dashboard-regional-data'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        rows = response.data['data']
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual(row['region'], 'Belgrade')
        self.assertEqual(row['parcels'], 2)
        self.assertEqual(row['verification_rate'], 50.0)
        self.assertEqual(row['disputes'], 1)
        self.assertEqual(row['transfers'], 1)
        # No completed transfer has a processing time yet, so the estimate is used
        self.assertEqual(row['avg_processing_days'], 3.7)
        self.assertEqual(len(row['transfers_last_6m']), 6)
        self.assertEqual(row['transfers_last_6m'][-1]['value'], 1)
        self.assertEqual(row['disputes_last_6m'][-1]['value'], 1)

    def test_fraud_stats(self):
        make_dispute(self.verified, dispute_type=Dispute.DisputeType.FRAUD_ALLEGATION)
        make_dispute(self.pirot, dispute_type=Dispute.DisputeType.FRAUD_ALLEGATION)
        make_transfer(self.disputed, is_suspicious=True)

        response = self.client.get(reverse('dashboard-fraud-stats'))

        data = response.data['data']
        self.assertEqual(data['total_fraud_cases'], 1)
        self.assertEqual(data['blocked_amount'], 42500)
        self.assertEqual(data['suspicious_transfers'], 1)
        self.assertEqual(len(data['monthly']), 8)
        self.assertEqual(data['monthly'][-1]['count'], 1)

    def test_trends(self):
        make_transfer(self.verified)
        make_transfer(self.disputed, agreed_price=Decimal('40000.00'))
        make_transfer(self.pirot)

        response = self.client.get(reverse('dashboard-trends'), {'metric': 'transfers', 'period': '7days'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['metric'], 'transfers')
        self.assertEqual(response.data['period'], '7days')
        self.assertEqual(response.data['region'], 'All Regions')
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['count'], 2)
        self.assertEqual(response.data['data'][0]['total_value'], 200000.0)

    def test_trends_unknown_metric_is_empty(self):
        response = self.client.get(reverse('dashboard-trends'), {'metric': 'weather', 'region': 'Belgrade'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'], [])
        self.assertEqual(response.data['region'], 'Belgrade')

    def test_health_check_is_public(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse('health'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'OK')


class SeedDatabaseTest(TestCase):
    """Smoke test for the demo data command"""

    def test_seed_small_dataset(self):
        out = StringIO()
        call_command('seed_database', owners=6, parcels=12, seed=7, stdout=out)

        self.assertEqual(Parcel.objects.count(), 12)
        self.assertTrue(CustomUser.objects.filter(email='admin@land.gov.rs', role=RoleChoices.ADMIN).exists())
        self.assertTrue(CustomUser.objects.get(email='admin@land.gov.rs').check_password('Admin@123'))
        self.assertFalse(Parcel.objects.filter(registration_date__gt=timezone.now()).exists())
        self.assertIn('Database seeding completed successfully', out.getvalue())

    def test_rejects_empty_dataset(self):
        with self.assertRaises(CommandError):
            call_command('seed_database', owners=0, parcels=10, stdout=StringIO())

    def test_region_code_folds_accents(self):
        self.assertEqual(region_code('Šumadija'), 'SU')
        self.assertEqual(region_code('Južna Bačka'), 'JU')
