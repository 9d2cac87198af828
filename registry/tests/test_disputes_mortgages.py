from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import PermissionChoices, RoleChoices
from registry.models import (
    AuditLog, Dispute, Mortgage, OwnershipHistory, Subsidy, SubsidyDisbursement, SubsidyFraudFlag,
)
from .helpers import make_dispute, make_mortgage, make_owner, make_parcel, make_transfer, make_user


class DisputeApiTest(TestCase):
    """Filing, resolving and summarising disputes"""

    def setUp(self):
        self.client = APIClient()
        self.clerk = make_user(RoleChoices.CLERK, permissions=[PermissionChoices.CREATE_DISPUTE], regions=['Belgrade'])
        self.judge = make_user(RoleChoices.JUDGE, permissions=[PermissionChoices.RESOLVE_DISPUTE], regions=['All Regions'])
        self.parcel = make_parcel()
        self.claimant = make_owner()

    def file(self, **overrides):
        data = {
            'parcel_id': self.parcel.pk,
            'claimant_id': self.claimant.pk,
            'defendant_id': self.parcel.current_owner.pk,
            'dispute_type': Dispute.DisputeType.OWNERSHIP_CLAIM,
            'description': 'Claimant holds an unregistered 1998 sale contract.',
            'claimed_amount': '35000.00',
            'priority': Dispute.Priority.HIGH,
        }
        data.update(overrides)
        self.client.force_authenticate(user=self.clerk)
        return self.client.post(reverse('dispute-list'), data, format='json')

    def test_file_dispute_takes_region_from_parcel(self):
        response = self.file()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        dispute = Dispute.objects.get(dispute_id=response.data['data']['dispute_id'])
        self.assertEqual(dispute.region, 'Belgrade')
        self.assertEqual(dispute.status, Dispute.Status.OPEN)
        self.assertEqual(dispute.created_by, self.clerk)
        self.assertEqual(dispute.updates.count(), 1)
        self.assertTrue(
            AuditLog.objects.filter(event_type=AuditLog.EventType.DISPUTE_FILED, target_id=str(dispute.pk)).exists()
        )

    def test_fraud_allegation_is_flagged_in_audit(self):
        self.file(dispute_type=Dispute.DisputeType.FRAUD_ALLEGATION)

        entry = AuditLog.objects.get(event_type=AuditLog.EventType.DISPUTE_FILED)
        self.assertTrue(entry.fraud_indicator)
        self.assertEqual(entry.severity, AuditLog.Severity.HIGH)

    def test_claimant_and_defendant_must_differ(self):
        response = self.file(defendant_id=self.claimant.pk)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('defendant_id', response.data['errors'])

    def test_filing_outside_region_is_forbidden(self):
        response = self.file(parcel_id=make_parcel(region='Pirot').pk)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_filing_requires_permission(self):
        viewer = make_user(RoleChoices.VIEWER, regions=['Belgrade'])
        self.client.force_authenticate(user=viewer)
        response = self.client.post(reverse('dispute-list'), {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_resolve_dispute(self):
        """Test a judge resolves an open dispute and the case log grows"""
        dispute = make_dispute(self.parcel)
        self.client.force_authenticate(user=self.judge)

        response = self.client.post(
            reverse('dispute-resolve', kwargs={'pk': dispute.pk}),
            {'outcome': Dispute.Outcome.SETTLEMENT, 'description': 'Boundary redrawn', 'compensation_amount': '2500.00'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        dispute.refresh_from_db()
        self.assertEqual(dispute.status, Dispute.Status.RESOLVED)
        self.assertEqual(dispute.compensation_amount, Decimal('2500.00'))
        self.assertIsNotNone(dispute.resolution_date)
        self.assertEqual(dispute.updates.count(), 1)

        # Resolved disputes cannot be resolved again
        response = self.client.post(
            reverse('dispute-resolve', kwargs={'pk': dispute.pk}),
            {'outcome': Dispute.Outcome.DISMISSED},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_resolve_rejects_unknown_outcome(self):
        dispute = make_dispute(self.parcel)
        self.client.force_authenticate(user=self.judge)
        response = self.client.post(
            reverse('dispute-resolve', kwargs={'pk': dispute.pk}), {'outcome': 'coin_toss'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duration_counts_whole_days(self):
        dispute = make_dispute(self.parcel, filing_date=timezone.now() - timedelta(days=10, hours=2))
        self.assertEqual(dispute.get_duration(), 11)
        self.assertEqual(dispute.days_since_filing, 11)

    def test_summary(self):
        """Test counts by status and priority and the mean resolution time"""
        now = timezone.now()
        make_dispute(self.parcel, priority=Dispute.Priority.HIGH)
        make_dispute(self.parcel, priority=Dispute.Priority.HIGH, status=Dispute.Status.COURT)
        make_dispute(
            self.parcel, status=Dispute.Status.RESOLVED,
            filing_date=now - timedelta(days=30), resolution_date=now - timedelta(days=10),
        )
        make_dispute(
            self.parcel, status=Dispute.Status.RESOLVED,
            filing_date=now - timedelta(days=40), resolution_date=now - timedelta(days=30),
        )
        make_dispute(make_parcel(region='Pirot'))

        self.client.force_authenticate(user=self.clerk)
        response = self.client.get(reverse('dispute-summary'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['by_status'][0], {'status': Dispute.Status.RESOLVED, 'count': 2})
        self.assertEqual(sum(row['count'] for row in data['by_status']), 4)
        self.assertIn({'priority': Dispute.Priority.HIGH, 'count': 2}, data['by_priority'])
        self.assertEqual(data['avg_resolution_days'], 15.0)

    def test_summary_without_resolved_disputes(self):
        make_dispute(self.parcel)
        self.client.force_authenticate(user=self.clerk)

        response = self.client.get(reverse('dispute-summary'))

        self.assertEqual(response.data['data']['avg_resolution_days'], 0)
        self.assertEqual(response.data['data']['by_status'], [{'status': Dispute.Status.OPEN, 'count': 1}])


class MortgagePaymentTest(TestCase):
    """Booking repayments against a mortgage"""

    def setUp(self):
        self.client = APIClient()
        self.officer = make_user(RoleChoices.REGISTRAR, permissions=[PermissionChoices.APPROVE_MORTGAGE], regions=['Belgrade'])
        self.parcel = make_parcel(has_mortgage=True)
        self.mortgage = make_mortgage(self.parcel)
        self.client.force_authenticate(user=self.officer)

    def pay(self, **data):
        return self.client.post(reverse('mortgage-payments', kwargs={'pk': self.mortgage.pk}), data, format='json')

    def test_payment_reduces_balance(self):
        response = self.pay(amount='632.65', principal='257.65', interest='375.00', receipt_number='R-1')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['payment']['receipt_number'], 'R-1')
        self.assertEqual(response.data['data']['mortgage']['outstanding_balance'], '99742.35')

        self.mortgage.refresh_from_db()
        self.assertEqual(self.mortgage.total_paid, Decimal('632.65'))
        self.assertEqual(self.mortgage.total_interest_paid, Decimal('375.00'))
        self.assertTrue(self.mortgage.is_current_on_payments)
        self.assertGreater(self.mortgage.next_payment_due_date, self.mortgage.last_payment_date)
        self.assertTrue(
            AuditLog.objects.filter(event_type=AuditLog.EventType.PAYMENT_RECORDED, target_id=str(self.mortgage.pk)).exists()
        )

    def test_final_payment_pays_off_mortgage(self):
        self.mortgage.outstanding_balance = Decimal('200.00')
        self.mortgage.save()

        response = self.pay(amount='250.00', principal='200.00', interest='50.00')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.mortgage.refresh_from_db()
        self.assertEqual(self.mortgage.outstanding_balance, Decimal('0'))
        self.assertEqual(self.mortgage.mortgage_status, Mortgage.Status.PAID_OFF)

    def test_parts_cannot_exceed_amount(self):
        response = self.pay(amount='100.00', principal='80.00', interest='30.00')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('amount', response.data['errors'])
        self.assertEqual(self.mortgage.payments.count(), 0)

    def test_inactive_mortgage_rejects_payment(self):
        self.mortgage.mortgage_status = Mortgage.Status.DEFAULTED
        self.mortgage.save()

        response = self.pay(amount='100.00', principal='50.00', interest='50.00')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_payment_requires_permission(self):
        clerk = make_user(RoleChoices.CLERK, regions=['Belgrade'])
        self.client.force_authenticate(user=clerk)
        response = self.pay(amount='100.00', principal='50.00', interest='50.00')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_detail_lists_payments(self):
        self.pay(amount='632.65', principal='257.65', interest='375.00')

        response = self.client.get(reverse('mortgage-detail', kwargs={'pk': self.mortgage.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']['payments']), 1)
        self.assertEqual(response.data['data']['parcel']['parcel_id'], self.parcel.parcel_id)


class SubsidyListTest(TestCase):
    """Subsidy applications listed within the caller's regions"""

    def setUp(self):
        self.client = APIClient()
        beneficiary = make_owner()
        self.belgrade = Subsidy.objects.create(
            program_name=Subsidy.Program.YOUNG_FAMILIES, program_year=2024, beneficiary=beneficiary,
            allocated_amount=Decimal('10000'), approved_amount=Decimal('8000'),
            disbursed_amount=Decimal('2000'), status=Subsidy.Status.DISBURSED, region='Belgrade',
        )
        Subsidy.objects.create(
            program_name=Subsidy.Program.AGRICULTURAL_LAND, program_year=2024, beneficiary=beneficiary,
            allocated_amount=Decimal('5000'), region='Pirot',
        )
        self.client.force_authenticate(user=make_user(RoleChoices.REGISTRAR, regions=['Belgrade']))

    def test_list_is_region_scoped(self):
        response = self.client.get(reverse('subsidy-list'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['total'], 1)
        row = response.data['data'][0]
        self.assertEqual(row['subsidy_id'], self.belgrade.subsidy_id)
        self.assertEqual(row['remaining_amount'], '6000.00')
        self.assertEqual(row['utilization_rate'], '25.00')

    def test_filter_by_status(self):
        response = self.client.get(reverse('subsidy-list'), {'status': Subsidy.Status.PENDING})
        self.assertEqual(response.data['pagination']['total'], 0)

    def test_out_of_region_detail_is_forbidden(self):
        other = Subsidy.objects.get(region='Pirot')
        response = self.client.get(reverse('subsidy-detail', kwargs={'pk': other.pk}))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class SubsidyLifecycleTest(TestCase):
    """Disbursements, fraud flags and per-program totals"""

    def setUp(self):
        self.beneficiary = make_owner()
        self.subsidy = Subsidy.objects.create(
            program_name=Subsidy.Program.YOUNG_FAMILIES, program_year=2024, beneficiary=self.beneficiary,
            allocated_amount=Decimal('1000'), approved_amount=Decimal('1000'),
            status=Subsidy.Status.APPROVED, region='Belgrade',
        )

    def test_partial_then_full_disbursement(self):
        self.subsidy.record_disbursement(Decimal('400'), SubsidyDisbursement.Method.BANK_TRANSFER, 'D-1')

        self.subsidy.refresh_from_db()
        self.assertEqual(self.subsidy.status, Subsidy.Status.DISBURSED)
        self.assertEqual(self.subsidy.disbursed_amount, Decimal('400.00'))
        self.assertEqual(self.subsidy.remaining_amount, Decimal('600.00'))
        self.assertEqual(self.subsidy.utilization_rate, Decimal('40.00'))
        self.assertIsNone(self.subsidy.completion_date)

        self.subsidy.record_disbursement(Decimal('600'), SubsidyDisbursement.Method.BANK_TRANSFER, 'D-2')

        self.subsidy.refresh_from_db()
        self.assertEqual(self.subsidy.status, Subsidy.Status.COMPLETED)
        self.assertEqual(self.subsidy.remaining_amount, Decimal('0.00'))
        self.assertIsNotNone(self.subsidy.completion_date)
        self.assertEqual(self.subsidy.disbursements.count(), 2)

    def test_flag_as_fraud_cancels(self):
        flag = self.subsidy.flag_as_fraud(SubsidyFraudFlag.FlagType.DUPLICATE_APPLICATION, 'Second claim for same flat')

        self.subsidy.refresh_from_db()
        self.assertEqual(self.subsidy.status, Subsidy.Status.CANCELLED)
        self.assertFalse(self.subsidy.is_legitimate)
        self.assertEqual(list(self.subsidy.fraud_flags.all()), [flag])

    def test_program_stats(self):
        self.subsidy.record_disbursement(Decimal('1000'), SubsidyDisbursement.Method.DIRECT_PAYMENT)
        flagged = Subsidy.objects.create(
            program_name=Subsidy.Program.YOUNG_FAMILIES, program_year=2024, beneficiary=self.beneficiary,
            allocated_amount=Decimal('500'), region='Belgrade',
        )
        flagged.flag_as_fraud(SubsidyFraudFlag.FlagType.FALSE_DOCUMENTATION, 'Forged payslip')
        Subsidy.objects.create(
            program_name=Subsidy.Program.AGRICULTURAL_LAND, program_year=2024, beneficiary=self.beneficiary,
            allocated_amount=Decimal('2000'), region='Pirot',
        )
        Subsidy.objects.create(
            program_name=Subsidy.Program.YOUNG_FAMILIES, program_year=2023, beneficiary=self.beneficiary,
            allocated_amount=Decimal('9999'), region='Belgrade',
        )

        stats = Subsidy.objects.program_stats(year=2024)

        self.assertEqual([row['program_name'] for row in stats], [
            Subsidy.Program.AGRICULTURAL_LAND, Subsidy.Program.YOUNG_FAMILIES,
        ])
        young = stats[1]
        self.assertEqual(young['count'], 2)
        self.assertEqual(young['total_allocated'], Decimal('1500'))
        self.assertEqual(young['total_disbursed'], Decimal('1000'))
        self.assertEqual(young['completed_count'], 1)
        self.assertEqual(young['fraud_count'], 1)

        only_young = Subsidy.objects.program_stats(program_name=Subsidy.Program.YOUNG_FAMILIES, year=2024)
        self.assertEqual(len(only_young), 1)

    def test_processing_time_rounds_up_to_whole_days(self):
        now = timezone.now()
        self.subsidy.application_date = now - timedelta(days=5, hours=3)
        self.subsidy.approval_date = now
        self.subsidy.save()

        self.assertEqual(self.subsidy.processing_time, 6)


class MortgageArrearsTest(TestCase):
    """Arrears follow the next due date"""

    def setUp(self):
        self.mortgage = make_mortgage(make_parcel(has_mortgage=True))

    def test_overdue_payment(self):
        now = timezone.now()
        self.mortgage.next_payment_due_date = now - timedelta(days=10, hours=2)

        self.mortgage.update_payment_status(now=now)

        self.assertFalse(self.mortgage.is_current_on_payments)
        self.assertEqual(self.mortgage.days_past_due, 10)

    def test_due_date_ahead_is_current(self):
        now = timezone.now()
        self.mortgage.is_current_on_payments = False
        self.mortgage.days_past_due = 30
        self.mortgage.next_payment_due_date = now + timedelta(days=3)

        self.mortgage.update_payment_status(now=now)

        self.assertTrue(self.mortgage.is_current_on_payments)
        self.assertEqual(self.mortgage.days_past_due, 0)


class OwnershipRecordTest(TestCase):
    """Chain-of-title entries and transfer timing"""

    def setUp(self):
        self.parcel = make_parcel()

    def test_mark_as_fraudulent(self):
        history = OwnershipHistory.objects.create(
            parcel=self.parcel,
            new_owner=self.parcel.current_owner,
            transaction_type=OwnershipHistory.TransactionType.SALE,
            transaction_date=timezone.now() - timedelta(days=400),
            legal_basis='Sale contract',
            status=OwnershipHistory.Status.APPROVED,
        )

        history.mark_as_fraudulent('Forged notary stamp')

        history.refresh_from_db()
        self.assertTrue(history.is_fraudulent)
        self.assertEqual(history.status, OwnershipHistory.Status.REJECTED)
        self.assertEqual(history.fraud_notes, 'Forged notary stamp')
        self.assertIsNotNone(history.fraud_detection_date)

    def test_transfer_processing_time_rounds_up(self):
        now = timezone.now()
        transfer = make_transfer(self.parcel, application_date=now - timedelta(days=2, hours=1))

        self.assertIsNone(transfer.processing_time)
        transfer.completion_date = now
        transfer.save()

        self.assertEqual(transfer.processing_time, 3)
