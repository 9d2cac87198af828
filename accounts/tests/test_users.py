import random

from django.core import mail
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import CustomUser, PermissionChoices, RoleChoices
from accounts.permissions import resolve_region_scope
from accounts.utils import validate_password
from registry.constants import ALL_REGIONS
from registry.models import AuditLog
from utils.exceptions import RegionAccessDenied


class UserManagementTest(TestCase):
    """Creating and changing staff accounts"""

    def setUp(self):
        self.client = APIClient()
        self.admin = CustomUser.objects.create_user(
            email='admin@land.gov.rs',
            password='Admin@123',
            role=RoleChoices.ADMIN,
            permissions=[PermissionChoices.MANAGE_USERS],
        )
        self.viewer = CustomUser.objects.create_user(
            email='viewer@land.gov.rs',
            password='Viewer@123',
            role=RoleChoices.VIEWER,
            assigned_regions=['Nišava'],
        )
        self.new_user_data = {
            'email': 'New.Registrar@land.gov.rs',
            'first_name': 'Milan',
            'last_name': 'Ilić',
            'role': RoleChoices.REGISTRAR,
            'permissions': ['create_parcel', 'edit_parcel'],
            'assigned_regions': ['Belgrade'],
            'department': 'land_registry',
        }

    def test_create_user_emails_credentials(self):
        """Test a manager creates an account and the temporary password is emailed"""
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(reverse('user-list'), self.new_user_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['email_sent'])
        self.assertEqual(response.data['data']['email'], 'new.registrar@land.gov.rs')

        user = CustomUser.objects.get(email='new.registrar@land.gov.rs')
        self.assertEqual(user.created_by, self.admin)
        self.assertEqual(user.permissions, ['create_parcel', 'edit_parcel'])
        self.assertFalse(user.is_verified)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn('Temporary Password', mail.outbox[0].body)
        self.assertTrue(
            AuditLog.objects.filter(event_type=AuditLog.EventType.USER_CREATED, target_id=str(user.pk)).exists()
        )

    def test_create_user_requires_manage_users(self):
        self.client.force_authenticate(user=self.viewer)
        response = self.client.post(reverse('user-list'), self.new_user_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn('manage_users', response.data['message'])

    def test_create_user_rejects_duplicate_email(self):
        self.client.force_authenticate(user=self.admin)
        self.new_user_data['email'] = 'VIEWER@land.gov.rs'
        response = self.client.post(reverse('user-list'), self.new_user_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data['errors'])

    def test_create_user_rejects_unknown_permission(self):
        self.client.force_authenticate(user=self.admin)
        self.new_user_data['permissions'] = ['create_parcel', 'launch_rockets']
        response = self.client.post(reverse('user-list'), self.new_user_data, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('permissions', response.data['errors'])

    def test_permission_change_is_audited(self):
        """Test changing access fields is logged as permission_changed with before/after"""
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            reverse('user-detail', kwargs={'pk': self.viewer.pk}),
            {'role': RoleChoices.AUDITOR, 'permissions': ['view_audit_logs']},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.viewer.refresh_from_db()
        self.assertEqual(self.viewer.role, RoleChoices.AUDITOR)

        entry = AuditLog.objects.get(event_type=AuditLog.EventType.PERMISSION_CHANGED)
        self.assertEqual(entry.changes['before']['role'], RoleChoices.VIEWER)
        self.assertEqual(entry.changes['after']['permissions'], ['view_audit_logs'])
        self.assertEqual(entry.severity, AuditLog.Severity.HIGH)

    def test_suspension_requires_reason(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.patch(
            reverse('user-detail', kwargs={'pk': self.viewer.pk}),
            {'is_suspended': True},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_users_is_paginated(self):
        self.client.force_authenticate(user=self.viewer)
        response = self.client.get(reverse('user-list'), {'role': RoleChoices.ADMIN})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['total'], 1)
        self.assertEqual(response.data['data'][0]['email'], self.admin.email)


class RegionScopeTest(TestCase):
    """resolve_region_scope decides which regions a query may touch"""

    def setUp(self):
        self.registrar = CustomUser.objects.create_user(
            email='registrar@land.gov.rs',
            password='Registrar@123',
            role=RoleChoices.REGISTRAR,
            assigned_regions=['Belgrade', 'Kolubara'],
        )
        self.minister = CustomUser.objects.create_user(
            email='minister@land.gov.rs',
            password='Minister@123',
            role=RoleChoices.MINISTER,
        )

    def test_restricted_user_gets_assigned_regions(self):
        self.assertEqual(resolve_region_scope(self.registrar), ['Belgrade', 'Kolubara'])
        self.assertEqual(resolve_region_scope(self.registrar, ALL_REGIONS), ['Belgrade', 'Kolubara'])

    def test_restricted_user_narrows_to_one_region(self):
        self.assertEqual(resolve_region_scope(self.registrar, 'Kolubara'), ['Kolubara'])

    def test_restricted_user_cannot_ask_outside_assignment(self):
        with self.assertRaises(RegionAccessDenied):
            resolve_region_scope(self.registrar, 'Nišava')

    def test_unrestricted_roles_see_everything(self):
        self.assertIsNone(resolve_region_scope(self.minister))
        self.assertEqual(resolve_region_scope(self.minister, 'Nišava'), ['Nišava'])

    def test_view_all_regions_permission_lifts_restriction(self):
        self.registrar.permissions = [PermissionChoices.VIEW_ALL_REGIONS]
        self.registrar.save()
        self.assertIsNone(resolve_region_scope(self.registrar))


class TemporaryPasswordTest(TestCase):
    """Generated credentials must pass the strength rules and not be reproducible"""

    def test_passes_strength_rules(self):
        for _attempt in range(20):
            password = CustomUser.objects.make_random_password()
            self.assertEqual(len(password), 12)
            self.assertEqual(validate_password(password), password)

    def test_not_derived_from_module_random_state(self):
        random.seed(1234)
        first = CustomUser.objects.make_random_password()
        random.seed(1234)
        second = CustomUser.objects.make_random_password()

        self.assertNotEqual(first, second)
