from datetime import timedelta

from django.core import mail
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import CustomUser, LoginRecord, RoleChoices
from registry.models import AuditLog


class LoginTest(TestCase):
    """Email/password login, lockout and token use"""

    def setUp(self):
        self.client = APIClient()
        self.password = 'Registrar@123'
        self.user = CustomUser.objects.create_user(
            email='registrar@land.gov.rs',
            password=self.password,
            first_name='Ana',
            last_name='Jovanović',
            role=RoleChoices.REGISTRAR,
            assigned_regions=['Belgrade'],
            is_verified=True,
        )

    def login(self, email=None, password=None):
        return self.client.post(
            reverse('login'),
            {'email': email or self.user.email, 'password': password or self.password},
            format='json'
        )

    def test_login_returns_tokens_and_user(self):
        """Test a successful login returns both tokens and the public user fields"""
        response = self.login()

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Login successful')
        self.assertIn('token', response.data['data'])
        self.assertIn('refresh_token', response.data['data'])
        user_data = response.data['data']['user']
        self.assertEqual(user_data['email'], self.user.email)
        self.assertNotIn('password', user_data)
        self.assertNotIn('otp_code', user_data)

    def test_login_is_case_insensitive_on_email(self):
        response = self.login(email='Registrar@Land.gov.rs')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_login_records_history_and_audit(self):
        """Test a successful login resets counters, keeps history and writes an audit entry"""
        self.user.login_attempts = 3
        self.user.save()

        self.login()

        self.user.refresh_from_db()
        self.assertEqual(self.user.login_attempts, 0)
        self.assertIsNotNone(self.user.last_login)
        self.assertEqual(self.user.login_history.count(), 1)
        self.assertTrue(
            AuditLog.objects.filter(
                event_type=AuditLog.EventType.USER_LOGIN,
                performed_by=self.user,
                status=AuditLog.Status.SUCCESS,
            ).exists()
        )

    @override_settings(LOGIN_HISTORY_LIMIT=3)
    def test_login_history_is_capped(self):
        for _ in range(5):
            self.assertEqual(self.login().status_code, status.HTTP_200_OK)
        self.assertEqual(LoginRecord.objects.filter(user=self.user).count(), 3)

    def test_unknown_email_is_rejected(self):
        response = self.login(email='nobody@land.gov.rs')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['message'], 'Invalid email or password')

    def test_wrong_password_counts_attempt(self):
        """Test a wrong password is rejected, counted and audited as a failure"""
        response = self.login(password='Wrong@1234')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.user.refresh_from_db()
        self.assertEqual(self.user.login_attempts, 1)
        self.assertTrue(
            AuditLog.objects.filter(
                event_type=AuditLog.EventType.USER_LOGIN,
                status=AuditLog.Status.FAILURE,
            ).exists()
        )

    def test_account_locks_after_max_attempts(self):
        """Test the fifth failure locks the account and even the right password is refused"""
        for _ in range(5):
            response = self.login(password='Wrong@1234')
            self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        self.user.refresh_from_db()
        self.assertTrue(self.user.is_locked())

        response = self.login()
        self.assertEqual(response.status_code, 423)
        self.assertIn('locked', response.data['message'])

    def test_expired_lock_restarts_count(self):
        self.user.login_attempts = 5
        self.user.lock_until = timezone.now() - timedelta(minutes=1)
        self.user.save()

        self.login(password='Wrong@1234')

        self.user.refresh_from_db()
        self.assertEqual(self.user.login_attempts, 1)
        self.assertIsNone(self.user.lock_until)

    def test_deactivated_account_is_forbidden(self):
        self.user.is_active = False
        self.user.save()

        response = self.login()

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn('deactivated', response.data['message'])

    def test_suspended_account_reports_reason(self):
        self.user.is_suspended = True
        self.user.suspension_reason = 'Under investigation'
        self.user.save()

        response = self.login()

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn('Under investigation', response.data['message'])

    def test_access_token_authenticates_me(self):
        token = self.login().data['data']['token']
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.get(reverse('me'))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['email'], self.user.email)
        self.assertEqual(len(response.data['data']['login_history']), 1)

    def test_token_of_suspended_user_is_refused(self):
        """Test a token issued before suspension stops working"""
        token = self.login().data['data']['token']
        self.user.is_suspended = True
        self.user.suspension_reason = 'Under investigation'
        self.user.save()
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.get(reverse('me'))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Account is suspended.')

    def test_token_of_deactivated_user_is_refused(self):
        token = self.login().data['data']['token']
        self.user.is_active = False
        self.user.save()
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')

        response = self.client.get(reverse('me'))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Account is deactivated.')

    def test_me_requires_authentication(self):
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])


class LogoutTest(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = CustomUser.objects.create_user(
            email='clerk@land.gov.rs',
            password='Clerk@1234',
            role=RoleChoices.CLERK,
        )

    def test_logout_blacklists_refresh_token(self):
        """Test the refresh token cannot be used after logout"""
        login = self.client.post(
            reverse('login'),
            {'email': self.user.email, 'password': 'Clerk@1234'},
            format='json'
        )
        tokens = login.data['data']
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['token']}")

        response = self.client.post(reverse('logout'), {'refresh_token': tokens['refresh_token']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(
            AuditLog.objects.filter(event_type=AuditLog.EventType.USER_LOGOUT, performed_by=self.user).exists()
        )

        self.client.credentials()
        response = self.client.post(reverse('token_refresh'), {'refresh': tokens['refresh_token']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_with_garbage_token(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.post(reverse('logout'), {'refresh_token': 'not-a-token'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class PasswordManagementTest(TestCase):
    """Password change, reset and email verification flows"""

    def setUp(self):
        self.client = APIClient()
        self.user = CustomUser.objects.create_user(
            email='auditor@land.gov.rs',
            password='Auditor@123',
            role=RoleChoices.AUDITOR,
        )

    def test_change_password(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.put(
            reverse('change-password'),
            {'current_password': 'Auditor@123', 'new_password': 'Changed@456'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Changed@456'))

    def test_change_password_checks_current_password(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.put(
            reverse('change-password'),
            {'current_password': 'Wrong@1234', 'new_password': 'Changed@456'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_change_password_enforces_strength(self):
        """Test a weak new password is refused with field errors"""
        self.client.force_authenticate(user=self.user)
        response = self.client.put(
            reverse('change-password'),
            {'current_password': 'Auditor@123', 'new_password': 'weakpass'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('new_password', response.data['errors'])
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Auditor@123'))

    def test_forgot_password_hides_unknown_email(self):
        response = self.client.post(reverse('forgot-password'), {'email': 'ghost@land.gov.rs'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(mail.outbox), 0)

    def test_reset_password_with_emailed_token(self):
        """Test the full forgot/reset round: token stored, emailed, then spent"""
        response = self.client.post(reverse('forgot-password'), {'email': self.user.email}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertNotIn('reset_token', response.data)
        self.assertEqual(len(mail.outbox), 1)

        self.user.refresh_from_db()
        token = str(self.user.reset_token)
        self.assertIn(token, mail.outbox[0].body)

        response = self.client.post(
            reverse('reset-password'),
            {'reset_token': token, 'new_password': 'Restored@789'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Restored@789'))
        self.assertIsNone(self.user.reset_token)

        # A token works once
        response = self.client.post(
            reverse('reset-password'),
            {'reset_token': token, 'new_password': 'Another@789'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_expired_reset_token_is_refused(self):
        self.client.post(reverse('forgot-password'), {'email': self.user.email}, format='json')
        self.user.refresh_from_db()
        self.user.reset_token_created_at = timezone.now() - timedelta(hours=2)
        self.user.save()

        response = self.client.post(
            reverse('reset-password'),
            {'reset_token': str(self.user.reset_token), 'new_password': 'Restored@789'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Invalid or expired reset token')

    def test_verify_email_with_otp(self):
        self.user.otp_code = '123456'
        self.user.otp_created_at = timezone.now()
        self.user.save()

        response = self.client.post(
            reverse('verify-email'),
            {'email': self.user.email, 'verification_code': '123456'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.is_verified)
        self.assertIsNone(self.user.otp_code)

    def test_expired_otp_is_refused(self):
        self.user.otp_code = '123456'
        self.user.otp_created_at = timezone.now() - timedelta(minutes=30)
        self.user.save()

        response = self.client.post(
            reverse('verify-email'),
            {'email': self.user.email, 'verification_code': '123456'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_resend_verification_sends_new_code(self):
        response = self.client.post(reverse('resend-verification'), {'email': self.user.email}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertEqual(len(self.user.otp_code), 6)
        self.assertIn(self.user.otp_code, mail.outbox[0].body)
