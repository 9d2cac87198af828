import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from registry.services.audit import record_event
from ..exceptions import AccountDeactivated, AccountLocked, AccountSuspended, InvalidCredentials
from ..models import CustomUser
from ..services import get_client_ip, validate_password
from .models import CustomUserSerializer

logger = logging.getLogger(__name__)


def _check_password_strength(value, user=None):
    try:
        return validate_password(value, user)
    except DjangoValidationError as e:
        raise serializers.ValidationError(e.messages)


class LoginSerializer(TokenObtainPairSerializer):
    """
    Email/password login with lockout after repeated failures.

    The checks run in a fixed order: unknown email, lock, deactivation,
    suspension, then the password itself.
    """

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['role'] = user.role
        token['email'] = user.email
        return token

    def validate(self, attrs):
        request = self.context.get('request')
        email = (attrs.get(self.username_field) or '').strip().lower()
        password = attrs.get('password')

        user = CustomUser.objects.filter(email=email).first()
        if user is None:
            raise InvalidCredentials()

        if user.is_locked():
            raise AccountLocked(user.lock_minutes_remaining())

        if not user.is_active:
            raise AccountDeactivated()

        if user.is_suspended:
            raise AccountSuspended(user.suspension_reason)

        if not user.check_password(password):
            user.inc_login_attempts()
            logger.warning("Failed login for %s (attempt %s)", user.email, user.login_attempts)
            record_event(
                request,
                user=user,
                event_type='user_login',
                action='Failed login attempt',
                target=user,
                status='failure',
                severity='medium',
                error_message='Invalid password',
            )
            raise InvalidCredentials()

        self.user = user
        refresh = self.get_token(user)

        user.record_login(
            ip_address=get_client_ip(request) if request else None,
            user_agent=request.META.get('HTTP_USER_AGENT', '') if request else '',
        )
        record_event(
            request,
            user=user,
            event_type='user_login',
            action='User logged in',
            target=user,
        )

        return {
            'user': CustomUserSerializer(user).data,
            'token': str(refresh.access_token),
            'refresh_token': str(refresh),
        }


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)

    def validate_new_password(self, value):
        return _check_password_strength(value, self.context.get('user'))


class RequestPasswordResetSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    reset_token = serializers.UUIDField()
    new_password = serializers.CharField(write_only=True)

    def validate_new_password(self, value):
        """Validate new password using centralized validation"""
        return _check_password_strength(value, self.context.get('user'))


class VerifyEmailSerializer(serializers.Serializer):
    email = serializers.EmailField()
    verification_code = serializers.CharField(max_length=6)


class ResendVerificationSerializer(serializers.Serializer):
    email = serializers.EmailField()
