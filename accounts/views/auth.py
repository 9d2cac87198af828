import logging
import uuid
from django.utils import timezone
from django.conf import settings
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.exceptions import TokenError

from registry.services.audit import record_event
from ..exceptions import InvalidCredentials, InvalidResetToken
from ..models import CustomUser
from ..serializers import (
    LoginSerializer,
    UserDetailSerializer,
    ChangePasswordSerializer,
    RequestPasswordResetSerializer,
    ResetPasswordSerializer,
    VerifyEmailSerializer,
    ResendVerificationSerializer,
)
from ..services import generate_otp_code, send_otp_via_email, send_password_reset_email
from .mixins import EnvelopeResponseMixin, ErrorHandlingMixin

logger = logging.getLogger(__name__)


class LoginView(EnvelopeResponseMixin, TokenObtainPairView):
    serializer_class = LoginSerializer
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self.success_response(serializer.validated_data, message="Login successful")


class LogoutView(APIView, EnvelopeResponseMixin, ErrorHandlingMixin):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh') or request.data.get('refresh_token')
        if refresh_token:
            try:
                RefreshToken(refresh_token).blacklist()
            except TokenError as e:
                return self.handle_validation_error(f"Invalid refresh token: {e}")

        record_event(
            request,
            event_type='user_logout',
            action='User logged out',
            target=request.user,
        )
        return self.success_response(message="Logged out successfully")


class MeView(APIView, EnvelopeResponseMixin):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return self.success_response(UserDetailSerializer(request.user).data)


class ChangePasswordView(APIView, EnvelopeResponseMixin, ErrorHandlingMixin):
    permission_classes = [IsAuthenticated]

    def put(self, request):
        serializer = ChangePasswordSerializer(
            data=request.data,
            context={'user': request.user}
        )
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        user = request.user
        if not user.check_password(serializer.validated_data['current_password']):
            raise InvalidCredentials("Current password is incorrect")

        user.set_password(serializer.validated_data['new_password'])
        user.last_password_change = timezone.now()
        user.save()

        record_event(
            request,
            event_type='user_updated',
            action='Password changed',
            target=user,
            severity='medium',
            fields_changed=['password'],
        )
        return self.success_response(message="Password changed successfully.")


class ForgotPasswordView(APIView, EnvelopeResponseMixin, ErrorHandlingMixin):
    """
    Issue a password reset token. The response is identical whether or not
    the email belongs to an account.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RequestPasswordResetSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        message = "If an account exists with this email, a reset link has been sent."
        email = serializer.validated_data['email'].strip().lower()
        user = CustomUser.objects.filter(email=email, is_active=True).first()
        if user is None:
            logger.info("Password reset requested for unknown email")
            return self.success_response(message=message)

        user.reset_token = uuid.uuid4()
        user.reset_token_created_at = timezone.now()
        user.save(update_fields=['reset_token', 'reset_token_created_at'])
        send_password_reset_email(user)

        if settings.DEBUG:
            return self.success_response(message=message, reset_token=str(user.reset_token))
        return self.success_response(message=message)


class ResetPasswordView(APIView, EnvelopeResponseMixin, ErrorHandlingMixin):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        user = CustomUser.objects.filter(reset_token=serializer.validated_data['reset_token']).first()
        if user is None or user.is_reset_token_expired():
            raise InvalidResetToken()

        user.set_password(serializer.validated_data['new_password'])
        user.reset_token = None
        user.reset_token_created_at = None
        user.last_password_change = timezone.now()
        user.login_attempts = 0
        user.lock_until = None
        user.save()

        record_event(
            request,
            user=user,
            event_type='user_updated',
            action='Password reset via token',
            target=user,
            severity='high',
            fields_changed=['password'],
        )
        return self.success_response(message="Password reset successfully.")


class VerifyEmailView(APIView, EnvelopeResponseMixin, ErrorHandlingMixin):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = VerifyEmailSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        email = serializer.validated_data['email'].strip().lower()
        try:
            user = CustomUser.objects.get(email=email)
        except CustomUser.DoesNotExist:
            return self.handle_not_found_error("User not found.")

        if user.otp_code != serializer.validated_data['verification_code'] or user.is_otp_expired():
            return self.handle_validation_error("Invalid or expired verification code.")

        user.is_verified = True
        user.otp_code = None
        user.otp_created_at = None
        user.save()

        return self.success_response(message="Email verified successfully.")


class ResendVerificationView(APIView, EnvelopeResponseMixin, ErrorHandlingMixin):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = ResendVerificationSerializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        email = serializer.validated_data['email'].strip().lower()
        try:
            user = CustomUser.objects.get(email=email)
        except CustomUser.DoesNotExist:
            return self.handle_not_found_error("User not found.")

        if user.is_verified:
            return self.handle_validation_error("Email is already verified.")

        user.otp_code = generate_otp_code()
        user.otp_created_at = timezone.now()
        user.save(update_fields=['otp_code', 'otp_created_at'])

        try:
            send_otp_via_email(user.email, user.otp_code)
        except Exception as e:
            logger.error(f"Failed to send verification code to {user.email}: {e}", exc_info=True)
            return self.handle_unknown_error("Failed to send verification code.")

        return self.success_response(message="New verification code sent successfully.")
