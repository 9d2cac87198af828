from .models import (
    CustomUserSerializer,
    UserDetailSerializer,
    UserCreateSerializer,
    UserUpdateSerializer,
    LoginRecordSerializer,
)

from .auth import (
    LoginSerializer,
    ChangePasswordSerializer,
    RequestPasswordResetSerializer,
    ResetPasswordSerializer,
    VerifyEmailSerializer,
    ResendVerificationSerializer,
)

__all__ = [
    'CustomUserSerializer',
    'UserDetailSerializer',
    'UserCreateSerializer',
    'UserUpdateSerializer',
    'LoginRecordSerializer',
    'LoginSerializer',
    'ChangePasswordSerializer',
    'RequestPasswordResetSerializer',
    'ResetPasswordSerializer',
    'VerifyEmailSerializer',
    'ResendVerificationSerializer',
]
