from .auth import (
    LoginView,
    LogoutView,
    MeView,
    ChangePasswordView,
    ForgotPasswordView,
    ResetPasswordView,
    VerifyEmailView,
    ResendVerificationView,
)
from .user_management import UserViewSet

__all__ = [
    'LoginView',
    'LogoutView',
    'MeView',
    'ChangePasswordView',
    'ForgotPasswordView',
    'ResetPasswordView',
    'VerifyEmailView',
    'ResendVerificationView',
    'UserViewSet',
]
