from rest_framework import status
from rest_framework.exceptions import APIException


class InvalidCredentials(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid email or password'
    default_code = 'invalid_credentials'


class AccountLocked(APIException):
    status_code = 423
    default_detail = 'Account is locked. Try again later.'
    default_code = 'account_locked'

    def __init__(self, minutes_remaining=None):
        detail = None
        if minutes_remaining is not None:
            detail = f'Account is locked. Try again in {minutes_remaining} minutes.'
        super().__init__(detail)


class AccountDeactivated(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Account is deactivated. Please contact administrator.'
    default_code = 'account_deactivated'


class AccountSuspended(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Account is suspended.'
    default_code = 'account_suspended'

    def __init__(self, reason=None):
        detail = f'Account is suspended. Reason: {reason}' if reason else None
        super().__init__(detail)


class InvalidResetToken(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid or expired reset token'
    default_code = 'invalid_reset_token'
