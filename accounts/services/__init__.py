from ..utils import validate_password, generate_otp_code, get_client_ip

from .notifications import (
    send_credentials_email,
    send_otp_via_email,
    send_password_reset_email,
)

__all__ = [
    'validate_password',
    'generate_otp_code',
    'get_client_ip',
    'send_credentials_email',
    'send_otp_via_email',
    'send_password_reset_email',
]
