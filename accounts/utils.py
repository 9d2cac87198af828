import secrets
import string

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARACTERS = "@$!%*?&"

# (predicate, message, code), checked in order; the first failure wins
PASSWORD_RULES = (
    (
        lambda value: len(value) >= PASSWORD_MIN_LENGTH,
        _("Password must be at least 8 characters long."),
        'password_too_short',
    ),
    (
        lambda value: any(c.isdigit() for c in value),
        _("Password must contain at least one number."),
        'password_no_number',
    ),
    (
        lambda value: any(c.isupper() for c in value),
        _("Password must contain at least one uppercase letter."),
        'password_no_upper',
    ),
    (
        lambda value: any(c.islower() for c in value),
        _("Password must contain at least one lowercase letter."),
        'password_no_lower',
    ),
    (
        lambda value: any(c in PASSWORD_SPECIAL_CHARACTERS for c in value),
        _("Password must contain at least one special character (@$!%*?&)."),
        'password_no_special',
    ),
)


def validate_password(password, user=None):
    """
    Check a candidate password against the registry's strength rules.

    ``user`` is accepted so the function can back a Django password
    validator; none of the rules look at it. Returns the password
    unchanged, raises ValidationError naming the first rule it breaks.
    """
    password = password or ''
    for check, message, code in PASSWORD_RULES:
        if not check(password):
            raise ValidationError(message, code=code)
    return password


class RegistryPasswordValidator:
    """Adapter so Django's AUTH_PASSWORD_VALIDATORS applies the same rules."""

    def validate(self, password, user=None):
        validate_password(password, user)

    def get_help_text(self):
        return _(
            "Your password must be at least 8 characters and contain an uppercase "
            "letter, a lowercase letter, a number and one of @$!%*?&."
        )


def generate_otp_code(length=6):
    """Numeric one-time code for login verification and first sign-in."""
    return ''.join(secrets.choice(string.digits) for _position in range(length))


def get_client_ip(request):
    """Return the caller's IP, honouring the first X-Forwarded-For hop."""
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')
