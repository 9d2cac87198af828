import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives, send_mail

logger = logging.getLogger(__name__)


def send_credentials_email(user, password):
    """
    Send a newly created registry user their temporary credentials.

    Args:
        user (CustomUser): The account that was just created.
        password (str): The generated temporary password.

    Returns:
        bool: True if the email is sent successfully, False otherwise.
    """
    subject = "Your Land Registry account has been created"
    text_message = (
        f"Dear {user.full_name or 'colleague'},\n\n"
        f"An account has been created for you on the Land Registry platform.\n\n"
        f"Email: {user.email}\n"
        f"Temporary Password: {password}\n"
        f"Verification code: {user.otp_code}\n\n"
        f"Please verify your email and change this password after your first login.\n\n"
        f"The Land Registry Team"
    )
    html_message = (
        f"<p>Dear {user.full_name or 'colleague'},</p>"
        f"<p>An account has been created for you on the Land Registry platform.</p>"
        f"<ul>"
        f"<li><strong>Email:</strong> {user.email}</li>"
        f"<li><strong>Temporary Password:</strong> {password}</li>"
        f"<li><strong>Verification code:</strong> {user.otp_code}</li>"
        f"</ul>"
        f"<p>Please verify your email and change this password after your first login.</p>"
        f"<p>The Land Registry Team</p>"
    )

    try:
        email_message = EmailMultiAlternatives(
            subject,
            text_message,
            settings.DEFAULT_FROM_EMAIL,
            [user.email],
        )
        email_message.attach_alternative(html_message, "text/html")
        email_message.send(fail_silently=False)
        logger.info("Credentials email sent to %s", user.email)
        return True
    except Exception:
        logger.exception("Error sending credentials email to %s", user.email)
        return False


def send_otp_via_email(email, otp_code):
    """Send OTP code via email"""
    subject = "Land Registry email verification"
    message = (
        f"Your verification code: {otp_code}\n"
        f"You have {settings.OTP_EXPIRY_MINUTES} minutes to apply it."
    )
    send_mail(
        subject,
        message,
        settings.DEFAULT_FROM_EMAIL,
        [email],
        fail_silently=False,
    )
    logger.info("Verification code sent to %s", email)
    return True


def send_password_reset_email(user):
    """Send the reset link for a token already stored on the user."""
    reset_link = f"{settings.FRONTEND_URL}/reset-password/{user.reset_token}/"
    subject = "Password reset request for your Land Registry account"
    text_message = (
        f"Dear {user.full_name or 'colleague'},\n\n"
        f"We received a request to reset the password for the account {user.email}.\n\n"
        f"To reset your password, open the link below:\n"
        f"{reset_link}\n\n"
        f"This link expires in one hour. If you did not request a reset, ignore this email.\n\n"
        f"The Land Registry Team"
    )
    html_message = (
        f"<p>Dear {user.full_name or 'colleague'},</p>"
        f"<p>We received a request to reset the password for the account {user.email}.</p>"
        f"<p><a href='{reset_link}'>{reset_link}</a></p>"
        f"<p>This link expires in one hour. If you did not request a reset, ignore this email.</p>"
        f"<p>The Land Registry Team</p>"
    )

    try:
        email_message = EmailMultiAlternatives(
            subject,
            text_message,
            settings.DEFAULT_FROM_EMAIL,
            [user.email],
        )
        email_message.attach_alternative(html_message, "text/html")
        email_message.send(fail_silently=False)
        return True
    except Exception:
        logger.exception("Error sending password reset email to %s", user.email)
        return False
