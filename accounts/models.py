"""
Database tables definition for registry staff accounts
"""

import random
import secrets
from datetime import timedelta

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models
from django.utils import timezone
from django.utils.crypto import get_random_string
from django.utils.translation import gettext_lazy as _

from registry.constants import ALL_REGIONS


class RoleChoices(models.TextChoices):
    ADMIN = "admin", _("Administrator")
    MINISTER = "minister", _("Minister")
    REGISTRAR = "registrar", _("Registrar")
    JUDGE = "judge", _("Judge")
    AUDITOR = "auditor", _("Auditor")
    CLERK = "clerk", _("Clerk")
    VIEWER = "viewer", _("Viewer")


class PermissionChoices(models.TextChoices):
    CREATE_PARCEL = "create_parcel", _("Create parcel")
    EDIT_PARCEL = "edit_parcel", _("Edit parcel")
    DELETE_PARCEL = "delete_parcel", _("Delete parcel")
    APPROVE_TRANSFER = "approve_transfer", _("Approve transfer")
    REJECT_TRANSFER = "reject_transfer", _("Reject transfer")
    CREATE_DISPUTE = "create_dispute", _("Create dispute")
    RESOLVE_DISPUTE = "resolve_dispute", _("Resolve dispute")
    VIEW_AUDIT_LOGS = "view_audit_logs", _("View audit logs")
    APPROVE_MORTGAGE = "approve_mortgage", _("Approve mortgage")
    GENERATE_REPORTS = "generate_reports", _("Generate reports")
    MANAGE_USERS = "manage_users", _("Manage users")
    VIEW_ALL_REGIONS = "view_all_regions", _("View all regions")
    BLOCKCHAIN_ACCESS = "blockchain_access", _("Blockchain access")


class DepartmentChoices(models.TextChoices):
    LAND_REGISTRY = "land_registry", _("Land Registry")
    LEGAL = "legal", _("Legal")
    FINANCE = "finance", _("Finance")
    AUDIT = "audit", _("Audit")
    JUDICIARY = "judiciary", _("Judiciary")
    IT = "IT", _("IT")
    ADMINISTRATION = "administration", _("Administration")
    MANAGEMENT = "management", _("Management")


# Roles that see every region regardless of assigned_regions
UNRESTRICTED_ROLES = (RoleChoices.ADMIN, RoleChoices.MINISTER)


def generate_user_code():
    return f"USR-{timezone.now().year}-{random.randint(0, 999999):06d}"


class CustomUserManager(BaseUserManager):
    """Email-keyed manager; every account gets a role and a password."""

    def create_user(self, email, password, **extra_fields):
        """
        Register a staff account under its lower-cased email.

        A missing email or password raises ValueError rather than
        creating an account nobody can sign in to.
        """
        if not email:
            raise ValueError("An email address is required")
        if not password:
            raise ValueError("A password is required")

        defaults = {'is_active': True, 'last_password_change': timezone.now()}
        for field, value in defaults.items():
            extra_fields.setdefault(field, value)

        user = self.model(email=self.normalize_email(email).lower(), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password, **extra_fields):
        """Administrator holding every registry permission."""
        defaults = {
            'is_staff': True,
            'is_superuser': True,
            'is_active': True,
            'is_verified': True,
            'role': RoleChoices.ADMIN,
            'permissions': list(PermissionChoices.values),
        }
        for field, value in defaults.items():
            extra_fields.setdefault(field, value)

        for flag in ('is_staff', 'is_superuser'):
            if extra_fields.get(flag) is not True:
                raise ValueError(f"Superuser must have {flag}=True.")

        return self.create_user(email, password, **extra_fields)

    def make_random_password(self, length=12):
        """
        Temporary password for a new account, drawn from the OS CSPRNG.

        One character from each pool guarantees the strength rules pass.
        """
        pools = [
            "abcdefghjkmnpqrstuvwxyz",
            "ABCDEFGHJKLMNPQRSTUVWXYZ",
            "23456789",
            "@$!%*?&",
        ]
        chars = [get_random_string(1, pool) for pool in pools]
        chars += list(get_random_string(length - len(chars), ''.join(pools)))
        secrets.SystemRandom().shuffle(chars)
        return ''.join(chars)


class CustomUser(AbstractBaseUser, PermissionsMixin):
    """
    Registry staff account. Email is the unique identifier for authentication.
    """
    user_code = models.CharField(max_length=20, unique=True, default=generate_user_code, editable=False)
    email = models.EmailField(unique=True)
    first_name = models.CharField(max_length=50)
    last_name = models.CharField(max_length=50)
    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    role = models.CharField(
        max_length=20,
        choices=RoleChoices.choices,
        default=RoleChoices.VIEWER
    )
    permissions = models.JSONField(
        default=list,
        blank=True,
        help_text="Registry permissions granted to this user, e.g. ['create_parcel']"
    )

    # Employment
    employee_id = models.CharField(max_length=30, unique=True, null=True, blank=True)
    department = models.CharField(max_length=30, choices=DepartmentChoices.choices, blank=True)
    position = models.CharField(max_length=100, blank=True)
    hire_date = models.DateField(null=True, blank=True)
    assigned_regions = models.JSONField(default=list, blank=True)
    primary_office = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=30, blank=True)

    # Account status
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    is_verified = models.BooleanField(default=False)
    is_suspended = models.BooleanField(default=False)
    suspension_reason = models.TextField(blank=True)

    # OTP fields for email verification
    otp_code = models.CharField(max_length=6, blank=True, null=True)
    otp_created_at = models.DateTimeField(blank=True, null=True)

    # Password management
    last_password_change = models.DateTimeField(blank=True, null=True)
    reset_token = models.UUIDField(blank=True, null=True)
    reset_token_created_at = models.DateTimeField(blank=True, null=True)

    # Lockout
    login_attempts = models.PositiveIntegerField(default=0)
    lock_until = models.DateTimeField(blank=True, null=True)

    created_by = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_users'
    )

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []  # Email & password are already required

    class Meta:
        ordering = ['-date_joined']

    def __str__(self):
        return self.email

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def is_locked(self):
        return bool(self.lock_until and self.lock_until > timezone.now())

    def lock_minutes_remaining(self):
        if not self.is_locked():
            return 0
        seconds = (self.lock_until - timezone.now()).total_seconds()
        return max(1, int(-(-seconds // 60)))

    def inc_login_attempts(self):
        """
        Count a failed login. An expired lock restarts the count at one;
        reaching LOGIN_MAX_ATTEMPTS locks the account for LOGIN_LOCK_MINUTES.
        """
        if self.lock_until and self.lock_until <= timezone.now():
            self.login_attempts = 1
            self.lock_until = None
        else:
            self.login_attempts += 1
            if self.login_attempts >= settings.LOGIN_MAX_ATTEMPTS and not self.is_locked():
                self.lock_until = timezone.now() + timedelta(minutes=settings.LOGIN_LOCK_MINUTES)
        self.save(update_fields=['login_attempts', 'lock_until'])

    def record_login(self, ip_address=None, user_agent=''):
        """
        Reset lockout state and append to the login history, keeping only the
        most recent LOGIN_HISTORY_LIMIT entries.
        """
        self.last_login = timezone.now()
        self.login_attempts = 0
        self.lock_until = None
        self.save(update_fields=['last_login', 'login_attempts', 'lock_until'])

        LoginRecord.objects.create(
            user=self,
            ip_address=ip_address,
            user_agent=(user_agent or '')[:255],
            success=True,
        )
        stale_ids = list(
            self.login_history.order_by('-timestamp', '-id')
            .values_list('id', flat=True)[settings.LOGIN_HISTORY_LIMIT:]
        )
        if stale_ids:
            LoginRecord.objects.filter(id__in=stale_ids).delete()

    def has_registry_permission(self, *permissions):
        """True if the user holds at least one of the given permissions."""
        granted = set(self.permissions or [])
        return any(permission in granted for permission in permissions)

    @property
    def has_unrestricted_regions(self):
        return (
            self.role in UNRESTRICTED_ROLES
            or self.has_registry_permission(PermissionChoices.VIEW_ALL_REGIONS)
            or ALL_REGIONS in (self.assigned_regions or [])
        )

    def can_access_region(self, region):
        if self.has_unrestricted_regions:
            return True
        return region in (self.assigned_regions or [])

    def is_otp_expired(self, expiry_minutes=None):
        """
        Returns True if OTP has expired after expiry_minutes (default OTP_EXPIRY_MINUTES).
        """
        if not self.otp_created_at:
            return True
        expiry_minutes = expiry_minutes or settings.OTP_EXPIRY_MINUTES
        return timezone.now() > self.otp_created_at + timedelta(minutes=expiry_minutes)

    def is_reset_token_expired(self):
        if not self.reset_token_created_at:
            return True
        age = timezone.now() - self.reset_token_created_at
        return age.total_seconds() > settings.PASSWORD_RESET_TIMEOUT_SECONDS


class LoginRecord(models.Model):
    """
    One entry in a user's login history.
    """
    user = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='login_history')
    timestamp = models.DateTimeField(auto_now_add=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=255, blank=True)
    success = models.BooleanField(default=True)

    class Meta:
        ordering = ['-timestamp']

    def __str__(self):
        return f"{self.user.email} @ {self.timestamp:%Y-%m-%d %H:%M}"
