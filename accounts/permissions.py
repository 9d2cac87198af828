from rest_framework.permissions import BasePermission

from registry.constants import ALL_REGIONS
from utils.exceptions import RegionAccessDenied
from .models import RoleChoices, PermissionChoices


def require_roles(*roles):
    """
    Build a permission class that admits users holding one of ``roles``.
    """

    class HasRole(BasePermission):
        message = f"Access denied. Required role: {' or '.join(roles)}"

        def has_permission(self, request, view):
            user = request.user
            return bool(user and user.is_authenticated and user.role in roles)

    return HasRole


def require_permissions(*permissions):
    """
    Build a permission class that admits users holding any of ``permissions``.
    """

    class HasRegistryPermission(BasePermission):
        message = f"Access denied. Required permission: {' or '.join(permissions)}"

        def has_permission(self, request, view):
            user = request.user
            return bool(
                user and user.is_authenticated
                and user.has_registry_permission(*permissions)
            )

    return HasRegistryPermission


class CanViewAuditLogs(BasePermission):
    """
    Audit trail is visible to admins, auditors and anyone granted view_audit_logs.
    """
    message = "Access denied. Required permission: view_audit_logs"

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return (
            user.role in (RoleChoices.ADMIN, RoleChoices.AUDITOR)
            or user.has_registry_permission(PermissionChoices.VIEW_AUDIT_LOGS)
        )


class RegionScopedPermission(BasePermission):
    """
    Object-level check for records carrying a ``region`` attribute.
    """
    message = RegionAccessDenied.default_detail

    def has_permission(self, request, view):
        return True

    def has_object_permission(self, request, view, obj):
        region = getattr(obj, 'region', None)
        if region is None:
            return True
        return request.user.can_access_region(region)


def resolve_region_scope(user, requested_region=None):
    """
    Work out which regions a query may touch.

    Args:
        user: The authenticated user
        requested_region: Region from the query string, possibly the
            "All Regions" sentinel or empty

    Returns:
        A list of region names to filter on, or None for no restriction

    Raises:
        RegionAccessDenied: if the user asks for a region outside their assignment
    """
    if requested_region == ALL_REGIONS:
        requested_region = None

    if requested_region:
        if not user.can_access_region(requested_region):
            raise RegionAccessDenied()
        return [requested_region]

    if user.has_unrestricted_regions:
        return None
    return list(user.assigned_regions or [])
