from rest_framework import serializers

from registry.constants import REGIONS

from ..models import CustomUser, LoginRecord, PermissionChoices, RoleChoices
from ..permissions import ALL_REGIONS


class LoginRecordSerializer(serializers.ModelSerializer):
    class Meta:
        model = LoginRecord
        fields = ["timestamp", "ip_address", "user_agent", "success"]


class CustomUserSerializer(serializers.ModelSerializer):
    """
    Read serializer for registry users. Secrets (password, tokens, OTP,
    lockout counters) are never exposed.
    """
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = CustomUser
        fields = [
            "id", "user_code", "email", "first_name", "last_name", "full_name",
            "role", "permissions", "employee_id", "department", "position",
            "hire_date", "assigned_regions", "primary_office", "phone",
            "is_active", "is_verified", "is_suspended", "suspension_reason",
            "last_login", "last_password_change", "date_joined",
        ]
        read_only_fields = fields


class UserDetailSerializer(CustomUserSerializer):
    login_history = LoginRecordSerializer(many=True, read_only=True)

    class Meta(CustomUserSerializer.Meta):
        fields = CustomUserSerializer.Meta.fields + ["login_history"]
        read_only_fields = fields


def _validate_permission_list(value):
    invalid = [item for item in value if item not in PermissionChoices.values]
    if invalid:
        raise serializers.ValidationError(f"Unknown permissions: {', '.join(invalid)}")
    return list(dict.fromkeys(value))


def _validate_region_list(value):
    invalid = [item for item in value if item not in REGIONS and item != ALL_REGIONS]
    if invalid:
        raise serializers.ValidationError(f"Unknown regions: {', '.join(invalid)}")
    return list(dict.fromkeys(value))


class UserCreateSerializer(serializers.ModelSerializer):
    """
    Create a registry user. The password is generated by the view.
    """
    permissions = serializers.ListField(child=serializers.CharField(), required=False)
    assigned_regions = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = CustomUser
        fields = [
            "email", "first_name", "last_name", "role", "permissions",
            "employee_id", "department", "position", "hire_date",
            "assigned_regions", "primary_office", "phone",
        ]

    def validate_email(self, value):
        value = value.strip().lower()
        if CustomUser.objects.filter(email=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value

    def validate_role(self, value):
        if value not in RoleChoices.values:
            raise serializers.ValidationError(f"Role '{value}' is invalid.")
        return value

    def validate_permissions(self, value):
        return _validate_permission_list(value)

    def validate_assigned_regions(self, value):
        return _validate_region_list(value)


class UserUpdateSerializer(serializers.ModelSerializer):
    """
    Administrative changes to role, permissions, regions and account status.
    """
    permissions = serializers.ListField(child=serializers.CharField(), required=False)
    assigned_regions = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = CustomUser
        fields = [
            "first_name", "last_name", "role", "permissions", "department",
            "position", "assigned_regions", "primary_office", "phone",
            "is_active", "is_suspended", "suspension_reason",
        ]

    def validate_permissions(self, value):
        return _validate_permission_list(value)

    def validate_assigned_regions(self, value):
        return _validate_region_list(value)

    def validate(self, attrs):
        if attrs.get('is_suspended') and not attrs.get('suspension_reason', getattr(self.instance, 'suspension_reason', '')):
            raise serializers.ValidationError({"suspension_reason": "A reason is required to suspend an account."})
        if attrs.get('is_suspended') is False:
            attrs['suspension_reason'] = ''
        return attrs
