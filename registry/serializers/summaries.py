"""
Compact representations embedded in other records' payloads.
"""

from rest_framework import serializers

from accounts.models import CustomUser

from ..models import Owner, Parcel


class OwnerSummarySerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Owner
        fields = ['id', 'owner_type', 'full_name', 'first_name', 'last_name', 'company_name']
        read_only_fields = fields


class ParcelSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Parcel
        fields = ['id', 'parcel_id', 'region', 'municipality', 'city', 'street', 'street_number']
        read_only_fields = fields


class UserSummarySerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'full_name', 'role']
        read_only_fields = fields
