import re

from rest_framework import serializers

from ..models import Owner, OwnershipHistory, Parcel, ParcelRestriction
from .summaries import OwnerSummarySerializer, UserSummarySerializer

PARCEL_ID_PATTERN = re.compile(r'^RS-[A-Z]{2}-\d{6}$')


class OwnerSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    verified_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Owner
        exclude = ['notes']


class OwnershipHistorySerializer(serializers.ModelSerializer):
    previous_owner = OwnerSummarySerializer(read_only=True)
    new_owner = OwnerSummarySerializer(read_only=True)

    class Meta:
        model = OwnershipHistory
        fields = [
            'id', 'previous_owner', 'new_owner', 'transaction_type',
            'transaction_date', 'registration_date', 'transaction_value',
            'tax_paid', 'legal_basis', 'contract_number', 'notary_id',
            'court_decision_number', 'status', 'approval_date',
            'blockchain_hash', 'is_fraudulent', 'is_active',
        ]
        read_only_fields = fields


class ParcelRestrictionSerializer(serializers.ModelSerializer):
    class Meta:
        model = ParcelRestriction
        fields = ['id', 'restriction_type', 'description', 'start_date', 'end_date', 'amount']


class ParcelSerializer(serializers.ModelSerializer):
    """
    Parcel with its owner embedded. Writes take the owner as
    ``current_owner_id``.
    """
    current_owner = OwnerSummarySerializer(read_only=True)
    current_owner_id = serializers.PrimaryKeyRelatedField(
        queryset=Owner.objects.all(), source='current_owner', write_only=True
    )

    class Meta:
        model = Parcel
        fields = [
            'id', 'parcel_id', 'region', 'district', 'municipality',
            'cadastral_municipality', 'street', 'street_number', 'postal_code',
            'city', 'latitude', 'longitude', 'area', 'land_type', 'land_use',
            'current_owner', 'current_owner_id', 'ownership_type', 'legal_status',
            'market_value', 'tax_value', 'last_valuation_date',
            'has_mortgage', 'has_lien', 'has_easement',
            'blockchain_hash', 'last_verified_date', 'verified_by',
            'is_active', 'is_fraudulent', 'registration_date', 'last_modified',
            'notes', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'verified_by', 'is_active', 'last_modified', 'created_at', 'updated_at',
        ]

    def validate_parcel_id(self, value):
        value = value.strip().upper()
        if not PARCEL_ID_PATTERN.match(value):
            raise serializers.ValidationError("Parcel ID must look like RS-BG-001234.")
        duplicates = Parcel.objects.filter(parcel_id=value)
        if self.instance is not None:
            duplicates = duplicates.exclude(pk=self.instance.pk)
        if duplicates.exists():
            raise serializers.ValidationError("A parcel with this ID already exists.")
        return value

    def validate_latitude(self, value):
        if not -90 <= value <= 90:
            raise serializers.ValidationError("Latitude must be between -90 and 90.")
        return value

    def validate_longitude(self, value):
        if not -180 <= value <= 180:
            raise serializers.ValidationError("Longitude must be between -180 and 180.")
        return value

    def validate_area(self, value):
        if value <= 0:
            raise serializers.ValidationError("Area must be greater than zero.")
        return value


class ParcelDetailSerializer(ParcelSerializer):
    verified_by = UserSummarySerializer(read_only=True)
    ownership_history = serializers.SerializerMethodField()
    restrictions = ParcelRestrictionSerializer(many=True, read_only=True)

    class Meta(ParcelSerializer.Meta):
        fields = ParcelSerializer.Meta.fields + ['ownership_history', 'restrictions']

    def get_ownership_history(self, obj):
        history = (
            obj.ownership_history
            .select_related('previous_owner', 'new_owner')
            .order_by('-transaction_date')
        )
        return OwnershipHistorySerializer(history, many=True).data
