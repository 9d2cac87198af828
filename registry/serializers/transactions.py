from decimal import Decimal

from django.utils import timezone
from rest_framework import serializers

from ..models import (
    Dispute,
    DisputeUpdate,
    Mortgage,
    MortgagePayment,
    Owner,
    Parcel,
    Subsidy,
    Transfer,
)
from .summaries import OwnerSummarySerializer, ParcelSummarySerializer, UserSummarySerializer


class TransferSerializer(serializers.ModelSerializer):
    parcel = ParcelSummarySerializer(read_only=True)
    seller = OwnerSummarySerializer(read_only=True)
    buyer = OwnerSummarySerializer(read_only=True)
    assigned_officer = UserSummarySerializer(read_only=True)
    approved_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Transfer
        exclude = ['internal_notes', 'reviewed_by', 'created_by']
        read_only_fields = ['transfer_id', 'transfer_status', 'total_fees', 'processing_time']


class TransferDecisionSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')


class TransferRejectSerializer(serializers.Serializer):
    reason = serializers.CharField()

    def validate_reason(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("A rejection reason is required.")
        return value


class DisputeUpdateSerializer(serializers.ModelSerializer):
    updated_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = DisputeUpdate
        fields = ['id', 'date', 'updated_by', 'status_change', 'notes']


class DisputeSerializer(serializers.ModelSerializer):
    parcel = ParcelSummarySerializer(read_only=True)
    claimant = OwnerSummarySerializer(read_only=True)
    defendant = OwnerSummarySerializer(read_only=True)
    assigned_to = UserSummarySerializer(read_only=True)
    days_since_filing = serializers.IntegerField(read_only=True)
    duration = serializers.IntegerField(source='get_duration', read_only=True)

    class Meta:
        model = Dispute
        exclude = ['internal_notes', 'investigator', 'created_by']


class DisputeDetailSerializer(DisputeSerializer):
    updates = DisputeUpdateSerializer(many=True, read_only=True)


class DisputeCreateSerializer(serializers.ModelSerializer):
    """
    File a new dispute. The region is taken from the parcel.
    """
    parcel_id = serializers.PrimaryKeyRelatedField(
        queryset=Parcel.objects.filter(is_active=True), source='parcel'
    )
    claimant_id = serializers.PrimaryKeyRelatedField(queryset=Owner.objects.all(), source='claimant')
    defendant_id = serializers.PrimaryKeyRelatedField(
        queryset=Owner.objects.all(), source='defendant', required=False, allow_null=True
    )

    class Meta:
        model = Dispute
        fields = [
            'parcel_id', 'claimant_id', 'defendant_id', 'dispute_type',
            'description', 'claimed_amount', 'priority',
            'expected_resolution_date', 'requires_mediation', 'is_urgent', 'is_public',
        ]

    def validate(self, attrs):
        defendant = attrs.get('defendant')
        if defendant is not None and defendant == attrs['claimant']:
            raise serializers.ValidationError({'defendant_id': "Claimant and defendant must differ."})
        return attrs


class DisputeResolveSerializer(serializers.Serializer):
    outcome = serializers.ChoiceField(choices=Dispute.Outcome.choices)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    compensation_amount = serializers.DecimalField(
        max_digits=16, decimal_places=2, required=False, allow_null=True, min_value=Decimal('0')
    )


class MortgagePaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = MortgagePayment
        fields = [
            'id', 'payment_date', 'amount', 'principal', 'interest',
            'late_fee', 'payment_method', 'receipt_number',
        ]


class MortgageSerializer(serializers.ModelSerializer):
    parcel = ParcelSummarySerializer(read_only=True)
    borrower = OwnerSummarySerializer(read_only=True)
    remaining_months = serializers.IntegerField(read_only=True)

    class Meta:
        model = Mortgage
        exclude = ['created_by', 'notes']


class MortgageDetailSerializer(MortgageSerializer):
    payments = MortgagePaymentSerializer(many=True, read_only=True)


class MortgagePaymentCreateSerializer(serializers.Serializer):
    payment_date = serializers.DateTimeField(required=False)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    principal = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0'))
    interest = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0'))
    late_fee = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False, default=Decimal('0')
    )
    payment_method = serializers.CharField(required=False, allow_blank=True, default='')
    receipt_number = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if attrs['principal'] + attrs['interest'] + attrs['late_fee'] > attrs['amount']:
            raise serializers.ValidationError(
                {'amount': "Principal, interest and late fee exceed the payment amount."}
            )
        attrs.setdefault('payment_date', timezone.now())
        return attrs


class SubsidySerializer(serializers.ModelSerializer):
    beneficiary = OwnerSummarySerializer(read_only=True)
    parcel = ParcelSummarySerializer(read_only=True)

    class Meta:
        model = Subsidy
        exclude = ['processing_officer', 'approved_by', 'verified_by']
        read_only_fields = ['subsidy_id', 'remaining_amount', 'utilization_rate', 'processing_time']
