from rest_framework import serializers

from ..models import AuditLog
from .summaries import UserSummarySerializer


class AuditLogSerializer(serializers.ModelSerializer):
    performed_by = UserSummarySerializer(read_only=True)
    reviewed_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'event_id', 'event_type', 'action', 'performed_by', 'user_role',
            'target_model', 'target_id', 'target_description', 'changes',
            'fields_changed', 'ip_address', 'user_agent', 'region', 'status',
            'error_message', 'severity', 'fraud_indicator', 'suspicious_activity',
            'risk_level', 'timestamp', 'metadata', 'is_reviewed', 'reviewed_by',
            'review_date', 'review_notes', 'expiry_date', 'is_archived',
        ]
        read_only_fields = fields


class AuditReviewSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, default='')
