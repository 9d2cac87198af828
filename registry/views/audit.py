import logging

from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets
from rest_framework.decorators import action

from accounts.permissions import CanViewAuditLogs
from accounts.views.mixins import CSVExportMixin, EnvelopeResponseMixin
from ..filters import AuditLogFilter
from ..models import AuditLog
from ..pagination import AuditLogPagination
from ..serializers import AuditLogSerializer, AuditReviewSerializer
from ..services.audit import record_event

logger = logging.getLogger(__name__)

EXPORT_HEADER = [
    'Event ID', 'Timestamp', 'Event Type', 'Action', 'Performed By', 'Role',
    'Target Model', 'Target ID', 'Region', 'Status', 'Severity', 'IP Address',
    'Reviewed',
]


class AuditLogViewSet(CSVExportMixin, EnvelopeResponseMixin, viewsets.ReadOnlyModelViewSet):
    """
    Read access to the compliance trail for admins, auditors and holders of
    view_audit_logs. Entries can be marked reviewed but never edited.
    """
    queryset = AuditLog.objects.select_related('performed_by', 'reviewed_by').order_by('-timestamp', '-id')
    serializer_class = AuditLogSerializer
    permission_classes = [CanViewAuditLogs]
    pagination_class = AuditLogPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = AuditLogFilter

    def retrieve(self, request, *args, **kwargs):
        return self.success_response(self.get_serializer(self.get_object()).data)

    @action(detail=False, methods=['get'])
    def export(self, request):
        """Download the filtered trail as CSV, timestamps in registry local time."""
        queryset = self.filter_queryset(self.get_queryset())
        filename = f"audit_logs_{timezone.now():%Y%m%d_%H%M%S}.csv"
        response = self.get_csv_response(filename)
        writer = self.get_csv_writer(response, EXPORT_HEADER)

        rows = 0
        for entry in queryset.iterator():
            writer.writerow([
                entry.event_id,
                self.format_datetime_local(entry.timestamp),
                entry.event_type,
                entry.action,
                entry.performed_by.email if entry.performed_by else 'system',
                entry.user_role,
                entry.target_model,
                entry.target_id,
                entry.region,
                entry.status,
                entry.severity,
                entry.ip_address or '',
                'yes' if entry.is_reviewed else 'no',
            ])
            rows += 1

        logger.info(f"Audit log export of {rows} rows by {request.user.email}")
        record_event(
            request,
            event_type=AuditLog.EventType.DATA_EXPORT,
            action=f"Exported {rows} audit log entries",
            severity=AuditLog.Severity.MEDIUM,
            metadata={'filters': request.query_params.dict(), 'rows': rows},
        )
        return response

    @action(detail=True, methods=['post'])
    def review(self, request, pk=None):
        entry = self.get_object()
        serializer = AuditReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry.mark_reviewed(request.user, serializer.validated_data['notes'])
        return self.success_response(self.get_serializer(entry).data, message="Audit entry marked as reviewed")
