import logging

from django.db import transaction
from django.db.models import Avg, Count, DurationField, ExpressionWrapper, F
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from accounts.models import PermissionChoices
from accounts.permissions import RegionScopedPermission, require_permissions
from accounts.views.mixins import EnvelopeResponseMixin
from utils.exceptions import RegionAccessDenied
from ..filters import DisputeFilter, SortFilter
from ..models import AuditLog, Dispute
from ..pagination import RegistryPagination
from ..serializers import (
    DisputeCreateSerializer,
    DisputeDetailSerializer,
    DisputeResolveSerializer,
    DisputeSerializer,
)
from ..services import workflows
from ..services.audit import record_event
from ..services.indicators import round1
from .mixins import RegionScopedQuerysetMixin

logger = logging.getLogger(__name__)


class DisputeViewSet(RegionScopedQuerysetMixin,
                     EnvelopeResponseMixin,
                     mixins.CreateModelMixin,
                     viewsets.ReadOnlyModelViewSet):
    queryset = Dispute.objects.select_related('parcel', 'claimant', 'defendant', 'assigned_to')
    pagination_class = RegistryPagination
    filter_backends = [DjangoFilterBackend, SortFilter]
    filterset_class = DisputeFilter
    sort_fields = ['filing_date', 'resolution_date', 'priority', 'status', 'claimed_amount', 'region']
    default_sort = '-filing_date'

    def get_permissions(self):
        permissions = [IsAuthenticated()]
        if self.action == 'create':
            permissions.append(require_permissions(PermissionChoices.CREATE_DISPUTE)())
        elif self.action == 'resolve':
            permissions.append(require_permissions(PermissionChoices.RESOLVE_DISPUTE)())
        return permissions + [RegionScopedPermission()]

    def get_serializer_class(self):
        if self.action == 'create':
            return DisputeCreateSerializer
        if self.action == 'retrieve':
            return DisputeDetailSerializer
        return DisputeSerializer

    def retrieve(self, request, *args, **kwargs):
        return self.success_response(self.get_serializer(self.get_object()).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        parcel = serializer.validated_data['parcel']
        if not request.user.can_access_region(parcel.region):
            raise RegionAccessDenied()

        with transaction.atomic():
            dispute = serializer.save(region=parcel.region, created_by=request.user)
            dispute.updates.create(
                updated_by=request.user,
                status_change=f"Filed as {dispute.status}",
                notes=dispute.description[:500],
            )

        logger.info(f"Dispute {dispute.dispute_id} filed on parcel {parcel.parcel_id}")
        record_event(
            request,
            event_type=AuditLog.EventType.DISPUTE_FILED,
            action=f"Filed {dispute.dispute_type} dispute {dispute.dispute_id} on parcel {parcel.parcel_id}",
            target=dispute,
            severity=(
                AuditLog.Severity.HIGH
                if dispute.dispute_type == Dispute.DisputeType.FRAUD_ALLEGATION
                else AuditLog.Severity.LOW
            ),
            fraud_indicator=dispute.dispute_type == Dispute.DisputeType.FRAUD_ALLEGATION,
        )
        return self.success_response(
            DisputeDetailSerializer(dispute).data,
            message="Dispute filed successfully",
            status_code=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=['post'])
    def resolve(self, request, pk=None):
        dispute = self.get_object()
        serializer = DisputeResolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        dispute = workflows.resolve_dispute(
            dispute,
            request.user,
            outcome=data['outcome'],
            description=data['description'],
            compensation_amount=data.get('compensation_amount'),
            request=request,
        )
        return self.success_response(DisputeDetailSerializer(dispute).data, message="Dispute resolved")

    @action(detail=False, methods=['get'], url_path='stats/summary')
    def summary(self, request):
        """
        Dispute counts by status and priority, plus the mean time to
        resolution in days for resolved cases.
        """
        queryset = self.get_queryset()

        by_status = list(
            queryset.values('status').annotate(count=Count('id')).order_by('-count', 'status')
        )
        by_priority = list(
            queryset.values('priority').annotate(count=Count('id')).order_by('-count', 'priority')
        )

        resolved = queryset.filter(status=Dispute.Status.RESOLVED, resolution_date__isnull=False).aggregate(
            avg=Avg(ExpressionWrapper(F('resolution_date') - F('filing_date'), output_field=DurationField()))
        )
        avg_days = round1(resolved['avg'].total_seconds() / 86400) if resolved['avg'] is not None else 0

        return self.success_response({
            'by_status': by_status,
            'by_priority': by_priority,
            'avg_resolution_days': avg_days,
        })
