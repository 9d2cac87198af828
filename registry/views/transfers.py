import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from accounts.models import PermissionChoices, RoleChoices
from accounts.permissions import RegionScopedPermission, require_permissions, require_roles
from accounts.views.mixins import EnvelopeResponseMixin
from ..filters import SortFilter, TransferFilter
from ..models import Transfer
from ..pagination import RegistryPagination
from ..serializers import TransferDecisionSerializer, TransferRejectSerializer, TransferSerializer
from ..services import workflows
from .mixins import RegionScopedQuerysetMixin

logger = logging.getLogger(__name__)


class TransferViewSet(RegionScopedQuerysetMixin, EnvelopeResponseMixin, viewsets.ReadOnlyModelViewSet):
    """
    Ownership transfer applications and their approval workflow:
    submit -> approve -> complete, or reject before approval.
    """
    queryset = Transfer.objects.select_related(
        'parcel', 'seller', 'buyer', 'assigned_officer', 'approved_by'
    )
    serializer_class = TransferSerializer
    pagination_class = RegistryPagination
    filter_backends = [DjangoFilterBackend, SortFilter]
    filterset_class = TransferFilter
    sort_fields = [
        'application_date', 'contract_date', 'approval_date', 'completion_date',
        'agreed_price', 'registered_price', 'transfer_status', 'region',
    ]
    default_sort = '-application_date'

    def get_permissions(self):
        permissions = [IsAuthenticated()]
        if self.action == 'submit':
            permissions.append(
                require_roles(RoleChoices.ADMIN, RoleChoices.REGISTRAR, RoleChoices.CLERK)()
            )
        elif self.action in ('approve', 'complete'):
            permissions.append(require_permissions(PermissionChoices.APPROVE_TRANSFER)())
        elif self.action == 'reject':
            permissions.append(require_permissions(PermissionChoices.REJECT_TRANSFER)())
        return permissions + [RegionScopedPermission()]

    def retrieve(self, request, *args, **kwargs):
        return self.success_response(self.get_serializer(self.get_object()).data)

    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        transfer = workflows.submit_transfer(self.get_object(), request.user, request=request)
        return self.success_response(
            self.get_serializer(transfer).data, message="Transfer submitted for approval"
        )

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        transfer = self.get_object()
        serializer = TransferDecisionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        transfer = workflows.approve_transfer(
            transfer, request.user, notes=serializer.validated_data['notes'], request=request
        )
        return self.success_response(self.get_serializer(transfer).data, message="Transfer approved")

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        transfer = self.get_object()
        serializer = TransferRejectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        transfer = workflows.reject_transfer(
            transfer, request.user, serializer.validated_data['reason'], request=request
        )
        return self.success_response(self.get_serializer(transfer).data, message="Transfer rejected")

    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        transfer = workflows.complete_transfer(self.get_object(), request.user, request=request)
        return self.success_response(
            self.get_serializer(transfer).data, message="Transfer completed and ownership registered"
        )
