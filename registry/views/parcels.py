import logging

from django.db import transaction
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated

from accounts.models import PermissionChoices, RoleChoices
from accounts.permissions import RegionScopedPermission, require_permissions, require_roles
from accounts.views.mixins import EnvelopeResponseMixin
from utils.exceptions import RegionAccessDenied
from ..filters import OwnerFilter, ParcelFilter, SortFilter
from ..models import AuditLog, Owner, Parcel
from ..pagination import RegistryPagination
from ..serializers import OwnerSerializer, ParcelDetailSerializer, ParcelSerializer
from ..services.audit import record_event
from .mixins import RegionScopedQuerysetMixin, snapshot

logger = logging.getLogger(__name__)


class ParcelViewSet(RegionScopedQuerysetMixin, EnvelopeResponseMixin, viewsets.ModelViewSet):
    """
    Cadastral parcels.

    Reading is open to authenticated users within their regions. Registrars
    and admins create and edit parcels; only admins deactivate them.
    Deactivated parcels disappear from every route.
    """
    queryset = Parcel.objects.filter(is_active=True).select_related('current_owner', 'verified_by')
    pagination_class = RegistryPagination
    filter_backends = [DjangoFilterBackend, SortFilter]
    filterset_class = ParcelFilter
    sort_fields = ['created_at', 'registration_date', 'parcel_id', 'area', 'market_value', 'region', 'city']
    default_sort = '-created_at'

    def get_permissions(self):
        permissions = [IsAuthenticated()]
        if self.action == 'create':
            permissions += [
                require_roles(RoleChoices.ADMIN, RoleChoices.REGISTRAR)(),
                require_permissions(PermissionChoices.CREATE_PARCEL)(),
            ]
        elif self.action in ('update', 'partial_update'):
            permissions += [
                require_roles(RoleChoices.ADMIN, RoleChoices.REGISTRAR)(),
                require_permissions(PermissionChoices.EDIT_PARCEL)(),
            ]
        elif self.action == 'destroy':
            permissions += [
                require_roles(RoleChoices.ADMIN)(),
                require_permissions(PermissionChoices.DELETE_PARCEL)(),
            ]
        return permissions + [RegionScopedPermission()]

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return ParcelDetailSerializer
        return ParcelSerializer

    def retrieve(self, request, *args, **kwargs):
        return self.success_response(self.get_serializer(self.get_object()).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        if not request.user.can_access_region(serializer.validated_data['region']):
            raise RegionAccessDenied()

        with transaction.atomic():
            parcel = serializer.save(verified_by=request.user)
            parcel.current_owner.update_property_stats()

        logger.info(f"Parcel {parcel.parcel_id} registered by {request.user.email}")
        record_event(
            request,
            event_type=AuditLog.EventType.PARCEL_CREATED,
            action=f"Registered parcel {parcel.parcel_id}",
            target=parcel,
            changes={'after': serializer.data},
        )
        return self.success_response(
            serializer.data,
            message="Parcel created successfully",
            status_code=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        parcel = self.get_object()
        serializer = self.get_serializer(parcel, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        region = serializer.validated_data.get('region')
        if region and not request.user.can_access_region(region):
            raise RegionAccessDenied()

        fields = list(serializer.validated_data)
        before = snapshot(parcel, fields)
        previous_owner = parcel.current_owner

        with transaction.atomic():
            parcel = serializer.save()
            if parcel.current_owner_id != previous_owner.pk:
                previous_owner.update_property_stats()
            parcel.current_owner.update_property_stats()

        after = snapshot(parcel, fields)
        changed = [field for field in fields if before[field] != after[field]]
        record_event(
            request,
            event_type=AuditLog.EventType.PARCEL_UPDATED,
            action=f"Updated parcel {parcel.parcel_id}",
            target=parcel,
            changes={
                'before': {field: before[field] for field in changed},
                'after': {field: after[field] for field in changed},
            },
            fields_changed=changed,
        )
        return self.success_response(serializer.data, message="Parcel updated successfully")

    def destroy(self, request, *args, **kwargs):
        parcel = self.get_object()
        with transaction.atomic():
            parcel.is_active = False
            parcel.save(update_fields=['is_active', 'last_modified', 'updated_at'])
            parcel.current_owner.update_property_stats()

        logger.info(f"Parcel {parcel.parcel_id} deactivated by {request.user.email}")
        record_event(
            request,
            event_type=AuditLog.EventType.PARCEL_DELETED,
            action=f"Deactivated parcel {parcel.parcel_id}",
            target=parcel,
            severity=AuditLog.Severity.MEDIUM,
            changes={'before': {'is_active': True}, 'after': {'is_active': False}},
            fields_changed=['is_active'],
        )
        return self.success_response(message="Parcel deleted successfully")


class OwnerViewSet(EnvelopeResponseMixin, viewsets.ReadOnlyModelViewSet):
    queryset = Owner.objects.select_related('verified_by')
    serializer_class = OwnerSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = RegistryPagination
    filter_backends = [DjangoFilterBackend, SortFilter]
    filterset_class = OwnerFilter
    sort_fields = ['last_name', 'company_name', 'created_at', 'total_property_value', 'credit_score']
    default_sort = 'last_name'

    def retrieve(self, request, *args, **kwargs):
        return self.success_response(self.get_serializer(self.get_object()).data)
