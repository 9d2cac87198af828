import logging

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from accounts.models import PermissionChoices
from accounts.permissions import RegionScopedPermission, require_permissions
from accounts.views.mixins import EnvelopeResponseMixin
from utils.exceptions import WorkflowError
from ..filters import MortgageFilter, SortFilter, SubsidyFilter
from ..models import AuditLog, Mortgage, Subsidy
from ..pagination import RegistryPagination
from ..serializers import (
    MortgageDetailSerializer,
    MortgagePaymentCreateSerializer,
    MortgagePaymentSerializer,
    MortgageSerializer,
    SubsidySerializer,
)
from ..services.audit import record_event
from .mixins import RegionScopedQuerysetMixin

logger = logging.getLogger(__name__)


class MortgageViewSet(RegionScopedQuerysetMixin, EnvelopeResponseMixin, viewsets.ReadOnlyModelViewSet):
    queryset = Mortgage.objects.select_related('parcel', 'borrower')
    pagination_class = RegistryPagination
    filter_backends = [DjangoFilterBackend, SortFilter]
    filterset_class = MortgageFilter
    sort_fields = ['origination_date', 'maturity_date', 'principal_amount', 'outstanding_balance', 'region']
    default_sort = '-origination_date'

    def get_permissions(self):
        permissions = [IsAuthenticated()]
        if self.action == 'payments':
            permissions.append(require_permissions(PermissionChoices.APPROVE_MORTGAGE)())
        return permissions + [RegionScopedPermission()]

    def get_serializer_class(self):
        if self.action == 'retrieve':
            return MortgageDetailSerializer
        return MortgageSerializer

    def retrieve(self, request, *args, **kwargs):
        return self.success_response(self.get_serializer(self.get_object()).data)

    @action(detail=True, methods=['post'])
    def payments(self, request, pk=None):
        """Book a repayment against the mortgage."""
        mortgage = self.get_object()
        if mortgage.mortgage_status != Mortgage.Status.ACTIVE:
            raise WorkflowError(f"Mortgage {mortgage.mortgage_id} is {mortgage.mortgage_status}")

        serializer = MortgagePaymentCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        balance_before = mortgage.outstanding_balance
        payment = mortgage.record_payment(**serializer.validated_data)

        record_event(
            request,
            event_type=AuditLog.EventType.PAYMENT_RECORDED,
            action=f"Recorded payment of {payment.amount} on mortgage {mortgage.mortgage_id}",
            target=mortgage,
            changes={
                'before': {'outstanding_balance': balance_before},
                'after': {
                    'outstanding_balance': mortgage.outstanding_balance,
                    'mortgage_status': mortgage.mortgage_status,
                },
            },
            fields_changed=['outstanding_balance'],
            metadata={'payment_id': payment.pk, 'receipt_number': payment.receipt_number},
        )
        return self.success_response(
            {
                'payment': MortgagePaymentSerializer(payment).data,
                'mortgage': MortgageSerializer(mortgage).data,
            },
            message="Payment recorded",
            status_code=status.HTTP_201_CREATED,
        )


class SubsidyViewSet(RegionScopedQuerysetMixin, EnvelopeResponseMixin, viewsets.ReadOnlyModelViewSet):
    queryset = Subsidy.objects.select_related('beneficiary', 'parcel')
    serializer_class = SubsidySerializer
    pagination_class = RegistryPagination
    filter_backends = [DjangoFilterBackend, SortFilter]
    filterset_class = SubsidyFilter
    sort_fields = ['application_date', 'approval_date', 'allocated_amount', 'disbursed_amount', 'program_name']
    default_sort = '-application_date'

    def get_permissions(self):
        return [IsAuthenticated(), RegionScopedPermission()]

    def retrieve(self, request, *args, **kwargs):
        return self.success_response(self.get_serializer(self.get_object()).data)
