from .summaries import (
    OwnerSummarySerializer,
    ParcelSummarySerializer,
    UserSummarySerializer,
)

from .parcels import (
    OwnerSerializer,
    OwnershipHistorySerializer,
    ParcelSerializer,
    ParcelDetailSerializer,
    ParcelRestrictionSerializer,
)

from .transactions import (
    TransferSerializer,
    TransferDecisionSerializer,
    TransferRejectSerializer,
    DisputeSerializer,
    DisputeDetailSerializer,
    DisputeCreateSerializer,
    DisputeResolveSerializer,
    DisputeUpdateSerializer,
    MortgageSerializer,
    MortgageDetailSerializer,
    MortgagePaymentSerializer,
    MortgagePaymentCreateSerializer,
    SubsidySerializer,
)

from .audit import AuditLogSerializer, AuditReviewSerializer

__all__ = [
    'OwnerSummarySerializer',
    'ParcelSummarySerializer',
    'UserSummarySerializer',
    'OwnerSerializer',
    'OwnershipHistorySerializer',
    'ParcelSerializer',
    'ParcelDetailSerializer',
    'ParcelRestrictionSerializer',
    'TransferSerializer',
    'TransferDecisionSerializer',
    'TransferRejectSerializer',
    'DisputeSerializer',
    'DisputeDetailSerializer',
    'DisputeCreateSerializer',
    'DisputeResolveSerializer',
    'DisputeUpdateSerializer',
    'MortgageSerializer',
    'MortgageDetailSerializer',
    'MortgagePaymentSerializer',
    'MortgagePaymentCreateSerializer',
    'SubsidySerializer',
    'AuditLogSerializer',
    'AuditReviewSerializer',
]
