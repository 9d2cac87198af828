from .parcels import ParcelViewSet, OwnerViewSet
from .transfers import TransferViewSet
from .disputes import DisputeViewSet
from .mortgages import MortgageViewSet, SubsidyViewSet
from .audit import AuditLogViewSet
from .dashboard_api import (
    dashboard_stats_api,
    affordability_api,
    subsidy_api,
    bubble_risk_api,
    regional_data_api,
    fraud_stats_api,
    trends_api,
)
from .health import health_check

__all__ = [
    'ParcelViewSet',
    'OwnerViewSet',
    'TransferViewSet',
    'DisputeViewSet',
    'MortgageViewSet',
    'SubsidyViewSet',
    'AuditLogViewSet',
    'dashboard_stats_api',
    'affordability_api',
    'subsidy_api',
    'bubble_risk_api',
    'regional_data_api',
    'fraud_stats_api',
    'trends_api',
    'health_check',
]
