from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AuditLogViewSet,
    DisputeViewSet,
    MortgageViewSet,
    OwnerViewSet,
    ParcelViewSet,
    SubsidyViewSet,
    TransferViewSet,
)
from .views.dashboard_api import (
    affordability_api,
    bubble_risk_api,
    dashboard_stats_api,
    fraud_stats_api,
    regional_data_api,
    subsidy_api,
    trends_api,
)

router = DefaultRouter()
router.register(r'parcels', ParcelViewSet, basename='parcel')
router.register(r'owners', OwnerViewSet, basename='owner')
router.register(r'transfers', TransferViewSet, basename='transfer')
router.register(r'disputes', DisputeViewSet, basename='dispute')
router.register(r'mortgages', MortgageViewSet, basename='mortgage')
router.register(r'subsidies', SubsidyViewSet, basename='subsidy')
router.register(r'audit/logs', AuditLogViewSet, basename='audit-log')

urlpatterns = [
    path('', include(router.urls)),

    # Dashboard reporting
    path('dashboard/stats/', dashboard_stats_api, name='dashboard-stats'),
    path('dashboard/affordability/', affordability_api, name='dashboard-affordability'),
    path('dashboard/subsidy/', subsidy_api, name='dashboard-subsidy'),
    path('dashboard/bubble-risk/', bubble_risk_api, name='dashboard-bubble-risk'),
    path('dashboard/regional-data/', regional_data_api, name='dashboard-regional-data'),
    path('dashboard/fraud-stats/', fraud_stats_api, name='dashboard-fraud-stats'),
    path('dashboard/trends/', trends_api, name='dashboard-trends'),
]
