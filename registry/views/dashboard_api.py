"""
API views for the land registry dashboard.
"""

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import resolve_region_scope
from ..services.dashboard import (
    get_affordability,
    get_bubble_risk,
    get_dashboard_stats,
    get_fraud_stats,
    get_regional_data,
    get_subsidy_effectiveness,
    get_trends,
)

logger = logging.getLogger(__name__)


def _region_scope(request):
    return resolve_region_scope(request.user, request.query_params.get('region'))


def _server_error(message, error):
    return Response({
        'success': False,
        'message': message,
        'error': str(error),
    }, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def dashboard_stats_api(request):
    """
    Headline registry statistics.

    Query parameters:
    - region: Region name or "All Regions"
    - time_range: 7days, 30days, 90days or 1year
    """
    regions = _region_scope(request)
    try:
        result = get_dashboard_stats(regions=regions, time_range=request.query_params.get('time_range'))
        return Response({'success': True, 'data': result})
    except Exception as e:
        logger.error(f"Error fetching dashboard stats: {e}", exc_info=True)
        return _server_error('Error fetching dashboard statistics', e)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def affordability_api(request):
    regions = _region_scope(request)
    try:
        return Response({'success': True, 'data': get_affordability(regions=regions)})
    except Exception as e:
        logger.error(f"Error fetching affordability data: {e}", exc_info=True)
        return _server_error('Error fetching affordability data', e)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def subsidy_api(request):
    """
    Subsidy program effectiveness.

    Query parameters:
    - region: Region name or "All Regions"
    - year: Program year, defaults to the current year
    """
    regions = _region_scope(request)

    year = request.query_params.get('year')
    if year:
        try:
            year = int(year)
        except ValueError:
            return Response({
                'success': False,
                'message': 'year must be a whole number',
            }, status=status.HTTP_400_BAD_REQUEST)

    try:
        return Response({'success': True, 'data': get_subsidy_effectiveness(regions=regions, year=year or None)})
    except Exception as e:
        logger.error(f"Error fetching subsidy data: {e}", exc_info=True)
        return _server_error('Error fetching subsidy data', e)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def bubble_risk_api(request):
    regions = _region_scope(request)
    try:
        return Response({'success': True, 'data': get_bubble_risk(regions=regions)})
    except Exception as e:
        logger.error(f"Error fetching bubble risk data: {e}", exc_info=True)
        return _server_error('Error fetching bubble risk data', e)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def regional_data_api(request):
    """Per-region breakdown, limited to the caller's regions."""
    regions = _region_scope(request)
    try:
        return Response({'success': True, 'data': get_regional_data(regions=regions)})
    except Exception as e:
        logger.error(f"Error fetching regional data: {e}", exc_info=True)
        return _server_error('Error fetching regional data', e)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def fraud_stats_api(request):
    regions = _region_scope(request)
    try:
        return Response({'success': True, 'data': get_fraud_stats(regions=regions)})
    except Exception as e:
        logger.error(f"Error fetching fraud stats: {e}", exc_info=True)
        return _server_error('Error fetching fraud statistics', e)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def trends_api(request):
    """
    Daily time series for one record type.

    Query parameters:
    - metric: transfers, disputes or mortgages
    - period: 7days, 30days, 90days or 1year
    - region: Region name or "All Regions"
    """
    regions = _region_scope(request)
    try:
        result = get_trends(
            metric=request.query_params.get('metric', 'transfers'),
            period=request.query_params.get('period', '30days'),
            regions=regions,
            region_label=request.query_params.get('region'),
        )
        return Response({'success': True, **result})
    except Exception as e:
        logger.error(f"Error fetching trends data: {e}", exc_info=True)
        return _server_error('Error fetching trends data', e)
