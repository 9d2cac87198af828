"""
Service functions behind the /api/dashboard/ endpoints.

Each function aggregates in the database and hands the raw numbers to
``indicators`` for scoring and formatting. ``regions`` is the list produced
by ``accounts.permissions.resolve_region_scope``: None means every region.
"""

import logging
from datetime import timedelta
from typing import Any, Dict, List, Optional

from django.db.models import Avg, Count, Max, Min, Q, Sum
from django.db.models.functions import TruncDate, TruncMonth
from django.utils import timezone

from ..constants import (
    ALL_REGIONS,
    CURRENCY,
    DEFAULT_TREND_DAYS,
    FRAUD_STATS_MONTHS,
    LAND_AREA_UNIT,
    REGIONAL_SERIES_MONTHS,
    TIME_RANGE_DAYS,
)
from ..models import Dispute, Mortgage, Owner, Parcel, Subsidy, Transfer
from . import indicators

logger = logging.getLogger(__name__)

TREND_METRICS = ('transfers', 'disputes', 'mortgages')


def _scoped(queryset, regions: Optional[List[str]]):
    if regions is None:
        return queryset
    return queryset.filter(region__in=regions)


def _as_float(value) -> float:
    return float(value) if value is not None else 0.0


def _month_counts(queryset, date_field: str, since) -> Dict[str, int]:
    rows = (
        queryset.filter(**{f'{date_field}__gte': since})
        .annotate(month=TruncMonth(date_field))
        .values('month')
        .annotate(count=Count('id'))
        .order_by('month')
    )
    return {row['month'].strftime('%Y-%m'): row['count'] for row in rows}


def _region_month_counts(queryset, date_field: str, since) -> Dict[str, Dict[str, int]]:
    rows = (
        queryset.filter(**{f'{date_field}__gte': since})
        .annotate(month=TruncMonth(date_field))
        .values('region', 'month')
        .annotate(count=Count('id'))
        .order_by('month')
    )
    out: Dict[str, Dict[str, int]] = {}
    for row in rows:
        out.setdefault(row['region'], {})[row['month'].strftime('%Y-%m')] = row['count']
    return out


def _count_by_region(queryset) -> Dict[str, int]:
    return {
        row['region']: row['count']
        for row in queryset.values('region').annotate(count=Count('id')).order_by()
    }


def get_dashboard_stats(regions: Optional[List[str]] = None, time_range: Optional[str] = None) -> Dict[str, Any]:
    """
    Headline counts for the overview page.

    Args:
        regions: Regions to include, None for all
        time_range: One of TIME_RANGE_DAYS; adds new_registrations for the window

    Returns:
        Nested dict of parcel, owner, dispute, transfer, mortgage, area and
        value totals
    """
    logger.info(f"Generating dashboard stats for regions={regions} time_range={time_range}")

    parcels = _scoped(Parcel.objects.filter(is_active=True), regions)
    parcel_totals = parcels.aggregate(
        total=Count('id'),
        verified=Count('id', filter=Q(legal_status=Parcel.LegalStatus.VERIFIED)),
        disputed=Count('id', filter=Q(legal_status=Parcel.LegalStatus.DISPUTED)),
        area=Sum('area'),
        value=Sum('market_value'),
    )

    dispute_totals = _scoped(Dispute.objects.all(), regions).aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(status__in=Dispute.ACTIVE_STATUSES)),
        in_court=Count('id', filter=Q(status=Dispute.Status.COURT)),
    )

    transfer_totals = _scoped(Transfer.objects.all(), regions).aggregate(
        total=Count('id'),
        pending=Count('id', filter=Q(transfer_status__in=[
            Transfer.Status.INITIATED, Transfer.Status.PENDING_APPROVAL,
        ])),
    )

    mortgage_totals = _scoped(
        Mortgage.objects.filter(mortgage_status=Mortgage.Status.ACTIVE), regions
    ).aggregate(
        active=Count('id'),
        outstanding=Sum('outstanding_balance'),
    )

    result = {
        'parcels': {
            'total': parcel_totals['total'],
            'verified': parcel_totals['verified'],
            'disputed': parcel_totals['disputed'],
            'verification_rate': indicators.percentage(parcel_totals['verified'], parcel_totals['total']),
        },
        'owners': {
            'total': Owner.objects.filter(is_verified=True).count(),
        },
        'disputes': {
            'active': dispute_totals['active'],
            'in_court': dispute_totals['in_court'],
            'total': dispute_totals['total'],
        },
        'transfers': {
            'pending': transfer_totals['pending'],
            'total': transfer_totals['total'],
        },
        'mortgages': {
            'active': mortgage_totals['active'],
            'total_outstanding': _as_float(mortgage_totals['outstanding']),
        },
        'land_area': {
            'total': _as_float(parcel_totals['area']),
            'unit': LAND_AREA_UNIT,
        },
        'market_value': {
            'total': _as_float(parcel_totals['value']),
            'currency': CURRENCY,
        },
    }

    days = TIME_RANGE_DAYS.get(time_range or '')
    if days:
        since = timezone.now() - timedelta(days=days)
        result['new_registrations'] = parcels.filter(registration_date__gte=since).count()
        result['time_range'] = {'range': time_range, 'since': since.isoformat()}

    return result


def _residential(regions):
    return _scoped(
        Parcel.objects.filter(is_active=True, land_type=Parcel.LandType.RESIDENTIAL),
        regions,
    )


def get_affordability(regions: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Housing affordability: price-to-income per income bracket plus a
    residential price table for every region.
    """
    avg_price = _residential(regions).aggregate(avg=Avg('market_value'))['avg']
    result = indicators.affordability_indicators(avg_price)

    # The regional table always covers the whole country for comparison
    by_region = (
        _residential(None)
        .values('region')
        .annotate(
            avg_price=Avg('market_value'),
            count=Count('id'),
            min_price=Min('market_value'),
            max_price=Max('market_value'),
        )
        .order_by('-avg_price')
    )
    result['avg_prices_by_region'] = [
        indicators.regional_price_row(
            row['region'], row['avg_price'], row['count'], row['min_price'], row['max_price']
        )
        for row in by_region
    ]
    return result


def get_subsidy_effectiveness(regions: Optional[List[str]] = None, year: Optional[int] = None) -> Dict[str, Any]:
    """
    Program utilisation and leakage for one program year (default: current year).
    """
    year = year or timezone.now().year
    subsidies = _scoped(Subsidy.objects.filter(program_year=year), regions)

    totals = subsidies.aggregate(
        total_allocated=Sum('allocated_amount'),
        total_approved=Sum('approved_amount'),
        total_disbursed=Sum('disbursed_amount'),
        total_applications=Count('id'),
        approved_count=Count('id', filter=Q(status__in=Subsidy.APPROVED_STATUSES)),
        completed_count=Count('id', filter=Q(status=Subsidy.Status.COMPLETED)),
        fraud_count=Count('id', filter=Q(is_legitimate=False)),
    )
    result = indicators.subsidy_indicators(totals)

    by_program = (
        subsidies.values('program_name')
        .annotate(
            allocated=Sum('allocated_amount'),
            disbursed=Sum('disbursed_amount'),
            beneficiaries=Count('id'),
            completed=Count('id', filter=Q(status=Subsidy.Status.COMPLETED)),
        )
        .order_by('-allocated')
    )
    result['by_program'] = [
        indicators.program_row(
            row['program_name'], row['allocated'], row['disbursed'],
            row['beneficiaries'], row['completed'],
        )
        for row in by_program
    ]
    result['year'] = year
    return result


def get_bubble_risk(regions: Optional[List[str]] = None) -> Dict[str, Any]:
    current_avg = _residential(regions).aggregate(avg=Avg('market_value'))['avg']
    return indicators.bubble_risk_indicators(current_avg)


def get_regional_data(regions: Optional[List[str]] = None) -> List[Dict[str, Any]]:
    """
    One row per region with active parcels, busiest region first.

    Returns:
        List of dicts with parcel, dispute, transfer and mortgage counts,
        processing time, verification rate and six-month series
    """
    regional = (
        _scoped(Parcel.objects.filter(is_active=True), regions)
        .values('region')
        .annotate(
            total_parcels=Count('id'),
            total_area=Sum('area'),
            total_value=Sum('market_value'),
            verified_count=Count('id', filter=Q(legal_status=Parcel.LegalStatus.VERIFIED)),
        )
        .order_by('-total_parcels', 'region')
    )

    disputes = _scoped(Dispute.objects.all(), regions)
    transfers = _scoped(Transfer.objects.all(), regions)

    active_disputes = _count_by_region(disputes.filter(status__in=Dispute.ACTIVE_STATUSES))
    fraud_disputes = _count_by_region(disputes.filter(dispute_type=Dispute.DisputeType.FRAUD_ALLEGATION))
    transfer_counts = _count_by_region(transfers.filter(transfer_status__in=[
        Transfer.Status.PENDING_APPROVAL, Transfer.Status.APPROVED, Transfer.Status.COMPLETED,
    ]))
    active_mortgages = _count_by_region(
        _scoped(Mortgage.objects.filter(mortgage_status=Mortgage.Status.ACTIVE), regions)
    )
    processing = {
        row['region']: row['avg_days']
        for row in transfers.filter(
            transfer_status=Transfer.Status.COMPLETED, processing_time__gt=0
        ).values('region').annotate(avg_days=Avg('processing_time')).order_by()
    }

    window = indicators.month_window(REGIONAL_SERIES_MONTHS)
    since = window[0][1]
    transfer_trend = _region_month_counts(transfers, 'application_date', since)
    dispute_trend = _region_month_counts(disputes, 'filing_date', since)

    rows = []
    for row in regional:
        region = row['region']
        rows.append({
            'region': region,
            'parcels': row['total_parcels'],
            'area': _as_float(row['total_area']),
            'value': _as_float(row['total_value']),
            'verified': row['verified_count'],
            'disputes': active_disputes.get(region, 0),
            'transfers': transfer_counts.get(region, 0),
            'active_mortgages': active_mortgages.get(region, 0),
            'avg_processing_days': indicators.avg_processing_days(processing.get(region), row['total_parcels']),
            'fraud_blocked': fraud_disputes.get(region, 0),
            'verification_rate': indicators.percentage(row['verified_count'], row['total_parcels']),
            'transfers_last_6m': indicators.month_series(transfer_trend.get(region, {}), window),
            'disputes_last_6m': indicators.month_series(dispute_trend.get(region, {}), window),
        })
    return rows


def get_fraud_stats(regions: Optional[List[str]] = None) -> Dict[str, Any]:
    window = indicators.month_window(FRAUD_STATS_MONTHS)
    fraud_disputes = _scoped(
        Dispute.objects.filter(dispute_type=Dispute.DisputeType.FRAUD_ALLEGATION), regions
    )
    monthly = _month_counts(fraud_disputes, 'filing_date', window[0][1])
    total = fraud_disputes.count()

    return {
        'monthly': indicators.month_series(monthly, window, value_key='count'),
        'total_fraud_cases': total,
        'suspicious_transfers': _scoped(Transfer.objects.filter(is_suspicious=True), regions).count(),
        'blocked_amount': indicators.blocked_amount(total),
    }


def get_trends(metric: str = 'transfers', period: str = '30days',
               regions: Optional[List[str]] = None, region_label: Optional[str] = None) -> Dict[str, Any]:
    """
    Daily counts (and money totals) for one record type over a trailing window.

    Args:
        metric: transfers, disputes or mortgages; anything else yields no data
        period: One of TIME_RANGE_DAYS, default 30 days
        regions: Regions to include, None for all
        region_label: Region name echoed back in the response

    Returns:
        Dict with data (ascending daily buckets), metric, period and region
    """
    days = TIME_RANGE_DAYS.get(period, DEFAULT_TREND_DAYS)
    since = timezone.now() - timedelta(days=days)

    if metric == 'transfers':
        queryset, date_field = Transfer.objects.all(), 'application_date'
        totals = {'total_value': Sum('agreed_price')}
    elif metric == 'disputes':
        queryset, date_field = Dispute.objects.all(), 'filing_date'
        totals = {}
    elif metric == 'mortgages':
        queryset, date_field = Mortgage.objects.all(), 'origination_date'
        totals = {'total_amount': Sum('principal_amount')}
    else:
        logger.warning(f"Unknown trend metric requested: {metric}")
        queryset = None

    data = []
    if queryset is not None:
        rows = (
            _scoped(queryset, regions)
            .filter(**{f'{date_field}__gte': since})
            .annotate(day=TruncDate(date_field))
            .values('day')
            .annotate(count=Count('id'), **totals)
            .order_by('day')
        )
        for row in rows:
            bucket = {'date': row['day'].isoformat(), 'count': row['count']}
            for key in totals:
                bucket[key] = _as_float(row[key])
            data.append(bucket)

    return {
        'data': data,
        'metric': metric,
        'period': period,
        'region': region_label or ALL_REGIONS,
    }
