"""
Pure arithmetic behind the dashboard indicators.

Nothing in here touches the database: the dashboard service aggregates
with the ORM and hands plain numbers to these functions, which turn them
into scores, percentages and chart series.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from ..constants import (
    AFFORDABILITY_BASELINE_RATIO,
    AFFORDABILITY_INTERVENTION_RATIO,
    AFFORDABILITY_TREND,
    BUBBLE_GAP_CONCERN_THRESHOLD,
    DEFAULT_BUBBLE_PRICE,
    DEFAULT_LEAKAGE_RATE,
    DEFAULT_RESIDENTIAL_PRICE,
    DEFAULT_SUBSIDY_ALLOCATED,
    DEFAULT_SUBSIDY_DISBURSED,
    FRAUD_CASE_VALUE,
    INCOME_CATEGORIES,
    INCOME_GROWTH_RATE,
    LEAKAGE_AUDIT_THRESHOLD,
    MEDIAN_INCOME,
    MONTHLY_INCOME_GROWTH_BASE,
    MONTHLY_INCOME_GROWTH_SPAN,
    PROCESSING_DAYS_BASE,
    YEARLY_PRICE_GROWTH_FACTOR,
)

logger = logging.getLogger(__name__)


def round_half_up(value, places: int = 0):
    """
    Round like a calculator: halves go away from zero.

    Returns an int when ``places`` is 0, otherwise a float.
    """
    if value is None:
        return 0 if places == 0 else 0.0
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


def round1(value):
    return round_half_up(value, 1)


def round2(value):
    return round_half_up(value, 2)


def clamp(value, low=0, high=100):
    return max(low, min(high, value))


def percentage(part, whole, places: int = 1):
    """``part / whole * 100`` rounded, or 0 when ``whole`` is empty."""
    if not whole:
        return 0
    return round_half_up(float(part) / float(whole) * 100, places)


# --- calendar helpers -------------------------------------------------------

def month_window(months: int, now=None) -> List[Tuple[str, Any]]:
    """
    The last ``months`` calendar months, oldest first, ending with the current one.

    Returns:
        List of (key, first_day) pairs where key is 'YYYY-MM' and first_day
        is an aware datetime at midnight on the 1st of that month
    """
    now = timezone.localtime(now or timezone.now())
    first_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    window = []
    for offset in range(months - 1, -1, -1):
        start = first_of_month - relativedelta(months=offset)
        window.append((start.strftime('%Y-%m'), start))
    return window


def month_series(counts: Dict[str, int], window, value_key='value', label_format='%b'):
    """
    Expand a sparse {'YYYY-MM': count} map onto a month window, filling gaps with 0.
    """
    return [
        {'month': start.strftime(label_format), value_key: counts.get(key, 0)}
        for key, start in window
    ]


# --- affordability ----------------------------------------------------------

def affordability_level(score):
    if score > 70:
        return 'Affordable'
    if score > 50:
        return 'Moderate'
    return 'Unaffordable'


def affordability_indicators(avg_price: Optional[float]) -> Dict[str, Any]:
    """
    Price-to-income ratios per income bracket and the overall affordability score.

    Args:
        avg_price: Mean market value of active residential parcels, or None
            when there are none

    Returns:
        Dict with overall_score, trend, average_ratio, income_categories
        and interpretation
    """
    price = float(avg_price) if avg_price else float(DEFAULT_RESIDENTIAL_PRICE)

    categories = []
    ratios = []
    for bracket in INCOME_CATEGORIES:
        ratio = price / bracket['income']
        ratios.append(ratio)
        categories.append({
            'category': bracket['category'],
            'price_to_income': round1(ratio),
            'avg_income': bracket['income'],
            'avg_property_price': round_half_up(price),
            'percentile': bracket['percentile'],
        })

    average_ratio = sum(ratios) / len(ratios)
    # A ratio of 5 scores 100; every extra year of income costs 10 points
    score = clamp(100 - (average_ratio - AFFORDABILITY_BASELINE_RATIO) * 10)

    return {
        'overall_score': round_half_up(score),
        'trend': AFFORDABILITY_TREND,
        'average_ratio': round1(average_ratio),
        'income_categories': categories,
        'interpretation': {
            'score': round_half_up(score),
            'level': affordability_level(score),
            'recommendation': (
                'Policy intervention recommended'
                if average_ratio > AFFORDABILITY_INTERVENTION_RATIO
                else 'Monitor closely'
            ),
        },
    }


def regional_price_row(region, avg_price, count, min_price, max_price):
    return {
        'region': region,
        'avg_price': round_half_up(avg_price),
        'count': count,
        'min_price': round_half_up(min_price),
        'max_price': round_half_up(max_price),
        'affordability_ratio': round1(float(avg_price or 0) / MEDIAN_INCOME),
    }


# --- subsidies --------------------------------------------------------------

def utilization_level(rate):
    if rate > 80:
        return 'High'
    if rate > 60:
        return 'Moderate'
    return 'Low'


def leakage_level(rate):
    if rate > 5:
        return 'High Risk'
    if rate > 2:
        return 'Moderate Risk'
    return 'Low Risk'


def subsidy_indicators(totals: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Utilisation and leakage for one program year.

    Args:
        totals: Aggregate row with total_allocated, total_approved,
            total_disbursed, total_applications, approved_count,
            completed_count and fraud_count. None or an empty row means no
            applications were filed, and calibration fallbacks are used.
    """
    if not totals or not totals.get('total_applications'):
        totals = {
            'total_allocated': DEFAULT_SUBSIDY_ALLOCATED,
            'total_approved': 0,
            'total_disbursed': DEFAULT_SUBSIDY_DISBURSED,
            'total_applications': 0,
            'approved_count': 0,
            'completed_count': 0,
            'fraud_count': 0,
        }

    allocated = float(totals.get('total_allocated') or 0)
    disbursed = float(totals.get('total_disbursed') or 0)
    applications = totals.get('total_applications') or 0
    fraud_count = totals.get('fraud_count') or 0

    utilization_rate = percentage(disbursed, allocated)
    if applications:
        leakage_rate = percentage(fraud_count, applications)
    else:
        leakage_rate = DEFAULT_LEAKAGE_RATE

    return {
        'total_allocated': allocated,
        'total_approved': float(totals.get('total_approved') or 0),
        'total_disbursed': disbursed,
        'utilization_rate': utilization_rate,
        'leakage_rate': leakage_rate,
        'total_applications': applications,
        'approved_applications': totals.get('approved_count') or 0,
        'completed_applications': totals.get('completed_count') or 0,
        'fraudulent_cases': fraud_count,
        'interpretation': {
            'utilization_level': utilization_level(utilization_rate),
            'leakage_level': leakage_level(leakage_rate),
            'recommendation': (
                'Immediate audit recommended'
                if leakage_rate > LEAKAGE_AUDIT_THRESHOLD
                else 'Continue monitoring'
            ),
        },
    }


def program_row(program_name, allocated, disbursed, beneficiaries, completed):
    return {
        'program_name': program_name,
        'allocated': float(allocated or 0),
        'disbursed': float(disbursed or 0),
        'utilization_rate': percentage(disbursed or 0, allocated),
        'beneficiaries': beneficiaries,
        'completion_rate': percentage(completed, beneficiaries),
    }


# --- bubble risk ------------------------------------------------------------

def bubble_risk_level(score):
    if score > 70:
        return 'High Risk'
    if score > 50:
        return 'Moderate Risk'
    return 'Low Risk'


def bubble_recommendation(score):
    if score > 70:
        return 'Implement cooling measures'
    if score > 50:
        return 'Monitor closely'
    return 'Healthy market conditions'


def bubble_risk_indicators(current_avg: Optional[float], now=None) -> Dict[str, Any]:
    """
    Compare price growth with income growth and project a 12-month series.

    Last year's average is derived from the current one with the long-run
    yearly growth factor, so the score stays stable on sparse data.
    """
    current = float(current_avg) if current_avg else float(DEFAULT_BUBBLE_PRICE)
    last_year = current / YEARLY_PRICE_GROWTH_FACTOR

    price_growth = round1((current - last_year) / last_year * 100)
    growth_gap = price_growth - INCOME_GROWTH_RATE
    risk_score = clamp(50 + growth_gap * 10)

    monthly_trends = []
    for index, (_, start) in enumerate(month_window(12, now)):
        progress = index / 11
        monthly_trends.append({
            'month': start.strftime('%b %Y'),
            'price_growth': round2(progress * (current - last_year) / last_year * 100),
            'income_growth': round2(MONTHLY_INCOME_GROWTH_BASE + progress * MONTHLY_INCOME_GROWTH_SPAN),
        })

    return {
        'current_price_growth': price_growth,
        'current_income_growth': INCOME_GROWTH_RATE,
        'risk_score': round_half_up(risk_score),
        'growth_gap': round1(growth_gap),
        'trend': 'increasing' if growth_gap > 0 else 'decreasing',
        'current_avg_price': round_half_up(current),
        'last_year_avg_price': round_half_up(last_year),
        'monthly_trends': monthly_trends,
        'interpretation': {
            'risk_level': bubble_risk_level(risk_score),
            'recommendation': bubble_recommendation(risk_score),
            'concerns': (
                'Price growth significantly outpacing income - bubble risk elevated'
                if growth_gap > BUBBLE_GAP_CONCERN_THRESHOLD
                else 'Price growth aligned with income growth'
            ),
        },
    }


# --- regional / fraud -------------------------------------------------------

def avg_processing_days(avg_days, parcel_count):
    """Mean processing time, or a stable per-region estimate when nothing completed yet."""
    if avg_days:
        return round1(avg_days)
    return round1(PROCESSING_DAYS_BASE + (parcel_count % 25) / 10)


def blocked_amount(fraud_cases):
    return fraud_cases * FRAUD_CASE_VALUE
