"""
Reference data and dashboard calibration values for the land registry.
"""

from decimal import Decimal

# Serbian administrative districts
REGIONS = [
    'Belgrade', 'Šumadija', 'Kolubara', 'Zlatibor',
    'Podunavlje', 'Braničevo', 'Nišava', 'Jablanica', 'Pčinja',
    'Mačva', 'Moravica', 'Raška', 'Rasina', 'Pomoravlje',
    'Bor', 'Zaječar', 'Toplica', 'Pirot', 'Srem',
    'Južna Bačka', 'Severna Bačka', 'Zapadna Bačka',
    'Severni Banat', 'Srednji Banat', 'Južni Banat',
]

REGION_CHOICES = [(region, region) for region in REGIONS]

# Query-string sentinels meaning "no filter"
ALL_REGIONS = 'All Regions'
ALL_STATUSES = 'All Statuses'

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
AUDIT_LOG_PAGE_SIZE = 50

LAND_AREA_UNIT = 'sqm'
CURRENCY = 'EUR'

# Window lengths accepted by the time_range / period query parameters
TIME_RANGE_DAYS = {
    '7days': 7,
    '30days': 30,
    '90days': 90,
    '1year': 365,
}
DEFAULT_TREND_DAYS = 30

# Affordability: yearly household income per income category (EUR)
INCOME_CATEGORIES = [
    {'category': 'Lowest', 'income': 12000, 'percentile': '0-25%'},
    {'category': 'Lower', 'income': 18000, 'percentile': '25-50%'},
    {'category': 'Middle', 'income': 30000, 'percentile': '50-75%'},
    {'category': 'Higher', 'income': 48000, 'percentile': '75-100%'},
]
MEDIAN_INCOME = 30000
DEFAULT_RESIDENTIAL_PRICE = 150000
AFFORDABILITY_TREND = -2.8
AFFORDABILITY_BASELINE_RATIO = 5
AFFORDABILITY_INTERVENTION_RATIO = 6

# Subsidy fallbacks used before any program data is loaded
DEFAULT_SUBSIDY_ALLOCATED = 98500000
DEFAULT_SUBSIDY_DISBURSED = 72900000
DEFAULT_LEAKAGE_RATE = 3.2
LEAKAGE_AUDIT_THRESHOLD = 3

# Bubble risk
DEFAULT_BUBBLE_PRICE = 180000
YEARLY_PRICE_GROWTH_FACTOR = 1.072
INCOME_GROWTH_RATE = 4.4
MONTHLY_INCOME_GROWTH_BASE = 3.5
MONTHLY_INCOME_GROWTH_SPAN = 0.9
BUBBLE_GAP_CONCERN_THRESHOLD = 5

# Regional processing-time fallback when no completed transfers exist
PROCESSING_DAYS_BASE = 3.5

# Average claim value attributed to each blocked fraud case (EUR)
FRAUD_CASE_VALUE = 42500
FRAUD_STATS_MONTHS = 8
REGIONAL_SERIES_MONTHS = 6

DEFAULT_TRANSFER_TAX_RATE = Decimal('2.5')
AUDIT_RETENTION_DAYS = 2555
