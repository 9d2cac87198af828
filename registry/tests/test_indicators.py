from datetime import datetime

import pytz
from django.test import SimpleTestCase

from registry.services import indicators


class RoundingTest(SimpleTestCase):

    def test_halves_round_away_from_zero(self):
        self.assertEqual(indicators.round_half_up(2.5), 3)
        self.assertEqual(indicators.round_half_up(-2.5), -3)
        self.assertEqual(indicators.round_half_up(0.125, 2), 0.13)
        self.assertEqual(indicators.round1(7.25), 7.3)

    def test_none_rounds_to_zero(self):
        self.assertEqual(indicators.round_half_up(None), 0)
        self.assertEqual(indicators.round_half_up(None, 1), 0.0)

    def test_percentage_of_empty_whole_is_zero(self):
        self.assertEqual(indicators.percentage(5, 0), 0)
        self.assertEqual(indicators.percentage(1, 3), 33.3)


class MonthWindowTest(SimpleTestCase):

    def setUp(self):
        self.now = datetime(2024, 3, 15, 12, 0, tzinfo=pytz.UTC)

    def test_window_is_oldest_first(self):
        window = indicators.month_window(3, self.now)
        self.assertEqual([key for key, _ in window], ['2024-01', '2024-02', '2024-03'])
        self.assertEqual(window[0][1].day, 1)

    def test_window_crosses_year_boundary(self):
        window = indicators.month_window(4, self.now)
        self.assertEqual(window[0][0], '2023-12')

    def test_series_fills_missing_months(self):
        window = indicators.month_window(3, self.now)
        series = indicators.month_series({'2024-02': 4}, window)
        self.assertEqual(series, [
            {'month': 'Jan', 'value': 0},
            {'month': 'Feb', 'value': 4},
            {'month': 'Mar', 'value': 0},
        ])


class AffordabilityTest(SimpleTestCase):
    """Price-to-income scoring"""

    def test_default_price_when_no_residential_parcels(self):
        result = indicators.affordability_indicators(None)

        # 150000 against incomes 12000/18000/30000/48000 averages 7.24 years
        self.assertEqual(result['average_ratio'], 7.2)
        self.assertEqual(result['overall_score'], 78)
        self.assertEqual(result['interpretation']['level'], 'Affordable')
        self.assertEqual(result['interpretation']['recommendation'], 'Policy intervention recommended')
        self.assertEqual(result['income_categories'][0]['price_to_income'], 12.5)
        self.assertEqual(len(result['income_categories']), 4)

    def test_score_is_clamped(self):
        expensive = indicators.affordability_indicators(2000000)
        cheap = indicators.affordability_indicators(10000)
        self.assertEqual(expensive['overall_score'], 0)
        self.assertEqual(expensive['interpretation']['level'], 'Unaffordable')
        self.assertEqual(cheap['overall_score'], 100)
        self.assertEqual(cheap['interpretation']['recommendation'], 'Monitor closely')

    def test_regional_price_row(self):
        row = indicators.regional_price_row('Belgrade', 150000.4, 2, 100000, 200000)
        self.assertEqual(row['avg_price'], 150000)
        self.assertEqual(row['affordability_ratio'], 5.0)


class SubsidyIndicatorTest(SimpleTestCase):

    def test_fallbacks_without_applications(self):
        result = indicators.subsidy_indicators(None)

        self.assertEqual(result['utilization_rate'], 74.0)
        self.assertEqual(result['leakage_rate'], 3.2)
        self.assertEqual(result['total_applications'], 0)
        self.assertEqual(result['interpretation']['utilization_level'], 'Moderate')
        self.assertEqual(result['interpretation']['leakage_level'], 'Moderate Risk')
        self.assertEqual(result['interpretation']['recommendation'], 'Immediate audit recommended')

    def test_rates_from_program_totals(self):
        result = indicators.subsidy_indicators({
            'total_allocated': 1000000,
            'total_approved': 900000,
            'total_disbursed': 850000,
            'total_applications': 100,
            'approved_count': 80,
            'completed_count': 40,
            'fraud_count': 1,
        })

        self.assertEqual(result['utilization_rate'], 85.0)
        self.assertEqual(result['leakage_rate'], 1.0)
        self.assertEqual(result['interpretation']['utilization_level'], 'High')
        self.assertEqual(result['interpretation']['leakage_level'], 'Low Risk')
        self.assertEqual(result['interpretation']['recommendation'], 'Continue monitoring')

    def test_program_row(self):
        row = indicators.program_row('Young Families', 1000, 250, 4, 1)
        self.assertEqual(row['utilization_rate'], 25.0)
        self.assertEqual(row['completion_rate'], 25.0)


class BubbleRiskTest(SimpleTestCase):

    def test_default_price_scores_high_risk(self):
        result = indicators.bubble_risk_indicators(None, now=datetime(2024, 6, 15, tzinfo=pytz.UTC))

        self.assertEqual(result['current_price_growth'], 7.2)
        self.assertEqual(result['growth_gap'], 2.8)
        self.assertEqual(result['risk_score'], 78)
        self.assertEqual(result['trend'], 'increasing')
        self.assertEqual(result['current_avg_price'], 180000)
        self.assertEqual(result['interpretation']['risk_level'], 'High Risk')
        self.assertEqual(result['interpretation']['recommendation'], 'Implement cooling measures')
        self.assertEqual(result['interpretation']['concerns'], 'Price growth aligned with income growth')

    def test_monthly_trend_runs_from_zero_to_current_growth(self):
        trends = indicators.bubble_risk_indicators(None, now=datetime(2024, 6, 15, tzinfo=pytz.UTC))['monthly_trends']

        self.assertEqual(len(trends), 12)
        self.assertEqual(trends[0]['month'], 'Jul 2023')
        self.assertEqual(trends[0]['price_growth'], 0.0)
        self.assertEqual(trends[-1]['price_growth'], 7.2)
        self.assertEqual(trends[0]['income_growth'], 3.5)
        self.assertEqual(trends[-1]['income_growth'], 4.4)

    def test_risk_labels(self):
        self.assertEqual(indicators.bubble_risk_level(71), 'High Risk')
        self.assertEqual(indicators.bubble_risk_level(60), 'Moderate Risk')
        self.assertEqual(indicators.bubble_risk_level(50), 'Low Risk')
        self.assertEqual(indicators.bubble_recommendation(40), 'Healthy market conditions')


class RegionalFallbackTest(SimpleTestCase):

    def test_processing_days_estimate_without_completed_transfers(self):
        self.assertEqual(indicators.avg_processing_days(None, 30), 4.0)
        self.assertEqual(indicators.avg_processing_days(12.345, 5), 12.3)

    def test_blocked_amount(self):
        self.assertEqual(indicators.blocked_amount(2), 85000)
