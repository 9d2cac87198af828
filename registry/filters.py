"""
Query-string filtering for the record list endpoints.

Region is not filtered here: it depends on the caller's assignment and is
applied by RegionScopedQuerysetMixin in views/mixins.py.
"""

import django_filters
from django.db.models import Q
from rest_framework.filters import BaseFilterBackend

from .constants import ALL_STATUSES
from .models import AuditLog, Dispute, Mortgage, Owner, Parcel, Subsidy, Transfer


class SentinelFilterSet(django_filters.FilterSet):
    """FilterSet whose choice filters treat "All Statuses" as no filter."""

    def filter_unless_sentinel(self, queryset, name, value):
        if not value or value == ALL_STATUSES:
            return queryset
        return queryset.filter(**{name: value})


class ParcelFilter(SentinelFilterSet):
    legal_status = django_filters.CharFilter(field_name='legal_status', method='filter_unless_sentinel')
    land_type = django_filters.CharFilter(field_name='land_type', method='filter_unless_sentinel')
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = Parcel
        fields = ['legal_status', 'land_type', 'search']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(Q(parcel_id__icontains=value) | Q(city__icontains=value))


class OwnerFilter(SentinelFilterSet):
    owner_type = django_filters.CharFilter(field_name='owner_type', method='filter_unless_sentinel')
    is_verified = django_filters.BooleanFilter(field_name='is_verified')
    search = django_filters.CharFilter(method='filter_search')

    class Meta:
        model = Owner
        fields = ['owner_type', 'is_verified', 'search']

    def filter_search(self, queryset, name, value):
        if not value:
            return queryset
        return queryset.filter(
            Q(first_name__icontains=value)
            | Q(last_name__icontains=value)
            | Q(company_name__icontains=value)
        )


class TransferFilter(SentinelFilterSet):
    status = django_filters.CharFilter(field_name='transfer_status', method='filter_unless_sentinel')

    class Meta:
        model = Transfer
        fields = ['status']


class DisputeFilter(SentinelFilterSet):
    status = django_filters.CharFilter(field_name='status', method='filter_unless_sentinel')
    priority = django_filters.CharFilter(field_name='priority', method='filter_unless_sentinel')
    dispute_type = django_filters.CharFilter(field_name='dispute_type', method='filter_unless_sentinel')

    class Meta:
        model = Dispute
        fields = ['status', 'priority', 'dispute_type']


class MortgageFilter(SentinelFilterSet):
    status = django_filters.CharFilter(field_name='mortgage_status', method='filter_unless_sentinel')

    class Meta:
        model = Mortgage
        fields = ['status']


class SubsidyFilter(SentinelFilterSet):
    status = django_filters.CharFilter(field_name='status', method='filter_unless_sentinel')
    program_name = django_filters.CharFilter(field_name='program_name', method='filter_unless_sentinel')
    program_year = django_filters.NumberFilter(field_name='program_year')

    class Meta:
        model = Subsidy
        fields = ['status', 'program_name', 'program_year']


class AuditLogFilter(django_filters.FilterSet):
    event_type = django_filters.CharFilter(field_name='event_type')
    severity = django_filters.CharFilter(field_name='severity')
    start_date = django_filters.DateTimeFilter(field_name='timestamp', lookup_expr='gte')
    end_date = django_filters.DateTimeFilter(field_name='timestamp', lookup_expr='lte')

    class Meta:
        model = AuditLog
        fields = ['event_type', 'severity', 'start_date', 'end_date']


class SortFilter(BaseFilterBackend):
    """
    ?sort_by=<field>&sort_order=asc|desc against the view's ``sort_fields``.

    Fields outside the whitelist fall back to ``default_sort``.
    """

    def filter_queryset(self, request, queryset, view):
        sort_fields = getattr(view, 'sort_fields', ())
        default_sort = getattr(view, 'default_sort', None)

        sort_by = request.query_params.get('sort_by')
        if sort_by in sort_fields:
            descending = request.query_params.get('sort_order', 'desc').lower() != 'asc'
            return queryset.order_by(f"{'-' if descending else ''}{sort_by}", '-pk')

        if default_sort:
            return queryset.order_by(default_sort, '-pk')
        return queryset
