from django.contrib import admin

from .models import (
    AuditLog,
    Dispute,
    DisputeUpdate,
    Mortgage,
    MortgagePayment,
    Owner,
    OwnershipHistory,
    Parcel,
    ParcelRestriction,
    Subsidy,
    SubsidyDisbursement,
    SubsidyFraudFlag,
    Transfer,
)


class OwnerAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'owner_type', 'national_id', 'city', 'is_verified', 'total_property_value')
    list_filter = ('owner_type', 'is_verified', 'residency_status')
    search_fields = ('first_name', 'last_name', 'company_name', 'national_id', 'tax_id')

admin.site.register(Owner, OwnerAdmin)


class ParcelRestrictionInline(admin.TabularInline):
    model = ParcelRestriction
    extra = 0


class ParcelAdmin(admin.ModelAdmin):
    list_display = ('parcel_id', 'region', 'city', 'land_type', 'legal_status', 'market_value', 'is_active')
    list_filter = ('region', 'land_type', 'legal_status', 'is_active', 'is_fraudulent')
    search_fields = ('parcel_id', 'city', 'municipality')
    raw_id_fields = ('current_owner', 'verified_by')
    inlines = [ParcelRestrictionInline]

admin.site.register(Parcel, ParcelAdmin)


class OwnershipHistoryAdmin(admin.ModelAdmin):
    list_display = ('parcel', 'transaction_type', 'transaction_date', 'status', 'is_fraudulent')
    list_filter = ('transaction_type', 'status', 'is_fraudulent')
    raw_id_fields = ('parcel', 'previous_owner', 'new_owner', 'approved_by', 'created_by')

admin.site.register(OwnershipHistory, OwnershipHistoryAdmin)


class TransferAdmin(admin.ModelAdmin):
    list_display = ('transfer_id', 'parcel', 'transfer_type', 'transfer_status', 'region', 'application_date')
    list_filter = ('transfer_status', 'transfer_type', 'region', 'is_suspicious')
    search_fields = ('transfer_id', 'contract_number', 'parcel__parcel_id')
    raw_id_fields = ('parcel', 'seller', 'buyer', 'ownership_history')

admin.site.register(Transfer, TransferAdmin)


class DisputeUpdateInline(admin.TabularInline):
    model = DisputeUpdate
    extra = 0


class DisputeAdmin(admin.ModelAdmin):
    list_display = ('dispute_id', 'parcel', 'dispute_type', 'status', 'priority', 'region', 'filing_date')
    list_filter = ('status', 'priority', 'dispute_type', 'region')
    search_fields = ('dispute_id', 'case_number', 'parcel__parcel_id')
    raw_id_fields = ('parcel', 'claimant', 'defendant')
    inlines = [DisputeUpdateInline]

admin.site.register(Dispute, DisputeAdmin)


class MortgagePaymentInline(admin.TabularInline):
    model = MortgagePayment
    extra = 0


class MortgageAdmin(admin.ModelAdmin):
    list_display = ('mortgage_id', 'lender_name', 'mortgage_status', 'principal_amount', 'outstanding_balance', 'region')
    list_filter = ('mortgage_status', 'lender_type', 'mortgage_type', 'region')
    search_fields = ('mortgage_id', 'lender_name', 'mortgage_deed_number')
    raw_id_fields = ('parcel', 'borrower')
    inlines = [MortgagePaymentInline]

admin.site.register(Mortgage, MortgageAdmin)


class SubsidyDisbursementInline(admin.TabularInline):
    model = SubsidyDisbursement
    extra = 0


class SubsidyFraudFlagInline(admin.TabularInline):
    model = SubsidyFraudFlag
    extra = 0


class SubsidyAdmin(admin.ModelAdmin):
    list_display = ('subsidy_id', 'program_name', 'program_year', 'status', 'allocated_amount', 'disbursed_amount', 'region')
    list_filter = ('program_name', 'program_year', 'status', 'is_legitimate')
    search_fields = ('subsidy_id',)
    raw_id_fields = ('beneficiary', 'parcel')
    inlines = [SubsidyDisbursementInline, SubsidyFraudFlagInline]

admin.site.register(Subsidy, SubsidyAdmin)


class AuditLogAdmin(admin.ModelAdmin):
    """Read-only: audit entries are immutable."""
    list_display = ('event_id', 'event_type', 'performed_by', 'target_model', 'severity', 'timestamp', 'is_reviewed')
    list_filter = ('event_type', 'severity', 'status', 'is_reviewed', 'fraud_indicator')
    search_fields = ('event_id', 'action', 'target_id')
    date_hierarchy = 'timestamp'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

admin.site.register(AuditLog, AuditLogAdmin)
