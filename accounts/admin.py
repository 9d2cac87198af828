from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _
from .models import CustomUser, LoginRecord


class LoginRecordInline(admin.TabularInline):
    model = LoginRecord
    extra = 0
    readonly_fields = ('timestamp', 'ip_address', 'user_agent', 'success')
    can_delete = False


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    list_display = ('email', 'user_code', 'full_name', 'role', 'department', 'is_active', 'is_suspended', 'last_login')
    list_filter = ('role', 'department', 'is_active', 'is_verified', 'is_suspended', 'is_staff')
    search_fields = ('email', 'first_name', 'last_name', 'user_code', 'employee_id')
    ordering = ('-date_joined',)
    readonly_fields = ('user_code', 'date_joined', 'last_login', 'last_password_change', 'login_attempts', 'lock_until')
    inlines = [LoginRecordInline]

    fieldsets = (
        (None, {'fields': ('email', 'password', 'user_code')}),
        (_('Profile'), {'fields': ('first_name', 'last_name', 'phone', 'employee_id', 'department', 'position', 'hire_date')}),
        (_('Registry access'), {
            'fields': ('role', 'permissions', 'assigned_regions', 'primary_office'),
            'classes': ('wide',)
        }),
        (_('Status'), {'fields': ('is_active', 'is_verified', 'is_suspended', 'suspension_reason', 'is_staff', 'is_superuser')}),
        (_('Security'), {'fields': ('last_password_change', 'login_attempts', 'lock_until', 'otp_code', 'otp_created_at')}),
        (_('Important dates'), {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'last_name', 'password1', 'password2', 'role', 'is_active', 'is_staff'),
        }),
    )

    @admin.display(description=_('Name'))
    def full_name(self, obj):
        return obj.full_name
