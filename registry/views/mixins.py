from accounts.permissions import resolve_region_scope


def snapshot(instance, field_names):
    """Plain values of ``field_names`` on ``instance``; foreign keys become ids."""
    data = {}
    for name in field_names:
        field = instance._meta.get_field(name)
        data[name] = field.value_from_object(instance)
    return data


class RegionScopedQuerysetMixin:
    """
    Restrict list queries to the regions the caller may see.

    ``?region=`` narrows the scope; asking for a region outside the
    caller's assignment raises RegionAccessDenied (403). Detail routes are
    not filtered here, they rely on RegionScopedPermission so that an
    out-of-region record answers 403 instead of 404.
    """
    region_field = 'region'

    def get_region_scope(self):
        if not hasattr(self, '_region_scope'):
            self._region_scope = resolve_region_scope(
                self.request.user, self.request.query_params.get('region')
            )
        return self._region_scope

    def scope_queryset(self, queryset):
        regions = self.get_region_scope()
        if regions is None:
            return queryset
        return queryset.filter(**{f'{self.region_field}__in': regions})

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.detail:
            return queryset
        return self.scope_queryset(queryset)
