import logging
from django.db import transaction
from django.utils import timezone
from rest_framework import mixins, status
from rest_framework.viewsets import GenericViewSet
from rest_framework.permissions import IsAuthenticated

from registry.pagination import RegistryPagination
from registry.services.audit import record_event
from ..models import CustomUser, PermissionChoices
from ..serializers import (
    CustomUserSerializer,
    UserDetailSerializer,
    UserCreateSerializer,
    UserUpdateSerializer,
)
from ..services import generate_otp_code, send_credentials_email
from ..permissions import require_permissions
from .mixins import EnvelopeResponseMixin, ErrorHandlingMixin

logger = logging.getLogger(__name__)


class UserViewSet(mixins.ListModelMixin,
                  mixins.RetrieveModelMixin,
                  EnvelopeResponseMixin,
                  ErrorHandlingMixin,
                  GenericViewSet):
    """
    Registry staff accounts.

    Listing and detail are open to any authenticated user; creating and
    changing accounts requires the manage_users permission.
    """
    queryset = CustomUser.objects.all().order_by('-date_joined')
    pagination_class = RegistryPagination
    http_method_names = ['get', 'post', 'patch', 'head', 'options']

    def get_permissions(self):
        if self.action in ('create', 'partial_update'):
            return [IsAuthenticated(), require_permissions(PermissionChoices.MANAGE_USERS)()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.action == 'create':
            return UserCreateSerializer
        if self.action == 'partial_update':
            return UserUpdateSerializer
        if self.action == 'retrieve':
            return UserDetailSerializer
        return CustomUserSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        role = self.request.query_params.get('role')
        if role:
            queryset = queryset.filter(role=role)
        return queryset

    def retrieve(self, request, *args, **kwargs):
        return self.success_response(self.get_serializer(self.get_object()).data)

    def create(self, request, *args, **kwargs):
        """Create a user with a generated password and email the credentials"""
        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        password = CustomUser.objects.make_random_password()
        with transaction.atomic():
            user = CustomUser.objects.create_user(
                password=password,
                created_by=request.user,
                otp_code=generate_otp_code(),
                otp_created_at=timezone.now(),
                **serializer.validated_data
            )

        email_sent = send_credentials_email(user, password)
        if not email_sent:
            logger.warning("User %s created but the credentials email failed", user.email)

        record_event(
            request,
            event_type='user_created',
            action=f"Created user {user.email} with role {user.role}",
            target=user,
            severity='medium',
            changes={'after': {'role': user.role, 'permissions': user.permissions}},
        )
        return self.success_response(
            CustomUserSerializer(user).data,
            message="User created successfully",
            status_code=status.HTTP_201_CREATED,
            email_sent=email_sent,
        )

    def partial_update(self, request, *args, **kwargs):
        user = self.get_object()
        serializer = self.get_serializer(user, data=request.data, partial=True)
        if not serializer.is_valid():
            return self.handle_validation_error(serializer.errors)

        before = {
            field: getattr(user, field)
            for field in serializer.validated_data
        }
        user = serializer.save()
        changed = [field for field, old in before.items() if getattr(user, field) != old]

        access_changed = bool({'role', 'permissions', 'assigned_regions'} & set(changed))
        record_event(
            request,
            event_type='permission_changed' if access_changed else 'user_updated',
            action=f"Updated user {user.email}",
            target=user,
            severity='high' if access_changed else 'low',
            changes={
                'before': {field: before[field] for field in changed},
                'after': {field: getattr(user, field) for field in changed},
            },
            fields_changed=changed,
        )
        return self.success_response(CustomUserSerializer(user).data, message="User updated successfully")
