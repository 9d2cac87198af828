from django.utils.translation import gettext_lazy as _
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken
from rest_framework_simplejwt.settings import api_settings

from .exceptions import AccountDeactivated, AccountSuspended


class RegistryJWTAuthentication(JWTAuthentication):
    """
    Bearer-token authentication that refuses deactivated and suspended
    accounts with a 403 instead of a generic 401.
    """

    def get_user(self, validated_token):
        try:
            user_id = validated_token[api_settings.USER_ID_CLAIM]
        except KeyError:
            raise InvalidToken(_("Token contained no recognizable user identification"))

        try:
            user = self.user_model.objects.get(**{api_settings.USER_ID_FIELD: user_id})
        except self.user_model.DoesNotExist:
            raise AuthenticationFailed(_("Invalid token. User not found."), code="user_not_found")

        if not user.is_active:
            raise AccountDeactivated(_("Account is deactivated."))
        if user.is_suspended:
            raise AccountSuspended()

        return user
