# dental_core/iam/auth.py

from __future__ import annotations

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication


def access_cookie_name() -> str:
    return settings.SIMPLE_JWT.get("AUTH_COOKIE", "nd_access")


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    Access token from `Authorization: Bearer <access>`, else from the HttpOnly
    access cookie. A header that is present always wins, even if it is malformed.

    Invalid/expired tokens raise InvalidToken (401). Once the user is known the
    Principal is resolved and attached, so permissions never re-query the profile.
    """

    def _raw_token(self, request):
        header = self.get_header(request)
        if header is not None:
            return self.get_raw_token(header)
        return request.COOKIES.get(access_cookie_name()) or None

    def authenticate(self, request):
        # principal imports models; this class is loaded by DRF before the app registry is ready
        from dental_core.iam.principal import resolve_principal

        raw_token = self._raw_token(request)
        if raw_token is None:
            return None

        validated_token = self.get_validated_token(raw_token)
        user = self.get_user(validated_token)

        request.principal = resolve_principal(user)
        return user, validated_token
