# dental_core/iam/openapi.py
from django.conf import settings
from drf_spectacular.extensions import OpenApiAuthenticationExtension


class CookieOrHeaderJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "dental_core.iam.auth.CookieOrHeaderJWTAuthentication"
    name = "BearerOrCookieJWT"

    def get_security_definition(self, auto_schema):
        cookie = settings.SIMPLE_JWT.get("AUTH_COOKIE", "nd_access")
        # Swagger's "Authorize" button only speaks Bearer; the cookie is browser-only.
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Access token via `Authorization: Bearer <token>` or the HttpOnly "
                f"`{cookie}` cookie. The token identifies the user; clinic, "
                "roles and capabilities come from the user's profile (see `GET /me/`)."
            ),
        }
