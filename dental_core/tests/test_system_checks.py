# dental_core/tests/test_system_checks.py
from django.core.management import call_command
from rest_framework.settings import api_settings

from dental_core.iam.auth import CookieOrHeaderJWTAuthentication


def test_system_checks_pass():
    call_command("check")


def test_default_authentication_class_resolves():
    assert CookieOrHeaderJWTAuthentication in api_settings.DEFAULT_AUTHENTICATION_CLASSES
