import os

# DJANGO_ENV picks the settings module when DJANGO_SETTINGS_MODULE=config.settings
env = os.getenv("DJANGO_ENV", "local").lower()

if env == "prod":
    from .prod import *  # noqa
elif env == "test":
    from .test import *  # noqa
else:
    from .local import *  # noqa
