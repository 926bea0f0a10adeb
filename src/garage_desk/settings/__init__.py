import os


def get_settings_module() -> str:
    # APP_ENV picks the settings module, development by default
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "garage_desk.settings.production"

    if env in {"test", "testing"}:
        return "garage_desk.settings.testing"

    return "garage_desk.settings.development"
