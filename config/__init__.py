import os
from typing import Optional

_ENVIRONMENTS = {
    "dev": "config.development",
    "development": "config.development",
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module(env: Optional[str] = None) -> str:
    """Dotted path of the settings module for this gateway.

    LAB_PRESENCE_SETTINGS names a module directly (e.g. a site-specific
    deployment file); otherwise APP_ENV picks one of the bundled modules.
    An unknown APP_ENV raises ValueError instead of falling back.
    """
    override = os.getenv("LAB_PRESENCE_SETTINGS", "").strip()
    if override:
        return override

    key = (env if env is not None else os.getenv("APP_ENV", "development")).strip().lower()
    try:
        return _ENVIRONMENTS[key]
    except KeyError:
        raise ValueError(
            f"Unknown APP_ENV {key!r}; expected one of {', '.join(sorted(_ENVIRONMENTS))}"
        ) from None
