"""
Secret Configuration Validator

Runs once at startup, before anything else is built. A missing secret is a
hard failure (ConfigurationError, never caught, so the process exits before
binding a listener); a present-but-short secret only produces a warning.
"""

import logging
from datetime import timedelta

from pydantic import ValidationError

from marketplace_auth.domain.errors import ConfigurationError
from marketplace_auth.domain.settings import AuthPolicy, AuthSettings

logger = logging.getLogger(__name__)

MIN_SECRET_BYTES = 32

REQUIRED_SECRETS = {
    "JWT_SECRET": "Secret key for signing access tokens (min 32 characters)",
    "SESSION_TOKEN_SECRET": "Secret key for digesting opaque session tokens (min 32 characters)",
    "ACTION_TOKEN_SECRET": "Secret key for signing password reset / email verification tokens (min 32 characters)",
}

POLICY_KEYS = tuple(name.upper() for name in AuthPolicy.model_fields)


def _read_secret(config, name: str):
    value = getattr(config, name, None)
    if value is None:
        return None
    value = str(value)
    if not value.strip():
        return None
    return value


def validate_secrets(config) -> AuthSettings:
    """
    Validate the secret configuration and build the immutable AuthSettings.

    Args:
        config: ApplicationConfig-like object exposing upper-case attributes

    Returns:
        Frozen AuthSettings consumed by the token codec and session store

    Raises:
        ConfigurationError: one or more required secrets are absent
        ValidationError: a policy value cannot be converted or is out of range
    """
    secrets = {name: _read_secret(config, name) for name in REQUIRED_SECRETS}

    missing = [name for name, value in secrets.items() if value is None]
    if missing:
        error = ConfigurationError(missing, REQUIRED_SECRETS)
        logger.critical(str(error))
        raise error

    for name, value in secrets.items():
        length = len(value.encode())
        if length < MIN_SECRET_BYTES:
            logger.warning(
                f"{name} is too short ({length} bytes). "
                f"Use at least {MIN_SECRET_BYTES} random bytes; 64+ recommended."
            )

    if len(set(secrets.values())) < len(secrets):
        logger.warning(
            "JWT_SECRET, SESSION_TOKEN_SECRET and ACTION_TOKEN_SECRET should be "
            "independent values; at least two of them are identical."
        )

    values = {}
    for name in POLICY_KEYS:
        value = getattr(config, name, None)
        if value is not None:
            values[name.lower()] = value
    try:
        policy = AuthPolicy(**values)
    except ValidationError as exc:
        logger.critical(f"Invalid authentication policy configuration: {exc}")
        raise

    settings = AuthSettings(
        jwt_secret=secrets["JWT_SECRET"],
        session_token_secret=secrets["SESSION_TOKEN_SECRET"],
        action_token_secret=secrets["ACTION_TOKEN_SECRET"],
        access_token_ttl=timedelta(minutes=policy.access_token_ttl_minutes),
        session_ttl=timedelta(days=policy.session_ttl_days),
        password_reset_ttl=timedelta(minutes=policy.password_reset_ttl_minutes),
        bcrypt_rounds=policy.bcrypt_rounds,
        max_active_sessions=policy.max_active_sessions,
        rotate_session_tokens=policy.rotate_session_tokens,
        session_sweep_enabled=policy.session_sweep_enabled,
        session_sweep_interval=timedelta(seconds=policy.session_sweep_interval_seconds),
    )

    logger.info("Secret configuration validated")
    return settings
