import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()

# Environment variables win over env.yaml
data.update({key: value for key, value in os.environ.items() if key.isupper()})


def _bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _list(value) -> list:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return list(value or [])


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./test.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = int(data.get("API_PORT", 8000))
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = _list(data.get("CORS_ORIGINS", []))
    CORS_ALLOW_CREDENTIALS = _bool(data.get("CORS_ALLOW_CREDENTIALS", True))
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")

    # Secrets have no defaults; startup fails when any is missing
    JWT_SECRET = data.get("JWT_SECRET")
    SESSION_TOKEN_SECRET = data.get("SESSION_TOKEN_SECRET")
    ACTION_TOKEN_SECRET = data.get("ACTION_TOKEN_SECRET")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY")

    # Policy values are converted and range-checked by AuthPolicy; None
    # keeps its default
    ACCESS_TOKEN_TTL_MINUTES = data.get("ACCESS_TOKEN_TTL_MINUTES")
    SESSION_TTL_DAYS = data.get("SESSION_TTL_DAYS")
    PASSWORD_RESET_TTL_MINUTES = data.get("PASSWORD_RESET_TTL_MINUTES")
    BCRYPT_ROUNDS = data.get("BCRYPT_ROUNDS")
    MAX_ACTIVE_SESSIONS = data.get("MAX_ACTIVE_SESSIONS")
    ROTATE_SESSION_TOKENS = data.get("ROTATE_SESSION_TOKENS")
    SESSION_SWEEP_ENABLED = data.get("SESSION_SWEEP_ENABLED")
    SESSION_SWEEP_INTERVAL_SECONDS = data.get("SESSION_SWEEP_INTERVAL_SECONDS")

    CREATE_TABLES_ON_STARTUP = _bool(data.get("CREATE_TABLES_ON_STARTUP", False))
