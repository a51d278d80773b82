import os
from pathlib import Path

from dotenv import load_dotenv


_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(_ENV_PATH, override=False)

DEFAULT_CANARY_KEY = "some/important/object"


def _get_env(name: str) -> str | None:
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _get_int_env(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_log_level() -> str:
    return _get_env("LOG_LEVEL") or "INFO"


def get_datasource_uid() -> str:
    return _get_env("DATASOURCE_UID") or "default"


def get_datasource_bucket() -> str | None:
    return _get_env("DATASOURCE_BUCKET")


def get_aws_access_key_id() -> str:
    # Blank credentials are allowed; signing reports the problem later.
    return _get_env("AWS_ACCESS_KEY_ID") or ""


def get_aws_secret_access_key() -> str:
    return _get_env("AWS_SECRET_ACCESS_KEY") or ""


def get_s3_region() -> str:
    return _get_env("S3_REGION") or "us-east-1"


def get_s3_endpoint_url() -> str | None:
    return _get_env("S3_ENDPOINT_URL")


def get_presign_expires_sec() -> int:
    """Lifetime of each signed URL, clamped to the S3 SigV4 limit of 7 days."""
    return min(max(_get_int_env("S3_PRESIGN_EXPIRES_SEC", 900), 1), 604800)


def get_canary_key() -> str:
    return _get_env("DATASOURCE_CANARY_KEY") or DEFAULT_CANARY_KEY


def get_sign_workers() -> int:
    return max(_get_int_env("DATASOURCE_SIGN_WORKERS", 1), 1)
