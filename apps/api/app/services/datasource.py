from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import status
from pydantic import ValidationError

from app.config import (
    get_canary_key,
    get_presign_expires_sec,
    get_s3_endpoint_url,
    get_s3_region,
    get_sign_workers,
)
from app.exceptions import ConfigurationError, DatasourceDisposedError, HealthCheckError, SigningError
from app.schemas.datasource import (
    CheckHealthResult,
    DataField,
    DataFrame,
    DataQuery,
    DataResponse,
    DataSourceInstanceSettings,
    DatasourceJsonData,
    HealthStatus,
    ImageKeysQuery,
    QueryDataRequest,
    QueryDataResponse,
    SecureJsonData,
    error_response,
)
from app.services.s3_storage import create_s3_client, generate_presigned_get_url

logger = logging.getLogger(__name__)

URL_FIELD_NAME = "URL"
RESPONSE_FRAME_NAME = "response"
_WHITESPACE_RE = re.compile(r"\s+")


def split_image_keys(image_keys: str | None) -> list[str]:
    """Split a comma-separated key list, ignoring all whitespace.

    Empty segments are discarded, so "" and "a,,b" never yield a blank key.
    """
    if image_keys is None:
        return []
    compact = _WHITESPACE_RE.sub("", image_keys)
    return [key for key in compact.split(",") if key]


class Datasource:
    """Mints presigned GET URLs for object keys in one bucket."""

    def __init__(
        self,
        *,
        bucket: str,
        client: BaseClient,
        expires_in: int = 900,
        canary_key: str = "some/important/object",
        max_workers: int = 1,
        credentials_empty: bool = False,
    ) -> None:
        self.bucket = bucket
        self.expires_in = expires_in
        self.canary_key = canary_key
        self.max_workers = max(1, max_workers)
        self.credentials_empty = credentials_empty
        self._client: BaseClient | None = client

    @property
    def disposed(self) -> bool:
        return self._client is None

    def dispose(self) -> None:
        """Refuse new work. Calls already holding the client run to completion."""
        if self._client is None:
            return
        close = getattr(self._client, "close", None)
        if callable(close):
            close()
        self._client = None
        logger.debug("Datasource for bucket %s disposed", self.bucket)

    def query_data(self, request: QueryDataRequest) -> QueryDataResponse:
        logger.debug("QueryData called with %d queries", len(request.queries))
        client = self._require_client()
        response = QueryDataResponse()
        for query in request.queries:
            response.responses[query.ref_id] = self._query(client, query)
        return response

    def check_health(self) -> CheckHealthResult:
        logger.debug("CheckHealth called")
        try:
            url = self.presign(self.canary_key)
        except SigningError as exc:
            raise HealthCheckError(
                CheckHealthResult(status=HealthStatus.ERROR, message=exc.message or str(exc))
            ) from exc
        return CheckHealthResult(
            status=HealthStatus.OK,
            message=f"ready to generate urls like: {url}",
        )

    def presign(self, key: str, *, client: BaseClient | None = None) -> str:
        if client is None:
            client = self._require_client()
        # Blank static credentials fail every presign.
        if self.credentials_empty:
            raise SigningError(key, "static credentials are empty")
        try:
            return generate_presigned_get_url(
                client=client,
                bucket=self.bucket,
                key=key,
                expires_in=self.expires_in,
            )
        except (BotoCoreError, ClientError) as exc:
            raise SigningError(key, str(exc)) from exc

    def _query(self, client: BaseClient, query: DataQuery) -> DataResponse:
        try:
            model = ImageKeysQuery.model_validate_json(query.payload)
        except ValidationError as exc:
            return error_response(status.HTTP_400_BAD_REQUEST, f"json unmarshal: {exc}")

        if model.image_keys is None:
            logger.debug("Query %s has no image_keys", query.ref_id)
        keys = split_image_keys(model.image_keys)
        logger.debug("Query %s split into %d keys", query.ref_id, len(keys))

        frame = DataFrame(
            name=RESPONSE_FRAME_NAME,
            fields=[DataField(name=URL_FIELD_NAME, values=self._sign_keys(client, keys))],
        )
        return DataResponse(frames=[frame])

    def _sign_keys(self, client: BaseClient, keys: Sequence[str]) -> list[str]:
        def _try_presign(key: str) -> str | None:
            try:
                return self.presign(key, client=client)
            except SigningError as exc:
                # Failed keys are dropped from the URL column; the query still succeeds.
                logger.error("Error signing request for key %s: %s", exc.key, exc.message)
                return None

        if self.max_workers > 1 and len(keys) > 1:
            with ThreadPoolExecutor(max_workers=min(len(keys), self.max_workers)) as executor:
                results = list(executor.map(_try_presign, keys))
        else:
            results = [_try_presign(key) for key in keys]
        return [url for url in results if url is not None]

    def _require_client(self) -> BaseClient:
        if self._client is None:
            raise DatasourceDisposedError(f"datasource for bucket {self.bucket!r} has been disposed")
        return self._client


def parse_instance_settings(settings: DataSourceInstanceSettings) -> tuple[DatasourceJsonData, SecureJsonData]:
    raw = settings.json_data
    if isinstance(raw, str):
        try:
            raw = json.loads(raw) if raw.strip() else {}
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"invalid datasource json data: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError("datasource json data must be a JSON object")

    try:
        json_data = DatasourceJsonData.model_validate(raw)
        secure = SecureJsonData.model_validate(settings.decrypted_secure_json_data)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid datasource settings: {exc}") from exc
    return json_data, secure


def new_datasource(
    settings: DataSourceInstanceSettings,
    *,
    region: str | None = None,
    endpoint_url: str | None = None,
    expires_in: int | None = None,
    canary_key: str | None = None,
    max_workers: int | None = None,
    client_factory: Callable[..., BaseClient] = create_s3_client,
) -> Datasource:
    """Build a Datasource from host settings.

    Unset keyword arguments fall back to the environment configuration.
    """
    json_data, secure = parse_instance_settings(settings)
    logger.debug("Creating datasource %s for bucket %s", settings.uid, json_data.bucket)

    client = client_factory(
        access_key_id=secure.aws_access_key_id,
        secret_access_key=secure.aws_secret_access_key,
        region=region or get_s3_region(),
        endpoint_url=endpoint_url if endpoint_url is not None else get_s3_endpoint_url(),
    )
    return Datasource(
        bucket=json_data.bucket,
        client=client,
        expires_in=expires_in if expires_in is not None else get_presign_expires_sec(),
        canary_key=canary_key or get_canary_key(),
        max_workers=max_workers if max_workers is not None else get_sign_workers(),
        credentials_empty=not (secure.aws_access_key_id and secure.aws_secret_access_key),
    )
