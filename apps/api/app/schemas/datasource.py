from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class DataSourceInstanceSettings(BaseModel):
    uid: str = Field(default="default", min_length=1)
    updated: int = 0
    json_data: dict[str, Any] | str = Field(default_factory=dict)
    decrypted_secure_json_data: dict[str, str] = Field(default_factory=dict)


class DatasourceJsonData(BaseModel):
    bucket: str

    @field_validator("bucket")
    @classmethod
    def validate_bucket(cls, value: str) -> str:
        candidate = value.strip()
        if not candidate:
            raise ValueError("bucket must not be empty")
        return candidate


class SecureJsonData(BaseModel):
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""


class ImageKeysQuery(BaseModel):
    # Hosts send extra fields (refId, datasource, intervalMs, ...); they are ignored.
    image_keys: str | None = None


class DataQuery(BaseModel):
    ref_id: str = Field(min_length=1)
    payload: str


class QueryDataRequest(BaseModel):
    queries: list[DataQuery] = Field(default_factory=list)


class DataField(BaseModel):
    name: str
    values: list[str]


class DataFrame(BaseModel):
    name: str
    fields: list[DataField]


class DataResponse(BaseModel):
    frames: list[DataFrame] = Field(default_factory=list)
    error: str | None = None
    status: int = 200


class QueryDataResponse(BaseModel):
    responses: dict[str, DataResponse] = Field(default_factory=dict)


class HealthStatus(str, Enum):
    OK = "ok"
    ERROR = "error"


class CheckHealthResult(BaseModel):
    status: HealthStatus
    message: str


class DatasourceSettingsResponse(BaseModel):
    uid: str
    updated: int
    bucket: str


def error_response(status: int, message: str) -> DataResponse:
    return DataResponse(error=message, status=status)
