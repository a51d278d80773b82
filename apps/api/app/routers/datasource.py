from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import JSONResponse

from app.exceptions import ConfigurationError, HealthCheckError
from app.schemas.datasource import (
    CheckHealthResult,
    DataSourceInstanceSettings,
    DatasourceSettingsResponse,
    QueryDataRequest,
    QueryDataResponse,
)
from app.services.datasource import Datasource
from app.services.instance_manager import InstanceManager

router = APIRouter(prefix="/datasource", tags=["datasource"])


def _get_manager(request: Request) -> InstanceManager:
    manager: InstanceManager | None = getattr(request.app.state, "instance_manager", None)
    if manager is None:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="instance manager not initialized")
    return manager


def _get_datasource(request: Request) -> Datasource:
    try:
        return _get_manager(request).get()
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc


@router.post("/query", response_model=QueryDataResponse)
def query_data(payload: QueryDataRequest, request: Request) -> QueryDataResponse:
    return _get_datasource(request).query_data(payload)


@router.get("/health", response_model=CheckHealthResult)
def check_health(request: Request):
    datasource = _get_datasource(request)
    try:
        return datasource.check_health()
    except HealthCheckError as exc:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=exc.result.model_dump(mode="json"),
        )


@router.put("/settings", response_model=DatasourceSettingsResponse)
def update_settings(payload: DataSourceInstanceSettings, request: Request) -> DatasourceSettingsResponse:
    try:
        datasource = _get_manager(request).update(payload)
    except ConfigurationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return DatasourceSettingsResponse(uid=payload.uid, updated=payload.updated, bucket=datasource.bucket)
