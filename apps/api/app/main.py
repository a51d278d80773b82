import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.config import (
    get_aws_access_key_id,
    get_aws_secret_access_key,
    get_datasource_bucket,
    get_datasource_uid,
    get_log_level,
)
from app.logging_setup import setup_logging
from app.routers import datasource_router
from app.schemas.datasource import DataSourceInstanceSettings
from app.services.instance_manager import InstanceManager

logger = logging.getLogger(__name__)


def build_settings_from_env() -> DataSourceInstanceSettings | None:
    bucket = get_datasource_bucket()
    if bucket is None:
        return None
    return DataSourceInstanceSettings(
        uid=get_datasource_uid(),
        json_data={"bucket": bucket},
        decrypted_secure_json_data={
            "aws_access_key_id": get_aws_access_key_id(),
            "aws_secret_access_key": get_aws_secret_access_key(),
        },
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(get_log_level())
    manager = InstanceManager()
    settings = build_settings_from_env()
    if settings is not None:
        manager.update(settings)
    else:
        logger.info("DATASOURCE_BUCKET is not set; waiting for settings via PUT /datasource/settings")
    app.state.instance_manager = manager
    try:
        yield
    finally:
        manager.dispose()


app = FastAPI(
    title="Image URL Datasource API",
    description="Object keys → presigned S3 GET URLs for dashboard panels",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(datasource_router)


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "image-url-datasource"}
