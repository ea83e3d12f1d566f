# server.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from kafka_admin.api.dependencies import get_kafka_service
from kafka_admin.api.routers import api_router
from kafka_admin.core.errors import install_exception_handlers

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(_: FastAPI):
    yield
    # only close the shared cluster client if some request opened it
    if get_kafka_service.cache_info().currsize:
        get_kafka_service().close()


app = FastAPI(
    title="Kafka Admin",
    description="Topic, partition, config and ACL administration for Kafka clusters",
    version="1.0.0",
    lifespan=lifespan,
    openapi_url=f"{API_PREFIX}/openapi.json",
    docs_url=f"{API_PREFIX}/docs",
    redoc_url=None,
)
install_exception_handlers(app)
app.include_router(api_router, prefix=API_PREFIX)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
