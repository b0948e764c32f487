"""FastAPI приложение Family Weight"""
import logging.config
from contextlib import asynccontextmanager

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi

from settings.logs import LogsConfig
from settings.config import AppConfig, STAND
from web.routes.members import router as members_router
from web.routes.records import router as records_router
from web.routes.goals import router as goals_router
from web.routes.stats import router as stats_router
from web.routes.member_settings import router as settings_router
from web.routes.data import router as data_router
from web.middleware import APIKeyMiddleware, PUBLIC_PATHS
from app.utils.error_handler import global_exception_handler, create_error_responses
from app.database import engine
from app.models.base import meta

# Настраиваем логирование
logging.config.dictConfig(LogsConfig.LOGGING)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управление жизненным циклом приложения"""
    # Для локальной SQLite таблицы создаются сразу, для PostgreSQL - через alembic
    if engine.url.get_backend_name() == "sqlite":
        async with engine.begin() as conn:
            await conn.run_sync(meta.create_all)
        logger.info("SQLite schema ensured at %s", engine.url.database)

    logger.info("Family Weight API started (stand=%s)", STAND)
    yield
    await engine.dispose()
    logger.info("Family Weight API stopped")


# Создание FastAPI приложения

sentry_sdk.init(
    dsn=AppConfig.SENTRY_DSN,
    send_default_pii=False,
    environment=STAND
)

app = FastAPI(
    title="Family Weight API",
    description="Family weight tracking: records, trends, goals and calendar",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Добавляем глобальный обработчик исключений
app.add_exception_handler(Exception, global_exception_handler)

# API Key middleware (должен быть первым)
if AppConfig.API_KEY:
    app.add_middleware(APIKeyMiddleware, api_key=AppConfig.API_KEY)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключение роутов
for router, prefix, tag in (
    (members_router, "/members", "members"),
    (records_router, "/records", "records"),
    (goals_router, "/goals", "goals"),
    (stats_router, "/stats", "stats"),
    (settings_router, "/settings", "settings"),
    (data_router, "/data", "data"),
):
    app.include_router(router, prefix=prefix, tags=[tag], responses=create_error_responses())


# Кастомизация OpenAPI схемы для отображения X-API-Key в Swagger UI
def custom_openapi():
    """Добавляет X-API-Key в OpenAPI схему для Swagger UI"""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "X-API-Key": {
            "type": "apiKey",
            "in": "header",
            "name": "X-API-Key",
            "description": "API ключ для доступа к защищенным эндпоинтам"
        }
    }

    for path, path_item in openapi_schema["paths"].items():
        if path in PUBLIC_PATHS:
            continue

        for method in path_item:
            if method in ["get", "post", "put", "patch", "delete"]:
                if "security" not in path_item[method]:
                    path_item[method]["security"] = [{"X-API-Key": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi


@app.get("/", tags=["health"])
async def root():
    return {
        "status": "ok",
        "message": "Family Weight API is running",
        "version": VERSION
    }


@app.get("/health", tags=["health"])
async def health_check():
    return {
        "status": "healthy",
        "service": "family_weight"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "web.main:app",
        host="0.0.0.0",
        port=AppConfig.PORT,
        reload=AppConfig.DEBUG
    )
