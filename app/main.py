import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.errors import api_error_handler, http_error_handler, unhandled_error_handler
from app.api.routes import healthcheck, movies
from app.config import Settings, load_settings
from app.core.exceptions import APIError
from app.core.movie_store import MovieStore


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
        store = MovieStore(settings.db_dsn, timeout=settings.db_timeout)
        store.init_schema()
        app.state.movie_store = store
        logging.info("starting server env=%s db=%s", settings.env, settings.db_dsn)
        yield

    app = FastAPI(
        title="Greenlight",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.include_router(healthcheck.router, prefix="/v1", tags=["healthcheck"])
    app.include_router(movies.router, prefix="/v1/movies", tags=["movies"])

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    return app


app = create_app()
