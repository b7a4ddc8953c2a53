"""FastAPI application entrypoint for codeindex service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..config import HASH_ALGORITHMS, OUTPUT_FORMATS, ConfigError, IndexConfig, load_config
from ..logging import get_logger
from ..manager import IndexManager, NoAdaptersDetectedError
from ..models import IndexResult

logger = get_logger("service")

ManagerFactory = Callable[[IndexConfig], IndexManager]


class IndexRequest(BaseModel):
    path: str
    format: Optional[str] = None
    hash_algorithm: Optional[str] = None
    max_candidates: Optional[int] = Field(default=None, gt=0)
    languages: List[str] = Field(default_factory=list)


class IndexResponse(BaseModel):
    content: str
    content_hash: str
    format: str
    repo_name: str
    languages: List[str]
    file_count: int
    total_files: int
    duration: float


class HealthResponse(BaseModel):
    status: str


def _default_manager(config: IndexConfig) -> IndexManager:
    return IndexManager(config)


def create_app(manager_factory: ManagerFactory = _default_manager) -> FastAPI:
    """Create the FastAPI application exposing index generation."""

    app = FastAPI(title="CodeIndex Service", version="1.0.0")

    async def get_manager_factory() -> ManagerFactory:
        return manager_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/index", response_model=IndexResponse)
    async def index_repo(
        payload: IndexRequest,
        factory: ManagerFactory = Depends(get_manager_factory),
    ) -> IndexResponse:
        config = _request_config(payload)

        def _generate() -> IndexResult:
            return factory(config).generate()

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:  # pragma: no cover - fallback path when not in async context
            result = _generate()
        else:
            result = await loop.run_in_executor(None, _generate)

        return IndexResponse(
            content=result.content,
            content_hash=result.content_hash,
            format=result.format,
            repo_name=result.repo_name,
            languages=result.languages,
            file_count=result.file_count,
            total_files=result.total_files,
            duration=result.duration,
        )

    @app.exception_handler(NoAdaptersDetectedError)
    async def no_adapters_handler(_: Any, exc: NoAdaptersDetectedError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def _request_config(payload: IndexRequest) -> IndexConfig:
    root = Path(payload.path).expanduser()
    if not root.exists():
        raise FileNotFoundError(f"Repository path not found: {payload.path}")
    if not root.is_dir():
        raise NotADirectoryError(f"Repository path is not a directory: {payload.path}")
    config = load_config(root)
    if payload.format is not None:
        if payload.format not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format '{payload.format}'")
        config.output_format = payload.format
    if payload.hash_algorithm is not None:
        if payload.hash_algorithm not in HASH_ALGORITHMS:
            raise ValueError(f"Unknown hash algorithm '{payload.hash_algorithm}'")
        config.hash_algorithm = payload.hash_algorithm
    if payload.max_candidates is not None:
        config.max_candidates = payload.max_candidates
    if payload.languages:
        config.languages = [name.lower() for name in payload.languages]
    return config


def run_service(host: str = "0.0.0.0", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    logger.info("Starting codeindex service on %s:%d", host, port)
    uvicorn.run(create_app(), host=host, port=port)


__all__ = ["IndexRequest", "IndexResponse", "create_app", "run_service"]
