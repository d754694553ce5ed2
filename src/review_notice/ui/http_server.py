"""
HTTP server for the Review Notice API.
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import uvicorn
from fastapi import FastAPI

from .. import __version__
from ..core.config import AppConfig, get_config
from ..notices.engine import NoticeEngine
from ..notices.registry import NoticeRegistry
from ..storage.base import CapabilityChecker
from ..storage.memory import MemorySiteOptions, MemoryUserMeta, StaticCapabilities
from ..storage.sqlite import SqliteSiteOptions, SqliteUserMeta
from .notice_api import router as notice_router

logger = logging.getLogger(__name__)


def build_services(
    config: AppConfig,
    capabilities: Optional[CapabilityChecker] = None,
) -> Tuple[NoticeRegistry, NoticeEngine]:
    """
    Build the registry and engine from configuration.

    Args:
        config: Application configuration
        capabilities: Capability checker; defaults to the roles and viewers
            in the capabilities file, or in the notices file when no
            capabilities file is configured

    Returns:
        (registry, engine)
    """
    registry = NoticeRegistry(
        defaults={
            "days": config.notices.days,
            "cap": config.notices.cap,
            "domain": config.notices.domain,
        }
    )

    if config.server.notices_file:
        registry.load_from_file(Path(config.server.notices_file))

    if config.storage.backend == "sqlite":
        options = SqliteSiteOptions(config.storage.db_path)
        meta = SqliteUserMeta(config.storage.db_path)
    else:
        options = MemorySiteOptions()
        meta = MemoryUserMeta()

    if capabilities is None:
        capabilities = _load_capabilities(config)

    engine = NoticeEngine(options, meta, capabilities)
    logger.info(
        f"Built notice services ({len(registry)} notices, "
        f"storage: {config.storage.backend})"
    )
    return registry, engine


def _load_capabilities(config: AppConfig) -> StaticCapabilities:
    capabilities_file = config.server.capabilities_file or config.server.notices_file
    if not capabilities_file:
        logger.warning("No capabilities configured, no viewer will see notices")
        return StaticCapabilities()

    return StaticCapabilities.load_from_file(Path(capabilities_file))


def create_app(registry: NoticeRegistry, engine: NoticeEngine) -> FastAPI:
    """Create the FastAPI app serving the given registry and engine."""
    app = FastAPI(
        title="Review Notice API",
        description="Deferred review notice evaluation and responses",
        version=__version__,
    )
    app.state.registry = registry
    app.state.engine = engine

    app.include_router(notice_router)

    @app.get("/")
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "Review Notice API",
            "version": __version__,
            "endpoints": {
                "notices": "/notices",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "notices": len(app.state.registry)}

    return app


def run_server(config: Optional[AppConfig] = None) -> None:
    """Run the API server with uvicorn."""
    config = config or get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    registry, engine = build_services(config)
    app = create_app(registry, engine)

    logger.info(f"Starting Review Notice API on {config.server.host}:{config.server.port}")
    uvicorn.run(app, host=config.server.host, port=config.server.port)


if __name__ == "__main__":
    run_server()
