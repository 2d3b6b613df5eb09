"""FastAPI application for the firmware installer service."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
import uvicorn

from fwinstaller.api.routes import router
from fwinstaller.config import InstallerConfig, load_config
from fwinstaller.services.controller import InstallController
from fwinstaller.services.extractor import Extractor
from fwinstaller.utils.logging import configure_logging


def create_app(
    config: Optional[InstallerConfig] = None,
    extractor: Optional[Extractor] = None,
) -> FastAPI:
    """Build the application.

    Args:
        config: Installer configuration (read from environment if None)
        extractor: Package extractor (ZIP extractor if None)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: logger, root directory, leftover staging data, controller.

        Shutdown: wait briefly for a running install worker.
        """
        cfg = config or load_config()
        logger = configure_logging(cfg)
        logger.info("Firmware installer starting up...")

        cfg.root.mkdir(parents=True, exist_ok=True)
        controller = InstallController(cfg, extractor=extractor)

        # A previous process may have died mid-install
        if cfg.staging_dir.exists():
            logger.warning(f"Removing leftover staging directory {cfg.staging_dir}")
            controller.finalizer.cleanup_staging()

        app.state.controller = controller
        logger.info(f"Firmware installer ready, root={cfg.root}")

        yield

        logger.info("Firmware installer shutting down...")
        controller.shutdown()

    app = FastAPI(
        title="Firmware Installer",
        description="Installs firmware packages and reports progress to observers",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(router)

    @app.get("/")
    def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "fwinstaller", "version": "1.0.0"}

    return app


def main():
    """Main entry point for running the server."""
    config = load_config()
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
