"""
SEO Engine Backend: Server Entry Point
=========================================

What:  Starts uvicorn on the configured host and port.
Why:   The container runs one process with no config files; PORT in the
       environment is the only thing that decides where it listens.
How:   serve() reloads Settings from the environment, builds the app (which
       validates the documentation manifest), and hands it to uvicorn.
Who:   The `seo-engine` console script, `python -m seo_engine`, the Dockerfile.

Exit codes (main):
    0  clean shutdown
    1  invalid configuration or invalid documentation manifest
"""

import logging
import sys

import uvicorn
from pydantic import ValidationError

logger = logging.getLogger(__name__)


def serve(config=None) -> None:
    """
    Run the HTTP server until it is stopped.

    Args:
        config: Settings instance. When omitted, settings are read fresh from
                the environment so a restart with a different PORT binds there.

    Raises:
        pydantic.ValidationError: the environment holds an invalid setting.
        ManifestError: the documentation manifest is inconsistent.
    """
    # Imported here: the settings singleton validates the environment on import
    from seo_engine.config import Settings
    from seo_engine.main import create_app, log_endpoints, setup_logging

    config = config or Settings()
    setup_logging(config.log_level)

    app = create_app(config)
    log_endpoints(config)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )


def main() -> int:
    """Console script entry point; returns the process exit code."""
    from seo_engine.exceptions import ManifestError

    try:
        serve()
    except ValidationError as e:
        logging.basicConfig(level=logging.INFO)
        for error in e.errors():
            field = ".".join(str(part) for part in error.get("loc", ())).upper()
            logger.error("Invalid configuration: %s: %s", field or "settings", error.get("msg"))
        logger.error("Fix the configuration and restart the server.")
        return 1
    except ManifestError as e:
        logger.error("Refusing to start: %s", e.message)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
