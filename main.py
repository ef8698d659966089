#!/usr/bin/env python3
"""Main entrypoint for the Levantapedidos backend.

Configures JSON logging and serves levantapedidos.web.main:app with uvicorn.
"""

if __name__ == "__main__":
    import uvicorn

    from levantapedidos.core.config import get_settings
    from levantapedidos.core.logging import get_logger, setup_logging

    settings = get_settings()
    setup_logging(level=settings.log_level, file_path=settings.log_file)

    get_logger("levantapedidos").info(
        "server_starting",
        extra={"host": settings.host, "port": settings.port, "env": settings.app_env},
    )
    uvicorn.run(
        "levantapedidos.web.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )
