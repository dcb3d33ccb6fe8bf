"""
Main entry point for the SakuraDevClass backend

Exposes the FastAPI app for uvicorn and runs it when executed directly.

@.architecture
Incoming: none --- {entry point for uvicorn server}
Processing: create_app() import, uvicorn.run() --- {2 jobs: config_loading, server_startup}
Outgoing: uvicorn server, Network (HTTP) --- {FastAPI application instance, HTTP server}
"""

from app import create_app
from config.settings import get_settings

app = create_app()

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "main:app",
        host=settings.security.bind_host,
        port=settings.security.bind_port,
        reload=settings.is_development,
        log_level=(settings.monitoring.log_level or "info").lower(),
    )
