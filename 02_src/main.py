"""Main entry point for the Mesh HUD dashboard backend."""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from meshhud.api import create_fastapi_app
from meshhud.app import Application
from meshhud.config import Settings
from meshhud.logging_config import setup_logging


def main():
    """Run the dashboard backend."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    setup_logging()

    api_host = os.getenv("API_HOST", "localhost")
    api_port = int(os.getenv("API_PORT", "8000"))

    application = Application(settings=Settings.from_env())
    app = create_fastapi_app(application)

    uvicorn.run(
        app,
        host=api_host,
        port=api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
