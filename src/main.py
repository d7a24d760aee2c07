"""Main application entry point for the FastAPI application.

`app` is the ASGI application; `run()` serves it on the configured listen
address and backs the `ledger-web` console script.
"""

import uvicorn

from src.core.application import create_application
from src.core.config.settings import settings
from src.core.initialization import initialize_application

# Initialize the application
initialize_application()

# Create the FastAPI application
app = create_application()


def run() -> None:
    """Serve the application with uvicorn."""
    host, port = settings.listen_address
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    run()
