"""
__main__.py
-----------
Entry point for the backend: ``python -m birddash.server`` or the
``birddash-server`` console script.
"""

import uvicorn

from birddash.core.debug.debug_logger import DebugLogger
from birddash.server.app import create_app
from birddash.server.config import get_settings


def main():
    settings = get_settings()
    app = create_app(settings)
    DebugLogger.system(f"Listening on 0.0.0.0:{settings.port} ({settings.environment})", category="server")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
