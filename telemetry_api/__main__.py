import logging

import uvicorn

from .main import create_app
from .settings import Settings


def main():
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())
    logger = logging.getLogger("telemetry_api")

    app = create_app(settings)
    logger.info(f"Servidor corriendo en http://localhost:{settings.port}")
    logger.info(f"POST → http://localhost:{settings.port}/api/telemetry")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
