"""
main.py

Development server for slashbin, the anonymous ephemeral file sharing
service.

Notes:
  - Uploads: POST /upload (raw body or multipart 'file' field)
  - Downloads: GET /<identifier>
  - API v1 endpoints available at /api/v1/ with Swagger docs at /api/v1/docs
  - Configuration comes from the environment, see slashbin.config.AppConfig
"""

import logging
import sys

from slashbin.app_factory import create_app
from slashbin.config import AppConfig

config = AppConfig()
app = create_app(config)

if __name__ == "__main__":
    try:
        app.run(host=config.host, port=config.port, debug=config.debug, use_reloader=False)
    except OSError as e:
        logging.getLogger(__name__).critical(
            f"Could not listen on {config.host}:{config.port}: {e}"
        )
        sys.exit(1)
