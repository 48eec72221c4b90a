from __future__ import annotations

import uvicorn

from swingdesk.api.app import create_api_app
from swingdesk.core.logging import setup_logging


setup_logging()

app = create_api_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
