"""
Blog service entry point

Run with:
    uvicorn app.main:app --host 0.0.0.0 --port 8000
or:
    python -m app.main
"""
import logging
import os

import uvicorn

from apps.blog.main import create_app
from apps.shared.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app(settings=settings)


def main() -> None:
    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
