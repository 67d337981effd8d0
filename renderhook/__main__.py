"""Run the notifier with uvicorn."""

from __future__ import annotations

import uvicorn

from renderhook.config import settings


def main() -> None:
    uvicorn.run(
        "renderhook.app:app",
        host=settings.host,
        port=settings.port,
        proxy_headers=True,
        forwarded_allow_ips="*",
        log_config=None,
    )


if __name__ == "__main__":
    main()
