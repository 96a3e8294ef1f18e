"""Run the LockerRoom server with uvicorn: ``python -m lockerroom.server``."""

import uvicorn

from lockerroom.server.core.config import settings


def main() -> None:
    uvicorn.run(
        "lockerroom.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
