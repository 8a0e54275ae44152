import uvicorn

from upload_gateway.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "upload_gateway.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
