from uvicorn import run

from salesbot.settings import get_settings


def main():
    settings = get_settings()
    run(
        "salesbot.app:app",
        host=settings.SERVER.HOST,
        port=settings.SERVER.PORT,
        workers=settings.SERVER.WORKERS,
        reload=settings.SERVER.RELOAD,
        reload_dirs=["salesbot"],
        reload_excludes=["__pycache__", "*.pyc", "*.pyo", "*.pyd", "*.pyw", "*.pyz"],
        reload_includes=["*.py"],
        # structlog owns the root logger once the app starts
        log_config=None,
    )


if __name__ == "__main__":
    main()
