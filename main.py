from paygate.config.logging import setup_logging
from paygate.config.settings import Settings
from paygate.api import create_app
from paygate.factories import create_payment_service

# Setup logging first
setup_logging()

settings = Settings()

# Create the payment service with its provider adapters
payment_service = create_payment_service(settings)

# Create the FastAPI app with all components
app = create_app(payment_service, settings)


def main():
    import uvicorn
    from paygate.config.logging import get_uvicorn_log_level

    # Get log level for uvicorn
    log_level = get_uvicorn_log_level()

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=log_level
    )


if __name__ == "__main__":
    main()
