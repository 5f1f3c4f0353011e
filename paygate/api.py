from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from pyinstrument import Profiler
from starlette.exceptions import HTTPException

from paygate.config.settings import Settings
from paygate.domain.models import (
    BankAccountsResponse,
    ErrorResponse,
    HealthStatus,
    PaymentDetails,
    PaymentMethod,
    PaymentRequest,
    PaymentResponse,
)
from paygate.domain.services import PaymentProcessingError, PaymentService

logger = logging.getLogger(__name__)

APP_NAME = "Paygate Fintech Gateway"
APP_VERSION = "1.0.0"

PROFILE_FLAGS = {"1", "true", "yes"}


def error_response(status_code: int, message: str, detail=None) -> JSONResponse:
    body = ErrorResponse(message=message, detail=detail).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


def describe_validation_errors(errors) -> str:
    fields = []
    for error in errors:
        if error.get("type") == "json_invalid":
            return "Malformed JSON body"
        # loc is ("body", field, ...) for request bodies
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        if loc:
            name = ".".join(loc)
            if name not in fields:
                fields.append(name)
    if not fields:
        return "Invalid request body"
    return f"Missing or invalid fields: {', '.join(fields)}"


def add_cors(app: FastAPI, origins) -> None:
    if not origins:
        # Cross-origin requests stay disabled unless origins are configured
        return
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(payment_service: PaymentService, settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        methods = ", ".join(m.value for m in payment_service.adapters)
        logger.info(f"{APP_NAME} started with payment methods: {methods}")
        yield
        logger.info(f"{APP_NAME} stopped")

    app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)

    # Global exception handlers
    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error in {request.method} {request.url.path}: {str(exc)}")
        return error_response(500, "Internal server error")

    @app.exception_handler(PaymentProcessingError)
    async def payment_exception_handler(request: Request, exc: PaymentProcessingError):
        logger.error(f"Payment error in {request.method} {request.url.path}: {str(exc)}")
        return error_response(500, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error in {request.method} {request.url.path}: {exc.errors()}")
        return error_response(400, describe_validation_errors(exc.errors()), detail=exc.errors())

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        logger.warning(f"HTTP error in {request.method} {request.url.path}: {exc.detail}")
        return error_response(exc.status_code, str(exc.detail))

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        log = logger.warning if response.status_code >= 400 else logger.info
        log(f"{request.method} {request.url.path} {response.status_code} - {duration_ms:.0f}ms")
        return response

    @app.middleware("http")
    async def profile_request(request: Request, call_next):
        profiling = request.query_params.get("profile", "").lower() in PROFILE_FLAGS
        if profiling:
            profiler = Profiler(interval=0.0001)
            profiler.start()
            await call_next(request)
            profiler.stop()
            return HTMLResponse(profiler.output_html())
        else:
            return await call_next(request)

    @app.post(
        "/api/payments/process",
        response_model=PaymentResponse,
        response_model_exclude_none=True,
    )
    async def process_payment(payment_request: PaymentRequest):
        return await payment_service.process_payment(payment_request)

    def provider_route(method: PaymentMethod):
        async def process_provider_payment(details: PaymentDetails):
            return await payment_service.process_with(method, details)

        process_provider_payment.__name__ = f"process_{method.value}_payment"
        return process_provider_payment

    for method in PaymentMethod:
        app.post(
            f"/api/payments/{method.value}",
            response_model=PaymentResponse,
            response_model_exclude_none=True,
        )(provider_route(method))

    @app.get("/api/payments/plaid/accounts/{userId}", response_model=BankAccountsResponse)
    async def plaid_accounts(userId: str):
        accounts = await payment_service.get_bank_accounts(userId)
        return BankAccountsResponse(accounts=accounts)

    @app.get("/health", response_model=HealthStatus)
    async def health_check():
        """Simple health check endpoint for load balancer."""
        return HealthStatus(
            status="OK",
            timestamp=datetime.now(timezone.utc),
            services={"payments": "available"},
        )

    @app.get("/")
    async def root():
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "description": "Payment gateway proxying card, wallet and ACH processors",
            "endpoints": [
                "/api/payments/process",
                *[f"/api/payments/{m.value}" for m in PaymentMethod],
                "/api/payments/plaid/accounts/{userId}",
                "/health",
            ],
        }

    add_cors(app, settings.cors_origins)

    return app
