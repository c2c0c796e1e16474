from fastapi import APIRouter, Depends, FastAPI, Form, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
import logging
import os
import structlog
import sys
import time
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional
from zoneinfo import ZoneInfo

from config import Settings, get_settings
from errors import BankError
from models import AccountType, HealthResponse, money
from pages import HOME_PAGE
from repositories import AccountRepository, InMemoryAccountRepository
from services import BankService

settings = get_settings()

# Configure structured logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Largest magnitude a form amount may carry, the float64 range
MAX_AMOUNT = Decimal(sys.float_info.max)

router = APIRouter()


def parse_amount(raw: str) -> Decimal:
    """Parse a form amount; anything that is not a plain finite float64 number reads as zero."""
    if raw != raw.strip() or "_" in raw:
        return Decimal("0")
    try:
        value = Decimal(raw)
    except InvalidOperation:
        return Decimal("0")
    if not value.is_finite() or abs(value) > MAX_AMOUNT:
        return Decimal("0")
    return value


# Dependency injection
def get_account_repository(request: Request) -> AccountRepository:
    return request.app.state.account_repository


def get_service(account_repo: AccountRepository = Depends(get_account_repository)) -> BankService:
    return BankService(account_repo)


def build_banking_router(limiter: Limiter, rate_limit: str) -> APIRouter:
    """Mutating endpoints, rate limited by the limiter of the app they are mounted on."""
    banking = APIRouter()

    @banking.post("/create", response_class=PlainTextResponse, summary="Create Account")
    @limiter.limit(rate_limit)
    def create_account(
        request: Request,
        name: str = Form(""),
        balance: str = Form(""),
        account_type: str = Form("", alias="accountType"),
        service: BankService = Depends(get_service),
    ):
        service.create_account(name, parse_amount(balance), AccountType.from_form(account_type))
        return "Account created successfully"

    @banking.post("/deposit", response_class=PlainTextResponse, summary="Deposit Money")
    @limiter.limit(rate_limit)
    def deposit_money(
        request: Request,
        name: str = Form(""),
        amount: str = Form(""),
        service: BankService = Depends(get_service),
    ):
        new_balance = service.deposit(name, parse_amount(amount))
        return f"Deposit successful! New Balance: ${money(new_balance)}"

    @banking.post("/withdraw", response_class=PlainTextResponse, summary="Withdraw Money")
    @limiter.limit(rate_limit)
    def withdraw_money(
        request: Request,
        name: str = Form(""),
        amount: str = Form(""),
        service: BankService = Depends(get_service),
    ):
        new_balance = service.withdraw(name, parse_amount(amount))
        return f"Withdrawal successful! New Balance: ${money(new_balance)}"

    return banking


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def home():
    return HOME_PAGE


@router.get("/balance", response_class=PlainTextResponse, summary="Check Balance")
def check_balance(name: str = "", service: BankService = Depends(get_service)):
    return f"Balance: ${money(service.get_balance(name))}"


@router.get("/history", response_class=HTMLResponse, summary="Transaction History")
def transaction_history(name: str = "", service: BankService = Depends(get_service)):
    return "".join(f"{entry}<br>" for entry in service.get_history(name))


@router.get("/health", response_model=HealthResponse, summary="Health Check")
def health_check(request: Request, account_repo: AccountRepository = Depends(get_account_repository)):
    tz = ZoneInfo(request.app.state.settings.timezone)
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(tz),
        accounts_count=account_repo.count()
    )


# Request logging middleware
async def log_requests(request: Request, call_next):
    start_time = time.time()

    logger.info(
        "Request started",
        method=request.method,
        url=str(request.url),
        client_ip=request.client.host if request.client else None
    )

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        "Request completed",
        method=request.method,
        url=str(request.url),
        status_code=response.status_code,
        process_time=round(process_time, 4)
    )

    return response


# Banking failures are reported as plain text with a 200 status
async def bank_error_handler(request: Request, exc: BankError):
    return PlainTextResponse(str(exc))


async def general_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception",
        error=str(exc),
        url=str(request.url),
        method=request.method,
        exc_info=True
    )
    return PlainTextResponse("Internal server error", status_code=500)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting banking API", accounts_count=app.state.account_repository.count())
    yield
    logger.info("Shutting down banking API")


def create_app(
    app_settings: Optional[Settings] = None,
    account_repo: Optional[AccountRepository] = None,
) -> FastAPI:
    app_settings = app_settings or settings

    app = FastAPI(
        title=app_settings.app_name,
        description="In-memory banking demo with savings and current accounts",
        version=app_settings.app_version,
        lifespan=lifespan
    )

    app.state.settings = app_settings
    app.state.account_repository = account_repo or InMemoryAccountRepository(
        savings_minimum_balance=app_settings.savings_minimum_balance,
        current_overdraft_limit=app_settings.current_overdraft_limit,
    )

    # Each app rate-limits with its own settings and counters
    limiter = Limiter(key_func=get_remote_address, enabled=app_settings.rate_limit_enabled)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(BankError, bank_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=app_settings.allowed_methods,
        allow_headers=app_settings.allowed_headers,
    )
    app.middleware("http")(log_requests)

    app.include_router(router)
    app.include_router(build_banking_router(limiter, f"{app_settings.rate_limit_per_minute}/minute"))

    if os.path.isdir(app_settings.static_dir):
        app.mount("/static", StaticFiles(directory=app_settings.static_dir), name="static")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
