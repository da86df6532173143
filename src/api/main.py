"""
Civic Reporter - REST API

FastAPI application for submitting and tracking civic issue reports,
with email/password and mobile OTP login.

Run with: uvicorn src.api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, FastAPI, Header, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError

from src.core.config import Settings, get_settings
from src.core.exceptions import CivicReporterError, ValidationError
from src.core.logging import setup_logging
from src.database.connection import DatabaseConnection
from src.visualization.map_generator import create_reports_map

from .services import Services, build_services

logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


# ============================================================================
# Pydantic Models
# ============================================================================

class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportCreateRequest(CamelModel):
    """Report submission. Coordinates may arrive as numbers or numeric strings."""
    title: Optional[str] = None
    description: Optional[str] = None
    latitude: Any = None
    longitude: Any = None
    address: Optional[str] = None
    image_url: Optional[str] = None
    user_id: Optional[str] = None


class StatusUpdateRequest(CamelModel):
    status: Optional[str] = None


class UserSummary(CamelModel):
    id: str
    name: Optional[str] = None
    email: str


class ReportResponse(CamelModel):
    """Single report."""
    id: str
    title: str
    description: str
    image_url: Optional[str] = None
    latitude: float
    longitude: float
    address: Optional[str] = None
    status: str
    user_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user: Optional[UserSummary] = None


class ReportStatsResponse(CamelModel):
    """Report statistics."""
    total_reports: int
    by_status: Dict[str, int]
    with_image: int
    resolution_rate: float


class UserResponse(CamelModel):
    """Account data without the password hash."""
    id: str
    email: str
    mobile: Optional[str] = None
    name: Optional[str] = None
    role: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SignupRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class OTPIssueRequest(CamelModel):
    mobile: Optional[str] = None


class OTPVerifyRequest(CamelModel):
    mobile: Optional[str] = None
    otp: Optional[str] = None


class OTPIssueResponse(CamelModel):
    message: str
    otp: Optional[str] = None


class MessageResponse(CamelModel):
    message: str


class HealthResponse(CamelModel):
    """API health check response."""
    status: str
    version: str
    timestamp: str
    message: str
    database: str


# ============================================================================
# Dependencies
# ============================================================================

def get_services(request: Request) -> Services:
    """Services wired onto the application at startup."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("Application services are not initialized")
    return services


def _report_response(report, include_user: bool = False) -> ReportResponse:
    return ReportResponse.model_validate(report.to_dict(include_user=include_user))


def _user_response(user) -> UserResponse:
    return UserResponse.model_validate(user.to_dict())


# ============================================================================
# System Routes
# ============================================================================

router = APIRouter()


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
def root():
    """Welcome page."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
        <title>Civic Reporter</title>
        <style>
            body { font-family: Arial; max-width: 900px; margin: 50px auto; padding: 20px; }
            h1 { color: #2b6cb0; }
            code { background: #edf2f7; padding: 2px 8px; border-radius: 4px; }
            .endpoint { background: #f7fafc; padding: 10px; margin: 5px 0; border-left: 3px solid #2b6cb0; }
        </style>
    </head>
    <body>
        <h1>Civic Reporter</h1>
        <p>Report local civic issues and follow them until they are resolved.</p>
        <ul>
            <li><a href="/docs">Swagger UI</a></li>
            <li><a href="/api/health">Health Check</a></li>
            <li><a href="/api/reports/map">Reports Map</a></li>
        </ul>
        <div class="endpoint"><code>POST /api/reports</code> Submit a report</div>
        <div class="endpoint"><code>GET /api/reports</code> List reports</div>
        <div class="endpoint"><code>PATCH /api/reports/{id}</code> Update report status</div>
        <div class="endpoint"><code>GET /api/user/reports</code> Reports of the current user</div>
        <div class="endpoint"><code>POST /api/auth/signup</code> Create an account</div>
        <div class="endpoint"><code>POST /api/auth/otp</code> Request a login code</div>
    </body>
    </html>
    """


@router.get("/api/health", response_model=HealthResponse, tags=["System"])
def health_check(request: Request):
    """Check API health and database connectivity."""
    services = getattr(request.app.state, "services", None)
    connected = services is not None and services.database.check_connection()

    return HealthResponse(
        status="ok" if connected else "degraded",
        version=API_VERSION,
        timestamp=datetime.utcnow().isoformat(),
        message="Civic Reporting System API is running",
        database="connected" if connected else "unavailable",
    )


# ============================================================================
# Report Routes
# ============================================================================

@router.post(
    "/api/reports",
    response_model=ReportResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Reports"],
)
def create_report(body: ReportCreateRequest, request: Request):
    """
    Submit a civic issue report.

    Reports without a known userId are filed under the anonymous user.
    Invalid image payloads are dropped and the report is stored without one.
    """
    services = get_services(request)
    report = services.report_handler.create_report(body.model_dump())
    return _report_response(report)


@router.get("/api/reports", response_model=List[ReportResponse], tags=["Reports"])
def list_reports(
    request: Request,
    status: Optional[str] = Query(None, description="PENDING, IN_PROGRESS, RESOLVED or REJECTED"),
    limit: Optional[int] = Query(None, ge=1, le=1000),
):
    """List reports newest first, each with its owner summary."""
    services = get_services(request)
    reports = services.report_handler.list_reports(status=status, limit=limit, include_user=True)
    return [_report_response(r, include_user=True) for r in reports]


@router.get("/api/reports/stats/summary", response_model=ReportStatsResponse, tags=["Reports"])
def get_report_stats(request: Request):
    """Get report statistics."""
    return get_services(request).report_handler.get_statistics()


@router.get("/api/reports/map", response_class=HTMLResponse, tags=["Map"])
def get_reports_map(
    request: Request,
    status: Optional[str] = Query(None, description="Only reports with this status"),
):
    """Interactive map of reports colored by status."""
    services = get_services(request)
    reports = services.report_handler.list_reports(status=status)
    return create_reports_map(reports)._repr_html_()


@router.get("/api/reports/{report_id}", response_model=ReportResponse, tags=["Reports"])
def get_report(report_id: str, request: Request):
    """Get report by ID."""
    return _report_response(get_services(request).report_handler.get_report(report_id))


@router.patch("/api/reports/{report_id}", response_model=ReportResponse, tags=["Reports"])
def update_report_status(
    report_id: str,
    body: StatusUpdateRequest,
    request: Request,
    x_user_id: Optional[str] = Header(None),
):
    """
    Change a report's status.

    Any status may follow any other. When admin-only updates are enabled the
    X-User-Id header must name an ADMIN account.
    """
    if not body.status:
        raise ValidationError("Status is required", field="status")

    services = get_services(request)
    report = services.report_handler.update_status(report_id, body.status, acting_user_id=x_user_id)
    return _report_response(report)


@router.delete("/api/reports/{report_id}", response_model=MessageResponse, tags=["Reports"])
def delete_report(report_id: str, request: Request):
    """Delete a report."""
    get_services(request).report_handler.delete_report(report_id)
    return MessageResponse(message="Report deleted successfully")


@router.get("/api/user/reports", response_model=List[ReportResponse], tags=["Reports"])
def list_user_reports(request: Request, x_user_id: Optional[str] = Header(None)):
    """Reports owned by the user named in the X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise ValidationError("User ID is required", field="userId")

    services = get_services(request)
    reports = services.report_handler.list_reports(user_id=x_user_id.strip())
    return [_report_response(r) for r in reports]


# ============================================================================
# Auth Routes
# ============================================================================

@router.post(
    "/api/auth/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Auth"],
)
def signup(body: SignupRequest, request: Request):
    """Create an account with email and password."""
    user = get_services(request).accounts.signup(body.email, body.password, body.name)
    return _user_response(user)


@router.post("/api/auth/login", response_model=UserResponse, tags=["Auth"])
def login(body: LoginRequest, request: Request):
    """Log in with email and password."""
    user = get_services(request).accounts.login(body.email, body.password)
    return _user_response(user)


@router.post("/api/auth/logout", response_model=MessageResponse, tags=["Auth"])
def logout():
    """Sessions live on the client; the server only acknowledges."""
    return MessageResponse(message="Logged out successfully")


@router.post("/api/auth/otp", response_model=OTPIssueResponse, response_model_exclude_none=True, tags=["Auth"])
def issue_otp(body: OTPIssueRequest, request: Request):
    """Send a one-time login code to a mobile number."""
    services = get_services(request)
    code = services.otp.issue(body.mobile)

    response = OTPIssueResponse(message="OTP sent successfully")
    if services.settings.otp_include_in_response:
        response.otp = code
    return response


@router.put("/api/auth/otp", response_model=UserResponse, tags=["Auth"])
def verify_otp(body: OTPVerifyRequest, request: Request):
    """Verify a login code. First login creates the account."""
    user = get_services(request).otp.verify(body.mobile, body.otp)
    return _user_response(user)


# ============================================================================
# Error Handlers
# ============================================================================

async def _domain_error_handler(request: Request, exc: CivicReporterError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request body"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {location} {first.get('msg', '')}".strip()
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def _database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


# ============================================================================
# Application Factory
# ============================================================================

@asynccontextmanager
async def _lifespan(app: FastAPI):
    owned_database: Optional[DatabaseConnection] = None

    if app.state.services is None:
        settings: Settings = app.state.settings
        owned_database = DatabaseConnection.from_settings(settings)
        if settings.auto_create_tables:
            owned_database.create_tables()
        app.state.services = build_services(owned_database, settings, app.state.sms_sender)

    yield

    if owned_database is not None:
        owned_database.close()
        app.state.services = None


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[DatabaseConnection] = None,
    sms_sender=None
) -> FastAPI:
    """
    Build the API application.

    Args:
        settings: Application settings (environment if None)
        database: Initialized database connection. When None, one is built
            from settings on startup and closed on shutdown.
        sms_sender: OTP transport (chosen from settings if None)

    Returns:
        FastAPI application
    """
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(
        title="Civic Reporter",
        description="Citizen reporting of civic issues with location, photo and status tracking",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=_lifespan,
    )

    app.state.settings = settings
    app.state.sms_sender = sms_sender
    app.state.services = (
        build_services(database, settings, sms_sender) if database is not None else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CivicReporterError, _domain_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)

    app.include_router(router)
    return app


app = create_app()


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=get_settings().api_host, port=get_settings().api_port)
