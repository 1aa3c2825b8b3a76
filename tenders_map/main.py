from __future__ import annotations
import logging
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session

from tenders_map.core.config import settings, configure_cors
from tenders_map.core.exceptions import register_exception_handlers
from tenders_map.core.security import hash_password, normalize_email
from tenders_map.db.session import init_models, SessionLocal
from tenders_map.models.user import User
from tenders_map.services.uploads import URL_PREFIX, ensure_uploads_dir

# Routers (import once, include once)
from tenders_map.api.routes.auth import router as auth_router
from tenders_map.api.routes.points import router as points_router
from tenders_map.api.routes.tunnels import router as tunnels_router
from tenders_map.api.routes.comments import router as comments_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name)
configure_cors(app)

# Every failure leaves as {"error": ...}
register_exception_handlers(app)


def seed_admin(db: Session) -> User | None:
    """Create the ADMIN_EMAIL account if both admin settings are present (idempotent)."""
    email = normalize_email(settings.admin_email)
    if not email or not settings.admin_password:
        return None
    user = db.query(User).filter(User.email == email).first()
    if user:
        return user
    user = User(email=email, password_hash=hash_password(settings.admin_password))
    db.add(user)
    db.commit()
    logger.info("Seeded admin account %s", email)
    return user


@app.on_event("startup")
def on_startup():
    """
    - Create tables
    - Ensure the provisioning admin account from ADMIN_* settings
    """
    init_models()
    with SessionLocal() as db:
        seed_admin(db)


app.include_router(auth_router)
app.include_router(points_router)
app.include_router(tunnels_router)
app.include_router(comments_router)

app.mount(URL_PREFIX, StaticFiles(directory=ensure_uploads_dir()), name="uploads")


@app.get("/health", tags=["health"])
def health():
    return {"ok": True}


@app.middleware("http")
async def _log_login(request, call_next):
    if request.url.path == "/api/auth/login":
        logger.info(
            "Login request | method=%s origin=%s ua=%s",
            request.method,
            request.headers.get("origin"),
            request.headers.get("user-agent"),
        )
    return await call_next(request)
