import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import index
from app.api.v1 import auth
from app.api.v1 import partner
from app.api.v1 import inquiry
from app.api.v1 import review
from app.api.v1 import admin


from app.core.config import settings
from app.core.handlers import register_exception_handlers
from app.core.logging import setup_logging

setup_logging()

app = FastAPI(title=settings.app_name)

# Middlewares
origins = []

if settings.allowed_hosts:
    origins = settings.allowed_hosts.split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routes
app.include_router(index.router, prefix="/api/healthcheck", tags=["Health"])
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(partner.router, prefix="/api/partner", tags=["Partner"])
app.include_router(inquiry.router, prefix="/api/inquiry", tags=["Inquiry"])
app.include_router(review.router, prefix="/api/review", tags=["Review"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

if __name__ == "__main__":
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=None,
    )
