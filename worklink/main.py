from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from worklink import __version__
from worklink.core.config import settings
from worklink.core.exceptions import register_exception_handlers
from worklink.core.logging import configure_logging, RequestIDMiddleware
from worklink.api.v1 import workers, startups, manufacturers, public

configure_logging(app_env=settings.app_env)

app = FastAPI(
    title="WorkLink API",
    description="Gig and machine application lifecycle for workers, startups and manufacturers",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

register_exception_handlers(app)

# Include API routers
app.include_router(workers.router, prefix="/api/v1/workers", tags=["Workers"])
app.include_router(startups.router, prefix="/api/v1/startups", tags=["Startups"])
app.include_router(manufacturers.router, prefix="/api/v1/manufacturers", tags=["Manufacturers"])
app.include_router(public.router, prefix="/api/v1/public", tags=["Public"])


@app.get("/healthz")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "version": __version__}


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": "WorkLink API", "docs": "/docs"}
