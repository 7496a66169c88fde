import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.api import health, profiles, subscription, worksheets, resources, dashboard
from app.core.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    description="AI-generated worksheets for teachers, with a free/premium usage gate",
    version="0.1.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.frontend_url,
        "http://localhost:5173",  # Vite dev server
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(profiles.router)
app.include_router(subscription.router)
app.include_router(worksheets.router)
app.include_router(resources.router)
app.include_router(dashboard.router)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "docs": "/docs",
        "health": "/health",
    }
