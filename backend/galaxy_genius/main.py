from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from galaxy_genius.api import health, practice
from galaxy_genius.core.config import get_settings

settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Adaptive Flow and Puzzle item generation for timed practice runs",
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
app.include_router(practice.router)


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "docs": "/docs",
        "health": "/health",
    }
