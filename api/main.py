"""
Global Sales Tracker API - Main Application.

FastAPI application with CORS enabled for frontend communication.

Run with:
    uvicorn api.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api import __version__
from api.dependencies import get_settings
from config.settings import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging from the process settings on startup."""
    configure_logging(get_settings())
    yield


# Create FastAPI application
app = FastAPI(
    title="Global Sales Tracker API",
    description="REST API for recording product series sales by country and customer",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS - Allow all origins for the single-user local frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["Health"])
def health_check():
    """
    Health check endpoint.

    Returns the API status and version.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "service": "global-sales-tracker-api"
    }


@app.get("/", tags=["Root"])
def root():
    """
    Root endpoint with API information.
    """
    return {
        "message": "Global Sales Tracker API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# Import and include routers
from api.routers import explorer, insights, products, sales

app.include_router(sales.router, prefix="/api/v1", tags=["Sales"])
app.include_router(explorer.router, prefix="/api/v1", tags=["Explorer"])
app.include_router(products.router, prefix="/api/v1", tags=["Products"])
app.include_router(insights.router, prefix="/api/v1", tags=["Insights"])
