"""
VapeCode Storefront - Main FastAPI Application

Single entry point for the storefront API (catalog, session cart, auth,
admin stats). Data lives in Supabase; carts live in Upstash Redis.
"""
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.logging import get_logger
from storefront.routers import router as api_router
from storefront.services.database import close_database

logger = get_logger(__name__)

# Comma separated; credentials (cart cookie) need explicit origins
CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup: Supabase is initialized lazily on first request
    yield
    # Shutdown
    await close_database()


app = FastAPI(
    title="VapeCode Storefront",
    description="Storefront API: catalog, session cart, auth and admin stats",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Cart-Session"],
)

app.include_router(api_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "vapecode"}
