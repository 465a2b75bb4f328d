"""
Receipt Line Parser API - Main Application
FastAPI application for receipt line-item extraction

Run with: python main.py
Access API docs at: http://localhost:8000/docs
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from api.routes import router
from api.models import HealthResponse

# Create FastAPI app
app = FastAPI(
    title="Receipt Line Parser API",
    description="Extract line items and totals from receipt images using PaddleOCR",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix="/api/v1")


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    return HealthResponse()


if __name__ == "__main__":
    import uvicorn
    from utils import setup_logging

    setup_logging(level="INFO")
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
