"""
FastAPI Backend for the Mood Analyst agent

Hosts the agent over HTTP: task submission, health and the agent descriptor.
The Spotify client is authenticated during startup; if authentication fails
the application does not start.
"""

import os
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import structlog
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..agents.mood_agent import MoodAnalystAgent
from ..models.agent_models import AgentConfig, SystemConfig
from ..utils.logging_config import setup_logging
from .client_factory import APIClientFactory
from .exceptions import CatalogError
from .logging_middleware import LoggingMiddleware
from .spotify_client import SpotifyClient

logger = structlog.get_logger(__name__)

# Global service instances
agent: Optional[MoodAnalystAgent] = None
spotify_client: Optional[SpotifyClient] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup and shutdown."""
    global agent, spotify_client

    load_dotenv()
    system_config = SystemConfig.from_env()
    setup_logging(log_dir=system_config.log_dir, log_level=system_config.log_level)

    logger.info("Initializing Mood Analyst agent...")

    spotify_client = APIClientFactory(system_config).create_spotify_client()
    await spotify_client.__aenter__()

    try:
        await spotify_client.authenticate()
    except CatalogError as e:
        logger.error("Spotify authentication failed, refusing to start", error=str(e))
        await spotify_client.close()
        spotify_client = None
        raise

    agent = MoodAnalystAgent(spotify_client, config=system_config.agent)
    logger.info("Mood Analyst agent initialized successfully")

    yield

    logger.info("Shutting down Mood Analyst agent...")
    if spotify_client:
        await spotify_client.close()
    agent = None
    spotify_client = None


app = FastAPI(
    title="Mood Analyst API",
    description="Recommends music from Spotify based on a described mood",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LoggingMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"])


# Request/Response Models
class TaskRequest(BaseModel):
    """A raw command for the agent, e.g. 'mood_analyzer I feel calm'."""
    task: str = Field(..., description="Command text sent to the agent")


class TaskResponse(BaseModel):
    response: str = Field(..., description="Agent reply text")
    processing_time: float = Field(..., description="Seconds spent handling the task")


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: float
    version: str
    capabilities: List[str]
    components: Dict[str, Any]


class AgentResponse(BaseModel):
    agent_name: str
    description: str
    capabilities: List[str]


# API Endpoints
@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    config = agent.config if agent else AgentConfig()
    return HealthResponse(
        status="healthy" if agent else "degraded",
        timestamp=time.time(),
        version=__version__,
        capabilities=config.capabilities,
        components={
            "agent": "active" if agent else "inactive",
            "spotify_client": spotify_client.get_service_info() if spotify_client else "inactive"
        }
    )


@app.get("/agent", response_model=AgentResponse)
async def get_agent():
    """Describe the hosted agent."""
    config = agent.config if agent else AgentConfig()
    return AgentResponse(
        agent_name=config.agent_name,
        description=config.description,
        capabilities=config.capabilities
    )


@app.post("/tasks", response_model=TaskResponse)
async def submit_task(request: TaskRequest):
    """Run one agent command and return its reply."""
    if not agent:
        raise HTTPException(status_code=503, detail="Mood Analyst agent not available")

    start_time = time.time()
    response = await agent.process_task(request.task)
    processing_time = time.time() - start_time

    logger.info("Task processed", processing_time=round(processing_time, 4))

    return TaskResponse(response=response, processing_time=processing_time)


# Error handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Custom HTTP exception handler."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "timestamp": time.time(),
            "path": str(request.url)
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """General exception handler for unexpected errors."""
    logger.error("Unexpected error", error=str(exc), error_type=type(exc).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "timestamp": time.time(),
            "path": str(request.url)
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host=os.getenv("BACKEND_HOST", "0.0.0.0"),
        port=int(os.getenv("BACKEND_PORT", "8000"))
    )
