# -----------------------------------------------------------------------------
# DOCKGEN - FASTAPI INTERFACE
# -----------------------------------------------------------------------------
# Thin HTTP surface over the pipeline.
#
# Endpoints:
# - GET  /health        : Health check
# - POST /api/generate  : Stage a repository, generate and build its Dockerfile
# -----------------------------------------------------------------------------

import os
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).parent.parent
load_dotenv(PROJECT_ROOT / ".env")

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from rich.console import Console
from rich.panel import Panel

from dockgen import __version__
from dockgen.core.pipeline import Pipeline
from dockgen.domain.models import PipelineResult

console = Console()

# Failure code -> HTTP status
ERROR_STATUS = {
    "CredentialMissing": 400,
    "DetectionFailed": 422,
    "UnsupportedStack": 422,
    "InvalidProjectConfiguration": 422,
    "FromInstructionMissing": 422,
    "MissingFiles": 422,
    "EngineUnavailable": 503,
    "StagingFailed": 502,
    "BuildFailed": 502,
}

_pipeline: Pipeline | None = None


def get_pipeline() -> Pipeline:
    global _pipeline
    if _pipeline is None:
        _pipeline = Pipeline()
    return _pipeline


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    console.print(
        Panel(
            f"[bold]DOCKGEN v{__version__}[/bold]\n"
            "Repository -> Stack -> Dockerfile -> Image",
            border_style="cyan",
        )
    )
    yield
    console.print("[yellow]DOCKGEN SHUTTING DOWN[/yellow]")


app = FastAPI(
    title="Dockgen",
    description="Dockerfile generation for JavaScript repositories",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# REQUEST/RESPONSE MODELS
# =============================================================================


class GenerateRequest(BaseModel):
    repository_url: str = Field(..., alias="repositoryUrl")
    github_token: str | None = Field(default=None, alias="githubToken", repr=False)
    build: bool = True

    class Config:
        populate_by_name = True


class GenerateData(BaseModel):
    dockerfile: str
    techStack: str
    built: bool


class GenerateResponse(BaseModel):
    success: bool
    data: GenerateData


# =============================================================================
# ENDPOINTS
# =============================================================================


@app.get("/health")
async def health_check():
    """Health check for load balancers."""
    return {"status": "online", "service": "dockgen", "version": __version__}


@app.post("/api/generate", response_model=GenerateResponse)
async def generate(request: GenerateRequest):
    """Generate (and by default build) a Dockerfile for a repository."""
    if not request.repository_url.strip():
        raise HTTPException(status_code=400, detail="repositoryUrl is required")

    result: PipelineResult = await get_pipeline().run_async(
        request.repository_url, request.github_token, request.build
    )

    if not result.success:
        body = {
            "success": False,
            "error": result.error,
            "message": result.diagnostic,
        }
        if result.missing_paths:
            body["missingPaths"] = result.missing_paths
        if result.dockerfile:
            body["dockerfile"] = result.dockerfile
        return JSONResponse(status_code=ERROR_STATUS.get(result.error, 500), content=body)

    return GenerateResponse(
        success=True,
        data=GenerateData(
            dockerfile=result.dockerfile,
            techStack=result.stack.value,
            built=result.built,
        ),
    )


# =============================================================================
# MAIN
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "5000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
