"""Joinerator microservice -- FastAPI application.

Endpoints:
    POST /joinerate     -- Add combining glyphs to text
    GET  /repertoires   -- List available repertoires
    GET  /health        -- Health check

Each request builds its own engine, so requests never share a random
source.
"""

from __future__ import annotations

import numpy as np
import structlog
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .engine import Joinerator
from .options import GeneratorOptions, build_options, parse_frequency
from .repertoire import REPERTOIRE_INDEX, Category, select_repertoire
from .transform import apply_transformers

structlog.configure(
    processors=[
        structlog.dev.ConsoleRenderer(),
    ],
)

logger = structlog.get_logger(__name__)

VERSION = "0.1.0"

app = FastAPI(
    title="joinerator",
    description="Adds Unicode combining glyphs to text",
    version=VERSION,
)


# --------------------------------------------------------------------------
# Request / Response models
# --------------------------------------------------------------------------


class GeneratorRequest(BaseModel):
    """Generator settings for one category."""

    category: Category = Field(..., description="ABOVE, BELOW or THROUGH")
    frequency: str = Field(
        default="60%",
        description="Characters marked per pass: percentage of input or fixed count",
        examples=["60%", "3"],
    )
    stacking: int = Field(default=1, ge=0, le=64, description="Number of passes")


class JoinerateRequest(BaseModel):
    """Request body for /joinerate."""

    text: str = Field(..., max_length=100_000, description="Input text")
    repertoire: str = Field(default="default", description="Repertoire name")
    generator: list[GeneratorRequest] = Field(
        default_factory=lambda: [
            GeneratorRequest(category=Category.ABOVE, frequency="60%", stacking=1),
            GeneratorRequest(category=Category.BELOW, frequency="60%", stacking=0),
        ],
        description="Per-category generator settings",
    )
    allow_unreadable: bool = Field(default=False, description="Ignore applicability rules")
    limit: int | None = Field(default=None, description="Maximum output length in characters")
    transformers: list[str] = Field(
        default_factory=list,
        description="Transformers applied before glyphs are added, in order",
        examples=[["uwu", "upper"]],
    )
    seed: int | None = Field(default=None, ge=0, description="Seed for reproducible output")


class JoinerateResponse(BaseModel):
    """Response body for /joinerate."""

    input: str
    output: str
    length: int = Field(description="Output length in characters")


class RepertoireInfo(BaseModel):
    name: str
    description: str
    glyphs: dict[str, int] = Field(description="Glyph count per category")


class HealthResponse(BaseModel):
    """Response body for /health."""

    status: str
    service: str
    version: str


# --------------------------------------------------------------------------
# Endpoints
# --------------------------------------------------------------------------


@app.post("/joinerate", response_model=JoinerateResponse)
async def joinerate(request: JoinerateRequest) -> JoinerateResponse:
    """Add combining glyphs to the request text."""
    rng = np.random.default_rng(request.seed)
    try:
        options = build_options(
            select_repertoire(request.repertoire),
            [
                GeneratorOptions(
                    category=g.category,
                    frequency=parse_frequency(g.frequency),
                    stacking=g.stacking,
                )
                for g in request.generator
            ],
            allow_unreadable=request.allow_unreadable,
            limit=request.limit,
        )
        text = apply_transformers(request.text, request.transformers, rng)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        output = Joinerator(options, rng).process(text)
    except Exception as e:
        logger.error("joinerate_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Processing failed")

    return JoinerateResponse(input=request.text, output=output, length=len(output))


@app.get("/repertoires", response_model=list[RepertoireInfo])
async def repertoires() -> list[RepertoireInfo]:
    """List the built-in repertoires."""
    return [
        RepertoireInfo(name=r.name, description=r.description, glyphs=r.category_counts())
        for r in REPERTOIRE_INDEX.values()
    ]


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for Docker and load balancer checks."""
    return HealthResponse(
        status="healthy",
        service="joinerator",
        version=VERSION,
    )
