"""Liveness endpoints.

  GET /        - plain-text banner, kept for clients that poke the root URL
  GET /health  - JSON liveness probe for orchestrators

Neither touches configuration: if the process can answer, it is alive.
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return "Server is running"


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}
