"""Health check endpoint."""

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from tunebridge_api.api.deps import JobExecutorDep

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    active_jobs: int


@router.get("/health")
async def health(job_executor: JobExecutorDep) -> HealthResponse:
    return HealthResponse(active_jobs=job_executor.active_count)
