"""Sajda HTTP API - status, schedule, location push and method change"""
from contextlib import asynccontextmanager
from datetime import date

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .engine.timeutil import local_now
from .engine.types import CalculationMethod
from .service import SajdaService


class LocationRequest(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class MethodRequest(BaseModel):
    method: CalculationMethod


def create_app(service: SajdaService | None = None) -> FastAPI:
    """Build the FastAPI app around a service.

    Args:
        service: Service to expose; a default one is built from the environment
    """
    service = service or SajdaService()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await service.start()
        try:
            yield
        finally:
            await service.stop()

    app = FastAPI(
        title="Sajda",
        description="Prayer-time schedule engine and trigger daemon",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.service = service

    @app.get("/health")
    async def health():
        return {"status": "ok", "running": service.running}

    @app.get("/status")
    async def status():
        return service.status()

    @app.get("/schedule")
    async def schedule():
        today = service.schedule()
        if today is None:
            raise HTTPException(status_code=404, detail="No schedule available, set a location first")
        return today.to_dict()

    @app.get("/next")
    async def next_prayer():
        upcoming = service.next_prayer()
        if upcoming is None:
            raise HTTPException(status_code=404, detail="No upcoming prayer known")
        return upcoming.to_dict()

    @app.post("/location")
    async def update_location(body: LocationRequest):
        refetching = service.update_location(body.latitude, body.longitude)
        return {
            "coordinates": [body.latitude, body.longitude],
            "refetch_started": refetching,
        }

    @app.put("/method")
    async def set_method(body: MethodRequest):
        method = service.set_method(body.method)
        return {"method": method.value}

    @app.get("/reminders")
    async def reminders(day: date | None = None):
        return service.reminders(day or local_now().date())

    return app
