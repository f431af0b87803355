import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

from .errors import MalformedBodyError, StorageError, TelemetryError
from .interval import IntervalAdvisor
from .models import TelemetryCount, TelemetryCreated, TelemetryIn, TelemetryOut, UpdateTime
from .service import TelemetryService
from .settings import Settings
from .storage import MongoTelemetryStore

logger = logging.getLogger(__name__)

INDEX_HTML = (Path(__file__).parent / "static" / "index.html").read_text(encoding="utf-8")

# Prometheus metrics
telemetry_ingested_total = Counter('telemetry_ingested_total', 'Total number of telemetry readings stored')
telemetry_ingest_duration = Histogram('telemetry_ingest_duration_seconds', 'Time spent processing telemetry ingestion')
telemetry_rejected_total = Counter('telemetry_rejected_total', 'Total number of telemetry readings rejected', ['reason'])


async def read_payload(request: Request) -> TelemetryIn:
    body = await request.body()
    try:
        data = json.loads(body)
    except ValueError:
        raise MalformedBodyError() from None
    if not isinstance(data, dict):
        raise MalformedBodyError("El cuerpo debe ser un objeto JSON")
    return TelemetryIn.model_validate(data)


def create_app(settings: Optional[Settings] = None, store=None) -> FastAPI:
    """Build the API around an injected store, or a MongoDB one built from settings."""
    settings = settings or Settings()
    if store is None:
        store = MongoTelemetryStore.from_settings(settings)
    service = TelemetryService(store, settings.display_timezone)
    advisor = IntervalAdvisor(settings.poll_min_seconds, settings.poll_max_seconds)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # an unreachable database must not stop the server from listening
        try:
            await store.ping()
            logger.info("MongoDB conectado correctamente")
        except StorageError as e:
            logger.error(f"Error MongoDB: {e}")
        yield
        store.close()

    app = FastAPI(title="esp32-telemetry", lifespan=lifespan)
    app.state.service = service
    app.state.advisor = advisor

    # registered before CORS so unexpected 500s still carry the CORS headers
    @app.middleware("http")
    async def unexpected_error_middleware(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception(f"Error inesperado en {request.method} {request.url.path}")
            return JSONResponse(status_code=500, content={"error": str(exc)})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TelemetryError)
    async def telemetry_error_handler(request: Request, exc: TelemetryError):
        if exc.status_code < 500:
            logger.warning(f"{request.method} {request.url.path} rechazado: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.post("/api/telemetry", status_code=201, response_model=TelemetryCreated)
    async def create_telemetry(request: Request):
        """Store a reading posted by the ESP32."""
        with telemetry_ingest_duration.time():
            try:
                payload = await read_payload(request)
                created = await service.record_reading(payload)
            except TelemetryError as e:
                if e.status_code < 500:
                    telemetry_rejected_total.labels(reason=type(e).__name__).inc()
                raise
        telemetry_ingested_total.inc()
        return created

    @app.get("/api/telemetry", response_model=List[TelemetryOut])
    async def list_telemetry():
        """All readings, newest first."""
        return await service.list_readings()

    @app.get("/api/telemetry/count", response_model=TelemetryCount)
    async def count_telemetry():
        return await service.count_readings()

    @app.get("/api/update-time", response_model=UpdateTime)
    async def update_time():
        """Random delay, in seconds, before the device reports again."""
        return UpdateTime(seconds=advisor.next_poll_interval())

    @app.get("/", response_class=HTMLResponse)
    async def index():
        return HTMLResponse(INDEX_HTML)

    @app.get("/health")
    async def health():
        # pings Mongo, unlike the status page
        try:
            await store.ping()
        except StorageError as e:
            return JSONResponse(status_code=503, content={"ok": False, "error": e.message})
        return {"ok": True}

    @app.get("/metrics")
    async def metrics():
        """Prometheus metrics endpoint"""
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    return app
