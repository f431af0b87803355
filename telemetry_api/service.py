import logging
from datetime import datetime, timezone
from typing import Any, Dict, List
from zoneinfo import ZoneInfo

from .models import TelemetryCount, TelemetryCreated, TelemetryIn, TelemetryOut
from .validation import validate_reading

logger = logging.getLogger(__name__)

SAVED_MESSAGE = "Dato DHT22 guardado correctamente"


def format_local(ts: datetime, tz: ZoneInfo) -> str:
    """es-MX short rendering, e.g. ``5/4/2025, 8:32:10 a.m.``."""
    local = ts.astimezone(tz)
    hour = local.hour % 12 or 12
    suffix = "a.m." if local.hour < 12 else "p.m."
    return f"{local.day}/{local.month}/{local.year}, {hour}:{local:%M:%S} {suffix}"


def format_utc(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TelemetryService:
    def __init__(self, store, display_timezone: str = "America/Mexico_City"):
        self.store = store
        self.tz = ZoneInfo(display_timezone)

    async def record_reading(self, payload: TelemetryIn) -> TelemetryCreated:
        reading = validate_reading(payload)
        inserted_id = await self.store.insert(reading)
        logger.info(f"Dato guardado → {reading.temp}°C | {reading.hum}% | {format_utc(reading.timestamp)}")
        return TelemetryCreated(message=SAVED_MESSAGE, id=inserted_id)

    def to_out(self, document: Dict[str, Any]) -> TelemetryOut:
        ts = document["timestamp"]
        return TelemetryOut(
            temp=document["temp"],
            hum=document["hum"],
            timestamp_local=format_local(ts, self.tz),
            timestamp_utc=format_utc(ts),
        )

    async def list_readings(self) -> List[TelemetryOut]:
        documents = await self.store.list_all()
        return [self.to_out(d) for d in documents]

    async def count_readings(self) -> TelemetryCount:
        return TelemetryCount(total_registros=await self.store.count())
