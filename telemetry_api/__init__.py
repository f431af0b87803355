"""ESP32 + DHT22 telemetry ingestion API."""

__version__ = "1.0.0"
