from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional, Union
from datetime import datetime

class TelemetryIn(BaseModel):
    """Body sent by the device. Values are checked by ``validate_reading``."""
    model_config = ConfigDict(extra="ignore")

    temp: Optional[Any] = Field(None, examples=[23.5])
    hum: Optional[Any] = Field(None, examples=[61])
    timestamp: Optional[Any] = Field(None, examples=["2025-04-05 14:32:10"])

class TelemetryReading(BaseModel):
    temp: Union[int, float]
    hum: Union[int, float]
    timestamp: datetime

class TelemetryCreated(BaseModel):
    message: str
    id: str

class TelemetryOut(BaseModel):
    temp: Union[int, float]
    hum: Union[int, float]
    timestamp_local: str
    timestamp_utc: str

class TelemetryCount(BaseModel):
    total_registros: int

class UpdateTime(BaseModel):
    seconds: int
