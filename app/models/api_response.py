from pydantic import BaseModel
from typing import Any, Dict, Union

class MovieEnvelope(BaseModel):
    movie: Dict[str, Any]

class ErrorEnvelope(BaseModel):
    # field -> message for failed validation, a plain string otherwise
    error: Union[Dict[str, str], str]

class SystemInfo(BaseModel):
    environment: str
    version: str

class HealthCheck(BaseModel):
    status: str
    system_info: SystemInfo
