from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import MAX_PORT, MIN_PORT


class ScanConfig(BaseModel):
    """
    Validation model for scan parameters.
    Built once from CLI input and frozen for the lifetime of the scan.
    """
    model_config = ConfigDict(frozen=True)

    target: str
    target_ip: str
    ports: Tuple[int, ...] = Field(..., min_length=1)
    concurrency: int = Field(1000, ge=1)
    timeout: float = Field(3, gt=0)
    verbose: bool = False

    @field_validator('ports')
    @classmethod
    def validate_ports(cls, v):
        bad = [p for p in v if not MIN_PORT <= p <= MAX_PORT]
        if bad:
            raise ValueError(f"ports out of range {MIN_PORT}-{MAX_PORT}: {bad[:5]}")
        return tuple(sorted(set(v)))
