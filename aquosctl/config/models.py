"""
Configuration models using Pydantic for validation.

Configuration is read from config.json (optional) and validated at startup.
Command line options override the values loaded here.
"""

from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class SerialConfig(BaseModel):
    """Serial port configuration."""

    port: str = Field(default="/dev/ttyS0", description="Serial port the television is attached to")
    response_timeout_seconds: float = Field(
        default=1.0, gt=0, le=30, description="Maximum wait for a reply to each frame"
    )
    protocol: str = Field(
        default="base",
        description="Command table: 'base' (12/16/05 sets) or 'extended' (12/17/10 sets)"
    )

    @field_validator("protocol")
    @classmethod
    def validate_protocol(cls, v):
        """Validate command table selector."""
        valid = ["base", "extended"]
        if v.lower() not in valid:
            raise ValueError(f"Invalid protocol: {v}. Must be one of {valid}")
        return v.lower()

    class Config:
        """Pydantic config."""
        extra = "forbid"  # Line settings are fixed, so no baud or parity keys


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(
        default="WARNING",
        description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    file: Optional[str] = Field(
        default=None,
        description="Log file path (None for console only)"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v):
        """Validate logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v.upper()


class SimulatorConfig(BaseModel):
    """Television simulator configuration."""

    enabled: bool = Field(default=False, description="Use simulator instead of a serial port")
    silent_opcodes: List[str] = Field(
        default_factory=lambda: ["CHUP", "CHDW"],
        description="Opcodes the simulated set accepts without replying"
    )
    reject_opcodes: List[str] = Field(
        default_factory=list,
        description="Opcodes the simulated set always answers with ERR"
    )
    response_latency_ms: int = Field(
        default=0, ge=0, le=5000, description="Artificial response delay (ms)"
    )
    inject_timeout: bool = Field(default=False, description="Never reply to any frame")

    @field_validator("silent_opcodes", "reject_opcodes")
    @classmethod
    def validate_opcodes(cls, v):
        """Opcodes are always four characters."""
        for opcode in v:
            if len(opcode) != 4:
                raise ValueError(f"Opcode must be exactly 4 characters, got: {opcode!r}")
        return [opcode.upper() for opcode in v]


class AppConfig(BaseModel):
    """Root configuration model."""

    serial: SerialConfig = Field(default_factory=SerialConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    simulator: SimulatorConfig = Field(default_factory=SimulatorConfig)

    class Config:
        """Pydantic config."""
        extra = "forbid"  # Raise error on unknown fields
