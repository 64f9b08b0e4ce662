import logging
from enum import Enum

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, PositiveInt, field_validator, model_validator, Field

logger = logging.getLogger(__name__)

# Below 10 Hz the controller loses the recording resolution it relies on.
MAX_CONTROL_TIMEOUT_MS = 100


class DecoderKind(str, Enum):
    """Wire shapes the ingest payload decoder understands."""
    FLAT_ARRAY = "flat_array"
    NESTED_GAZE = "nested_gaze"
    BINARY_MAP = "binary_map"


class LoggingConfig(BaseModel):
    """Handed to logging.basicConfig by the entry point."""
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"

    @field_validator('level')
    @classmethod
    def normalize_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f'Unknown log level {value!r}.')
        return level

class IngestConfig(BaseModel):
    """Subscription to the sensor's telemetry publisher."""
    address: str = Field("tcp://localhost:5000", description="Publisher endpoint to connect to.")
    topics: list[str] = Field(
        default=["pupil.", "gaze.", "pupil_positions"],
        description="Topic prefixes to subscribe to and decode."
    )
    timeout_ms: int = Field(0, ge=0, description="Poll timeout while draining; 0 never waits.")
    discover_port: bool = Field(
        False,
        description="Ask the remote-control endpoint for SUB_PORT instead of using `address`."
    )

class ControlConfig(BaseModel):
    """Reply socket the external controller talks to."""
    endpoint: str = "tcp://*:6000"
    timeout_ms: PositiveInt = 10

class RemoteConfig(BaseModel):
    """Request socket to the sensor's own remote-control endpoint."""
    enabled: bool = True
    address: str = "tcp://localhost:50020"
    timeout_ms: PositiveInt = 1000
    start_command: str = "R"
    stop_command: str = "r"

class BridgeSettings(BaseSettings):
    """
    Main bridge settings, loaded from environment variables, `.env` and defaults.
    """
    decoder: DecoderKind = DecoderKind.NESTED_GAZE
    debug: bool = Field(False, description="Subscribe to every topic and log raw frames.")

    # Sockets
    ingest: IngestConfig = Field(default_factory=IngestConfig)
    control: ControlConfig = Field(default_factory=ControlConfig)
    remote: RemoteConfig = Field(default_factory=RemoteConfig)

    # Logging
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = SettingsConfigDict(
        env_prefix="GAZE_BRIDGE__",
        env_file=".env",
        env_nested_delimiter='__',
        case_sensitive=False
    )

    @model_validator(mode='after')
    def validate_timeouts(self) -> "BridgeSettings":
        if self.control.timeout_ms > MAX_CONTROL_TIMEOUT_MS:
            raise ValueError(
                f'Control timeout must not exceed {MAX_CONTROL_TIMEOUT_MS} ms.'
            )
        if self.ingest.discover_port and not self.remote.enabled:
            raise ValueError('SUB_PORT discovery needs the remote-control endpoint.')
        return self

    @property
    def log_level(self) -> str:
        """Debug mode logs raw frames at DEBUG, so it always lowers the level to DEBUG."""
        return "DEBUG" if self.debug else self.logging.level

    @property
    def subscribe_topics(self) -> list[str]:
        """Prefixes handed to the SUB socket; debug mode takes everything."""
        return [""] if self.debug else list(self.ingest.topics)
