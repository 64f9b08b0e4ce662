from .app import (
    BridgeSettings,
    ControlConfig,
    DecoderKind,
    IngestConfig,
    LoggingConfig,
    RemoteConfig,
)

