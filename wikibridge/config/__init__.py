from .loader import load_config, resolve_token
from .models import (
    ConversionConfig,
    UploadConfig,
    WikiBridgeConfig,
    WikiConfig,
)

__all__ = [
    "ConversionConfig",
    "UploadConfig",
    "WikiBridgeConfig",
    "WikiConfig",
    "load_config",
    "resolve_token",
]
