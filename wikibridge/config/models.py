from pydantic import BaseModel, Field
from typing import Literal


class WikiConfig(BaseModel):
    url: str = ""
    token_env: str = "WIKIJS_API_TOKEN"
    locale: str = "en"
    editor: str = "markdown"
    timeout: float = 30.0


class ConversionConfig(BaseModel):
    auto_convert_links: bool = True
    preserve_native_syntax: bool = False


class UploadConfig(BaseModel):
    default_tags: list[str] = []
    behavior: Literal["ask", "update", "create-new"] = "ask"


class WikiBridgeConfig(BaseModel):
    wiki: WikiConfig = Field(default_factory=WikiConfig)
    conversion: ConversionConfig = Field(default_factory=ConversionConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
