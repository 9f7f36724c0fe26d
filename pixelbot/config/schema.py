"""Configuration schema using Pydantic."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource


class BotConfig(BaseModel):
    """Bot identity on the hosting platform."""
    name: str = "pixelbot"
    token: str = ""  # Platform API token


class TransportConfig(BaseModel):
    """How the runtime reaches the chat platform."""
    kind: str = "websocket"  # websocket | mock
    host: str = "0.0.0.0"
    port: int = 18792
    require_token: bool = False
    token: str = ""


class RpcConfig(BaseModel):
    """Device RPC behavior."""
    timeout_seconds: float = Field(default=10.0, gt=0)
    get_retry_attempts: int = Field(default=2, ge=1, le=5)  # reads before falling back to a default


class ContentConfig(BaseModel):
    """Limits for remote content sent to devices."""
    max_bytes: int = Field(default=40 * 1024, gt=0)
    width: int = 32
    height: int = 16
    signatures: list[str] = Field(default_factory=lambda: ["GIF87a", "GIF89a"])
    fetch_timeout_seconds: float = 10.0


class SchedulerConfig(BaseModel):
    """Content rotation presets."""
    long_interval_ms: int = 5 * 60 * 1000
    medium_interval_ms: int = 2 * 60 * 1000
    short_interval_ms: int = 30 * 1000
    default_interval_ms: int = 2 * 60 * 1000
    default_order: str = "sequential"  # sequential | random


class GifPlayerConfig(BaseModel):
    """GIF player bot settings."""
    playlist: list[str] = Field(default_factory=list)  # empty uses the bundled playlist


class Config(BaseSettings):
    """Root configuration for pixelbot."""
    bot: BotConfig = Field(default_factory=BotConfig)
    transport: TransportConfig = Field(default_factory=TransportConfig)
    rpc: RpcConfig = Field(default_factory=RpcConfig)
    content: ContentConfig = Field(default_factory=ContentConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    gif_player: GifPlayerConfig = Field(default_factory=GifPlayerConfig)

    model_config = ConfigDict(
        env_prefix="PIXELBOT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # File values arrive as init kwargs; PIXELBOT_* variables win over them.
        return env_settings, init_settings, dotenv_settings, file_secret_settings
