"""Configuration loading utilities."""

import json
import re
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from pixelbot.config.schema import Config
from pixelbot.utils.helpers import get_data_path


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return get_data_path() / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file or create default.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration object. Environment variables (PIXELBOT_*) still
        override values read from the file.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return Config(**convert_keys(data))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file with camelCase keys."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data = convert_to_camel(config.model_dump())
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", str(name)).lower()


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase."""
    components = str(name).split("_")
    return components[0] + "".join(x.title() for x in components[1:])


def unknown_keys(data: Any, model: Any = Config, prefix: str = "") -> list[str]:
    """List dotted paths of keys the schema does not define."""
    if not isinstance(data, dict):
        return []
    fields = getattr(model, "model_fields", {})
    found: list[str] = []
    for key, value in convert_keys(data).items():
        path = f"{prefix}{key}"
        if key not in fields:
            found.append(path)
            continue
        annotation = fields[key].annotation
        if isinstance(annotation, type) and hasattr(annotation, "model_fields"):
            found.extend(unknown_keys(value, annotation, prefix=f"{path}."))
    return found
