import json

from pixelbot.config.loader import (
    camel_to_snake,
    convert_keys,
    load_config,
    save_config,
    snake_to_camel,
    unknown_keys,
)
from pixelbot.config.schema import Config


def test_defaults_match_device_limits() -> None:
    config = Config()

    assert config.rpc.timeout_seconds == 10.0
    assert config.content.max_bytes == 40960
    assert (config.content.width, config.content.height) == (32, 16)
    assert config.scheduler.default_interval_ms == 120_000
    assert config.transport.kind == "websocket"


def test_load_config_reads_camel_case_file(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "rpc": {"timeoutSeconds": 3, "getRetryAttempts": 4},
                "scheduler": {"defaultOrder": "random"},
                "gifPlayer": {"playlist": ["https://cdn.example.com/a.gif"]},
            }
        )
    )

    config = load_config(path)

    assert config.rpc.timeout_seconds == 3.0
    assert config.rpc.get_retry_attempts == 4
    assert config.scheduler.default_order == "random"
    assert config.gif_player.playlist == ["https://cdn.example.com/a.gif"]


def test_load_config_falls_back_to_defaults_on_invalid_file(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json")

    assert load_config(path).rpc.timeout_seconds == 10.0

    path.write_text(json.dumps({"rpc": {"timeoutSeconds": 0}}))

    assert load_config(path).rpc.timeout_seconds == 10.0


def test_environment_overrides_nested_values(monkeypatch) -> None:
    monkeypatch.setenv("PIXELBOT_RPC__TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("PIXELBOT_TRANSPORT__PORT", "9001")

    config = Config()

    assert config.rpc.timeout_seconds == 2.5
    assert config.transport.port == 9001


def test_environment_overrides_values_from_file(tmp_path, monkeypatch) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"rpc": {"timeoutSeconds": 3, "getRetryAttempts": 4}}))
    monkeypatch.setenv("PIXELBOT_RPC__TIMEOUT_SECONDS", "7")

    config = load_config(path)

    assert config.rpc.timeout_seconds == 7.0
    assert config.rpc.get_retry_attempts == 4


def test_save_config_round_trips_with_camel_case_keys(tmp_path) -> None:
    path = tmp_path / "nested" / "config.json"
    config = Config()
    config.transport.port = 9100

    save_config(config, path)
    data = json.loads(path.read_text())

    assert data["transport"]["port"] == 9100
    assert "timeoutSeconds" in data["rpc"]
    assert load_config(path).transport.port == 9100


def test_key_case_helpers() -> None:
    assert camel_to_snake("getRetryAttempts") == "get_retry_attempts"
    assert snake_to_camel("fetch_timeout_seconds") == "fetchTimeoutSeconds"
    assert convert_keys({"gifPlayer": [{"maxBytes": 1}]}) == {"gif_player": [{"max_bytes": 1}]}


def test_unknown_keys_reports_dotted_paths() -> None:
    data = {"rpc": {"timeoutSecnds": 3}, "typoRoot": {}, "content": {"maxBytes": 10}}

    assert unknown_keys(data) == ["rpc.timeout_secnds", "typo_root"]
