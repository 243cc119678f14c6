"""Configuration loader for dailytile.toml."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from .core.transmitter import MAX_FULL_TEXT
from .format.builder import PRESETS, ExcerptPreset

CONFIG_NAME = "dailytile.toml"


@dataclass
class VaultConfig:
    """Where the dated notes live and how they are named."""
    root: Path
    label: str = "Daily Notes"
    hint: str = "daily"
    extension: str = "md"


@dataclass
class TransportConfig:
    """How rendered notes leave the sender."""
    kind: str = "file"
    out: Path = Path(".dailytile/outbox/daily_note.json")
    url: str = "http://127.0.0.1:8766/daily_note"
    token: str | None = None
    timeout: float = 10.0
    max_full_text: int = MAX_FULL_TEXT


@dataclass
class StateConfig:
    """Durable sender/receiver state."""
    db: Path = Path(".dailytile/state.sqlite")


@dataclass
class ServeConfig:
    """Receiver API."""
    host: str = "127.0.0.1"
    port: int = 8766


@dataclass
class DailyTileConfig:
    """Complete dailytile configuration."""
    vault: VaultConfig
    excerpt: ExcerptPreset
    transport: TransportConfig
    state: StateConfig
    serve: ServeConfig


def _excerpt_preset(data: dict[str, Any]) -> ExcerptPreset:
    name = data.get("preset", "tile")
    if name not in PRESETS:
        raise ValueError(f"Unknown excerpt preset {name!r} (expected one of {sorted(PRESETS)})")
    base = PRESETS[name]
    return ExcerptPreset(
        name=name,
        lines=int(data.get("lines", base.lines)),
        max_chars=int(data.get("max_chars", base.max_chars)),
    )


def load_config(config_path: Path | None = None, vault_path: Path | None = None) -> DailyTileConfig:
    """
    Load configuration from dailytile.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/dailytile.toml
    3. vault_path/dailytile.toml

    Args:
        config_path: Explicit path to config file
        vault_path: Vault root path for fallback search

    Returns:
        DailyTileConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / CONFIG_NAME)
    if vault_path:
        search_paths.append(vault_path / CONFIG_NAME)

    for path in search_paths:
        if path.exists():
            with open(path, "rb") as f:
                toml_data = tomllib.load(f)
            break

    vault_data = toml_data.get("vault", {})
    vault_config = VaultConfig(
        root=Path(vault_data.get("root", vault_path or Path("./vault"))),
        label=vault_data.get("label", "Daily Notes"),
        hint=vault_data.get("hint", "daily"),
        extension=vault_data.get("extension", "md").lstrip("."),
    )

    excerpt = _excerpt_preset(toml_data.get("excerpt", {}))

    transport_data = toml_data.get("transport", {})
    kind = transport_data.get("kind", "file")
    if kind not in ("file", "http"):
        raise ValueError(f"Unknown transport kind {kind!r} (expected 'file' or 'http')")
    transport_config = TransportConfig(
        kind=kind,
        out=Path(transport_data.get("out", TransportConfig.out)),
        url=transport_data.get("url", TransportConfig.url),
        # empty string means no auth
        token=transport_data.get("token") or None,
        timeout=float(transport_data.get("timeout", TransportConfig.timeout)),
        max_full_text=int(transport_data.get("max_full_text", MAX_FULL_TEXT)),
    )

    state_data = toml_data.get("state", {})
    state_config = StateConfig(db=Path(state_data.get("db", StateConfig.db)))

    serve_data = toml_data.get("serve", {})
    serve_config = ServeConfig(
        host=serve_data.get("host", ServeConfig.host),
        port=int(serve_data.get("port", ServeConfig.port)),
    )

    return DailyTileConfig(
        vault=vault_config,
        excerpt=excerpt,
        transport=transport_config,
        state=state_config,
        serve=serve_config,
    )
