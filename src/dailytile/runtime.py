"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.sqlite_store import RECEIVER_NAMESPACE, SENDER_NAMESPACE, SQLiteStore
from .adapters.transport import FileTransport, HttpTransport
from .config import DailyTileConfig, load_config
from .core.cache import SyncCache
from .core.ports import Transport
from .core.selector import FolderResolver, NoteSelector
from .core.transmitter import SyncTransmitter
from .format.builder import NoteTextBuilder
from .format.markdown import MarkdownRenderer
from .sync import SenderState


@dataclass
class Runtime:
    """Container for all wired components."""
    config: DailyTileConfig
    vault_override: Path | None
    resolver: FolderResolver
    selector: NoteSelector
    builder: NoteTextBuilder
    transmitter: SyncTransmitter
    sender_state: SenderState
    cache: SyncCache


def build_transport(config: DailyTileConfig) -> Transport:
    if config.transport.kind == "http":
        return HttpTransport(
            config.transport.url,
            token=config.transport.token,
            timeout=config.transport.timeout,
        )
    return FileTransport(config.transport.out)


def build_runtime(
    vault_path: Path | None = None,
    db_path: Path | None = None,
    config_path: Path | None = None,
    transport: Transport | None = None,
) -> Runtime:
    """Build and wire all components."""
    config = load_config(config_path=config_path, vault_path=vault_path)

    if db_path is None:
        db_path = config.state.db

    vault = config.vault
    resolver = FolderResolver(label=vault.label, hint=vault.hint, extension=vault.extension)
    selector = NoteSelector(extension=vault.extension)
    builder = NoteTextBuilder(MarkdownRenderer(), preset=config.excerpt)

    transmitter = SyncTransmitter(
        transport or build_transport(config),
        max_full_text=config.transport.max_full_text,
    )

    sender_state = SenderState(SQLiteStore(db_path, SENDER_NAMESPACE))
    cache = SyncCache(SQLiteStore(db_path, RECEIVER_NAMESPACE))

    return Runtime(
        config=config,
        vault_override=vault_path,
        resolver=resolver,
        selector=selector,
        builder=builder,
        transmitter=transmitter,
        sender_state=sender_state,
        cache=cache,
    )
