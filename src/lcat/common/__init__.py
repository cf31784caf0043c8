from pathlib import Path

from .catalog import MessageCatalog, find_project_root
from .messaging.bus import MessageBus
from .pointer import L, SemanticPointer

# --- Composition root for user-facing messages ---


def _create_catalog() -> MessageCatalog:
    # Project overrides first, packaged defaults last.
    project_root = find_project_root()
    assets_root = Path(__file__).parent / "assets"
    return MessageCatalog([project_root / ".lcat", assets_root])


catalog = _create_catalog()
bus = MessageBus(catalog)

__all__ = ["bus", "catalog", "L", "SemanticPointer", "MessageBus", "MessageCatalog"]
