"""Storage adapters."""

from lost_and_found.adapters.storage.yaml_store import YamlStore

__all__ = ["YamlStore"]
