"""
Persistence layer.

Stores per-guild command prefixes and per-user mute flags in SQLite. The
ingestion pipeline only reads through scoped sessions; writes come from the
administration CLI.
"""

from simpbot.storage.config_store import ConfigSession, ConfigStore
from simpbot.storage.models import MutedUser, Prefix

__all__ = ["ConfigStore", "ConfigSession", "MutedUser", "Prefix"]
