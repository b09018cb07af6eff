"""
SimpBot - Discord bot with per-guild command prefixes and moderation mutes.

This package provides the message ingestion and dispatch pipeline, the
discord.py client that feeds it, and the commands it can run.
"""

__version__ = "0.1.0"
