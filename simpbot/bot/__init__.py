"""
Discord Bot Layer.

Adapts discord.py events and channel operations to the ingestion pipeline
and hosts the bot's commands.
"""

from simpbot.bot.client import SimpBot

__all__ = ["SimpBot"]
