"""
Third-party lookup services used by command handlers.
"""

from simpbot.services.wikipedia import WikiPage, WikipediaError, WikipediaService

__all__ = ["WikiPage", "WikipediaError", "WikipediaService"]
