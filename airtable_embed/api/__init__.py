"""
API module for airtable_embed.

This module contains the HTTP layer for hosts that call the plugin over
HTTP. It uses the render pipeline of `airtable_embed.plugin`.
"""

from .app import app_factory

__all__ = ["app_factory"]
