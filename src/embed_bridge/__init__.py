"""
Embed Bridge - makes the YouTube iframe API behave like a media element.
Contains the embed-API loader, the per-element renderer adapter,
state translation and progress polling.
"""

__version__ = "0.1.0"
