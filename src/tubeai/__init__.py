"""
tubeai: content idea generation for YouTube channels.

This package resolves a YouTube channel, analyzes its recent uploads for topics,
cross-references those topics against news and Reddit discussions, and produces
five structured video ideas.
"""

__version__ = "0.1.0"
__author__ = "tubeai"
__description__ = "Content idea generation for YouTube channels"
