"""Qanda - Prompt templates for a locally running language model.

Parse reusable prompt templates from markdown files, expand their
placeholders interactively or from scripted answers, and build the chat
request for the configured model backend.
"""

__version__ = "0.1.0"
