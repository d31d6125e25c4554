"""Async client for SharePoint list REST APIs with a per-user JSON document store."""

__version__ = "0.1.0"
