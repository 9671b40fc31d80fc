"""Adapters for upstream APIs, configuration and the web surface."""
