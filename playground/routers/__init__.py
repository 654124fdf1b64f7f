"""Playground routers package."""
