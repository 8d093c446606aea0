"""ASGI server integration."""
