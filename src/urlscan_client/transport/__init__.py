# src/urlscan_client/transport/__init__.py

from .http import HttpTransport

__all__ = ["HttpTransport"]
