# src/urlscan_client/_version.py

__version__ = "0.1.0"
