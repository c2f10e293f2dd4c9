"""
Wire codec.

Components:
- models.py: request/response records for scan submission and search
- scan_result.py: tolerant scan report document + flat sub-records
- wire.py: JSON encode/decode entry points
"""
