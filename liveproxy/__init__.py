"""
Live Proxy

Transparent HTTP(S) forward proxy for browser players and live-stream clients.
"""

__version__ = "0.1.0"
