"""
TCP transport for the metrics endpoint.
"""
from .server import MetricsServer, build_response

__all__ = ["MetricsServer", "build_response"]
