"""
Domain subpackage for the networking feature.
"""

from .models import ConnectionEdge, ConnectionPath, Contact

__all__ = ["ConnectionEdge", "ConnectionPath", "Contact"]
