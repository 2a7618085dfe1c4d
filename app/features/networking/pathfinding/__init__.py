"""
Connection path discovery and contact discovery filters.
"""

from .service import (
    build_path_description,
    filter_alumni,
    filter_influencers,
    find_connection_path,
)

__all__ = [
    "build_path_description",
    "filter_alumni",
    "filter_influencers",
    "find_connection_path",
]
