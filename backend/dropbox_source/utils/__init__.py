"""Utility functions for dropbox-source."""

from dropbox_source.utils.ids import create_node_id

__all__ = [
    "create_node_id",
]
