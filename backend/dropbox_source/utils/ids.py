"""Stable id generation."""

from __future__ import annotations

import uuid

# Namespace for every id this source derives
NODE_ID_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://www.dropbox.com/dropbox-source")


def create_node_id(seed: str) -> str:
    """Derive a stable id from a seed string.

    The same seed always yields the same id, across runs and machines.
    """
    return str(uuid.uuid5(NODE_ID_NAMESPACE, seed))
