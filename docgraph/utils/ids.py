"""
ID generation utilities.
"""

import itertools
import uuid
from typing import Optional

_sequence = itertools.count(1)


def generate_id(prefix: Optional[str] = None) -> str:
    """
    Generate an ID that is unique for the lifetime of the process.

    A monotonically increasing counter is combined with a random suffix so
    ids also sort in creation order.

    Args:
        prefix: Optional prefix for the ID

    Returns:
        Unique ID string
    """
    uid = f"{next(_sequence):06d}_{uuid.uuid4().hex[:8]}"
    if prefix:
        return f"{prefix}_{uid}"
    return uid
