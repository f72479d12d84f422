"""
Node id allocation.

Ids are handed out per band: the next id of a band [min, max) is one past the
highest id already used in that band, so several disjoint bands can be
allocated independently.
"""

import logging

from graf.api.errors import IdBandExhaustedError
from graf.graph.node_operations import NodeOperations

logger = logging.getLogger(__name__)


def allocate_node_id(minimum: int, maximum: int, nodes: NodeOperations) -> int:
    """Return the id to use for a new node in the band [minimum, maximum).

    Args:
        minimum: Inclusive lower bound of the band
        maximum: Exclusive upper bound of the band
        nodes: Node operations bound to the current session

    Returns:
        minimum if the band is empty, else the highest id in the band + 1

    Raises:
        IdBandExhaustedError: If the highest id in the band is maximum - 1
    """
    highest = nodes.max_id_in_range(minimum, maximum)
    if highest is None:
        return minimum

    next_id = highest + 1
    if next_id >= maximum:
        logger.error(f"Node id band [{minimum}, {maximum}) is exhausted")
        raise IdBandExhaustedError(f"No free node id left in [{minimum}, {maximum})")
    return next_id
