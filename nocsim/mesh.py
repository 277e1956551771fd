"""Geometric helpers a mesh router uses for adaptive decisions."""

from __future__ import annotations

from typing import Sequence

from .datastructs import DIRECTIONS, NOT_VALID, Coord, Direction, NoPData
from .topology import NetworkConfig, Topology, coord_to_id, id_to_coord

_OPPOSITE = {
    Direction.NORTH: Direction.SOUTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
    Direction.SOUTH: Direction.NORTH,
}


def reflex_direction(direction: int) -> Direction:
    """Return the opposite of a mesh direction."""
    try:
        return _OPPOSITE[Direction(direction)]
    except (KeyError, ValueError):
        raise ValueError(f"direction {direction} has no opposite") from None


def neighbor_id(node_id: int, direction: int, config: NetworkConfig) -> int:
    """Id of the neighbour of a mesh node, or NOT_VALID beyond the border."""
    if config.topology is not Topology.MESH:
        raise ValueError("neighbours are only defined on a mesh")
    coord = id_to_coord(node_id, config)
    x, y = coord.x, coord.y
    if direction == Direction.NORTH:
        if y == 0:
            return NOT_VALID
        y -= 1
    elif direction == Direction.SOUTH:
        if y == config.mesh_dim_y - 1:
            return NOT_VALID
        y += 1
    elif direction == Direction.EAST:
        if x == config.mesh_dim_x - 1:
            return NOT_VALID
        x += 1
    elif direction == Direction.WEST:
        if x == 0:
            return NOT_VALID
        x -= 1
    else:
        raise ValueError(f"direction not valid: {direction}")
    return coord_to_id(Coord(x, y), config)


def nop_score(nop_data: NoPData, nop_channels: Sequence[int]) -> int:
    """Sum of free slots over the channels the neighbour reports as available."""
    return sum(
        status.free_slots
        for status in (nop_data.channel_status_neighbor[ch] for ch in nop_channels)
        if status.available
    )


def in_congestion(free_slots_neighbor: Sequence[int], config: NetworkConfig) -> bool:
    """True when some neighbour buffer is filled beyond the dyad threshold."""
    limit = int(config.buffer_depth * config.dyad_threshold)
    for free_slots in free_slots_neighbor[:DIRECTIONS]:
        if free_slots == NOT_VALID:
            continue
        if config.buffer_depth - free_slots > limit:
            return True
    return False