"""Network geometry, radio-hub membership and shared helpers."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from .datastructs import Coord


class Topology(Enum):
    MESH = "MESH"
    BUTTERFLY = "BUTTERFLY"
    BASELINE = "BASELINE"
    OMEGA = "OMEGA"


@dataclass
class HubChannels:
    """Radio channels a hub transmits and receives on."""

    tx_channels: list[int] = field(default_factory=list)
    rx_channels: list[int] = field(default_factory=list)


@dataclass
class NetworkConfig:
    """Parameters shared by all components of a simulated network."""

    topology: Topology = Topology.MESH
    mesh_dim_x: int = 4
    mesh_dim_y: int = 4
    n_delta_tiles: int = 8
    n_virtual_channels: int = 1
    buffer_depth: int = 4
    flit_size: int = 32
    min_packet_size: int = 8
    max_packet_size: int = 8
    packet_injection_rate: float = 0.01
    probability_of_retransmission: float = 0.01
    traffic_distribution: str = "TRAFFIC_RANDOM"
    hotspots: list[tuple[int, float]] = field(default_factory=list)
    locality: float = 0.1
    clock_period_ps: int = 1000
    reset_time: int = 1000
    dyad_threshold: float = 0.6
    max_volume_to_be_drained: int = 0
    use_winoc: bool = False
    winoc_dst_hops: int = 0
    r2r_link_length: float = 2.0
    r2h_link_length: float = 2.0
    hub_for_tile: dict[int, int] = field(default_factory=dict)
    hub_configuration: dict[int, HubChannels] = field(default_factory=dict)


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _cmod(a: int, b: int) -> int:
    return a - b * _cdiv(a, b)


def id_to_coord(node_id: int, config: NetworkConfig) -> Coord:
    """Convert a node id into its coordinates for the configured topology."""
    if config.topology is Topology.MESH:
        x = _cmod(node_id, config.mesh_dim_x)
        y = _cdiv(node_id, config.mesh_dim_x)
        if x >= config.mesh_dim_x or y >= config.mesh_dim_y:
            raise ValueError(f"node {node_id} lies outside the mesh")
        return Coord(x, y)
    half = config.n_delta_tiles // 2
    offset = node_id - config.n_delta_tiles
    x = _cdiv(offset, half)
    y = _cmod(offset, half)
    if x >= math.log2(config.n_delta_tiles) or y >= half:
        raise ValueError(f"node {node_id} lies outside the delta network")
    return Coord(x, y)


def coord_to_id(coord: Coord, config: NetworkConfig) -> int:
    """Convert coordinates back into a node id."""
    if config.topology is Topology.MESH:
        node_id = coord.y * config.mesh_dim_x + coord.x
        if node_id >= config.mesh_dim_x * config.mesh_dim_y:
            raise ValueError(f"coordinates {coord} lie outside the mesh")
        return node_id
    half = config.n_delta_tiles // 2
    node_id = coord.x * half + coord.y + config.n_delta_tiles
    if node_id <= config.n_delta_tiles - 1:
        raise ValueError(f"coordinates {coord} do not name a switch")
    return node_id


def tile_to_hub(node_id: int, config: NetworkConfig) -> int:
    """Return the radio hub a tile is attached to."""
    try:
        return config.hub_for_tile[node_id]
    except KeyError:
        raise ValueError(f"tile {node_id} is not connected to any hub") from None


def same_radio_hub(id1: int, id2: int, config: NetworkConfig) -> bool:
    return tile_to_hub(id1, config) == tile_to_hub(id2, config)


def has_radio_hub(node_id: int, config: NetworkConfig) -> bool:
    return node_id in config.hub_for_tile


def is_switch(node_id: int, config: NetworkConfig) -> bool:
    n = config.n_delta_tiles
    return node_id < (n // 2) * math.log2(n)


def format_map(label: str, mapping: Mapping[str, float]) -> str:
    """Render a name-to-value table in scientific notation, keys sorted."""
    lines = [f"{label} = ["]
    lines.extend(f"\t{mapping[key]:.6e}\t % {key}" for key in sorted(mapping))
    lines.append("];")
    return "\n".join(lines) + "\n"