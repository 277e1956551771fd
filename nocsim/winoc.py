"""Routing decisions that use the wireless radio hubs."""

from __future__ import annotations

import dataclasses
import math
from typing import Any

from .datastructs import DIRECTION_HUB_RELAY, Coord, Direction, RouteData
from .topology import (
    HubChannels,
    NetworkConfig,
    Topology,
    coord_to_id,
    has_radio_hub,
    id_to_coord,
    same_radio_hub,
    tile_to_hub,
)


def toggle_kth_bit(n: int, k: int) -> int:
    """Flip bit ``k`` of ``n``, counting bits from 1."""
    return n ^ (1 << (k - 1))


def connected_hubs(src_hub: int, dst_hub: int, config: NetworkConfig) -> bool:
    """True when a transmit channel of ``src_hub`` is a receive channel of ``dst_hub``."""
    tx = config.hub_configuration.get(src_hub, HubChannels()).tx_channels
    rx = config.hub_configuration.get(dst_hub, HubChannels()).rx_channels
    return any(channel in rx for channel in tx)


def next_delta_hops(
    route_data: RouteData,
    config: NetworkConfig,
    routing_algorithm: Any,
    router: Any = None,
) -> list[int]:
    """List the nodes a packet visits in a delta network, ending at the destination."""
    if config.topology is Topology.MESH:
        raise ValueError("mesh topologies are not supported for delta hop computation")
    n = config.n_delta_tiles
    stages = int(math.log2(n))
    rd = dataclasses.replace(route_data)

    src = rd.src_id
    if config.topology is Topology.OMEGA:
        column = src if src < n // 2 else src - n // 2
    else:
        column = src >> 1

    current = coord_to_id(Coord(0, column), config)
    hops = [current]

    stage = 0
    while stage < stages - 1:
        y = id_to_coord(current, config).y
        rd.current_id = current
        direction = routing_algorithm.route(router, rd)
        bit_to_check = stages - stage - 1
        bit_checked = 1 if y & (1 << (bit_to_check - 1)) else 0
        new_y = toggle_kth_bit(y, bit_to_check) if bit_checked ^ direction[0] else y
        current = coord_to_id(Coord(stage + 1, new_y), config)
        hops.append(current)
        stage = id_to_coord(current, config).x

    hops.append(rd.dst_id)
    return hops


def wireless_directions(
    local_id: int,
    route_data: RouteData,
    config: NetworkConfig,
    routing_algorithm: Any,
    router: Any = None,
) -> list[int] | None:
    """Return the wireless output to take, or None when wired routing applies.

    The hub direction is chosen when the destination hangs off a reachable
    hub. With ``winoc_dst_hops`` above zero, a node up to that many hops
    before the destination on the delta path may serve as relay instead.
    """
    if not config.use_winoc or not has_radio_hub(local_id, config):
        return None

    dst = route_data.dst_id
    if has_radio_hub(dst, config) and not same_radio_hub(local_id, dst, config):
        dst_hub = tile_to_hub(dst, config)
        current_hub = tile_to_hub(route_data.current_id, config)
        if connected_hubs(dst_hub, current_hub, config):
            return [Direction.HUB]

    if config.winoc_dst_hops > 0:
        hops = next_delta_hops(route_data, config, routing_algorithm, router)
        dest_position = len(hops) - 1
        for distance in range(1, config.winoc_dst_hops + 1):
            position = dest_position - distance
            if position < 0:
                raise ValueError(
                    f"path to {dst} has fewer than {distance} hops before the destination"
                )
            candidate = hops[position]
            if has_radio_hub(candidate, config) and not same_radio_hub(
                local_id, candidate, config
            ):
                return [DIRECTION_HUB_RELAY + candidate]
    return None