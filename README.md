# nocsim

Building blocks for simulating a network-on-chip (NoC) one clock cycle at a time:
the values that travel through the network, mesh and delta-network geometry, a
switch reservation table, synthetic traffic generation at a tile, per-node
statistics, an energy model for routers and radio hubs, and the token ring that
arbitrates the wireless channels between hubs.

The package is a library with no dependencies beyond the standard library. It has
no command-line program; you drive the components from your own simulation loop.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `nocsim.datastructs` | `Direction`, `Coord`, `FlitType`, `Packet`, `Flit`, `RouteData`, `ChannelStatus`, `NoPData`, `BufferFullStatus`, and constants such as `NOT_VALID` and `DIRECTION_HUB_RELAY` |
| `nocsim.topology` | `Topology`, `NetworkConfig`, `HubChannels`, and `id_to_coord`, `coord_to_id`, `has_radio_hub`, `same_radio_hub`, `tile_to_hub`, `is_switch`, `format_map` |
| `nocsim.mesh` | `reflex_direction`, `neighbor_id`, `nop_score`, `in_congestion` |
| `nocsim.winoc` | `toggle_kth_bit`, `connected_hubs`, `next_delta_hops`, `wireless_directions` |
| `nocsim.reservation` | `ReservationTable`, `Reservation`, `ReservationStatus`, `ReservationError` |
| `nocsim.traffic` | `TrafficGenerator`, `TrafficDistribution`, and `set_bit`, `get_bit`, `log2ceil`, `fix_ranges` |
| `nocsim.stats` | `Stats` and `CommHistory`: per-source delay, throughput and received-flit counters |
| `nocsim.power_config` | `PowerConfig`, `BufferPowerConfig`, `RouterPowerConfig`, `HubPowerConfig`, the resolved `RouterPowerParams` / `HubPowerParams`, `watts_to_joules`, `PowerConfigError` |
| `nocsim.power` | `Power`, with `DynamicEntry`, `StaticEntry` and `PowerBreakdownEntry` breakdowns |
| `nocsim.tokenring` | `TokenRing`, `ChannelConfig`, `MacPolicy`, `ChannelFlag` |

## Mesh geometry

```python
from nocsim.datastructs import Direction
from nocsim.mesh import neighbor_id, reflex_direction
from nocsim.topology import NetworkConfig, id_to_coord

config = NetworkConfig(mesh_dim_x=4, mesh_dim_y=4)
print(id_to_coord(5, config))                      # (1,1)
print(neighbor_id(5, Direction.NORTH, config))     # 1
print(neighbor_id(0, Direction.WEST, config))      # -1 (NOT_VALID): beyond the border
print(reflex_direction(Direction.EAST))            # Direction.WEST
```

## A reservation table

```python
from nocsim.reservation import Reservation, ReservationStatus, ReservationTable

table = ReservationTable(6)
r = Reservation(input=0, vc=0)
assert table.check_reservation(r, 2) is ReservationStatus.AVAILABLE
table.reserve(r, 2)
print(table.get_reservations(0))   # [(2, 0)]
table.release(r, 2)
```

Reserving a port that is not available, or releasing a reservation that was never
made, raises `ReservationError`. `update_index` moves every output on to its next
reservation, round robin; `dump` renders the table as text.

## Generating traffic

```python
import random

from nocsim.topology import NetworkConfig
from nocsim.traffic import TrafficGenerator

config = NetworkConfig(mesh_dim_x=4, mesh_dim_y=4, min_packet_size=4, max_packet_size=4)
gen = TrafficGenerator(local_id=1, config=config, rng=random.Random(1))
packet = gen.traffic_transpose2(now=0.0)
print(packet.dst_id)               # 4: (1,0) goes to (0,1)
```

`can_shot` draws a packet with the configured injection probability and the
distribution named by `NetworkConfig.traffic_distribution` (see
`TrafficDistribution`). `tx_process` runs one transmit cycle with the alternating
bit handshake and returns the flit sent, if any; `next_flit` splits the queued
packet into head, body and tail flits.

## Collecting statistics

```python
from nocsim.datastructs import Flit, FlitType
from nocsim.stats import Stats

stats = Stats(node_id=5, warm_up_time=0.0, reset_time=0.0)
stats.received_flit(120.0, Flit(src_id=1, dst_id=5, flit_type=FlitType.HEAD, timestamp=100.0))
print(stats.average_delay(1))      # 20.0
print(stats.received_packets())    # 1
```

`show_stats` writes a per-source table and the aggregated delay and throughput to a
text stream (standard output by default).

## Power model

`PowerConfig` holds the energy tables for buffers, routing and selection logic,
crossbars, network interfaces, links and radio hubs. A `Power` object is configured
from it with `configure_router` or `configure_hub`; event methods such as
`buffer_router_push`, `crossbar` or `leakage_router` then add their energies, and
`dynamic_power`, `static_power`, `total_power`, `dynamic_breakdown` and
`static_breakdown` read the results.

```python
from nocsim.power import Power
from nocsim.power_config import BufferPowerConfig, PowerConfig, RouterPowerConfig

key = (4, 32)
config = PowerConfig(
    buffer=BufferPowerConfig(
        leakage={key: 1e-3}, push={key: 2e-12}, front={key: 1e-12}, pop={key: 1e-12}
    ),
    router=RouterPowerConfig(
        routing_algorithm_pm={"XY": (1e-4, 1e-13)},
        selection_strategy_pm={"RANDOM": (1e-4, 1e-13)},
        crossbar_pm={(5, 32): (1e-3, 1e-12)},
    ),
    link_bit_line={2.0: (1e-6, 1e-14)},
)
power = Power(config)
power.configure_router(32, 4, 32, "XY", "RANDOM")
power.buffer_router_push()
print(power.dynamic_power())       # 2e-12
```

A configuration that has no entry for a requested buffer geometry, routing or
selection name, crossbar or link length raises `PowerConfigError`.

## Wireless channels

`TokenRing` passes a token among the hubs attached to each channel, following the
channel's `MacPolicy` (`TOKEN_PACKET`, `TOKEN_HOLD` or `TOKEN_MAX_HOLD`):

```python
from nocsim.tokenring import ChannelConfig, ChannelFlag, TokenRing

ring = TokenRing({0: ChannelConfig(data_rate=16, mac_policy=["TOKEN_PACKET"])})
ring.attach_hub(0, 10)
ring.attach_hub(0, 11)
print(ring.token_holder(0))        # 10
ring.set_flag(0, 10, ChannelFlag.RELEASE_CHANNEL)
ring.update_tokens()
print(ring.token_holder(0))        # 11
```

`nocsim.winoc.wireless_directions` decides whether a packet should leave through
the radio hub (or relay through a hub-connected node) instead of taking the wired
path; `next_delta_hops` lists the nodes a packet visits in a delta network.

## What the package does not do

- It contains no routing algorithms and no selection strategies, and no registry
  of them. Functions that need one, such as `next_delta_hops` and
  `wireless_directions`, take any object you pass with a
  `route(router, route_data)` method returning a list of directions.
- It has no router component that puts buffers, routing, selection, reservation,
  power and statistics together, and no flit buffers.
- It has no simulation kernel or clock and no command-line program: your own loop
  calls the per-cycle methods and supplies the current cycle.