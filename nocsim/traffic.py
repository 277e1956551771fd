"""Traffic generation and flit injection at a processing element."""

from __future__ import annotations

import math
import random
from collections import deque
from enum import Enum

from .datastructs import NOT_VALID, Coord, Flit, FlitType, Packet
from .topology import NetworkConfig, Topology, coord_to_id, id_to_coord, same_radio_hub


class TrafficDistribution(Enum):
    """Destination distributions a processing element can draw packets from."""

    RANDOM = "TRAFFIC_RANDOM"
    TRANSPOSE1 = "TRAFFIC_TRANSPOSE1"
    TRANSPOSE2 = "TRAFFIC_TRANSPOSE2"
    BIT_REVERSAL = "TRAFFIC_BIT_REVERSAL"
    SHUFFLE = "TRAFFIC_SHUFFLE"
    BUTTERFLY = "TRAFFIC_BUTTERFLY"
    LOCAL = "TRAFFIC_LOCAL"
    ULOCAL = "TRAFFIC_ULOCAL"


def set_bit(x: int, w: int, v: int) -> int:
    """Return ``x`` with bit ``w`` set to ``v`` (0 or 1)."""
    mask = 1 << w
    if v == 1:
        return x | mask
    if v == 0:
        return x & ~mask
    raise ValueError(f"bit value must be 0 or 1, not {v}")


def get_bit(x: int, w: int) -> int:
    return (x >> w) & 1


def log2ceil(x: float) -> float:
    """Smallest whole number of bits needed to count ``x`` values."""
    return float(math.ceil(math.log(x) / math.log(2.0)))


def fix_ranges(dst: Coord, config: NetworkConfig) -> Coord:
    """Clamp coordinates into the mesh."""
    x = min(max(dst.x, 0), config.mesh_dim_x - 1)
    y = min(max(dst.y, 0), config.mesh_dim_y - 1)
    return Coord(x, y)


def _require_mesh(config: NetworkConfig, what: str) -> None:
    if config.topology is not Topology.MESH:
        raise ValueError(f"{what} is only defined on a mesh")


class TrafficGenerator:
    """Packet source and sink of one tile.

    Packets are generated according to the configured distribution and
    sent one flit per handshake using the alternating bit protocol.
    """

    def __init__(
        self,
        local_id: int,
        config: NetworkConfig,
        rng: random.Random | None = None,
    ):
        self.local_id = local_id
        self.config = config
        self.rng = rng if rng is not None else random.Random()
        self.packet_queue: deque[Packet] = deque()
        self.current_level_rx = False
        self.current_level_tx = False
        self.req_tx = False
        self.transmitted_at_previous_cycle = False
        self.never_transmit = False

    # Random helpers
    def rand_int(self, low: int, high: int) -> int:
        """Uniform integer in the closed range [low, high]."""
        return self.rng.randint(low, high)

    def random_size(self) -> int:
        return self.rand_int(self.config.min_packet_size, self.config.max_packet_size)

    def _random_vc(self) -> int:
        return self.rand_int(0, self.config.n_virtual_channels - 1)

    def _packet(self, dst_id: int, now: float, vc_first: bool = False) -> Packet:
        if vc_first:
            vc = self._random_vc()
            size = self.random_size()
        else:
            size = self.random_size()
            vc = self._random_vc()
        return Packet(self.local_id, dst_id, vc, now, size)

    # Handshake processes
    def rx_process(self, reset: bool, req_rx: bool) -> bool:
        """Accept an incoming flit if one is offered; return the ack level."""
        if reset:
            self.current_level_rx = False
            return False
        if bool(req_rx) == (not self.current_level_rx):
            self.current_level_rx = not self.current_level_rx
        return self.current_level_rx

    def tx_process(self, reset: bool, ack_tx: bool, now: float) -> Flit | None:
        """Run one transmit cycle; return the flit sent, if any."""
        if reset:
            self.req_tx = False
            self.current_level_tx = False
            self.transmitted_at_previous_cycle = False
            return None
        packet = self.can_shot(now)
        if packet is not None:
            self.packet_queue.append(packet)
            self.transmitted_at_previous_cycle = True
        else:
            self.transmitted_at_previous_cycle = False

        if bool(ack_tx) == self.current_level_tx and self.packet_queue:
            flit = self.next_flit()
            self.current_level_tx = not self.current_level_tx
            self.req_tx = self.current_level_tx
            return flit
        return None

    def can_shot(self, now: float) -> Packet | None:
        """Decide whether a new packet is generated this cycle and return it."""
        if self.never_transmit:
            return None
        if self.transmitted_at_previous_cycle:
            threshold = self.config.probability_of_retransmission
        else:
            threshold = self.config.packet_injection_rate
        if not self.rng.random() < threshold:
            return None
        try:
            distribution = TrafficDistribution(self.config.traffic_distribution)
        except ValueError:
            raise ValueError(
                f"invalid traffic distribution: {self.config.traffic_distribution}"
            ) from None
        generators = {
            TrafficDistribution.RANDOM: self.traffic_random,
            TrafficDistribution.TRANSPOSE1: self.traffic_transpose1,
            TrafficDistribution.TRANSPOSE2: self.traffic_transpose2,
            TrafficDistribution.BIT_REVERSAL: self.traffic_bit_reversal,
            TrafficDistribution.SHUFFLE: self.traffic_shuffle,
            TrafficDistribution.BUTTERFLY: self.traffic_butterfly,
            TrafficDistribution.LOCAL: self.traffic_local,
            TrafficDistribution.ULOCAL: self.traffic_ulocal,
        }
        return generators[distribution](now)

    def next_flit(self) -> Flit:
        """Take the next flit of the packet at the head of the queue."""
        if not self.packet_queue:
            raise IndexError("no packet waiting to be sent")
        packet = self.packet_queue[0]
        if packet.size == packet.flit_left:
            flit_type = FlitType.HEAD
        elif packet.flit_left == 1:
            flit_type = FlitType.TAIL
        else:
            flit_type = FlitType.BODY
        flit = Flit(
            src_id=packet.src_id,
            dst_id=packet.dst_id,
            vc_id=packet.vc_id,
            flit_type=flit_type,
            sequence_no=packet.size - packet.flit_left,
            sequence_length=packet.size,
            timestamp=packet.timestamp,
            hop_no=0,
            hub_relay_node=NOT_VALID,
        )
        packet.flit_left -= 1
        if packet.flit_left == 0:
            self.packet_queue.popleft()
        return flit

    def queue_size(self) -> int:
        return len(self.packet_queue)

    # Destination distributions
    def traffic_random(self, now: float) -> Packet:
        """Uniform destinations, with optional hotspots taking a share."""
        if self.config.topology is Topology.MESH:
            max_id = self.config.mesh_dim_x * self.config.mesh_dim_y - 1
        else:
            max_id = self.config.n_delta_tiles - 1
        if max_id < 1:
            raise ValueError("the network has no destination other than the source")
        rnd = self.rng.random()
        range_start = 0.0
        while True:
            dst = self.rand_int(0, max_id)
            for hotspot_id, share in self.config.hotspots:
                if range_start <= rnd < range_start + share:
                    if self.local_id != hotspot_id:
                        dst = hotspot_id
                    break
                range_start += share
            if dst != self.local_id:
                break
        return self._packet(dst, now)

    def traffic_test(self, now: float) -> Packet:
        """Every packet goes to node 10."""
        return self._packet(10, now)

    def traffic_transpose1(self, now: float) -> Packet:
        _require_mesh(self.config, "transpose traffic")
        src = id_to_coord(self.local_id, self.config)
        dst = Coord(
            self.config.mesh_dim_x - 1 - src.y,
            self.config.mesh_dim_y - 1 - src.x,
        )
        dst_id = coord_to_id(fix_ranges(dst, self.config), self.config)
        return self._packet(dst_id, now, vc_first=True)

    def traffic_transpose2(self, now: float) -> Packet:
        _require_mesh(self.config, "transpose traffic")
        src = id_to_coord(self.local_id, self.config)
        dst = Coord(src.y, src.x)
        dst_id = coord_to_id(fix_ranges(dst, self.config), self.config)
        return self._packet(dst_id, now, vc_first=True)

    def _nbits(self) -> int:
        return int(log2ceil(float(self.config.mesh_dim_x * self.config.mesh_dim_y)))

    def traffic_bit_reversal(self, now: float) -> Packet:
        nbits = self._nbits()
        dnode = 0
        for i in range(nbits):
            dnode = set_bit(dnode, i, get_bit(self.local_id, nbits - i - 1))
        return self._packet(dnode, now, vc_first=True)

    def traffic_shuffle(self, now: float) -> Packet:
        nbits = self._nbits()
        dnode = 0
        for i in range(nbits - 1):
            dnode = set_bit(dnode, i + 1, get_bit(self.local_id, i))
        dnode = set_bit(dnode, 0, get_bit(self.local_id, nbits - 1))
        return self._packet(dnode, now, vc_first=True)

    def traffic_butterfly(self, now: float) -> Packet:
        nbits = self._nbits()
        dnode = 0
        for i in range(1, nbits - 1):
            dnode = set_bit(dnode, i, get_bit(self.local_id, i))
        dnode = set_bit(dnode, 0, get_bit(self.local_id, nbits - 1))
        dnode = set_bit(dnode, nbits - 1, get_bit(self.local_id, 0))
        return self._packet(dnode, now, vc_first=True)

    def traffic_local(self, now: float) -> Packet:
        """With probability ``locality`` stay under the own radio hub, else leave it."""
        rnd = self.rng.random()
        max_id = self.config.mesh_dim_x * self.config.mesh_dim_y
        if rnd <= self.config.locality:
            candidates = [
                i
                for i in range(max_id)
                if i != self.local_id and same_radio_hub(self.local_id, i, self.config)
            ]
        else:
            candidates = [
                i for i in range(max_id) if not same_radio_hub(self.local_id, i, self.config)
            ]
        if not candidates:
            raise ValueError(f"no local-traffic destination for node {self.local_id}")
        dst = candidates[self.rng.randrange(len(candidates))]
        return self._packet(dst, now)

    def roulette(self) -> int:
        """Draw a hop count, each one half as likely as the previous."""
        slices = self.config.mesh_dim_x + self.config.mesh_dim_y - 2
        r = self.rng.random()
        for i in range(1, slices + 1):
            if r < 1 - 1 / float(2 << i):
                return i
        raise RuntimeError(f"roulette draw {r} falls beyond {slices} slices")

    def find_random_destination(self, node_id: int, hops: int) -> int:
        """Walk ``hops`` random steps away from ``node_id`` inside the mesh."""
        _require_mesh(self.config, "random walks")
        inc_y = -1 if self.rng.randrange(2) else 1
        inc_x = -1 if self.rng.randrange(2) else 1
        start = id_to_coord(node_id, self.config)
        x, y = start.x, start.y
        for _ in range(hops):
            if x == 0 and inc_x < 0:
                inc_x = 0
            if x == self.config.mesh_dim_x - 1 and inc_x > 0:
                inc_x = 0
            if y == 0 and inc_y < 0:
                inc_y = 0
            if y == self.config.mesh_dim_y - 1 and inc_y > 0:
                inc_y = 0
            if self.rng.randrange(2):
                x += inc_x
            else:
                y += inc_y
        return coord_to_id(Coord(x, y), self.config)

    def traffic_ulocal(self, now: float) -> Packet:
        """Destinations at a random distance favouring short hops."""
        target_hops = self.roulette()
        dst = self.find_random_destination(self.local_id, target_hops)
        return self._packet(dst, now)