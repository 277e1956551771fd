"""Core value types exchanged between network components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

NOT_VALID = -1
DIRECTIONS = 4
DIRECTION_HUB_RELAY = 5000
DEFAULT_VC = 0
MAX_VIRTUAL_CHANNELS = 8


class Direction(IntEnum):
    """Router ports: four mesh directions, the local tile and the radio hub."""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3
    LOCAL = 4
    HUB = 5


@dataclass(frozen=True)
class Coord:
    """XY coordinates of a tile (or delta-network switch)."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"({self.x},{self.y})"


class FlitType(Enum):
    HEAD = "H"
    BODY = "B"
    TAIL = "T"

    @property
    def label(self) -> str:
        return self.name.upper()


@dataclass
class Packet:
    """A packet waiting to be split into flits."""

    src_id: int
    dst_id: int
    vc_id: int = 0
    timestamp: float = 0.0
    size: int = 1
    flit_left: int | None = None
    use_low_voltage_path: bool = False

    def __post_init__(self) -> None:
        if self.flit_left is None:
            self.flit_left = self.size


@dataclass
class RouteData:
    """Information needed to take a routing decision."""

    current_id: int
    src_id: int
    dst_id: int
    dir_in: int = NOT_VALID
    vc_id: int = 0


@dataclass
class ChannelStatus:
    free_slots: int = 0
    available: bool = False

    def __str__(self) -> str:
        return f"{'A' if self.available else 'N'}({self.free_slots})"


def _default_channel_statuses() -> list[ChannelStatus]:
    return [ChannelStatus() for _ in range(DIRECTIONS)]


@dataclass
class NoPData:
    """Neighbour-on-path status report sent by a router."""

    sender_id: int = NOT_VALID
    channel_status_neighbor: list[ChannelStatus] = field(
        default_factory=_default_channel_statuses
    )

    def __str__(self) -> str:
        statuses = "".join(f"{status} " for status in self.channel_status_neighbor)
        return f"      NoP data from [{self.sender_id}] [ {statuses}]\n"


def _default_mask() -> list[bool]:
    return [False] * MAX_VIRTUAL_CHANNELS


@dataclass
class BufferFullStatus:
    """Per-virtual-channel flags telling whether an input buffer is full."""

    mask: list[bool] = field(default_factory=_default_mask)

    def __str__(self) -> str:
        return "[" + "".join(f"{int(flag)} " for flag in self.mask) + "]\n"


@dataclass
class Flit:
    """The unit of flow control travelling through the network."""

    src_id: int
    dst_id: int
    vc_id: int = 0
    flit_type: FlitType = FlitType.HEAD
    sequence_no: int = 0
    sequence_length: int = 1
    payload: int = 0
    timestamp: float = 0.0
    hop_no: int = 0
    use_low_voltage_path: bool = False
    hub_relay_node: int = field(default=NOT_VALID, compare=False)

    def __str__(self) -> str:
        return (
            f"({self.flit_type.value}{self.sequence_no}, "
            f"{self.src_id}->{self.dst_id} VC {self.vc_id})"
        )

    def describe(self) -> str:
        """Return the verbose multi-line description of the flit."""
        return (
            "### FLIT ###\n"
            f"Source Tile[{self.src_id}]\n"
            f"Destination Tile[{self.dst_id}]\n"
            f"Flit Type is {self.flit_type.label}\n"
            f"Sequence no. {self.sequence_no}\n"
            "Payload printing not implemented (yet).\n"
            f"Unix timestamp at packet generation {self.timestamp:g}\n"
            "Total number of hops from source to destination is "
            f"{self.hop_no}\n"
        )