"""Token-ring medium access for the wireless channels of the radio hubs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum, IntEnum


class MacPolicy(Enum):
    TOKEN_PACKET = "TOKEN_PACKET"
    TOKEN_HOLD = "TOKEN_HOLD"
    TOKEN_MAX_HOLD = "TOKEN_MAX_HOLD"


class ChannelFlag(IntEnum):
    """Value a hub writes to tell the ring whether it keeps the token."""

    HOLD_CHANNEL = 1
    RELEASE_CHANNEL = 2


@dataclass
class ChannelConfig:
    """A radio channel: data rate in Gbit/s and its MAC policy words.

    ``mac_policy`` starts with the policy name; hold-based policies follow it
    with the maximum number of cycles a hub may keep the token.
    """

    data_rate: float
    mac_policy: list[str] = field(default_factory=lambda: [MacPolicy.TOKEN_PACKET.value])

    def __post_init__(self) -> None:
        if not self.mac_policy:
            raise ValueError("a MAC policy name is required")
        MacPolicy(self.mac_policy[0])

    @property
    def policy(self) -> MacPolicy:
        return MacPolicy(self.mac_policy[0])

    @property
    def max_hold_cycles(self) -> int:
        if len(self.mac_policy) < 2:
            raise ValueError(f"policy {self.mac_policy[0]} has no hold cycle count")
        return int(self.mac_policy[1])


@dataclass
class _Ring:
    hubs: list[int] = field(default_factory=list)
    position: int = 0
    hold_count: int = 0
    holder: int = 0
    expiration: int = 0
    flags: dict[int, int] = field(default_factory=dict)


class TokenRing:
    """Passes a token among the hubs attached to each wireless channel."""

    def __init__(
        self,
        channels: dict[int, ChannelConfig],
        flit_size: int = 32,
        clock_period_ps: float = 1000,
    ):
        self.channels = dict(channels)
        self.flit_size = flit_size
        self.clock_period_ps = clock_period_ps
        self._rings: dict[int, _Ring] = {}

    def _ring(self, channel: int) -> _Ring:
        try:
            return self._rings[channel]
        except KeyError:
            raise KeyError(f"no hub attached to channel {channel}") from None

    def policy(self, channel: int) -> tuple[MacPolicy, list[str]]:
        """Return the policy of a channel and its full list of policy words."""
        try:
            config = self.channels[channel]
        except KeyError:
            raise KeyError(f"channel {channel} is not configured") from None
        return config.policy, list(config.mac_policy)

    def attach_hub(self, channel: int, hub: int) -> None:
        """Add a hub to the ring of a channel; the first hub holds the token."""
        if channel not in self.channels:
            raise ValueError(f"channel {channel} is not configured")
        ring = self._rings.get(channel)
        if ring is None:
            ring = _Ring()
            config = self.channels[channel]
            if config.policy is not MacPolicy.TOKEN_PACKET:
                delay_ps = 1000 * self.flit_size / config.data_rate
                cycles = math.ceil(delay_ps / self.clock_period_ps)
                max_hold = config.max_hold_cycles
                if not cycles < max_hold:
                    raise ValueError(
                        f"channel {channel}: a flit takes {cycles} cycles, "
                        f"more than the {max_hold} hold cycles allowed"
                    )
                ring.hold_count = max_hold
            self._rings[channel] = ring
        ring.flags[hub] = 0
        ring.hubs.append(hub)
        ring.holder = ring.hubs[0]

    def token_holder(self, channel: int) -> int:
        return self._ring(channel).holder

    def token_expiration(self, channel: int) -> int:
        return self._ring(channel).expiration

    def set_flag(self, channel: int, hub: int, flag: int) -> None:
        self._ring(channel).flags[hub] = int(flag)

    def flag(self, channel: int, hub: int) -> int:
        return self._ring(channel).flags.get(hub, 0)

    def update_tokens(self, reset: bool = False) -> None:
        """Advance the tokens of every channel by one clock cycle."""
        for channel in sorted(self.channels):
            ring = self._rings.get(channel)
            if ring is None:
                continue
            if reset:
                ring.holder = ring.hubs[0]
                continue
            policy = self.channels[channel].policy
            if policy is MacPolicy.TOKEN_PACKET:
                self._update_packet(ring)
            elif policy is MacPolicy.TOKEN_HOLD:
                self._update_hold(channel, ring, check_release=False)
            else:
                self._update_hold(channel, ring, check_release=True)

    @staticmethod
    def _advance(ring: _Ring) -> None:
        ring.position = (ring.position + 1) % len(ring.hubs)
        ring.holder = ring.hubs[ring.position]

    def _update_packet(self, ring: _Ring) -> None:
        current = ring.hubs[ring.position]
        if ring.flags.get(current, 0) == ChannelFlag.RELEASE_CHANNEL:
            self._advance(ring)
            ring.flags[ring.holder] = int(ChannelFlag.HOLD_CHANNEL)

    def _update_hold(self, channel: int, ring: _Ring, check_release: bool) -> None:
        ring.hold_count -= 1
        # The early-release check looks the flag up by ring position.
        released = (
            check_release
            and ring.flags.get(ring.position, 0) == ChannelFlag.RELEASE_CHANNEL
        )
        if ring.hold_count == 0 or released:
            ring.hold_count = self.channels[channel].max_hold_cycles
            self._advance(ring)
        ring.expiration = ring.hold_count