"""Power figures read from configuration, resolved for routers and hubs.

Dynamic values are energies in Joule per event. Static (leakage and
biasing) values are given in Watt and converted to Joule per clock cycle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

CROSSBAR_RADIX = 5


class PowerConfigError(LookupError):
    """Raised when the configuration lacks a figure the model needs."""


def watts_to_joules(watt: float, clock_period_ps: float) -> float:
    """Energy spent in one clock cycle by a constant power draw."""
    return watt * clock_period_ps * 1.0e-12


@dataclass
class BufferPowerConfig:
    """Buffer figures keyed by (depth, item size)."""

    leakage: dict[tuple[int, int], float] = field(default_factory=dict)
    push: dict[tuple[int, int], float] = field(default_factory=dict)
    front: dict[tuple[int, int], float] = field(default_factory=dict)
    pop: dict[tuple[int, int], float] = field(default_factory=dict)

    def entry(self, depth: int, item_size: int) -> tuple[float, float, float, float]:
        """Return (leakage, push, front, pop) for a buffer geometry."""
        key = (depth, item_size)
        values = []
        for name in ("leakage", "push", "front", "pop"):
            table: Mapping[tuple[int, int], float] = getattr(self, name)
            if key not in table:
                raise PowerConfigError(
                    f"no buffer {name} figure for depth {depth}, item size {item_size}"
                )
            values.append(table[key])
        return values[0], values[1], values[2], values[3]


@dataclass
class RouterPowerConfig:
    """Router figures as (static Watt, dynamic Joule) pairs."""

    routing_algorithm_pm: dict[str, tuple[float, float]] = field(default_factory=dict)
    selection_strategy_pm: dict[str, tuple[float, float]] = field(default_factory=dict)
    crossbar_pm: dict[tuple[int, int], tuple[float, float]] = field(default_factory=dict)
    network_interface: dict[int, tuple[float, float]] = field(default_factory=dict)


@dataclass
class HubPowerConfig:
    """Radio hub figures; leakage and biasing pairs are (rx, tx) in Watt."""

    transmitter_attenuation_map: dict[tuple[int, int], float] = field(default_factory=dict)
    default_tx_energy: float = 0.0
    rx_dynamic: float = 0.0
    rx_snooping: float = 0.0
    transceiver_leakage: tuple[float, float] = (0.0, 0.0)
    transceiver_biasing: tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True)
class RouterPowerParams:
    """Per-event energies of a router."""

    buffer_pwr_s: float
    buffer_push_pwr_d: float
    buffer_front_pwr_d: float
    buffer_pop_pwr_d: float
    routing_pwr_s: float
    routing_pwr_d: float
    selection_pwr_s: float
    selection_pwr_d: float
    crossbar_pwr_s: float
    crossbar_pwr_d: float
    ni_pwr_s: float
    ni_pwr_d: float
    link_r2r_pwr_s: float
    link_r2r_pwr_d: float
    link_r2h_pwr_s: float
    link_r2h_pwr_d: float


@dataclass(frozen=True)
class HubPowerParams:
    """Per-event energies of a radio hub."""

    buffer_to_tile_pwr_s: float
    buffer_to_tile_push_pwr_d: float
    buffer_to_tile_front_pwr_d: float
    buffer_to_tile_pop_pwr_d: float
    buffer_from_tile_pwr_s: float
    buffer_from_tile_push_pwr_d: float
    buffer_from_tile_front_pwr_d: float
    buffer_from_tile_pop_pwr_d: float
    antenna_buffer_pwr_s: float
    antenna_buffer_push_pwr_d: float
    antenna_buffer_front_pwr_d: float
    antenna_buffer_pop_pwr_d: float
    attenuation_map: dict[tuple[int, int], float]
    default_tx_energy: float
    wireless_rx_pwr: float
    wireless_snooping: float
    transceiver_rx_pwr_s: float
    transceiver_tx_pwr_s: float
    transceiver_rx_pwr_biasing: float
    transceiver_tx_pwr_biasing: float
    link_r2h_pwr_s: float
    link_r2h_pwr_d: float


@dataclass
class PowerConfig:
    """All power figures of a network plus the parameters they depend on."""

    buffer: BufferPowerConfig = field(default_factory=BufferPowerConfig)
    router: RouterPowerConfig = field(default_factory=RouterPowerConfig)
    hub: HubPowerConfig = field(default_factory=HubPowerConfig)
    link_bit_line: dict[float, tuple[float, float]] = field(default_factory=dict)
    clock_period_ps: float = 1000
    flit_size: int = 32
    r2r_link_length: float = 2.0
    r2h_link_length: float = 2.0

    def _w2j(self, watt: float) -> float:
        return watts_to_joules(watt, self.clock_period_ps)

    def _link(self, link_width: int, length: float) -> tuple[float, float]:
        try:
            static, dynamic = self.link_bit_line[length]
        except KeyError:
            raise PowerConfigError(f"no link figure for length {length}") from None
        return self._w2j(link_width * static), link_width * dynamic

    @staticmethod
    def _pair(table: Mapping, key, what: str) -> tuple[float, float]:
        try:
            return table[key]
        except KeyError:
            raise PowerConfigError(f"no {what} figure for {key!r}") from None

    def router_params(
        self,
        link_width: int,
        buffer_depth: int,
        buffer_item_size: int,
        routing_function: str,
        selection_function: str,
    ) -> RouterPowerParams:
        """Resolve the energies of a router with the given geometry."""
        leakage, push, front, pop = self.buffer.entry(buffer_depth, buffer_item_size)
        routing_s, routing_d = self._pair(
            self.router.routing_algorithm_pm, routing_function, "routing algorithm"
        )
        selection_s, selection_d = self._pair(
            self.router.selection_strategy_pm, selection_function, "selection strategy"
        )
        crossbar_s, crossbar_d = self._pair(
            self.router.crossbar_pm, (CROSSBAR_RADIX, self.flit_size), "crossbar"
        )
        ni_s, ni_d = self.router.network_interface.get(self.flit_size, (0.0, 0.0))
        r2r_s, r2r_d = self._link(link_width, self.r2r_link_length)
        r2h_s, r2h_d = self._link(link_width, self.r2h_link_length)
        return RouterPowerParams(
            buffer_pwr_s=self._w2j(leakage),
            buffer_push_pwr_d=push,
            buffer_front_pwr_d=front,
            buffer_pop_pwr_d=pop,
            routing_pwr_s=self._w2j(routing_s),
            routing_pwr_d=routing_d,
            selection_pwr_s=self._w2j(selection_s),
            selection_pwr_d=selection_d,
            crossbar_pwr_s=self._w2j(crossbar_s),
            crossbar_pwr_d=crossbar_d,
            ni_pwr_s=self._w2j(ni_s),
            ni_pwr_d=ni_d,
            link_r2r_pwr_s=r2r_s,
            link_r2r_pwr_d=r2r_d,
            link_r2h_pwr_s=r2h_s,
            link_r2h_pwr_d=r2h_d,
        )

    def hub_params(
        self,
        link_width: int,
        buffer_to_tile_depth: int,
        buffer_from_tile_depth: int,
        buffer_item_size: int,
        antenna_buffer_rx_depth: int,
        antenna_buffer_tx_depth: int,
        antenna_buffer_item_size: int,
        data_rate_gbs: float,
    ) -> HubPowerParams:
        """Resolve the energies of a radio hub with the given geometry.

        The antenna buffer figures are the average of the rx and tx buffers.
        """
        to_leak, to_push, to_front, to_pop = self.buffer.entry(
            buffer_to_tile_depth, buffer_item_size
        )
        from_leak, from_push, from_front, from_pop = self.buffer.entry(
            buffer_from_tile_depth, buffer_item_size
        )
        rx = self.buffer.entry(antenna_buffer_rx_depth, antenna_buffer_item_size)
        tx = self.buffer.entry(antenna_buffer_tx_depth, antenna_buffer_item_size)
        ant_leak, ant_push, ant_front, ant_pop = ((a + b) / 2 for a, b in zip(rx, tx))
        r2h_s, r2h_d = self._link(link_width, self.r2h_link_length)
        hub = self.hub
        return HubPowerParams(
            buffer_to_tile_pwr_s=self._w2j(to_leak),
            buffer_to_tile_push_pwr_d=to_push,
            buffer_to_tile_front_pwr_d=to_front,
            buffer_to_tile_pop_pwr_d=to_pop,
            buffer_from_tile_pwr_s=self._w2j(from_leak),
            buffer_from_tile_push_pwr_d=from_push,
            buffer_from_tile_front_pwr_d=from_front,
            buffer_from_tile_pop_pwr_d=from_pop,
            antenna_buffer_pwr_s=(self._w2j(rx[0]) + self._w2j(tx[0])) / 2,
            antenna_buffer_push_pwr_d=ant_push,
            antenna_buffer_front_pwr_d=ant_front,
            antenna_buffer_pop_pwr_d=ant_pop,
            attenuation_map=dict(hub.transmitter_attenuation_map),
            default_tx_energy=(hub.default_tx_energy / (1e9 * data_rate_gbs))
            * antenna_buffer_item_size,
            wireless_rx_pwr=antenna_buffer_item_size * hub.rx_dynamic,
            wireless_snooping=hub.rx_snooping,
            transceiver_rx_pwr_s=self._w2j(hub.transceiver_leakage[0]),
            transceiver_tx_pwr_s=self._w2j(hub.transceiver_leakage[1]),
            transceiver_rx_pwr_biasing=self._w2j(hub.transceiver_biasing[0]),
            transceiver_tx_pwr_biasing=self._w2j(hub.transceiver_biasing[1]),
            link_r2h_pwr_s=r2h_s,
            link_r2h_pwr_d=r2h_d,
        )