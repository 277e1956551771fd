"""Energy accounting for routers and radio hubs.

Every event (a buffer push, a routing decision, a link traversal and so on)
adds its configured energy to a breakdown entry. Dynamic entries collect
per-event energies, static entries collect per-cycle leakage and biasing.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from .datastructs import NOT_VALID
from .power_config import HubPowerParams, PowerConfig, RouterPowerParams


class DynamicEntry(IntEnum):
    """Entries of the dynamic energy breakdown."""

    BUFFER_PUSH_PWR_D = 0
    BUFFER_POP_PWR_D = 1
    BUFFER_FRONT_PWR_D = 2
    BUFFER_TO_TILE_PUSH_PWR_D = 3
    BUFFER_TO_TILE_POP_PWR_D = 4
    BUFFER_TO_TILE_FRONT_PWR_D = 5
    BUFFER_FROM_TILE_PUSH_PWR_D = 6
    BUFFER_FROM_TILE_POP_PWR_D = 7
    BUFFER_FROM_TILE_FRONT_PWR_D = 8
    ANTENNA_BUFFER_PUSH_PWR_D = 9
    ANTENNA_BUFFER_POP_PWR_D = 10
    ANTENNA_BUFFER_FRONT_PWR_D = 11
    ROUTING_PWR_D = 12
    SELECTION_PWR_D = 13
    CROSSBAR_PWR_D = 14
    LINK_R2R_PWR_D = 15
    LINK_R2H_PWR_D = 16
    NI_PWR_D = 17
    WIRELESS_TX = 18
    WIRELESS_DYNAMIC_RX_PWR = 19
    WIRELESS_SNOOPING = 20

    @property
    def label(self) -> str:
        return self.name.lower()


class StaticEntry(IntEnum):
    """Entries of the static (leakage and biasing) energy breakdown."""

    TRANSCEIVER_RX_PWR_BIASING = 0
    TRANSCEIVER_TX_PWR_BIASING = 1
    BUFFER_ROUTER_PWR_S = 2
    BUFFER_TO_TILE_PWR_S = 3
    BUFFER_FROM_TILE_PWR_S = 4
    ANTENNA_BUFFER_PWR_S = 5
    LINK_R2H_PWR_S = 6
    ROUTING_PWR_S = 7
    SELECTION_PWR_S = 8
    CROSSBAR_PWR_S = 9
    NI_PWR_S = 10
    TRANSCEIVER_RX_PWR_S = 11
    TRANSCEIVER_TX_PWR_S = 12

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass
class PowerBreakdownEntry:
    """Accumulated energy of one breakdown entry, in Joule."""

    label: str
    value: float = 0.0


class Power:
    """Energy model of one router or hub."""

    def __init__(self, config: PowerConfig, use_power_manager: bool = False):
        self.config = config
        self.use_power_manager = use_power_manager
        self._router = RouterPowerParams(*([0.0] * 16))
        self._hub = HubPowerParams(
            *([0.0] * 12), {}, *([0.0] * 7), 0.0, 0.0
        )
        self._link_r2h_pwr_s = 0.0
        self._link_r2h_pwr_d = 0.0
        self._dynamic = {entry: 0.0 for entry in DynamicEntry}
        self._static = {entry: 0.0 for entry in StaticEntry}
        self._sleep_end_cycle = NOT_VALID

    def configure_router(
        self,
        link_width: int,
        buffer_depth: int,
        buffer_item_size: int,
        routing_function: str,
        selection_function: str,
    ) -> None:
        """Load the energies of a router; raises PowerConfigError on gaps."""
        self._router = self.config.router_params(
            link_width, buffer_depth, buffer_item_size, routing_function, selection_function
        )
        self._link_r2h_pwr_s = self._router.link_r2h_pwr_s
        self._link_r2h_pwr_d = self._router.link_r2h_pwr_d

    def configure_hub(
        self,
        link_width: int,
        buffer_to_tile_depth: int,
        buffer_from_tile_depth: int,
        buffer_item_size: int,
        antenna_buffer_rx_depth: int,
        antenna_buffer_tx_depth: int,
        antenna_buffer_item_size: int,
        data_rate_gbs: float,
    ) -> None:
        """Load the energies of a radio hub; raises PowerConfigError on gaps."""
        self._hub = self.config.hub_params(
            link_width,
            buffer_to_tile_depth,
            buffer_from_tile_depth,
            buffer_item_size,
            antenna_buffer_rx_depth,
            antenna_buffer_tx_depth,
            antenna_buffer_item_size,
            data_rate_gbs,
        )
        self._link_r2h_pwr_s = self._hub.link_r2h_pwr_s
        self._link_r2h_pwr_d = self._hub.link_r2h_pwr_d

    def _add_dynamic(self, entry: DynamicEntry, energy: float) -> None:
        self._dynamic[entry] += energy

    def _add_static(self, entry: StaticEntry, energy: float) -> None:
        self._static[entry] += energy

    # Router buffers
    def buffer_router_push(self) -> None:
        self._add_dynamic(DynamicEntry.BUFFER_PUSH_PWR_D, self._router.buffer_push_pwr_d)

    def buffer_router_pop(self) -> None:
        self._add_dynamic(DynamicEntry.BUFFER_POP_PWR_D, self._router.buffer_pop_pwr_d)

    def buffer_router_front(self) -> None:
        self._add_dynamic(DynamicEntry.BUFFER_FRONT_PWR_D, self._router.buffer_front_pwr_d)

    # Hub buffers towards the tile
    def buffer_to_tile_push(self) -> None:
        self._add_dynamic(
            DynamicEntry.BUFFER_TO_TILE_PUSH_PWR_D, self._hub.buffer_to_tile_push_pwr_d
        )

    def buffer_to_tile_pop(self) -> None:
        self._add_dynamic(
            DynamicEntry.BUFFER_TO_TILE_POP_PWR_D, self._hub.buffer_to_tile_pop_pwr_d
        )

    def buffer_to_tile_front(self) -> None:
        self._add_dynamic(
            DynamicEntry.BUFFER_TO_TILE_FRONT_PWR_D, self._hub.buffer_to_tile_front_pwr_d
        )

    # Hub buffers from the tile
    def buffer_from_tile_push(self) -> None:
        self._add_dynamic(
            DynamicEntry.BUFFER_FROM_TILE_PUSH_PWR_D, self._hub.buffer_from_tile_push_pwr_d
        )

    def buffer_from_tile_pop(self) -> None:
        self._add_dynamic(
            DynamicEntry.BUFFER_FROM_TILE_POP_PWR_D, self._hub.buffer_from_tile_pop_pwr_d
        )

    def buffer_from_tile_front(self) -> None:
        self._add_dynamic(
            DynamicEntry.BUFFER_FROM_TILE_FRONT_PWR_D, self._hub.buffer_from_tile_front_pwr_d
        )

    # Antenna buffers
    def antenna_buffer_push(self) -> None:
        self._add_dynamic(
            DynamicEntry.ANTENNA_BUFFER_PUSH_PWR_D, self._hub.antenna_buffer_push_pwr_d
        )

    def antenna_buffer_pop(self) -> None:
        self._add_dynamic(
            DynamicEntry.ANTENNA_BUFFER_POP_PWR_D, self._hub.antenna_buffer_pop_pwr_d
        )

    def antenna_buffer_front(self) -> None:
        self._add_dynamic(
            DynamicEntry.ANTENNA_BUFFER_FRONT_PWR_D, self._hub.antenna_buffer_front_pwr_d
        )

    # Wireless
    def wireless_tx(self, src: int, dst: int, length: int) -> None:
        """Account one wireless transmission at the default energy per flit."""
        self._add_dynamic(DynamicEntry.WIRELESS_TX, self._hub.default_tx_energy)

    def wireless_dynamic_rx(self) -> None:
        self._add_dynamic(DynamicEntry.WIRELESS_DYNAMIC_RX_PWR, self._hub.wireless_rx_pwr)

    def wireless_snooping(self) -> None:
        self._add_dynamic(DynamicEntry.WIRELESS_SNOOPING, self._hub.wireless_snooping)

    # Router logic
    def routing(self) -> None:
        self._add_dynamic(DynamicEntry.ROUTING_PWR_D, self._router.routing_pwr_d)

    def selection(self) -> None:
        self._add_dynamic(DynamicEntry.SELECTION_PWR_D, self._router.selection_pwr_d)

    def crossbar(self) -> None:
        self._add_dynamic(DynamicEntry.CROSSBAR_PWR_D, self._router.crossbar_pwr_d)

    def r2h_link(self) -> None:
        self._add_dynamic(DynamicEntry.LINK_R2H_PWR_D, self._link_r2h_pwr_d)

    def r2r_link(self) -> None:
        self._add_dynamic(DynamicEntry.LINK_R2R_PWR_D, self._router.link_r2r_pwr_d)

    def network_interface(self) -> None:
        self._add_dynamic(DynamicEntry.NI_PWR_D, self._router.ni_pwr_d)

    # Static contributions, one call per cycle and per instance
    def leakage_buffer_router(self) -> None:
        self._add_static(StaticEntry.BUFFER_ROUTER_PWR_S, self._router.buffer_pwr_s)

    def leakage_buffer_to_tile(self) -> None:
        self._add_static(StaticEntry.BUFFER_TO_TILE_PWR_S, self._hub.buffer_to_tile_pwr_s)

    def leakage_buffer_from_tile(self) -> None:
        self._add_static(StaticEntry.BUFFER_FROM_TILE_PWR_S, self._hub.buffer_from_tile_pwr_s)

    def leakage_antenna_buffer(self) -> None:
        self._add_static(StaticEntry.ANTENNA_BUFFER_PWR_S, self._hub.antenna_buffer_pwr_s)

    def leakage_link_router_to_router(self) -> None:
        """Router-to-router link leakage is not part of the breakdown."""

    def leakage_link_router_to_hub(self) -> None:
        self._add_static(StaticEntry.LINK_R2H_PWR_S, self._link_r2h_pwr_s)

    def leakage_router(self) -> None:
        """Leakage of the parts a router has exactly once."""
        self._add_static(StaticEntry.ROUTING_PWR_S, self._router.routing_pwr_s)
        self._add_static(StaticEntry.SELECTION_PWR_S, self._router.selection_pwr_s)
        self._add_static(StaticEntry.CROSSBAR_PWR_S, self._router.crossbar_pwr_s)
        self._add_static(StaticEntry.NI_PWR_S, self._router.ni_pwr_s)

    def leakage_transceiver_rx(self) -> None:
        self._add_static(StaticEntry.TRANSCEIVER_RX_PWR_S, self._hub.transceiver_rx_pwr_s)

    def leakage_transceiver_tx(self) -> None:
        self._add_static(StaticEntry.TRANSCEIVER_TX_PWR_S, self._hub.transceiver_tx_pwr_s)

    def biasing_rx(self) -> None:
        self._add_static(
            StaticEntry.TRANSCEIVER_RX_PWR_BIASING, self._hub.transceiver_rx_pwr_biasing
        )

    def biasing_tx(self) -> None:
        self._add_static(
            StaticEntry.TRANSCEIVER_TX_PWR_BIASING, self._hub.transceiver_tx_pwr_biasing
        )

    # Totals
    def dynamic_power(self) -> float:
        return sum(self._dynamic.values())

    def static_power(self) -> float:
        return sum(self._static.values())

    def total_power(self) -> float:
        return self.dynamic_power() + self.static_power()

    def dynamic_breakdown(self) -> list[PowerBreakdownEntry]:
        return [PowerBreakdownEntry(e.label, v) for e, v in self._dynamic.items()]

    def static_breakdown(self) -> list[PowerBreakdownEntry]:
        return [PowerBreakdownEntry(e.label, v) for e, v in self._static.items()]

    # Power management
    def rx_sleep(self, now_cycle: int, cycles: int) -> None:
        """Put the receiver to sleep for ``cycles`` cycles from ``now_cycle``."""
        self._sleep_end_cycle = int(now_cycle) + cycles

    def is_sleeping(self, now_cycle: int) -> bool:
        if not self.use_power_manager:
            raise RuntimeError("sleep state is only tracked with the power manager enabled")
        return int(now_cycle) < self._sleep_end_cycle