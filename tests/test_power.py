import pytest

from nocsim.power import DynamicEntry, Power, StaticEntry
from nocsim.power_config import (
    BufferPowerConfig,
    HubPowerConfig,
    PowerConfig,
    PowerConfigError,
    RouterPowerConfig,
)


def make_config() -> PowerConfig:
    buffer = BufferPowerConfig(
        leakage={(4, 32): 1e-4, (8, 32): 2e-4},
        push={(4, 32): 1e-12, (8, 32): 2e-12},
        front={(4, 32): 3e-13, (8, 32): 4e-13},
        pop={(4, 32): 5e-13, (8, 32): 6e-13},
    )
    router = RouterPowerConfig(
        routing_algorithm_pm={"XY": (1e-5, 7e-13)},
        selection_strategy_pm={"RANDOM": (2e-5, 8e-13)},
        crossbar_pm={(5, 32): (3e-5, 9e-13)},
        network_interface={32: (4e-5, 1.1e-12)},
    )
    hub = HubPowerConfig(
        default_tx_energy=2e-3,
        rx_dynamic=1e-14,
        rx_snooping=5e-15,
        transceiver_leakage=(1e-3, 2e-3),
        transceiver_biasing=(3e-3, 4e-3),
    )
    return PowerConfig(
        buffer=buffer,
        router=router,
        hub=hub,
        link_bit_line={2.0: (1e-6, 1e-14)},
        clock_period_ps=1000,
        flit_size=32,
    )


def router_power() -> Power:
    power = Power(make_config())
    power.configure_router(32, 4, 32, "XY", "RANDOM")
    return power


HUB_ARGS = (32, 4, 8, 32, 4, 8, 32, 16)


def hub_power() -> Power:
    power = Power(make_config())
    power.configure_hub(*HUB_ARGS)
    return power


def test_fresh_model_is_zero():
    power = Power(make_config())
    assert power.dynamic_power() == 0.0
    assert power.static_power() == 0.0
    assert power.total_power() == 0.0


def test_breakdown_labels_follow_entries():
    power = Power(make_config())
    dynamic = power.dynamic_breakdown()
    static = power.static_breakdown()
    assert len(dynamic) == len(DynamicEntry)
    assert len(static) == len(StaticEntry)
    assert dynamic[0].label == "buffer_push_pwr_d"
    assert static[-1].label == "transceiver_tx_pwr_s"
    assert [e.label for e in dynamic] == [e.label for e in DynamicEntry]


def test_events_before_configuration_add_nothing():
    power = Power(make_config())
    power.buffer_router_push()
    power.leakage_router()
    power.wireless_tx(0, 1, 4)
    assert power.total_power() == 0.0


def test_buffer_push_accumulates():
    power = router_power()
    power.buffer_router_push()
    power.buffer_router_push()
    entry = power.dynamic_breakdown()[DynamicEntry.BUFFER_PUSH_PWR_D]
    assert entry.value == pytest.approx(2e-12)
    assert power.dynamic_power() == pytest.approx(2e-12)


def test_router_dynamic_events_match_params():
    config = make_config()
    params = config.router_params(32, 4, 32, "XY", "RANDOM")
    power = router_power()
    power.routing()
    power.selection()
    power.crossbar()
    power.r2r_link()
    power.r2h_link()
    power.network_interface()
    expected = (
        params.routing_pwr_d
        + params.selection_pwr_d
        + params.crossbar_pwr_d
        + params.link_r2r_pwr_d
        + params.link_r2h_pwr_d
        + params.ni_pwr_d
    )
    assert power.dynamic_power() == pytest.approx(expected)


def test_leakage_router_matches_params():
    params = make_config().router_params(32, 4, 32, "XY", "RANDOM")
    power = router_power()
    power.leakage_router()
    expected = (
        params.routing_pwr_s + params.selection_pwr_s + params.crossbar_pwr_s + params.ni_pwr_s
    )
    assert power.static_power() == pytest.approx(expected)
    assert power.dynamic_power() == 0.0


def test_router_to_router_link_leakage_not_accounted():
    power = router_power()
    power.leakage_link_router_to_router()
    assert power.static_power() == 0.0
    power.leakage_link_router_to_hub()
    params = make_config().router_params(32, 4, 32, "XY", "RANDOM")
    assert power.static_power() == pytest.approx(params.link_r2h_pwr_s)


def test_total_is_sum():
    power = router_power()
    power.buffer_router_pop()
    power.leakage_buffer_router()
    assert power.total_power() == pytest.approx(power.dynamic_power() + power.static_power())
    assert power.static_power() > 0.0


def test_configure_router_missing_routing_raises():
    power = Power(make_config())
    with pytest.raises(PowerConfigError):
        power.configure_router(32, 4, 32, "NOPE", "RANDOM")


def test_configure_router_missing_buffer_raises():
    power = Power(make_config())
    with pytest.raises(PowerConfigError):
        power.configure_router(32, 16, 32, "XY", "RANDOM")


def test_hub_wireless_events_match_params():
    params = make_config().hub_params(*HUB_ARGS)
    power = hub_power()
    power.wireless_tx(0, 1, 4)
    power.wireless_dynamic_rx()
    power.wireless_snooping()
    breakdown = power.dynamic_breakdown()
    assert breakdown[DynamicEntry.WIRELESS_TX].value == pytest.approx(params.default_tx_energy)
    assert breakdown[DynamicEntry.WIRELESS_DYNAMIC_RX_PWR].value == pytest.approx(
        params.wireless_rx_pwr
    )
    assert breakdown[DynamicEntry.WIRELESS_SNOOPING].value == pytest.approx(5e-15)


def test_hub_static_events_match_params():
    params = make_config().hub_params(*HUB_ARGS)
    power = hub_power()
    power.biasing_rx()
    power.biasing_tx()
    power.leakage_transceiver_rx()
    power.leakage_transceiver_tx()
    power.leakage_antenna_buffer()
    power.leakage_buffer_to_tile()
    power.leakage_buffer_from_tile()
    expected = (
        params.transceiver_rx_pwr_biasing
        + params.transceiver_tx_pwr_biasing
        + params.transceiver_rx_pwr_s
        + params.transceiver_tx_pwr_s
        + params.antenna_buffer_pwr_s
        + params.buffer_to_tile_pwr_s
        + params.buffer_from_tile_pwr_s
    )
    assert power.static_power() == pytest.approx(expected)


def test_hub_buffer_events_match_params():
    params = make_config().hub_params(*HUB_ARGS)
    power = hub_power()
    power.buffer_to_tile_push()
    power.buffer_from_tile_pop()
    power.antenna_buffer_front()
    breakdown = power.dynamic_breakdown()
    assert breakdown[DynamicEntry.BUFFER_TO_TILE_PUSH_PWR_D].value == pytest.approx(
        params.buffer_to_tile_push_pwr_d
    )
    assert breakdown[DynamicEntry.BUFFER_FROM_TILE_POP_PWR_D].value == pytest.approx(
        params.buffer_from_tile_pop_pwr_d
    )
    assert breakdown[DynamicEntry.ANTENNA_BUFFER_FRONT_PWR_D].value == pytest.approx(
        params.antenna_buffer_front_pwr_d
    )


def test_is_sleeping_requires_power_manager():
    power = Power(make_config())
    with pytest.raises(RuntimeError):
        power.is_sleeping(0)


def test_rx_sleep_window():
    power = Power(make_config(), use_power_manager=True)
    assert power.is_sleeping(0) is False
    power.rx_sleep(10, 5)
    assert power.is_sleeping(14) is True
    assert power.is_sleeping(15) is False