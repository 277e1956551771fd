import random

import pytest

from nocsim.datastructs import Coord, FlitType, Packet
from nocsim.topology import NetworkConfig, Topology, id_to_coord
from nocsim.traffic import (
    TrafficDistribution,
    TrafficGenerator,
    fix_ranges,
    get_bit,
    log2ceil,
    set_bit,
)


class _FixedRandom(random.Random):
    def __init__(self, value):
        super().__init__(0)
        self.value = value

    def random(self):
        return self.value


def _config(**kwargs):
    base = dict(mesh_dim_x=4, mesh_dim_y=4, min_packet_size=2, max_packet_size=5,
                n_virtual_channels=2)
    base.update(kwargs)
    return NetworkConfig(**base)


def _gen(local_id=5, seed=1, **kwargs):
    return TrafficGenerator(local_id, _config(**kwargs), random.Random(seed))


def test_set_and_get_bit_round_trip():
    x = 0
    for w in (0, 3, 7):
        x = set_bit(x, w, 1)
        assert get_bit(x, w) == 1
    x = set_bit(x, 3, 0)
    assert get_bit(x, 3) == 0
    assert get_bit(x, 0) == 1


def test_set_bit_rejects_other_values():
    with pytest.raises(ValueError):
        set_bit(0, 1, 2)


def test_log2ceil():
    assert log2ceil(16) == 4.0
    assert log2ceil(17) == 5.0


def test_fix_ranges_clamps_into_mesh():
    config = _config()
    assert fix_ranges(Coord(-1, 7), config) == Coord(0, config.mesh_dim_y - 1)
    assert fix_ranges(Coord(2, 1), config) == Coord(2, 1)


def test_rand_int_and_size_in_range():
    gen = _gen()
    for _ in range(200):
        assert 3 <= gen.rand_int(3, 6) <= 6
        assert 2 <= gen.random_size() <= 5


def test_next_flit_sequence():
    gen = _gen()
    gen.packet_queue.append(Packet(1, 9, 1, 12.0, 3))
    flits = [gen.next_flit() for _ in range(3)]
    assert [f.flit_type for f in flits] == [FlitType.HEAD, FlitType.BODY, FlitType.TAIL]
    assert [f.sequence_no for f in flits] == [0, 1, 2]
    assert all(f.sequence_length == 3 and f.dst_id == 9 for f in flits)
    assert gen.queue_size() == 0


def test_single_flit_packet_is_head():
    gen = _gen()
    gen.packet_queue.append(Packet(1, 9, 0, 0.0, 1))
    assert gen.next_flit().flit_type is FlitType.HEAD
    assert gen.queue_size() == 0


def test_next_flit_empty_queue():
    with pytest.raises(IndexError):
        _gen().next_flit()


def test_can_shot_never_with_zero_rate():
    gen = _gen(packet_injection_rate=0.0)
    assert all(gen.can_shot(float(t)) is None for t in range(100))


def test_can_shot_never_transmit():
    gen = _gen(packet_injection_rate=1.0)
    gen.never_transmit = True
    assert gen.can_shot(0.0) is None


def test_can_shot_random_packet():
    gen = _gen(packet_injection_rate=1.0)
    for t in range(50):
        packet = gen.can_shot(float(t))
        assert packet.src_id == 5
        assert packet.dst_id != 5
        assert 0 <= packet.dst_id < 16
        assert 2 <= packet.size <= 5
        assert packet.flit_left == packet.size
        assert 0 <= packet.vc_id < 2
        assert packet.timestamp == float(t)


def test_can_shot_invalid_distribution():
    gen = _gen(packet_injection_rate=1.0, traffic_distribution="TRAFFIC_BOGUS")
    with pytest.raises(ValueError):
        gen.can_shot(0.0)


def test_distribution_names():
    assert TrafficDistribution("TRAFFIC_SHUFFLE") is TrafficDistribution.SHUFFLE


def test_hotspot_takes_all_traffic():
    gen = _gen(hotspots=[(12, 1.0)])
    for _ in range(20):
        assert gen.traffic_random(0.0).dst_id == 12


def test_traffic_random_delta_range():
    gen = TrafficGenerator(
        0, NetworkConfig(topology=Topology.BUTTERFLY, n_delta_tiles=8), random.Random(3)
    )
    for _ in range(50):
        assert 1 <= gen.traffic_random(0.0).dst_id <= 7


def test_traffic_test_destination():
    assert _gen().traffic_test(0.0).dst_id == 10


@pytest.mark.parametrize(
    "method",
    ["traffic_transpose1", "traffic_transpose2", "traffic_bit_reversal", "traffic_butterfly"],
)
def test_permutations_are_involutions(method):
    for node in range(16):
        first = getattr(_gen(node), method)(0.0).dst_id
        second = getattr(_gen(first), method)(0.0).dst_id
        assert second == node


def test_transpose2_swaps_coordinates():
    config = _config()
    for node in range(16):
        dst = _gen(node).traffic_transpose2(0.0).dst_id
        src_c, dst_c = id_to_coord(node, config), id_to_coord(dst, config)
        assert (dst_c.x, dst_c.y) == (src_c.y, src_c.x)


def test_shuffle_is_rotation():
    for node in range(16):
        current = node
        for _ in range(4):
            current = _gen(current).traffic_shuffle(0.0).dst_id
        assert current == node


def test_transpose_requires_mesh():
    gen = TrafficGenerator(9, NetworkConfig(topology=Topology.OMEGA), random.Random(0))
    with pytest.raises(ValueError):
        gen.traffic_transpose1(0.0)


def _hub_map():
    return {i: (0 if i < 8 else 1) for i in range(16)}


def test_traffic_local_stays_under_hub():
    gen = _gen(2, locality=1.0, hub_for_tile=_hub_map())
    for _ in range(30):
        dst = gen.traffic_local(0.0).dst_id
        assert dst != 2 and dst < 8


def test_traffic_local_leaves_hub():
    gen = _gen(2, locality=-1.0, hub_for_tile=_hub_map())
    for _ in range(30):
        assert gen.traffic_local(0.0).dst_id >= 8


def test_traffic_local_needs_hubs():
    with pytest.raises(ValueError):
        _gen(2, locality=1.0).traffic_local(0.0)


def test_roulette_values():
    config = _config(mesh_dim_x=2, mesh_dim_y=2)
    assert TrafficGenerator(0, config, _FixedRandom(0.0)).roulette() == 1
    assert TrafficGenerator(0, config, _FixedRandom(0.8)).roulette() == 2
    with pytest.raises(RuntimeError):
        TrafficGenerator(0, config, _FixedRandom(0.99)).roulette()


def test_find_random_destination_within_distance():
    config = _config()
    gen = TrafficGenerator(5, config, random.Random(7))
    start = id_to_coord(5, config)
    assert gen.find_random_destination(5, 0) == 5
    for hops in range(1, 6):
        dst = id_to_coord(gen.find_random_destination(5, hops), config)
        assert abs(dst.x - start.x) + abs(dst.y - start.y) <= hops


def test_traffic_ulocal_destination_in_mesh():
    gen = _gen(6, seed=11)
    for _ in range(30):
        try:
            packet = gen.traffic_ulocal(0.0)
        except RuntimeError:
            continue
        assert 0 <= packet.dst_id < 16


def test_rx_process_alternating_bit():
    gen = _gen()
    assert gen.rx_process(True, True) is False
    assert gen.rx_process(False, True) is True
    assert gen.rx_process(False, True) is True
    assert gen.rx_process(False, False) is False


def test_tx_process_handshake():
    gen = _gen(packet_injection_rate=1.0, probability_of_retransmission=0.0,
               min_packet_size=3, max_packet_size=3)
    assert gen.tx_process(True, False, 0.0) is None
    assert gen.req_tx is False
    first = gen.tx_process(False, False, 1.0)
    assert first.flit_type is FlitType.HEAD
    assert gen.req_tx is True
    assert gen.tx_process(False, False, 2.0) is None
    assert gen.queue_size() == 1
    second = gen.tx_process(False, True, 3.0)
    assert second.flit_type is FlitType.BODY
    assert second.dst_id == first.dst_id