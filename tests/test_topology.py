import pytest

from nocsim.datastructs import Coord
from nocsim.topology import (
    HubChannels,
    NetworkConfig,
    Topology,
    coord_to_id,
    format_map,
    has_radio_hub,
    id_to_coord,
    is_switch,
    same_radio_hub,
    tile_to_hub,
)


@pytest.fixture
def mesh():
    return NetworkConfig(topology=Topology.MESH, mesh_dim_x=4, mesh_dim_y=3)


@pytest.fixture
def delta():
    return NetworkConfig(topology=Topology.BUTTERFLY, n_delta_tiles=8)


@pytest.fixture
def winoc():
    return NetworkConfig(
        hub_for_tile={0: 0, 1: 0, 2: 1},
        hub_configuration={0: HubChannels([0], [0]), 1: HubChannels([0], [0])},
    )


def test_mesh_round_trip(mesh):
    for node_id in range(mesh.mesh_dim_x * mesh.mesh_dim_y):
        assert coord_to_id(id_to_coord(node_id, mesh), mesh) == node_id


def test_mesh_coordinates(mesh):
    coord = id_to_coord(5, mesh)
    assert coord == Coord(1, 1)
    assert 0 <= coord.x < mesh.mesh_dim_x


def test_mesh_out_of_range(mesh):
    with pytest.raises(ValueError):
        id_to_coord(mesh.mesh_dim_x * mesh.mesh_dim_y, mesh)
    with pytest.raises(ValueError):
        coord_to_id(Coord(0, mesh.mesh_dim_y), mesh)


def test_delta_round_trip(delta):
    for node_id in range(8, 8 + 12):
        assert coord_to_id(id_to_coord(node_id, delta), delta) == node_id


def test_delta_first_switch(delta):
    assert coord_to_id(Coord(0, 0), delta) == delta.n_delta_tiles
    assert id_to_coord(delta.n_delta_tiles, delta) == Coord(0, 0)


def test_delta_beyond_last_stage(delta):
    with pytest.raises(ValueError):
        id_to_coord(8 + 12, delta)


def test_radio_hub_membership(winoc):
    assert same_radio_hub(0, 1, winoc) is True
    assert same_radio_hub(0, 2, winoc) is False
    assert has_radio_hub(2, winoc) is True
    assert has_radio_hub(3, winoc) is False
    assert tile_to_hub(2, winoc) == 1


def test_radio_hub_missing_tile(winoc):
    with pytest.raises(ValueError):
        same_radio_hub(0, 3, winoc)
    with pytest.raises(ValueError):
        tile_to_hub(3, winoc)


def test_is_switch(delta):
    assert is_switch(11, delta) is True
    assert is_switch(12, delta) is False


def test_format_map():
    text = format_map("mem", {"b": 2.0, "a": 1.5})
    assert text == "mem = [\n\t1.500000e+00\t % a\n\t2.000000e+00\t % b\n];\n"