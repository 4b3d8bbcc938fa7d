import pytest

from engine import SpatialEngine
from hexgrid import hex_to_world
from resources import ResourceKind
from sim.outcomes import CallerPrivilege, FailureReason
from sim.state import PlayerSpatialState
from sim.terrain import GridTerrain, TerrainKind
from systems.territory import TerritoryLedger


def _world() -> GridTerrain:
    grid = GridTerrain.filled(12, 12, TerrainKind.FERTILE_LAND)
    grid.set_terrain((6, 5), TerrainKind.DEEP_WATER)
    grid.set_terrain((4, 5), TerrainKind.MOUNTAINS)
    grid.set_terrain((5, 4), TerrainKind.FOREST)
    grid.set_resource((5, 6), ResourceKind.WHEAT)
    return grid


def _avatar(at=(5, 5), ap=20, exploration=1, influence=1, faction="Red") -> PlayerSpatialState:
    wx, wz = hex_to_world(at)
    return PlayerSpatialState(
        player_id="p1",
        name="Aldric",
        world_x=wx,
        world_z=wz,
        action_points=ap,
        faction_id=faction,
        faction_name=faction,
        competences={"exploration": exploration, "local_influence": influence},
    )


def test_full_scenario():
    eng = SpatialEngine(_world())
    p = _avatar()
    assert p.avatar_hex == (5, 5)

    blocked = eng.move_avatar(p, (6, 5))
    assert not blocked
    assert blocked.reason is FailureReason.IMPASSABLE_TERRAIN
    assert p.avatar_hex == (5, 5)
    assert p.action_points == 20

    claimed = eng.claim(p)
    assert claimed
    record = eng.ledger.territory_at((5, 5))
    assert record.hex == (5, 5)
    assert record.faction_id == "Red"
    assert record.claimed_by_player_id == "p1"

    founded = eng.found_colony(p, "Redport")
    assert founded
    colony = founded.payload
    assert colony.is_capital
    assert colony.controlled_territory == {(5, 5)}
    assert record.colony_id == colony.id


def test_move_deducts_cost_and_updates_vision():
    eng = SpatialEngine(_world())
    p = _avatar(exploration=2)
    result = eng.move_avatar(p, (5, 4))
    assert result
    assert result.payload["cost"] == 2
    assert p.action_points == 18
    assert p.avatar_hex == (5, 4)
    assert len(p.current_vision) == 19
    assert (5, 4) in p.current_vision


def test_move_without_enough_points():
    eng = SpatialEngine(_world())
    p = _avatar(ap=4)
    result = eng.move_avatar(p, (4, 5))
    assert result.reason is FailureReason.INSUFFICIENT_ACTION_POINTS
    assert p.avatar_hex == (5, 5)
    assert p.action_points == 4
    assert p.current_vision == set()


def test_multi_step_move():
    eng = SpatialEngine(_world())
    p = _avatar()
    result = eng.move_avatar(p, (5, 8))
    assert result
    assert result.payload["path"][-1] == (5, 8)
    assert p.action_points == 20 - result.payload["cost"]
    assert p.avatar_hex == (5, 8)


def test_move_off_map_and_unreachable():
    grid = GridTerrain.from_rows([
        ["fertile_land", "deep_water", "fertile_land"],
        ["fertile_land", "deep_water", "fertile_land"],
    ])
    eng = SpatialEngine(grid)
    p = _avatar(at=(0, 0))
    assert eng.move_avatar(p, (9, 9)).reason is FailureReason.INVALID_HEX
    assert eng.move_avatar(p, (-1, 0)).reason is FailureReason.INVALID_HEX
    assert eng.move_avatar(p, (2, 0)).reason is FailureReason.NO_PATH
    assert eng.move_avatar(p, (0, 0)).payload["cost"] == 0


def test_explore_reveals_resources_in_view():
    eng = SpatialEngine(_world())
    p = _avatar()
    eng.refresh_vision(p)
    assert eng.resources_in_view(p) == {}
    assert eng.resources_in_view(p, CallerPrivilege.UNRESTRICTED) == {(5, 6): ResourceKind.WHEAT}

    assert eng.explore(p)
    assert eng.resources_in_view(p) == {(5, 6): ResourceKind.WHEAT}
    assert p.action_points == 15


def test_claim_requires_presence():
    eng = SpatialEngine(_world())
    p = _avatar()
    result = eng.claim(p, (7, 7))
    assert result.reason is FailureReason.NOT_PRESENT_AT_HEX
    gm = eng.claim(p, (7, 7), CallerPrivilege.UNRESTRICTED)
    assert gm


def test_expand_through_engine():
    eng = SpatialEngine(_world())
    p = _avatar()
    eng.claim(p)
    colony = eng.found_colony(p, "Redport").payload
    assert eng.move_avatar(p, (5, 6))
    assert eng.claim(p)
    assert eng.expand_territory(colony.id, (5, 6))
    assert colony.controlled_territory == {(5, 5), (5, 6)}


def test_engines_do_not_share_ledgers():
    first = SpatialEngine(_world())
    second = SpatialEngine(_world())
    p = _avatar()
    assert first.claim(p)
    assert second.claim(p)
    assert first.ledger is not second.ledger


def test_engine_accepts_existing_ledger():
    ledger = TerritoryLedger()
    eng = SpatialEngine(_world(), ledger=ledger)
    eng.claim(_avatar())
    assert ledger.is_claimed((5, 5))


def test_player_state_roundtrip():
    p = _avatar()
    p.mark_explored((5, 5))
    p.mark_explored((5, 6))
    data = p.to_dict()
    data["competences"]["cartography"] = "bad"
    data["explored"].append("oops")
    restored = PlayerSpatialState.from_dict(data)
    assert restored.avatar_hex == (5, 5)
    assert restored.explored == {(5, 5), (5, 6)}
    assert restored.exploration_level == 1
    assert restored.cartography_level == 0
    assert restored.world_x == pytest.approx(p.world_x)


def test_player_state_from_dict_requires_identity():
    with pytest.raises(ValueError):
        PlayerSpatialState.from_dict({"name": "x"})


def test_explore_after_restore_covers_vision():
    eng = SpatialEngine(_world())
    restored = PlayerSpatialState.from_dict(_avatar().to_dict())
    result = eng.explore(restored)
    assert result.payload == 7
    assert restored.action_points == 15
    assert eng.resources_in_view(restored) == {(5, 6): ResourceKind.WHEAT}


def test_player_state_from_dict_bad_position():
    data = _avatar().to_dict()
    data["world_x"] = "bad"
    data["world_z"] = float("nan")
    restored = PlayerSpatialState.from_dict(data)
    assert restored.world_x == 0.0
    assert restored.world_z == 0.0
    assert restored.avatar_hex == (0, 0)
