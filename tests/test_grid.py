import pytest
from campus_chaos.errors import InvalidCharacter, InvalidField, InvalidForestVillage
from campus_chaos.schemas import CellType, FigureId, Position
from campus_chaos.services.grid import Grid


def test_rows_are_padded_with_non_existent_cells():
    g = Grid.from_rows(["PPa", "Pb"])
    assert g.shape == (2, 3)
    assert g.get(1, 2).type == CellType.NON_EXISTENT
    assert g.get(1, 1).type == CellType.PLAYER_START
    assert g.get(1, 1).player_symbol == "b"


def test_symbol_table():
    g = Grid.from_rows(["PpOoTZ a", "pf"])
    types = [g.get(0, c).type for c in range(g.W)]
    assert types == [
        CellType.PATHWAY, CellType.PATHWAY_VILLAGE, CellType.OBSTACLE, CellType.OBSTACLE_VILLAGE,
        CellType.TARGET, CellType.PROTECTED_ZONE, CellType.EMPTY, CellType.PLAYER_START,
    ]
    assert g.get(0, 2).has_obstacle
    assert g.get(0, 3).has_obstacle
    assert not g.get(0, 0).has_obstacle
    assert g.get(1, 1).type == CellType.EMPTY_FOREST


def test_getitem_requires_position():
    g = Grid.from_rows(["PPP"])
    assert g[Position(row=0, column=2)].type == CellType.PATHWAY
    with pytest.raises(TypeError):
        _ = g[(0, 1)] # type: ignore
    with pytest.raises(IndexError):
        _ = g[Position(row=1, column=0)]


@pytest.mark.parametrize("rows", [[], None])
def test_empty_field_is_rejected(rows):
    with pytest.raises(InvalidField):
        Grid.from_rows(rows)


def test_forest_and_village_must_come_together():
    with pytest.raises(InvalidForestVillage) as err:
        Grid.from_rows(["Pfab"])
    assert err.value.grid is not None
    with pytest.raises(InvalidForestVillage):
        Grid.from_rows(["pab"])
    with pytest.raises(InvalidForestVillage):
        Grid.from_rows(["oab"])
    g = Grid.from_rows(["pfab"])
    assert g.forest_position() == Position(row=0, column=1)


def test_lowercase_target_or_zone_is_rejected():
    with pytest.raises(InvalidCharacter):
        Grid.from_rows(["PPtab"])
    with pytest.raises(InvalidCharacter):
        Grid.from_rows(["PPzab"])


def test_invalid_character_wins_over_forest_mismatch():
    with pytest.raises(InvalidCharacter) as err:
        Grid.from_rows(["Pfta", "PPPb"])
    assert err.value.grid is not None


def test_copy_is_deep():
    g = Grid.from_rows(["aPOT", "bPPP"])
    c = g.copy()
    assert g.same_layout(c)
    c.get(0, 1).figure = FigureId(letter="A", index=1)
    c.get(0, 2).has_obstacle = False
    assert g.get(0, 1).figure is None
    assert g.get(0, 2).has_obstacle
    assert not g.same_layout(c)


def test_free_to_move_rules():
    g = Grid.from_rows(["PO fZ", "pP"])
    pathway, obstacle, empty, forest, zone = (g.get(0, c) for c in range(5))
    missing = g.get(1, 4)
    assert pathway.is_free_to_move(False) and pathway.is_free_to_move(True)
    assert not obstacle.is_free_to_move(False)
    assert obstacle.is_free_to_move(True)
    assert forest.is_free_to_move(False)
    assert not forest.is_free_to_move(True)
    assert zone.is_free_to_move(False) and zone.is_free_to_move(True)
    for cell in (empty, missing):
        assert not cell.is_free_to_move(False)
        assert not cell.is_free_to_move(True)


def test_start_positions():
    g = Grid.from_rows(["aPP", "PPb"])
    assert g.start_positions(["a", "b", "c"]) == {
        "a": Position(row=0, column=0),
        "b": Position(row=1, column=2),
    }


def test_render_marks_current_player_figures():
    g = Grid.from_rows(["aPP", "bPT", "P"])
    g.get(0, 1).figure = FigureId(letter="A", index=2)
    g.get(1, 1).figure = FigureId(letter="B", index=1)
    assert g.render("A") == ["a2P", "bBT", "P"]
    assert g.render("B") == ["aAP", "b1T", "P"]
