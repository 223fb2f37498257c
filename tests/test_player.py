import pytest
from campus_chaos.errors import FigureNotFound
from campus_chaos.schemas import MAX_FIGURES, MAX_PLAYERS, CellType, Figure, Position
from campus_chaos.services.forest import Forest
from campus_chaos.services.player import Player, player_letter, start_symbol


def test_player_letters_skip_map_symbols():
    letters = [player_letter(i) for i in range(MAX_PLAYERS)]
    assert letters[:6] == ["A", "B", "C", "D", "E", "G"]
    assert letters[-1] == "Y"
    assert not set(letters) & set("OZPTF")
    with pytest.raises(IndexError):
        player_letter(MAX_PLAYERS)
    assert start_symbol("G") == "g"


def test_new_player_holds_all_figures_unused():
    p = Player(letter="A", start=Position(row=0, column=0))
    assert [f.name for f in p.unused] == ["A1", "A2", "A3", "A4", "A5"]
    assert len(p.unused) == MAX_FIGURES
    assert not p.playing
    assert not p.has_rolled()
    assert p.describe() == "It's player A's turn. Dice Roll: ?"


def test_figures_enter_in_order_and_return_to_the_back():
    p = Player(letter="B", start=Position(row=1, column=0))
    first = p.bring_new_figure()
    second = p.bring_new_figure()
    assert (first.name, second.name) == ("B1", "B2")
    first.position = Position(row=1, column=3)
    back = p.return_to_unused(1)
    assert back is first
    assert not back.is_placed()
    assert [f.name for f in p.unused] == ["B3", "B4", "B5", "B1"]
    assert [f.name for f in p.playing] == ["B2"]
    with pytest.raises(FigureNotFound):
        p.return_to_unused(4)


def test_all_figures_used():
    p = Player(letter="A", start=Position(row=0, column=0))
    for _ in range(MAX_FIGURES):
        p.bring_new_figure()
    assert p.all_figures_used()


def test_describe_with_dice():
    p = Player(letter="C", start=Position(row=0, column=0), dice=4)
    assert p.describe() == "It's player C's turn. Dice Roll: 4"
    p.reset_dice()
    assert not p.has_rolled()


def test_forest_type_follows_captures():
    forest = Forest(position=Position(row=2, column=3))
    fig = Figure(letter="A", index=1, position=Position(row=0, column=0))
    assert forest.cell_type == CellType.EMPTY_FOREST
    forest.add(fig)
    assert fig.position == forest.position
    assert forest.holds(fig.fid)
    assert forest.cell_type == CellType.OCCUPIED_FOREST
    assert forest.remove(fig.fid)
    assert not forest.remove(fig.fid)
    assert forest.cell_type == CellType.EMPTY_FOREST
