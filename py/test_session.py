import json

import pytest
from klondike import IllegalPlayError, Play, Source, StackId
from session import SolveRecord, replay
from solver import SearchLimits, SearchStatus, solve_seed

OPENING = [
    Play.move_cards(Source(StackId.TABLEAU_4, 3), StackId.FOUNDATION_2),
    Play.move_cards(Source(StackId.TABLEAU_4, 2), StackId.FOUNDATION_3),
    Play.draw_from_stock(),
]


def test_replay_rebuilds_every_table():
    tables = replay(324, OPENING)

    assert len(tables) == 4
    assert tables[0].cards_in_foundation() == 0
    assert tables[2].cards_in_foundation() == 2
    assert len(tables[3].stock) == 21
    assert len(tables[3].waste) == 3
    # the seven of clubs is exposed once both aces are gone
    assert tables[2].tableaux[3].cards[-1].face_up


def test_replay_rejects_illegal_play():
    plays = [Play.move_cards(Source(StackId.TABLEAU_1, 0), StackId.FOUNDATION_1)]
    with pytest.raises(IllegalPlayError, match="Play 1"):
        replay(324, plays)


def test_replay_rejects_draw_from_empty_stock():
    plays = [Play.draw_from_stock()] * 9
    with pytest.raises(IllegalPlayError, match="Play 9"):
        replay(324, plays)


def test_record_json_round_trip():
    record = SolveRecord(seed=324, status=SearchStatus.WON.value, plays=OPENING, iterations=3, max_depth=3)

    restored = SolveRecord.from_json(record.as_json())

    assert restored == record
    assert json.loads(record.as_json())["plays"][2] == {"kind": "DrawFromStock"}


def test_record_from_result():
    result = solve_seed(324, SearchLimits(max_iterations=25))

    record = SolveRecord.from_result(324, result)

    assert record.status == "iteration_cap"
    assert record.iterations == 25
    assert record.plays == []
    assert len(record.replay()) == 1


def test_record_replay():
    record = SolveRecord(seed=324, status=SearchStatus.WON.value, plays=OPENING)
    assert record.replay()[-1].cards_in_foundation() == 2
