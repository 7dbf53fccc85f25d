import pytest
from klondike import Card, Play, Rank, Source, StackId, Suit, Table, new_table
from scoring import (
    FOUNDATION_KEY,
    FOUNDATION_TO_TABLEAU_KEY,
    NEUTRAL_KEY,
    QUEEN_FACE_DOWN_PRIORITY,
    QUEEN_FACE_UP_PRIORITY,
    QUEEN_MISSING_PRIORITY,
    WASTE_TO_TABLEAU_KEY,
    king_priority,
    score_play,
    sort_plays,
)

KING_OF_HEARTS = Card(Suit.HEART, Rank.KING, face_up=True)
WASTE_TO_T1 = Play.move_cards(Source(StackId.WASTE, 0), StackId.TABLEAU_1)


@pytest.fixture
def king_on_waste():
    table = Table.empty()
    table.waste.cards = [KING_OF_HEARTS]
    return table


def test_king_waits_for_buried_queen(king_on_waste):
    king_on_waste.tableaux[1].cards = [
        Card(Suit.HEART, Rank.QUEEN),
        Card(Suit.SPADE, Rank.TWO, face_up=True),
    ]
    assert king_priority(king_on_waste, KING_OF_HEARTS) == QUEEN_FACE_DOWN_PRIORITY
    assert score_play(king_on_waste, WASTE_TO_T1) == (5, -1)


def test_king_with_visible_queen(king_on_waste):
    king_on_waste.tableaux[1].cards = [Card(Suit.HEART, Rank.QUEEN, face_up=True)]
    assert score_play(king_on_waste, WASTE_TO_T1) == (5, QUEEN_FACE_UP_PRIORITY)


def test_king_with_queen_absent(king_on_waste):
    # nothing for the king to unblock
    assert score_play(king_on_waste, WASTE_TO_T1) == (5, QUEEN_MISSING_PRIORITY)


def test_waste_card_to_tableau():
    table = Table.empty()
    table.waste.cards = [Card(Suit.CLUB, Rank.QUEEN, face_up=True)]
    table.tableaux[0].cards = [KING_OF_HEARTS]
    assert score_play(table, WASTE_TO_T1) == WASTE_TO_TABLEAU_KEY


def test_foundation_moves():
    table = Table.empty()
    table.tableaux[0].cards = [Card(Suit.SPADE, Rank.TWO, face_up=True)]
    table.foundations[0].cards = [Card(Suit.SPADE, Rank.ACE, face_up=True)]

    to_foundation = Play.move_cards(Source(StackId.TABLEAU_1, 0), StackId.FOUNDATION_1)
    from_foundation = Play.move_cards(Source(StackId.FOUNDATION_1, 0), StackId.TABLEAU_2)

    assert score_play(table, to_foundation) == FOUNDATION_KEY
    assert score_play(table, from_foundation) == FOUNDATION_TO_TABLEAU_KEY


def test_tableau_to_tableau_prefers_deeper_runs():
    table = Table.empty()
    table.tableaux[0].cards = [Card(Suit.CLUB, Rank.TWO), Card(Suit.CLUB, Rank.THREE)] + [
        Card(Suit.HEART, Rank.SIX, face_up=True),
        Card(Suit.SPADE, Rank.FIVE, face_up=True),
    ]

    assert score_play(table, Play.move_cards(Source(StackId.TABLEAU_1, 2), StackId.TABLEAU_2)) == (0, 3)
    assert score_play(table, Play.move_cards(Source(StackId.TABLEAU_2, 0), StackId.TABLEAU_3)) == (0, 1)


def test_non_move_plays_are_neutral():
    table = new_table(1)
    assert score_play(table, Play.draw_from_stock()) == NEUTRAL_KEY
    assert score_play(table, Play.recycle_waste()) == NEUTRAL_KEY


def test_sort_puts_best_last():
    table = new_table(324)
    plays = [
        Play.draw_from_stock(),
        Play.move_cards(Source(StackId.TABLEAU_3, 2), StackId.FOUNDATION_1),
        Play.move_cards(Source(StackId.TABLEAU_4, 3), StackId.FOUNDATION_2),
        Play.move_cards(Source(StackId.TABLEAU_5, 4), StackId.TABLEAU_1),
    ]

    ordered = sort_plays(table, plays)

    # ties keep generation order
    assert ordered == [plays[0], plays[3], plays[1], plays[2]]
    assert ordered.pop() == plays[2]
