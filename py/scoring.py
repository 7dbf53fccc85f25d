from klondike import Card, Play, PlayKind, Rank, StackType, Table

type PlayKey = tuple[int, int]

FOUNDATION_KEY: PlayKey = (5, 0)
WASTE_TO_TABLEAU_KEY: PlayKey = (5, 1)
FOUNDATION_TO_TABLEAU_KEY: PlayKey = (-10, 0)
NEUTRAL_KEY: PlayKey = (0, 0)

# king priorities, by where the queen of the king's suit sits
QUEEN_MISSING_PRIORITY = 99
QUEEN_FACE_UP_PRIORITY = 1
QUEEN_FACE_DOWN_PRIORITY = -1


def king_priority(table: Table, king: Card) -> int:
    """
    Priority for dropping a waste King onto a tableau.

    Looks up the Queen of the King's own suit: nothing left to unblock if it
    is gone, cheap if it is already showing, and held back while it is still
    buried.
    """
    location = table.find_card(Rank.QUEEN, king.suit)
    if location is None:
        return QUEEN_MISSING_PRIORITY
    queen = table.get_stack(location.stack).cards[location.index]
    return QUEEN_FACE_UP_PRIORITY if queen.face_up else QUEEN_FACE_DOWN_PRIORITY


def score_play(table: Table, play: Play) -> PlayKey:
    """
    Ranks a candidate play as ``(score, priority)``.
    Higher keys are explored first. This never affects legality.

    Args:
        table: The table the play would be applied to
        play: A play produced by the move generator

    Returns:
        The sort key for the play
    """
    if play.kind != PlayKind.MOVE_CARDS:
        return NEUTRAL_KEY
    assert play.source is not None and play.target is not None  # noqa: S101

    source_type = play.source.stack.stack_type
    target_type = play.target.stack_type

    if target_type == StackType.FOUNDATION:
        return FOUNDATION_KEY

    if source_type == StackType.WASTE and target_type == StackType.TABLEAU:
        waste_card = table.waste.top_card()
        if waste_card is not None and waste_card.rank == Rank.KING:
            return (WASTE_TO_TABLEAU_KEY[0], king_priority(table, waste_card))
        return WASTE_TO_TABLEAU_KEY

    if source_type == StackType.TABLEAU and target_type == StackType.TABLEAU:
        # deeper lift points carry longer runs
        if len(table.get_stack(play.source.stack)) == 0:
            return (0, 1)
        return (0, play.source.index + 1)

    if source_type == StackType.FOUNDATION and target_type == StackType.TABLEAU:
        return FOUNDATION_TO_TABLEAU_KEY

    return NEUTRAL_KEY


def sort_plays(table: Table, plays: list[Play]) -> list[Play]:
    """Ascending by key, so the best candidate sits at the end of the list."""
    return sorted(plays, key=lambda play: score_play(table, play))
