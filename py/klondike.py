from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterator, override

from pcg import Pcg32

DRAW_COUNT = 3
DECK_SIZE = 52


class IllegalPlayError(ValueError):
    """Raised when a play is applied to a table that does not allow it."""


class Color(str, Enum):
    RED = "RED"
    BLACK = "BLACK"


class Suit(str, Enum):
    DIAMOND = "DIAMOND"
    CLUB = "CLUB"
    HEART = "HEART"
    SPADE = "SPADE"

    @property
    def color(self) -> Color:
        if self == Suit.HEART or self == Suit.DIAMOND:
            return Color.RED
        return Color.BLACK

    @override
    def __str__(self) -> str:
        return {
            Suit.DIAMOND: "♦",
            Suit.CLUB: "♣",
            Suit.HEART: "♥",
            Suit.SPADE: "♠",
        }[self]


class Rank(int, Enum):
    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    @property
    def label(self) -> str:
        return "A23456789TJQK"[self.value - 1]

    @override
    def __str__(self) -> str:
        return self.label

    @override
    def __repr__(self) -> str:
        return self.label


@dataclass(frozen=True)
class Card:
    suit: Suit
    rank: Rank
    face_up: bool = False

    def is_same_color(self, other: "Card") -> bool:
        return self.suit.color == other.suit.color

    def is_one_below(self, other: "Card") -> bool:
        return int(other.rank) - int(self.rank) == 1

    def turned(self, *, face_up: bool) -> "Card":
        if self.face_up == face_up:
            return self
        return replace(self, face_up=face_up)

    @property
    def identity(self) -> tuple[Suit, Rank]:
        return (self.suit, self.rank)

    def as_jsonable_dict(self) -> dict:
        return {
            "suit": self.suit.value,
            "rank": self.rank.label,
            "face_up": self.face_up,
        }

    @override
    def __str__(self) -> str:
        return f"{'' if self.face_up else '-'}{self.rank}{self.suit}"

    @override
    def __repr__(self) -> str:
        return self.__str__()


type HidableCard = Card | None


class StackType(str, Enum):
    STOCK = "STOCK"
    WASTE = "WASTE"
    FOUNDATION = "FOUNDATION"
    TABLEAU = "TABLEAU"
    HAND = "HAND"


class StackId(str, Enum):
    STOCK = "Stock"
    WASTE = "Waste"
    FOUNDATION_1 = "Foundation1"
    FOUNDATION_2 = "Foundation2"
    FOUNDATION_3 = "Foundation3"
    FOUNDATION_4 = "Foundation4"
    TABLEAU_1 = "Tableau1"
    TABLEAU_2 = "Tableau2"
    TABLEAU_3 = "Tableau3"
    TABLEAU_4 = "Tableau4"
    TABLEAU_5 = "Tableau5"
    TABLEAU_6 = "Tableau6"
    TABLEAU_7 = "Tableau7"
    HAND = "Hand"

    @staticmethod
    def foundations() -> list["StackId"]:
        return [
            StackId.FOUNDATION_1,
            StackId.FOUNDATION_2,
            StackId.FOUNDATION_3,
            StackId.FOUNDATION_4,
        ]

    @staticmethod
    def tableaux() -> list["StackId"]:
        return [
            StackId.TABLEAU_1,
            StackId.TABLEAU_2,
            StackId.TABLEAU_3,
            StackId.TABLEAU_4,
            StackId.TABLEAU_5,
            StackId.TABLEAU_6,
            StackId.TABLEAU_7,
        ]

    @staticmethod
    def cycle() -> list["StackId"]:
        """The 13 table stacks in navigation order, Hand excluded."""
        return [StackId.STOCK, StackId.WASTE, *StackId.foundations(), *StackId.tableaux()]

    @property
    def position(self) -> int:
        for pos, stack_id in enumerate(StackId):
            if stack_id == self:
                return pos
        msg = f"Invalid stack id {self}"
        raise ValueError(msg)

    @property
    def stack_type(self) -> StackType:
        if self == StackId.STOCK:
            return StackType.STOCK
        if self == StackId.WASTE:
            return StackType.WASTE
        if self == StackId.HAND:
            return StackType.HAND
        if self in StackId.foundations():
            return StackType.FOUNDATION
        return StackType.TABLEAU

    @property
    def is_foundation(self) -> bool:
        return self.stack_type == StackType.FOUNDATION

    @property
    def is_tableau(self) -> bool:
        return self.stack_type == StackType.TABLEAU

    def _next_impl(self, *, wrap: bool) -> "StackId | None":
        if self == StackId.HAND:
            return StackId.HAND
        ids = StackId.cycle()
        pos = ids.index(self) + 1
        if pos == len(ids):
            return ids[0] if wrap else None
        return ids[pos]

    def next_no_wrap(self) -> "StackId | None":
        return self._next_impl(wrap=False)

    def next(self) -> "StackId":
        following = self._next_impl(wrap=True)
        assert following is not None  # noqa: S101
        return following

    def previous(self) -> "StackId":
        if self == StackId.HAND:
            return StackId.HAND
        ids = StackId.cycle()
        return ids[ids.index(self) - 1]

    @override
    def __str__(self) -> str:
        return self.value


# each foundation only starts with the ace of its own suit
FOUNDATION_SUITS = {
    StackId.FOUNDATION_1: Suit.SPADE,
    StackId.FOUNDATION_2: Suit.CLUB,
    StackId.FOUNDATION_3: Suit.HEART,
    StackId.FOUNDATION_4: Suit.DIAMOND,
}

PLAY_TARGETS = [*StackId.foundations(), *StackId.tableaux()]


@dataclass(frozen=True)
class Source:
    stack: StackId
    index: int

    @staticmethod
    def stock() -> "Source":
        return Source(StackId.STOCK, 0)

    def as_jsonable_dict(self) -> dict:
        return {"stack": self.stack.value, "index": self.index}

    @staticmethod
    def from_jsonable_dict(data: dict) -> "Source":
        return Source(StackId(data["stack"]), int(data["index"]))

    @override
    def __str__(self) -> str:
        return f"{self.stack.value}[{self.index}]"

    @override
    def __repr__(self) -> str:
        return self.__str__()


class PlayKind(str, Enum):
    SETUP = "Setup"
    DRAW_FROM_STOCK = "DrawFromStock"
    RECYCLE_WASTE = "RecycleWaste"
    MOVE_CARDS = "MoveCards"


@dataclass(frozen=True)
class Play:
    kind: PlayKind
    source: Source | None = None
    target: StackId | None = None

    def __post_init__(self) -> None:
        has_move = self.source is not None and self.target is not None
        if (self.kind == PlayKind.MOVE_CARDS) != has_move:
            msg = f"{self.kind.value} play with source={self.source} target={self.target}"
            raise ValueError(msg)

    @staticmethod
    def setup() -> "Play":
        return Play(PlayKind.SETUP)

    @staticmethod
    def draw_from_stock() -> "Play":
        return Play(PlayKind.DRAW_FROM_STOCK)

    @staticmethod
    def recycle_waste() -> "Play":
        return Play(PlayKind.RECYCLE_WASTE)

    @staticmethod
    def move_cards(source: Source, target: StackId) -> "Play":
        return Play(PlayKind.MOVE_CARDS, source, target)

    def as_jsonable_dict(self) -> dict:
        data: dict[str, Any] = {"kind": self.kind.value}
        if self.source is not None and self.target is not None:
            data["source"] = self.source.as_jsonable_dict()
            data["target"] = self.target.value
        return data

    @staticmethod
    def from_jsonable_dict(data: dict) -> "Play":
        kind = PlayKind(data["kind"])
        if kind == PlayKind.MOVE_CARDS:
            return Play.move_cards(Source.from_jsonable_dict(data["source"]), StackId(data["target"]))
        return Play(kind)

    @override
    def __str__(self) -> str:
        if self.kind == PlayKind.MOVE_CARDS:
            return f"{self.source} -> {self.target}"
        return self.kind.value

    @override
    def __repr__(self) -> str:
        return self.__str__()


class Stack:
    def __init__(self, stack_id: StackId, cards: list[Card] | None = None):
        self.stack_id = stack_id
        self.stack_type = stack_id.stack_type
        self.cards = cards if cards is not None else []

    def copy(self) -> "Stack":
        return Stack(self.stack_id, self.cards.copy())

    def key(self) -> tuple[Card, ...]:
        return tuple(self.cards)

    def find_card(self, rank: Rank, suit: Suit) -> int | None:
        for index, card in enumerate(self.cards):
            if card.rank == rank and card.suit == suit:
                return index
        return None

    def top_card_index(self) -> int:
        return max(len(self.cards) - 1, 0)

    def top_card(self) -> HidableCard:
        if len(self.cards) == 0:
            return None
        return self.cards[-1]

    def bottom_card(self) -> HidableCard:
        if len(self.cards) == 0:
            return None
        return self.cards[0]

    def expose_top_card(self) -> None:
        if len(self.cards) > 0:
            self.cards[-1] = self.cards[-1].turned(face_up=True)

    def flip_top_card(self) -> None:
        if len(self.cards) > 0:
            top = self.cards[-1]
            self.cards[-1] = top.turned(face_up=not top.face_up)

    def lift_point(self) -> int | None:
        """Index of the lowest face-up card, where the liftable run starts."""
        for index, card in enumerate(self.cards):
            if card.face_up:
                return index
        return None

    def is_lift_point(self, index: int) -> bool:
        return self.lift_point() == index

    def source_indices(self, *, partial_runs: bool = False) -> list[int]:
        """Positions a move may start from.

        Waste and foundations offer their top card. A tableau offers its lift
        point, or every face-up position when partial runs are allowed. Stock
        and hand cards are never a move source.
        """
        if len(self.cards) == 0:
            return []
        if self.stack_type in (StackType.WASTE, StackType.FOUNDATION):
            return [len(self.cards) - 1]
        if self.stack_type == StackType.TABLEAU:
            lift_point = self.lift_point()
            if lift_point is None:
                return []
            if partial_runs:
                return list(range(lift_point, len(self.cards)))
            return [lift_point]
        return []

    def foundation_source_index(self) -> int | None:
        """Top of a tableau run longer than one card.

        A foundation takes one card at a time, so the top card may leave its
        run for a foundation even when only whole runs move between tableaux.
        """
        if self.stack_type != StackType.TABLEAU or len(self.cards) < 2:
            return None
        top_index = len(self.cards) - 1
        if self.cards[top_index].face_up and not self.is_lift_point(top_index):
            return top_index
        return None

    def previous_active_card(self, start_index: int | None) -> int | None:
        if len(self.cards) == 0:
            return None
        max_index = len(self.cards) - 1
        if start_index is None:
            index = max_index
        elif start_index == 0:
            return None
        else:
            index = start_index - 1
        if self.stack_type in (StackType.STOCK, StackType.WASTE, StackType.FOUNDATION):
            return max_index if start_index is None else None
        for active_index in range(index, -1, -1):
            if self.cards[active_index].face_up:
                return active_index
        return None

    def next_active_card(self, start_index: int | None) -> int | None:
        if len(self.cards) == 0 or self.stack_type == StackType.STOCK:
            return None
        max_index = len(self.cards) - 1
        index = 0 if start_index is None else start_index + 1
        if index > max_index:
            return None
        if self.stack_type in (StackType.WASTE, StackType.FOUNDATION):
            return max_index
        for active_index in range(index, max_index + 1):
            if self.cards[active_index].face_up:
                return active_index
        return None

    def foundation_can_accept(self, card: Card) -> bool:
        top_card = self.top_card()
        if top_card is None:
            return card.rank == Rank.ACE and FOUNDATION_SUITS.get(self.stack_id) == card.suit
        return card.suit == top_card.suit and top_card.is_one_below(card)

    def tableau_can_accept(self, card: Card) -> bool:
        top_card = self.top_card()
        if top_card is None:
            return card.rank == Rank.KING
        return not top_card.is_same_color(card) and card.is_one_below(top_card)

    def can_accept_run(self, card: Card, moving_cards_count: int) -> bool:
        """Whether a run whose bottom card is ``card`` may be dropped here."""
        if self.stack_type == StackType.FOUNDATION:
            return moving_cards_count == 1 and self.foundation_can_accept(card)
        if self.stack_type == StackType.TABLEAU:
            return self.tableau_can_accept(card)
        return False

    def can_accept_hand(self, hand: "Stack") -> bool:
        card = hand.bottom_card()
        if card is None:
            return False
        return self.can_accept_run(card, len(hand))

    def as_jsonable_dict(self) -> dict:
        return {
            "stack_id": self.stack_id.value,
            "cards": [card.as_jsonable_dict() for card in self.cards],
        }

    @override
    def __eq__(self, other: Any) -> bool:  # pyright: ignore [reportAny]
        if not isinstance(other, Stack):
            return False
        return self.stack_id == other.stack_id and self.cards == other.cards

    __hash__ = None  # pyright: ignore [reportAssignmentType]

    @override
    def __str__(self) -> str:
        return f"{self.stack_id.value}: [{', '.join(str(card) for card in self.cards)}]"

    @override
    def __repr__(self) -> str:
        return self.__str__()

    def __len__(self) -> int:
        return len(self.cards)


def make_deck(seed: int) -> list[Card]:
    rng = Pcg32.seed_from_u64(seed)
    cards = [Card(suit, rank) for suit in Suit for rank in Rank]
    rng.shuffle(cards)
    return cards


type TableKey = tuple[tuple[Card, ...], ...]


@dataclass(kw_only=True, frozen=True)
class Render:
    stock_count: int
    waste: list[Card]  # up to three top cards, bottom to top
    foundations: list[HidableCard]  # top card on each foundation
    tableaux: list[list[HidableCard]]  # all cards on each tableau with None for hidden cards
    hand: list[Card]
    source: Source
    target: StackId
    cards_in_foundation: int
    winner: bool

    def asdict(self) -> dict[str, Any]:
        return {
            "stock_count": self.stock_count,
            "waste": self.waste,
            "foundations": self.foundations,
            "tableaux": self.tableaux,
            "hand": self.hand,
            "source": self.source,
            "target": self.target,
            "cards_in_foundation": self.cards_in_foundation,
            "winner": self.winner,
        }


class Table:
    def __init__(
        self,
        stock: Stack,
        waste: Stack,
        foundations: list[Stack],
        tableaux: list[Stack],
        in_hand: Stack | None = None,
        source: Source | None = None,
        target: StackId = StackId.STOCK,
    ):
        self.stock = stock
        self.waste = waste
        self.foundations = foundations
        self.tableaux = tableaux
        self.in_hand = in_hand if in_hand is not None else Stack(StackId.HAND)
        self.source = source if source is not None else Source.stock()
        self.target = target

    @staticmethod
    def empty() -> "Table":
        return Table(
            stock=Stack(StackId.STOCK),
            waste=Stack(StackId.WASTE),
            foundations=[Stack(stack_id) for stack_id in StackId.foundations()],
            tableaux=[Stack(stack_id) for stack_id in StackId.tableaux()],
        )

    @staticmethod
    def new(seed: int) -> "Table":
        cards = make_deck(seed)
        table = Table.empty()
        for count, tableau in enumerate(table.tableaux, start=1):
            tableau.cards = cards[len(cards) - count :]
            del cards[len(cards) - count :]
            tableau.flip_top_card()
        table.stock.cards = cards
        table.source = Source(StackId.STOCK, table.stock.next_active_card(None) or 0)
        return table

    def stacks(self) -> list[Stack]:
        return [self.stock, self.waste, *self.foundations, *self.tableaux]

    def get_stack(self, stack_id: StackId) -> Stack:
        if stack_id == StackId.STOCK:
            return self.stock
        if stack_id == StackId.WASTE:
            return self.waste
        if stack_id == StackId.HAND:
            return self.in_hand
        if stack_id.is_foundation:
            return self.foundations[StackId.foundations().index(stack_id)]
        return self.tableaux[StackId.tableaux().index(stack_id)]

    def all_cards(self) -> list[Card]:
        cards = [card for stack in self.stacks() for card in stack.cards]
        cards.extend(self.in_hand.cards)
        return cards

    def find_card(self, rank: Rank, suit: Suit) -> Source | None:
        for stack in [*self.stacks(), self.in_hand]:
            index = stack.find_card(rank, suit)
            if index is not None:
                return Source(stack.stack_id, index)
        return None

    def cards_in_hand(self) -> bool:
        return len(self.in_hand) > 0

    def has_cards_in_stock(self) -> bool:
        return len(self.stock) > 0

    def has_cards_in_waste(self) -> bool:
        return len(self.waste) > 0

    def cards_in_foundation(self) -> int:
        return sum(len(foundation) for foundation in self.foundations)

    def winner(self) -> bool:
        return self.cards_in_foundation() == DECK_SIZE

    def copy(self) -> "Table":
        return Table(
            stock=self.stock.copy(),
            waste=self.waste.copy(),
            foundations=[foundation.copy() for foundation in self.foundations],
            tableaux=[tableau.copy() for tableau in self.tableaux],
            in_hand=self.in_hand.copy(),
            source=self.source,
            target=self.target,
        )

    def key(self) -> TableKey:
        """Full table content, suitable for a visited-position set."""
        return tuple(stack.key() for stack in [*self.stacks(), self.in_hand])

    # cursor navigation for interactive drivers

    def next_active_card(self) -> Source | None:
        stack_id = self.source.stack
        start: int | None = self.source.index
        for _ in range(2 * len(StackId.cycle()) + 1):
            next_index = self.get_stack(stack_id).next_active_card(start)
            if next_index is not None:
                return Source(stack_id, next_index)
            stack_id = stack_id.next()
            start = None
        return None

    def previous_active_card(self) -> Source | None:
        stack_id = self.source.stack
        start: int | None = self.source.index
        for _ in range(2 * len(StackId.cycle()) + 1):
            previous_index = self.get_stack(stack_id).previous_active_card(start)
            if previous_index is not None:
                return Source(stack_id, previous_index)
            stack_id = stack_id.previous()
            start = None
        return None

    def active_cards(self) -> Iterator[Source]:
        """Every cursor position a player could pick up from, in stack order."""
        for stack in self.stacks():
            index = stack.next_active_card(None)
            while index is not None:
                yield Source(stack.stack_id, index)
                index = stack.next_active_card(index)

    def stack_can_accept_hand(self, stack_id: StackId) -> bool:
        return self.get_stack(stack_id).can_accept_hand(self.in_hand)

    def next_play_location(self) -> StackId:
        target = self.target.next()
        for _ in StackId.cycle():
            if self.stack_can_accept_hand(target) or target == self.source.stack:
                break
            target = target.next()
        return target

    def previous_play_location(self) -> StackId:
        target = self.target.previous()
        for _ in StackId.cycle():
            if self.stack_can_accept_hand(target) or target == self.source.stack:
                break
            target = target.previous()
        return target

    def go_next(self) -> None:
        if self.cards_in_hand():
            self.target = self.next_play_location()
        else:
            self.source = self.next_active_card() or Source.stock()

    def go_previous(self) -> None:
        if self.cards_in_hand():
            self.target = self.previous_play_location()
        else:
            self.source = self.previous_active_card() or Source.stock()

    # mutation primitives

    def deal_from_stock(self) -> None:
        amount_to_deal = min(DRAW_COUNT, len(self.stock))
        if amount_to_deal == 0:
            self.stock.cards = [card.turned(face_up=False) for card in reversed(self.waste.cards)]
            self.waste.cards = []
            return
        for _ in range(amount_to_deal):
            dealt_card = self.stock.cards.pop()
            self.waste.cards.append(dealt_card.turned(face_up=True))

    def recycle_waste(self) -> None:
        self.deal_from_stock()

    def expose_top_card_of_stack(self, stack_id: StackId) -> None:
        self.get_stack(stack_id).expose_top_card()

    def take_top_card_from_stack(self, stack_id: StackId) -> None:
        stack = self.get_stack(stack_id)
        if len(stack) == 0:
            return
        assert not self.cards_in_hand()  # noqa: S101
        card = stack.cards.pop()
        self.in_hand.cards.append(card.turned(face_up=True))

    def take_selected_cards_from_stack(self, stack_id: StackId, index: int) -> None:
        stack = self.get_stack(stack_id)
        cards_for_hand = stack.cards[index:]
        if len(cards_for_hand) == 0:
            return
        assert not self.cards_in_hand()  # noqa: S101
        del stack.cards[index:]
        self.in_hand.cards = cards_for_hand

    def put_hand_on_stack(self, source: Source, stack_id: StackId) -> int:
        cards = self.in_hand.cards
        self.in_hand.cards = []
        target_stack = self.get_stack(stack_id)
        index = len(target_stack)
        target_stack.cards.extend(cards)
        self.expose_top_card_of_stack(source.stack)
        return index

    def put_hand_on_target(self) -> None:
        index = self.put_hand_on_stack(self.source, self.target)
        self.source = Source(self.target, index)

    # move generation

    def get_all_legal_plays(self, *, partial_runs: bool = False) -> list[Play]:
        plays: list[Play] = []
        if self.has_cards_in_stock():
            plays.append(Play.draw_from_stock())
        elif self.has_cards_in_waste():
            plays.append(Play.recycle_waste())

        for stack in self.stacks():
            for index in stack.source_indices(partial_runs=partial_runs):
                card = stack.cards[index]
                moving_count = len(stack) - index
                for target_id in PLAY_TARGETS:
                    if target_id == stack.stack_id:
                        continue
                    if self.get_stack(target_id).can_accept_run(card, moving_count):
                        plays.append(Play.move_cards(Source(stack.stack_id, index), target_id))
            if partial_runs:
                continue
            top_index = stack.foundation_source_index()
            if top_index is None:
                continue
            for target_id in StackId.foundations():
                if self.get_stack(target_id).can_accept_run(stack.cards[top_index], 1):
                    plays.append(Play.move_cards(Source(stack.stack_id, top_index), target_id))
        return plays

    def render(self) -> Render:
        return Render(
            stock_count=len(self.stock),
            waste=self.waste.cards[-DRAW_COUNT:],
            foundations=[foundation.top_card() for foundation in self.foundations],
            tableaux=[[card if card.face_up else None for card in tableau.cards] for tableau in self.tableaux],
            hand=self.in_hand.cards.copy(),
            source=self.source,
            target=self.target,
            cards_in_foundation=self.cards_in_foundation(),
            winner=self.winner(),
        )

    def as_jsonable_dict(self) -> dict:
        return {
            "stock": self.stock.as_jsonable_dict(),
            "waste": self.waste.as_jsonable_dict(),
            "foundations": [foundation.as_jsonable_dict() for foundation in self.foundations],
            "tableaux": [tableau.as_jsonable_dict() for tableau in self.tableaux],
            "hand": self.in_hand.as_jsonable_dict(),
        }

    @override
    def __eq__(self, other: Any) -> bool:  # pyright: ignore [reportAny]
        if not isinstance(other, Table):
            return False
        return self.key() == other.key()

    __hash__ = None  # pyright: ignore [reportAssignmentType]

    @override
    def __str__(self) -> str:
        lines = [str(stack) for stack in self.stacks()]
        if self.cards_in_hand():
            lines.append(str(self.in_hand))
        return "\n".join(lines)


def new_table(seed: int) -> Table:
    return Table.new(seed)


def generate_plays(table: Table, *, partial_runs: bool = False) -> list[Play]:
    return table.get_all_legal_plays(partial_runs=partial_runs)


def is_winner(table: Table) -> bool:
    return table.winner()


def apply(play: Play, table: Table) -> Table:
    """Return a new table with ``play`` applied; ``table`` is left untouched."""
    if play.kind == PlayKind.SETUP:
        msg = "Setup is not a playable move"
        raise IllegalPlayError(msg)

    result = table.copy()
    if play.kind == PlayKind.DRAW_FROM_STOCK:
        if not table.has_cards_in_stock():
            msg = "Cannot draw from an empty stock"
            raise IllegalPlayError(msg)
        result.deal_from_stock()
    elif play.kind == PlayKind.RECYCLE_WASTE:
        if table.has_cards_in_stock() or not table.has_cards_in_waste():
            msg = "Waste can only be recycled onto an empty stock"
            raise IllegalPlayError(msg)
        result.recycle_waste()
    elif play.kind == PlayKind.MOVE_CARDS:
        assert play.source is not None and play.target is not None  # noqa: S101
        _check_move(play.source, play.target, table)
        result.take_selected_cards_from_stack(play.source.stack, play.source.index)
        result.put_hand_on_stack(play.source, play.target)
    else:
        msg = f"Unknown play {play}"
        raise IllegalPlayError(msg)
    return result


def _check_move(source: Source, target: StackId, table: Table) -> None:
    if table.cards_in_hand():
        msg = "Cards are already in hand"
        raise IllegalPlayError(msg)
    stack = table.get_stack(source.stack)
    if source.stack in (StackId.STOCK, StackId.HAND) or not 0 <= source.index < len(stack):
        msg = f"Nothing to move at {source}"
        raise IllegalPlayError(msg)
    if stack.stack_type != StackType.TABLEAU and source.index != len(stack) - 1:
        msg = f"Only the top card of {source.stack} can move"
        raise IllegalPlayError(msg)
    card = stack.cards[source.index]
    if not card.face_up:
        msg = f"{card} at {source} is face down"
        raise IllegalPlayError(msg)
    if target == source.stack or not table.get_stack(target).can_accept_run(card, len(stack) - source.index):
        msg = f"{target} cannot accept {card} from {source}"
        raise IllegalPlayError(msg)
