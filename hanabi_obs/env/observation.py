"""Observation snapshot value types.

These mirror the objects handed over by the external game engine. Hands are
observer-relative (index 0 is the observing player) and ``last_moves`` is
most-recent-first, exactly as the engine reports them. The encoders only
read these objects.
"""

from dataclasses import dataclass, field
from typing import Optional

from hanabi_obs.config.game_config import GameConfig, COLOR_CHARS
from hanabi_obs.env.move_types import MoveType


@dataclass(frozen=True, order=True)
class Card:
    color: int
    rank: int

    @classmethod
    def invalid(cls) -> "Card":
        """A card whose identity is hidden from the observer."""
        return cls(-1, -1)

    def is_valid(self) -> bool:
        return self.color >= 0 and self.rank >= 0

    def __str__(self) -> str:
        if not self.is_valid():
            return "XX"
        return f"{COLOR_CHARS[self.color]}{self.rank + 1}"


class CardKnowledge:
    """Common knowledge about one hand slot, narrowed by hints."""

    def __init__(self, num_colors: int, num_ranks: int):
        self.color_plausible = [True] * num_colors
        self.rank_plausible = [True] * num_ranks
        self.color: Optional[int] = None
        self.rank: Optional[int] = None

    @property
    def num_colors(self) -> int:
        return len(self.color_plausible)

    @property
    def num_ranks(self) -> int:
        return len(self.rank_plausible)

    @property
    def color_hinted(self) -> bool:
        return self.color is not None

    @property
    def rank_hinted(self) -> bool:
        return self.rank is not None

    def is_color_plausible(self, color: int) -> bool:
        return self.color_plausible[color]

    def is_rank_plausible(self, rank: int) -> bool:
        return self.rank_plausible[rank]

    def is_card_plausible(self, color: int, rank: int) -> bool:
        return self.color_plausible[color] and self.rank_plausible[rank]

    def apply_is_color_hint(self, color: int):
        if not self.color_plausible[color]:
            raise ValueError(f"color {color} already ruled out for this card")
        self.color = color
        self.color_plausible = [c == color for c in range(self.num_colors)]

    def apply_is_not_color_hint(self, color: int):
        self.color_plausible[color] = False

    def apply_is_rank_hint(self, rank: int):
        if not self.rank_plausible[rank]:
            raise ValueError(f"rank {rank} already ruled out for this card")
        self.rank = rank
        self.rank_plausible = [r == rank for r in range(self.num_ranks)]

    def apply_is_not_rank_hint(self, rank: int):
        self.rank_plausible[rank] = False

    def copy(self) -> "CardKnowledge":
        other = CardKnowledge(self.num_colors, self.num_ranks)
        other.color_plausible = list(self.color_plausible)
        other.rank_plausible = list(self.rank_plausible)
        other.color = self.color
        other.rank = self.rank
        return other

    def __repr__(self) -> str:
        colors = "".join(
            COLOR_CHARS[c] if ok else "-" for c, ok in enumerate(self.color_plausible)
        )
        ranks = "".join(
            str(r + 1) if ok else "-" for r, ok in enumerate(self.rank_plausible)
        )
        return f"CardKnowledge({colors}|{ranks})"


@dataclass
class Hand:
    cards: list[Card] = field(default_factory=list)
    knowledge: list[CardKnowledge] = field(default_factory=list)

    def __post_init__(self):
        if len(self.cards) != len(self.knowledge):
            raise ValueError("every card in a hand needs a knowledge record")

    def __len__(self) -> int:
        return len(self.cards)

    def add_card(self, card: Card, knowledge: CardKnowledge):
        self.cards.append(card)
        self.knowledge.append(knowledge)

    def remove_from_hand(self, card_index: int) -> Card:
        self.knowledge.pop(card_index)
        return self.cards.pop(card_index)


@dataclass(frozen=True)
class Move:
    move_type: MoveType
    card_index: int = -1
    target_offset: int = -1
    color: int = -1
    rank: int = -1


@dataclass(frozen=True)
class HistoryItem:
    """One resolved move, annotated with its outcome."""
    move: Move
    player: int = -1
    scored: bool = False
    information_token: bool = False
    color: int = -1             # played/discarded card identity
    rank: int = -1
    reveal_bitmask: int = 0     # bit i set iff target's slot i matched the hint
    newly_revealed_bitmask: int = 0
    deal_to_player: int = -1


@dataclass
class Observation:
    hands: list[Hand]
    discard_pile: list[Card] = field(default_factory=list)
    fireworks: list[int] = field(default_factory=list)
    deck_size: int = 0
    information_tokens: int = 0
    life_tokens: int = 0
    last_moves: list[HistoryItem] = field(default_factory=list)
    observing_player: int = 0
    current_player: int = 0

    def last_non_deal_move(self) -> Optional[HistoryItem]:
        for item in self.last_moves:
            if item.move.move_type != MoveType.DEAL:
                return item
        return None

    @property
    def num_hand_cards(self) -> int:
        return sum(len(hand) for hand in self.hands)

    @classmethod
    def from_dict(cls, d: dict, config: GameConfig) -> "Observation":
        """Build a snapshot from nested plain data.

        Cards are ``[color, rank]`` pairs or ``None`` for a hidden card.
        Knowledge entries are dicts with optional ``colors``/``ranks``
        plausibility lists and ``color``/``rank`` hinted values.
        """
        hands = []
        for hand_d in d["hands"]:
            cards = [
                Card.invalid() if c is None else Card(int(c[0]), int(c[1]))
                for c in hand_d.get("cards", [])
            ]
            knowledge_d = hand_d.get("knowledge") or [{} for _ in cards]
            knowledge = [_knowledge_from_dict(k, config) for k in knowledge_d]
            hands.append(Hand(cards, knowledge))

        last_moves = []
        for item_d in d.get("last_moves", []):
            move_d = item_d["move"]
            move = Move(
                move_type=_parse_move_type(move_d["type"]),
                card_index=int(move_d.get("card_index", -1)),
                target_offset=int(move_d.get("target_offset", -1)),
                color=int(move_d.get("color", -1)),
                rank=int(move_d.get("rank", -1)),
            )
            last_moves.append(
                HistoryItem(
                    move=move,
                    player=int(item_d.get("player", -1)),
                    scored=bool(item_d.get("scored", False)),
                    information_token=bool(item_d.get("information_token", False)),
                    color=int(item_d.get("color", -1)),
                    rank=int(item_d.get("rank", -1)),
                    reveal_bitmask=int(item_d.get("reveal_bitmask", 0)),
                    newly_revealed_bitmask=int(item_d.get("newly_revealed_bitmask", 0)),
                    deal_to_player=int(item_d.get("deal_to_player", -1)),
                )
            )

        return cls(
            hands=hands,
            discard_pile=[Card(int(c), int(r)) for c, r in d.get("discard_pile", [])],
            fireworks=list(d.get("fireworks", [0] * config.num_colors)),
            deck_size=int(d.get("deck_size", 0)),
            information_tokens=int(d.get("information_tokens", config.max_information_tokens)),
            life_tokens=int(d.get("life_tokens", config.max_life_tokens)),
            last_moves=last_moves,
            observing_player=int(d.get("observing_player", 0)),
            current_player=int(d.get("current_player", 0)),
        )


def _parse_move_type(value) -> MoveType:
    if isinstance(value, str):
        key = value.upper().replace("-", "_")
        if key == "REVEALCOLOR":
            key = "REVEAL_COLOR"
        elif key == "REVEALRANK":
            key = "REVEAL_RANK"
        return MoveType[key]
    return MoveType(int(value))


def _knowledge_from_dict(d: dict, config: GameConfig) -> CardKnowledge:
    knowledge = CardKnowledge(config.num_colors, config.num_ranks)
    if "colors" in d:
        knowledge.color_plausible = [bool(x) for x in d["colors"]]
    if "ranks" in d:
        knowledge.rank_plausible = [bool(x) for x in d["ranks"]]
    if d.get("color") is not None:
        knowledge.apply_is_color_hint(int(d["color"]))
    if d.get("rank") is not None:
        knowledge.apply_is_rank_hint(int(d["rank"]))
    return knowledge
