"""Game configuration consumed by the observation encoders."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

MAX_COLORS = 5
MAX_RANKS = 5
MIN_PLAYERS = 2
MAX_PLAYERS = 5

COLOR_CHARS = "RYGWB"


class ObservationType(IntEnum):
    MINIMAL = 0         # no card-knowledge section
    CARD_KNOWLEDGE = 1
    SEER = 2


@dataclass(frozen=True)
class GameConfig:
    # Deck
    num_colors: int = 5
    num_ranks: int = 5
    # Table
    num_players: int = 2
    hand_size: int = 5
    # Tokens
    max_information_tokens: int = 8
    max_life_tokens: int = 3
    observation_type: ObservationType = ObservationType.CARD_KNOWLEDGE
    # card_instances[color][rank]; None means the standard distribution
    card_instances: Optional[tuple[tuple[int, ...], ...]] = field(default=None)

    def __post_init__(self):
        if not 1 <= self.num_colors <= MAX_COLORS:
            raise ValueError(f"num_colors must be in [1, {MAX_COLORS}], got {self.num_colors}")
        if not 1 <= self.num_ranks <= MAX_RANKS:
            raise ValueError(f"num_ranks must be in [1, {MAX_RANKS}], got {self.num_ranks}")
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ValueError(
                f"num_players must be in [{MIN_PLAYERS}, {MAX_PLAYERS}], got {self.num_players}"
            )
        if self.hand_size < 1:
            raise ValueError(f"hand_size must be >= 1, got {self.hand_size}")
        if self.max_information_tokens < 1 or self.max_life_tokens < 1:
            raise ValueError("token maxima must be >= 1")
        object.__setattr__(self, "observation_type", ObservationType(self.observation_type))

        if self.card_instances is None:
            instances = tuple(
                tuple(self._standard_instances(r) for r in range(self.num_ranks))
                for _ in range(self.num_colors)
            )
        else:
            instances = tuple(tuple(int(n) for n in row) for row in self.card_instances)
            if len(instances) != self.num_colors or any(
                len(row) != self.num_ranks for row in instances
            ):
                raise ValueError("card_instances must be num_colors x num_ranks")
            if any(n < 0 for row in instances for n in row):
                raise ValueError("card_instances must be non-negative")
        object.__setattr__(self, "card_instances", instances)

        if self.max_deck_size < self.num_players * self.hand_size:
            raise ValueError(
                f"deck of {self.max_deck_size} cards cannot fill "
                f"{self.num_players} hands of {self.hand_size}"
            )

    def _standard_instances(self, rank: int) -> int:
        if rank == 0:
            return 3 if self.num_ranks > 1 else 1
        if rank == self.num_ranks - 1:
            return 1
        return 2

    @staticmethod
    def default_hand_size(num_players: int) -> int:
        return 5 if num_players < 4 else 4

    @classmethod
    def from_dict(cls, params: dict) -> "GameConfig":
        """Build a config from the engine's string-keyed parameter map."""
        num_players = int(params.get("players", MIN_PLAYERS))
        return cls(
            num_colors=int(params.get("colors", MAX_COLORS)),
            num_ranks=int(params.get("ranks", MAX_RANKS)),
            num_players=num_players,
            hand_size=int(params.get("hand_size", cls.default_hand_size(num_players))),
            max_information_tokens=int(params.get("max_information_tokens", 8)),
            max_life_tokens=int(params.get("max_life_tokens", 3)),
            observation_type=ObservationType(
                int(params.get("observation_type", ObservationType.CARD_KNOWLEDGE))
            ),
        )

    def number_card_instances(self, color: int, rank: int) -> int:
        return self.card_instances[color][rank]

    @property
    def bits_per_card(self) -> int:
        return self.num_colors * self.num_ranks

    @property
    def max_deck_size(self) -> int:
        return sum(sum(row) for row in self.card_instances)

    @property
    def is_minimal(self) -> bool:
        return self.observation_type == ObservationType.MINIMAL
