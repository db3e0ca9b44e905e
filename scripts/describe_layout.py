#!/usr/bin/env python3
"""Print the observation layout for a game configuration.

Trained agents depend on these offsets, so diff this output before and after
touching any encoder.
"""

import argparse

from hanabi_obs.config.game_config import GameConfig, ObservationType
from hanabi_obs.model.layout import OWN_HAND_SIZE, belief_length, describe_layout


def main():
    parser = argparse.ArgumentParser(description="Describe the observation layout")
    parser.add_argument("--colors", type=int, default=5, help="Number of colors")
    parser.add_argument("--ranks", type=int, default=5, help="Number of ranks")
    parser.add_argument("--players", type=int, default=2, help="Number of players")
    parser.add_argument("--hand-size", type=int, default=None,
                        help="Cards per hand (default: 5 for 2-3 players, 4 otherwise)")
    parser.add_argument("--max-information-tokens", type=int, default=8)
    parser.add_argument("--max-life-tokens", type=int, default=3)
    parser.add_argument("--minimal", action="store_true",
                        help="Minimal observation type (no card-knowledge section)")
    args = parser.parse_args()

    config = GameConfig(
        num_colors=args.colors,
        num_ranks=args.ranks,
        num_players=args.players,
        hand_size=args.hand_size or GameConfig.default_hand_size(args.players),
        max_information_tokens=args.max_information_tokens,
        max_life_tokens=args.max_life_tokens,
        observation_type=ObservationType.MINIMAL if args.minimal else ObservationType.CARD_KNOWLEDGE,
    )

    print(f"=== Observation layout ({config.num_players}p, {config.num_colors}x{config.num_ranks}, "
          f"hand {config.hand_size}, deck {config.max_deck_size}) ===")
    for section in describe_layout(config):
        print(f"  [{section.start:5d}..{section.end:5d})  {section.name:<15s} {section.length:5d}")
    print(f"Total observation size: {describe_layout(config)[-1].end}")
    print(f"Belief size: {belief_length(config)}")
    print(f"Own-hand status size: {OWN_HAND_SIZE}")


if __name__ == "__main__":
    main()
