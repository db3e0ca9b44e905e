"""Per-slot beliefs over card identities.

V0 weights each slot's plausibility mask by the remaining card count and
normalizes. V1 starts from V0 and repeatedly lets each slot reclaim the part
of the shared pool that no slot currently accounts for, which approximates
reasoning about what the other hidden cards must be.

Both produce buffers shaped like the card-knowledge section: the identity
block of every occupied slot holds probabilities, the hinted color/rank
fields are carried over untouched and absent slots stay zero.
"""

import logging
from typing import Iterator, Optional

import numpy as np

from hanabi_obs.config.game_config import GameConfig
from hanabi_obs.env.observation import Observation
from hanabi_obs.errors import DegenerateBeliefError
from hanabi_obs.model.card_count import compute_card_count
from hanabi_obs.model.card_knowledge import encode_card_knowledge, plausibility_mask
from hanabi_obs.model.layout import card_knowledge_section_length

logger = logging.getLogger(__name__)

V1_NUM_ITERS = 100
V1_WEIGHT = 0.1


def _occupied_slots(obs: Observation) -> list[tuple[int, int]]:
    return [
        (player, slot)
        for player, hand in enumerate(obs.hands)
        for slot in range(len(hand))
    ]


def _normalize(
    belief: np.ndarray, slots: list[tuple[int, int]], stage: str
) -> np.ndarray:
    """Row-normalize a (num_slots, colors*ranks) matrix into a new array."""
    totals = belief.sum(axis=1)
    bad = np.flatnonzero(totals <= 0)
    if len(bad) > 0:
        player, slot = slots[bad[0]]
        logger.error("%s belief degenerate: player=%d slot=%d total=%s",
                     stage, player, slot, totals[bad[0]])
        raise DegenerateBeliefError(player, slot, float(totals[bad[0]]), stage)
    return belief / totals[:, None]


def encode_v0_belief(
    config: GameConfig,
    obs: Observation,
    section: np.ndarray,
    card_count: Optional[np.ndarray] = None,
) -> int:
    """Write card knowledge into ``section`` and turn its masks into V0 beliefs."""
    written = encode_card_knowledge(config, obs, section)
    if card_count is None:
        card_count = compute_card_count(config, obs)

    mask = plausibility_mask(config, section)
    slots = _occupied_slots(obs)
    if slots:
        players, hand_slots = zip(*slots)
        weighted = mask[players, hand_slots] * card_count.astype(np.float32)
        mask[players, hand_slots] = _normalize(weighted, slots, "v0")
    return written


def iterate_v1_belief(
    config: GameConfig,
    obs: Observation,
    num_iters: int = V1_NUM_ITERS,
    weight: float = V1_WEIGHT,
) -> Iterator[np.ndarray]:
    """Yield the (num_slots, colors*ranks) V1 belief after every iteration.

    Slots are the occupied ones in hand order. Each step:
      uncommitted = count - sum over all slots of belief
      proposal    = max(0, uncommitted + belief) * plausible
      belief      = normalize((1 - weight) * belief + weight * proposal)
    The subtraction includes the slot being updated, which is then added
    back; trained agents depend on that exact fixed point.
    """
    knowledge = np.zeros(card_knowledge_section_length(config), dtype=np.float32)
    encode_card_knowledge(config, obs, knowledge)
    card_count = compute_card_count(config, obs)
    v0 = knowledge.copy()
    encode_v0_belief(config, obs, v0, card_count)

    slots = _occupied_slots(obs)
    if not slots:
        return
    players, hand_slots = zip(*slots)
    plausible = plausibility_mask(config, knowledge)[players, hand_slots]
    belief = plausibility_mask(config, v0)[players, hand_slots]
    count = card_count.astype(np.float32)

    for _ in range(num_iters):
        uncommitted = count - belief.sum(axis=0)
        proposal = np.maximum(uncommitted[None, :] + belief, 0.0) * plausible
        blended = (1.0 - weight) * belief + weight * proposal
        belief = _normalize(blended, slots, "v1").astype(np.float32)
        yield belief


def v1_belief_section(
    config: GameConfig,
    obs: Observation,
    num_iters: int = V1_NUM_ITERS,
    weight: float = V1_WEIGHT,
) -> np.ndarray:
    """V1 belief laid out like the card-knowledge section."""
    section = np.zeros(card_knowledge_section_length(config), dtype=np.float32)
    encode_v0_belief(config, obs, section)

    belief = None
    for belief in iterate_v1_belief(config, obs, num_iters, weight):
        pass

    slots = _occupied_slots(obs)
    if belief is not None and slots:
        players, hand_slots = zip(*slots)
        plausibility_mask(config, section)[players, hand_slots] = belief
    return section
