"""Batched encoding for training pipelines."""

from typing import Sequence

import numpy as np
import torch

from hanabi_obs.config.game_config import GameConfig
from hanabi_obs.env.observation import Observation
from hanabi_obs.model.state_encoder import CanonicalObservationEncoder


class BatchObservationEncoder:
    """Encode many observations of one game into a dense (batch, obs) array."""

    def __init__(self, config: GameConfig, device: str = "cpu"):
        self.encoder = CanonicalObservationEncoder(config)
        self.device = torch.device(device)

    @property
    def obs_size(self) -> int:
        return self.encoder.size

    def encode_batch(
        self,
        observations: Sequence[Observation],
        show_own_cards: bool = False,
        hide_action: bool = False,
    ) -> np.ndarray:
        """Encode observations row by row into a pre-allocated array.

        Returns:
            float32 array of shape (len(observations), obs_size)
        """
        out = np.zeros((len(observations), self.obs_size), dtype=np.float32)
        for i, obs in enumerate(observations):
            out[i] = self.encoder.encode(obs, show_own_cards=show_own_cards, hide_action=hide_action)
        return out

    def encode_batch_tensor(
        self,
        observations: Sequence[Observation],
        show_own_cards: bool = False,
        hide_action: bool = False,
    ) -> torch.Tensor:
        obs = self.encode_batch(observations, show_own_cards, hide_action)
        return torch.from_numpy(obs).to(self.device)

    def belief_targets(self, observations: Sequence[Observation]) -> torch.Tensor:
        """V1 beliefs stacked as (batch, players * hand_size, colors*ranks)."""
        config = self.encoder.config
        num_slots = config.num_players * config.hand_size
        beliefs = np.zeros((len(observations), num_slots, config.bits_per_card), dtype=np.float32)
        for i, obs in enumerate(observations):
            beliefs[i] = self.encoder.encode_v1_belief(obs).reshape(num_slots, config.bits_per_card)
        return torch.from_numpy(beliefs).to(self.device)
