"""
Run parameter parsing.

Parameters arrive as a list of {key, value} entries. Numeric knobs default to 0
when absent (decay_bucket_size_months defaults to 1); a value that is present but
not a finite number aborts the run with InvalidParameterError.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence, Union

from backend_reputation.analysis_engine.time_weight import TimeWeightParams
from backend_reputation.core.exceptions import InvalidParameterError, MissingInputError

InputEntries = Union[Sequence[tuple[str, Any]], Mapping[str, Any]]


def normalize_inputs(raw: Any) -> list[tuple[str, Any]]:
    """
    Accept [{key, value}, ...], [(key, value), ...] or a plain mapping.

    Entries without a string key are dropped; order is preserved so the first
    matching entry wins.
    """
    if raw is None:
        return []
    if isinstance(raw, dict):
        return [(str(k), v) for k, v in raw.items()]
    entries: list[tuple[str, Any]] = []
    for item in raw:
        if isinstance(item, dict):
            key, value = item.get("key"), item.get("value")
        else:
            key, value = item
        if isinstance(key, str):
            entries.append((key, value))
    return entries


def find_input(inputs: InputEntries, keys: str | Iterable[str]) -> tuple[str, Any] | None:
    """Return the first (key, value) whose key is one of keys, else None."""
    key_list = [keys] if isinstance(keys, str) else list(keys)
    entries = inputs.items() if isinstance(inputs, dict) else inputs
    for key, value in entries:
        if key in key_list:
            return key, value
    return None


def get_numeric_input(inputs: InputEntries, keys: str | Iterable[str], default: float = 0.0) -> float:
    key_list = [keys] if isinstance(keys, str) else list(keys)
    found = find_input(inputs, key_list)
    if found is None or found[1] is None:
        return float(default)
    value = found[1]
    if isinstance(value, bool):
        raise InvalidParameterError(key_list[0], value)
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError):
        raise InvalidParameterError(key_list[0], value) from None
    if not math.isfinite(number):
        raise InvalidParameterError(key_list[0], value)
    return number


def get_input_value(inputs: InputEntries, key: str) -> str:
    """Required string input; absent, empty or non-string raises MissingInputError."""
    found = find_input(inputs, key)
    if found is None or not isinstance(found[1], str) or not found[1].strip():
        raise MissingInputError(key)
    return found[1]


def _time_weight_params(inputs: InputEntries) -> TimeWeightParams:
    bucket_size = get_numeric_input(inputs, "decay_bucket_size_months", 1)
    if bucket_size <= 0:
        raise InvalidParameterError("decay_bucket_size_months", bucket_size, "non-positive bucket size")
    return TimeWeightParams(
        engagement_window_months=get_numeric_input(inputs, "engagement_window_months"),
        monthly_decay_rate_percent=get_numeric_input(inputs, "monthly_decay_rate_percent"),
        decay_bucket_size_months=bucket_size,
    )


@dataclass(frozen=True)
class ContributionScoreParams:
    comment_base_score: float
    comment_upvote_weight: float
    comment_downvote_weight: float
    self_interaction_penalty_factor: float
    project_owner_upvote_bonus_multiplier: float
    time_weight: TimeWeightParams

    @classmethod
    def from_inputs(cls, inputs: InputEntries) -> "ContributionScoreParams":
        return cls(
            comment_base_score=get_numeric_input(inputs, "comment_base_score"),
            comment_upvote_weight=get_numeric_input(inputs, "comment_upvote_weight"),
            comment_downvote_weight=get_numeric_input(inputs, "comment_downvote_weight"),
            self_interaction_penalty_factor=get_numeric_input(inputs, "self_interaction_penalty_factor"),
            project_owner_upvote_bonus_multiplier=get_numeric_input(
                inputs, "project_owner_upvote_bonus_multiplier"
            ),
            time_weight=_time_weight_params(inputs),
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "comment_base_score": self.comment_base_score,
            "comment_upvote_weight": self.comment_upvote_weight,
            "comment_downvote_weight": self.comment_downvote_weight,
            "self_interaction_penalty_factor": self.self_interaction_penalty_factor,
            "project_owner_upvote_bonus_multiplier": self.project_owner_upvote_bonus_multiplier,
            "engagement_window_months": self.time_weight.engagement_window_months,
            "monthly_decay_rate_percent": self.time_weight.monthly_decay_rate_percent,
            "decay_bucket_size_months": self.time_weight.decay_bucket_size_months,
        }


@dataclass(frozen=True)
class ProposalEngagementParams:
    funded_concluded_reward_weight: float
    unfunded_penalty_weight: float
    time_weight: TimeWeightParams

    @classmethod
    def from_inputs(cls, inputs: InputEntries) -> "ProposalEngagementParams":
        return cls(
            funded_concluded_reward_weight=get_numeric_input(
                inputs, ["funded_concluded_reward_weight", "funded_concluded_proposal_weight"]
            ),
            unfunded_penalty_weight=get_numeric_input(
                inputs, ["unfunded_penalty_weight", "unfunded_proposal_weight"]
            ),
            time_weight=_time_weight_params(inputs),
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "funded_concluded_reward_weight": self.funded_concluded_reward_weight,
            "unfunded_penalty_weight": self.unfunded_penalty_weight,
            "engagement_window_months": self.time_weight.engagement_window_months,
            "monthly_decay_rate_percent": self.time_weight.monthly_decay_rate_percent,
            "decay_bucket_size_months": self.time_weight.decay_bucket_size_months,
        }
