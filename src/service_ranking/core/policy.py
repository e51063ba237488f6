"""Scoring policy: every weight, bonus, penalty and cutoff in one record."""

from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, Mapping

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ScoringPolicy:
    """
    Named set of scoring weights.

    Penalties are stored as positive magnitudes and subtracted by the scorer.

    Attributes:
        lexical_hit: Points per expanded term found in name, short name or tags
        exact_name_bonus: Extra points when the name equals a term exactly
        thesaurus_bonus: One-off bonus when a thesaurus term is found
        semantic_multiplier: Factor applied to the external score in [0, 1]
        role_match_bonus: Points when the audience explicitly lists the role
        role_penalty: Points subtracted on audience mismatch
        locality_match_bonus: Points when the jurisdiction names the locality
        locality_penalty: Points subtracted when the locality is not served
        high_frequency_bonus: Points for high-frequency services
        satisfaction_weight: Factor applied to the raw satisfaction value
        cutoff_threshold: Minimum total to survive the noise cutoff
    """
    lexical_hit: float = 100.0
    exact_name_bonus: float = 50.0
    thesaurus_bonus: float = 1000.0
    semantic_multiplier: float = 1000.0
    role_match_bonus: float = 50.0
    role_penalty: float = 500.0
    locality_match_bonus: float = 200.0
    locality_penalty: float = 500.0
    high_frequency_bonus: float = 25.0
    satisfaction_weight: float = 0.5
    cutoff_threshold: float = 50.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    def context_only_ceiling(self) -> float:
        """Best total reachable from role, locality and popularity on a 0-100 satisfaction scale."""
        return (
            self.role_match_bonus
            + self.locality_match_bonus
            + self.high_frequency_bonus
            + 100.0 * self.satisfaction_weight
        )

    def requiring_evidence(self) -> "ScoringPolicy":
        """
        Return a copy whose cutoff sits above the context-only ceiling.

        With the default weights the cutoff becomes 350, so a record needs a
        lexical or thesaurus hit, or a semantic score above 0.35, to be kept.
        Context signals alone never surface a record.
        """
        ceiling = self.context_only_ceiling()
        return replace(self, cutoff_threshold=max(self.cutoff_threshold, (ceiling // 50 + 1) * 50))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ScoringPolicy":
        """
        Build a policy from plain configuration data, validating every weight.

        Raises:
            ConfigurationError: If a key is unknown or a weight is invalid
        """
        unknown = set(data) - {f.name for f in fields(cls)}
        if unknown:
            raise ConfigurationError(f"Unknown scoring policy keys: {sorted(unknown)}")
        try:
            return ScoringPolicyModel(**data).to_policy()
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid scoring policy: {e}")


class ScoringPolicyModel(BaseModel):
    """Pydantic model for validating scoring policies loaded from configuration."""

    lexical_hit: float = Field(100.0, ge=0.0)
    exact_name_bonus: float = Field(50.0, ge=0.0)
    thesaurus_bonus: float = Field(1000.0, ge=0.0)
    semantic_multiplier: float = Field(1000.0, ge=0.0)
    role_match_bonus: float = Field(50.0, ge=0.0)
    role_penalty: float = Field(500.0, ge=0.0)
    locality_match_bonus: float = Field(200.0, ge=0.0)
    locality_penalty: float = Field(500.0, ge=0.0)
    high_frequency_bonus: float = Field(25.0, ge=0.0)
    satisfaction_weight: float = Field(0.5, ge=0.0)
    cutoff_threshold: float = Field(50.0, ge=0.0)

    def to_policy(self) -> ScoringPolicy:
        """Convert to ScoringPolicy dataclass."""
        return ScoringPolicy(**self.model_dump())
