"""Centralized configuration for context ranking and packing."""

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

GenerationType = Literal["single", "chain", "transform"]


class ScoringConfig(BaseSettings):
    """Field weights for the Boolean keyword scorer."""

    model_config = SettingsConfigDict(env_prefix="SCORE_", frozen=True)

    title_weight: float = Field(default=3, gt=0)
    tag_weight: float = Field(default=2, gt=0)
    content_weight: float = Field(default=1, gt=0)
    max_entries_for_ranking: int = Field(default=100, gt=0)

    @model_validator(mode="after")
    def _weights_are_ordered(self) -> "ScoringConfig":
        if not self.title_weight > self.tag_weight > self.content_weight:
            msg = (
                f"weights must satisfy title ({self.title_weight}) > "
                f"tag ({self.tag_weight}) > content ({self.content_weight})"
            )
            raise ValueError(msg)
        return self


class DocumentScoringConfig(BaseSettings):
    """Signal weights for scoring a parent document with its chunks."""

    model_config = SettingsConfigDict(env_prefix="DOC_SCORE_", frozen=True)

    title_weight: float = Field(default=3, ge=0)
    summary_weight: float = Field(default=2, ge=0)
    max_chunk_weight: float = Field(default=1, ge=0)
    top_chunks_weight: float = Field(default=0.5, ge=0)
    top_k: int = Field(default=3, gt=0)


class BudgetConfig(BaseSettings):
    """Knowledge Bank token budgets per generation type."""

    model_config = SettingsConfigDict(env_prefix="KB_BUDGET_", frozen=True)

    chars_per_token: int = Field(default=4, gt=0)
    default_tokens: int = Field(default=8_000, gt=0)
    single: int = Field(default=12_000, gt=0)
    chain: int = Field(default=4_000, gt=0)
    transform: int = Field(default=3_000, gt=0)

    def max_tokens(self, generation_type: GenerationType | None = None) -> int:
        """Token budget for *generation_type*, or the default budget when omitted."""
        if generation_type is None:
            return self.default_tokens
        return getattr(self, generation_type)

    def max_chars(self, generation_type: GenerationType | None = None) -> int:
        """Character budget derived from the token budget."""
        return self.max_tokens(generation_type) * self.chars_per_token


class PoolBudgetConfig(BudgetConfig):
    """AI Memory (node pool) token budgets per generation type."""

    model_config = SettingsConfigDict(env_prefix="POOL_BUDGET_", frozen=True)

    default_tokens: int = Field(default=4_000, gt=0)
    single: int = Field(default=4_000, gt=0)
    chain: int = Field(default=2_000, gt=0)
    transform: int = Field(default=1_500, gt=0)


class AppConfig(BaseSettings):
    """Top-level application configuration."""

    model_config = SettingsConfigDict(frozen=True)

    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    document_scoring: DocumentScoringConfig = Field(default_factory=DocumentScoringConfig)
    kb_budget: BudgetConfig = Field(default_factory=BudgetConfig)
    pool_budget: PoolBudgetConfig = Field(default_factory=PoolBudgetConfig)
