"""Pydantic models for modelfit.yaml configuration."""

from typing import Literal

from pydantic import BaseModel, Field

from modelfit.catalog.candidate import TradeoffMode


class GPUConfig(BaseModel):
    """GPU identification overrides."""

    name: str | None = Field(
        default=None,
        description="GPU name to use instead of probing the host",
    )
    tier: int | None = Field(
        default=None,
        description="Performance tier override (0-3)",
        ge=0,
        le=3,
    )
    database_path: str | None = Field(
        default=None,
        description="Reference database JSON file (bundled database if unset)",
    )
    partial_strategy: Literal["first", "best"] = Field(
        default="best",
        description="How partial name matches pick among database keys",
    )


class CatalogConfig(BaseModel):
    """Remote model catalog configuration."""

    base_url: str = Field(default="https://huggingface.co", description="Catalog host")
    author: str = Field(default="mlc-ai", description="Organization whose models are listed")
    limit: int = Field(default=50, description="Maximum models fetched", ge=1, le=1000)
    quantization: str = Field(default="q4f16_1", description="Required quantization tag")
    library: str = Field(default="MLC", description="Required library tag")
    timeout: float = Field(default=30.0, description="Request timeout in seconds", gt=0)
    mb_per_billion: float = Field(
        default=700,
        description="Estimated MB of memory per billion parameters",
        gt=0,
    )
    enrich_scores: bool = Field(
        default=False,
        description="Attach Open LLM Leaderboard scores to candidates",
    )
    min_quality: bool = Field(
        default=False,
        description="Drop candidates below the trade-off mode's quality threshold",
    )
    rank_by_quality: bool = Field(
        default=False,
        description="Order fitting candidates by leaderboard score weighed for the mode",
    )


class SelectionConfig(BaseModel):
    """Model selection policy configuration."""

    mode: TradeoffMode = Field(
        default=TradeoffMode.BALANCED,
        description="Trade-off between speed and quality",
    )


class EngineConfig(BaseModel):
    """OpenAI-compatible inference server configuration."""

    base_url: str = Field(
        default="http://localhost:8000/v1",
        description="OpenAI-compatible endpoint (must include /v1)",
    )
    api_key: str = Field(default="none", description="API key (often ignored by local servers)")
    timeout: int = Field(default=120, description="Request timeout in seconds", ge=1)
    max_retries: int = Field(default=2, description="Retries on connection errors", ge=0)
    temperature: float = Field(default=0.7, description="Sampling temperature", ge=0.0, le=2.0)
    max_tokens: int = Field(default=256, description="Maximum tokens per reply", ge=1)
    system_prompt: str = Field(
        default="You are modelfit, a helpful AI assistant running on local hardware.",
        description="System prompt prepended to every conversation",
    )


class StorageConfig(BaseModel):
    """Chat history storage."""

    chats_path: str = Field(
        default="~/.modelfit/chats.json",
        description="JSON file holding chat history",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Root log level",
    )


class ModelfitConfig(BaseModel):
    """Root configuration model."""

    gpu: GPUConfig = Field(default_factory=GPUConfig)
    catalog: CatalogConfig = Field(default_factory=CatalogConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
