import yaml
import os
from typing import Optional, Literal
from pydantic import BaseModel, Field, model_validator


class DatabaseConfig(BaseModel):
    url: str
    statement_timeout_ms: Optional[int] = 30000  # Applied per connection; None = driver default
    echo: bool = False


class GenerationWeights(BaseModel):
    """Weights (percent) for the generation-time recipe."""
    category: float = 30.0
    area: float = 25.0
    size: float = 25.0
    budget: float = 20.0

    @model_validator(mode='after')
    def _check_total(self):
        total = self.category + self.area + self.size + self.budget
        if abs(total - 100.0) > 1e-9:
            raise ValueError(f"generation weights must sum to 100, got {total}")
        return self


class DetailWeights(BaseModel):
    """Weights (percent) for the detail-view recipe."""
    budget: float = 30.0
    area: float = 25.0
    category: float = 20.0
    size: float = 15.0
    yield_: float = Field(default=10.0, alias='yield')

    model_config = {'populate_by_name': True}

    @model_validator(mode='after')
    def _check_total(self):
        total = self.budget + self.area + self.category + self.size + self.yield_
        if abs(total - 100.0) > 1e-9:
            raise ValueError(f"detail weights must sum to 100, got {total}")
        return self


class ScoringConfig(BaseModel):
    """
    Configuration for the two scoring recipes.

    size_mode selects the generation-time size signal:
      tiered - compare land area with the requirement parsed from remarks
      flat   - batch placeholder, 60 when the listing has a land area, else 50
    """
    generation: GenerationWeights = Field(default_factory=GenerationWeights)
    detail: DetailWeights = Field(default_factory=DetailWeights)
    size_mode: Literal['tiered', 'flat'] = 'tiered'


class GenerationConfig(BaseModel):
    """Configuration for the PairGenerator batch."""
    min_score: float = Field(default=60.0, ge=0.0, le=100.0)
    listing_page_size: int = Field(default=100, gt=0)
    prospect_page_size: int = Field(default=200, gt=0)

    # Store failures are retried per page before the page is abandoned
    max_page_retries: int = Field(default=3, ge=1)
    retry_wait_seconds: float = Field(default=1.0, ge=0.0)


class LifecycleConfig(BaseModel):
    note_max_length: int = 1000


class QueueConfig(BaseModel):
    """Redis Queue settings for background generation runs."""
    enabled: bool = False
    redis_url: Optional[str] = None
    queue_name: str = 'matching'
    job_timeout_seconds: int = 1800


class ScheduleConfig(BaseModel):
    interval_seconds: int = 3600


class AppConfig(BaseModel):
    database: DatabaseConfig
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    lifecycle: LifecycleConfig = Field(default_factory=LifecycleConfig)
    queue: QueueConfig = Field(default_factory=QueueConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)


def load_config(config_path: str = "config.yaml") -> AppConfig:
    # If not found at relative path (e.g. running from root), try the project root
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    with open(config_path, "r") as f:
        data = yaml.safe_load(f) or {}

    # Allow env var override for DB URL
    env_db_url = os.environ.get("DATABASE_URL")
    if env_db_url:
        if not data.get('database'):
            data['database'] = {}
        data['database']['url'] = env_db_url

    # Allow env var override for Redis URL
    env_redis_url = os.environ.get("REDIS_URL")
    if env_redis_url:
        if not data.get('queue'):
            data['queue'] = {}
        data['queue']['redis_url'] = env_redis_url

    return AppConfig(**data)
