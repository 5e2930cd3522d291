"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings

from tenantforms.models.classification import TreeConfig


class TaxConfig(BaseSettings):
    """Tax table selection."""

    model_config = {"env_prefix": "TENANTFORMS_TAX_"}

    alternate_tenant: str = "COMP-00004"  # tenant that gets the alternate tax table


class ClassificationConfig(BaseSettings):
    """Fixed-width classification code layout (HSN-style item classes)."""

    model_config = {"env_prefix": "TENANTFORMS_TREE_"}

    code_width: int = 8
    segment_width: int = 2
    max_level: int = 4

    def to_tree_config(self) -> TreeConfig:
        return TreeConfig(
            code_width=self.code_width,
            segment_width=self.segment_width,
            max_level=self.max_level,
        )


class RedisConfig(BaseSettings):
    """Redis cache configuration."""

    model_config = {"env_prefix": "TENANTFORMS_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0


class CacheConfig(BaseSettings):
    """Lookup-list caching in front of the data source."""

    model_config = {"env_prefix": "TENANTFORMS_CACHE_"}

    enabled: bool = False
    list_ttl_seconds: int = 300  # 5 minutes


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "TENANTFORMS_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    default_tenant: str = "ZRA"

    tax: TaxConfig = TaxConfig()
    classification: ClassificationConfig = ClassificationConfig()
    redis: RedisConfig = RedisConfig()
    cache: CacheConfig = CacheConfig()
