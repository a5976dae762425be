from .loader import load_config, load_config_with_overrides
from .schema import (
    AcmgConfig,
    DataSourceVersions,
    InheritanceConfig,
    PipelineConfig,
    ScoringConfig,
)

__all__ = [
    "load_config",
    "load_config_with_overrides",
    "AcmgConfig",
    "DataSourceVersions",
    "InheritanceConfig",
    "PipelineConfig",
    "ScoringConfig",
]
