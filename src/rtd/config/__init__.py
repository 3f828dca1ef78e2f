"""
RTD Configuration Module

Layered module configuration:
    Defaults → Platform (identity SDK or store cache) → Caller

Key components:
    - ModuleConfig: One configuration layer (None = inherit)
    - ConfigResolver: Resolves the effective config for an auction
    - ResolvedModuleConfig: Fully resolved values consumed by the engine
"""

from .module_config import (
    InvalidModuleConfigError,
    ModuleConfig,
    ModuleParams,
    ResolvedModuleConfig,
    TransformationConfig,
    get_default_module_config,
    load_module_config,
)
from .config_resolver import (
    ConfigResolver,
    lift_into_params,
    merge_configs,
    to_resolved_config,
)

__all__ = [
    "InvalidModuleConfigError",
    "ModuleConfig",
    "ModuleParams",
    "ResolvedModuleConfig",
    "TransformationConfig",
    "get_default_module_config",
    "load_module_config",
    "ConfigResolver",
    "lift_into_params",
    "merge_configs",
    "to_resolved_config",
]
