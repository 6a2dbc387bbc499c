# ============================================================================
# inputforge/base/config.py
# Engine Configuration Management
# ============================================================================
#
# PURPOSE:
# Defaults for every knob of the mutation engine: which format variants are
# applied, which strategies run, the reserved input names and the inputs
# that must never be mutated. Values come from INPUTFORGE_* environment
# variables when set.
#
# KEY CONCEPTS:
# 1. Frozen dataclasses: configuration cannot change once loaded
# 2. Environment variables: INPUTFORGE_FORMATS=straight,append etc.
# 3. Singleton: one shared config, replaceable in tests via set_config()
#
# ============================================================================

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..contracts.enums import DEFAULT_FORMATS, FormatId
from ..contracts.models import EXTRA_NAME, FUZZ_NAME, FUZZ_NAME_VALUE

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_list(name: str) -> Optional[Tuple[str, ...]]:
    raw = os.getenv(name)
    if raw is None:
        return None
    # "a, b,,c" -> ("a", "b", "c")
    return tuple(x.strip() for x in raw.split(",") if x.strip())


# ============================================================================
# Mutation Configuration
# ============================================================================
# Which mutations a generation run produces by default.

@dataclass(frozen=True)
class MutationConfig:
    # Format variants applied to every payload, in this order
    formats: Tuple[FormatId, ...] = DEFAULT_FORMATS

    # Strategy toggles (value mutation is the classic "replace each input")
    enable_value_mutation: bool = True
    enable_extra_parameter: bool = False
    enable_name_fuzzing: bool = False

    # Reserved names used by the injection strategies
    extra_param_name: str = EXTRA_NAME
    fuzz_name: str = FUZZ_NAME
    fuzz_name_value: str = FUZZ_NAME_VALUE

    # Inputs that are never value-mutated, wherever they are nested
    # (anti-CSRF tokens break the whole request when altered)
    immutable_inputs: Tuple[str, ...] = ("csrf_token", "authenticity_token", "__RequestVerificationToken")


# ============================================================================
# Logging Configuration
# ============================================================================

@dataclass(frozen=True)
class LogConfig:
    # DEBUG shows every dropped duplicate and skipped strategy
    level: str = "INFO"
    format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


# ============================================================================
# Master Configuration Container
# ============================================================================

@dataclass(frozen=True)
class EngineConfig:
    mutation: MutationConfig = field(default_factory=MutationConfig)
    log: LogConfig = field(default_factory=LogConfig)
    debug: bool = False

    @classmethod
    def from_env(cls) -> "EngineConfig":
        defaults = MutationConfig()

        formats = _env_list("INPUTFORGE_FORMATS")
        immutables = _env_list("INPUTFORGE_IMMUTABLE_INPUTS")

        mutation = MutationConfig(
            formats=tuple(FormatId(f) for f in formats) if formats else defaults.formats,
            enable_value_mutation=_env_bool("INPUTFORGE_VALUE_MUTATION", "true"),
            enable_extra_parameter=_env_bool("INPUTFORGE_EXTRA_PARAMETER", "false"),
            enable_name_fuzzing=_env_bool("INPUTFORGE_NAME_FUZZING", "false"),
            extra_param_name=os.getenv("INPUTFORGE_EXTRA_PARAM_NAME", defaults.extra_param_name),
            fuzz_name=os.getenv("INPUTFORGE_FUZZ_NAME", defaults.fuzz_name),
            fuzz_name_value=os.getenv("INPUTFORGE_FUZZ_NAME_VALUE", defaults.fuzz_name_value),
            immutable_inputs=immutables if immutables is not None else defaults.immutable_inputs,
        )

        debug = _env_bool("INPUTFORGE_DEBUG", "false")
        log = LogConfig(level=os.getenv("INPUTFORGE_LOG_LEVEL", "DEBUG" if debug else "INFO"))

        return cls(mutation=mutation, log=log, debug=debug)


# ============================================================================
# Global Configuration Singleton
# ============================================================================

_config: Optional[EngineConfig] = None


def get_config() -> EngineConfig:
    """
    Get the global configuration instance, loading it from the environment
    on first use.
    """
    global _config
    if _config is None:
        _config = EngineConfig.from_env()
    return _config


def set_config(config: Optional[EngineConfig]) -> None:
    """Replace the global configuration (mainly used for testing). None forces a reload."""
    global _config
    _config = config


def setup_logging(config: Optional[EngineConfig] = None) -> None:
    """
    Configure Python's logging system from the engine settings.
    Call this once at application startup; library code only uses loggers.
    """
    cfg = config or get_config()
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    logging.basicConfig(
        level=getattr(logging, cfg.log.level.upper()),
        format=cfg.log.format,
        handlers=handlers,
    )
    logger.debug(f"Logging configured at {cfg.log.level}")
