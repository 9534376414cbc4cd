"""Plugin system."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


@dataclass
class PluginMeta:
    """Descriptive information about a plugin."""

    name: str = "unnamed plugin"
    description: str = "a plugin for shrs"


class FailMode(Enum):
    """How a plugin that fails to initialize is handled."""

    WARN = "warn"
    """Display a warning and go on initializing the shell."""
    ABORT = "abort"
    """Abort the whole shell initialization."""


class Plugin(ABC):
    """Base class for plugins that extend a shell configuration."""

    @abstractmethod
    def init(self, shell) -> None:
        """Add hooks, builtins, state and so on to the shell configuration."""

    def meta(self) -> PluginMeta:
        """Metadata of the plugin."""
        logger.warning(
            "Using default plugin metadata. Please specify this information for your "
            "plugin by implementing Plugin.meta()"
        )
        return PluginMeta()

    def fail_mode(self) -> FailMode:
        """How to handle a failure of init; strict by default."""
        return FailMode.ABORT