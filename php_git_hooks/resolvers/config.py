"""
Tool configuration resolution.

Picks exactly one configuration file for a tool. First match wins:

1. The explicit override, when it exists and matches the type hint
2. The project default (e.g. ``phpcs.xml``)
3. The distributed default (e.g. ``phpcs.xml.dist``)
4. Nothing, in which case the tool uses built-in defaults
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from php_git_hooks.models import ConfigSource, ResolvedConfig

logger = logging.getLogger(__name__)

DEFAULT_SOURCES = (ConfigSource.PROJECT_DEFAULT, ConfigSource.DISTRIBUTED_DEFAULT)


def _override_path(override: str, search_root: Path, type_hint: Optional[str]) -> Optional[Path]:
    if type_hint and type_hint not in override:
        logger.warning("Ignoring configuration %s: expected a %s file", override, type_hint)
        return None

    path = Path(override)
    if not path.is_absolute():
        path = search_root / path

    if not path.is_file():
        logger.warning("Ignoring configuration %s: file does not exist", override)
        return None
    return path


def resolve(
    override: Optional[str],
    search_root: Path,
    candidate_names: Sequence[str],
    type_hint: Optional[str] = None,
) -> ResolvedConfig:
    """
    Resolve the configuration source for a tool.

    Args:
        override: Explicit configuration path, relative to ``search_root``
        search_root: Directory holding the default files
        candidate_names: Project default name, then distributed default name
        type_hint: Substring the override must contain (e.g. ".xml")

    Returns:
        ResolvedConfig naming the single source in use
    """
    if override:
        path = _override_path(override, search_root, type_hint)
        if path is not None:
            return ResolvedConfig(ConfigSource.EXPLICIT, path.resolve())

    for source, name in zip(DEFAULT_SOURCES, candidate_names):
        path = search_root / name
        if path.is_file():
            return ResolvedConfig(source, path.resolve())

    return ResolvedConfig(ConfigSource.NONE, None)


def describe(resolved: ResolvedConfig, override: Optional[str] = None) -> Optional[str]:
    """Human-readable line naming the configuration in use."""
    if resolved.absolute_path is None:
        return None

    if resolved.source_kind is ConfigSource.EXPLICIT:
        return f"Using custom configuration file ({override or resolved.absolute_path.name})"
    if resolved.source_kind is ConfigSource.PROJECT_DEFAULT:
        return f"Using project configuration file ({resolved.absolute_path.name})"
    return f"Using distributed configuration file ({resolved.absolute_path.name})"
