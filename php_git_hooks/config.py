"""
Configuration management for php-git-hooks.

Supports:
- Environment variables
- Config file (.php-git-hooks.toml)
- CLI arguments (highest priority)

Each hook command has its own options dataclass, fully enumerated with
defaults and validated at construction.
"""

import logging
import os
import sys
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from php_git_hooks.errors import InvalidOptionsError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".php-git-hooks.toml"
ENV_PREFIX = "PHP_GIT_HOOKS_"

SUPPORTED_STANDARDS: dict[str, str] = {
    "PSR1": "PSR-1",
    "PSR2": "PSR-2",
    "PSR12": "PSR-12",
    "Generic": "Generic",
    "MySource": "MySource",
    "Squiz": "Squiz",
    "Zend": "Zend",
}
DEFAULT_STANDARD = "PSR12"

MIN_LEVEL = 0
MAX_LEVEL = 8
FALLBACK_LEVEL = 1

TEST_DRIVERS = ("phpunit", "pest")


def _truthy(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


def _normalize_keys(section: dict[str, Any]) -> dict[str, Any]:
    """Accept ``memory-limit`` and ``hideWarnings`` as well as snake_case."""
    result = {}
    for key, value in section.items():
        key = key.replace("-", "_")
        key = "".join(f"_{c.lower()}" if c.isupper() else c for c in key)
        result[key] = value
    return result


def _build(options_cls: type, section: dict[str, Any]) -> Any:
    known = {f.name for f in fields(options_cls)}
    values = _normalize_keys(section)
    unknown = sorted(set(values) - known)
    if unknown:
        raise InvalidOptionsError(
            f"Unknown option(s) for {options_cls.__name__}: {', '.join(unknown)}"
        )
    return options_cls(**values)


def _check_paths(paths: Any) -> list[str]:
    if not isinstance(paths, (list, tuple)) or not all(isinstance(p, str) for p in paths):
        raise InvalidOptionsError("paths must be a list of strings")
    return list(paths)


@dataclass
class CodeStyleOptions:
    """Options for the phpcs check."""

    config: Optional[str] = None
    encoding: str = "utf-8"
    hide_warnings: bool = True
    only_staged: bool = True
    paths: list[str] = field(default_factory=list)
    standard: str = DEFAULT_STANDARD

    def __post_init__(self) -> None:
        self.paths = _check_paths(self.paths)
        if not self.encoding:
            self.encoding = "utf-8"
        if self.standard not in SUPPORTED_STANDARDS:
            logger.warning("Unsupported standard %r, using %s", self.standard, DEFAULT_STANDARD)
            self.standard = DEFAULT_STANDARD

    @property
    def standard_name(self) -> str:
        return SUPPORTED_STANDARDS[self.standard]


@dataclass
class StaticAnalysisOptions:
    """Options for the PHPStan check."""

    config: Optional[str] = None
    memory_limit: Optional[str] = None
    level: int = MAX_LEVEL
    only_staged: bool = True
    paths: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.paths = _check_paths(self.paths)
        if self.memory_limit is not None:
            self.memory_limit = str(self.memory_limit) or None

        try:
            level = int(self.level)
        except (TypeError, ValueError):
            level = -1
        if not MIN_LEVEL <= level <= MAX_LEVEL:
            logger.warning("Rule level %r is out of range, using %d", self.level, FALLBACK_LEVEL)
            level = FALLBACK_LEVEL
        self.level = level


@dataclass
class LintOptions:
    """Options for the ``php -l`` syntax check."""

    binary: str = "php"
    only_staged: bool = True
    paths: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.paths = _check_paths(self.paths)


@dataclass
class TestSuiteOptions:
    """Options for the pre-push test run."""

    __test__ = False

    driver: str = "phpunit"
    config: Optional[str] = None
    printer: Optional[str] = None
    timeout: Optional[float] = None

    def __post_init__(self) -> None:
        if self.driver not in TEST_DRIVERS:
            logger.warning("Unsupported test driver %r, using phpunit", self.driver)
            self.driver = "phpunit"
        if self.timeout is not None and self.timeout <= 0:
            raise InvalidOptionsError("timeout must be a positive number of seconds")


@dataclass
class HooksConfig:
    """Configuration for all hook commands."""

    code_style: CodeStyleOptions = field(default_factory=CodeStyleOptions)
    static_analysis: StaticAnalysisOptions = field(default_factory=StaticAnalysisOptions)
    lint: LintOptions = field(default_factory=LintOptions)
    test_suite: TestSuiteOptions = field(default_factory=TestSuiteOptions)
    source: Optional[Path] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "HooksConfig":
        """
        Load configuration from multiple sources.

        Priority (highest to lowest):
        1. Environment variables
        2. Config file
        3. Defaults
        """
        sections: dict[str, dict[str, Any]] = {
            "cs": {},
            "analyze": {},
            "lint": {},
            "test-suite": {},
        }

        if config_path is None:
            config_path = cls._find_config_file()

        if config_path and config_path.exists():
            logger.debug("Loading configuration from %s", config_path)
            with open(config_path, "rb") as f:
                file_config = tomllib.load(f)
            php = file_config.get("php", {})
            for name in sections:
                sections[name].update(php.get(name, {}))

        for name, values in cls._load_from_env().items():
            sections[name].update(values)

        return cls(
            code_style=_build(CodeStyleOptions, sections["cs"]),
            static_analysis=_build(StaticAnalysisOptions, sections["analyze"]),
            lint=_build(LintOptions, sections["lint"]),
            test_suite=_build(TestSuiteOptions, sections["test-suite"]),
            source=config_path if config_path and config_path.exists() else None,
        )

    @classmethod
    def _find_config_file(cls) -> Optional[Path]:
        """Find config file by walking up from current directory."""
        current = Path.cwd()

        while current != current.parent:
            config_file = current / CONFIG_FILE_NAME
            if config_file.exists():
                return config_file
            current = current.parent

        home_config = Path.home() / CONFIG_FILE_NAME
        if home_config.exists():
            return home_config

        return None

    @classmethod
    def _load_from_env(cls) -> dict[str, dict[str, Any]]:
        """Load configuration from environment variables."""
        result: dict[str, dict[str, Any]] = {}

        mappings = {
            "ONLY_STAGED": (("cs", "analyze", "lint"), "only_staged", _truthy),
            "PHPCS_STANDARD": (("cs",), "standard", str),
            "PHPSTAN_LEVEL": (("analyze",), "level", int),
            "PHPSTAN_MEMORY_LIMIT": (("analyze",), "memory_limit", str),
            "PHP_BINARY": (("lint",), "binary", str),
            "TEST_DRIVER": (("test-suite",), "driver", str),
            "TEST_TIMEOUT": (("test-suite",), "timeout", float),
        }

        for env_suffix, (section_names, field_name, converter) in mappings.items():
            value = os.environ.get(f"{ENV_PREFIX}{env_suffix}")
            if value is None:
                continue
            try:
                converted = converter(value)
            except ValueError as e:
                raise InvalidOptionsError(f"{ENV_PREFIX}{env_suffix}: {e}") from e
            for name in section_names:
                result.setdefault(name, {})[field_name] = converted

        return result

    def with_overrides(self, section: str, **overrides: Any) -> "HooksConfig":
        """Return a copy with CLI overrides applied to one command's options."""
        values = {key: value for key, value in overrides.items() if value is not None}
        if not values:
            return self
        current = getattr(self, section)
        return replace(self, **{section: replace(current, **values)})

    def to_toml(self) -> str:
        """Generate TOML configuration string."""
        cs = self.code_style
        analyze = self.static_analysis
        lines = [
            "# php-git-hooks configuration",
            "# Generated by: php-git-hooks init",
            "",
            "[php.cs]",
            '# config = "phpcs.xml"  # Defaults to phpcs.xml, then phpcs.xml.dist',
            f'encoding = "{cs.encoding}"',
            f"hideWarnings = {str(cs.hide_warnings).lower()}",
            f"onlyStaged = {str(cs.only_staged).lower()}",
            f'standard = "{cs.standard}"  # {", ".join(SUPPORTED_STANDARDS)}',
            "paths = []",
            "",
            "[php.analyze]",
            '# config = "phpstan.neon"  # Defaults to phpstan.neon, then phpstan.neon.dist',
            '# memory-limit = "1G"',
            f"level = {analyze.level}",
            f"onlyStaged = {str(analyze.only_staged).lower()}",
            'paths = ["src"]',
            "",
            "[php.lint]",
            f'binary = "{self.lint.binary}"',
            "",
            "[php.test-suite]",
            f'driver = "{self.test_suite.driver}"  # phpunit or pest',
            '# config = "phpunit.xml"  # Defaults to phpunit.xml, then phpunit.xml.dist',
            '# printer = "NunoMaduro\\\\Collision\\\\Adapters\\\\Phpunit\\\\Printer"',
        ]
        return "\n".join(lines) + "\n"
