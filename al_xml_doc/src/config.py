"""
Configuration management for al-xml-doc.

Handles loading, saving, and validating configuration settings, and answers
the per-resource questions asked by the documentation check.
"""

import os
import shutil
from dataclasses import asdict, dataclass, field
from fnmatch import fnmatch
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional
from urllib.parse import unquote, urlparse

import yaml
from dotenv import load_dotenv

from .constants import DEFAULT_BATCH_SIZE
from .models import Severity
from ..utils.logger_setup import LoggerManager, get_logger

logger = get_logger(__name__)

# Load environment variables from .env file in the working directory
load_dotenv(Path.cwd() / ".env")

ENV_CHECK_ENABLED = "AL_XML_DOC_CHECK_ENABLED"
ENV_SEVERITY = "AL_XML_DOC_SEVERITY"


def _parse_bool(value: str) -> bool:
    return value.strip().lower() not in ('0', 'false', 'no', 'off', '')


@dataclass
class CheckOverride:
    """Settings for resources matching a glob pattern."""
    pattern: str
    enabled: Optional[bool] = None
    severity: Optional[str] = None


@dataclass
class CheckConfig:
    """Procedure documentation check configuration."""
    enabled: bool = True
    severity: str = "Information"
    overrides: List[CheckOverride] = field(default_factory=list)

    def __post_init__(self):
        """Apply environment variables and normalize overrides."""
        enabled_env = os.getenv(ENV_CHECK_ENABLED)
        if enabled_env:
            self.enabled = _parse_bool(enabled_env)

        severity_env = os.getenv(ENV_SEVERITY)
        if severity_env:
            self.severity = severity_env

        self.overrides = [
            override if isinstance(override, CheckOverride) else CheckOverride(**override)
            for override in self.overrides
        ]


@dataclass
class ScanningConfig:
    """File scanning configuration."""
    paths: List[str] = field(default_factory=lambda: ["."])
    exclude: List[str] = field(default_factory=lambda: [
        ".git", ".alpackages", ".snapshots", ".al-xml-doc", "node_modules"
    ])
    batch_size: int = DEFAULT_BATCH_SIZE
    max_workers: int = 8


@dataclass
class Config:
    """Main configuration class."""
    check: CheckConfig = field(default_factory=CheckConfig)
    scanning: ScanningConfig = field(default_factory=ScanningConfig)
    project_root: str = field(default_factory=lambda: os.getcwd())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create Config from dictionary."""
        return cls(
            check=CheckConfig(**data.get('check', {})),
            scanning=ScanningConfig(**data.get('scanning', {})),
            project_root=data.get('project_root', os.getcwd())
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Config to dictionary."""
        return {
            'check': asdict(self.check),
            'scanning': asdict(self.scanning),
            'project_root': self.project_root
        }


class ConfigManager:
    """Manages configuration loading, saving, and resolution."""

    DEFAULT_CONFIG_DIR = ".al-xml-doc"
    DEFAULT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_root: Optional[str] = None):
        """
        Initialize ConfigManager.

        Args:
            project_root: Root directory of the project. If None, uses current directory.
        """
        self.project_root = Path(project_root or os.getcwd())
        self.config_dir = self.project_root / self.DEFAULT_CONFIG_DIR
        self.config_file = self.config_dir / self.DEFAULT_CONFIG_FILE

    def load(self) -> Config:
        """
        Load configuration from file or create default.

        Returns:
            Loaded or default configuration
        """
        if self.config_file.exists():
            config = self._load_from_file()
        else:
            config = Config()

        config.project_root = str(self.project_root)
        return config

    def _load_from_file(self) -> Config:
        """Load configuration from YAML file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}

            data = self._resolve_env_vars(data)

            if 'project_root' not in data:
                data['project_root'] = str(self.project_root)

            return Config.from_dict(data)
        except Exception as e:
            logger.warning(f"Error loading config file: {e}")
            logger.info("Using default configuration.")
            config = Config()
            config.project_root = str(self.project_root)
            return config

    def save(self, config: Config):
        """
        Save configuration to file.

        Args:
            config: Configuration to save
        """
        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, 'w', encoding='utf-8') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    def init_config(self, overwrite: bool = False) -> bool:
        """
        Initialize configuration file with defaults.

        Args:
            overwrite: Whether to overwrite existing config

        Returns:
            True if config was created/updated, False otherwise
        """
        if self.config_file.exists() and not overwrite:
            logger.info(f"Configuration already exists at: {self.config_file}")
            return False

        if overwrite and self.config_file.exists():
            self.config_file.unlink()
            logger.info("Removed existing configuration file")

        default_config = Config()
        default_config.project_root = str(self.project_root)
        self.save(default_config)

        logger.info(f"Configuration initialized at: {self.config_file}")
        return True

    def _resolve_env_vars(self, data: Any) -> Any:
        """
        Recursively resolve environment variables in configuration.

        Supports ${VAR_NAME} syntax.
        """
        if isinstance(data, dict):
            return {k: self._resolve_env_vars(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [self._resolve_env_vars(item) for item in data]
        elif isinstance(data, str):
            if data.startswith('${') and data.endswith('}'):
                var_name = data[2:-1]
                return os.environ.get(var_name, data)
        return data

    def validate(self, config: Config) -> List[str]:
        """
        Validate configuration.

        Args:
            config: Configuration to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        valid_severities = [severity.value for severity in Severity]

        if config.check.severity.lower() not in [s.lower() for s in valid_severities]:
            errors.append(f"Invalid severity: {config.check.severity}. Use: {valid_severities}")

        for override in config.check.overrides:
            if not override.pattern:
                errors.append("Check override without pattern")
            if override.severity and override.severity.lower() not in [s.lower() for s in valid_severities]:
                errors.append(f"Invalid severity for '{override.pattern}': {override.severity}")

        if config.scanning.batch_size < 1:
            errors.append(f"Invalid batch size: {config.scanning.batch_size}")
        if config.scanning.max_workers < 1:
            errors.append(f"Invalid worker count: {config.scanning.max_workers}")

        return errors

    def cleanup(self) -> bool:
        """
        Remove configuration directory and all its contents.

        Returns:
            True if cleanup was successful, False otherwise
        """
        if not self.config_dir.exists():
            logger.info(f"No configuration found at: {self.config_dir}")
            return False

        # Release the log file when it lives in the configuration directory
        log_file = LoggerManager.get_log_file()
        if log_file is not None and self.config_dir.resolve() in log_file.resolve().parents:
            LoggerManager.shutdown()

        shutil.rmtree(self.config_dir)
        return True


class DocumentationCheckConfiguration:
    """Per-resource view of the documentation check settings."""

    def __init__(self, config: Config):
        self.config = config

    def _resource_paths(self, resource: str) -> List[str]:
        """Get the absolute and project-relative forms of a resource path."""
        if resource.startswith('file:'):
            resource = unquote(urlparse(resource).path)

        path = PurePosixPath(Path(resource).as_posix())
        paths = [str(path)]
        try:
            relative = Path(resource).resolve().relative_to(Path(self.config.project_root).resolve())
            paths.append(relative.as_posix())
        except ValueError:
            pass
        return paths

    def _matching_overrides(self, resource: str) -> List[CheckOverride]:
        paths = self._resource_paths(resource)
        return [
            override for override in self.config.check.overrides
            if any(fnmatch(path, override.pattern) for path in paths)
        ]

    def is_documentation_check_enabled(self, resource: str) -> bool:
        """Check whether procedure documentation is checked for a resource."""
        enabled = self.config.check.enabled
        for override in self._matching_overrides(resource):
            if override.enabled is not None:
                enabled = override.enabled
        return enabled

    def severity_for(self, resource: str) -> Severity:
        """Get the severity of documentation diagnostics for a resource."""
        severity = self.config.check.severity
        for override in self._matching_overrides(resource):
            if override.severity:
                severity = override.severity
        return Severity.from_string(severity)
