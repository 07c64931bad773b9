"""Configuration management for the localization pipeline."""

import re
import yaml
from pathlib import Path
from typing import Dict, List, Optional, Any, Tuple
from dataclasses import dataclass, field

CONFIG_FILE_NAME = 'i18n.yml'
CONFIG_VERSION = 1

# Bucket types with a built-in pipeline (see loaders.factory)
BUCKET_TYPES = ('json', 'markdown')

LOCALE_PLACEHOLDER = '[locale]'


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")


class ConfigValidationWarning:
    """Represents a configuration warning (non-fatal)."""

    def __init__(self, message: str):
        self.message = message

    def __str__(self):
        return self.message


@dataclass
class LocaleConfig:
    """Source and target locales."""
    source: str = "en"
    targets: List[str] = field(default_factory=lambda: ["es"])


@dataclass
class BucketConfig:
    """
    A group of resource files of one type.

    ``include`` holds path patterns containing ``[locale]``, e.g.
    ``locales/[locale].json``.
    """
    type: str = "json"
    include: List[str] = field(default_factory=list)
    locked_keys: List[str] = field(default_factory=list)
    ignored_keys: List[str] = field(default_factory=list)
    locked_patterns: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'include': self.include,
            'locked_keys': self.locked_keys,
            'ignored_keys': self.ignored_keys,
            'locked_patterns': self.locked_patterns,
        }


@dataclass
class Config:
    """Main configuration class."""
    version: int = CONFIG_VERSION
    locale: LocaleConfig = field(default_factory=LocaleConfig)
    buckets: List[BucketConfig] = field(default_factory=list)

    @classmethod
    def from_file(cls, config_path: Optional[Path] = None) -> 'Config':
        """Load configuration from a YAML file, falling back to defaults."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILE_NAME

            if not config_path.exists():
                return cls()

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Build a configuration from parsed YAML data."""
        return cls(
            version=data.get('version', CONFIG_VERSION),
            locale=LocaleConfig(**data.get('locale', {})),
            buckets=[BucketConfig(**bucket) for bucket in data.get('buckets', [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'version': self.version,
            'locale': {
                'source': self.locale.source,
                'targets': self.locale.targets,
            },
            'buckets': [bucket.to_dict() for bucket in self.buckets],
        }

    def save(self, config_path: Optional[Path] = None):
        """Save configuration to a YAML file."""
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILE_NAME

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def get_buckets(self, bucket_type: Optional[str] = None) -> List[BucketConfig]:
        """Return configured buckets, optionally restricted to one type."""
        if bucket_type is None:
            return list(self.buckets)
        return [bucket for bucket in self.buckets if bucket.type == bucket_type]

    def validate(self, raise_on_error: bool = False) -> Tuple[List[str], List[ConfigValidationWarning]]:
        """
        Validate configuration and return errors and warnings.

        Args:
            raise_on_error: If True, raise ConfigValidationError on validation errors

        Returns:
            Tuple of (errors, warnings) lists
        """
        errors = []
        warnings = []

        if not self._is_valid_locale_code(self.locale.source):
            errors.append(
                f"Invalid source locale code: '{self.locale.source}'. "
                f"Use a BCP 47 tag (e.g., 'en', 'pt-BR', 'zh-Hans')"
            )

        for target in self.locale.targets:
            if not self._is_valid_locale_code(target):
                errors.append(f"Invalid target locale code: '{target}'")

        if self.locale.source in self.locale.targets:
            errors.append(
                f"Source locale '{self.locale.source}' must not be listed as a target"
            )

        if not self.buckets:
            warnings.append(ConfigValidationWarning("No buckets configured"))

        for index, bucket in enumerate(self.buckets):
            label = f"buckets[{index}] ({bucket.type})"

            if bucket.type not in BUCKET_TYPES:
                errors.append(
                    f"Invalid bucket type '{bucket.type}'. "
                    f"Valid options: {', '.join(BUCKET_TYPES)}"
                )

            if not bucket.include:
                warnings.append(ConfigValidationWarning(f"{label} has no include paths"))

            for path_pattern in bucket.include:
                if LOCALE_PLACEHOLDER not in path_pattern:
                    errors.append(
                        f"{label} path '{path_pattern}' must contain '{LOCALE_PLACEHOLDER}'"
                    )

            for pattern in bucket.locked_patterns:
                try:
                    re.compile(pattern)
                except re.error as e:
                    warnings.append(ConfigValidationWarning(
                        f"{label} locked pattern '{pattern}' is not a valid regex and will be skipped: {e}"
                    ))

        if raise_on_error and errors:
            raise ConfigValidationError(errors)

        return errors, warnings

    @staticmethod
    def _is_valid_locale_code(code: str) -> bool:
        """
        Check if a locale code looks like a BCP 47 tag.

        Accepts a 2-3 letter language with optional script/region subtags
        (en, fil, en-US, zh-Hans, es-419).
        """
        if not code or not isinstance(code, str):
            return False

        return bool(re.match(r'^[a-zA-Z]{2,3}(-([a-zA-Z]{4}|[a-zA-Z]{2}|\d{3}))*$', code))


def create_default_config(bucket_type: str = 'json') -> Config:
    """Create a default configuration with one bucket of the given type."""
    config = Config()

    if bucket_type == 'markdown':
        include = ['docs/[locale]/index.md']
    else:
        include = ['locales/[locale].json']

    config.buckets.append(BucketConfig(type=bucket_type, include=include))
    return config
