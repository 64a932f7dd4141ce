"""Run configuration for xcmigrate."""

from __future__ import annotations

import yaml
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Optional

from .exceptions import ConfigError
from .fingerprint import FingerprintScheme


@dataclass
class RunConfig:
    """Settings for one migration check."""
    directory: str = "."
    model: str = "Model"
    solved_file: Optional[str] = None
    fingerprint_scheme: FingerprintScheme = FingerprintScheme.LEGACY
    verbose: bool = False
    debug: bool = False

    def __post_init__(self):
        for name in ("directory", "model"):
            _check_type(name, getattr(self, name), str)
        if self.solved_file is not None:
            _check_type("solved_file", self.solved_file, str)
        for name in ("verbose", "debug"):
            _check_type(name, getattr(self, name), bool)

        if not isinstance(self.fingerprint_scheme, (str, FingerprintScheme)):
            raise ConfigError(
                f"Invalid fingerprint scheme: {self.fingerprint_scheme!r}",
                {"choices": [s.value for s in FingerprintScheme]}
            )
        if isinstance(self.fingerprint_scheme, str):
            try:
                self.fingerprint_scheme = FingerprintScheme(self.fingerprint_scheme)
            except ValueError:
                choices = [s.value for s in FingerprintScheme]
                raise ConfigError(
                    f"Unknown fingerprint scheme: {self.fingerprint_scheme}",
                    {"choices": choices}
                )
        if self.debug:
            self.verbose = True

    @property
    def solved_path(self) -> Path:
        """Solved file location, defaulting to <directory>/<model>.solved."""
        if self.solved_file:
            return Path(self.solved_file)
        return Path(self.directory) / f"{self.model}.solved"

    def merged(self, **overrides: Any) -> RunConfig:
        """Return a copy with every non-None override applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)

    @classmethod
    def from_dict(cls, data: dict) -> RunConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                {"unknown": unknown}
            )
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> RunConfig:
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}", {"path": str(path)})

        with open(path, 'r') as f:
            content = f.read()

        try:
            data = yaml.safe_load(content) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse config file: {e}", {"path": str(path)})

        if not isinstance(data, dict):
            raise ConfigError(
                "Config file must contain a mapping",
                {"path": str(path), "type": type(data).__name__}
            )
        return cls.from_dict(data)


def _check_type(name: str, value: Any, expected: type) -> None:
    if not isinstance(value, expected):
        raise ConfigError(
            f"'{name}' must be a {expected.__name__}, got {type(value).__name__}",
            {"key": name, "type": type(value).__name__}
        )
