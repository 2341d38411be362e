"""Service configuration.

BadgeConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

from downloadbadge.errors import ConfigurationError

ENV_PREFIX = "DOWNLOADBADGE_"


@dataclass(frozen=True, slots=True)
class BadgeConfig:
    """Service configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = BadgeConfig(base_url="http://localhost:8080", timeout=2.0)
    """

    # Badge renderer
    base_url: str = "https://img.shields.io"
    timeout: float = 10.0
    user_agent: str = "downloadbadge/0.1"

    # Display defaults
    default_label: str = "downloads"
    default_color: str = "blue"
    default_style: str = "flat"
    default_max_age: int = 2_592_000  # 30 days

    # Upstream count resolver
    rubygems_url: str = "https://rubygems.org"

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "rubygems_url", self.rubygems_url.rstrip("/"))
        if self.timeout <= 0:
            msg = f"timeout must be positive, got {self.timeout!r}"
            raise ConfigurationError(msg)
        if self.default_max_age < 0:
            msg = f"default_max_age must be non-negative, got {self.default_max_age!r}"
            raise ConfigurationError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BadgeConfig:
        """Build a config from ``DOWNLOADBADGE_*`` environment variables.

        ``DOWNLOADBADGE_BASE_URL`` sets ``base_url``,
        ``DOWNLOADBADGE_TIMEOUT`` sets ``timeout``, and so on. Unset
        variables keep their defaults.

        Raises:
            ConfigurationError: If a numeric variable cannot be parsed.
        """
        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for field in fields(cls):
            raw = env.get(ENV_PREFIX + field.name.upper())
            if raw is None or not raw.strip():
                continue
            converter = {"float": float, "int": int}.get(str(field.type), str)
            try:
                overrides[field.name] = converter(raw.strip())
            except ValueError:
                msg = f"{ENV_PREFIX}{field.name.upper()}={raw!r} is not a valid {field.type}"
                raise ConfigurationError(msg) from None
        return cls(**overrides)  # type: ignore[arg-type]
