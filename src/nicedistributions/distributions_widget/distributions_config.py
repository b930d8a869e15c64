"""
Distributions widget settings (platformdirs + JSON).

Persisted items (schema v1):
- base_url: backend root URL for the distributions endpoint
- request_timeout_sec: HTTP timeout
- cache_max_entries: size of the fetch cache
- time_zone: display time zone for date-time fields ("local", "UTC", IANA name)
- theme: "light" or "dark"

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches -> defaults (or keep loaded values, on request)
- Unknown keys in loaded JSON are ignored with warnings
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from nicedistributions.distributions_widget.classifier import SchemaLookup
from nicedistributions.distributions_widget.distributions_widget import ContextProvider, DistributionsWidget
from nicedistributions.distributions_widget.fetcher import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_TIMEOUT_SEC,
    DistributionFetcher,
)
from nicedistributions.distributions_widget.presenter import DistributionPresenter
from nicedistributions.distributions_widget.prettify import Prettifier, prettify
from nicedistributions.utils.logging import get_logger

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1


@dataclass
class DistributionsConfigData:
    """JSON-serializable settings payload."""
    schema_version: int = SCHEMA_VERSION
    base_url: str = "http://localhost:5151"
    request_timeout_sec: float = DEFAULT_TIMEOUT_SEC
    cache_max_entries: int = DEFAULT_CACHE_MAX_ENTRIES
    time_zone: str = "local"
    theme: str = "light"

    def to_json_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "base_url": self.base_url,
            "request_timeout_sec": self.request_timeout_sec,
            "cache_max_entries": self.cache_max_entries,
            "time_zone": self.time_zone,
            "theme": self.theme,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "DistributionsConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - keeps defaults for missing or unparseable values
        """
        defaults = cls()
        try:
            schema_version = int(d.get("schema_version", -1))
        except (TypeError, ValueError):
            schema_version = -1
        data = cls(schema_version=schema_version)

        data.base_url = str(d.get("base_url", defaults.base_url))
        data.time_zone = str(d.get("time_zone", defaults.time_zone))
        theme = str(d.get("theme", defaults.theme)).lower()
        if theme not in ("light", "dark"):
            logger.warning(f"Unknown theme '{theme}' in distributions config, using '{defaults.theme}'")
            theme = defaults.theme
        data.theme = theme

        try:
            data.request_timeout_sec = max(0.1, float(d.get("request_timeout_sec", defaults.request_timeout_sec)))
        except (TypeError, ValueError):
            logger.warning("request_timeout_sec is not a number, using default")
        try:
            data.cache_max_entries = max(1, int(d.get("cache_max_entries", defaults.cache_max_entries)))
        except (TypeError, ValueError):
            logger.warning("cache_max_entries is not an integer, using default")

        known_keys = set(defaults.to_json_dict())
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in distributions config, ignoring")

        return data


class DistributionsConfig:
    """
    Manager for loading/saving DistributionsConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[DistributionsConfigData] = None):
        self.path = path
        self.data = data if data is not None else DistributionsConfigData()

    @staticmethod
    def default_config_path(
        app_name: str = "nicedistributions",
        filename: str = "distributions_config.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/nicedistributions/distributions_config.json
        Linux:   ~/.config/nicedistributions/distributions_config.json
        Windows: %APPDATA%\\nicedistributions\\distributions_config.json
        """
        return Path(user_config_dir(app_name, app_author)) / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
    ) -> "DistributionsConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version
        """
        path = config_path or cls.default_config_path()
        default_data = DistributionsConfigData(schema_version=schema_version)

        try:
            parsed = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.debug(f"Distributions config not found at {path}, using defaults")
            return cls(path=path, data=default_data)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Distributions config at {path} is unreadable: {e}, using defaults")
            return cls(path=path, data=default_data)

        if not isinstance(parsed, dict):
            logger.warning(f"Distributions config at {path} does not contain a dict, using defaults")
            return cls(path=path, data=default_data)

        loaded = DistributionsConfigData.from_json_dict(parsed)
        if loaded.schema_version != schema_version:
            if reset_on_version_mismatch:
                logger.warning(
                    f"Distributions config schema version mismatch: loaded={loaded.schema_version}, "
                    f"expected={schema_version}, resetting to defaults"
                )
                return cls(path=path, data=default_data)
            loaded.schema_version = schema_version
        return cls(path=path, data=loaded)

    def save(self) -> None:
        """Write config to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.data.to_json_dict(), indent=2), encoding="utf-8")
        logger.info(f"Saved distributions config to {self.path}")

    def make_fetcher(self) -> DistributionFetcher:
        """DistributionFetcher talking to the configured backend."""
        return DistributionFetcher(
            base_url=self.data.base_url,
            timeout=self.data.request_timeout_sec,
            cache_max_entries=self.data.cache_max_entries,
        )

    def make_presenter(
        self,
        schema: SchemaLookup,
        *,
        fetcher: Optional[DistributionFetcher] = None,
        prettifier: Prettifier = prettify,
    ) -> DistributionPresenter:
        """DistributionPresenter formatting dates in the configured time zone.

        A new fetcher is made from this config when ``fetcher`` is None.
        """
        return DistributionPresenter(
            fetcher if fetcher is not None else self.make_fetcher(),
            schema=schema,
            time_zone=self.data.time_zone,
            prettifier=prettifier,
        )

    def make_widget(
        self,
        *,
        group: str,
        presenter: DistributionPresenter,
        context_provider: ContextProvider,
    ) -> DistributionsWidget:
        """DistributionsWidget drawn with the configured theme."""
        return DistributionsWidget(
            group=group,
            presenter=presenter,
            context_provider=context_provider,
            theme=self.data.theme,
        )
