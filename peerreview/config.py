"""Configuration management.

``Settings`` is a **metaclass-based singleton**: the first call to
``Settings.load()`` creates the instance; every later call returns
the same object.  Use ``update()`` to change values at runtime, or
``reload()`` to re-read everything from disk.

User-editable configuration lives in ``.metadata/server.yaml``.  On first
run a missing file is copied from ``.metadata.example/``.  A handful of
``PEERREVIEW_*`` environment variables override the file.
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from peerreview.utils.pagination import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

logger = logging.getLogger(__name__)

SERVER_CONFIG_FILE = "server.yaml"

# env var -> (settings field, converter)
_ENV_OVERRIDES: dict[str, tuple[str, Any]] = {
    "PEERREVIEW_DB_PATH": ("db_path", Path),
    "PEERREVIEW_HOST": ("host", str),
    "PEERREVIEW_PORT": ("port", int),
    "PEERREVIEW_ENV": ("environment", str),
    "PEERREVIEW_LOG_LEVEL": ("log_level", str),
}


# ---------------------------------------------------------------------------
# Singleton metaclass
# ---------------------------------------------------------------------------

class _SettingsMeta(type):
    """Metaclass that enforces a process-wide singleton for *Settings*.

    * First ``Settings(...)`` creates and caches the instance.
    * Later ``Settings(...)`` calls return the cached instance (args ignored).
    """

    _instances: dict[type, Any] = {}

    def __call__(cls, *args: Any, **kwargs: Any) -> Any:
        if cls not in cls._instances:
            cls._instances[cls] = super().__call__(*args, **kwargs)
        return cls._instances[cls]


# ---------------------------------------------------------------------------
# Settings dataclass (singleton)
# ---------------------------------------------------------------------------

@dataclass
class Settings(metaclass=_SettingsMeta):
    """Application settings: a singleton with runtime-mutable fields.

    Usage::

        settings = Settings.load()          # first call → create
        settings = Settings.load()          # later → same object
        settings.update(db_path=Path(...))  # runtime change
        settings = Settings.reload()        # re-read from disk
    """

    db_path: Path = Path("peerreview.db")
    metadata_dir: Path = Path(".metadata")
    host: str = "127.0.0.1"
    port: int = 8080
    environment: str = "development"
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    default_page_size: int = DEFAULT_PAGE_SIZE
    max_page_size: int = MAX_PAGE_SIZE

    # ── Computed properties ────────────────────────────────────────────

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    # ── Runtime helpers ───────────────────────────────────────────────

    def update(self, **kwargs: Any) -> None:
        """Mutate settings fields at runtime.

        >>> Settings.load().update(db_path=Path("/tmp/test.db"))
        """
        for key, value in kwargs.items():
            if not hasattr(self, key):
                raise AttributeError(f"Settings has no field '{key}'")
            setattr(self, key, value)

    # ── Factory / lifecycle ───────────────────────────────────────────

    @classmethod
    def load(cls, base_dir: Optional[Path] = None) -> "Settings":
        """Load or return the singleton Settings instance.

        On first call the singleton is created; subsequent calls return
        the cached instance.  Pass *base_dir* to override the project
        root (defaults to the repository root one level above ``peerreview/``).
        """
        if cls in _SettingsMeta._instances:
            return _SettingsMeta._instances[cls]  # type: ignore[return-value]

        if base_dir is None:
            base_dir = Path(__file__).resolve().parent.parent

        metadata_dir = base_dir / ".metadata"
        cls._ensure_default_files(base_dir, metadata_dir)

        values = _load_server_config(metadata_dir / SERVER_CONFIG_FILE)
        db_path = Path(values.pop("db_path", "peerreview.db"))
        if not db_path.is_absolute():
            db_path = base_dir / db_path
        values["db_path"] = db_path
        values.update(_env_overrides())

        return cls(metadata_dir=metadata_dir, **values)

    @classmethod
    def reload(cls, base_dir: Optional[Path] = None) -> "Settings":
        """Discard the current singleton and re-load from disk."""
        cls.reset()
        return cls.load(base_dir)

    @classmethod
    def reset(cls) -> None:
        """Discard the singleton so the next ``load()`` re-creates it."""
        _SettingsMeta._instances.pop(cls, None)

    # ── Private ───────────────────────────────────────────────────────

    @staticmethod
    def _ensure_default_files(base_dir: Path, metadata_dir: Path) -> None:
        """Copy ``.metadata.example/`` templates when real files are missing."""
        metadata_dir.mkdir(parents=True, exist_ok=True)

        example_dir = base_dir / ".metadata.example"
        if not example_dir.exists():
            return

        for example_file in example_dir.iterdir():
            if example_file.is_file():
                target = metadata_dir / example_file.name
                if not target.exists():
                    shutil.copy2(example_file, target)
                    logger.info("Created .metadata/%s from template", example_file.name)


# ---------------------------------------------------------------------------
# YAML / environment loaders
# ---------------------------------------------------------------------------

_FILE_KEYS = {
    "db_path": str,
    "host": str,
    "port": int,
    "environment": str,
    "log_level": str,
    "default_page_size": int,
    "max_page_size": int,
}


def _load_server_config(path: Path) -> dict[str, Any]:
    """Load known keys from ``server.yaml``.

    Missing, malformed or mistyped entries are skipped so the dataclass
    defaults apply.
    """
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        return {}

    values: dict[str, Any] = {}
    for key, convert in _FILE_KEYS.items():
        raw = data.get(key)
        if raw is None or raw == "":
            continue
        try:
            values[key] = convert(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid %s=%r in %s", key, raw, path.name)

    origins = data.get("cors_origins")
    if isinstance(origins, list):
        values["cors_origins"] = [str(o) for o in origins]
    return values


def _env_overrides() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for var, (key, convert) in _ENV_OVERRIDES.items():
        raw = os.environ.get(var)
        if not raw:
            continue
        try:
            values[key] = convert(raw)
        except ValueError:
            logger.warning("Ignoring invalid %s=%r", var, raw)
    return values


def save_server_config(path: Path, settings: Settings) -> None:
    """Persist the file-backed settings to ``server.yaml``."""
    data: dict[str, Any] = {
        "db_path": str(settings.db_path),
        "host": settings.host,
        "port": settings.port,
        "environment": settings.environment,
        "log_level": settings.log_level,
        "cors_origins": list(settings.cors_origins),
        "default_page_size": settings.default_page_size,
        "max_page_size": settings.max_page_size,
    }
    with open(path, "w", encoding="utf-8") as f:
        f.write("# PeerReview server settings\n")
        f.write("# PEERREVIEW_* environment variables take precedence\n\n")
        yaml.dump(
            data,
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
