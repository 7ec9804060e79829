from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
import os
import sys

log = logging.getLogger(__name__)

DEFAULT_ORG_ID = "00000000-0000-0000-0000-000000000001"


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    session_path: Path
    logs_dir: Path


@dataclass(frozen=True)
class BackendSettings:
    url: str
    anon_key: str
    org_id: str = DEFAULT_ORG_ID
    timeout_seconds: float = 10.0

    @property
    def configured(self) -> bool:
        return bool(self.url and self.anon_key)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "BackendSettings":
        env = os.environ if environ is None else environ
        url = env.get("RSM_SUPABASE_URL", "").strip().rstrip("/")
        key = env.get("RSM_SUPABASE_ANON_KEY", "").strip()
        org_id = env.get("RSM_ORG_ID", "").strip() or DEFAULT_ORG_ID
        try:
            timeout = float(env.get("RSM_HTTP_TIMEOUT", "10"))
        except ValueError:
            timeout = 10.0

        settings = cls(url=url, anon_key=key, org_id=org_id, timeout_seconds=timeout)
        if not settings.configured:
            log.warning("backend_credentials_missing set RSM_SUPABASE_URL and RSM_SUPABASE_ANON_KEY")
        return settings


def _windows_appdata() -> Path:
    return Path(os.environ.get("APPDATA", str(Path.home() / "AppData" / "Roaming")))


def _mac_app_support() -> Path:
    return Path.home() / "Library" / "Application Support"


def get_app_paths(app_name: str = "RiceStockManager") -> AppPaths:
    if sys.platform.startswith("win"):
        base = _windows_appdata() / app_name
    elif sys.platform == "darwin":
        base = _mac_app_support() / app_name
    else:
        base = Path.home() / f".{app_name.lower()}"

    logs = base / "logs"

    base.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, session_path=base / "session.json", logs_dir=logs)
