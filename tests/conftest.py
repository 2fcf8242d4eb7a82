from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))
# Keep settings and log files out of the real home directory
os.environ.setdefault("SSM_DATA_DIR", tempfile.mkdtemp(prefix="ssm-test-"))

from servermanager import settings  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings file at a per-test location."""
    settings_path = tmp_path / "settings" / "settings.json"
    monkeypatch.setattr(settings, "SETTINGS_PATH", str(settings_path))
    return settings_path


@pytest.fixture
def steam_root(tmp_path: Path) -> Path:
    """An empty Steam install with a steamapps folder."""
    root = tmp_path / "Steam"
    (root / "steamapps").mkdir(parents=True)
    return root


def write_manifest(library_root: Path, app_id: int, build_id: str = "1000") -> Path:
    library_root.mkdir(parents=True, exist_ok=True)
    manifest = library_root / f"appmanifest_{app_id}.acf"
    manifest.write_text(
        '"AppState"\n{\n'
        f'\t"appid"\t\t"{app_id}"\n'
        f'\t"buildid"\t\t"{build_id}"\n'
        '}\n',
        encoding="utf-8",
    )
    return manifest
