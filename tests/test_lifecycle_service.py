from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest

from servermanager.services import lifecycle_service
from servermanager.services.lifecycle_service import auto_update_server, start_server, stop_server

PALWORLD = 1623730


@pytest.fixture
def install(tmp_path: Path) -> Path:
    install = tmp_path / "PalServer"
    install.mkdir()
    (install / "pal_server.exe").write_bytes(b"MZ")
    return install


@pytest.mark.asyncio
async def test_start_unknown_app() -> None:
    result = await start_server(42, "/tmp")
    assert result == {'success': False, 'error': "Unknown server app ID: 42"}


@pytest.mark.asyncio
async def test_start_missing_install_dir(tmp_path: Path) -> None:
    result = await start_server(PALWORLD, str(tmp_path / "missing"))
    assert result['success'] is False
    assert "Install directory not found" in result['error']


@pytest.mark.asyncio
async def test_start_missing_executable(tmp_path: Path) -> None:
    result = await start_server(PALWORLD, str(tmp_path))
    assert result['success'] is False
    assert "pal_server.exe" in result['error']


@pytest.mark.asyncio
async def test_start_spawns_detached(install: Path) -> None:
    with patch.object(lifecycle_service, "_spawn_detached", Mock(return_value=Mock(pid=777))) as spawn:
        result = await start_server(PALWORLD, str(install))
    assert result == {'success': True, 'pid': 777}
    spawn.assert_called_once_with(str(install / "pal_server.exe"), str(install))


@pytest.mark.asyncio
async def test_start_spawn_failure(install: Path) -> None:
    with patch.object(lifecycle_service, "_spawn_detached", Mock(side_effect=PermissionError("denied"))):
        result = await start_server(PALWORLD, str(install))
    assert result['success'] is False
    assert "denied" in result['error']


@pytest.mark.asyncio
async def test_stop_server() -> None:
    with patch.object(lifecycle_service, "kill_process", AsyncMock(return_value=False)) as kill:
        result = await stop_server(PALWORLD)
    assert result['success'] is True
    kill.assert_awaited_once_with("pal_server.exe")


@pytest.mark.asyncio
async def test_stop_unknown_app() -> None:
    assert (await stop_server(7))['success'] is False


@pytest.mark.asyncio
async def test_auto_update_without_new_build(install: Path) -> None:
    with patch.object(lifecycle_service, "get_server_build_id", AsyncMock(side_effect=["100", "100"])), \
         patch.object(lifecycle_service, "kill_process", AsyncMock(return_value=True)) as kill, \
         patch.object(lifecycle_service, "start_server", AsyncMock()) as start:
        result = await auto_update_server(PALWORLD, str(install), "/lib/steamapps", wait_seconds=0)

    assert result == {'success': False, 'error': 'No update available'}
    kill.assert_awaited_once()
    start.assert_not_awaited()


@pytest.mark.asyncio
async def test_auto_update_unreadable_manifest(install: Path) -> None:
    with patch.object(lifecycle_service, "get_server_build_id", AsyncMock(return_value=None)), \
         patch.object(lifecycle_service, "kill_process", AsyncMock(return_value=False)), \
         patch.object(lifecycle_service, "start_server", AsyncMock()) as start:
        result = await auto_update_server(PALWORLD, str(install), "/lib/steamapps", wait_seconds=0)
    assert result['success'] is False
    start.assert_not_awaited()


@pytest.mark.asyncio
async def test_auto_update_restarts_on_new_build(install: Path) -> None:
    with patch.object(lifecycle_service, "get_server_build_id", AsyncMock(side_effect=["100", "101"])), \
         patch.object(lifecycle_service, "kill_process", AsyncMock(return_value=True)), \
         patch.object(lifecycle_service, "start_server", AsyncMock(return_value={'success': True, 'pid': 1})) as start:
        result = await auto_update_server(PALWORLD, str(install), "/lib/steamapps", wait_seconds=0)

    assert result == {'success': True, 'previous_build_id': "100", 'build_id': "101"}
    start.assert_awaited_once_with(PALWORLD, str(install))


@pytest.mark.asyncio
async def test_auto_update_uses_configured_wait(install: Path) -> None:
    with patch.object(lifecycle_service, "get_setting", Mock(return_value=0)) as setting, \
         patch.object(lifecycle_service, "get_server_build_id", AsyncMock(return_value="5")), \
         patch.object(lifecycle_service, "kill_process", AsyncMock(return_value=True)):
        await auto_update_server(PALWORLD, str(install), "/lib/steamapps")
    setting.assert_called_once_with("update_wait_seconds")
