"""
Unit tests for BackupService.
"""

import logging
import os

import pytest

from bridgestore.backup import BackupService


@pytest.fixture
def database_file(tmp_path):
    path = tmp_path / 'bridge.db'
    path.write_bytes(b'SQLite format 3\x00' + bytes(range(256)) * 64)
    return path


class TestBackupSkips:
    """Test the cases where no file operation happens."""

    @pytest.mark.asyncio
    async def test_network_backend_is_noop(self, caplog):
        service = BackupService(None)

        with caplog.at_level(logging.WARNING):
            assert await service.backup() is None

        assert 'non-sqlite' in caplog.text

    @pytest.mark.asyncio
    async def test_memory_database_is_noop(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        service = BackupService(':memory:')

        assert await service.backup() is None
        assert os.listdir(tmp_path) == []

    @pytest.mark.asyncio
    async def test_missing_database_is_noop(self, tmp_path):
        service = BackupService(str(tmp_path / 'not-created-yet.db'))

        assert await service.backup() is None
        assert os.listdir(tmp_path) == []

    def test_backup_path(self):
        assert BackupService('data/bridge.db').backup_path == 'data/bridge.db.backup'
        assert BackupService(':memory:').backup_path is None
        assert BackupService(None).backup_path is None


class TestBackupCopy:
    """Test snapshot creation."""

    @pytest.mark.asyncio
    async def test_copies_file_byte_for_byte(self, database_file):
        service = BackupService(str(database_file))

        backup_path = await service.backup()

        assert backup_path == str(database_file) + '.backup'
        with open(backup_path, 'rb') as fp:
            assert fp.read() == database_file.read_bytes()

    @pytest.mark.asyncio
    async def test_second_backup_keeps_first_snapshot(self, database_file, caplog):
        service = BackupService(str(database_file))
        first_contents = database_file.read_bytes()
        await service.backup()

        database_file.write_bytes(b'changed after first backup')
        with caplog.at_level(logging.WARNING):
            assert await service.backup() is None

        with open(service.backup_path, 'rb') as fp:
            assert fp.read() == first_contents
        assert 'NOT backing up' in caplog.text

    @pytest.mark.asyncio
    async def test_existing_backup_never_overwritten(self, database_file):
        backup = database_file.with_name('bridge.db.backup')
        backup.write_bytes(b'operator snapshot')

        assert await BackupService(str(database_file)).backup() is None
        assert backup.read_bytes() == b'operator snapshot'

    @pytest.mark.asyncio
    async def test_copy_error_propagates(self, database_file, monkeypatch):
        def broken_copy(source, destination):
            raise PermissionError('read-only filesystem')

        monkeypatch.setattr(BackupService, '_copy', staticmethod(broken_copy))

        with pytest.raises(PermissionError):
            await BackupService(str(database_file)).backup()

    @pytest.mark.asyncio
    async def test_partial_copy_removed_and_retry_succeeds(self, database_file, monkeypatch):
        def disk_full(rd, wr):
            wr.write(rd.read(10))
            raise OSError(28, 'No space left on device')

        monkeypatch.setattr('bridgestore.backup.shutil.copyfileobj', disk_full)
        service = BackupService(str(database_file))

        with pytest.raises(OSError, match='No space left'):
            await service.backup()
        assert not os.path.exists(service.backup_path)

        monkeypatch.undo()
        assert await service.backup() == service.backup_path
        with open(service.backup_path, 'rb') as fp:
            assert fp.read() == database_file.read_bytes()
