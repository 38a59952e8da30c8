import os
import time

from utils import logger as log_utils


def test_clear_old_logs_removes_only_expired_files(tmp_path, monkeypatch):
    monkeypatch.setattr(log_utils, 'LOG_DIR', tmp_path)
    old = tmp_path / 'monitors_service.log.1'
    fresh = tmp_path / 'monitors_service.log'
    other = tmp_path / 'notes.txt'
    for f in (old, fresh, other):
        f.write_text('x')
    ten_days_ago = time.time() - 10 * 24 * 3600
    os.utime(old, (ten_days_ago, ten_days_ago))
    os.utime(other, (ten_days_ago, ten_days_ago))

    assert log_utils.clear_old_logs(days=7) == 1
    assert not old.exists()
    assert fresh.exists()
    assert other.exists()


def test_clear_old_logs_without_log_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(log_utils, 'LOG_DIR', tmp_path / 'missing')
    assert log_utils.clear_old_logs() == 0


def test_get_logger_is_cached():
    assert log_utils.getLogger('monitors.cache_check') is log_utils.getLogger('monitors.cache_check')
