from unittest import mock

import pytest
from fastapi.testclient import TestClient

from monitors import StatsDecoder
from server import app as stats_app


def test_format_stats():
    assert stats_app.format_stats([1.5, 10, 5, 20, 2, 125000, 7]) == '1.50,10,5,20,2,125000,7'


def test_format_stats_requires_seven_values():
    with pytest.raises(ValueError):
        stats_app.format_stats([1, 2, 3])


def test_stats_endpoint_is_decodable():
    values = [2.0, 8000, 4000, 50000, 1000, 125000000, 0]
    with mock.patch.object(stats_app, 'collect_stats', return_value=values):
        resp = TestClient(stats_app.app).get('/_stats')
    assert resp.status_code == 200
    assert resp.text == '2.00,8000,4000,50000,1000,125000000,0'
    snapshot = StatsDecoder()(resp.content)
    assert snapshot.mem_used == 4000


def test_collect_stats_reads_psutil():
    with mock.patch.object(stats_app, 'psutil') as ps:
        ps.virtual_memory.return_value = mock.Mock(total=100, used=40)
        ps.disk_usage.return_value = mock.Mock(total=1000, used=10)
        ps.getloadavg.return_value = (0.5, 0.4, 0.3)
        ps.net_if_stats.return_value = {'eth0': mock.Mock(isup=True, speed=100), 'lo': mock.Mock(isup=True, speed=0)}
        ps.net_io_counters.return_value = mock.Mock(bytes_sent=10, bytes_recv=20)
        values = stats_app.collect_stats()
    assert values[:6] == [0.5, 100, 40, 1000, 10, 12500000]
    assert values[6] >= 0
