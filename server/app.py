"""Development stats endpoint.

Serves ``GET /_stats`` in the same 7-field comma-separated format the agent
polls, built from local psutil readings, so the agent can be run end to end
without the real monitored host.
"""
import threading
import time
from typing import Optional, Sequence

import psutil
import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from utils.logger import getLogger


logger = getLogger("server.app")
DISK_PATH = '/'
# used when no interface reports a link speed (e.g. inside containers)
DEFAULT_LINK_MBIT = 1000

app = FastAPI()

# previous (timestamp, total bytes) sample for the bandwidth usage delta
_net_lock = threading.Lock()
_net_sample: Optional[tuple] = None


def format_stats(values: Sequence) -> str:
    """Render the canonical body: 7 fields joined by ','; load with two decimals."""
    if len(values) != 7:
        raise ValueError(f"expected 7 values, got {len(values)}")
    load, *counts = values
    return ",".join([f"{float(load):.2f}"] + [str(int(c)) for c in counts])


def _link_capacity() -> int:
    """Bytes/sec capacity of the fastest up interface (psutil reports Mbit/s)."""
    speeds = [s.speed for s in psutil.net_if_stats().values() if s.isup and s.speed > 0]
    return max(speeds, default=DEFAULT_LINK_MBIT) * 125000


def _net_usage() -> int:
    """Bytes/sec transferred on all interfaces since the previous request."""
    global _net_sample
    counters = psutil.net_io_counters()
    now = time.monotonic()
    total = counters.bytes_sent + counters.bytes_recv
    with _net_lock:
        prev = _net_sample
        _net_sample = (now, total)
    if prev is None or now <= prev[0]:
        return 0
    return max(0, int((total - prev[1]) / (now - prev[0])))


def collect_stats() -> list:
    vm = psutil.virtual_memory()
    disk = psutil.disk_usage(DISK_PATH)
    load1, _, _ = psutil.getloadavg()
    return [load1, vm.total, vm.used, disk.total, disk.used, _link_capacity(), _net_usage()]


@app.get("/_stats", response_class=PlainTextResponse)
async def stats():
    body = format_stats(collect_stats())
    logger.debug("/_stats -> %s", body)
    return body


def run_server(host: str = "127.0.0.1", port: int = 34520):
    logger.info("Starting dev stats endpoint on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level="info")


if __name__ == "__main__":
    run_server()
