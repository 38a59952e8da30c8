"""阈值判定
ThresholdEvaluator 作为仿函数调用：Snapshot -> 报警列表
报警项为 dict: {'id': 唯一标识, 'text': 报警文本, 'meta': 计算值}
顺序固定为 load, memory, disk, network；所有比较均不含边界
"""
import math
from typing import List, Dict

from config import AgentConfig
from .decoder import Snapshot


BYTES_PER_MIB = 1024 * 1024
BYTES_PER_SEC_PER_MBIT = 1000 * 1000 / 8


class ThresholdEvaluator:
    def __init__(self, config: AgentConfig | None = None):
        self.config = config or AgentConfig()

    def _check_load(self, s: Snapshot) -> Dict | None:
        if s.load_average > self.config.load_threshold:
            return {'id': 'load-high', 'text': f'Load Average is too high: {round(s.load_average)}',
                    'meta': {'load_average': s.load_average}}
        return None

    def _check_memory(self, s: Snapshot) -> Dict | None:
        usage = s.mem_used / s.mem_total
        if usage > self.config.memory_threshold:
            # half-up: 82.5 -> 83
            percent = math.floor(usage * 100 + 0.5)
            return {'id': 'mem-high', 'text': f'Memory usage too high: {percent}%',
                    'meta': {'usage': usage, 'percent': percent}}
        return None

    def _check_disk(self, s: Snapshot) -> Dict | None:
        free_mib = (s.disk_total - s.disk_used) / BYTES_PER_MIB
        if free_mib < self.config.disk_free_threshold_mib:
            return {'id': 'disk-low', 'text': f'Free disk space is too low: {free_mib:.2f} Mb left',
                    'meta': {'free_mib': free_mib}}
        return None

    def _check_network(self, s: Snapshot) -> Dict | None:
        usage = s.net_usage / s.net_bandwidth
        if usage > self.config.network_threshold:
            available_mbit = (s.net_bandwidth - s.net_usage) / BYTES_PER_SEC_PER_MBIT
            return {'id': 'net-high', 'text': f'Network bandwidth usage high: {available_mbit:.2f} Mbit/s available',
                    'meta': {'usage': usage, 'available_mbit': available_mbit}}
        return None

    def __call__(self, snapshot: Snapshot) -> List[Dict]:
        checks = (self._check_load, self._check_memory, self._check_disk, self._check_network)
        return [a for a in (check(snapshot) for check in checks) if a is not None]
