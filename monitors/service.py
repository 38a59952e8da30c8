"""轮询服务：按固定间隔获取 -> 解析 -> 判定 -> 输出报警，并统计连续失败次数

状态机只有 POLLING 与 TERMINATED 两个状态，连续失败达到上限后终止
"""
from enum import Enum
from typing import Callable, List, Dict
import time

from config import AgentConfig
from .decoder import StatsDecoder, Snapshot
from .errors import StatsError
from .evaluator import ThresholdEvaluator
from .fetcher import StatsFetcher
from .sink import AlertSink
from utils.logger import getLogger


logger = getLogger(__name__)

FINAL_NOTICE = 'Unable to fetch server statistic'
EXIT_FAILURE = 1


class LoopState(Enum):
    POLLING = 'polling'
    TERMINATED = 'terminated'


class PollLoop:
    def __init__(self,
                 config: AgentConfig | None = None,
                 fetcher: Callable[[], bytes] | None = None,
                 decoder: Callable[[bytes], Snapshot] | None = None,
                 evaluator: Callable[[Snapshot], List[Dict]] | None = None,
                 sink: AlertSink | None = None,
                 sleep: Callable[[float], None] | None = None):
        """
        config: 不可变配置（地址、间隔、阈值、失败上限）
        fetcher: 无参可调用对象，返回原始 body；失败时抛出 StatsError
        sleep: 间隔等待函数，测试时可替换以避免真实等待
        """
        self.config = config or AgentConfig()
        self.fetcher = fetcher or StatsFetcher(self.config)
        self.decoder = decoder or StatsDecoder()
        self.evaluator = evaluator or ThresholdEvaluator(self.config)
        self.sink = sink or AlertSink()
        self.sleep = sleep or time.sleep
        self.state = LoopState.POLLING
        self.consecutive_failures = 0
        self.cycles = 0

    def _poll_once(self) -> Snapshot:
        return self.decoder(self.fetcher())

    def step(self) -> LoopState:
        """Run one cycle and return the resulting state."""
        if self.state is LoopState.TERMINATED:
            raise RuntimeError('PollLoop already terminated')
        self.cycles += 1
        try:
            snapshot = self._poll_once()
        except StatsError as e:
            self.consecutive_failures += 1
            logger.error('Error fetching stats (%d/%d): %s: %s', self.consecutive_failures,
                         self.config.failure_budget, type(e).__name__, e)
            if self.consecutive_failures >= self.config.failure_budget:
                self.sink.write_line(FINAL_NOTICE)
                self.state = LoopState.TERMINATED
                logger.error('Failure budget exhausted after %d consecutive failures, terminating',
                             self.consecutive_failures)
                return self.state
        else:
            self.consecutive_failures = 0
            alerts = self.evaluator(snapshot)
            logger.debug('Cycle %d: %s -> %d alert(s)', self.cycles, snapshot, len(alerts))
            self.sink(alerts)
        self.sleep(self.config.poll_interval)
        return self.state

    def run(self) -> int:
        """Poll until the failure budget is exhausted; returns the process exit status."""
        logger.info('PollLoop started: url=%s interval=%ss budget=%d', self.config.url,
                    self.config.poll_interval, self.config.failure_budget)
        while self.step() is LoopState.POLLING:
            pass
        return EXIT_FAILURE
