"""
监视器包：远程主机健康检查
StatsFetcher 获取原始数据，StatsDecoder 解析为 Snapshot，ThresholdEvaluator 返回报警列表，
AlertSink 输出报警，PollLoop 负责调度与失败计数
报警项为 dict，包含 'id'（唯一标识）、'text'（报警文本）和 'meta'
"""
from .errors import StatsError, FetchError, NetworkError, StatusError, DecodeError, FormatError, NumericError
from .decoder import Snapshot, StatsDecoder
from .evaluator import ThresholdEvaluator
from .fetcher import StatsFetcher
from .sink import AlertSink
from .service import PollLoop, LoopState

__all__ = [
    "StatsError", "FetchError", "NetworkError", "StatusError", "DecodeError", "FormatError", "NumericError",
    "Snapshot", "StatsDecoder", "ThresholdEvaluator", "StatsFetcher", "AlertSink", "PollLoop", "LoopState",
]
