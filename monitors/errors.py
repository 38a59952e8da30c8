"""统计数据获取/解析过程中的错误类型

所有错误均继承 StatsError，由 PollLoop 统一计入连续失败次数
"""


class StatsError(Exception):
    """Base class for every failure that counts against the failure budget."""


class FetchError(StatsError):
    pass


class NetworkError(FetchError):
    """Connection, timeout, transport or body-read failure."""


class StatusError(FetchError):
    def __init__(self, status_code: int, url: str | None = None):
        self.status_code = status_code
        self.url = url
        super().__init__(f'non-200 status code: {status_code}')


class DecodeError(StatsError):
    pass


class FormatError(DecodeError):
    def __init__(self, message: str, field_count: int | None = None):
        self.field_count = field_count
        super().__init__(message)


class NumericError(DecodeError):
    def __init__(self, index: int, field: str, value: str, reason: str = 'not a valid number'):
        # index is 1-based, matching the wire field order
        self.index = index
        self.field = field
        self.value = value
        super().__init__(f'field {index} ({field}) {reason}: {value!r}')
