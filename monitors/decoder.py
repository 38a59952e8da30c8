"""统计数据解析器
把 /_stats 返回的 7 个逗号分隔字段解析为 Snapshot，字段数不对或数值非法时抛出 DecodeError
"""
import math
import re
from dataclasses import dataclass, fields

from .errors import FormatError, NumericError


DELIMITER = ','


@dataclass(frozen=True)
class Snapshot:
    load_average: float
    mem_total: int
    mem_used: int
    disk_total: int
    disk_used: int
    net_bandwidth: int
    net_usage: int


FIELD_NAMES = tuple(f.name for f in fields(Snapshot))
# fields used as ratio denominators, must be > 0
NONZERO_FIELDS = frozenset({'mem_total', 'disk_total', 'net_bandwidth'})
# plain ASCII decimal; float() alone would also take signs, underscores, exponents and non-ASCII digits
LOAD_PATTERN = re.compile(r'\d+(\.\d+)?', re.ASCII)


def _parse_load(index: int, raw: str) -> float:
    name = FIELD_NAMES[index - 1]
    if not LOAD_PATTERN.fullmatch(raw):
        raise NumericError(index, name, raw, 'must be a plain non-negative decimal')
    value = float(raw)
    if not math.isfinite(value):
        raise NumericError(index, name, raw, 'must be finite')
    return value


def _parse_count(index: int, raw: str) -> int:
    name = FIELD_NAMES[index - 1]
    # plain decimal digits only: int() would also accept signs and underscores
    if not raw or not raw.isascii() or not raw.isdigit():
        raise NumericError(index, name, raw, 'must be a non-negative integer')
    value = int(raw)
    if value == 0 and name in NONZERO_FIELDS:
        raise NumericError(index, name, raw, 'must be greater than zero')
    return value


class StatsDecoder:
    def __call__(self, body: bytes | str) -> Snapshot:
        return self.decode(body)

    def decode(self, body: bytes | str) -> Snapshot:
        if isinstance(body, bytes):
            try:
                body = body.decode('ascii')
            except UnicodeDecodeError:
                raise FormatError('stats body is not ASCII text') from None

        parts = body.strip().split(DELIMITER)
        if len(parts) != len(FIELD_NAMES):
            raise FormatError(f'unexpected number of stats: {len(parts)}', field_count=len(parts))

        parts = [p.strip() for p in parts]
        values = [_parse_load(1, parts[0])]
        values.extend(_parse_count(i, raw) for i, raw in enumerate(parts[1:], start=2))
        return Snapshot(*values)
