"""统计数据获取
StatsFetcher 作为仿函数调用：对 /_stats 发起一次有时限的 GET，返回原始 body 字节
失败统一抛出 FetchError（NetworkError / StatusError），不做重试
client_timeout 是整次获取（建连 + 等待响应头 + 读取 body）的硬上限
"""
import time

import requests
from urllib3.util import Timeout

from config import AgentConfig
from .errors import NetworkError, StatusError
from utils.logger import getLogger


logger = getLogger(__name__)

# one byte per read so every socket recv is bounded by the remaining time
READ_SIZE = 1


def _response_socket(resp: requests.Response):
    connection = getattr(resp.raw, 'connection', None)
    return getattr(connection, 'sock', None)


class StatsFetcher:
    def __init__(self, config: AgentConfig | None = None, session: requests.Session | None = None):
        self.config = config or AgentConfig()
        self.session = session or requests.session()
        self.headers = {'user-agent': 'health-agent/1.0'}
        if self.config.host_header:
            self.headers['Host'] = self.config.host_header
        # total caps connect + header wait; urllib3 shrinks the read timeout by the connect duration
        self.timeout = Timeout(total=self.config.client_timeout, connect=self.config.client_timeout,
                               read=self.config.request_timeout)

    def _expired(self) -> NetworkError:
        return NetworkError(f'fetching stats exceeded client timeout of {self.config.client_timeout}s')

    def _read_body(self, resp: requests.Response, deadline: float) -> bytes:
        sock = _response_socket(resp)
        chunks = resp.iter_content(chunk_size=READ_SIZE)
        buf = bytearray()
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise self._expired()
            if sock is not None:
                sock.settimeout(min(self.config.request_timeout, remaining))
            chunk = next(chunks, None)
            if chunk is None:
                return bytes(buf)
            buf.extend(chunk)

    def __call__(self) -> bytes:
        url = self.config.url
        deadline = time.monotonic() + self.config.client_timeout
        try:
            with self.session.get(url, headers=self.headers, timeout=self.timeout, stream=True) as resp:
                if resp.status_code != 200:
                    raise StatusError(resp.status_code, url)
                body = self._read_body(resp, deadline)
        except requests.RequestException as e:
            if time.monotonic() >= deadline:
                raise self._expired() from e
            raise NetworkError(f'request to {url} failed: {e}') from e
        logger.debug('Fetched %d bytes from %s', len(body), url)
        return body

    def close(self):
        self.session.close()
