import sys
from typing import Dict, Iterable, TextIO

from utils.logger import getLogger


logger = getLogger(__name__)


class AlertSink:
    """Writes one line per alert to ``stream`` (stdout by default), unbuffered."""

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # resolved lazily so pytest's capsys replacement of sys.stdout is honoured
        return self._stream if self._stream is not None else sys.stdout

    def write_line(self, text: str):
        self.stream.write(text + '\n')
        self.stream.flush()

    def __call__(self, alerts: Iterable[Dict]):
        for a in alerts:
            logger.debug('alert %s: %s', a.get('id'), a.get('text'))
            self.write_line(a['text'])
