"""Order ids.

An order id is the decimal string of a 63-bit integer:

    | 41 bits ms since 2024-01-01 UTC | 10 bits node | 12 bits counter |

Ids from one node sort by creation time, which keeps the orders primary key
append-friendly. Each API process must run with its own ORDER_ID_NODE.
When the clock steps back or a millisecond runs out of counter values, the
generator keeps counting from the last millisecond it issued instead of
waiting for wall time to catch up.
"""

import threading
import time

from config.settings import settings

_EPOCH_MS = 1_704_067_200_000
_NODE_BITS = 10
_COUNTER_BITS = 12
_COUNTER_MASK = (1 << _COUNTER_BITS) - 1
_MAX_NODE = (1 << _NODE_BITS) - 1


class OrderIdGenerator:
    def __init__(self, node: int = 0) -> None:
        if not 0 <= node <= _MAX_NODE:
            raise ValueError(f"node must be within 0-{_MAX_NODE}, got {node}")
        self._node = node
        self._counter = 0
        self._last_ms = -1
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            now = _now_ms()
            if now < self._last_ms:
                # clock stepped back: keep issuing on the last seen millisecond
                now = self._last_ms
            if now == self._last_ms:
                self._counter = (self._counter + 1) & _COUNTER_MASK
                if self._counter == 0:
                    # counter exhausted: borrow the next millisecond
                    now = self._last_ms + 1
            else:
                self._counter = 0
            self._last_ms = now
            value = (
                (now - _EPOCH_MS) << (_NODE_BITS + _COUNTER_BITS)
                | self._node << _COUNTER_BITS
                | self._counter
            )
            return str(value)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


_generator = OrderIdGenerator(settings.ORDER_ID_NODE)


def generate_id() -> str:
    return _generator.next_id()
