"""Nonce sources for signed requests."""

import time
from collections.abc import Iterable, Iterator
from typing import Protocol


class NonceSource(Protocol):
    def next_nonce(self) -> str: ...


class WallClockNonceSource:
    """Unix epoch milliseconds at the moment of the call.

    Runs are minutes apart, so the clock alone keeps nonces increasing
    across invocations. Two calls inside the same millisecond return the
    same value: call once per submitted order.
    """

    def next_nonce(self) -> str:
        return str(time.time_ns() // 1_000_000)


class SequenceNonceSource:
    """Hands out a fixed sequence of nonces, for tests and replays."""

    def __init__(self, nonces: Iterable[int | str]):
        self._it: Iterator[int | str] = iter(nonces)

    def next_nonce(self) -> str:
        try:
            return str(next(self._it))
        except StopIteration:
            raise RuntimeError("nonce sequence exhausted") from None
