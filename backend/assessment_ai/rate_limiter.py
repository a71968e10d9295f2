"""
Per-client sliding-window rate limiting.

State lives in memory on the limiter instance and is lost on restart. Windows
are pruned lazily when their identity is checked; identities that never come
back keep their (small) entry until the process exits.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from fastapi import Request

UNKNOWN_IDENTITY = "unknown"
WINDOW_MS = 60 * 60 * 1000


def _now_ms() -> float:
	return time.time() * 1000


@dataclass(frozen=True)
class RateLimitResult:
	allowed: bool
	remaining: int


class SlidingWindowRateLimiter:
	"""Admit at most ``max_requests`` per identity in any trailing hour."""

	def __init__(
		self,
		max_requests: int = 60,
		*,
		window_ms: int = WINDOW_MS,
		clock: Optional[Callable[[], float]] = None,
	) -> None:
		self.max_requests = max_requests
		self.window_ms = window_ms
		self._clock = clock or _now_ms
		self._windows: Dict[str, List[float]] = {}
		self._locks: Dict[str, threading.Lock] = {}

	def _lock_for(self, identity: str) -> threading.Lock:
		# dict.setdefault is atomic, so two first requests share one lock
		return self._locks.setdefault(identity, threading.Lock())

	def check(self, identity: Optional[str]) -> RateLimitResult:
		key = identity or UNKNOWN_IDENTITY
		with self._lock_for(key):
			now = self._clock()
			cutoff = now - self.window_ms
			recent = [t for t in self._windows.get(key, []) if t > cutoff]
			if len(recent) >= self.max_requests:
				return RateLimitResult(allowed=False, remaining=0)
			recent.append(now)
			self._windows[key] = recent
			return RateLimitResult(allowed=True, remaining=self.max_requests - len(recent))

	def tracked_identities(self) -> int:
		return len(self._windows)

	def reset(self) -> None:
		# Locks are kept so a check already in progress keeps its identity serialised
		for key in list(self._windows):
			with self._lock_for(key):
				self._windows.pop(key, None)


def identity_from_request(request: Request) -> str:
	"""First X-Forwarded-For hop, else the socket peer, else ``unknown``."""
	forwarded = request.headers.get("x-forwarded-for")
	if forwarded:
		first = forwarded.split(",")[0].strip()
		if first:
			return first
	if request.client and request.client.host:
		return request.client.host
	return UNKNOWN_IDENTITY
