"""Sampler construction from SamplerConfig."""

import threading
import time
from typing import Callable, Optional, Sequence

import structlog
from opentelemetry.context import Context
from opentelemetry.sdk.trace.sampling import (
    ALWAYS_OFF,
    ALWAYS_ON,
    Decision,
    ParentBased,
    Sampler,
    SamplingResult,
    TraceIdRatioBased,
)
from opentelemetry.trace import Link, SpanKind
from opentelemetry.util.types import Attributes

from tracing_bootstrap.errors import UnsupportedSamplerError
from tracing_bootstrap.tracing.config import SamplerConfig

logger = structlog.get_logger(__name__)

CONST = "const"
PROBABILISTIC = "probabilistic"
RATE_LIMITING = "ratelimiting"
REMOTE = "remote"

DEFAULT_SAMPLING_PROBABILITY = 0.001


class RateLimitingSampler(Sampler):
    """Samples at most ``max_traces_per_second`` root traces per second.

    Credits accrue continuously up to a balance of one second's worth (and
    at least one trace), so short bursts are admitted after an idle period.
    """

    def __init__(self, max_traces_per_second: float, clock: Callable[[], float] = time.monotonic):
        if max_traces_per_second < 0:
            raise ValueError("max_traces_per_second must be non-negative")
        self.max_traces_per_second = max_traces_per_second
        self._max_balance = max(max_traces_per_second, 1.0)
        self._balance = self._max_balance
        self._clock = clock
        self._last_tick = clock()
        self._lock = threading.Lock()

    def _check_credit(self, cost: float = 1.0) -> bool:
        with self._lock:
            now = self._clock()
            elapsed = now - self._last_tick
            self._last_tick = now
            self._balance = min(
                self._balance + elapsed * self.max_traces_per_second,
                self._max_balance,
            )
            if self._balance >= cost:
                self._balance -= cost
                return True
            return False

    def should_sample(
        self,
        parent_context: Optional[Context],
        trace_id: int,
        name: str,
        kind: Optional[SpanKind] = None,
        attributes: Attributes = None,
        links: Optional[Sequence[Link]] = None,
        trace_state=None,
    ) -> SamplingResult:
        if self._check_credit():
            return SamplingResult(
                Decision.RECORD_AND_SAMPLE,
                {"sampler.type": RATE_LIMITING, "sampler.param": self.max_traces_per_second},
                trace_state,
            )
        return SamplingResult(Decision.DROP, None, trace_state)

    def get_description(self) -> str:
        return f"RateLimitingSampler{{{self.max_traces_per_second}}}"


def default_sampler() -> Sampler:
    return ParentBased(TraceIdRatioBased(DEFAULT_SAMPLING_PROBABILITY))


def create_sampler(config: SamplerConfig) -> Sampler:
    """Create the root sampler for ``config``, wrapped to respect parent decisions.

    A missing param means the library default of 0.001 for every type, so a
    ``const`` sampler without a param samples nothing.

    Raises:
        UnsupportedSamplerError: the type is unknown or its param is out of
            range.
    """
    sampler_type = config.type.lower() if config.type else REMOTE
    param = DEFAULT_SAMPLING_PROBABILITY if config.param is None else config.param

    if sampler_type == CONST:
        return ParentBased(ALWAYS_ON if int(param) != 0 else ALWAYS_OFF)

    if sampler_type == PROBABILISTIC:
        if not 0.0 <= param <= 1.0:
            raise UnsupportedSamplerError(
                f"probabilistic sampler requires a param between 0 and 1, got {param}"
            )
        return ParentBased(TraceIdRatioBased(param))

    if sampler_type == RATE_LIMITING:
        if param < 0:
            raise UnsupportedSamplerError(
                f"ratelimiting sampler requires a non-negative param, got {param}"
            )
        return ParentBased(RateLimitingSampler(param))

    if sampler_type == REMOTE:
        # Strategies are not fetched from the sampling manager; only the
        # initial probabilistic sampler is installed.
        if not 0.0 <= param <= 1.0:
            raise UnsupportedSamplerError(
                f"remote sampler initial probability must be between 0 and 1, got {param}"
            )
        logger.info(
            "remote_sampling_not_polled",
            manager_host_port=config.manager_host_port,
            initial_probability=param,
        )
        return ParentBased(TraceIdRatioBased(param))

    raise UnsupportedSamplerError(f"unknown sampler type '{config.type}'")


def build_sampler(config: SamplerConfig) -> Sampler:
    """Like ``create_sampler`` but falls back to the default sampler on error."""
    try:
        return create_sampler(config)
    except UnsupportedSamplerError as e:
        logger.error("sampler_config_invalid", sampler_type=config.type,
                     sampler_param=config.param, error=str(e))
        return default_sampler()
