"""Periodic collection of CryptoPro facts into Prometheus metrics."""

import logging
import threading
from functools import partial
from typing import Any, Callable, List

from prometheus_client import Counter

from .collectors import collect_certificates, collect_license_info, collect_version
from .config import ExporterConfig
from .errors import ExporterError
from .metrics import ExporterMetrics

logger = logging.getLogger(__name__)


class FactPublisher:
    """
    Repeatedly extracts one fact and publishes it.

    Each cycle resets the owned metrics to their "no data" default before
    extracting, so a check that starts failing shows zero instead of its
    last good value. On failure the default stays in place and both the
    check's own error counter and the global one are incremented.
    """

    def __init__(
        self,
        name: str,
        extract: Callable[[], Any],
        reset: Callable[[], None],
        publish: Callable[[Any], None],
        error_counter: Counter,
        errors_total: Counter,
        period: float,
    ):
        self.name = name
        self.extract = extract
        self.reset = reset
        self.publish = publish
        self.error_counter = error_counter
        self.errors_total = errors_total
        self.period = period  # seconds
        self._stop = threading.Event()

    def run_once(self) -> bool:
        """Run a single collection cycle. Returns True if the fact was published."""
        self.reset()

        try:
            fact = self.extract()
            self.publish(fact)
        except ExporterError as e:
            output = getattr(e, "output", "")
            if output:
                logger.warning("%s check finished with error: %s; output: %r", self.name, e, output)
            else:
                logger.warning("%s check finished with error: %s", self.name, e)
            self._count_failure()
            return False
        except Exception:
            # publish() may have stopped halfway
            logger.exception("%s check failed unexpectedly", self.name)
            self.reset()
            self._count_failure()
            return False

        logger.debug("%s check published %r", self.name, fact)
        return True

    def _count_failure(self) -> None:
        self.error_counter.inc()
        self.errors_total.inc()

    def run_forever(self) -> None:
        logger.info("Starting %s check, period %s seconds", self.name, self.period)
        while not self._stop.is_set():
            self.run_once()
            self._stop.wait(self.period)

    def start(self) -> threading.Thread:
        """Run the loop in a background daemon thread."""
        thread = threading.Thread(
            target=self.run_forever, name=f"{self.name}-check", daemon=True
        )
        thread.start()
        return thread

    def stop(self) -> None:
        self._stop.set()


def build_publishers(
    config: ExporterConfig,
    metrics: ExporterMetrics,
    run: Callable[..., str],
) -> List[FactPublisher]:
    """Create the version, license and user certificates publishers."""
    period = config.period * 60

    return [
        FactPublisher(
            "version",
            partial(collect_version, run, config.cryptcp),
            metrics.reset_version,
            metrics.publish_version,
            metrics.errors_version,
            metrics.errors_total,
            period,
        ),
        FactPublisher(
            "license",
            partial(collect_license_info, run, config.cpconfig),
            metrics.reset_license,
            metrics.publish_license,
            metrics.errors_license,
            metrics.errors_total,
            period,
        ),
        FactPublisher(
            "user certificates",
            partial(collect_certificates, run, config.certmgr),
            metrics.reset_certificates,
            metrics.publish_certificates,
            metrics.errors_user_certificates,
            metrics.errors_total,
            period,
        ),
    ]
