"""Host lifecycle hooks.

The host calls ``on_start`` once it is ready to serve and ``on_stop`` on
shutdown. Starting re-applies the stored overrides to the web bundle in push
mode; a bundle rebuilt by a host upgrade gets the custom images back this way.
"""
from __future__ import annotations

from typing import Optional

from custom_logo.services.distribution import DistributionReport, LogoDistributor
from custom_logo.utils.logging import get_logger

LOG = get_logger("lifecycle")


class LogoLifecycle:
    def __init__(self, distributor: LogoDistributor, push_enabled: bool):
        self.distributor = distributor
        self.push_enabled = push_enabled
        self.last_report: Optional[DistributionReport] = None

    def on_start(self) -> Optional[DistributionReport]:
        if not self.push_enabled:
            LOG.debug("push mode disabled; startup distribution skipped")
            return None
        LOG.info("custom logo service executing logo copy operation")
        try:
            self.last_report = self.distributor.distribute()
        except Exception:
            LOG.exception("custom logo service failed to copy logos to web path")
            return None
        return self.last_report

    def on_stop(self) -> None:
        LOG.debug("custom logo service stopped")


__all__ = ["LogoLifecycle"]
