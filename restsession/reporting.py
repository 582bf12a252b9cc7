"""
Reporting sink for REST test actions

Collects pass/fail messages and attached response bodies through the
standard logging module and keeps the list of failed actions so the
surrounding test framework can fail the test once the steps are done
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from restsession.exceptions import ActionFailedError, AssertionMismatch

LOGGER = logging.getLogger(__name__)


@dataclass
class Attachment:
    title: str
    label: str
    content: str


@dataclass
class ReportManager:
    """
    Report sink shared by one or more request sessions

    discrete_logging switches pass messages to debug level and stops
    response bodies from being attached for passed steps
    """

    discrete_logging: bool = False
    failures: List[str] = field(default_factory=list)
    attachments: List[Attachment] = field(default_factory=list)

    def log(self, message: str):
        LOGGER.info(message)

    def log_discrete(self, message: str):
        LOGGER.debug(message)

    def log_exception(self, exception: BaseException):
        LOGGER.error(
            "%s: %s",
            type(exception).__name__,
            exception,
            exc_info=(type(exception), exception, exception.__traceback__),
        )

    def attach_as_step(self, title: str, label: str, content: str):
        self.attachments.append(Attachment(title, label, content))
        LOGGER.info("Attached [%s - %s]", title, label)
        LOGGER.debug(content)

    def mark_failed(self, message: str):
        self.failures.append(message)

    @property
    def failed(self) -> bool:
        return bool(self.failures)

    def verify(self):
        """
        Raises ActionFailedError if any action failed since the last call

        Recorded failures and attachments are cleared so the manager can
        be reused by the next test
        """
        self.attachments = []
        if self.failures:
            failures, self.failures = self.failures, []
            raise ActionFailedError(failures)

    def reset(self):
        self.failures = []
        self.attachments = []


REPORT_MANAGER = ReportManager()


def assert_equals(expected: Any, actual: Any, reporter: Optional[ReportManager] = None):
    """
    Compares the string forms of both values

    Raises
    ------
    AssertionMismatch
        if the values differ
    """
    reporter = reporter or REPORT_MANAGER
    if str(expected) != str(actual):
        reporter.log(
            "Assertion failed, expected [{}] but found [{}]".format(expected, actual)
        )
        raise AssertionMismatch(expected, actual)

    message = "Assertion passed, [{}] equals [{}]".format(expected, actual)
    if reporter.discrete_logging:
        reporter.log_discrete(message)
    else:
        reporter.log(message)
