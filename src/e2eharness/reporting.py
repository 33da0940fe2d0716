"""
Reporting boundary.

The harness emits structured step records (name, status, optional attachments)
to a reporter. `AllureReporter` forwards them to allure-pytest; `LogReporter`
writes them to the log and keeps them in memory, which is also what the unit
tests inspect.
"""
import json
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Union

import allure

from .logger import get_logger

logger = get_logger(__name__)

PASSED = "passed"
FAILED = "failed"


@dataclass
class Attachment:
    name: str
    body: Union[bytes, str]
    kind: str = "text/plain"


@dataclass
class StepRecord:
    name: str
    status: str = PASSED
    attachments: List[Attachment] = field(default_factory=list)
    started_at: float = field(default_factory=time.time)
    duration_ms: Optional[float] = None
    error: Optional[str] = None


class Reporter(ABC):
    """Collects step and attachment records for an external report."""

    def __init__(self):
        self.records: List[StepRecord] = []

    @contextmanager
    def step(self, name: str) -> Iterator[StepRecord]:
        """
        Records a named step around a block of test code.

        The step is marked failed, with the error message kept, if the block
        raises; the exception always propagates.
        """
        record = StepRecord(name=name)
        started = time.monotonic()
        try:
            yield record
        except Exception as e:
            record.status = FAILED
            record.error = str(e)
            raise
        finally:
            record.duration_ms = (time.monotonic() - started) * 1000
            self.records.append(record)
            self._emit(record)

    def record_failure(self, name: str, error: BaseException, **context: Any) -> StepRecord:
        """
        Records a failed step with a JSON attachment describing the failure.

        Args:
            name: Step name, usually the interaction that failed.
            error: The exception that ended the step.
            **context: Extra diagnostic fields, e.g. selector and elapsed time.
        """
        details = {"error": type(error).__name__, "message": str(error)}
        details.update({k: getattr(v, "value", v) for k, v in context.items()})
        record = StepRecord(name=name, status=FAILED, error=str(error))
        record.attachments.append(
            Attachment(name=f"{name} failure", body=json.dumps(details, default=str), kind="application/json")
        )
        self.records.append(record)
        self._emit(record)
        self.attach(f"{name} failure", record.attachments[0].body, "application/json")
        return record

    @abstractmethod
    def attach(self, name: str, body: Union[bytes, str], kind: str = "text/plain") -> None:
        pass

    @abstractmethod
    def _emit(self, record: StepRecord) -> None:
        pass


class LogReporter(Reporter):
    """Writes records to the harness log."""

    def __init__(self):
        super().__init__()
        self.attachments: List[Attachment] = []

    def attach(self, name: str, body: Union[bytes, str], kind: str = "text/plain") -> None:
        self.attachments.append(Attachment(name=name, body=body, kind=kind))
        size = len(body)
        logger.info(f"📎 Attachment '{name}' ({kind}, {size} bytes)")

    def _emit(self, record: StepRecord) -> None:
        if record.status == PASSED:
            logger.info(f"✓ {record.name}")
        else:
            logger.error(f"✗ {record.name}: {record.error}")


ALLURE_TYPES = {
    "image/png": allure.attachment_type.PNG,
    "application/json": allure.attachment_type.JSON,
    "text/plain": allure.attachment_type.TEXT,
    "text/html": allure.attachment_type.HTML,
}


class AllureReporter(Reporter):
    """Forwards steps and attachments to the Allure results of the running test."""

    @contextmanager
    def step(self, name: str) -> Iterator[StepRecord]:
        with allure.step(name):
            with super().step(name) as record:
                yield record

    def attach(self, name: str, body: Union[bytes, str], kind: str = "text/plain") -> None:
        allure.attach(body, name=name, attachment_type=ALLURE_TYPES.get(kind, allure.attachment_type.TEXT))

    def _emit(self, record: StepRecord) -> None:
        logger.debug(f"Allure step '{record.name}' {record.status}")
