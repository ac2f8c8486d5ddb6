# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Response classification, persistence and extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from httpcall.extraction.extractor import Extractor
from httpcall.extraction.rules import ExtractionRuleSet
from httpcall.kernel.exceptions import HttpStatusException, PersistenceException

logger = structlog.get_logger(__name__)

ERROR_STATUS_THRESHOLD = 400


@dataclass(frozen=True)
class ResponseOutcome:
    """A response received from the transport, whatever its status."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    @property
    def is_error(self) -> bool:
        return self.status_code >= ERROR_STATUS_THRESHOLD


@dataclass(frozen=True)
class ProcessedResult:
    """What processing a response did."""

    status_code: int
    saved_to: Path | None = None
    properties: dict[str, str] = field(default_factory=dict)


class ResponseProcessor:
    """Classifies a response, persists its body and runs extraction.

    Order: classify, persist (when a response file is configured), raise
    :class:`HttpStatusException` for an error status when ``fail_on_error``
    is set, otherwise extract. The body is saved even when the status turns
    out to be fatal.
    """

    def __init__(
        self,
        extractor: Extractor,
        rule_set: ExtractionRuleSet,
        fail_on_error: bool = True,
        response_file: str | Path | None = None,
    ) -> None:
        self._extractor = extractor
        self._rule_set = rule_set
        self._fail_on_error = fail_on_error
        self._response_file = Path(response_file) if response_file else None

    def process(self, outcome: ResponseOutcome, url: str | None = None) -> ProcessedResult:
        logger.info("http_response", status_code=outcome.status_code)
        fatal = outcome.is_error and self._fail_on_error

        saved_to: Path | None = None
        if self._response_file is not None:
            try:
                saved_to = self.save_body(outcome.body, self._response_file)
            except PersistenceException as exc:
                logger.warning("response_save_failed", path=str(self._response_file), error=str(exc))

        if fatal:
            raise HttpStatusException(outcome.status_code, url=url)
        if outcome.is_error:
            logger.warning("http_error_status_ignored", status_code=outcome.status_code)

        properties = self._extractor.apply(self._rule_set, outcome.body)
        return ProcessedResult(status_code=outcome.status_code, saved_to=saved_to, properties=properties)

    @staticmethod
    def save_body(body: str, path: Path) -> Path:
        """Write the body as UTF-8, replacing any existing file."""
        try:
            path.write_bytes(body.encode("utf-8"))
        except OSError as exc:
            raise PersistenceException(
                f"Failed to save response to file: {exc}", context={"path": str(path)}
            ) from exc
        logger.info("response_saved", path=str(path))
        return path
