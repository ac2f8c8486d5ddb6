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
"""httpx-based transport adapter."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from datetime import timedelta

import httpx

from httpcall.client.response import ResponseOutcome
from httpcall.kernel.exceptions import TransportException


class HttpxTransportAdapter:
    """Transport backed by httpx.AsyncClient.

    A new client is opened for every :meth:`send` so that no connection is
    reused between attempts. Redirects are not followed by default: a 3xx
    response is returned as the outcome. ``transport`` lets tests plug in an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        transport: httpx.AsyncBaseTransport | None = None,
        follow_redirects: bool = False,
    ) -> None:
        self._transport = transport
        self._follow_redirects = follow_redirects

    async def send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: str | None,
        timeout: timedelta,
    ) -> ResponseOutcome:
        seconds = timeout.total_seconds()
        context = {"method": method, "url": url}
        try:
            # httpx limits each phase separately; the outer deadline caps the whole exchange.
            async with asyncio.timeout(seconds):
                async with httpx.AsyncClient(
                    timeout=seconds,
                    follow_redirects=self._follow_redirects,
                    transport=self._transport,
                ) as client:
                    response = await client.request(
                        method,
                        url,
                        headers=dict(headers),
                        content=body.encode("utf-8") if body is not None else None,
                    )
        except TimeoutError as exc:
            raise TransportException(
                f"Request did not complete within {seconds}s",
                code="TRANSPORT_TIMEOUT",
                context=context,
            ) from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise TransportException(
                f"{type(exc).__name__}: {exc}",
                code="TRANSPORT_ERROR",
                context=context,
            ) from exc

        return ResponseOutcome(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.text,
        )
