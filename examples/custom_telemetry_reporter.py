#!/usr/bin/env python3
"""Minimal custom telemetry reporter example for potter-browser.
Prints timing and metric events while browsing two pages of spells.
"""

import os

os.environ["POTTER_TELEMETRY"] = "1"

import asyncio
from typing import Any

from potter_browser import (
    PaginatedLoader,
    ResourceClient,
    ResourceFamily,
    TelemetryContext,
    TelemetryReporter,
)


class PrintReporter(TelemetryReporter):
    """A minimal telemetry reporter that prints events to the console."""

    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        indent = "  " * metadata.get("depth", 0)
        print(f"[TIMING] {indent}{scope}: duration={duration:.4f}s (metadata: {metadata})")

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        print(f"[METRIC] {scope}: {value} (metadata: {metadata})")


async def main() -> None:
    tele = TelemetryContext(PrintReporter())
    async with ResourceClient(telemetry=tele) as client:
        loader = PaginatedLoader(
            ResourceFamily.SPELLS, client, page_size=10, telemetry=tele
        )
        await loader.load(reset=True)
        await loader.load()

    print(f"Loaded {len(loader.items)} spells, state: {loader.state.phase.value}")
    for item in loader.items[:5]:
        print(f"- {item.label}")


if __name__ == "__main__":
    asyncio.run(main())
