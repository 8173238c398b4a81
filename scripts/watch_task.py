#!/usr/bin/env python3
"""Start a TaskStream task and print its status events as they arrive."""

from __future__ import annotations

import json
import os
import sys
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from taskstream.sse import FrameParser


def _env(name: str, default: str | None = None) -> str | None:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value


def main() -> int:
    base_url = (_env("TASKSTREAM_URL", "http://localhost:8080") or "").rstrip("/")
    timeout = float(_env("TASKSTREAM_TIMEOUT", "120") or 120)

    req = Request(f"{base_url}/sse/task", method="GET")
    req.add_header("Accept", "text/event-stream")

    parser = FrameParser()
    try:
        with urlopen(req, timeout=timeout) as response:
            print(f"Connected ({response.headers.get('Content-Type')}), "
                  f"trace {response.headers.get('X-Trace-ID')}")
            for raw_line in response:
                for frame in parser.feed(raw_line.decode("utf-8")):
                    data = json.loads(frame.data)
                    if "complete" in data:
                        if data["complete"]:
                            print("Task complete")
                            return 0
                        print(f"Task {data.get('outcome')}: {data.get('reason')}")
                        return 1
                    print(f"[{frame.event}] {data['current']}/{data['total']}")
    except HTTPError as exc:
        detail = exc.read().decode("utf-8", errors="replace")
        raise RuntimeError(f"GET /sse/task failed: {exc.code} {exc.reason}: {detail}") from None

    raise RuntimeError("Stream ended without a terminal status event")


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        raise
