#!/usr/bin/env python3
"""
Smoke test for a running relay: sends a sendMessage message, then uploads a
small text file, printing everything the server pushes back.
"""

import argparse
import asyncio
import base64
import contextlib
import json
import os
import sys
from datetime import datetime, timezone

import websockets

DEFAULT_URL = "ws://localhost:3001"
TEST_CONTENT = "This is a test file content for WebSocket streaming upload."


async def receive_messages(ws) -> None:
    async for raw in ws:
        try:
            message = json.loads(raw)
            print(f"\nReceived message: {json.dumps(message, indent=2)}")
        except json.JSONDecodeError:
            print(f"\nReceived raw message: {raw}")


async def run(url: str, wait: float) -> None:
    print(f"Connecting to WebSocket: {url}")

    async with websockets.connect(url) as ws:
        print("WebSocket connection opened")
        receiver = asyncio.create_task(receive_messages(ws))

        await asyncio.sleep(1)
        print("\nSending test message...")
        await ws.send(
            json.dumps(
                {
                    "action": "sendMessage",
                    "data": {
                        "message": "Hello from test client!",
                        "timestamp": datetime.now(timezone.utc).isoformat(),
                    },
                }
            )
        )

        await asyncio.sleep(2)
        print("\nSending file upload request...")
        await ws.send(
            json.dumps(
                {
                    "action": "upload",
                    "data": base64.b64encode(TEST_CONTENT.encode("utf-8")).decode("ascii"),
                    "fileName": "test-file.txt",
                    "contentType": "text/plain",
                }
            )
        )

        await asyncio.sleep(wait)
        receiver.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await receiver

    print("\nWebSocket connection closed")


def main():
    parser = argparse.ArgumentParser(description="Exercise a running WebSocket relay")
    parser.add_argument("--url", default=os.environ.get("WS_URL", DEFAULT_URL))
    parser.add_argument(
        "--wait", type=float, default=3.0, help="Seconds to wait for replies after the upload"
    )
    args = parser.parse_args()

    try:
        asyncio.run(run(args.url, args.wait))
    except (OSError, websockets.exceptions.WebSocketException) as e:
        print(f"WebSocket error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
