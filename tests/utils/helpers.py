"""Test helper functions."""

import json
from dataclasses import dataclass
from io import BytesIO
from typing import Any, Dict, Optional


@dataclass
class HandlerResponse:
    status: int
    headers: Dict[str, str]
    body: Any


class MockSocket:
    """Socket stand-in that feeds a raw request and captures the response."""

    def __init__(self, raw_request: bytes):
        self.raw_request = raw_request
        self.sent = bytearray()

    def makefile(self, *args, **kwargs):
        return BytesIO(self.raw_request)

    def sendall(self, data):
        self.sent.extend(data)

    def close(self):
        pass


def build_raw_request(
    method: str,
    path: str,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None
) -> bytes:
    payload = b""
    if body is not None:
        if isinstance(body, bytes):
            payload = body
        elif isinstance(body, str):
            payload = body.encode("utf-8")
        else:
            payload = json.dumps(body).encode("utf-8")

    lines = [f"{method} {path} HTTP/1.1", "Host: localhost"]
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    if payload:
        lines.append("Content-Type: application/json")
        lines.append(f"Content-Length: {len(payload)}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8") + payload


def parse_raw_response(raw: bytes) -> HandlerResponse:
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("iso-8859-1").split("\r\n")
    status = int(lines[0].split()[1])
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return HandlerResponse(status=status, headers=headers, body=json.loads(body) if body else None)


def call_handler(
    handler_cls,
    method: str = "GET",
    path: str = "/",
    body: Any = None,
    headers: Optional[Dict[str, str]] = None
) -> HandlerResponse:
    """Run a BaseHTTPRequestHandler subclass against one in-memory request."""
    sock = MockSocket(build_raw_request(method, path, body, headers))
    handler_cls(sock, ("127.0.0.1", 8000), None)
    return parse_raw_response(bytes(sock.sent))


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
