# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Request, request


def client_ip(req: Request | None = None) -> str:
    """First hop of ``X-Forwarded-For``, else the socket peer."""

    req = req or request
    forwarded = req.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or req.remote_addr or "unknown"


__all__ = ["client_ip"]
