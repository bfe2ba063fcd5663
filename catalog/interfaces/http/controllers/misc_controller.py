# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify

from catalog.infrastructure.health import check_database
from catalog.infrastructure.observability import render_metrics
from catalog.shared.config import load_config


class MiscController:
    def __init__(self, *, session_factory=None) -> None:
        self._session_factory = session_factory

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/api/health", view_func=self.health, methods=["GET"])
        bp.add_url_rule("/api/metrics", view_func=self.metrics, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"ok": True}
        try:
            check_database(self._session_factory)
            status["database"] = "ok"
        except Exception as exc:  # pragma: no cover
            status["ok"] = False
            status["database"] = f"error: {type(exc).__name__}"
        return jsonify(status), 200 if status["ok"] else 503

    def metrics(self):
        if not load_config().observability.metrics_enabled:
            return jsonify({"status": 404, "response": {"message": "metrics disabled"}}), 404
        body, content_type = render_metrics()
        return Response(body, mimetype=content_type.split(";")[0], content_type=content_type)
