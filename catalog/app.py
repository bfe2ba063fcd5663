# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import importlib
from typing import Any, Protocol, cast

from flask import Flask

from catalog.domain.users.policies import DEFAULT_PROFILE_PICTURE_ID, PROFILE_PICTURE_SIZE
from catalog.infrastructure.container import Container, container as default_container
from catalog.infrastructure.db import init_db
from catalog.infrastructure.storage import LocalImageStore
from catalog.shared.config import load_config
from catalog.shared.errors import register_error_handler
from catalog.shared.logging import logger, setup_logging
from catalog.shared.middleware.request_logger import configure_request_logging


class _CORSCallable(Protocol):
    def __call__(self, app: Flask, **kwargs: Any) -> Any: ...


_flask_cors = importlib.import_module("flask_cors")
CORS = cast(_CORSCallable, _flask_cors.CORS)

MAX_UPLOAD_BYTES = 8 * 1024 * 1024


def create_app(container: Container | None = None) -> Flask:
    container = container or default_container
    config = container.config
    setup_logging(debug_mode=config.debug_logging)
    init_db(container.engine)

    images_dir = config.ensure_storage_dirs().resolve()
    app = Flask(__name__, static_folder=str(images_dir.parent), static_url_path="/static")
    app.config.update(MAX_CONTENT_LENGTH=MAX_UPLOAD_BYTES)

    register_error_handler(app)
    configure_request_logging(app)

    cors_kwargs: dict[str, object] = {
        "resources": {r"/api/*": {"origins": config.security.allowed_origins}}
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    CORS(app, **cors_kwargs)

    store = container.object_store
    if isinstance(store, LocalImageStore):
        store.ensure_placeholder(DEFAULT_PROFILE_PICTURE_ID, *PROFILE_PICTURE_SIZE)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.accounts_controller.as_blueprint())

    @app.after_request
    def _add_security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")
        if config.security.enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return resp

    logger.info(f"Flask app initialized env={config.app_env}")
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=load_config().debug_logging)
