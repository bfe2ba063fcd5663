# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import text

from catalog.infrastructure.db.session import SessionFactory, session_scope


def check_database(session_factory: SessionFactory | None = None) -> bool:
    with session_scope(session_factory) as session:
        session.execute(text("SELECT 1"))
    return True


__all__ = ["check_database"]
