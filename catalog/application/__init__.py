# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .account_manager import AccountManager
from .interfaces import ArticleCollection, ArticleStore, MailSender, ObjectStore
from .results import OperationFailedError, OperationResult

__all__ = [
    "AccountManager",
    "ArticleCollection",
    "ArticleStore",
    "MailSender",
    "ObjectStore",
    "OperationFailedError",
    "OperationResult",
]
