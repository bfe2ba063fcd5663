# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .settings import INSECURE_DEFAULT_SECRET, AppConfig, load_config

__all__ = ["AppConfig", "INSECURE_DEFAULT_SECRET", "load_config"]
