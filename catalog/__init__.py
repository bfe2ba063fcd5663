# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""User accounts backend for the article catalog."""
