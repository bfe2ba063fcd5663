# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Ordered multi-step flows without rollback.

Steps run strictly one after another. The first failing step stops the
flow; steps that already ran stay applied. An ``AppError`` raised by a step
reaches the caller unchanged, any other exception becomes ``SagaStepError``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from catalog.shared.errors import AppError, InfrastructureError
from catalog.shared.logging import logger


@dataclass(slots=True, frozen=True)
class SagaStep:
    name: str
    action: Callable[[], Awaitable[Any]]


class SagaStepError(InfrastructureError):
    def __init__(self, saga: str, step: str, completed: Sequence[str]) -> None:
        super().__init__("saga_step_failed")
        self.saga = saga
        self.step = step
        self.completed = tuple(completed)


async def run_saga(name: str, steps: Sequence[SagaStep]) -> list[str]:
    completed: list[str] = []
    for step in steps:
        logger.debug(f"saga.{name}: step={step.name} start")
        try:
            await step.action()
        except AppError as exc:
            logger.warning(
                f"saga.{name}: step={step.name} rejected code={exc.code} completed={completed}"
            )
            raise
        except Exception as exc:
            logger.exception(f"saga.{name}: step={step.name} failed completed={completed}")
            raise SagaStepError(name, step.name, completed) from exc
        completed.append(step.name)
    logger.info(f"saga.{name}: done steps={completed}")
    return completed


__all__ = ["SagaStep", "SagaStepError", "run_saga"]
