# =============================================================================
# Use-Case Executor
# =============================================================================
# Lets controllers run use-case classes without wiring their dependencies:
#
#     class CreateOrder:
#         def __init__(self, dynamodb): ...
#         def execute(self, payload): ...
#
#     class OrdersController:
#         def __init__(self, executor):
#             self.executor = executor
#
#         @post()
#         def create(self, event):
#             return self.executor.execute(CreateOrder, json.loads(event["body"]))
# =============================================================================

import logging
from typing import Any

from src.runtime.exceptions import ResolutionError

logger = logging.getLogger(__name__)


class UseCaseExecutor:
    def __init__(self, resolver: Any):
        self._resolver = resolver

    def execute(self, use_case: Any, *args: Any, **kwargs: Any) -> Any:
        instance = self._resolver.resolve(use_case)
        run = getattr(instance, "execute", None)
        if not callable(run):
            raise ResolutionError(
                f"{getattr(use_case, '__name__', use_case)} has no execute() method"
            )
        logger.debug(f"Executing use case {type(instance).__name__}")
        return run(*args, **kwargs)
