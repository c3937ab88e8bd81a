from __future__ import annotations

from typing import Any, Callable, Protocol


class TaskRunner(Protocol):
    """Runs a store call and reports its outcome back to the controller."""

    def submit(
        self,
        call: Callable[[], Any],
        *,
        on_success: Callable[[Any], None],
        on_failure: Callable[[BaseException], None],
    ) -> None: ...


class InlineRunner:
    """Runs the call right away on the caller's thread."""

    def submit(self, call, *, on_success, on_failure) -> None:
        try:
            result = call()
        except Exception as e:
            on_failure(e)
            return
        on_success(result)
