"""
Per-user guard allowing one outstanding submission per form
"""
from contextlib import contextmanager
from typing import Iterator, Set, Tuple

from wellnest.errors import SubmissionInProgressError


class InFlightRegistry:
    """
    Tracks (user, form) pairs with a request waiting on the model service.

    All routes run on one event loop and the check-and-add below never awaits,
    so a plain set is enough.
    """

    def __init__(self):
        self._active: Set[Tuple[str, str]] = set()

    def is_active(self, user_id: str, form: str) -> bool:
        return (user_id, form) in self._active

    @contextmanager
    def claim(self, user_id: str, form: str) -> Iterator[None]:
        key = (user_id, form)
        if key in self._active:
            raise SubmissionInProgressError(
                f"A {form} check-in is already being submitted. Please wait for it to finish."
            )
        self._active.add(key)
        try:
            yield
        finally:
            self._active.discard(key)


submissions = InFlightRegistry()
