"""
Step Base Class
===============

Optional abstract base class for pipeline steps.

The executor only requires a class with a zero-argument ``execute()`` method.
Inheriting from StepBase lets type checkers and ``abc`` enforce that contract
before the pipeline ever runs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class StepBase(ABC):
    """
    Base class for pipeline steps.

    Subclasses declare their dependencies as annotated constructor parameters
    and announce their result type through the return annotation of execute():

        class Summarize(StepBase):
            def __init__(self, document: Document) -> None:
                self.document = document

            def execute(self) -> Summary:
                return Summary(self.document.text[:80])
    """

    @abstractmethod
    def execute(self) -> Any:
        """Run the step. Return a result to cache, or None for no result."""
        ...

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}>"
