"""Per-call resolution state."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from kaydle.document import Location
from kaydle.errors import DeserializeError, RecursionLimitExceeded
from kaydle.numbers import Number
from kaydle.options import DeserializeOptions


@dataclass
class Context:
    """
    State shared by the resolvers during one deserialization call.

    Only the nesting depth changes while resolving; the document itself is
    never touched.
    """

    options: DeserializeOptions = field(default_factory=DeserializeOptions)
    depth: int = 0

    @contextmanager
    def enter(self, segment: str, location: Location | None = None) -> Iterator[None]:
        """
        Descend one level, recording ``segment`` on errors raised inside.

        Errors without a location of their own get ``location``, the nearest
        known position.
        """
        if self.depth >= self.options.max_depth:
            msg = f"exceeded the maximum nesting depth of {self.options.max_depth}"
            raise RecursionLimitExceeded(msg, location=location)
        self.depth += 1
        try:
            yield
        except DeserializeError as err:
            err.path.insert(0, segment)
            if err.location is None:
                err.location = location
            raise
        finally:
            self.depth -= 1

    def number(self, literal: str) -> Number:
        return self.options.number_policy(literal)
