"""Deserialization options."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Final

from kaydle.numbers import NumberPolicy, default_number_policy

DEFAULT_MAX_DEPTH: Final[int] = 128

MAX_DEPTH_ENV: Final[str] = "KAYDLE_MAX_DEPTH"


@dataclass(frozen=True)
class DeserializeOptions:
    """Knobs for a single deserialization call.

    Attributes:
        max_depth: Deepest nesting of node lists, nodes and values that is
            resolved before failing with ``RecursionLimitExceeded``. Each
            level costs several interpreter frames, so limits approaching
            ``sys.getrecursionlimit()`` run out of stack first; that also
            surfaces as ``RecursionLimitExceeded``.
        number_policy: Classifies numeric literals as signed, unsigned or
            float numbers.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    number_policy: NumberPolicy = default_number_policy

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            msg = f"max_depth must be positive, got {self.max_depth}"
            raise ValueError(msg)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DeserializeOptions:
        """Build options, honoring ``KAYDLE_MAX_DEPTH`` when set.

        The entry points use this when no options are passed.
        """
        env = os.environ if environ is None else environ
        raw = env.get(MAX_DEPTH_ENV, "").strip()
        if not raw:
            return cls()
        if not raw.isdigit():
            msg = f"{MAX_DEPTH_ENV} must be a positive integer, got {raw!r}"
            raise ValueError(msg)
        return cls(max_depth=int(raw))
