"""ConfirmationCodeAllocator: short unique PREFIX-XXXX codes with bounded retries."""
from __future__ import annotations

import logging
import re
import secrets
import string
from typing import Awaitable, Callable, Optional

from reservations.config.scheduling import SchedulingConfig
from reservations.core.exceptions import AllocationExhaustedError

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits

ExistsFn = Callable[[str], Awaitable[bool]]


class ConfirmationCodeAllocator:
    """Generate candidates and check ``exists_fn`` until a free one turns up.

    The allocator keeps no state. The caller must run ``allocate`` and the
    write that stores the code inside one consistency boundary.
    """

    def __init__(
        self,
        config: Optional[SchedulingConfig] = None,
        *,
        choice: Callable[[str], str] = secrets.choice,
    ) -> None:
        self._config = config or SchedulingConfig()
        self._choice = choice
        self.pattern = re.compile(
            rf"{re.escape(self._config.code_prefix)}-[A-Z0-9]{{{self._config.code_length}}}"
        )

    @property
    def max_attempts(self) -> int:
        return self._config.code_max_attempts

    def generate(self) -> str:
        suffix = "".join(self._choice(CODE_ALPHABET) for _ in range(self._config.code_length))
        return f"{self._config.code_prefix}-{suffix}"

    def is_valid(self, code: str) -> bool:
        return self.pattern.fullmatch(code or "") is not None

    async def allocate(self, exists_fn: ExistsFn, *, attempts: Optional[int] = None) -> str:
        """Return a code ``exists_fn`` reports as unused.

        Raises AllocationExhaustedError after ``attempts`` (default
        code_max_attempts) consecutive collisions.
        """
        budget = attempts if attempts is not None else self.max_attempts
        for attempt in range(1, budget + 1):
            candidate = self.generate()
            if not await exists_fn(candidate):
                return candidate
            logger.debug("Confirmation code collision on attempt %d: %s", attempt, candidate)
        logger.error("Confirmation code allocation exhausted after %d attempts", budget)
        raise AllocationExhaustedError(budget)
