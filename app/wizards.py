from collections import OrderedDict
import logging
import time
from typing import Callable

from domain.wizard import OrderWizard


logger = logging.getLogger(__name__)


class WizardStore:
    """In-memory wizards keyed by browser cookie.

    Least recently used first out once `max_size` is reached; anything not
    touched for `ttl` seconds is dropped.
    """

    def __init__(
        self,
        *,
        max_size: int = 1000,
        ttl: float = 60 * 60,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_size = max_size
        self.ttl = ttl
        self.clock = clock
        self._wizards: OrderedDict[str, tuple[float, OrderWizard]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._wizards)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> OrderWizard | None:
        self.evict()
        entry = self._wizards.get(key)
        if entry is None:
            return None
        self._wizards[key] = (self.clock(), entry[1])
        self._wizards.move_to_end(key)
        return entry[1]

    def put(self, key: str, wizard: OrderWizard) -> None:
        self.evict()
        self._wizards[key] = (self.clock(), wizard)
        self._wizards.move_to_end(key)
        while len(self._wizards) > self.max_size:
            old, _ = self._wizards.popitem(last=False)
            logger.info("Wizard store full, dropped %s", old)

    def pop(self, key: str) -> OrderWizard | None:
        entry = self._wizards.pop(key, None)
        return None if entry is None else entry[1]

    def evict(self) -> None:
        cutoff = self.clock() - self.ttl
        while self._wizards:
            key, (touched, _) = next(iter(self._wizards.items()))
            if touched >= cutoff:
                break
            del self._wizards[key]
            logger.debug("Wizard %s expired", key)
