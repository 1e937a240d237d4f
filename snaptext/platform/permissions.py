from __future__ import annotations
from concurrent.futures import Future
from typing import Callable, Dict, Iterable, Optional, Sequence
import threading

from snaptext.logging import get_logger
from snaptext.model import Permission, PermissionGrants, RequestCode

logger = get_logger(__name__)

Prompt = Callable[[Permission], bool]


class LocalPermissionAuthority:
    """
    In-process permission store. Ungranted permissions are put to the prompt
    one by one; without a prompt they are denied. Grants are remembered for
    the lifetime of the authority.
    """

    def __init__(self, granted: Iterable[Permission] = (), prompt: Optional[Prompt] = None):
        self._granted = set(granted)
        self._prompt = prompt
        self._lock = threading.Lock()

    def is_granted(self, permission: Permission) -> bool:
        with self._lock:
            return permission in self._granted

    def grant(self, permission: Permission) -> None:
        with self._lock:
            self._granted.add(permission)

    def revoke(self, permission: Permission) -> None:
        with self._lock:
            self._granted.discard(permission)

    def request(self, permissions: Sequence[Permission], request_code: RequestCode) -> Future[PermissionGrants]:
        future: Future[PermissionGrants] = Future()
        outcomes: Dict[Permission, bool] = {}
        try:
            for permission in permissions:
                if self.is_granted(permission):
                    outcomes[permission] = True
                    continue
                allowed = bool(self._prompt(permission)) if self._prompt else False
                if allowed:
                    self.grant(permission)
                outcomes[permission] = allowed
        except EOFError as e:
            # Input closed mid-request: the request never got an answer
            logger.info(f"Permission request {int(request_code)} interrupted")
            future.set_exception(e)
            return future

        logger.info(
            f"Permission request {int(request_code)}: "
            + ", ".join(f"{p.value}={'granted' if ok else 'denied'}" for p, ok in outcomes.items())
        )
        future.set_result(PermissionGrants(outcomes))
        return future
