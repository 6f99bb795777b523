"""Backend lifecycle contract.

Some backends are embedded or local engines that must be running before the
first operation and torn down after the last. Launchers own that lifecycle;
the conformance suite only calls `start()` and `stop()`.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import Any


@dataclass
class BackendHandle:
    """Handle to a running backend.

    Attributes:
        url: Connection URL clients should use (e.g. a SQLAlchemy URL).
        stopped: True once the launcher has torn the backend down.
        resource: Launcher-private object backing the handle.
    """

    url: str
    stopped: bool = False
    resource: Any = field(default=None, repr=False, compare=False)


class BackendLauncher(abc.ABC):
    """Start and stop a backend process for the duration of a run."""

    #: Short backend identifier used in logs and reports.
    name: str = "abstract"

    @abc.abstractmethod
    def start(self) -> BackendHandle:
        """Provision the backend and return a handle to it.

        Raises:
            BackendUnavailable: If the backend cannot be provisioned in this
                environment.
        """

    @abc.abstractmethod
    def stop(self, handle: BackendHandle) -> None:
        """Tear the backend down.

        Idempotent: calling it on an already-stopped handle is a no-op.
        """
