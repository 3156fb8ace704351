"""Context object shared across worker threads."""

from dataclasses import dataclass
from typing import Optional

from minihttp.bootstrap.config import ServerConfig
from minihttp.lifecycle.state import ServerLifecycle
from minihttp.pipeline.router import Router


@dataclass
class WorkerContext:
    """Dependencies shared across handler threads; all read-only while serving."""

    router: Router
    config: ServerConfig
    lifecycle: Optional[ServerLifecycle] = None
