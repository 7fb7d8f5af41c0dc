from .runtime import RuntimeDeps
from .session import SessionState
from .settings import AppSettings, UpstreamSettings

__all__ = ["AppSettings", "RuntimeDeps", "SessionState", "UpstreamSettings"]
