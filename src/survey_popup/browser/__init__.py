from .probe import BrowserHostContext, HostContext, HostContextError, StaticHostContext

__all__ = [
    "BrowserHostContext",
    "HostContext",
    "HostContextError",
    "StaticHostContext",
]
