from __future__ import annotations

"""
nebraska-provider - Infrastructure-as-code provider for Nebraska

Manages applications, channels, groups and packages on a Nebraska update
server through its REST API, with noop, GitHub and OIDC authentication.
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Make version accessible
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _version

try:
    __version__ = _version("nebraska-provider")
except PackageNotFoundError:
    # Package not installed yet
    pass
