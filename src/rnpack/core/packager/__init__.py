"""React Native packager lifecycle primitives.

- ``Packager``: query, start and stop the packager process on a port
- ``PackagerStateStore``: run records naming which mode started a packager
- ``PackagerStatusIndicator``: last published status plus listeners
"""

from .models import PackagerConfig, PackagerRunAs, PackagerStatus
from .packager import Packager
from .state import PackagerRunRecord, PackagerStateStore
from .status import PackagerStatusIndicator

__all__ = [
    "Packager",
    "PackagerConfig",
    "PackagerRunAs",
    "PackagerRunRecord",
    "PackagerStateStore",
    "PackagerStatus",
    "PackagerStatusIndicator",
]
