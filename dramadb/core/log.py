"""Tagged logger shared by the store and the schema bootstrap components."""

from __future__ import annotations

import logging
from typing import Any, MutableMapping

TAG = "[DB Init]"


class DbInitLogger(logging.LoggerAdapter):
    """Prefixes every message with the `[DB Init]` tag."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{TAG} {msg}", kwargs


def get_logger(name: str) -> DbInitLogger:
    return DbInitLogger(logging.getLogger(name), {})
