# -*- coding: utf-8 -*-
"""blockprops HTTP API package.

- Backend: FastAPI (ASGI)
- Data: block catalog JSON dump
- Input: block.properties text posted by clients
"""

__all__ = ["create_app"]

from .app import create_app
