"""HTTP API.

Example:
    >>> from veriflow.api import create_app
    >>> from veriflow.config import load_settings
    >>>
    >>> app = create_app(load_settings())
    >>> # uvicorn.run(app)
"""

from veriflow.api.app import create_app

__all__ = ["create_app"]
