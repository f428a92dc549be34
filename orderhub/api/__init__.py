# orderhub/api/__init__.py
from orderhub.api.errors import register_error_handlers

__all__ = ["register_error_handlers"]
