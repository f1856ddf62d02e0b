"""Pydantic v2 schemas shared between the API and its clients."""

from .documents import *  # noqa: F401,F403
from .query import *  # noqa: F401,F403
