"""
Detecting the package's own version, as installed.

The version is determined only once at startup when the code is loaded.
It is used in the ``User-Agent`` header of the requests.
"""
import importlib.metadata
from typing import Optional

DISTRIBUTION_NAME = 'restli-codec'

version: Optional[str]
try:
    version = importlib.metadata.version(DISTRIBUTION_NAME)
except importlib.metadata.PackageNotFoundError:
    version = None  # e.g. running from a source checkout
