"""
Principia - generic in-memory repository and the domain patterns built on it.

Subpackages:
- principia.core: Repository, protocols, errors, logging, settings
- principia.domain: Example domains wired to the core by composition
"""

__version__ = "0.1.0"

from principia.core import *  # noqa
