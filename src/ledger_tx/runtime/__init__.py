"""
Runtime support for ledger-tx: the error model shared by every module.
"""

from .errors import *
