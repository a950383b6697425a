"""
Fee schedule for transaction cost accounting.

Named gas constants, configured once and read many times. ``TRANSACTION``
is the base cost of every transaction and ``TXDATA`` the cost per payload
byte; the remaining constants belong to contract execution and are carried
so that one schedule serves the whole node.
"""

from __future__ import annotations
import logging
import os
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from .runtime.errors import UnknownFeeError

logger = logging.getLogger(__name__)

ENV_PREFIX = "LEDGER_TX_FEE_"


class FeeScheduleConfig(BaseModel):
    """
    Fee constants in gas units.

    Field names are the schedule's lookup names.
    """
    STEP: int = Field(default=1, ge=0, description="Cost of one VM step")
    STOP: int = Field(default=0, ge=0, description="Cost of halting")
    SUICIDE: int = Field(default=0, ge=0, description="Cost of self-destruct")
    BALANCE: int = Field(default=20, ge=0, description="Cost of a balance lookup")
    SHA3: int = Field(default=20, ge=0, description="Cost of a hash operation")
    SLOAD: int = Field(default=20, ge=0, description="Cost of a storage read")
    SSTORE: int = Field(default=100, ge=0, description="Cost of a storage write")
    CREATE: int = Field(default=100, ge=0, description="Cost of contract creation")
    CALL: int = Field(default=20, ge=0, description="Cost of a message call")
    MEMORY: int = Field(default=1, ge=0, description="Cost per word of memory")
    TXDATA: int = Field(default=5, ge=0, description="Cost per byte of transaction payload")
    TRANSACTION: int = Field(default=500, ge=0, description="Base cost of a transaction")

    model_config = {"frozen": True, "extra": "forbid"}

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> FeeScheduleConfig:
        """
        Build a config with overrides from ``LEDGER_TX_FEE_<NAME>`` variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            Validated configuration
        """
        environ = os.environ if environ is None else environ
        overrides: Dict[str, str] = {}
        for name in cls.model_fields:
            value = environ.get(ENV_PREFIX + name)
            if value is not None:
                overrides[name] = value
        if overrides:
            logger.info(f"Fee schedule overrides from environment: {sorted(overrides)}")
        return cls.model_validate(overrides)


class FeeSchedule:
    """Read-only lookup of fee constants by name."""

    def __init__(self, config: Optional[FeeScheduleConfig] = None):
        config = config or FeeScheduleConfig()
        self._fees: Mapping[str, int] = MappingProxyType(config.model_dump())

    def fee_for(self, name: str) -> int:
        """
        Look up a fee.

        Raises:
            UnknownFeeError: If the schedule has no constant of that name
        """
        try:
            return self._fees[name]
        except KeyError:
            raise UnknownFeeError(name) from None

    def names(self) -> List[str]:
        return list(self._fees)

    @property
    def fees(self) -> Mapping[str, int]:
        return self._fees

    def __contains__(self, name: str) -> bool:
        return name in self._fees

    def __repr__(self) -> str:
        return f"FeeSchedule(TRANSACTION={self._fees['TRANSACTION']}, TXDATA={self._fees['TXDATA']})"


@lru_cache(maxsize=1)
def get_fee_schedule() -> FeeSchedule:
    """Process-wide schedule, built from the environment on first use."""
    return FeeSchedule(FeeScheduleConfig.from_env())


def fee_for(name: str) -> int:
    """Look up a fee in the process-wide schedule."""
    return get_fee_schedule().fee_for(name)


__all__ = ["FeeSchedule", "FeeScheduleConfig", "fee_for", "get_fee_schedule"]
