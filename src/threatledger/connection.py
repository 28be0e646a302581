"""
Ledger connection manager.

Owns the lifecycle of the ledger identity as an explicit state machine:

    DISCONNECTED --connect()--> CONNECTING --identity--> ACTIVE
         ^                           |                     |
         +-------- failure ----------+                     |
         +----------------------- disconnect() ------------+
"""

import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional

from .adapters.base import WalletProvider
from .exceptions import InvalidTransitionError, LedgerConnectionError
from .models import LedgerStatus

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    ACTIVE = "active"


_TRANSITIONS: Dict[ConnectionState, FrozenSet[ConnectionState]] = {
    ConnectionState.DISCONNECTED: frozenset({ConnectionState.CONNECTING, ConnectionState.ACTIVE}),
    ConnectionState.CONNECTING: frozenset({ConnectionState.ACTIVE, ConnectionState.DISCONNECTED}),
    ConnectionState.ACTIVE: frozenset({ConnectionState.DISCONNECTED}),
}


class LedgerConnectionManager:
    """Tracks the wallet identity used for proof submissions."""

    def __init__(self, wallet: WalletProvider):
        self.wallet = wallet
        self.state = ConnectionState.DISCONNECTED
        self.identity: Optional[str] = None
        self._attempt = 0  # bumped by connect() and disconnect()

    def status(self) -> LedgerStatus:
        """Snapshot of the current identity, as consumed by the orchestrator."""
        if self.state == ConnectionState.ACTIVE:
            return LedgerStatus(connected=True, identity=self.identity)
        return LedgerStatus(connected=False, identity=None)

    def _move(self, target: ConnectionState) -> None:
        if target not in _TRANSITIONS[self.state]:
            raise InvalidTransitionError(f"Cannot go from {self.state.value} to {target.value}")
        logger.debug(f"Ledger connection {self.state.value} -> {target.value}")
        self.state = target

    async def refresh(self) -> LedgerStatus:
        """
        Re-read the wallet status. Picks up an identity the wallet already
        holds, and drops ours if the wallet lost it.
        """
        if self.state == ConnectionState.CONNECTING:
            return self.status()

        wallet_status = await self.wallet.get_status()
        if wallet_status.is_ready:
            if self.state == ConnectionState.DISCONNECTED:
                self._move(ConnectionState.ACTIVE)
            self.identity = wallet_status.identity
        elif self.state == ConnectionState.ACTIVE:
            logger.info("Wallet reports no identity any more, marking ledger disconnected")
            self._move(ConnectionState.DISCONNECTED)
            self.identity = None

        return self.status()

    async def connect(self) -> LedgerStatus:
        """
        Request a ledger identity from the wallet.

        Returns:
            The active status

        Raises:
            InvalidTransitionError: If a connection attempt is already in progress
            LedgerConnectionError: If the wallet failed or returned no identity
        """
        if self.state == ConnectionState.ACTIVE:
            return self.status()

        self._move(ConnectionState.CONNECTING)
        self._attempt += 1
        attempt = self._attempt
        try:
            await self.wallet.request_connection()
            wallet_status = await self.wallet.get_status()
        except Exception as e:
            if attempt == self._attempt and self.state == ConnectionState.CONNECTING:
                self._move(ConnectionState.DISCONNECTED)
            logger.error(f"Wallet connection failed: {e}")
            raise LedgerConnectionError(f"Wallet connection failed: {e}") from e

        # disconnect() during the attempt wins, even if a newer attempt has started since
        if attempt != self._attempt:
            raise LedgerConnectionError("Connection attempt was cancelled")

        if not wallet_status.is_ready:
            self._move(ConnectionState.DISCONNECTED)
            raise LedgerConnectionError("Wallet connected without a ledger identity")

        self.identity = wallet_status.identity
        self._move(ConnectionState.ACTIVE)
        logger.info(f"✅ Ledger identity active: {self.identity}")
        return self.status()

    async def disconnect(self) -> LedgerStatus:
        """Release the identity. Disconnecting while disconnected is a no-op."""
        if self.state == ConnectionState.DISCONNECTED:
            return self.status()

        self._move(ConnectionState.DISCONNECTED)
        self._attempt += 1
        self.identity = None
        try:
            await self.wallet.disconnect()
        except Exception as e:
            logger.warning(f"Wallet disconnect failed, identity released locally: {e}")
        return self.status()
