"""
service.py — Session Registry
==============================
Connection id → PlayerAccount.

SORUMLULUKLAR:
--------------
✅ Hesap olustur (connect) / sil (disconnect)
✅ Resources kredisi (odul)
✅ Hype debit (meme yatirimi)

Butun mutasyonlar event loop icindeki tek bir task'ta, await olmadan
calisir; bir read-modify-write baska bir task tarafindan bolunemez.
"""

import logging
import math
from typing import Dict, Optional

from edge_defender.apps.players.models import PlayerAccount
from edge_defender.core.errors import DuplicateSession, InsufficientFunds, SessionNotFound

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Veri yapisi:
    {
        "3f2a...": PlayerAccount(resources=1000, hype=100),
        "9c41...": PlayerAccount(resources=1450, hype=20),
    }
    """

    def __init__(self, starting_resources: int = 1000, starting_hype: int = 100):
        self.starting_resources = starting_resources
        self.starting_hype = starting_hype
        self._accounts: Dict[str, PlayerAccount] = {}

    def register(self, connection_id: str) -> PlayerAccount:
        """
        Yeni hesap ac.

        Raises:
            DuplicateSession: id zaten kayitli (mevcut bakiye korunur)
        """
        if connection_id in self._accounts:
            logger.warning(f"⚠️  Duplicate registration for {connection_id} rejected")
            raise DuplicateSession(connection_id)

        account = PlayerAccount(
            id=connection_id,
            resources=self.starting_resources,
            hype=self.starting_hype,
        )
        self._accounts[connection_id] = account
        logger.info(f"✅ Player {connection_id} registered with {account.resources} resources, {account.hype} hype")
        return account

    def get(self, connection_id: str) -> Optional[PlayerAccount]:
        return self._accounts.get(connection_id)

    def require(self, connection_id: str) -> PlayerAccount:
        """get() ama yoksa SessionNotFound."""
        account = self._accounts.get(connection_id)
        if account is None:
            logger.warning(f"⚠️  Player session {connection_id} not found")
            raise SessionNotFound(connection_id)
        return account

    def remove(self, connection_id: str) -> bool:
        if connection_id in self._accounts:
            del self._accounts[connection_id]
            logger.info(f"❌ Player {connection_id} removed")
            return True
        return False

    def credit(self, connection_id: str, amount: float, reason: str) -> int:
        """
        Resources ekle. Kesirli miktar saklanmadan once asagi yuvarlanir.

        Returns:
            int: yeni toplam
        """
        account = self.require(connection_id)
        account.resources += math.floor(amount)
        logger.info(f"💰 {connection_id} +{math.floor(amount)} ({reason}) → {account.resources}")
        return account.resources

    def debit_hype(self, connection_id: str, amount: int) -> int:
        """
        Hype dus.

        Raises:
            SessionNotFound: hesap yok
            InsufficientFunds: amount <= 0 veya amount > hype
        """
        account = self.require(connection_id)
        if amount <= 0 or amount > account.hype:
            raise InsufficientFunds(amount, account.hype)
        account.hype -= amount
        return account.hype

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._accounts
