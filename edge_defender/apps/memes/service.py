"""
service.py — Meme Market
=========================
Meme katalogu ve hype yatirimlari.

KULLANIM:
---------
    market = MemeMarket(registry)

    result = market.invest("3f2a...", "meme1", 25)
    # {"newHype": 75, "memeTotal": 25}

    market.snapshot_all()   # status broadcast icin
    market.reset_cycle()    # sadece ViralSpreadEngine cagirir
"""

import logging
from typing import Iterable, Optional

from edge_defender.apps.memes.models import MEME_CATALOG, Meme
from edge_defender.apps.players.service import SessionRegistry
from edge_defender.core.errors import InvalidAmount, UnknownMeme

logger = logging.getLogger(__name__)


def _is_positive_int(value) -> bool:
    # bool is an int subclass; JSON true must not count as 1 hype
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


class MemeMarket:
    def __init__(self, registry: SessionRegistry, catalog: Optional[Iterable[tuple[str, str, str]]] = None):
        self.registry = registry
        self._memes: dict[str, Meme] = {}
        for meme_id, name, icon_key in (catalog or MEME_CATALOG):
            self._memes[meme_id] = Meme(id=meme_id, name=name, icon_key=icon_key)
        logger.info(f"MemeMarket initialized with {list(self._memes.keys())}")

    def get(self, meme_id: str) -> Optional[Meme]:
        return self._memes.get(meme_id)

    def memes(self) -> list[Meme]:
        """Catalog order."""
        return list(self._memes.values())

    def invest(self, player_id: str, meme_id: str, amount) -> dict:
        """
        Oyuncunun hype'ini bir meme'e yatir.

        Args:
            player_id: Yatirimci
            meme_id: Katalogdaki meme id'si
            amount: Pozitif tam sayi

        Returns:
            dict: {"newHype": int, "memeTotal": int}

        Raises:
            UnknownMeme: meme_id katalogda yok
            InvalidAmount: amount pozitif tam sayi degil
            SessionNotFound / InsufficientFunds: registry.debit_hype'tan

        Hata durumunda ne oyuncu ne meme degisir; debit basarili olmadan
        meme'e dokunulmaz.
        """
        meme = self._memes.get(meme_id) if isinstance(meme_id, str) else None
        if meme is None:
            raise UnknownMeme(meme_id)

        if not _is_positive_int(amount):
            raise InvalidAmount(amount)

        new_hype = self.registry.debit_hype(player_id, amount)
        meme_total = meme.add_investment(player_id, amount)

        logger.info(f"📈 {player_id} invested {amount} hype in {meme.name} (pool={meme_total}, hype left={new_hype})")
        return {"newHype": new_hype, "memeTotal": meme_total}

    def snapshot_all(self) -> list[dict]:
        return [meme.to_public() for meme in self._memes.values()]

    def reset_cycle(self) -> None:
        for meme in self._memes.values():
            meme.reset()
        logger.info("Meme investments and investor lists reset for next cycle")
