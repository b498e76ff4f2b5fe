"""
Meme models — fixed catalog, only the per-cycle pool changes at runtime.
"""

from dataclasses import dataclass, field


@dataclass
class Meme:
    id: str
    name: str
    icon_key: str = "default_icon"
    current_hype_investment: int = 0
    investors_this_cycle: dict[str, int] = field(default_factory=dict)  # player_id → hype

    def add_investment(self, player_id: str, amount: int) -> int:
        self.current_hype_investment += amount
        self.investors_this_cycle[player_id] = self.investors_this_cycle.get(player_id, 0) + amount
        return self.current_hype_investment

    def reset(self) -> None:
        self.current_hype_investment = 0
        self.investors_this_cycle = {}

    def to_public(self) -> dict:
        """Status broadcast view; investor ledger is never exposed."""
        return {
            "id": self.id,
            "name": self.name,
            "currentHypeInvestment": self.current_hype_investment,
            "iconKey": self.icon_key,
        }


# (id, name, icon_key) — catalog order is also the viral tie-break order
MEME_CATALOG: tuple[tuple[str, str, str], ...] = (
    ("meme1", "Classic Doge", "icon_doge"),
    ("meme2", "Stonks Guy", "icon_stonks"),
)
