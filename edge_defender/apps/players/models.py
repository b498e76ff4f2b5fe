"""
Player models — in-memory only, one account per live connection.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class PlayerAccount:
    """Oyuncu hesabi: resources ana para birimi, hype sadece meme yatirimi icin."""
    id: str
    resources: int = 1000
    hype: int = 100
    connected_at: datetime = field(default_factory=datetime.utcnow)
