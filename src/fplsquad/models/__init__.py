from .player import Catalog, PlayerRecord

__all__ = ["Catalog", "PlayerRecord"]
