"""Result records handed to the GUI shell."""
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DiscoveredServer:
    """One installed dedicated server found during a discovery pass"""
    name: str
    app_id: int
    install_path: str
    is_running: bool = False
    cover_art: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_wire(self) -> Dict[str, Any]:
        """Camel-cased form expected by the frontend."""
        return {
            'name': self.name,
            'appId': self.app_id,
            'installPath': self.install_path,
            'isRunning': self.is_running,
            'coverArt': self.cover_art,
        }
