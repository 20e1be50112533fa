from dataclasses import dataclass


@dataclass(frozen=True)
class Game:
    name: str
    path: str
    app_id: str = ""
