import configparser
from pathlib import Path


class IniReader:
    """Thin configparser wrapper: inline comments stripped, keys keep their case."""

    def __init__(self, path=None, *, text: str | None = None):
        self.path = Path(path) if path else None
        self.cfg = configparser.ConfigParser(
            inline_comment_prefixes=(";", "#"), interpolation=None
        )
        self.cfg.optionxform = str  # preserve case
        if text is not None:
            self.cfg.read_string(text)
        elif self.path is not None:
            self.cfg.read(self.path, encoding="utf-8")

    def _clean(self, val: str) -> str:
        if val is None:
            return ""
        # cut at first ; or #
        for sep in (";", "#"):
            if sep in val:
                val = val.split(sep, 1)[0]
        return val.strip()

    def has(self, section: str, option: str) -> bool:
        return self.cfg.has_option(section, option)

    def get_str(self, section: str, option: str, fallback: str = "") -> str:
        if self.cfg.has_option(section, option):
            raw = self.cfg.get(section, option, fallback=fallback)
            return self._clean(raw)
        return fallback

    def get_int(self, section: str, option: str, fallback: int = 0) -> int:
        try:
            return int(self.get_str(section, option, str(fallback)))
        except ValueError:
            return fallback

    def get_bool(self, section: str, option: str, fallback: bool = False) -> bool:
        val = self.get_str(section, option, str(fallback))
        return val.lower() in ("1", "yes", "true", "on")

    def get_list(self, section: str, option: str) -> list[str]:
        """Comma separated values, empty items dropped."""
        raw = self.get_str(section, option, "")
        return [t.strip() for t in raw.split(",") if t.strip()]

    def items(self, section: str) -> dict[str, str]:
        if not self.cfg.has_section(section):
            return {}
        return {k: self._clean(v) for k, v in self.cfg.items(section)}
