"""
keyvalues.py - Recursive-descent parser for Valve's KeyValues text format
(libraryfolders.vdf, appmanifest_*.acf).

    document := pair*
    pair     := key ( value | '{' pair* '}' ) condition?
    key      := quoted | bare
    value    := quoted | bare

Quoted strings understand \\ \" \n \t escapes, // starts a comment that runs
to the end of the line, and trailing platform conditions like [$WIN32] are
accepted and ignored. Duplicate keys keep the first occurrence.
"""


class KeyValuesError(ValueError):
    pass


_ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "t": "\t"}
_BARE_STOP = set(' \t\r\n{}"')


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.line = 1

    # ---------------- lexing ----------------
    def _skip_blank(self):
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == "\n":
                self.line += 1
                self.pos += 1
            elif ch in " \t\r\ufeff":
                self.pos += 1
            elif text.startswith("//", self.pos):
                end = text.find("\n", self.pos)
                self.pos = len(text) if end < 0 else end
            else:
                break

    def _peek(self) -> str:
        self._skip_blank()
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def _error(self, msg: str):
        raise KeyValuesError(f"line {self.line}: {msg}")

    def _quoted(self) -> str:
        self.pos += 1  # opening quote
        out = []
        text = self.text
        while self.pos < len(text):
            ch = text[self.pos]
            if ch == '"':
                self.pos += 1
                return "".join(out)
            if ch == "\\" and self.pos + 1 < len(text):
                nxt = text[self.pos + 1]
                if nxt in _ESCAPES:
                    out.append(_ESCAPES[nxt])
                    self.pos += 2
                    continue
            if ch == "\n":
                self.line += 1
            out.append(ch)
            self.pos += 1
        self._error("unterminated string")

    def _bare(self) -> str:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] not in _BARE_STOP:
            self.pos += 1
        return self.text[start:self.pos]

    def _token(self) -> str:
        ch = self._peek()
        if ch == '"':
            return self._quoted()
        if ch in ("", "{", "}"):
            self._error(f"expected a string, got {ch or 'end of input'!r}")
        return self._bare()

    def _skip_condition(self):
        if self._peek() == "[":
            end = self.text.find("]", self.pos)
            if end < 0:
                self._error("unterminated condition")
            self.pos = end + 1

    # ---------------- grammar ----------------
    def pairs(self, nested: bool) -> dict:
        result: dict = {}
        while True:
            ch = self._peek()
            if ch == "":
                if nested:
                    self._error("missing '}'")
                return result
            if ch == "}":
                if not nested:
                    self._error("unexpected '}'")
                self.pos += 1
                return result

            key = self._token()
            if self._peek() == "{":
                self.pos += 1
                value = self.pairs(nested=True)
            else:
                value = self._token()
            self._skip_condition()
            result.setdefault(key, value)


def loads(text: str) -> dict:
    """Parse KeyValues text into nested dicts of strings."""
    return _Parser(text).pairs(nested=False)


def load(path, encoding: str = "utf-8") -> dict:
    with open(path, "r", encoding=encoding, errors="replace") as f:
        return loads(f.read())


def get_ci(section, key: str, default=None):
    """Case-insensitive lookup; Valve files are not consistent about key case."""
    if not isinstance(section, dict):
        return default
    if key in section:
        return section[key]
    lowered = key.lower()
    for k, v in section.items():
        if k.lower() == lowered:
            return v
    return default
