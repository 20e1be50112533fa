"""
bindings.py - Engine configuration: key table, chords and analog constants.

INI layout:

    [input]
    poll_interval_ms   = 16
    left_deadzone      = 7849    ; circular, tested on hypot(LX, LY)
    right_deadzone     = 8689    ; single axis, tested on |RY|
    scroll_scale       = 256     ; wheel delta = RY / scroll_scale
    pointer_max_speed  = 15      ; pointer units per cycle at full deflection

    [keys]
    A     = Enter
    B     = Escape
    Start = LWin

    [chords]
    toggle_ui    = LeftThumb + RightThumb
    osk_modifier = Start
    osk_button   = X
"""

from dataclasses import dataclass

from windeck.controller.frame import Button, button_from_str
from windeck.controller.keymapper import split_combo, vk_from_str


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class KeyBinding:
    button: Button
    key: str


DEFAULT_KEY_BINDINGS = (
    KeyBinding(Button.A, "Enter"),
    KeyBinding(Button.B, "Escape"),
    KeyBinding(Button.START, "LWin"),
)


def _parse_button(value: str, where: str) -> Button:
    try:
        return button_from_str(value)
    except ValueError as exc:
        raise ConfigError(f"{where}: {exc}") from None


def parse_chord(value: str, where: str = "chord") -> Button:
    """'LeftThumb + RightThumb' -> Button.LEFT_THUMB | Button.RIGHT_THUMB"""
    parts = [p for p in (s.strip() for s in value.split("+")) if p]
    if len(parts) < 2:
        raise ConfigError(f"{where}: a chord needs at least two buttons (got '{value}')")
    chord = Button.NONE
    for p in parts:
        chord |= _parse_button(p, where)
    return chord


@dataclass
class InputConfig:
    poll_interval_ms: int = 16
    left_deadzone: int = 7849
    right_deadzone: int = 8689
    scroll_scale: int = 256
    scroll_limit: int = 127
    pointer_max_speed: int = 15
    use_sendinput: bool = True

    key_bindings: tuple = DEFAULT_KEY_BINDINGS
    toggle_ui_chord: Button = Button.LEFT_THUMB | Button.RIGHT_THUMB
    osk_modifier: Button = Button.START
    osk_button: Button = Button.X

    # Debug
    debug_inputs: bool = False
    log_buttons: bool = False
    log_axes: bool = False

    @property
    def poll_interval(self) -> float:
        return max(1, self.poll_interval_ms) / 1000.0

    @classmethod
    def from_ini(cls, cfg, log=None):
        obj = cls()

        obj.poll_interval_ms = cfg.get_int("input", "poll_interval_ms", obj.poll_interval_ms)
        obj.left_deadzone = cfg.get_int("input", "left_deadzone", obj.left_deadzone)
        obj.right_deadzone = cfg.get_int("input", "right_deadzone", obj.right_deadzone)
        obj.scroll_scale = max(1, cfg.get_int("input", "scroll_scale", obj.scroll_scale))
        obj.scroll_limit = cfg.get_int("input", "scroll_limit", obj.scroll_limit)
        obj.pointer_max_speed = cfg.get_int("input", "pointer_max_speed", obj.pointer_max_speed)
        obj.use_sendinput = cfg.get_bool("input", "use_sendinput", obj.use_sendinput)

        obj.debug_inputs = cfg.get_bool("input", "debug_inputs", False)
        obj.log_buttons = cfg.get_bool("input", "log_buttons", False)
        obj.log_axes = cfg.get_bool("input", "log_axes", False)

        keys = cfg.items("keys")
        if keys:
            table = []
            for btn_name, key in keys.items():
                button = _parse_button(btn_name, f"[keys] {btn_name}")
                if not key:
                    continue
                if not all(vk_from_str(p) for p in split_combo(key)):
                    raise ConfigError(f"[keys] {btn_name}: unknown key '{key}'")
                table.append(KeyBinding(button, key))
            obj.key_bindings = tuple(table)

        if cfg.has("chords", "toggle_ui"):
            obj.toggle_ui_chord = parse_chord(cfg.get_str("chords", "toggle_ui"), "[chords] toggle_ui")
        if cfg.has("chords", "osk_modifier"):
            obj.osk_modifier = _parse_button(cfg.get_str("chords", "osk_modifier"), "[chords] osk_modifier")
        if cfg.has("chords", "osk_button"):
            obj.osk_button = _parse_button(cfg.get_str("chords", "osk_button"), "[chords] osk_button")

        if log:
            log.info(
                f"[CONFIG] poll={obj.poll_interval_ms} ms deadzone L={obj.left_deadzone} "
                f"R={obj.right_deadzone} scroll_scale={obj.scroll_scale} "
                f"pointer_speed={obj.pointer_max_speed}"
            )
            for kb in obj.key_bindings:
                log.info(f"[BINDING] {kb.button.name} → {kb.key}")
        return obj
