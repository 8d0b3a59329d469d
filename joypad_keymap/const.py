# ==================================================
# joypad_keymap/const.py
# ==================================================
from types import MappingProxyType

# ── layout ────────────────────────────────────────────────────
BUCKETS          = 4
TABLE_SIZE       = 1060 * BUCKETS   # fingerprint slots, 0 = empty
YEAR_EPOCH       = 1970             # title year byte = year - epoch
YEAR_MAX_OFFSET  = 0xFF
MAX_MAPPINGS     = 0xFF             # records per mapping set (count byte)
MAX_POOL_OFFSET  = 0xFFFF           # map / title offsets are u16
MAX_BLOB_SIZE    = 0xFFFFFFFF       # Bit32u length fields
MAX_KEYS         = 3

MAPREF_FMT       = ">BH"            # bucket, offset of mapping set
IDENT_FMT        = ">BHH"           # map reference + title offset
IDENT_SIZE       = 5

BTN_ACTION_FLAG  = 0x20
BTN_ID_MASK      = 0x1F
BTN_COUNT_SHIFT  = 6

ACTION_SEP       = "\x01"           # between the two analog half labels
ACTION_NOTHING   = "Nothing"

COMPRESSION_LEVEL = 19

# ── keys ──────────────────────────────────────────────────────
KEYBOARD = (
    "none", "1", "2", "3", "4", "5", "6", "7", "8", "9", "0",
    "q", "w", "e", "r", "t", "y", "u", "i", "o", "p",
    "a", "s", "d", "f", "g", "h", "j", "k", "l",
    "z", "x", "c", "v", "b", "n", "m",
    "F1", "F2", "F3", "F4", "F5", "F6", "F7", "F8", "F9", "F10", "F11", "F12",
    "ESC", "TAB", "BACKSPACE", "ENTER", "SPACE",
    "LEFTALT", "RIGHTALT", "LEFTCTRL", "RIGHTCTRL", "LEFTSHIFT", "RIGHTSHIFT",
    "CAPSLOCK", "SCROLLLOCK", "NUMLOCK", "GRAVE", "MINUS", "EQUALS",
    "BACKSLASH", "LEFTBRACKET", "RIGHTBRACKET", "SEMICOLON", "QUOTE",
    "PERIOD", "COMMA", "SLASH", "EXTRA_LT_GT", "PRINTSCREEN", "PAUSE",
    "INSERT", "HOME", "PAGEUP", "DELETE", "END", "PAGEDOWN",
    "LEFT", "UP", "DOWN", "RIGHT",
    "KP1", "KP2", "KP3", "KP4", "KP5", "KP6", "KP7", "KP8", "KP9", "KP0",
    "KPDIVIDE", "KPMULTIPLY", "KPMINUS", "KPPLUS", "KPENTER", "KPPERIOD",
)
KEY_NONE = 0

ACTIONS_BASE = 200
ACTIONS_200UP = (
    "mouse_move_up", "mouse_move_down", "mouse_move_left", "mouse_move_right",
    "mouse_left_click", "mouse_right_click", "mouse_middle_click",
    "mouse_speed_up", "mouse_speed_down",
    "joy_up", "joy_down", "joy_left", "joy_right",
    "joy_button1", "joy_button2", "joy_button3", "joy_button4",
    "joy_hat_up", "joy_hat_down", "joy_hat_left", "joy_hat_right",
    "joy_2_up", "joy_2_down", "joy_2_left", "joy_2_right",
    "on_screen_keyboard", "wheel",
)

def _key_codes():
    codes = {name.lower(): i for i, name in enumerate(KEYBOARD) if i}  # 'none' is not bindable
    codes.update((name.lower(), ACTIONS_BASE + i) for i, name in enumerate(ACTIONS_200UP))
    return MappingProxyType(codes)

KEY_CODES = _key_codes()

# ── buttons ───────────────────────────────────────────────────
BUTTON_NAMES = ("b", "y", "select", "start", "up", "down", "left", "right",
                "a", "x", "l", "r", "l2", "r2", "l3", "r3")
WHEEL_BTN_ID = 20

BUTTON_CODES = MappingProxyType({
    **{name: i for i, name in enumerate(BUTTON_NAMES)},
    "lstick_left": 16, "lstick_right": 16,
    "lstick_up":   17, "lstick_down":  17,
    "rstick_left": 18, "rstick_right": 18,
    "rstick_up":   19, "rstick_down":  19,
})
ANALOG_SECOND_HALF = frozenset(("down", "right"))   # half 1, others half 0

def is_analog(button_id: int) -> bool:
    return (button_id >> 2) == 4

# ── action pool warm set ──────────────────────────────────────
# most frequent labels of the full catalogue, pooled first in every bucket
COMMON_ACTIONS = (
    "Start", "Move Left/Right", "Move Up/Down", "Pause", "Move Left",
    "Move Right", "Move Up", "Move Down", "Quit to Title", "Fire", "Jump",
    "Enter Key", "Accelerate", "Help",
)
COMMON_ACTIONS_BUDGET = 127          # bytes incl. terminators
