# ==================================================
# joypad_keymap/errors.py
# ==================================================


class KeymapError(ValueError):
    """Base class: every compilation error is fatal for the whole run."""


class CatalogSyntaxError(KeymapError):
    pass


class UnknownSymbol(KeymapError):
    pass


class InvalidKeyCount(KeymapError):
    pass


class DuplicateBinding(KeymapError):
    pass


class MissingField(KeymapError):
    pass


class InvalidYear(KeymapError):
    pass


class DuplicateFingerprint(KeymapError):
    pass


class ReservedFingerprint(DuplicateFingerprint):
    """Fingerprint 0 would be indistinguishable from an empty table slot."""


class TableFull(KeymapError):
    pass


class CapacityExceeded(KeymapError):
    pass


class InvalidLayout(KeymapError):
    """Table size and bucket count that cannot be split evenly."""
