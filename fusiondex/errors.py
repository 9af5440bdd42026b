class FusionDexError(Exception):
    """Base class for every error raised by the catalog engine."""


class ParseError(FusionDexError):
    MALFORMED_HEAD = "MalformedHead"
    MALFORMED_BODY = "MalformedBody"
    INVALID_CATEGORY = "InvalidCategoryCombination"

    def __init__(self, token, reason, detail=""):
        self.token = token
        self.reason = reason
        message = f"{reason}: {token!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class DuplicateKey(FusionDexError):
    def __init__(self, sprite_id):
        self.sprite_id = sprite_id
        super().__init__(f"Duplicate sprite_id found: {sprite_id}")


class OutOfBounds(FusionDexError):
    pass


class StorageFault(FusionDexError):
    pass


class NotFound(FusionDexError):
    pass
