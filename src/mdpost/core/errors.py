"""Parse failures raised while loading a post"""


class ParseError(ValueError):
    """Base class for errors that exclude a document from a batch."""

    kind = "ParseError"


class MalformedMetadata(ParseError):
    """Frontmatter block is missing, unterminated, undecodable, or mis-shaped."""

    kind = "MalformedMetadata"


class MissingRequiredField(ParseError):
    """A required frontmatter field (title or date) is absent or blank."""

    kind = "MissingRequiredField"

    def __init__(self, field: str):
        super().__init__(f"Missing required field: {field}")
        self.field = field

    def __reduce__(self):
        return type(self), (self.field,)


class InvalidTimestamp(ParseError):
    """A timestamp field cannot be parsed or has no timezone offset."""

    kind = "InvalidTimestamp"

    def __init__(self, field: str, value: object, reason: str = "not a valid timestamp"):
        super().__init__(f"Invalid timestamp for {field!r}: {value!r} ({reason})")
        self.field = field
        self.value = value
        self.reason = reason

    def __reduce__(self):
        return type(self), (self.field, self.value, self.reason)
