"""Exception hierarchy shared by the application and presentation layers."""


class ToolTrackError(Exception):
    """Base class for errors the UI reports to the user instead of crashing."""


class RecordStoreError(ToolTrackError):
    """A record store operation failed (I/O, unknown id, corrupt data)."""


class FormValidationError(ToolTrackError):
    """A form was submitted with invalid fields.

    Attributes:
        errors: Mapping of field name to a human-readable message
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(self.errors.values()) or "Invalid form")


class CredentialError(ToolTrackError):
    """Admin credential verification or change was rejected."""
