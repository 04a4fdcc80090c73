"""
Error types shared by the store, the form controller and the print layer.
"""


class StoreError(Exception):
    """Base class for failures talking to the profile store."""


class StoreReadError(StoreError):
    """Listing or reading profiles failed."""


class StoreWriteError(StoreError):
    """Creating, updating or deleting a profile failed."""


class NotFoundError(StoreWriteError):
    """The requested profile does not exist."""

    def __init__(self, profile_id):
        super().__init__(f'Profile {profile_id} not found')
        self.profile_id = profile_id


class ValidationError(Exception):
    """
    Field-level validation failure raised at the form boundary.

    Attributes:
        errors: mapping of field name -> human readable message
    """

    def __init__(self, errors):
        super().__init__(', '.join(f'{k}: {v}' for k, v in errors.items()))
        self.errors = dict(errors)


class ExportError(Exception):
    """Rendering a profile sheet to PDF failed."""
