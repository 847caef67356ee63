"""
Errors raised at the upload and storage boundaries.

Each error carries the HTTP status the web app answers with and a message
that is safe to show the user. Extraction itself never raises; it just
finds fewer (or zero) events.
"""


class UploadError(Exception):
    """Base class for errors surfaced to the uploader."""
    status_code = 500
    default_message = "Something went wrong."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(UploadError):
    """No signed-in user on the request."""
    status_code = 401
    default_message = "Please log in first at /login."


class MissingInput(UploadError):
    """The request carried no file."""
    status_code = 400
    default_message = "No file received."


class UnreadableContent(UploadError):
    """The file has too little selectable text to work with (e.g. a scan)."""
    status_code = 400
    default_message = (
        "This PDF looks scanned/image-only (no selectable text). "
        "Try a text-based PDF instead."
    )


class PersistenceFailure(UploadError):
    """A storage write or read failed. The message is the database's."""
    status_code = 500
    default_message = "Could not save to the database."
