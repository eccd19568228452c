"""Exceptions raised by the flashcards store, importer and attachments."""


class FlashcardsError(Exception):
    """Base class for flashcards module errors."""


class StorageError(FlashcardsError):
    """The durable key-value slot could not be read or written."""


class SyncError(FlashcardsError):
    """The AI sync batch could not be obtained or trusted."""


class MissingCredentialError(SyncError):
    """No Gemini API key is configured."""


class SyncPayloadError(SyncError):
    """The generated batch did not match the three-field contract."""


class AttachmentTypeError(FlashcardsError):
    """A selected file does not match the expected attachment kind."""
