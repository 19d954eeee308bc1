"""Exception hierarchy shared by the metadata and vision pipelines."""


class PhotoPrivacyError(Exception):
    """Base class for all errors raised by this package."""


class UploadRejected(PhotoPrivacyError, ValueError):
    """The uploaded file is not an accepted image (type, size or count)."""


class MetadataParseFailure(PhotoPrivacyError):
    """The tag reader could not parse the container's metadata.

    Never escapes ``extract``; it is logged and turned into an empty record.
    """


class StripFailure(PhotoPrivacyError):
    """Base class for failures while producing a sanitized image."""


class DecodeError(StripFailure):
    """The source image could not be read or decoded into pixels."""


class EncodeError(StripFailure):
    """The pixel surface could not be re-encoded."""


class ExternalServiceFailure(PhotoPrivacyError, RuntimeError):
    """The vision service call failed (network, timeout, non-2xx, bad payload)."""


class MissingCredentialError(ExternalServiceFailure):
    """No vision API key is configured."""


class NoPhotoLoaded(PhotoPrivacyError):
    """An operation needs an analyzed photo but the session holds none."""
