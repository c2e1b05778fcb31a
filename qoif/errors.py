class QOIError(ValueError):
    """Base class for everything the codec raises about a stream."""


class FormatError(QOIError):
    """The stream does not start with the qoif magic."""


class ChannelError(QOIError):
    """The channel count is not 3 or 4."""


class StreamError(QOIError, IOError):
    """Reading or writing the underlying stream failed, or it ended early."""
