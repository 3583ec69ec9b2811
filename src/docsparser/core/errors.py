"""Error types raised while extracting structured API documentation"""


class DocsParseError(ValueError):
    """A documentation file violates the supported markdown dialect."""


def extend_error(message: str, err: Exception) -> DocsParseError:
    """Return a DocsParseError prefixing message onto err's message.

    Callers raise the result ``from err`` so the original traceback stays attached.
    """
    return DocsParseError(f"{message} - {err}")
