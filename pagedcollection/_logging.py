import logging

# Create the library logger
logger = logging.getLogger("pagedcollection")

# Add NullHandler to prevent "No handlers could be found" warnings
# if the application doesn't configure logging.
logger.addHandler(logging.NullHandler())


def summarize_error(error: BaseException) -> str:
    """
    Renders a query error for log records.
    Never raises, even if the error's own __str__ does.
    """
    try:
        message = str(error)
        name = type(error).__name__
        return f"{name}: {message}" if message else name
    except Exception:
        return "<unprintable error>"
