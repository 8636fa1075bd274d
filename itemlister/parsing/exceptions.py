class MalformedOutputError(Exception):
    """Raised when model output cannot be parsed or repaired into a JSON object."""
