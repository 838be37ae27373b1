class InvalidFlightRecord(ValueError):
    """Flight record whose shape cannot be analyzed (e.g. non-numeric duration)."""
