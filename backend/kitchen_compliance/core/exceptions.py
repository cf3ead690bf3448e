"""Errors raised by the fridge registry and temperature log recorder."""


class ConfigurationError(Exception):
    """A live backend is required but none is configured."""

    def __init__(self, message: str = "Database not configured"):
        super().__init__(message)
        self.message = message


class ServiceError(Exception):
    """The backing store failed to complete a request."""

    def __init__(self, message: str = "Data service request failed"):
        super().__init__(message)
        self.message = message


class FridgeNotFoundError(ServiceError):
    """No active fridge with that id exists (for the given site)."""

    def __init__(self, fridge_id: str, site_id: str = None):
        if site_id:
            message = f"Fridge {fridge_id} not found for site {site_id}"
        else:
            message = f"Fridge {fridge_id} not found"
        super().__init__(message)
        self.fridge_id = fridge_id
        self.site_id = site_id


class FridgeLimitExceededError(ServiceError):
    """The site's subscription tier does not allow another fridge."""

    def __init__(self, tier: str, limit: int):
        super().__init__(f"Upgrade to add more fridges ({tier} limit: {limit})")
        self.tier = tier
        self.limit = limit
