class GoldskyError(Exception):
    pass


class GoldskyRateLimitError(GoldskyError):
    pass


class GoldskyApiError(GoldskyError):
    pass
