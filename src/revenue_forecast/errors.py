class ForecastError(Exception):
    """Base class for predictable forecasting failures."""


class EmptyInputError(ForecastError):
    pass


class InsufficientHistoryError(ForecastError):
    pass


class InvalidHorizonError(ForecastError):
    pass


class UnknownMethodError(ForecastError):
    pass


class InvalidParameterError(ForecastError):
    pass


class InvalidPeriodError(ForecastError, ValueError):
    pass
