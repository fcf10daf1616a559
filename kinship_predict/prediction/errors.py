"""Exceptions raised by the prediction engine."""


class PredictionError(Exception):
    """Base class for prediction engine errors."""


class DataAccessError(PredictionError):
    """The backing store could not be read. Not retried by the engine."""


class PredictionCancelled(PredictionError):
    """The caller requested the scan to stop."""

    def __init__(self, rule_id: str = None, message: str = "Prediction scan cancelled"):
        self.rule_id = rule_id
        super().__init__(f"{message} ({rule_id})" if rule_id else message)
