# engine/exceptions.py

class EngineError(Exception):
    pass


class BaselineUnavailable(EngineError):
    """No reference samples exist, so multiplier-based detection cannot run."""
