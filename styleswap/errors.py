"""Error taxonomy for the try-on flow."""


class ValidationError(ValueError):
    """Required input is missing or unusable. Handled without calling the model."""


class GenerationFailed(RuntimeError):
    """The model answered but its response carried no inline image."""
