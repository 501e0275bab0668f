"""
Error types raised while preparing and rendering labels.
"""


class LabelError(Exception):
	"""
	Base class for label printing errors.
	"""


class InvalidVariantError(LabelError, ValueError):
	"""
	Raised when a variant does not resolve to a canonical label variant.
	"""

	code = "INVALID_VARIANT"

	def __init__(self, requested: str, allowed: list[str]) -> None:
		self.requested = requested
		self.allowed = list(allowed)
		super().__init__(f"{self.code}:{requested}")


class RenderError(LabelError):
	"""
	Raised when drawing a label onto the canvas fails.
	"""

	code = "PDF_RENDER_FAILED"
