"""
Error types raised by the layout engine and renderers.
"""


class ConfigurationError(ValueError):
	"""
	Invalid or unresolvable layout options.
	"""

	def __init__(self, message: str, parameter: str | None = None) -> None:
		super().__init__(message)
		self.parameter = parameter


class LayoutError(ValueError):
	"""
	A box does not fit on the printable area of the page.
	"""

	def __init__(self, message: str, axis: str | None = None) -> None:
		super().__init__(message)
		self.axis = axis


class EncodingFailure(Exception):
	"""
	One row's code text could not be turned into a code image.
	"""

	def __init__(self, text: str, reason: str, row_index: int | None = None) -> None:
		super().__init__(f"Could not encode {text!r}: {reason}")
		self.text = text
		self.reason = reason
		self.row_index = row_index

	def with_row(self, row_index: int) -> "EncodingFailure":
		"""
		Copy the failure with a row index attached.

		Args:
			row_index: Zero-based input row index.

		Returns:
			New EncodingFailure.
		"""
		return EncodingFailure(self.text, self.reason, row_index)
