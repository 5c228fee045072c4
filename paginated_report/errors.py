"""
Exception hierarchy and layout diagnostics.
"""


class ReportBuilderError(Exception):
	"""
	Base class for all report builder errors.
	"""
	pass


#============================================
class InvalidContentError(ReportBuilderError):
	"""
	Raised when content model input is malformed.
	"""
	pass


#============================================
class MeasurementError(ReportBuilderError):
	"""
	Raised when a block cannot be measured.
	"""
	pass


#============================================
class RenderError(ReportBuilderError):
	"""
	Raised when the PDF writer rejects an operation.
	"""

	def __init__(self, cause: Exception, operation: str = ""):
		self.cause = cause
		self.operation = operation
		prefix = f"PDF writer failed during {operation}" if operation else "PDF writer failed"
		super().__init__(f"{prefix}: {cause}")


#============================================
class GenerationCancelled(ReportBuilderError):
	"""
	Raised when the caller cancels generation between page commits.
	"""

	def __init__(self, committed_pages: int):
		self.committed_pages = committed_pages
		super().__init__(f"Generation cancelled after {committed_pages} committed pages")


#============================================
class ContentOverflowWarning(UserWarning):
	"""
	A block taller than a full page was placed alone on its own page.

	Collected by the layout engine and returned with the output, never raised.
	"""

	def __init__(self, block_index: int, height: float, usable_height: float, page_index: int):
		self.block_index = block_index
		self.height = height
		self.usable_height = usable_height
		self.page_index = page_index
		super().__init__(
			f"Block {block_index} height {height:.1f}pt exceeds usable page height "
			f"{usable_height:.1f}pt (placed alone on page {page_index + 1})"
		)
