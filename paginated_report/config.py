"""
Shared configuration and constants.
"""

# Standard Library
import dataclasses

# PIP3 modules
import reportlab.lib.pagesizes

# local repo modules
import paginated_report.errors


POINTS_PER_INCH = 72.0
POINTS_PER_MM = POINTS_PER_INCH / 25.4

PAGE_SIZES = {
	"letter": reportlab.lib.pagesizes.letter,
	"a4": reportlab.lib.pagesizes.A4,
}
DEFAULT_PAGE_SIZE = "letter"
DEFAULT_MARGIN = 36.0

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
# keyed by SizeClass value
FONT_SIZES = {
	"title": 24.0,
	"heading": 16.0,
	"subheading": 13.0,
	"body": 11.0,
	"small": 9.0,
}
LINE_SPACING = 1.2
DEFAULT_BLOCK_SPACING = 6.0

TABLE_CELL_PADDING = 4.0
TABLE_GRID_WIDTH = 0.5

COLOR_BLACK = "#000000"
COLOR_WHITE = "#FFFFFF"
COLOR_HEADER = "#3F51B5"
COLOR_GRAY = "#808080"
COLOR_GRID = "#9E9E9E"
COLOR_SUCCESS = "#4CAF50"
COLOR_ERROR = "#F44336"
COLOR_WARNING = "#FF9800"


@dataclasses.dataclass(frozen=True)
class PageGeometry:
	width: float
	height: float
	margin: float

	def __post_init__(self) -> None:
		if self.margin < 0:
			raise paginated_report.errors.InvalidContentError(
				f"Page margin must be non-negative, got {self.margin}"
			)
		if self.content_width <= 0 or self.usable_height <= 0:
			raise paginated_report.errors.InvalidContentError(
				f"Margin {self.margin}pt leaves no content area on a "
				f"{self.width}x{self.height}pt page"
			)

	@property
	def content_width(self) -> float:
		return self.width - 2.0 * self.margin

	@property
	def usable_height(self) -> float:
		return self.height - 2.0 * self.margin

	@classmethod
	def from_page_size(cls, name: str, margin: float = DEFAULT_MARGIN) -> "PageGeometry":
		"""
		Build a geometry from a named page size.

		Args:
			name: Page size name ("letter" or "a4").
			margin: Margin on every side in points.

		Returns:
			PageGeometry.
		"""
		key = name.strip().lower()
		if key not in PAGE_SIZES:
			raise paginated_report.errors.InvalidContentError(f"Unknown page size: {name}")
		width, height = PAGE_SIZES[key]
		return cls(width=width, height=height, margin=margin)


#============================================
def inches_to_points(value: float) -> float:
	"""
	Convert inches to points.

	Args:
		value: Inches value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_INCH


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimeters to points.
	"""
	return value * POINTS_PER_MM


#============================================
def is_hex_color(value) -> bool:
	"""
	Check for a "#RRGGBB" color string.
	"""
	if not isinstance(value, str) or len(value) != 7 or not value.startswith("#"):
		return False
	try:
		int(value[1:], 16)
	except ValueError:
		return False
	return True


#============================================
def parse_hex_color(value: str) -> tuple[float, float, float]:
	"""
	Parse a hex color string into RGB floats.

	Args:
		value: Color string like "#AABBCC".

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range.
	"""
	if not value or not value.startswith("#") or len(value) != 7:
		return (0.0, 0.0, 0.0)
	red = int(value[1:3], 16) / 255.0
	green = int(value[3:5], 16) / 255.0
	blue = int(value[5:7], 16) / 255.0
	return (red, green, blue)
