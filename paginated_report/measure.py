"""
Measurement provider: vertical extent of blocks at a given width.
"""

# Standard Library
import dataclasses
import typing

# PIP3 modules
import reportlab.pdfbase.pdfmetrics

# local repo modules
import paginated_report as prep
import paginated_report.config
import paginated_report.content
import paginated_report.errors


MeasurementError = prep.errors.MeasurementError
TextStyle = prep.content.TextStyle
SizeClass = prep.content.SizeClass
Weight = prep.content.Weight

TABLE_CELL_PADDING = prep.config.TABLE_CELL_PADDING
LINE_SPACING = prep.config.LINE_SPACING


class MeasurementProvider(typing.Protocol):
	"""
	Sizes blocks and table rows for the layout engine.

	Implementations must be deterministic, and for text blocks a wider
	available width must never produce a taller result.
	"""

	def measure(self, block: "prep.content.Block", available_width: float) -> float:
		...

	def measure_row(
		self,
		table: "prep.content.TableBlock",
		cells: tuple[str, ...],
		available_width: float,
		is_header: bool = False,
	) -> float:
		...


@dataclasses.dataclass(frozen=True)
class ResolvedFont:
	font_name: str
	font_size: float
	leading: float
	ascent: float


class FontMetrics:
	"""
	Read-only table resolving (size class, weight) pairs to concrete fonts.

	Built once and shared by reference; nothing mutates it after __init__.
	"""

	def __init__(
		self,
		font_sizes: dict[str, float] | None = None,
		regular_font: str = prep.config.DEFAULT_FONT_REGULAR,
		bold_font: str = prep.config.DEFAULT_FONT_BOLD,
		line_spacing: float = LINE_SPACING,
	):
		sizes = font_sizes if font_sizes is not None else prep.config.FONT_SIZES
		font_names = {Weight.REGULAR: regular_font, Weight.BOLD: bold_font}
		table: dict[tuple[SizeClass, Weight], ResolvedFont] = {}
		for size_class in SizeClass:
			if size_class.value not in sizes:
				raise MeasurementError(f"No font size configured for size class {size_class.value}")
			font_size = float(sizes[size_class.value])
			for weight, font_name in font_names.items():
				try:
					ascent = reportlab.pdfbase.pdfmetrics.getAscent(font_name) * font_size / 1000.0
				except KeyError as error:
					raise MeasurementError(f"Font is not available: {font_name}") from error
				table[(size_class, weight)] = ResolvedFont(
					font_name=font_name,
					font_size=font_size,
					leading=font_size * line_spacing,
					ascent=ascent,
				)
		self._table = table

	def resolve(self, style: TextStyle) -> ResolvedFont:
		"""
		Resolve a text style to a font.

		Args:
			style: Closed style descriptor.

		Returns:
			ResolvedFont.
		"""
		resolved = self._table.get((style.size_class, style.weight))
		if resolved is None:
			raise MeasurementError(
				f"Unrecognized text style: size={style.size_class!r} weight={style.weight!r}"
			)
		return resolved

	def text_width(self, text: str, style: TextStyle) -> float:
		resolved = self.resolve(style)
		return reportlab.pdfbase.pdfmetrics.stringWidth(text, resolved.font_name, resolved.font_size)


DEFAULT_METRICS = FontMetrics()


#============================================
def wrap_text(text: str, font_name: str, font_size: float, width: float) -> list[str]:
	"""
	Greedy word wrap.

	Explicit newlines always start a new line. A word wider than the line
	is placed alone on its own line.

	Args:
		text: Text to wrap.
		font_name: ReportLab font name.
		font_size: Font size in points.
		width: Line width in points.

	Returns:
		List of lines (at least one).
	"""
	space_width = reportlab.pdfbase.pdfmetrics.stringWidth(" ", font_name, font_size)
	lines: list[str] = []
	for raw_line in text.split("\n"):
		words = raw_line.split()
		if not words:
			lines.append("")
			continue
		current = words[0]
		current_width = reportlab.pdfbase.pdfmetrics.stringWidth(current, font_name, font_size)
		for word in words[1:]:
			word_width = reportlab.pdfbase.pdfmetrics.stringWidth(word, font_name, font_size)
			if current_width + space_width + word_width <= width:
				current = f"{current} {word}"
				current_width += space_width + word_width
			else:
				lines.append(current)
				current = word
				current_width = word_width
		lines.append(current)
	return lines


#============================================
def column_widths(table: "prep.content.TableBlock", available_width: float) -> list[float]:
	"""
	Split the available width between table columns.

	Args:
		table: Table block.
		available_width: Content width in points.

	Returns:
		Column widths proportional to the table's column weights.
	"""
	weights = table.column_weights
	if weights is None:
		weights = tuple(1.0 for _ in range(table.column_count))
	total = sum(weights)
	return [available_width * weight / total for weight in weights]


class ReportlabMeasurer:
	"""
	Measurement provider backed by ReportLab standard font metrics.
	"""

	def __init__(self, metrics: FontMetrics = DEFAULT_METRICS):
		self.metrics = metrics

	def wrap(self, text: str, style: TextStyle, width: float) -> list[str]:
		resolved = self.metrics.resolve(style)
		return wrap_text(text, resolved.font_name, resolved.font_size, width)

	def text_height(self, text: str, style: TextStyle, width: float) -> float:
		resolved = self.metrics.resolve(style)
		lines = wrap_text(text, resolved.font_name, resolved.font_size, width)
		return len(lines) * resolved.leading

	def measure(self, block: "prep.content.Block", available_width: float) -> float:
		"""
		Measure the vertical extent of a block.

		Args:
			block: Content block.
			available_width: Content width in points.

		Returns:
			Height in points.
		"""
		if available_width <= 0:
			raise MeasurementError(f"Available width must be positive, got {available_width}")
		if isinstance(block, prep.content.SpacerBlock):
			return float(block.height)
		if isinstance(block, (prep.content.HeadingBlock, prep.content.ParagraphBlock)):
			return self.text_height(block.text, block.style, available_width)
		if isinstance(block, prep.content.TableBlock):
			height = self.measure_row(block, block.header, available_width, is_header=True)
			for row in block.rows:
				height += self.measure_row(block, row, available_width)
			return height
		raise MeasurementError(f"Cannot measure block of type {type(block).__name__}")

	def measure_row(
		self,
		table: "prep.content.TableBlock",
		cells: tuple[str, ...],
		available_width: float,
		is_header: bool = False,
	) -> float:
		"""
		Measure one table row: the tallest wrapped cell plus cell padding.
		"""
		if available_width <= 0:
			raise MeasurementError(f"Available width must be positive, got {available_width}")
		style = table.header_style if is_header else table.style
		widths = column_widths(table, available_width)
		tallest = 0.0
		for cell, width in zip(cells, widths):
			inner_width = max(1.0, width - 2.0 * TABLE_CELL_PADDING)
			tallest = max(tallest, self.text_height(cell, style, inner_width))
		return tallest + 2.0 * TABLE_CELL_PADDING
