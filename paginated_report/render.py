"""
Rendering of page plans through a PDF writer.
"""

# Standard Library
import dataclasses
import io
import pathlib
import typing

# PIP3 modules
import pypdf
import reportlab.pdfgen.canvas

# local repo modules
import paginated_report as prep
import paginated_report.config
import paginated_report.content
import paginated_report.errors
import paginated_report.layout
import paginated_report.measure


PageGeometry = prep.config.PageGeometry
PagePlan = prep.layout.PagePlan
RenderError = prep.errors.RenderError
TextStyle = prep.content.TextStyle
Alignment = prep.content.Alignment
FontMetrics = prep.measure.FontMetrics
ReportlabMeasurer = prep.measure.ReportlabMeasurer

DEFAULT_METRICS = prep.measure.DEFAULT_METRICS
TABLE_CELL_PADDING = prep.config.TABLE_CELL_PADDING
TABLE_GRID_WIDTH = prep.config.TABLE_GRID_WIDTH
COLOR_HEADER = prep.config.COLOR_HEADER
COLOR_GRID = prep.config.COLOR_GRID
parse_hex_color = prep.config.parse_hex_color

PAGE_NUMBER_STYLE = TextStyle(
	size_class=prep.content.SizeClass.SMALL,
	alignment=Alignment.RIGHT,
	color=prep.config.COLOR_GRAY,
)


class PdfWriter(typing.Protocol):
	"""
	Narrow contract over a PDF-writing library.

	Coordinates are page-relative with the origin at the top-left corner and
	y growing downward. For draw_text, y is the top of the text line; for
	draw_table_grid, the top edge of the first row.
	"""

	def begin_page(self, width: float, height: float) -> None:
		...

	def draw_text(self, x: float, y: float, text: str, style: TextStyle) -> None:
		...

	def draw_table_grid(
		self,
		x: float,
		y: float,
		rows: list[list[str]],
		col_widths: list[float],
		style: TextStyle,
		row_heights: list[float] | None = None,
		header_style: TextStyle | None = None,
		cell_colors: list[list[str | None]] | None = None,
	) -> None:
		...

	def end_page(self) -> None:
		...

	def finish(self) -> bytes:
		...


#============================================
def compute_align_offset(available: float, used: float, alignment: Alignment) -> float:
	"""
	Compute a horizontal alignment offset.

	Args:
		available: Available width.
		used: Width of the content.
		alignment: Alignment.

	Returns:
		Offset in points.
	"""
	if alignment == Alignment.LEFT:
		return 0.0
	if alignment == Alignment.RIGHT:
		return max(0.0, available - used)
	return max(0.0, (available - used) / 2.0)


class ReportlabPdfWriter:
	"""
	PdfWriter backed by a ReportLab canvas.

	The canvas is created in invariant mode so identical draw calls produce
	identical bytes.
	"""

	def __init__(
		self,
		sink: str | pathlib.Path | None = None,
		metrics: FontMetrics = DEFAULT_METRICS,
	):
		self.metrics = metrics
		self.sink_path = pathlib.Path(sink) if sink is not None else None
		self.buffer = io.BytesIO()
		target = str(self.sink_path) if self.sink_path is not None else self.buffer
		self.pdf = reportlab.pdfgen.canvas.Canvas(target, invariant=1)
		self.page_height = 0.0
		self.pages_written = 0

	def begin_page(self, width: float, height: float) -> None:
		self.pdf.setPageSize((width, height))
		self.page_height = height

	def _draw_line(self, x: float, top: float, text: str, style: TextStyle) -> None:
		resolved = self.metrics.resolve(style)
		self.pdf.setFont(resolved.font_name, resolved.font_size)
		color = parse_hex_color(style.color)
		self.pdf.setFillColorRGB(color[0], color[1], color[2])
		baseline_y = self.page_height - top - resolved.ascent
		self.pdf.drawString(x, baseline_y, text)

	def draw_text(self, x: float, y: float, text: str, style: TextStyle) -> None:
		self._draw_line(x, y, text, style)

	def draw_table_grid(
		self,
		x: float,
		y: float,
		rows: list[list[str]],
		col_widths: list[float],
		style: TextStyle,
		row_heights: list[float] | None = None,
		header_style: TextStyle | None = None,
		cell_colors: list[list[str | None]] | None = None,
	) -> None:
		"""
		Draw table rows as a bordered grid.

		Args:
			x: Left edge.
			y: Top edge.
			rows: Rows of cell text; wrapped lines are separated by newlines.
			col_widths: Column widths.
			style: Body cell style.
			row_heights: Row heights; computed from line counts when omitted.
			header_style: Style of the first row. When given, the first row
				is drawn as a header with a filled background.
			cell_colors: Per-row lists of text color overrides; None entries
				keep the row style's color.
		"""
		if row_heights is None:
			row_heights = []
			for row_index, row in enumerate(rows):
				row_style = header_style if header_style is not None and row_index == 0 else style
				leading = self.metrics.resolve(row_style).leading
				line_count = max(len(cell.split("\n")) for cell in row)
				row_heights.append(line_count * leading + 2.0 * TABLE_CELL_PADDING)

		grid_color = parse_hex_color(COLOR_GRID)
		self.pdf.setLineWidth(TABLE_GRID_WIDTH)
		top = y
		for row_index, row in enumerate(rows):
			row_height = row_heights[row_index]
			is_header = header_style is not None and row_index == 0
			row_style = header_style if is_header else style
			leading = self.metrics.resolve(row_style).leading
			bottom_y = self.page_height - top - row_height
			if is_header:
				fill = parse_hex_color(COLOR_HEADER)
				self.pdf.setFillColorRGB(fill[0], fill[1], fill[2])
				self.pdf.rect(x, bottom_y, sum(col_widths), row_height, stroke=0, fill=1)
			colors = [None] * len(row)
			if cell_colors is not None:
				colors = cell_colors[row_index]
			cell_x = x
			for cell, width, color in zip(row, col_widths, colors):
				self.pdf.setStrokeColorRGB(grid_color[0], grid_color[1], grid_color[2])
				self.pdf.rect(cell_x, bottom_y, width, row_height, stroke=1, fill=0)
				cell_style = row_style
				if color is not None:
					cell_style = dataclasses.replace(row_style, color=color)
				inner_width = width - 2.0 * TABLE_CELL_PADDING
				for line_index, line in enumerate(cell.split("\n")):
					line_width = self.metrics.text_width(line, cell_style)
					offset = compute_align_offset(inner_width, line_width, cell_style.alignment)
					line_top = top + TABLE_CELL_PADDING + line_index * leading
					self._draw_line(cell_x + TABLE_CELL_PADDING + offset, line_top, line, cell_style)
				cell_x += width
			top += row_height

	def end_page(self) -> None:
		self.pdf.showPage()
		self.pages_written += 1

	def finish(self) -> bytes:
		self.pdf.save()
		if self.sink_path is not None:
			return self.sink_path.read_bytes()
		return self.buffer.getvalue()


#============================================
def _call_writer(operation: str, method: typing.Callable, *args, **kwargs):
	"""
	Invoke a writer method, wrapping failures in RenderError.
	"""
	try:
		return method(*args, **kwargs)
	except RenderError:
		raise
	except Exception as error:
		raise RenderError(error, operation) from error


#============================================
def _render_text_fragment(
	writer: PdfWriter,
	fragment: "prep.layout.Fragment",
	geometry: PageGeometry,
	measurer: ReportlabMeasurer,
) -> None:
	block = fragment.block
	content_width = geometry.content_width
	leading = measurer.metrics.resolve(block.style).leading
	top = geometry.margin + fragment.y_offset
	for index, line in enumerate(measurer.wrap(block.text, block.style, content_width)):
		if not line:
			continue
		line_width = measurer.metrics.text_width(line, block.style)
		x = geometry.margin + compute_align_offset(content_width, line_width, block.style.alignment)
		_call_writer("draw_text", writer.draw_text, x, top + index * leading, line, block.style)


#============================================
def _render_table_fragment(
	writer: PdfWriter,
	fragment: "prep.layout.Fragment",
	geometry: PageGeometry,
	measurer: ReportlabMeasurer,
) -> None:
	table = fragment.block
	content_width = geometry.content_width
	widths = prep.measure.column_widths(table, content_width)
	rows: list[list[str]] = []
	row_heights: list[float] = []
	cell_rows = [(table.header, True)] + [(row, False) for row in fragment.body_rows]
	for cells, is_header in cell_rows:
		style = table.header_style if is_header else table.style
		wrapped = []
		for cell, width in zip(cells, widths):
			inner_width = max(1.0, width - 2.0 * TABLE_CELL_PADDING)
			wrapped.append("\n".join(measurer.wrap(cell, style, inner_width)))
		rows.append(wrapped)
		row_heights.append(measurer.measure_row(table, cells, content_width, is_header=is_header))
	colors: list[list[str | None]] = [[None] * table.column_count]
	if fragment.is_table_slice:
		colors.extend(list(table.row_colors(index)) for index in range(fragment.row_start, fragment.row_end))
	_call_writer(
		"draw_table_grid",
		writer.draw_table_grid,
		geometry.margin,
		geometry.margin + fragment.y_offset,
		rows,
		widths,
		table.style,
		row_heights=row_heights,
		header_style=table.header_style,
		cell_colors=colors,
	)


#============================================
def page_number_position(
	label: str,
	geometry: PageGeometry,
	metrics: FontMetrics = DEFAULT_METRICS,
) -> tuple[float, float] | None:
	"""
	Place a page number label in the bottom margin.

	Args:
		label: Label text.
		geometry: Page geometry.
		metrics: Font metrics for the label style.

	Returns:
		(x, y) of the label's top-left corner, or None when the bottom
		margin is shorter than one line.
	"""
	leading = metrics.resolve(PAGE_NUMBER_STYLE).leading
	if geometry.margin < leading:
		return None
	x = geometry.width - geometry.margin - metrics.text_width(label, PAGE_NUMBER_STYLE)
	# centered in the margin, never above the content area's bottom edge
	y = geometry.height - geometry.margin + (geometry.margin - leading) / 2.0
	return (x, y)


#============================================
def render_pages(
	pages: list[PagePlan],
	geometry: PageGeometry,
	writer: PdfWriter | None = None,
	measurer: ReportlabMeasurer | None = None,
	page_numbers: bool = False,
) -> bytes:
	"""
	Render page plans in order and return the finished document bytes.

	Args:
		pages: Page plans from the layout engine.
		geometry: Page geometry used for layout.
		writer: PDF writer; defaults to an in-memory ReportlabPdfWriter.
		measurer: Measurer used to wrap text; must match the layout fonts.
		page_numbers: Draw "Page N of M" in the bottom margin.

	Returns:
		PDF bytes.
	"""
	if measurer is None:
		measurer = ReportlabMeasurer()
	if writer is None:
		writer = _call_writer("open", ReportlabPdfWriter, metrics=measurer.metrics)
	total = len(pages)
	for page in pages:
		_call_writer("begin_page", writer.begin_page, geometry.width, geometry.height)
		for fragment in page.fragments:
			block = fragment.block
			if isinstance(block, prep.content.TableBlock):
				_render_table_fragment(writer, fragment, geometry, measurer)
			elif isinstance(block, (prep.content.HeadingBlock, prep.content.ParagraphBlock)):
				_render_text_fragment(writer, fragment, geometry, measurer)
		if page_numbers:
			label = f"Page {page.index + 1} of {total}"
			position = page_number_position(label, geometry, measurer.metrics)
			if position is not None:
				_call_writer("draw_text", writer.draw_text, position[0], position[1], label, PAGE_NUMBER_STYLE)
		_call_writer("end_page", writer.end_page)
	return _call_writer("finish", writer.finish)


#============================================
def count_pdf_pages(data: bytes) -> int:
	"""
	Count pages in finished PDF bytes.

	Args:
		data: PDF bytes.

	Returns:
		Number of pages.
	"""
	reader = pypdf.PdfReader(io.BytesIO(data))
	return len(reader.pages)
