"""
Layout engine: greedy single-pass pagination of content blocks.

Blocks are placed in document order onto fixed-size pages. The policies
applied while placing them:

- A block fits when its height (plus block spacing, if the page already has
  content) is less than or equal to the remaining free height.
- A block taller than a full page is placed alone on its own page and a
  ContentOverflowWarning is recorded.
- Tables are placed in slices of whole body rows. Every slice starts with
  the header row, and a slice always carries at least one body row, so a
  table never starts a page with a bare header.
- Headings stay with the block that follows them: when that block has to
  start a new page, trailing headings move with it, as long as the page
  they leave keeps at least one fragment.
"""

# Standard Library
import dataclasses
import typing

# local repo modules
import paginated_report as prep
import paginated_report.config
import paginated_report.content
import paginated_report.errors
import paginated_report.measure


PageGeometry = prep.config.PageGeometry
ContentOverflowWarning = prep.errors.ContentOverflowWarning
GenerationCancelled = prep.errors.GenerationCancelled
HeadingBlock = prep.content.HeadingBlock
TableBlock = prep.content.TableBlock

DEFAULT_BLOCK_SPACING = prep.config.DEFAULT_BLOCK_SPACING


@dataclasses.dataclass
class Fragment:
	block: "prep.content.Block"
	block_index: int
	page_index: int
	y_offset: float
	height: float
	# half-open range of table body rows; the header is always included
	row_start: int | None = None
	row_end: int | None = None

	@property
	def is_table_slice(self) -> bool:
		return self.row_start is not None

	@property
	def body_rows(self) -> tuple[tuple[str, ...], ...]:
		if not self.is_table_slice:
			return ()
		return self.block.rows[self.row_start:self.row_end]


@dataclasses.dataclass
class PagePlan:
	index: int
	usable_height: float
	block_spacing: float = DEFAULT_BLOCK_SPACING
	fragments: list[Fragment] = dataclasses.field(default_factory=list)

	@property
	def used_height(self) -> float:
		if not self.fragments:
			return 0.0
		heights = sum(fragment.height for fragment in self.fragments)
		return heights + self.block_spacing * (len(self.fragments) - 1)

	@property
	def free_height(self) -> float:
		return self.usable_height - self.used_height

	@property
	def is_empty(self) -> bool:
		return not self.fragments


@dataclasses.dataclass
class LayoutResult:
	pages: list[PagePlan]
	warnings: list[ContentOverflowWarning]


class _PageCursor:
	"""
	Mutable state of one build_pages() call.
	"""

	def __init__(
		self,
		usable_height: float,
		block_spacing: float,
		should_cancel: typing.Callable[[], bool] | None,
	):
		self.usable_height = usable_height
		self.block_spacing = block_spacing
		self.should_cancel = should_cancel
		self.pages: list[PagePlan] = []
		self.warnings: list[ContentOverflowWarning] = []
		self.current = self._new_page()

	def _new_page(self) -> PagePlan:
		return PagePlan(
			index=len(self.pages),
			usable_height=self.usable_height,
			block_spacing=self.block_spacing,
		)

	def needed(self, height: float) -> float:
		if self.current.is_empty:
			return height
		return height + self.block_spacing

	def fits(self, height: float) -> bool:
		return self.needed(height) <= self.current.free_height

	def place(self, block, block_index: int, height: float, row_start=None, row_end=None) -> Fragment:
		y_offset = 0.0
		if not self.current.is_empty:
			y_offset = self.current.used_height + self.block_spacing
		fragment = Fragment(
			block=block,
			block_index=block_index,
			page_index=self.current.index,
			y_offset=y_offset,
			height=height,
			row_start=row_start,
			row_end=row_end,
		)
		self.current.fragments.append(fragment)
		return fragment

	def commit(self) -> None:
		self.pages.append(self.current)
		self.current = self._new_page()
		if self.should_cancel is not None and self.should_cancel():
			raise GenerationCancelled(len(self.pages))

	def break_page(self, next_height: float) -> None:
		"""
		Commit the current page, carrying trailing headings to the next one.

		Headings are carried only when they and the next unit of content
		fit together on a fresh page.
		"""
		fragments = self.current.fragments
		count = 0
		while count < len(fragments) - 1 and isinstance(fragments[-1 - count].block, HeadingBlock):
			count += 1
		if count > 0:
			carried_height = sum(fragment.height for fragment in fragments[-count:])
			carried_height += self.block_spacing * count
			if carried_height + next_height > self.usable_height:
				count = 0
		carried = fragments[len(fragments) - count:]
		del fragments[len(fragments) - count:]
		self.commit()
		for fragment in carried:
			self.place(fragment.block, fragment.block_index, fragment.height)

	def place_oversized(self, block, block_index: int, height: float, row_start=None, row_end=None) -> None:
		if not self.current.is_empty:
			self.commit()
		self.place(block, block_index, height, row_start, row_end)
		self.warnings.append(
			ContentOverflowWarning(
				block_index=block_index,
				height=height,
				usable_height=self.usable_height,
				page_index=self.current.index,
			)
		)
		self.commit()

	def finish(self) -> LayoutResult:
		if not self.current.is_empty or not self.pages:
			self.pages.append(self.current)
		return LayoutResult(pages=self.pages, warnings=self.warnings)


#============================================
def _place_unit(cursor: _PageCursor, block, block_index: int, height: float) -> None:
	"""
	Place a block that cannot be split.
	"""
	if height > cursor.usable_height:
		cursor.place_oversized(block, block_index, height)
		return
	if not cursor.fits(height):
		cursor.break_page(height)
	cursor.place(block, block_index, height)


#============================================
def _place_table(
	cursor: _PageCursor,
	table: TableBlock,
	block_index: int,
	content_width: float,
	measurer: "prep.measure.MeasurementProvider",
) -> None:
	"""
	Place a table in slices of whole rows, repeating the header per slice.
	"""
	header_height = measurer.measure_row(table, table.header, content_width, is_header=True)
	row_heights = [measurer.measure_row(table, row, content_width) for row in table.rows]
	if not row_heights:
		_place_unit(cursor, table, block_index, header_height)
		return

	row_count = len(row_heights)
	index = 0
	while index < row_count:
		# minimum slice: header plus one body row
		slice_height = header_height + row_heights[index]
		if slice_height > cursor.usable_height:
			cursor.place_oversized(table, block_index, slice_height, index, index + 1)
			index += 1
			continue
		if not cursor.fits(slice_height):
			# only the first slice can meet a partly filled page
			cursor.break_page(slice_height)
		start = index
		index += 1
		while index < row_count and cursor.fits(slice_height + row_heights[index]):
			slice_height += row_heights[index]
			index += 1
		cursor.place(table, block_index, slice_height, start, index)
		if index < row_count:
			cursor.commit()


#============================================
def build_pages(
	blocks,
	geometry: PageGeometry,
	measurer: "prep.measure.MeasurementProvider",
	block_spacing: float = DEFAULT_BLOCK_SPACING,
	should_cancel: typing.Callable[[], bool] | None = None,
) -> LayoutResult:
	"""
	Lay out blocks onto pages.

	Args:
		blocks: Content blocks in document order.
		geometry: Page geometry.
		measurer: Measurement provider.
		block_spacing: Vertical gap between consecutive fragments on a page.
		should_cancel: Optional callable polled after every page commit.

	Returns:
		LayoutResult with page plans and overflow warnings.
	"""
	cursor = _PageCursor(geometry.usable_height, block_spacing, should_cancel)
	content_width = geometry.content_width
	for block_index, block in enumerate(blocks):
		if isinstance(block, TableBlock):
			_place_table(cursor, block, block_index, content_width, measurer)
			continue
		height = measurer.measure(block, content_width)
		_place_unit(cursor, block, block_index, height)
	return cursor.finish()
