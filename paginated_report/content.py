"""
Content model: typed, immutable document blocks.
"""

# Standard Library
import dataclasses
import enum

# local repo modules
import paginated_report as prep
import paginated_report.config
import paginated_report.errors


InvalidContentError = prep.errors.InvalidContentError
PageGeometry = prep.config.PageGeometry


class SizeClass(enum.Enum):
	TITLE = "title"
	HEADING = "heading"
	SUBHEADING = "subheading"
	BODY = "body"
	SMALL = "small"


class Weight(enum.Enum):
	REGULAR = "regular"
	BOLD = "bold"


class Alignment(enum.Enum):
	LEFT = "left"
	CENTER = "center"
	RIGHT = "right"


@dataclasses.dataclass(frozen=True)
class TextStyle:
	size_class: SizeClass = SizeClass.BODY
	weight: Weight = Weight.REGULAR
	alignment: Alignment = Alignment.LEFT
	color: str = prep.config.COLOR_BLACK


BODY_STYLE = TextStyle()
TABLE_HEADER_STYLE = TextStyle(
	size_class=SizeClass.SMALL,
	weight=Weight.BOLD,
	alignment=Alignment.CENTER,
	color=prep.config.COLOR_WHITE,
)
TABLE_BODY_STYLE = TextStyle(size_class=SizeClass.SMALL, alignment=Alignment.CENTER)

HEADING_SIZE_CLASSES = {
	1: SizeClass.TITLE,
	2: SizeClass.HEADING,
	3: SizeClass.SUBHEADING,
}


#============================================
def heading_style(level: int, color: str = prep.config.COLOR_BLACK) -> TextStyle:
	"""
	Get the text style for a heading level.

	Args:
		level: Heading level, 1 to 3.
		color: Text color.

	Returns:
		TextStyle for the heading.
	"""
	if level not in HEADING_SIZE_CLASSES:
		raise InvalidContentError(f"Heading level must be 1-3, got {level}")
	alignment = Alignment.CENTER if level == 1 else Alignment.LEFT
	return TextStyle(
		size_class=HEADING_SIZE_CLASSES[level],
		weight=Weight.BOLD,
		alignment=alignment,
		color=color,
	)


@dataclasses.dataclass(frozen=True)
class HeadingBlock:
	text: str
	level: int = 1
	style: TextStyle | None = None

	def __post_init__(self) -> None:
		if not isinstance(self.text, str):
			raise InvalidContentError("Heading text must be a string")
		if self.style is None:
			object.__setattr__(self, "style", heading_style(self.level))
		elif self.level not in HEADING_SIZE_CLASSES:
			raise InvalidContentError(f"Heading level must be 1-3, got {self.level}")


@dataclasses.dataclass(frozen=True)
class ParagraphBlock:
	text: str
	style: TextStyle = BODY_STYLE

	def __post_init__(self) -> None:
		if not isinstance(self.text, str):
			raise InvalidContentError("Paragraph text must be a string")


@dataclasses.dataclass(frozen=True)
class SpacerBlock:
	height: float

	def __post_init__(self) -> None:
		if self.height < 0:
			raise InvalidContentError(f"Spacer height must be non-negative, got {self.height}")


@dataclasses.dataclass(frozen=True)
class TableBlock:
	header: tuple[str, ...]
	rows: tuple[tuple[str, ...], ...] = ()
	column_weights: tuple[float, ...] | None = None
	style: TextStyle = TABLE_BODY_STYLE
	header_style: TextStyle = TABLE_HEADER_STYLE
	# per-cell text color overrides, same shape as rows; None keeps style.color
	cell_colors: tuple[tuple[str | None, ...], ...] | None = None

	def __post_init__(self) -> None:
		header = tuple(str(cell) for cell in self.header)
		if not header:
			raise InvalidContentError("Table header must have at least one cell")
		rows = []
		for index, row in enumerate(self.rows):
			cells = tuple(str(cell) for cell in row)
			if len(cells) != len(header):
				raise InvalidContentError(
					f"Table row {index} has {len(cells)} cells, header has {len(header)}"
				)
			rows.append(cells)
		object.__setattr__(self, "header", header)
		object.__setattr__(self, "rows", tuple(rows))
		if self.column_weights is not None:
			weights = tuple(float(weight) for weight in self.column_weights)
			if len(weights) != len(header):
				raise InvalidContentError(
					f"Table has {len(header)} columns but {len(weights)} column weights"
				)
			if any(weight <= 0 for weight in weights):
				raise InvalidContentError("Table column weights must be positive")
			object.__setattr__(self, "column_weights", weights)
		if self.cell_colors is not None:
			object.__setattr__(self, "cell_colors", self._normalize_cell_colors(len(header), len(rows)))

	def _normalize_cell_colors(self, column_count: int, row_count: int) -> tuple:
		color_rows = tuple(tuple(row) for row in self.cell_colors)
		if len(color_rows) != row_count:
			raise InvalidContentError(
				f"Table has {row_count} rows but {len(color_rows)} cell color rows"
			)
		for index, colors in enumerate(color_rows):
			if len(colors) != column_count:
				raise InvalidContentError(
					f"Cell color row {index} has {len(colors)} entries, header has {column_count}"
				)
			for color in colors:
				if color is not None and not prep.config.is_hex_color(color):
					raise InvalidContentError(f"Invalid cell color in row {index}: {color!r}")
		return color_rows

	@property
	def column_count(self) -> int:
		return len(self.header)

	def row_colors(self, row_index: int) -> tuple[str | None, ...]:
		"""
		Color overrides of one body row, all None when the table has none.
		"""
		if self.cell_colors is None:
			return (None,) * len(self.header)
		return self.cell_colors[row_index]


Block = HeadingBlock | ParagraphBlock | TableBlock | SpacerBlock
BLOCK_TYPES = (HeadingBlock, ParagraphBlock, TableBlock, SpacerBlock)


#============================================
def validate_blocks(records) -> tuple:
	"""
	Check that every record is a content block.

	Args:
		records: Iterable of blocks from an upstream adapter.

	Returns:
		Tuple of blocks in input order.
	"""
	blocks = tuple(records)
	for index, block in enumerate(blocks):
		if not isinstance(block, BLOCK_TYPES):
			raise InvalidContentError(
				f"Record {index} is not a content block: {type(block).__name__}"
			)
	return blocks


@dataclasses.dataclass(frozen=True)
class Document:
	blocks: tuple
	geometry: PageGeometry

	@classmethod
	def from_records(cls, records, geometry: PageGeometry) -> "Document":
		return cls(blocks=validate_blocks(records), geometry=geometry)


class ContentBuilder:
	"""
	Append-only builder for a document's block sequence.

	The builder knows nothing about page size; geometry is attached only
	when build() creates the Document.
	"""

	def __init__(self):
		self._blocks: list = []

	def add_heading(self, text: str, level: int = 1, color: str = prep.config.COLOR_BLACK) -> "ContentBuilder":
		self._blocks.append(HeadingBlock(text=text, level=level, style=heading_style(level, color)))
		return self

	def add_paragraph(self, text: str, style: TextStyle = BODY_STYLE) -> "ContentBuilder":
		self._blocks.append(ParagraphBlock(text=text, style=style))
		return self

	def add_table(
		self,
		header_row: list[str],
		rows: list[list[str]],
		column_weights: list[float] | None = None,
		cell_colors: list[list[str | None]] | None = None,
	) -> "ContentBuilder":
		weights = tuple(column_weights) if column_weights is not None else None
		colors = tuple(tuple(row) for row in cell_colors) if cell_colors is not None else None
		table = TableBlock(
			header=tuple(header_row),
			rows=tuple(tuple(row) for row in rows),
			column_weights=weights,
			cell_colors=colors,
		)
		self._blocks.append(table)
		return self

	def add_spacer(self, height: float) -> "ContentBuilder":
		self._blocks.append(SpacerBlock(height=height))
		return self

	def blocks(self) -> tuple:
		return tuple(self._blocks)

	def build(self, geometry: PageGeometry) -> Document:
		return Document(blocks=self.blocks(), geometry=geometry)
