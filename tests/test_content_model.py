import dataclasses

import pytest

import paginated_report.config
import paginated_report.content
import paginated_report.errors


InvalidContentError = paginated_report.errors.InvalidContentError
ContentBuilder = paginated_report.content.ContentBuilder


#============================================
def test_builder_appends_blocks_in_order() -> None:
	"""
	Each builder call appends exactly one block, in call order.
	"""
	blocks = (
		ContentBuilder()
		.add_heading("Report", level=1)
		.add_paragraph("Intro")
		.add_table(["Name", "Status"], [["Gyro", "PASS"]])
		.add_spacer(12.0)
		.blocks()
	)
	kinds = [type(block).__name__ for block in blocks]
	assert kinds == ["HeadingBlock", "ParagraphBlock", "TableBlock", "SpacerBlock"]
	assert blocks[2].rows == (("Gyro", "PASS"),)


#============================================
def test_table_row_cell_count_must_match_header() -> None:
	"""
	A row with a different cell count than the header is rejected.
	"""
	builder = ContentBuilder()
	with pytest.raises(InvalidContentError):
		builder.add_table(["Name", "Status"], [["Gyro", "PASS"], ["Light"]])
	assert builder.blocks() == ()


#============================================
def test_table_requires_header_cells() -> None:
	"""
	A table without header cells is rejected.
	"""
	with pytest.raises(InvalidContentError):
		paginated_report.content.TableBlock(header=())


#============================================
def test_table_column_weights_validated() -> None:
	"""
	Column weights must be positive and one per column.
	"""
	with pytest.raises(InvalidContentError):
		ContentBuilder().add_table(["a", "b"], [], column_weights=[1])
	with pytest.raises(InvalidContentError):
		ContentBuilder().add_table(["a", "b"], [], column_weights=[1, 0])


#============================================
def test_table_cell_colors_validated() -> None:
	"""
	Cell colors match the row shape and use "#RRGGBB" strings.
	"""
	table = paginated_report.content.TableBlock(
		header=("a", "b"), rows=(("1", "2"),), cell_colors=[[None, "#4CAF50"]],
	)
	assert table.cell_colors == ((None, "#4CAF50"),)
	assert table.row_colors(0) == (None, "#4CAF50")
	assert paginated_report.content.TableBlock(header=("a",), rows=(("1",),)).row_colors(0) == (None,)
	with pytest.raises(InvalidContentError):
		ContentBuilder().add_table(["a", "b"], [["1", "2"]], cell_colors=[[None]])
	with pytest.raises(InvalidContentError):
		ContentBuilder().add_table(["a"], [["1"], ["2"]], cell_colors=[[None]])
	with pytest.raises(InvalidContentError):
		ContentBuilder().add_table(["a"], [["1"]], cell_colors=[["green"]])


#============================================
def test_heading_level_and_spacer_height_validated() -> None:
	"""
	Heading levels are 1-3 and spacer heights are non-negative.
	"""
	with pytest.raises(InvalidContentError):
		ContentBuilder().add_heading("Too deep", level=4)
	with pytest.raises(InvalidContentError):
		ContentBuilder().add_spacer(-1.0)


#============================================
def test_blocks_are_immutable() -> None:
	"""
	Blocks cannot be modified once built.
	"""
	block = paginated_report.content.ParagraphBlock("text")
	with pytest.raises(dataclasses.FrozenInstanceError):
		block.text = "changed"
	table = paginated_report.content.TableBlock(header=["a"], rows=[["1"]])
	assert isinstance(table.header, tuple)
	assert isinstance(table.rows[0], tuple)


#============================================
def test_heading_style_follows_level() -> None:
	"""
	Level 1 headings are centered titles, deeper levels are left aligned.
	"""
	title = paginated_report.content.HeadingBlock("Report", level=1)
	section = paginated_report.content.HeadingBlock("Summary", level=2)
	assert title.style.size_class == paginated_report.content.SizeClass.TITLE
	assert title.style.alignment == paginated_report.content.Alignment.CENTER
	assert section.style.size_class == paginated_report.content.SizeClass.HEADING
	assert section.style.weight == paginated_report.content.Weight.BOLD


#============================================
def test_document_from_records_rejects_non_blocks() -> None:
	"""
	Records must already be content blocks.
	"""
	geometry = paginated_report.config.PageGeometry.from_page_size("letter")
	with pytest.raises(InvalidContentError):
		paginated_report.content.Document.from_records(["not a block"], geometry)
	document = ContentBuilder().add_paragraph("ok").build(geometry)
	assert len(document.blocks) == 1
	assert document.geometry is geometry


#============================================
def test_page_geometry_validation() -> None:
	"""
	Margins must leave a content area; named sizes resolve to points.
	"""
	with pytest.raises(InvalidContentError):
		paginated_report.config.PageGeometry(width=200.0, height=200.0, margin=100.0)
	with pytest.raises(InvalidContentError):
		paginated_report.config.PageGeometry.from_page_size("tabloid")
	a4 = paginated_report.config.PageGeometry.from_page_size("A4", margin=20.0)
	assert a4.content_width == pytest.approx(a4.width - 40.0)
	assert a4.usable_height == pytest.approx(a4.height - 40.0)


#============================================
def test_unit_conversions() -> None:
	"""
	Inches and millimeters convert to points.
	"""
	assert paginated_report.config.inches_to_points(0.5) == pytest.approx(36.0)
	assert paginated_report.config.mm_to_points(25.4) == pytest.approx(72.0)
