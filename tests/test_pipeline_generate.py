import json

import paginated_report.content
import paginated_report.pipeline
import paginated_report.render


TableBlock = paginated_report.content.TableBlock
ParagraphBlock = paginated_report.content.ParagraphBlock
HeadingBlock = paginated_report.content.HeadingBlock


class RowHeightMeasurer:
	"""
	Measurer with preset heights keyed by text or first cell.
	"""

	def __init__(self, heights: dict[str, float]):
		self.heights = heights

	def measure(self, block, available_width: float) -> float:
		return self.heights[block.text]

	def measure_row(self, table, cells, available_width: float, is_header: bool = False) -> float:
		return self.heights[cells[0]]


#============================================
def test_generate_table_scenario(geometry_750) -> None:
	"""
	Header + 2 rows on page one, repeated header + third row on page two.
	"""
	table = TableBlock(header=("H",), rows=(("r1",), ("r2",), ("r3",)))
	measurer = RowHeightMeasurer({"H": 150.0, "r1": 200.0, "r2": 250.0, "r3": 220.0})
	result = paginated_report.pipeline.generate([table], geometry_750, measurer=measurer)
	assert result.page_count == 2
	assert paginated_report.render.count_pdf_pages(result.pdf_bytes) == 2
	slices = [(page.fragments[0].row_start, page.fragments[0].row_end) for page in result.pages]
	assert slices == [(0, 2), (2, 3)]
	assert result.warnings == ()


#============================================
def test_generate_returns_overflow_warnings(geometry_750) -> None:
	"""
	Overflow warnings come back with a complete document.
	"""
	blocks = [HeadingBlock("Report"), ParagraphBlock("Huge")]
	measurer = RowHeightMeasurer({"Report": 30.0, "Huge": 1000.0})
	result = paginated_report.pipeline.generate(blocks, geometry_750, measurer=measurer)
	assert result.page_count == 2
	assert len(result.warnings) == 1
	assert result.warnings[0].block_index == 1
	assert result.pdf_bytes.startswith(b"%PDF")


#============================================
def test_verbose_generation_prints_progress(geometry_750, capsys) -> None:
	"""
	Verbose mode prints stage counts and timings.
	"""
	paginated_report.pipeline.generate([ParagraphBlock("hello")], geometry_750, verbose=True)
	output = capsys.readouterr().out
	assert "Blocks: 1" in output
	assert "Pages planned: 1 (1 fragments)" in output
	assert "Timing:" in output


#============================================
def test_write_manifest(tmp_path, geometry_750) -> None:
	"""
	The manifest lists page plans, fragments and layout settings.
	"""
	table = TableBlock(header=("H",), rows=(("r1",), ("r2",), ("r3",)))
	measurer = RowHeightMeasurer({"H": 150.0, "r1": 200.0, "r2": 250.0, "r3": 220.0})
	result = paginated_report.pipeline.generate([table], geometry_750, measurer=measurer)
	manifest_path = tmp_path / "manifest.json"
	paginated_report.pipeline.write_manifest(manifest_path, result, geometry_750, "unit-test")

	data = json.loads(manifest_path.read_text(encoding="utf-8"))
	assert data["pages"] == 2
	assert data["source"] == "unit-test"
	assert data["layout"]["usable_height"] == 750.0
	first_page = data["page_plans"][0]
	assert first_page["used_height"] == 600.0
	assert first_page["fragments"][0]["kind"] == "TableBlock"
	assert first_page["fragments"][0]["rows"] == [0, 2]
	assert data["warnings"] == []
