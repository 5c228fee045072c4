"""
Document generation: content model, layout and rendering in one call.
"""

# Standard Library
import dataclasses
import json
import pathlib
import time
import typing

# local repo modules
import paginated_report as prep
import paginated_report.config
import paginated_report.content
import paginated_report.errors
import paginated_report.layout
import paginated_report.measure
import paginated_report.render


PageGeometry = prep.config.PageGeometry
PagePlan = prep.layout.PagePlan
ContentOverflowWarning = prep.errors.ContentOverflowWarning

DEFAULT_BLOCK_SPACING = prep.config.DEFAULT_BLOCK_SPACING


@dataclasses.dataclass(frozen=True)
class GenerationResult:
	pdf_bytes: bytes
	pages: tuple[PagePlan, ...]
	warnings: tuple[ContentOverflowWarning, ...]

	@property
	def page_count(self) -> int:
		return len(self.pages)


#============================================
def generate(
	records,
	geometry: PageGeometry,
	measurer: "prep.measure.MeasurementProvider | None" = None,
	writer: "prep.render.PdfWriter | None" = None,
	block_spacing: float = DEFAULT_BLOCK_SPACING,
	page_numbers: bool = False,
	should_cancel: typing.Callable[[], bool] | None = None,
	verbose: bool = False,
) -> GenerationResult:
	"""
	Generate a paginated PDF from content blocks.

	Args:
		records: Content blocks produced by an upstream adapter.
		geometry: Page geometry.
		measurer: Measurement provider for layout; ReportLab metrics by default.
		writer: PDF writer; an in-memory ReportLab writer by default.
		block_spacing: Vertical gap between consecutive fragments on a page.
		page_numbers: Draw page numbers in the bottom margin.
		should_cancel: Optional callable polled after every page commit.
		verbose: Print stage progress and timings.

	Returns:
		GenerationResult with PDF bytes, page plans and overflow warnings.
	"""
	start_time = time.perf_counter()
	document = prep.content.Document.from_records(records, geometry)
	if verbose:
		print(f"Blocks: {len(document.blocks)}")

	text_measurer = prep.measure.ReportlabMeasurer()
	if measurer is None:
		measurer = text_measurer

	layout_start = time.perf_counter()
	layout = prep.layout.build_pages(
		document.blocks,
		document.geometry,
		measurer,
		block_spacing=block_spacing,
		should_cancel=should_cancel,
	)
	layout_end = time.perf_counter()
	if verbose:
		fragment_total = sum(len(page.fragments) for page in layout.pages)
		print(f"Pages planned: {len(layout.pages)} ({fragment_total} fragments)")
		for warning in layout.warnings:
			print(f"Warning: {warning}")

	render_start = time.perf_counter()
	pdf_bytes = prep.render.render_pages(
		layout.pages,
		document.geometry,
		writer=writer,
		measurer=text_measurer,
		page_numbers=page_numbers,
	)
	render_end = time.perf_counter()
	if verbose:
		print(f"PDF bytes: {len(pdf_bytes)}")
		print(
			"Timing: layout={:.2f}s render={:.2f}s total={:.2f}s".format(
				layout_end - layout_start,
				render_end - render_start,
				render_end - start_time,
			)
		)

	return GenerationResult(
		pdf_bytes=pdf_bytes,
		pages=tuple(layout.pages),
		warnings=tuple(layout.warnings),
	)


#============================================
def describe_fragment(fragment: "prep.layout.Fragment") -> dict:
	"""
	Summarize a fragment for the manifest.

	Args:
		fragment: Placed fragment.

	Returns:
		JSON-ready dictionary.
	"""
	data = {
		"block_index": fragment.block_index,
		"kind": type(fragment.block).__name__,
		"y_offset": round(fragment.y_offset, 3),
		"height": round(fragment.height, 3),
	}
	if isinstance(fragment.block, prep.content.TableBlock):
		data["rows"] = [fragment.row_start or 0, fragment.row_end or 0]
	return data


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	result: GenerationResult,
	geometry: PageGeometry,
	source: str,
	block_spacing: float = DEFAULT_BLOCK_SPACING,
) -> None:
	"""
	Write a manifest JSON file describing the generated pages.

	Args:
		manifest_path: Output path.
		result: Generation result.
		geometry: Page geometry.
		source: Input description.
		block_spacing: Block spacing used for layout.
	"""
	data = {
		"source": source,
		"pages": result.page_count,
		"pdf_bytes": len(result.pdf_bytes),
		"page_plans": [
			{
				"index": page.index,
				"used_height": round(page.used_height, 3),
				"free_height": round(page.free_height, 3),
				"fragments": [describe_fragment(fragment) for fragment in page.fragments],
			}
			for page in result.pages
		],
		"warnings": [str(warning) for warning in result.warnings],
		"layout": {
			"page_width": geometry.width,
			"page_height": geometry.height,
			"margin": geometry.margin,
			"content_width": geometry.content_width,
			"usable_height": geometry.usable_height,
			"block_spacing": block_spacing,
		},
		"fonts": {
			"regular": prep.config.DEFAULT_FONT_REGULAR,
			"bold": prep.config.DEFAULT_FONT_BOLD,
		},
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
