"""
CLI entry points for sensor test report generation.
"""

# Standard Library
import argparse
import datetime
import pathlib
import time

# local repo modules
import paginated_report as prep
import paginated_report.config
import paginated_report.errors
import paginated_report.layout
import paginated_report.measure
import paginated_report.pipeline
import paginated_report.render
import paginated_report.report


PageGeometry = prep.config.PageGeometry

DEFAULT_PAGE_SIZE = prep.config.DEFAULT_PAGE_SIZE
DEFAULT_MARGIN = prep.config.DEFAULT_MARGIN
DEFAULT_BLOCK_SPACING = prep.config.DEFAULT_BLOCK_SPACING
GENERATED_AT_FORMAT = "%B %d, %Y at %H:%M:%S"


#============================================
def parse_length(value: str) -> float:
	"""
	Parse a length into points.

	Args:
		value: String like "36", "36pt", "0.5in" or "12.7mm".

	Returns:
		Length in points.
	"""
	text = value.strip().lower()
	try:
		if text.endswith("in"):
			return prep.config.inches_to_points(float(text[:-2]))
		if text.endswith("mm"):
			return prep.config.mm_to_points(float(text[:-2]))
		if text.endswith("pt"):
			return float(text[:-2])
		return float(text)
	except ValueError as error:
		raise argparse.ArgumentTypeError(f"Invalid length: {value}") from error


#============================================
def build_geometry(args: argparse.Namespace) -> PageGeometry:
	"""
	Build page geometry from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		PageGeometry.
	"""
	return PageGeometry.from_page_size(args.page_size, margin=args.margin)


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Render sensor test results to a paginated PDF report.")
	parser.add_argument("input_path", help="Sensor test results JSON file.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	page_group = parser.add_argument_group("Page")
	page_group.add_argument(
		"-s", "--page-size", dest="page_size", choices=sorted(prep.config.PAGE_SIZES),
		default=DEFAULT_PAGE_SIZE, help="Page size.",
	)
	page_group.add_argument(
		"--margin", dest="margin", type=parse_length, default=DEFAULT_MARGIN,
		help="Page margin (points, or with in/mm suffix).",
	)
	page_group.add_argument(
		"--block-spacing", dest="block_spacing", type=parse_length, default=DEFAULT_BLOCK_SPACING,
		help="Vertical gap between blocks.",
	)

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument("-n", "--page-numbers", dest="page_numbers", action="store_true", help="Draw page numbers.")
	behavior_group.add_argument("-N", "--no-page-numbers", dest="page_numbers", action="store_false", help="Omit page numbers.")
	behavior_group.add_argument(
		"--generated-at", dest="generated_at", default=None,
		help="Timestamp text for the report header (defaults to now).",
	)
	behavior_group.add_argument(
		"--stop-before-rendering",
		dest="stop_before_rendering",
		action="store_true",
		help="Stop after layout (print page plans, skip rendering).",
	)

	parser.set_defaults(
		page_numbers=True,
		stop_before_rendering=False,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def print_page_plans(pages: list["prep.layout.PagePlan"]) -> None:
	"""
	Print a one-line summary per page plan.
	"""
	for page in pages:
		kinds = ", ".join(type(fragment.block).__name__ for fragment in page.fragments)
		print(
			f"Page {page.index + 1}: {len(page.fragments)} fragments, "
			f"used {page.used_height:.1f}pt, free {page.free_height:.1f}pt"
			+ (f" [{kinds}]" if kinds else "")
		)


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run the full pipeline from results JSON to PDF.

	Args:
		args: Parsed argparse namespace.
	"""
	print("Sensor report pipeline")
	print(f"Input: {args.input_path}")
	print(f"Output PDF: {args.output_path}")
	if args.manifest_path:
		print(f"Manifest: {args.manifest_path}")
	print(f"Page size: {args.page_size}")
	print(f"Margin: {args.margin:.1f}pt")
	print(f"Page numbers: {args.page_numbers}")
	if args.stop_before_rendering:
		print("Stop before rendering: True")

	start_time = time.perf_counter()
	geometry = build_geometry(args)
	report = prep.report.load_results(pathlib.Path(args.input_path))
	print(f"Results loaded: {len(report.results)}")

	generated_at = args.generated_at
	if generated_at is None:
		generated_at = datetime.datetime.now().strftime(GENERATED_AT_FORMAT)
	blocks = prep.report.build_report_blocks(
		report.results,
		report.total_duration_ms,
		report.device,
		generated_at,
	)
	collect_end = time.perf_counter()

	if args.stop_before_rendering:
		layout = prep.layout.build_pages(
			blocks,
			geometry,
			prep.measure.ReportlabMeasurer(),
			block_spacing=args.block_spacing,
		)
		print_page_plans(layout.pages)
		for warning in layout.warnings:
			print(f"Warning: {warning}")
		print("Stopping before rendering.")
		return

	result = prep.pipeline.generate(
		blocks,
		geometry,
		block_spacing=args.block_spacing,
		page_numbers=args.page_numbers,
		verbose=True,
	)
	output_path = pathlib.Path(args.output_path)
	output_path.write_bytes(result.pdf_bytes)
	print(f"Pages written: {prep.render.count_pdf_pages(result.pdf_bytes)}")
	print(f"Overflow warnings: {len(result.warnings)}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	prep.pipeline.write_manifest(
		pathlib.Path(manifest_path),
		result,
		geometry,
		str(args.input_path),
		block_spacing=args.block_spacing,
	)

	total_time = time.perf_counter() - start_time
	print(
		"Timing: collect={:.2f}s total={:.2f}s".format(
			collect_end - start_time,
			total_time,
		)
	)
	print(f"Manifest written: {manifest_path}")


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	try:
		run_pipeline(args)
	except prep.errors.ReportBuilderError as error:
		print(f"Error: {error}")
		raise SystemExit(1) from error
