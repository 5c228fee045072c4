import random

import pytest

import paginated_report.config
import paginated_report.content
import paginated_report.errors
import paginated_report.measure


TextStyle = paginated_report.content.TextStyle
SizeClass = paginated_report.content.SizeClass
Weight = paginated_report.content.Weight

SAMPLE_TEXT = (
	"The accelerometer reported stable readings across all three axes while "
	"the gyroscope drifted slightly during the second calibration pass. "
	"Magnetometer values stayed within the expected range for an indoor test."
)


#============================================
def test_wrap_text_respects_newlines() -> None:
	"""
	Explicit newlines always start a new line, blank lines are kept.
	"""
	lines = paginated_report.measure.wrap_text("one\n\ntwo", "Helvetica", 11.0, 500.0)
	assert lines == ["one", "", "two"]


#============================================
def test_wrap_text_keeps_long_word_on_own_line() -> None:
	"""
	A word wider than the line is not split.
	"""
	word = "Supercalifragilisticexpialidocious"
	lines = paginated_report.measure.wrap_text(f"a {word} b", "Helvetica", 11.0, 40.0)
	assert lines == ["a", word, "b"]


#============================================
def test_wrapped_lines_fit_width() -> None:
	"""
	Every wrapped line made of normal words fits the requested width.
	"""
	metrics = paginated_report.measure.DEFAULT_METRICS
	style = paginated_report.content.BODY_STYLE
	measurer = paginated_report.measure.ReportlabMeasurer()
	for line in measurer.wrap(SAMPLE_TEXT, style, 150.0):
		assert metrics.text_width(line, style) <= 150.0


#============================================
def test_paragraph_height_is_monotonic_in_width() -> None:
	"""
	Widening the available width never increases a paragraph's height.
	"""
	measurer = paginated_report.measure.ReportlabMeasurer()
	block = paginated_report.content.ParagraphBlock(SAMPLE_TEXT)
	rng = random.Random(1234)
	widths = sorted(rng.uniform(20.0, 700.0) for _ in range(200))
	heights = [measurer.measure(block, width) for width in widths]
	for narrower, wider in zip(heights, heights[1:]):
		assert wider <= narrower


#============================================
def test_measurement_is_deterministic() -> None:
	"""
	Repeated measurement of the same block gives the same height.
	"""
	measurer = paginated_report.measure.ReportlabMeasurer()
	block = paginated_report.content.HeadingBlock("Detailed Test Results", level=2)
	assert measurer.measure(block, 300.0) == measurer.measure(block, 300.0)


#============================================
def test_paragraph_height_is_lines_times_leading() -> None:
	"""
	Text height is the wrapped line count times the style leading.
	"""
	measurer = paginated_report.measure.ReportlabMeasurer()
	style = paginated_report.content.BODY_STYLE
	leading = paginated_report.config.FONT_SIZES["body"] * paginated_report.config.LINE_SPACING
	block = paginated_report.content.ParagraphBlock("first\nsecond\nthird")
	assert measurer.measure(block, 500.0) == pytest.approx(3 * leading)
	assert measurer.metrics.resolve(style).leading == pytest.approx(leading)


#============================================
def test_spacer_measures_its_height() -> None:
	"""
	Spacers occupy exactly their configured height.
	"""
	measurer = paginated_report.measure.ReportlabMeasurer()
	assert measurer.measure(paginated_report.content.SpacerBlock(17.5), 100.0) == 17.5


#============================================
def test_table_height_is_sum_of_rows() -> None:
	"""
	A table measures as its header row plus every body row, each padded.
	"""
	measurer = paginated_report.measure.ReportlabMeasurer()
	table = paginated_report.content.TableBlock(
		header=("Sensor", "Status"),
		rows=(("Gyroscope", "PASS"), ("Light", "FAIL")),
	)
	header = measurer.measure_row(table, table.header, 400.0, is_header=True)
	rows = [measurer.measure_row(table, row, 400.0) for row in table.rows]
	assert measurer.measure(table, 400.0) == pytest.approx(header + sum(rows))
	leading = paginated_report.config.FONT_SIZES["small"] * paginated_report.config.LINE_SPACING
	assert rows[0] == pytest.approx(leading + 2.0 * paginated_report.config.TABLE_CELL_PADDING)


#============================================
def test_column_widths_follow_weights() -> None:
	"""
	Column widths split the available width by weight.
	"""
	table = paginated_report.content.TableBlock(header=("a", "b"), column_weights=(1, 3))
	assert paginated_report.measure.column_widths(table, 400.0) == [100.0, 300.0]
	even = paginated_report.content.TableBlock(header=("a", "b", "c", "d"))
	assert paginated_report.measure.column_widths(even, 400.0) == [100.0] * 4


#============================================
def test_unrecognized_style_raises() -> None:
	"""
	Styles outside the closed descriptor cannot be measured.
	"""
	measurer = paginated_report.measure.ReportlabMeasurer()
	block = paginated_report.content.ParagraphBlock("text", TextStyle(size_class="huge"))
	with pytest.raises(paginated_report.errors.MeasurementError):
		measurer.measure(block, 300.0)


#============================================
def test_non_positive_width_raises() -> None:
	"""
	Measuring at zero width is an error.
	"""
	measurer = paginated_report.measure.ReportlabMeasurer()
	with pytest.raises(paginated_report.errors.MeasurementError):
		measurer.measure(paginated_report.content.ParagraphBlock("text"), 0.0)


#============================================
def test_font_metrics_cover_every_style() -> None:
	"""
	The shared metrics table resolves every size class and weight.
	"""
	metrics = paginated_report.measure.DEFAULT_METRICS
	for size_class in SizeClass:
		for weight in Weight:
			resolved = metrics.resolve(TextStyle(size_class=size_class, weight=weight))
			assert resolved.font_size == paginated_report.config.FONT_SIZES[size_class.value]
			assert 0.0 < resolved.ascent < resolved.font_size
