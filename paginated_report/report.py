"""
Sensor test report: translate test result records into content blocks.
"""

# Standard Library
import dataclasses
import json
import pathlib

# local repo modules
import paginated_report as prep
import paginated_report.config
import paginated_report.content
import paginated_report.errors


InvalidContentError = prep.errors.InvalidContentError
TextStyle = prep.content.TextStyle
SizeClass = prep.content.SizeClass
Alignment = prep.content.Alignment

REPORT_TITLE = "Sensor Test Report"
REPORT_FOOTER = "Generated by Senson"

# sensor framework accuracy levels
ACCURACY_NAMES = {
	3: "High",
	2: "Medium",
	1: "Low",
	0: "Unreliable",
}
ACCURACY_MEDIUM = 2
SAMPLE_VALUES_SHOWN = 3
UNKNOWN_VALUE = "Unknown"

# success rate thresholds for the summary color, in percent
RATE_GOOD = 80.0
RATE_FAIR = 50.0

CAPTION_STYLE = TextStyle(
	size_class=SizeClass.SMALL,
	alignment=Alignment.CENTER,
	color=prep.config.COLOR_GRAY,
)
FOOTER_SPACING = 20.0
SECTION_SPACING = 10.0


@dataclasses.dataclass(frozen=True)
class SensorTestResult:
	sensor_name: str
	sensor_type: str = "Unknown"
	vendor: str = "Unknown"
	working: bool = False
	error_message: str | None = None
	sample_data: tuple[float, ...] = ()
	duration_ms: int = 0
	accuracy: int = 0

	@property
	def status(self) -> str:
		if not self.working:
			return "FAIL"
		if self.accuracy >= ACCURACY_MEDIUM:
			return "PASS"
		return "PASS (Low Accuracy)"

	@property
	def pass_fail(self) -> str:
		return "PASS" if self.working else "FAIL"

	@property
	def duration_text(self) -> str:
		return format_short_duration(self.duration_ms)

	@property
	def accuracy_text(self) -> str:
		return ACCURACY_NAMES.get(self.accuracy, "Unknown")

	@property
	def sample_data_text(self) -> str:
		if not self.sample_data:
			return "No data"
		shown = ", ".join(f"{value:.2f}" for value in self.sample_data[:SAMPLE_VALUES_SHOWN])
		if len(self.sample_data) > SAMPLE_VALUES_SHOWN:
			shown += "..."
		return shown

	@property
	def details_text(self) -> str:
		if self.working:
			return f"Sample: {self.sample_data_text}\nAccuracy: {self.accuracy_text}"
		return f"Error: {self.error_message or 'Unknown error'}"


@dataclasses.dataclass(frozen=True)
class SensorReport:
	results: tuple[SensorTestResult, ...]
	total_duration_ms: int
	device: dict[str, str]


#============================================
def format_duration(milliseconds: int) -> str:
	"""
	Format a duration for display.

	Args:
		milliseconds: Duration in milliseconds.

	Returns:
		String like "850ms", "12.5s" or "2m 5s".
	"""
	if milliseconds < 1000:
		return f"{milliseconds}ms"
	if milliseconds < 60000:
		return f"{milliseconds / 1000.0:.1f}s"
	minutes = milliseconds // 60000
	seconds = (milliseconds % 60000) // 1000
	return f"{minutes}m {seconds}s"


#============================================
def format_short_duration(milliseconds: int) -> str:
	"""
	Format a single test duration: "850ms" or "12.5s", never minutes.
	"""
	if milliseconds < 1000:
		return f"{milliseconds}ms"
	return f"{milliseconds / 1000.0:.1f}s"


#============================================
def status_color(result: SensorTestResult) -> str:
	return prep.config.COLOR_SUCCESS if result.working else prep.config.COLOR_ERROR


#============================================
def success_rate_color(rate: float) -> str:
	"""
	Summary color for a success rate percentage.
	"""
	if rate >= RATE_GOOD:
		return prep.config.COLOR_SUCCESS
	if rate >= RATE_FAIR:
		return prep.config.COLOR_WARNING
	return prep.config.COLOR_ERROR


#============================================
def success_rate(results) -> float:
	"""
	Percentage of working sensors, 0.0 when there are no results.
	"""
	results = list(results)
	if not results:
		return 0.0
	working = sum(1 for result in results if result.working)
	return working * 100.0 / len(results)


#============================================
def parse_result(entry: dict, index: int) -> SensorTestResult:
	"""
	Parse one result record.

	Args:
		entry: JSON object for a single sensor test.
		index: Position in the input, for error messages.

	Returns:
		SensorTestResult.
	"""
	if not isinstance(entry, dict):
		raise InvalidContentError(f"Result {index} must be an object")
	name = entry.get("sensor_name")
	if not isinstance(name, str) or not name.strip():
		raise InvalidContentError(f"Result {index} has no sensor_name")
	try:
		sample_data = tuple(float(value) for value in entry.get("sample_data") or ())
		duration_ms = int(entry.get("duration_ms", 0))
		accuracy = int(entry.get("accuracy", 0))
	except (TypeError, ValueError) as error:
		raise InvalidContentError(f"Result {index} ({name}) has a malformed field: {error}") from error
	return SensorTestResult(
		sensor_name=name,
		sensor_type=str(entry.get("sensor_type") or "Unknown"),
		vendor=str(entry.get("vendor") or "Unknown"),
		working=bool(entry.get("working", False)),
		error_message=entry.get("error_message"),
		sample_data=sample_data,
		duration_ms=duration_ms,
		accuracy=accuracy,
	)


#============================================
def load_results(path: pathlib.Path) -> SensorReport:
	"""
	Load sensor test results from a JSON file.

	The file holds either a bare list of results or an object with
	"results", optional "total_duration_ms" and optional "device" keys.

	Args:
		path: JSON file path.

	Returns:
		SensorReport.
	"""
	try:
		with path.open("r", encoding="utf-8") as handle:
			payload = json.load(handle)
	except json.JSONDecodeError as error:
		raise InvalidContentError(f"Invalid JSON in {path}: {error}") from error
	except OSError as error:
		raise InvalidContentError(f"Cannot read {path}: {error}") from error

	if isinstance(payload, list):
		payload = {"results": payload}
	if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
		raise InvalidContentError(f"{path} must contain a list of results")

	results = tuple(parse_result(entry, index) for index, entry in enumerate(payload["results"]))
	total_duration_ms = payload.get("total_duration_ms")
	if total_duration_ms is None:
		total_duration_ms = sum(result.duration_ms for result in results)
	try:
		total_duration_ms = int(total_duration_ms)
	except (TypeError, ValueError) as error:
		raise InvalidContentError(f"{path}: malformed total_duration_ms: {error}") from error
	device = payload.get("device") or {}
	if not isinstance(device, dict):
		raise InvalidContentError(f"{path}: device must be an object")
	return SensorReport(
		results=results,
		total_duration_ms=total_duration_ms,
		device={str(key): device_value_text(value) for key, value in device.items()},
	)


#============================================
def device_value_text(value) -> str:
	"""
	Display text of a device property; missing values read "Unknown".
	"""
	if value is None:
		return UNKNOWN_VALUE
	text = str(value)
	if not text.strip():
		return UNKNOWN_VALUE
	return text


#============================================
def build_report_blocks(
	results,
	total_duration_ms: int,
	device_info: dict[str, str],
	generated_at: str,
) -> tuple:
	"""
	Build the content blocks of a sensor test report.

	Args:
		results: Sensor test results in display order.
		total_duration_ms: Total test run duration.
		device_info: Device property names and values.
		generated_at: Generation timestamp text.

	Returns:
		Tuple of content blocks.
	"""
	results = list(results)
	header_color = prep.config.COLOR_HEADER
	builder = prep.content.ContentBuilder()
	builder.add_heading(REPORT_TITLE, level=1, color=header_color)
	builder.add_paragraph(f"Generated on {generated_at}", CAPTION_STYLE)
	builder.add_spacer(SECTION_SPACING)

	if device_info:
		builder.add_heading("Device Information", level=2, color=header_color)
		device_rows = [[key, device_value_text(value)] for key, value in device_info.items()]
		builder.add_table(["Property", "Value"], device_rows, column_weights=[1, 2])
		builder.add_spacer(SECTION_SPACING)

	working = sum(1 for result in results if result.working)
	rate = success_rate(results)
	builder.add_heading("Test Summary", level=2, color=header_color)
	builder.add_table(
		["Total Sensors", "Working", "Failed", "Success Rate"],
		[[
			str(len(results)),
			str(working),
			str(len(results) - working),
			f"{rate:.1f}%",
		]],
		cell_colors=[[
			None,
			prep.config.COLOR_SUCCESS,
			prep.config.COLOR_ERROR,
			success_rate_color(rate),
		]],
	)
	builder.add_paragraph(f"Test Duration: {format_duration(total_duration_ms)}")
	builder.add_spacer(SECTION_SPACING)

	builder.add_heading("Detailed Test Results", level=2, color=header_color)
	detail_rows = [
		[
			result.sensor_name,
			result.sensor_type,
			result.pass_fail,
			result.duration_text,
			result.details_text,
		]
		for result in results
	]
	detail_colors = [
		[None, None, status_color(result), None, None]
		for result in results
	]
	builder.add_table(
		["Sensor Name", "Type", "Status", "Duration", "Details"],
		detail_rows,
		column_weights=[2, 1, 1, 1, 3],
		cell_colors=detail_colors,
	)

	builder.add_spacer(FOOTER_SPACING)
	builder.add_paragraph(REPORT_FOOTER, CAPTION_STYLE)
	return builder.blocks()
