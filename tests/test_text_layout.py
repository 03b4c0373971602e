import pytest

import photo_calendar as pcal
import photo_calendar.text_layout


Align = pcal.text_layout.Align
Valign = pcal.text_layout.Valign
Position = pcal.text_layout.Position
Text = pcal.text_layout.Text
Row = pcal.text_layout.Row
Rows = pcal.text_layout.Rows


#============================================
def test_metrics_count_characters_not_bytes() -> None:
	"""
	Umlauts count as one character each.
	"""
	metrics = pcal.text_layout.Metrics()
	assert metrics.get_metrics("Text", "Arial", 20) == (80, 20)
	assert metrics.get_metrics("Text Text Text", "Arial", 20) == (280, 20)
	assert metrics.get_metrics("AÄÀÁÅ OÖÒÓ UÜÙ", "Arial", 20) == (280, 20)


#============================================
def test_round_half_up_away_from_zero() -> None:
	"""
	Halves round away from zero, unlike Python's round.
	"""
	assert pcal.text_layout.round_half_up(2.5) == 3
	assert pcal.text_layout.round_half_up(3.5) == 4
	assert pcal.text_layout.round_half_up(-2.5) == -3
	assert pcal.text_layout.round_half_up(2.4) == 2


#============================================
@pytest.mark.parametrize(
	"align, expected",
	[
		(Align.LEFT, 200),
		(Align.CENTER, 160),
		(Align.RIGHT, 120),
	],
)
def test_position_x(align: Align, expected: int) -> None:
	"""
	Horizontal anchors for a text of width 80.
	"""
	assert Position(200, 100, align, Valign.BOTTOM).get_position_x(80) == expected


#============================================
@pytest.mark.parametrize(
	"valign, expected",
	[
		(Valign.TOP, 124),
		(Valign.MIDDLE, 112),
		(Valign.BOTTOM, 100),
	],
)
def test_position_y_is_baseline(valign: Valign, expected: int) -> None:
	"""
	Vertical anchors give the baseline for a text of height 24.
	"""
	assert Position(200, 100, Align.LEFT, valign).get_position_y(24) == expected


#============================================
def test_position_rejects_unknown_alignment() -> None:
	"""
	Invalid alignment values raise ValueError.
	"""
	with pytest.raises(ValueError):
		Position(0, 0, 7, Valign.BOTTOM).get_position_x(10)
	with pytest.raises(ValueError):
		Position(0, 0, Align.LEFT, "sideways").get_position_y(10)


#============================================
def test_parse_align_by_name() -> None:
	"""
	Alignment names are accepted case insensitive.
	"""
	assert pcal.text_layout.parse_align("center") == Align.CENTER
	assert pcal.text_layout.parse_valign("Top") == Valign.TOP
	assert pcal.text_layout.parse_align(3) == Align.RIGHT


#============================================
def test_text_metrics_right_top() -> None:
	"""
	A single text aligned right and top.
	"""
	metrics = Text("Text", "Arial", 24).get_metrics(200, 100, Align.RIGHT, Valign.TOP)
	assert (metrics.width, metrics.height) == (96, 24)
	assert (metrics.x, metrics.y) == (200 - 96, 100 + 24)
	assert metrics.text == "Text"
	assert metrics.font == "Arial"
	assert metrics.font_size == 24
	assert metrics.angle == 0


#============================================
def test_row_single_text_center() -> None:
	"""
	A row with one text behaves like the text.
	"""
	metrics = Row([Text("Text", "Arial", 20)]).get_metrics(200, 100, Align.CENTER, Valign.BOTTOM)
	assert (metrics.width, metrics.height, metrics.x, metrics.y) == (80, 20, 160, 100)
	assert len(metrics.row) == 1
	assert (metrics.row[0].x, metrics.row[0].y) == (160, 100)


#============================================
def test_row_two_texts_right() -> None:
	"""
	Right aligned rows end at the anchor, words run left to right.
	"""
	row = Row([Text("Text ", "Arial", 20), Text("Text Text Text", "Arial", 20)])
	metrics = row.get_metrics(0, 0, Align.RIGHT, Valign.BOTTOM)
	assert (metrics.width, metrics.height, metrics.x, metrics.y) == (380, 20, -380, 0)
	assert [(word.width, word.x, word.y) for word in metrics.row] == [(100, -380, 0), (280, -280, 0)]


#============================================
def test_row_mixed_font_sizes_share_lowest_baseline() -> None:
	"""
	Every word uses the largest baseline offset of the row.
	"""
	row = Row([Text("Text ", "Arial", 20), Text("Text Text Text", "Arial", 24)])

	top = row.get_metrics(0, 0, Align.CENTER, Valign.TOP)
	assert (top.width, top.height, top.x, top.y) == (436, 24, -218, 24)
	assert [(word.width, word.height, word.x, word.y) for word in top.row] == [
		(100, 20, -218, 24),
		(336, 24, -118, 24),
	]

	middle = row.get_metrics(0, 0, Align.CENTER, Valign.MIDDLE)
	assert middle.y == 12
	assert [word.y for word in middle.row] == [12, 12]


#============================================
def test_row_three_texts_left() -> None:
	"""
	Three texts with different sizes placed side by side.
	"""
	row = Row([
		Text("Text ", "Arial", 20),
		Text("Text Text Text ", "Arial", 24),
		Text("AÄÀÁÅ OÖÒÓ UÜÙ", "Arial", 16),
	])
	metrics = row.get_metrics(200, 100, Align.LEFT, Valign.BOTTOM)
	assert (metrics.width, metrics.height, metrics.x, metrics.y) == (684, 24, 200, 100)
	assert [word.x for word in metrics.row] == [200, 300, 660]
	assert [word.width for word in metrics.row] == [100, 360, 224]


#============================================
def test_rows_stack_with_distance() -> None:
	"""
	Rows advance by row height plus distance.
	"""
	rows = Rows(
		[Row([Text("Text", "Arial", 20)]), Row([Text("Text Text", "Arial", 20)])],
		row_distance=10,
	)
	metrics = rows.get_metrics(200, 300, Align.LEFT, Valign.BOTTOM)
	assert (metrics.width, metrics.height, metrics.x, metrics.y) == (180, 50, 200, 300)
	assert [(row.x, row.y) for row in metrics.rows] == [(200, 300), (200, 330)]
	assert metrics.rows[1].row[0].y == 330


#============================================
def test_rows_single_row() -> None:
	"""
	One row: no distance is added.
	"""
	rows = Rows([Row([Text("Text", "Arial", 20)])], row_distance=10)
	metrics = rows.get_metrics(0, 0, Align.LEFT, Valign.BOTTOM)
	assert (metrics.width, metrics.height) == (80, 20)


#============================================
def test_build_rows_splits_on_separator() -> None:
	"""
	The row separator starts a new row.
	"""
	rows = pcal.text_layout.build_rows("Some<br>nice text", "Arial", 10, row_distance=5)
	metrics = rows.get_metrics(100, 50, Align.CENTER, Valign.BOTTOM)
	assert [row.row[0].text for row in metrics.rows] == ["Some", "nice text"]
	assert [row.x for row in metrics.rows] == [80, 55]
	assert [row.y for row in metrics.rows] == [50, 65]
	assert metrics.height == 25


#============================================
def test_row_baseline_never_above_top_edge() -> None:
	"""
	A row anchored above the image keeps its baseline at 0.
	"""
	metrics = Row([Text("ab", "f", 10)]).get_metrics(0, -50)
	assert metrics.row[0].y == 0
	metrics = Row([Text("ab", "f", 10)]).get_metrics(0, -50, Align.LEFT, Valign.TOP)
	assert metrics.row[0].y == 0
	metrics = Row([Text("ab", "f", 10)]).get_metrics(0, -5, Align.LEFT, Valign.TOP)
	assert metrics.row[0].y == 5
