import pytest

from codec import (decode, encode, encode_mask, format_coordinate, read_mask_file,
                   read_mask_rows, write_mask_file)
from errors import FormatError
from models import Mask, Size


def test_format_coordinate():
    assert format_coordinate(88.0) == "88"
    assert format_coordinate(120.5) == "120.5"
    assert format_coordinate(-3) == "-3"
    assert "," not in format_coordinate(1234567.125)


def test_encode_one_line_per_mask_in_order():
    masks = [Mask([(120.5, 88), (300, 88), (300, 240)]), Mask([(0, 0), (1, 0), (1, 1)])]
    assert encode(masks) == ["120.5 88,300 88,300 240", "0 0,1 0,1 1"]


def test_round_trip_preserves_pixel_vertices():
    vertices = [(0.1, 1 / 3), (12345.678, 2 / 7), (1e-7, 99999.99999)]
    mask = Mask(vertices, Size(640, 480), Size(320, 240))

    decoded = decode(encode([mask]), mask.image_size, mask.canvas_size)

    assert len(decoded) == 1
    assert decoded[0].pixel_vertices == mask.pixel_vertices
    assert decoded[0].canvas_size == Size(320, 240)


def test_decode_builds_display_projection():
    masks = decode(["10 10,20 10,20 20"], Size(100, 100), Size(200, 200))
    assert masks[0].display_vertices == ((20, 20), (40, 20), (40, 40))
    assert not masks[0].is_editing


def test_decode_skips_blank_lines():
    masks = decode(["", "0 0,1 0,1 1", "   ", "\t", "2 2,3 2,3 3", ""])
    assert len(masks) == 2


def test_decode_tolerates_extra_whitespace():
    masks = decode(["  0 0 , 1   0,1 1  "])
    assert masks[0].pixel_vertices == ((0, 0), (1, 0), (1, 1))


def test_missing_coordinate_reports_line():
    with pytest.raises(FormatError) as excinfo:
        decode(["0 0,1 0,1 1", "10,20 5"])
    assert excinfo.value.line == "10,20 5"
    assert excinfo.value.line_number == 2
    assert "10,20 5" in str(excinfo.value)


@pytest.mark.parametrize("line", ["a b,1 1,2 2", "1 2 3", "1 2,,3 4", ",", "1.5e 2"])
def test_malformed_lines(line):
    with pytest.raises(FormatError):
        decode([line])


def test_file_round_trip(tmp_path):
    path = tmp_path / "masks.csv"
    masks = [Mask([(1.25, 2), (3, 4.75), (5, 6)]), Mask([(7, 8), (9, 10), (11, 12), (13, 14)])]

    write_mask_file(path, masks)

    assert path.read_text(encoding="utf-8") == "1.25 2,3 4.75,5 6\n7 8,9 10,11 12,13 14\n"
    loaded = read_mask_file(path)
    assert [m.pixel_vertices for m in loaded] == [m.pixel_vertices for m in masks]


def test_read_mask_rows_keeps_tokens(tmp_path):
    path = tmp_path / "masks.csv"
    path.write_text("0 0,10 0,10 10\r\n\r\n5 5,6 6,7 5\r\n", encoding="utf-8")
    assert read_mask_rows(path) == [["0 0", "10 0", "10 10"], ["5 5", "6 6", "7 5"]]


def test_encode_accepts_plain_vertex_lists():
    assert encode_mask([(1, 2), (3, 4), (5, 6)]) == "1 2,3 4,5 6"


@pytest.mark.parametrize("token", ["nan 0", "0 inf", "-inf 5", "1_0 0", "NaN 1", "0 -Infinity"])
def test_non_plain_numbers_rejected(token):
    with pytest.raises(FormatError) as excinfo:
        decode([f"{token},10 0,10 10"])
    assert excinfo.value.line_number == 1


def test_degenerate_rows_are_not_loaded():
    masks = decode(["1 1,2 2", "0 0,5 0,5 5", "7 7"])
    assert [m.pixel_vertices for m in masks] == [((0, 0), (5, 0), (5, 5))]
    assert all(m.is_valid_geometry for m in masks)


def test_degenerate_masks_are_not_written(tmp_path):
    path = tmp_path / "masks.csv"
    write_mask_file(path, [Mask([(1, 1), (2, 2)]), Mask([(0, 0), (5, 0), (5, 5)])])
    assert path.read_text(encoding="utf-8") == "0 0,5 0,5 5\n"
