import pytest

from yolo_prep.core.build_model import Subset
from yolo_prep.core.review import (
    PixelBox, append_box, append_label_line, box_at, drag_rect, list_review_items,
    read_pixel_boxes, remove_label_line,
)

from conftest import write_image


def test_list_review_items_covers_all_subsets(tmp_path):
    write_image(tmp_path / "images" / "train" / "b.jpg", 8, 8)
    write_image(tmp_path / "images" / "train" / "a.png", 8, 8)
    write_image(tmp_path / "images" / "test" / "z.bmp", 8, 8)
    (tmp_path / "images" / "val").mkdir(parents=True)
    (tmp_path / "images" / "val" / "notes.txt").write_text("skip me")

    items = list_review_items(tmp_path)

    assert [(i.subset, i.image_path.name) for i in items] == [
        (Subset.TRAIN, "a.png"), (Subset.TRAIN, "b.jpg"), (Subset.TEST, "z.bmp"),
    ]
    assert items[0].label_path == tmp_path / "labels" / "train" / "a.txt"
    assert items[2].title == "[test] z.bmp"


def test_read_pixel_boxes_inverts_normalization(tmp_path):
    label = tmp_path / "a.txt"
    label.write_text("0 0.200000 0.300000 0.200000 0.200000\n\nbad line\n1 0.5 0.5 1.0 1.0", encoding="utf-8")

    boxes = read_pixel_boxes(label, 100, 50)

    assert len(boxes) == 2
    first = boxes[0]
    assert first.cls == 0
    assert (first.x, first.y, first.w, first.h) == pytest.approx((10, 10, 20, 10))
    assert first.raw == "0 0.200000 0.300000 0.200000 0.200000"
    assert (boxes[1].x, boxes[1].y, boxes[1].w, boxes[1].h) == pytest.approx((0, 0, 100, 50))


def test_read_pixel_boxes_missing_file(tmp_path):
    assert read_pixel_boxes(tmp_path / "none.txt", 10, 10) == []


def test_box_at_prefers_topmost():
    under = PixelBox(0, 0, 0, 50, 50, "under")
    over = PixelBox(1, 10, 10, 20, 20, "over")
    assert box_at([under, over], 15, 15) is over
    assert box_at([under, over], 45, 45) is under
    assert box_at([under, over], 80, 80) is None


def test_drag_rect_normalizes_direction_and_rejects_clicks():
    assert drag_rect((40, 30), (10, 5)) == (10, 5, 30, 25)
    assert drag_rect((10, 10), (13, 40)) is None
    assert drag_rect((10, 10), (40, 14)) is None


def test_append_box_round_trips(tmp_path):
    label = tmp_path / "labels" / "a.txt"
    line = append_box(label, 3, 10, 10, 20, 10, 100, 50)

    assert line == "3 0.200000 0.300000 0.200000 0.200000"
    (box,) = read_pixel_boxes(label, 100, 50)
    assert (box.x, box.y, box.w, box.h) == pytest.approx((10, 10, 20, 10))


def test_append_adds_separator_only_when_needed(tmp_path):
    label = tmp_path / "a.txt"
    label.write_text("0 0.1 0.1 0.1 0.1", encoding="utf-8")
    append_label_line(label, "1 0.2 0.2 0.2 0.2")
    assert label.read_text(encoding="utf-8") == "0 0.1 0.1 0.1 0.1\n1 0.2 0.2 0.2 0.2"

    empty = tmp_path / "b.txt"
    empty.write_text("", encoding="utf-8")
    append_label_line(empty, "2 0.3 0.3 0.3 0.3")
    assert empty.read_text(encoding="utf-8") == "2 0.3 0.3 0.3 0.3"


def test_remove_only_first_matching_line(tmp_path):
    label = tmp_path / "a.txt"
    label.write_text("0 0.1 0.1 0.1 0.1\n\n1 0.2 0.2 0.2 0.2\n0 0.1 0.1 0.1 0.1\n", encoding="utf-8")

    assert remove_label_line(label, "  0 0.1 0.1 0.1 0.1 ") is True
    assert label.read_text(encoding="utf-8") == "1 0.2 0.2 0.2 0.2\n0 0.1 0.1 0.1 0.1"


def test_remove_without_match(tmp_path):
    label = tmp_path / "a.txt"
    label.write_text("1 0.2 0.2 0.2 0.2", encoding="utf-8")
    assert remove_label_line(label, "0 0.5 0.5 0.5 0.5") is False
    assert label.read_text(encoding="utf-8") == "1 0.2 0.2 0.2 0.2"
    assert remove_label_line(tmp_path / "missing.txt", "x") is False
