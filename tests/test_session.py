import pytest

from constants import UNTITLED_NAME
from errors import FormatError
from models import Size
from session import CallbackHost, EditSession, SessionHost


class FakeHost(SessionHost):
    def __init__(self, canvas_size=(200, 200), save_path=None):
        self.canvas_size = canvas_size
        self.save_path = save_path
        self.save_requests = 0

    def get_canvas_size(self):
        return self.canvas_size

    def confirm_new_save_path(self):
        self.save_requests += 1
        if self.save_path is None:
            return False, ""
        return True, str(self.save_path)


@pytest.fixture
def session(black_image):
    s = EditSession(FakeHost(canvas_size=(40, 80)))
    s.set_image(str(black_image))
    return s


def draw_triangle(session):
    for p in [(0, 0), (20, 0), (20, 40)]:
        session.add_vertex(p)


def test_add_vertex_stores_pixel_coordinates(session):
    pixel = session.add_vertex((20, 40))
    assert pixel == (10, 10)
    assert session.editing_mask.pixel_vertices == ((10, 10),)
    assert session.editing_mask.display_vertices == ((20, 40),)


def test_save_current_mask_requires_three_vertices(session):
    session.add_vertex((0, 0))
    session.add_vertex((20, 0))
    assert session.save_current_mask() is False
    assert session.masks == []

    session.add_vertex((20, 40))
    editing = session.editing_mask
    assert session.save_current_mask() is True
    assert session.masks == [editing]
    assert not editing.is_editing
    assert session.editing_mask is not editing
    assert session.editing_mask.is_editing
    assert len(session.editing_mask) == 0


def test_clear_current_mask(session):
    draw_triangle(session)
    session.clear_current_mask()
    assert len(session.editing_mask) == 0
    assert session.save_current_mask() is False


def test_all_masks_includes_editing_mask(session):
    draw_triangle(session)
    session.save_current_mask()
    session.add_vertex((1, 1))
    assert session.all_masks == session.masks + [session.editing_mask]


def test_save_and_load_round_trip(session, tmp_path):
    draw_triangle(session)
    session.save_current_mask()
    session.add_vertex((5, 5))  # незавершена маска не зберігається
    path = tmp_path / "set.csv"

    session.save_mask_set(str(path))

    assert path.read_text(encoding="utf-8") == "0 0,10 0,10 10\n"
    other = EditSession(FakeHost(canvas_size=(20, 20)))
    other.set_image(session.image_file_path)
    masks = other.load_mask_set(str(path))
    assert [m.pixel_vertices for m in masks] == [((0, 0), (10, 0), (10, 10))]
    assert masks[0].display_vertices == ((0, 0), (10, 0), (10, 10))
    assert other.mask_file_path == str(path)


def test_failed_load_keeps_state(session, tmp_path):
    draw_triangle(session)
    session.save_current_mask()
    kept = list(session.masks)
    bad = tmp_path / "bad.csv"
    bad.write_text("0 0,1 0,1 1\n10,20 5\n", encoding="utf-8")

    with pytest.raises(FormatError):
        session.load_mask_set(str(bad))

    assert session.masks == kept
    assert session.mask_file_path == ""


def test_overwrite_without_file_asks_for_path(black_image, tmp_path):
    host = FakeHost(save_path=tmp_path / "new.csv")
    session = EditSession(host)
    session.set_image(str(black_image))
    draw_triangle(session)
    session.save_current_mask()

    assert session.overwrite_mask_set() is True
    assert host.save_requests == 1
    assert session.mask_file_path == str(tmp_path / "new.csv")

    # Файл уже існує: перезапис без питань
    assert session.overwrite_mask_set() is True
    assert host.save_requests == 1


def test_declined_save_writes_nothing(session, tmp_path):
    draw_triangle(session)
    session.save_current_mask()
    assert session.save_new_mask_set() is False
    assert list(tmp_path.glob("*.csv")) == []


def test_set_image_refreshes_mask_image_size(tmp_path):
    from conftest import make_image

    small = make_image(tmp_path / "small.png", 20, 20)
    big = make_image(tmp_path / "big.png", 40, 40)
    session = EditSession(FakeHost(canvas_size=(40, 40)))
    session.set_image(str(small))
    draw_triangle(session)
    session.save_current_mask()
    mask = session.masks[0]

    session.set_image(str(big))

    assert mask.image_size == Size(40, 40)
    assert session.editing_mask.image_size == Size(40, 40)
    assert mask.pixel_vertices == ((0, 0), (10, 0), (10, 20))
    assert mask.display_vertices == ((0, 0), (10, 0), (10, 20))


def test_set_image_missing_path_is_noop(session, tmp_path):
    before = session.image_size
    assert session.set_image(str(tmp_path / "missing.png")) is False
    assert session.image_size == before


def test_update_canvas_size_reprojects(session):
    draw_triangle(session)
    session.save_current_mask()
    session.host.canvas_size = (80, 160)

    session.update_canvas_size()

    assert session.masks[0].display_vertices == ((0, 0), (40, 0), (40, 80))
    assert session.masks[0].pixel_vertices == ((0, 0), (10, 0), (10, 10))


def test_no_image_gives_neutral_projection():
    session = EditSession(FakeHost(canvas_size=(100, 100)))
    assert session.add_vertex((50, 50)) == (0.0, 0.0)
    assert session.editing_mask.display_vertices == ((0, 0),)


def test_window_title(session, tmp_path):
    assert session.window_title.startswith(UNTITLED_NAME)
    session.save_mask_set(str(tmp_path / "roof.csv"))
    assert session.window_title.startswith("roof.csv")


def test_callback_host():
    host = CallbackHost(lambda: (10, 20))
    assert host.get_canvas_size() == (10, 20)
    assert host.confirm_new_save_path() == (False, "")
    session = EditSession(host)
    assert session.canvas_size == Size(10, 20)


def test_degenerate_rows_never_become_frozen_masks(session, tmp_path):
    path = tmp_path / "set.csv"
    path.write_text("1 1,2 2\n0 0,5 0,5 5\n", encoding="utf-8")

    masks = session.load_mask_set(str(path))
    session.save_mask_set(str(path))

    assert [len(m) for m in masks] == [3]
    assert path.read_text(encoding="utf-8") == "0 0,5 0,5 5\n"
