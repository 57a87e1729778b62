import pytest
from PIL import Image as PILImage

from eis.image import ColorFormat, Image

RED, GREEN, BLUE, WHITE = b"\xff\x00\x00", b"\x00\xff\x00", b"\x00\x00\xff", b"\xff\xff\xff"
TOP_ROW = RED + GREEN
BOTTOM_ROW = BLUE + WHITE


def make_image() -> Image:
    return Image(TOP_ROW + BOTTOM_ROW, 2, 2, 3)


def test_color_format_values():
    assert ColorFormat(0) is ColorFormat.NONE
    assert ColorFormat(8) is ColorFormat.RGB
    with pytest.raises(ValueError):
        ColorFormat(9)


def test_wrong_data_length_rejected():
    with pytest.raises(ValueError):
        Image(b"\x00" * 5, 2, 2, 3)


def test_invalid_channel_count_rejected():
    with pytest.raises(ValueError):
        Image(b"", 0, 0, 5)


def test_new_image_has_no_path():
    assert make_image().path == ""


def test_get_pixel_reads_row_major():
    img = make_image()
    assert img.get_pixel(0, 0) == (255.0, 0.0, 0.0)
    assert img.get_pixel(1, 0) == (0.0, 255.0, 0.0)
    assert img.get_pixel(0, 1) == (0.0, 0.0, 255.0)


def test_get_pixel_out_of_range():
    img = make_image()
    with pytest.raises(IndexError):
        img.get_pixel(2, 0)
    with pytest.raises(IndexError):
        img.get_pixel(0, 2)


def test_indexing_and_length():
    img = make_image()
    assert img[1] == 0
    assert img[3] == 0
    assert img[4] == 255
    assert len(img) == 12


def test_copy_is_independent_and_equal():
    img = make_image()
    img.path = "x/pic.png"
    dup = img.copy()
    assert dup.data == img.data
    assert (dup.width, dup.height, dup.channels, dup.path) == (2, 2, 3, "x/pic.png")
    dup.width = 7
    assert img.width == 2


def test_png_round_trip_without_flip(tmp_path):
    img = make_image()
    target = tmp_path / "out.png"
    assert img.save(target) == str(target)
    loaded = Image.load(target, flip_vertically=False)
    assert loaded.data == img.data
    assert (loaded.width, loaded.height, loaded.channels) == (2, 2, 3)
    assert loaded.path == str(target)


def test_load_flips_by_default(tmp_path):
    target = tmp_path / "out.png"
    make_image().save(target)
    loaded = Image.load(target)
    assert loaded.data == BOTTOM_ROW + TOP_ROW


def test_load_keeps_alpha(tmp_path):
    target = tmp_path / "alpha.png"
    PILImage.new("RGBA", (3, 1), (10, 20, 30, 40)).save(target)
    loaded = Image.load(target)
    assert loaded.channels == 4
    assert loaded.data == bytes([10, 20, 30, 40]) * 3


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        Image.load(tmp_path / "missing.png")


@pytest.mark.parametrize("extension", [".jpg", ".bmp", ".tga"])
def test_other_formats_keep_dimensions(tmp_path, extension):
    img = Image(b"\x80" * (4 * 3 * 3), 4, 3, 3)
    target = tmp_path / f"out{extension}"
    img.save(target)
    loaded = Image.load(target, flip_vertically=False)
    assert (loaded.width, loaded.height) == (4, 3)


def test_lossless_formats_round_trip(tmp_path):
    img = make_image()
    for extension in (".bmp", ".tga"):
        target = tmp_path / f"out{extension}"
        img.save(target)
        assert Image.load(target, flip_vertically=False).data == img.data


def test_unknown_extension_rejected(tmp_path):
    with pytest.raises(ValueError):
        make_image().save(tmp_path / "out.gif")
    with pytest.raises(ValueError):
        make_image().save(tmp_path / "noextension")


def test_save_without_name_uses_file_name_of_path(tmp_path, monkeypatch):
    source_dir = tmp_path / "assets"
    source_dir.mkdir()
    make_image().save(source_dir / "pic.png")
    loaded = Image.load((source_dir / "pic.png").as_posix())
    out_dir = tmp_path / "out"
    out_dir.mkdir()
    monkeypatch.chdir(out_dir)
    assert loaded.save() == "pic.png"
    assert (out_dir / "pic.png").exists()


def test_save_without_name_or_path_rejected():
    with pytest.raises(ValueError):
        make_image().save()


def test_resize_uniform_image():
    img = Image(bytes([200, 100, 50]) * 4, 2, 2, 3)
    bigger = img.resize(4, 4)
    assert (bigger.width, bigger.height, bigger.channels) == (4, 4, 3)
    assert bigger.data == bytes([200, 100, 50]) * 16


def test_resize_adds_alpha_channel():
    img = Image(bytes([200, 100, 50]) * 4, 2, 2, 3)
    converted = img.resize(2, 2, 4)
    assert converted.channels == 4
    assert converted.data == bytes([200, 100, 50, 255]) * 4


def test_resize_rejects_bad_size():
    with pytest.raises(ValueError):
        make_image().resize(0, 2)