import numpy as np
import pytest

from pixeltools.models.pixel_buffer import PixelBuffer
from pixeltools.repositories.image_repository import ImageRepository


def _random_buffer(h=5, w=6, seed=11):
    rng = np.random.default_rng(seed)
    return PixelBuffer(rng.integers(0, 256, size=(h, w, 4), dtype=np.uint8))


def test_png_encode_decode_is_lossless():
    buf = _random_buffer()
    data = ImageRepository.encode(buf, "png")
    assert data[:8] == b"\x89PNG\r\n\x1a\n"
    assert np.array_equal(ImageRepository.decode(data).pixels, buf.pixels)


def test_jpeg_drops_alpha():
    buf = _random_buffer()
    decoded = ImageRepository.decode(ImageRepository.encode(buf, ".JPG", quality=95))
    assert decoded.pixels.shape == buf.pixels.shape
    assert (decoded.pixels[..., 3] == 255).all()


def test_webp_encodes():
    data = ImageRepository.encode(_random_buffer(), "webp", quality=50)
    assert data[:4] == b"RIFF" and data[8:12] == b"WEBP"


def test_unknown_format_and_bad_bytes():
    with pytest.raises(ValueError):
        ImageRepository.encode(_random_buffer(), "gif")
    with pytest.raises(ValueError):
        ImageRepository.decode(b"definitely not an image")


def test_save_load_and_iter_dir(tmp_path):
    buf = _random_buffer()
    buf.path = tmp_path / "a.png"
    ImageRepository.save(buf)
    (tmp_path / "notes.txt").write_text("skip me")

    loaded = ImageRepository.load(tmp_path / "a.png")
    assert np.array_equal(loaded.pixels, buf.pixels)

    gallery = ImageRepository().load_dir(tmp_path)
    assert [b.path.name for b in gallery] == ["a.png"]


def test_missing_inputs_raise(tmp_path):
    with pytest.raises(FileNotFoundError):
        ImageRepository.load(tmp_path / "missing.png")
    with pytest.raises(NotADirectoryError):
        ImageRepository().load_dir(tmp_path / "nope")
