import numpy as np
import pytest

oiio = pytest.importorskip("OpenImageIO")

from kuwahara.core import CancellationToken, InvalidImageError, InvalidParameterError, Region
from kuwahara.oiio import OiioAdapter
from kuwahara.processing import KuwaharaFilter, kuwahara_filter
from kuwahara.processing.executor import ProcessingExecutor
from kuwahara.services import Settings


def _imagebuf(pixels):
    height, width, nchannels = pixels.shape
    buf = oiio.ImageBuf(oiio.ImageSpec(width, height, nchannels, oiio.UINT8))
    assert buf.set_pixels(buf.roi, pixels)
    return buf


@pytest.fixture
def settings(tmp_path):
    path = tmp_path / "settings.ini"
    path.write_text("[kuwahara]\ntile_size = 8\nmax_workers = 2\n")
    return Settings(path)


@pytest.fixture
def pixels(rng):
    return rng.integers(0, 256, size=(20, 30, 4), dtype=np.uint8)


def test_array_round_trip(pixels):
    buf = OiioAdapter.from_array(pixels)
    np.testing.assert_array_equal(OiioAdapter.to_array(buf), pixels)


def test_two_channel_buffer_is_rejected():
    with pytest.raises(InvalidImageError):
        OiioAdapter.to_array(_imagebuf(np.zeros((4, 4, 2), dtype=np.uint8)))


def test_roi_to_region():
    spec = oiio.ImageSpec(30, 20, 4, oiio.UINT8)
    assert OiioAdapter.roi_to_region(oiio.ROI(), spec) == Region(0, 0, 30, 20)
    assert OiioAdapter.roi_to_region(oiio.ROI(5, 12, 3, 40), spec) == Region(5, 3, 12, 20)


def test_executor_matches_array_filter(pixels, settings):
    result = ProcessingExecutor(settings).execute(_imagebuf(pixels), KuwaharaFilter())

    assert result is not None
    np.testing.assert_array_equal(OiioAdapter.to_array(result), kuwahara_filter(pixels, 7))


def test_executor_roi_copies_outside_pixels(pixels, settings):
    kuwahara = KuwaharaFilter()
    kuwahara.set_parameter("radius", 5)
    kuwahara.set_parameter("use_rgb_channels", False)

    result = ProcessingExecutor(settings).execute(_imagebuf(pixels), kuwahara, roi=oiio.ROI(10, 20, 5, 15))
    out = OiioAdapter.to_array(result)

    expected = kuwahara_filter(pixels, 5, use_rgb_channels=False)
    np.testing.assert_array_equal(out[5:15, 10:20], expected[5:15, 10:20])
    np.testing.assert_array_equal(out[:5], pixels[:5])
    np.testing.assert_array_equal(out[:, :10], pixels[:, :10])


def test_executor_returns_none_when_cancelled(pixels, settings):
    token = CancellationToken()
    token.cancel()
    assert ProcessingExecutor(settings).execute(_imagebuf(pixels), KuwaharaFilter(), cancel_token=token) is None


def test_executor_rejects_invalid_filter(pixels, settings):
    kuwahara = KuwaharaFilter()
    kuwahara.set_parameter("radius", 500)
    with pytest.raises(InvalidParameterError):
        ProcessingExecutor(settings).execute(_imagebuf(pixels), kuwahara)


def test_disabled_filter_returns_input(pixels, settings):
    buf = _imagebuf(pixels)
    kuwahara = KuwaharaFilter()
    kuwahara.enabled = False
    assert ProcessingExecutor(settings).execute(buf, kuwahara) is buf
