import math

import numpy as np
import pytest

from spatial_pipeline.panner import StereoPanner, clamp_pan


def test_clamp_pan():
    assert clamp_pan(0.6) == 0.6
    assert clamp_pan(3.0) == 1.0
    assert clamp_pan(-7) == -1.0
    assert clamp_pan(float("nan")) == 0.0


def test_center_mono_is_equal_power():
    left, right = StereoPanner(0.0).gains()
    assert left == pytest.approx(math.sqrt(0.5))
    assert right == pytest.approx(math.sqrt(0.5))
    assert left ** 2 + right ** 2 == pytest.approx(1.0)


def test_right_pan_favors_right_channel():
    left, right = StereoPanner(0.6).gains()
    assert right > left
    assert left ** 2 + right ** 2 == pytest.approx(1.0)


def test_left_pan_favors_left_channel():
    left, right = StereoPanner(-0.6).gains()
    assert left > right


def test_mono_extremes_silence_one_channel():
    samples = np.ones(8, dtype=np.float32)
    hard_right = StereoPanner(1.0).process(samples)
    hard_left = StereoPanner(-1.0).process(samples)
    assert np.allclose(hard_right[:, 0], 0.0, atol=1e-6)
    assert np.allclose(hard_right[:, 1], 1.0)
    assert np.allclose(hard_left[:, 1], 0.0, atol=1e-6)
    assert np.allclose(hard_left[:, 0], 1.0)


def test_output_is_two_channel_float32():
    out = StereoPanner(0.6).process(np.zeros((16, 1), dtype=np.float64))
    assert out.shape == (16, 2)
    assert out.dtype == np.float32
    assert out.flags["C_CONTIGUOUS"]


def test_stereo_center_passes_through():
    samples = np.array([[0.2, -0.4], [0.1, 0.3]], dtype=np.float32)
    out = StereoPanner(0.0).process(samples)
    assert np.allclose(out, samples, atol=1e-6)


def test_stereo_hard_right_folds_left_into_right():
    samples = np.array([[0.2, 0.4]], dtype=np.float32)
    out = StereoPanner(1.0).process(samples)
    assert out[0, 0] == pytest.approx(0.0, abs=1e-6)
    assert out[0, 1] == pytest.approx(0.6)


def test_stereo_hard_left_folds_right_into_left():
    samples = np.array([[0.2, 0.4]], dtype=np.float32)
    out = StereoPanner(-1.0).process(samples)
    assert out[0, 0] == pytest.approx(0.6)
    assert out[0, 1] == pytest.approx(0.0, abs=1e-6)


def test_multichannel_is_downmixed():
    samples = np.ones((4, 6), dtype=np.float32)
    out = StereoPanner(0.0).process(samples)
    assert out.shape == (4, 2)
    assert np.allclose(out, math.sqrt(0.5))
