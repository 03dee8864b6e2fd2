"""Tests for the genderage adapter: preprocessing, softmax and output sniffing."""

import numpy as np
import pytest
from conftest import FakeSession
from PIL import Image

from photo_curator.errors import ConfigurationError, InferenceError
from photo_curator.inference.genderage import (
    GenderAgePredictor,
    interpret_outputs,
    preprocess,
    softmax,
)


def test_softmax_equal_logits():
    np.testing.assert_allclose(softmax([2.0, 2.0]), [0.5, 0.5])


def test_softmax_zero_logits():
    probs = softmax([0.0, 0.0])
    assert probs[0] == probs[1]
    assert probs[0] > 0


def test_softmax_large_logits_stay_finite():
    probs = softmax([1000.0, 1001.0])
    assert np.all(np.isfinite(probs))
    assert probs.sum() == pytest.approx(1.0)
    assert probs[1] > probs[0]


def test_softmax_empty():
    assert softmax([]).size == 0


def test_interpret_gender_logits_and_scalar_age():
    outputs = [np.array([[0.0, 2.0]], dtype=np.float32), np.array([31.0], dtype=np.float32)]
    estimate = interpret_outputs(outputs)
    assert estimate.female_probability == pytest.approx(np.exp(2) / (1 + np.exp(2)))
    assert estimate.age == pytest.approx(31.0)


def test_interpret_regression_output_uses_first_element_as_age():
    estimate = interpret_outputs([np.array([[42.0, 0.1, 0.9]], dtype=np.float32)])
    assert estimate.age == pytest.approx(42.0)
    assert estimate.female_probability == 0.0


def test_interpret_scalar_shapes():
    assert interpret_outputs([np.array([[27.5]])]).age == pytest.approx(27.5)
    assert interpret_outputs([np.float32(19.0)]).age == pytest.approx(19.0)


def test_interpret_unknown_layout_defaults_to_zero():
    estimate = interpret_outputs([np.zeros((2, 2), dtype=np.float32)])
    assert estimate.female_probability == 0.0
    assert estimate.age == 0.0
    assert interpret_outputs([]).age == 0.0


def test_interpret_ignores_non_numeric_outputs():
    # ZipMap exports return a list of {class: probability} dicts
    estimate = interpret_outputs([np.array([33.0]), [{0: 0.2, 1: 0.8}]])
    assert estimate.age == pytest.approx(33.0)
    assert estimate.female_probability == 0.0

    estimate = interpret_outputs([np.array(["male", "female"])])
    assert estimate.female_probability == 0.0
    assert estimate.age == 0.0


def test_predict_with_non_numeric_output():
    session = FakeSession(outputs=[[{0: 0.2, 1: 0.8}]])
    estimate = GenderAgePredictor(session=session).predict(Image.new("RGB", (8, 8)))
    assert estimate.female_probability == 0.0
    assert estimate.age == 0.0


def test_interpret_negative_age_clamped():
    assert interpret_outputs([np.array([-3.0])]).age == 0.0


def test_preprocess_layout_and_range():
    image = Image.new("RGB", (40, 20), (255, 0, 0))
    tensor = preprocess(image, (112, 112))
    assert tensor.shape == (1, 3, 112, 112)
    assert tensor.dtype == np.float32
    np.testing.assert_allclose(tensor[0, 0], 1.0)
    np.testing.assert_allclose(tensor[0, 1], 0.0)
    np.testing.assert_allclose(tensor[0, 2], 0.0)


def test_preprocess_non_square_input_size():
    tensor = preprocess(Image.new("L", (10, 10), 128), (64, 96))
    assert tensor.shape == (1, 3, 96, 64)
    np.testing.assert_allclose(tensor, 128 / 255.0, atol=1e-6)


def test_predict_feeds_first_input():
    session = FakeSession(outputs=[np.array([[1.0, 1.0]]), np.array([25.0])])
    predictor = GenderAgePredictor(session=session)
    estimate = predictor.predict(Image.new("RGB", (50, 50), (10, 20, 30)))
    assert estimate.female_probability == pytest.approx(0.5)
    assert estimate.age == pytest.approx(25.0)
    assert list(session.feeds[0]) == ["data"]
    assert session.feeds[0]["data"].shape == (1, 3, 112, 112)


def test_predict_wraps_engine_errors():
    predictor = GenderAgePredictor(session=FakeSession(error=RuntimeError("bad input")))
    with pytest.raises(InferenceError):
        predictor.predict(Image.new("RGB", (8, 8)))


def test_missing_model_raises_configuration_error(tmp_path):
    with pytest.raises(ConfigurationError) as exc_info:
        GenderAgePredictor(model_path=tmp_path / "missing.onnx")
    assert exc_info.value.model_path == tmp_path / "missing.onnx"
