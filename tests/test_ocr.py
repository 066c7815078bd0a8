"""
Tests for the OCR boundary.

The real pix2tex model is never loaded; MockOCREngine stands in for it.
"""

import sys

import pytest
from PIL import Image

from calcsolver.input import EquationTextParser, MockOCREngine, OCREngine
from calcsolver.input.ocr import estimate_confidence, load_image
from calcsolver.models import EquationType
from calcsolver.utils.errors import OCRError


class TestMockOCREngine:
    """Test the mock engine and its hand-off to the parser."""

    def test_wide_image_reads_quadratic(self):
        """Test that a wide image yields the quadratic sample."""
        result = MockOCREngine().image_to_text(Image.new("RGB", (200, 50), "white"))

        assert result.text == MockOCREngine.WIDE_TEXT
        assert result.confidence == 0.95

        parsed = EquationTextParser().parse(result.text)
        assert parsed.equation_type == EquationType.QUADRATIC
        assert parsed.final_answer == "x1 = 3, x2 = 2"

    def test_tall_image_reads_system(self):
        """Test that a tall image yields the system sample."""
        result = MockOCREngine().image_to_text(Image.new("RGB", (50, 200), "white"))

        parsed = EquationTextParser().parse(result.text)
        assert parsed.equation_type == EquationType.LINEAR_SYSTEM
        assert parsed.final_answer == "x = 2, y = 1"

    def test_is_loaded(self):
        """Test that the mock is always ready."""
        engine = MockOCREngine()
        engine.preload()
        assert engine.is_loaded


class TestOCREngine:
    """Test the pix2tex wrapper without the model."""

    def test_lazy_by_default(self):
        """Test that no model is loaded at construction."""
        assert OCREngine().is_loaded is False

    def test_missing_pix2tex(self, monkeypatch):
        """Test that a missing pix2tex install raises OCRError."""
        monkeypatch.setitem(sys.modules, "pix2tex", None)
        monkeypatch.setitem(sys.modules, "pix2tex.cli", None)

        with pytest.raises(OCRError) as exc_info:
            OCREngine().image_to_text(Image.new("RGB", (10, 10)))

        assert "pip install" in exc_info.value.user_message

    def test_model_failure(self):
        """Test that a model exception becomes OCRError."""

        def broken_model(image):
            raise RuntimeError("CUDA out of memory")

        engine = OCREngine()
        engine._model = broken_model
        engine._model_loaded = True

        with pytest.raises(OCRError) as exc_info:
            engine.image_to_text(Image.new("RGB", (10, 10)))

        assert "CUDA" in str(exc_info.value)

    def test_model_output(self):
        """Test the result built from the model output."""
        engine = OCREngine()
        engine._model = lambda image: "3x=9"
        engine._model_loaded = True

        result = engine.image_to_text(Image.new("RGB", (10, 10)))

        assert result.text == "3x=9"
        assert result.processing_time_ms >= 0
        assert 0.3 <= result.confidence <= 1.0


class TestLoadImage:
    """Test image loading."""

    def test_load_converts_to_rgb(self, tmp_path):
        """Test that images are converted to RGB."""
        path = tmp_path / "eq.png"
        Image.new("L", (20, 10), 255).save(path)

        image = load_image(path)

        assert image.mode == "RGB"
        assert image.size == (20, 10)

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises OCRError."""
        with pytest.raises(OCRError):
            load_image(tmp_path / "missing.png")

    def test_not_an_image(self, tmp_path):
        """Test that a non-image file raises OCRError."""
        path = tmp_path / "notes.txt"
        path.write_text("x+y=3")

        with pytest.raises(OCRError):
            load_image(path)


class TestConfidenceEstimation:
    """Test confidence heuristics."""

    def test_complete_equation(self):
        assert estimate_confidence("x^{2}-5x+6=0") == 1.0

    def test_empty_output(self):
        assert estimate_confidence("") == 0.3

    def test_no_equals_sign(self):
        assert estimate_confidence("x^{2}-5x+6") == pytest.approx(0.8)

    def test_unbalanced_braces(self):
        assert estimate_confidence("x^{2-5x+6=0") == pytest.approx(0.8)

    def test_garbage_characters(self):
        assert estimate_confidence("x??=0") == pytest.approx(0.7)
