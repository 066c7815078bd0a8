"""
OCR engine wrapper for pix2tex LaTeX-OCR.

Provides image-to-text conversion for photographed or captured equations.
The recognized text is handed to EquationTextParser unchanged; the
parser's normalization strips the LaTeX markup the model emits.
"""

import logging
import time
from pathlib import Path
from typing import Union

from PIL import Image

from ..models import OCRResult
from ..utils.errors import OCRError

logger = logging.getLogger(__name__)


def load_image(path: Union[str, Path]) -> Image.Image:
    """Open an image file, raising OCRError if it cannot be read."""
    try:
        image = Image.open(path)
        image.load()
    except (OSError, ValueError) as e:
        raise OCRError(
            f"Could not open image '{path}'",
            technical_details=f"{type(e).__name__}: {e}",
        )
    return image.convert("RGB")


class OCREngine:
    """
    Wrapper around pix2tex LaTeX-OCR model.

    Lazy-loads the model on first use to avoid slow startup.
    The model is ~500MB and takes 2-5 seconds to load.

    Usage:
        ocr = OCREngine()
        result = ocr.image_to_text(pil_image)
        print(result.text, result.confidence)
    """

    def __init__(self, lazy_load: bool = True):
        """
        Initialize OCR engine.

        Args:
            lazy_load: If True, defer model loading until first use.
                      Set False to load immediately (blocks for 2-5s).
        """
        self._model = None
        self._model_loaded = False

        if not lazy_load:
            self._load_model()

    def _load_model(self) -> None:
        """Load the pix2tex model. Called lazily on first use."""
        if self._model_loaded:
            return

        try:
            from pix2tex.cli import LatexOCR
        except ImportError as e:
            raise OCRError(
                "pix2tex not installed. Run: pip install -e .[ocr]",
                technical_details=str(e),
            )

        logger.info("Loading pix2tex model")
        try:
            self._model = LatexOCR()
        except Exception as e:
            raise OCRError(f"Failed to load OCR model: {e}")
        self._model_loaded = True

    def image_to_text(self, image: Image.Image) -> OCRResult:
        """
        Recognize the equation in a PIL Image.

        Returns:
            OCRResult with the recognized text, confidence score, and timing.

        Raises:
            OCRError: If OCR processing fails.
        """
        if not self._model_loaded:
            self._load_model()

        start_time = time.perf_counter()

        try:
            text = self._model(image)
        except Exception as e:
            raise OCRError(f"OCR processing failed: {e}")

        elapsed_ms = int((time.perf_counter() - start_time) * 1000)
        confidence = estimate_confidence(text)
        logger.debug("OCR produced %r (confidence %.2f, %d ms)", text, confidence, elapsed_ms)

        return OCRResult(text=text, confidence=confidence, processing_time_ms=elapsed_ms)

    @property
    def is_loaded(self) -> bool:
        """Check if the model is currently loaded."""
        return self._model_loaded

    def preload(self) -> None:
        """
        Explicitly load the model.

        Call this during app startup to avoid delay on first OCR.
        """
        self._load_model()


def estimate_confidence(text: str) -> float:
    """
    Estimate confidence score for OCR output.

    pix2tex doesn't provide confidence directly, so we use heuristics:
    - Very short output → likely failed
    - Unusual characters → OCR confusion
    - Unbalanced braces or parentheses → parse errors likely
    - An '=' sign → likely a complete equation

    Returns:
        Confidence score between 0.3 and 1.0
    """
    if not text or len(text) < 3:
        return 0.3

    confidence = 1.0

    if len(text) < 5:
        confidence -= 0.2

    garbage_chars = text.count("?") + text.count("�") + text.count("□")
    confidence -= garbage_chars * 0.15

    if text.count("{") != text.count("}"):
        confidence -= 0.2

    if text.count("(") != text.count(")"):
        confidence -= 0.1

    if "=" not in text:
        confidence -= 0.2

    return max(0.3, min(1.0, confidence))


class MockOCREngine:
    """
    Mock OCR engine for testing without pix2tex installed.

    Returns predefined responses based on image shape.
    """

    WIDE_TEXT = r"x^{2}-5x+6=0"
    TALL_TEXT = r"\begin{cases}x+y=3\\x-y=1\end{cases}"

    def __init__(self):
        self._model_loaded = True

    def image_to_text(self, image: Image.Image) -> OCRResult:
        """Return a canned recognition result."""
        w, h = image.size
        text = self.WIDE_TEXT if w > h else self.TALL_TEXT
        return OCRResult(text=text, confidence=0.95, processing_time_ms=50)

    @property
    def is_loaded(self) -> bool:
        return True

    def preload(self) -> None:
        pass
