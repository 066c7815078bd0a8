"""Input layer: text normalization, equation parsing and OCR."""

from .text import normalize, extract_coefficients
from .parser import EquationTextParser, parse_equation
from .ocr import OCREngine, MockOCREngine

__all__ = [
    "normalize",
    "extract_coefficients",
    "EquationTextParser",
    "parse_equation",
    "OCREngine",
    "MockOCREngine",
]
