#!/usr/bin/env python3
"""
CalcSolver - scientific calculator engine and equation solver.

Entry point with CLI support.

Usage:
    calcsolver "x^2-5x+6=0"              # Solve equation text
    calcsolver -s "x+y=3\\nx-y=1"         # Solve a system and show steps
    calcsolver --keys "2 + 3 × 4 ="      # Replay calculator keys
    calcsolver --system "1,1,3;1,-1,1"   # Solve a coefficient form
    calcsolver --image photo.png         # OCR a photo, then solve
"""

import sys
import os
import argparse
import json
import logging
import mimetypes

# Add the project root to path for imports
sys.path.insert(0, os.path.dirname(__file__))

from calcsolver import __version__

logger = logging.getLogger("calcsolver")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="calcsolver",
        description="Scientific calculator engine and linear/quadratic equation solver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  calcsolver "3x=9"                     Solve a linear equation
  calcsolver -s "x^2-5x+6=0"            Solve a quadratic and show steps
  calcsolver "x+y=3\\nx-y=1"             Solve a 2-variable system
  calcsolver -f json "(x-2)(x-3)=0"     Output as JSON
  calcsolver --keys "5 x! ="            Replay calculator keys
  calcsolver --keys "30 Rad sin"        Keys are separated by spaces
  calcsolver --system "2,3,8;1,-1,1"    Solve rows of coefficients + constant
  calcsolver --image photo.png          Recognize a photo, then solve
  calcsolver --image photo.png --remote Ask the photo-analysis service
        """,
    )

    parser.add_argument(
        "equation",
        nargs="?",
        help="Equation text; separate system lines with a newline or \\n",
    )

    parser.add_argument(
        "-f",
        "--format",
        choices=["text", "json", "latex"],
        default="text",
        help="Output format (default: text)",
    )

    parser.add_argument(
        "-s",
        "--steps",
        action="store_true",
        help="Show solution steps",
    )

    parser.add_argument(
        "--keys",
        metavar="KEYS",
        help="Replay a space-separated calculator key sequence",
    )

    parser.add_argument(
        "--system",
        metavar="ROWS",
        help="Solve a linear system given as 'a,b,c;d,e,f' (coefficients, then constant)",
    )

    parser.add_argument(
        "--image",
        metavar="PATH",
        help="Read the equation from an image with OCR",
    )

    parser.add_argument(
        "--remote",
        action="store_true",
        help="With --image: send the photo to the remote analysis service instead",
    )

    parser.add_argument(
        "--from-clipboard",
        action="store_true",
        help="Read equation from clipboard",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show detailed output",
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def print_error(exc: Exception) -> None:
    """Print a user-facing error and its first suggestion to stderr."""
    from calcsolver.utils.errors import ErrorContext

    ctx = ErrorContext.from_exception(exc)
    print(f"Error: {ctx.message}", file=sys.stderr)
    if ctx.suggestions:
        print(f"Suggestion: {ctx.suggestions[0]}", file=sys.stderr)


def solve_equation_cli(text: str, output_format: str, show_steps: bool) -> int:
    """Solve equation text and print the result."""
    from calcsolver.input.parser import EquationTextParser
    from calcsolver.output.step_generator import StepGenerator
    from calcsolver.utils.errors import UnrecognizedEquationError

    parsed = EquationTextParser().parse(text)

    if output_format == "json":
        output = {
            "input": text,
            "normalized": parsed.normalized,
            "category": parsed.category_label,
            "recognized": parsed.recognized,
            "final_answer": parsed.final_answer,
            "steps": parsed.step_texts,
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
        return 0 if parsed.recognized else 1

    if not parsed.recognized:
        print_error(UnrecognizedEquationError(text))
        return 1

    if output_format == "latex":
        for step in parsed.steps:
            if step.latex_repr:
                print(step.latex_repr)
        return 0

    print(f"Equation: {parsed.normalized}")
    print(f"Category: {parsed.category_label}")
    print()

    if show_steps and parsed.steps:
        print("Steps:")
        print(StepGenerator().steps_to_text(parsed.steps))
        print()

    print(f"Answer: {parsed.final_answer}")
    return 0


def run_keys_cli(keys: str, output_format: str, verbose: bool) -> int:
    """Replay calculator keys and print the final display."""
    from calcsolver.calculator import CalculatorEngine, parse_key_sequence
    from calcsolver.utils.errors import KeyTokenError

    try:
        events = parse_key_sequence(keys)
    except KeyTokenError as e:
        print_error(e)
        return 1

    engine = CalculatorEngine()
    for event in events:
        snapshot = engine.apply(event)
        if verbose:
            print(
                f"{event.token:>6}  display={snapshot.display!r}  history={snapshot.history!r}",
                file=sys.stderr,
            )

    if output_format == "json":
        print(
            json.dumps(
                {
                    "display": engine.display,
                    "history": engine.history,
                    "is_entering_digit": engine.is_entering_digit,
                },
                ensure_ascii=False,
            )
        )
    else:
        if engine.history:
            print(engine.history)
        print(engine.display)
    return 0


def solve_system_cli(rows_text: str) -> int:
    """Solve a coefficient form given as 'a,b,c;d,e,f'."""
    from calcsolver.solvers.linear import solve_coefficient_form
    from calcsolver.utils.errors import ParseError, SingularSystemError
    from calcsolver.utils.formatting import format_number

    rows = [row.split(",") for row in rows_text.split(";") if row.strip()]
    if len(rows) not in (2, 3) or any(len(row) != len(rows) + 1 for row in rows):
        print(
            "Error: Expected 2 or 3 rows of N coefficients plus a constant",
            file=sys.stderr,
        )
        return 1

    try:
        result = solve_coefficient_form(rows)
    except ParseError as e:
        print_error(e)
        return 1

    if not result.success:
        print_error(SingularSystemError(len(rows)))
        return 1

    names = ["x", "y", "z"]
    print(", ".join(f"{n} = {format_number(v)}" for n, v in zip(names, result.solution)))
    return 0


def solve_image_cli(
    path: str, remote: bool, output_format: str, show_steps: bool
) -> int:
    """Recognize an image (locally or remotely) and print the result."""
    from calcsolver.utils.errors import CalcSolverError

    if remote:
        from calcsolver.remote import RemoteAnalysisClient

        mime_type = mimetypes.guess_type(path)[0] or "image/png"
        try:
            with open(path, "rb") as f:
                image_data = f.read()
            result = RemoteAnalysisClient().analyze(image_data, mime_type)
        except OSError as e:
            print(f"Error: Could not read '{path}': {e}", file=sys.stderr)
            return 1
        except CalcSolverError as e:
            print_error(e)
            return 1

        print(result.explanation)
        if result.suggestions:
            print()
            print(result.suggestions)
        return 0

    from calcsolver.input.ocr import OCREngine, load_image

    try:
        ocr = OCREngine().image_to_text(load_image(path))
    except CalcSolverError as e:
        print_error(e)
        return 1

    logger.info("OCR text %r (confidence %.2f)", ocr.text, ocr.confidence)
    return solve_equation_cli(ocr.text, output_format, show_steps)


def get_clipboard_text() -> str | None:
    """Get text from system clipboard."""
    try:
        from PyQt6.QtWidgets import QApplication

        app = QApplication.instance() or QApplication([])
        return app.clipboard().text()
    except ImportError:
        pass

    import subprocess

    for command in (
        ["xclip", "-selection", "clipboard", "-o"],
        ["xsel", "--clipboard", "--output"],
    ):
        try:
            result = subprocess.run(command, capture_output=True, text=True)
        except FileNotFoundError:
            continue
        if result.returncode == 0:
            return result.stdout

    return None


def main():
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()
    configure_logging(args.verbose)

    if args.keys:
        return run_keys_cli(args.keys, args.format, args.verbose)

    if args.system:
        return solve_system_cli(args.system)

    if args.image:
        return solve_image_cli(args.image, args.remote, args.format, args.steps)

    equation = args.equation
    if args.from_clipboard:
        equation = get_clipboard_text()
        if not equation:
            print("Error: Could not read from clipboard", file=sys.stderr)
            return 1
        equation = equation.strip()
        if not equation:
            print("Error: Clipboard is empty", file=sys.stderr)
            return 1

    if not equation:
        parser.print_help()
        return 1

    # Shells pass "\n" through literally
    equation = equation.replace("\\n", "\n")
    return solve_equation_cli(equation, args.format, args.steps)


if __name__ == "__main__":
    sys.exit(main() or 0)
