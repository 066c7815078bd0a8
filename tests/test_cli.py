"""
Tests for the command line entry point.
"""

import json
import sys

import pytest

import main


def run_main(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["calcsolver", *args])
    return main.main()


class TestSolveEquation:
    """Test solving equation text from the command line."""

    def test_text_output(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "3x=9") == 0
        out = capsys.readouterr().out
        assert "Category: Linear equation" in out
        assert "Answer: x = 3" in out

    def test_escaped_newline(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "x+y=3\\nx-y=1") == 0
        assert "Answer: x = 2, y = 1" in capsys.readouterr().out

    def test_steps(self, monkeypatch, capsys):
        run_main(monkeypatch, "-s", "x^2-5x+6=0")
        out = capsys.readouterr().out
        assert "Step 1: Write in standard form" in out
        assert "Step 5:" in out

    def test_json_output(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "-f", "json", "(x-2)(x-3)=0") == 0
        output = json.loads(capsys.readouterr().out)
        assert output["category"] == "Quadratic equation (factored)"
        assert output["final_answer"] == "x1 = 2, x2 = 3"
        assert output["recognized"] is True

    def test_latex_output(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "-f", "latex", "3x=9") == 0
        assert "x = 3" in capsys.readouterr().out

    def test_unrecognized(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "banana") == 1
        assert "not recognized" in capsys.readouterr().err

    def test_no_input_prints_help(self, monkeypatch, capsys):
        assert run_main(monkeypatch) == 1
        assert "usage:" in capsys.readouterr().out


class TestKeys:
    """Test calculator key replay."""

    def test_replay(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "--keys", "2 + 3 × 4 =") == 0
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["5 × 4 =", "20"]

    def test_json(self, monkeypatch, capsys):
        run_main(monkeypatch, "--keys", "5 x!", "-f", "json")
        output = json.loads(capsys.readouterr().out)
        assert output == {"display": "120", "history": "(5)!", "is_entering_digit": False}

    def test_unknown_key(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "--keys", "2 plus 3") == 1
        assert "'plus' is not a calculator key" in capsys.readouterr().err


class TestSystem:
    """Test the coefficient-form solver."""

    def test_solve(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "--system", "2,3,8;1,-1,1") == 0
        assert capsys.readouterr().out.strip() == "x = 2.2, y = 1.2"

    def test_singular(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "--system", "1,1,2;2,2,4") == 1
        assert "no unique solution" in capsys.readouterr().err

    def test_invalid_field(self, monkeypatch, capsys):
        assert run_main(monkeypatch, "--system", "1,a,2;2,2,4") == 1
        assert "'a' is not a number" in capsys.readouterr().err

    @pytest.mark.parametrize("rows", ["1,2", "1,2,3", "1,2;3,4", "1,1,1,1;1,1,1,1"])
    def test_wrong_shape(self, monkeypatch, capsys, rows):
        assert run_main(monkeypatch, "--system", rows) == 1
        assert "Expected 2 or 3 rows" in capsys.readouterr().err


class TestImage:
    """Test image input without a network or OCR model."""

    def test_remote_without_key(self, monkeypatch, capsys, tmp_path):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        path = tmp_path / "photo.png"
        path.write_bytes(b"\x89PNG")

        assert run_main(monkeypatch, "--image", str(path), "--remote") == 1
        assert "GEMINI_API_KEY" in capsys.readouterr().err

    def test_missing_file(self, monkeypatch, capsys, tmp_path):
        path = tmp_path / "missing.png"
        assert run_main(monkeypatch, "--image", str(path)) == 1
        assert "Could not open image" in capsys.readouterr().err
