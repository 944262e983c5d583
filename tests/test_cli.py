"""Tests for the joinerator command line."""

import io
import json

import pyperclip
import pytest

from joinerator import cli
from joinerator.repertoire import REPERTOIRE_INDEX


def _strip_marks(text):
    return "".join(c for c in text if not 0x0300 <= ord(c) <= 0x036F)


class TestParser:
    def test_defaults(self):
        args = cli.build_parser().parse_args([])
        assert args.repertoire == "default"
        assert args.length is None
        assert args.input == "stdin"
        assert args.output == "stdout"
        assert args.transform == []
        assert args.above_frequency == "60%"
        assert args.above_stacking == 1
        assert args.below_stacking == 0
        assert args.through_stacking == 0

    def test_generator_from_args(self):
        args = cli.build_parser().parse_args(["--below-frequency", "3", "--below-stacking", "2"])
        generator = cli._generator_from_args(args)
        below = generator[1]
        assert below.frequency.count == 3
        assert below.stacking == 2

    @pytest.mark.parametrize("length", ["0", "-3", "ten"])
    def test_invalid_length_rejected(self, length):
        with pytest.raises(SystemExit) as exc:
            cli.build_parser().parse_args(["--length", length])
        assert exc.value.code == 2

    def test_repeated_transforms_kept_in_order(self):
        args = cli.build_parser().parse_args(["-t", "uwu", "-t", "upper"])
        assert args.transform == ["uwu", "upper"]


class TestMain:
    def test_list_repertoires(self, capsys):
        assert cli.main(["--list-repertoires"]) == 0
        out = capsys.readouterr().out
        assert "Repertoires:" in out
        for name in REPERTOIRE_INDEX:
            assert name in out

    def test_args_input(self, capsys):
        code = cli.main(["-q", "-i", "args", "--seed", "1", "hello", "world"])
        assert code == 0
        out = capsys.readouterr().out
        assert _strip_marks(out) == "helloworld"

    def test_stdin_input(self, capsys, monkeypatch):
        monkeypatch.setattr("sys.stdin", io.StringIO("from stdin"))
        assert cli.main(["-q", "--seed", "2"]) == 0
        assert _strip_marks(capsys.readouterr().out) == "from stdin"

    def test_transform_and_length(self, capsys):
        code = cli.main(["-q", "-i", "args", "-t", "upper", "--length", "5", "hello"])
        assert code == 0
        assert capsys.readouterr().out == "HELLO"

    def test_verbose_logs_to_stderr(self, capsys):
        assert cli.main(["-i", "args", "--above-stacking", "0", "plain"]) == 0
        captured = capsys.readouterr()
        assert captured.out == "plain"
        assert "processed" in captured.err

    def test_args_input_requires_values(self):
        with pytest.raises(SystemExit) as exc:
            cli.main(["-i", "args"])
        assert exc.value.code == 2

    def test_invalid_frequency_is_usage_error(self):
        with pytest.raises(SystemExit) as exc:
            cli.main(["-i", "args", "--above-frequency", "200%", "x"])
        assert exc.value.code == 2

    def test_runtime_error_reported(self, capsys, monkeypatch):
        class Broken:
            def consume(self, text):
                raise OSError("stdout closed")

        monkeypatch.setattr(cli, "StdoutConsumer", Broken)
        assert cli.main(["-q", "-i", "args", "x"]) == 1
        err = capsys.readouterr().err
        assert "Trace:" in err
        assert "OSError stdout closed" in err

    def test_unknown_repertoire_is_usage_error(self):
        with pytest.raises(SystemExit) as exc:
            cli.main(["-i", "args", "--repertoire", "nope", "x"])
        assert exc.value.code == 2

    def test_clipboard_input_and_output(self, monkeypatch):
        store = {"text": "clip"}
        monkeypatch.setattr(pyperclip, "paste", lambda: store["text"])
        monkeypatch.setattr(pyperclip, "copy", lambda text: store.update(text=text))
        assert cli.main(["-q", "-i", "clipboard", "-o", "clipboard", "-t", "upper", "--seed", "4"]) == 0
        assert _strip_marks(store["text"]) == "CLIP"


def _write_repertoire(path, name="rings"):
    document = {
        "name": name,
        "description": "Rings over vowels",
        "glyphs": [{"codepoint": "U+030A", "position": "ABOVE", "combines": "[aeiou]"}],
    }
    path.write_text(json.dumps(document), encoding="utf-8")
    return str(path)


class TestRepertoireFiles:
    def test_loaded_repertoire_is_listed(self, tmp_path, capsys):
        path = _write_repertoire(tmp_path / "rings.json")
        assert cli.main(["--repertoire-file", path, "--list-repertoires"]) == 0
        out = capsys.readouterr().out
        assert "rings" in out
        assert "Rings over vowels" in out

    def test_loaded_repertoire_is_used(self, tmp_path, capsys):
        path = _write_repertoire(tmp_path / "rings.json")
        argv = [
            "-q", "-i", "args", "--repertoire-file", path, "-z", "rings",
            "--above-frequency", "100%", "--above-stacking", "2", "banana",
        ]
        assert cli.main(argv) == 0
        out = capsys.readouterr().out
        ring = chr(0x030A)
        assert out.replace(ring, "") == "banana"
        assert out.count(ring) == 6
        assert out.startswith("ba" + ring + ring)

    def test_missing_file_is_usage_error(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--repertoire-file", str(tmp_path / "absent.json"), "--list-repertoires"])
        assert exc.value.code == 2

    def test_malformed_file_is_usage_error(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text('{"name": "bad", "glyphs": [{"codepoint": "xy"}]}', encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            cli.main(["--repertoire-file", str(path), "--list-repertoires"])
        assert exc.value.code == 2
        assert "Invalid repertoire" in capsys.readouterr().err

    def test_builtin_name_clash_is_usage_error(self, tmp_path):
        path = _write_repertoire(tmp_path / "clash.json", name="default")
        with pytest.raises(SystemExit) as exc:
            cli.main(["--repertoire-file", path, "--list-repertoires"])
        assert exc.value.code == 2
