import importlib
import json
import logging
import os
import sys

import pytest

import bencoding.config
from bencoding.config import Settings
from bencoding.encoding import bdecode
from bencoding.errors import InvalidBlock
from bencoding.main import check_file, main, run


def test_decode_command(capsys):
    assert main(["decode", "d3:fooli1e3:baree"]) == 0

    assert json.loads(capsys.readouterr().out) == {"foo": [1, "bar"]}


def test_encode_command(capsys):
    assert main(["encode", '{"foo": [1, "a"]}']) == 0

    assert capsys.readouterr().out == "d3:fooli1e1:aee\n"


def test_encode_command_rejects_floats(capsys):
    assert main(["encode", "1.5"]) == 1

    assert "Cannot encode 1.5 of type float" in capsys.readouterr().err


def test_decode_command_prints_diagnostic(capsys):
    assert main(["decode", "i314"]) == 1

    err = capsys.readouterr().err
    assert "Integer block does not end" in err
    assert "i314\n^^^^" in err


def test_check_command(tmp_path, capsys):
    torrent = tmp_path / "example.torrent"
    torrent.write_bytes(b"d6:pieces3:\x00\x01\x02e")

    assert main(["check", str(torrent)]) == 0

    assert capsys.readouterr().out == f"OK: {torrent} holds a bencoded dict\n"


def test_check_file_trailing_data(tmp_path):
    torrent = tmp_path / "broken.torrent"
    torrent.write_bytes(b"le\xff")

    with pytest.raises(ValueError, match="Invalid straw characters."):
        check_file(str(torrent))


def test_usage(capsys):
    assert main(["decode"]) == 2

    assert "Usage" in capsys.readouterr().err


def test_unknown_command():
    with pytest.raises(NotImplementedError):
        main(["peers", "example.torrent"])


def test_encode_command_rejects_invalid_json(capsys):
    assert main(["encode", "{not json"]) == 1

    assert "Expecting property name" in capsys.readouterr().err


def test_decode_command_uses_settings(capsys):
    settings = Settings(encoding="latin-1", wrap_width=4)

    assert main(["decode", "5:hellox"], settings) == 1

    err = capsys.readouterr().err
    assert "of latin-1 text" in err
    assert "5:he\nllox\n   ^" in err


def test_run_loads_dotenv_from_working_directory(tmp_path, monkeypatch, capsys):
    # load_dotenv sets it, teardown removes it again
    monkeypatch.setenv("BENCODING_WRAP_WIDTH", "0")
    monkeypatch.delenv("BENCODING_WRAP_WIDTH")
    (tmp_path / ".env").write_text("BENCODING_WRAP_WIDTH=4\n")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(sys, "argv", ["bencoding", "decode", "5:hellox"])
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: None)

    with pytest.raises(SystemExit) as excinfo:
        run()

    assert excinfo.value.code == 1
    assert "5:he\nllox\n   ^" in capsys.readouterr().err


def test_importing_config_leaves_environment_alone(tmp_path, monkeypatch):
    monkeypatch.delenv("BENCODING_MARKER", raising=False)
    (tmp_path / ".env").write_text("BENCODING_MARKER=1\n")
    monkeypatch.chdir(tmp_path)

    importlib.reload(bencoding.config)
    with pytest.raises(InvalidBlock) as excinfo:
        bdecode("i314")
    str(excinfo.value)

    assert "BENCODING_MARKER" not in os.environ


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("BENCODING_ENCODING", "latin-1")
    monkeypatch.setenv("BENCODING_WRAP_WIDTH", "40")
    monkeypatch.setenv("BENCODING_LOG_LEVEL", "debug")

    assert Settings.from_env() == Settings(
        encoding="latin-1", wrap_width=40, log_level="DEBUG"
    )
