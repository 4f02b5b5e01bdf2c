import io
import json

import pytest

from bindgen_java.cli import build_parser, main


@pytest.fixture
def interface_file(tmp_path, geometry_data):
    path = tmp_path / "geometry.json"
    path.write_text(json.dumps(geometry_data), encoding="utf-8")
    return path


def test_generate_writes_java_files(interface_file, tmp_path):
    out_dir = tmp_path / "out"
    code = main(
        ["generate", str(interface_file), "--out-dir", str(out_dir), "--package-name", "com.geo"]
    )
    assert code == 0
    point = out_dir / "com" / "geo" / "Point.java"
    assert point.exists()
    assert point.read_text(encoding="utf-8").startswith("package com.geo;")
    assert (out_dir / "com" / "geo" / "Geometry.java").exists()


def test_generate_uses_config_file(interface_file, tmp_path):
    config = tmp_path / "uniffi.toml"
    config.write_text('[bindings.java]\npackage_name = "org.shapes"\n', encoding="utf-8")
    out_dir = tmp_path / "out"
    assert main(["generate", str(interface_file), "-o", str(out_dir), "--config", str(config)]) == 0
    assert (out_dir / "org" / "shapes" / "Point.java").exists()


def test_generate_from_stdin(monkeypatch, geometry_data, tmp_path):
    monkeypatch.setattr("sys.stdin", io.StringIO(json.dumps(geometry_data)))
    out_dir = tmp_path / "out"
    assert main(["generate", "--stdin", "--out-dir", str(out_dir)]) == 0
    assert (out_dir / "uniffi" / "Geometry.java").exists()


def test_generate_prints_without_out_dir(interface_file, capsys):
    assert main(["generate", str(interface_file)]) == 0
    assert "FfiConverterTypePoint" in capsys.readouterr().out


def test_missing_file_fails(tmp_path):
    assert main(["generate", str(tmp_path / "missing.json")]) == 1


def test_bad_config_fails(interface_file, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("package_name: x\n", encoding="utf-8")
    assert main(["generate", str(interface_file), "--config", str(config)]) == 1


def test_unsupported_language_fails(interface_file):
    assert main(["generate", str(interface_file), "--language", "cobol"]) == 1


def test_source_is_required():
    assert main(["generate"]) == 1


def test_list_languages():
    assert main(["generate", "--list-languages"]) == 0


@pytest.mark.parametrize("language,expected", [("java", 0), ("jvm", 0), ("cobol", 1)])
def test_language_info(language, expected):
    assert main(["generate", "--language-info", language]) == expected


def test_no_command_prints_help():
    assert main([]) == 1


def test_java_flags_default_to_unset():
    args = build_parser().parse_args(["generate", "iface.json"])
    assert args.android is None
    assert args.quarkus is None
    assert args.immutable_records is None
    assert args.language == "java"
