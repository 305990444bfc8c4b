#!/usr/bin/env python3

import json

import pytest
from click.testing import CliRunner

from value_spec_to_objc.pipeline import GenerationError, Generator, find_spec_files
from value_spec_to_objc.pipeline.writer import AtomicWriter, FileWriteRequest, Request
from value_spec_to_objc.value_spec_to_objc import value_spec_to_objc

FOO = {
    "name": "RMFoo",
    "attributes": [{"name": "name", "type": "NSString *"}, {"name": "count", "type": "NSInteger"}],
}


def write_spec(folder, file_name, data):
    path = folder / file_name
    path.write_text(json.dumps(data))
    return path


class TestAtomicWriter:
    """Test writing generated files"""

    def test_creates_parent_folders(self, tmp_path):
        path = tmp_path / "nested" / "RMFoo.h"
        AtomicWriter().write(path, "// header\n")
        assert path.read_text() == "// header\n"

    def test_replaces_existing_content(self, tmp_path):
        path = tmp_path / "RMFoo.h"
        path.write_text("old")
        AtomicWriter().write(path, "new")
        assert path.read_text() == "new"
        assert [p.name for p in tmp_path.iterdir()] == ["RMFoo.h"]

    def test_write_request(self, tmp_path):
        request = FileWriteRequest("RMFoo", [Request(tmp_path / "RMFoo.h", "h"), Request(tmp_path / "RMFoo.m", "m")])
        written = AtomicWriter().write_request(request)
        assert written == [tmp_path / "RMFoo.h", tmp_path / "RMFoo.m"]


class TestGenerator:
    """Test running the generator over files and folders"""

    def test_find_spec_files(self, tmp_path):
        write_spec(tmp_path, "RMFoo.value.json", FOO)
        (tmp_path / "sub").mkdir()
        write_spec(tmp_path / "sub", "RMBar.object.json", FOO)
        write_spec(tmp_path, "package.json", {})
        found = find_spec_files([tmp_path])
        assert sorted(p.name for p in found) == ["RMBar.object.json", "RMFoo.value.json"]

    def test_generate_writes_beside_input(self, tmp_path):
        write_spec(tmp_path, "RMFoo.value.json", FOO)
        report = Generator().generate([tmp_path])
        assert report.errors == []
        assert {p.name for p in report.written} == {"RMFoo.h", "RMFoo.m"}
        assert (tmp_path / "RMFoo.h").exists()

    def test_failure_does_not_stop_other_files(self, tmp_path):
        write_spec(tmp_path, "RMBad.value.json", {"name": "RMBad", "attributes": [{"name": "x"}]})
        write_spec(tmp_path, "RMFoo.value.json", FOO)
        report = Generator().generate([tmp_path])
        assert len(report.errors) == 1
        assert "RMBad.value.json" in str(report.errors[0])
        assert (tmp_path / "RMFoo.m").exists()

        with pytest.raises(GenerationError):
            Generator().run([tmp_path])

    def test_malformed_type_does_not_stop_other_files(self, tmp_path):
        write_spec(tmp_path, "RMBad.value.json", {"name": "RMBad", "attributes": [{"name": "a", "type": 5}]})
        write_spec(tmp_path, "RMGood.value.json", dict(FOO, name="RMGood"))
        report = Generator().generate([tmp_path])
        (error,) = report.errors
        assert "RMBad.value.json] " in str(error)
        assert str(error).endswith("attribute RMBad.a: an attribute type must be a string or an object")
        assert (tmp_path / "RMGood.h").exists()
        assert (tmp_path / "RMGood.m").exists()
        assert not (tmp_path / "RMBad.h").exists()

    def test_undecodable_file_is_reported(self, tmp_path):
        (tmp_path / "RMBad.value.json").write_bytes(b"\xff\xfe{")
        write_spec(tmp_path, "RMFoo.value.json", FOO)
        report = Generator().generate([tmp_path])
        assert len(report.errors) == 1
        assert (tmp_path / "RMFoo.h").exists()


class TestCli:
    """Test the command line interface"""

    def test_generates_files(self, tmp_path):
        path = write_spec(tmp_path, "RMFoo.value.json", FOO)
        result = CliRunner().invoke(value_spec_to_objc, [str(path)])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "RMFoo.h").exists()
        assert (tmp_path / "RMFoo.m").exists()

    def test_output_folder(self, tmp_path):
        path = write_spec(tmp_path, "RMFoo.value.json", FOO)
        out = tmp_path / "out"
        result = CliRunner().invoke(value_spec_to_objc, ["-o", str(out), str(path)])
        assert result.exit_code == 0, result.output
        assert (out / "RMFoo.h").exists()

    def test_config_file(self, tmp_path):
        path = write_spec(tmp_path, "RMFoo.value.json", FOO)
        config = write_spec(tmp_path, "config.json", {"base_class_name": "RMBase"})
        result = CliRunner().invoke(value_spec_to_objc, ["--config", str(config), str(path)])
        assert result.exit_code == 0, result.output
        assert "@interface RMFoo : RMBase" in (tmp_path / "RMFoo.h").read_text()

    def test_bad_config(self, tmp_path):
        path = write_spec(tmp_path, "RMFoo.value.json", FOO)
        config = write_spec(tmp_path, "config.json", {"colour": "blue"})
        result = CliRunner().invoke(value_spec_to_objc, ["--config", str(config), str(path)])
        assert result.exit_code == 2
        assert "Unknown configuration keys" in result.output

    def test_errors_exit_with_failure(self, tmp_path):
        path = write_spec(tmp_path, "RMBad.value.json", {"name": "RMBad", "attributes": [{"name": "x"}]})
        result = CliRunner().invoke(value_spec_to_objc, [str(path)])
        assert result.exit_code == 1
        assert not (tmp_path / "RMBad.h").exists()


if __name__ == "__main__":
    pytest.main([__file__])
