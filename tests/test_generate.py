"""
Tests for the generate use case — the full staging + generation pipeline.
"""

import time
from pathlib import Path

from idlstage.adapters.mock import MockGenerator
from idlstage.core.models.config import IncludeMapping
from idlstage.core.models.project import ArtifactRef, ProjectNode
from idlstage.core.use_cases.generate import (
    STATUS_FAILED,
    STATUS_GENERATED,
    STATUS_NOTHING,
    STATUS_UP_TO_DATE,
    run_generation,
)


def _an_hour_ago_ms() -> int:
    return int((time.time() - 3600) * 1000)


class TestRunGeneration:
    def test_nothing_to_compile(self, build_config):
        mock = MockGenerator()

        result = run_generation(config=build_config(), generator=mock)

        assert result.ok
        assert result.status == STATUS_NOTHING
        assert result.sources is not None
        assert result.sources.files == set()
        assert mock.call_count == 0

    def test_generates_when_input_newer(self, project_dir: Path, write_file, build_config):
        write_file(project_dir / "src" / "main" / "thrift" / "foo.thrift", millis=100)
        out = project_dir / "target" / "generated-sources" / "scrooge"
        write_file(out / "scrooge" / "Foo.scala", millis=50)
        mock = MockGenerator()

        result = run_generation(config=build_config(), generator=mock)

        assert result.status == STATUS_GENERATED
        assert mock.call_count == 1
        assert result.compile_roots == [out / "scrooge"]
        assert result.receipt is not None and result.receipt.ok

    def test_skips_when_output_newer(self, project_dir: Path, write_file, build_config):
        write_file(project_dir / "src" / "main" / "thrift" / "foo.thrift", millis=100)
        out = project_dir / "target" / "generated-sources" / "scrooge"
        write_file(out / "scrooge" / "Foo.scala", millis=150)
        mock = MockGenerator()

        result = run_generation(config=build_config(), generator=mock)

        assert result.status == STATUS_UP_TO_DATE
        assert mock.call_count == 0
        assert result.receipt is not None and result.receipt.skipped
        assert result.compile_roots == [out / "scrooge"]
        assert (out / "scrooge" / "Foo.scala").exists()

    def test_second_run_is_skipped(self, project_dir: Path, write_file, build_config):
        write_file(project_dir / "src" / "main" / "thrift" / "foo.thrift", millis=_an_hour_ago_ms())
        config = build_config()
        mock = MockGenerator()

        first = run_generation(config=config, generator=mock)
        second = run_generation(config=config, generator=mock)

        assert first.status == STATUS_GENERATED
        assert second.status == STATUS_UP_TO_DATE
        assert mock.call_count == 1

    def test_check_disabled_always_generates(self, project_dir: Path, write_file, build_config):
        write_file(project_dir / "src" / "main" / "thrift" / "foo.thrift", millis=_an_hour_ago_ms())
        config = build_config(check_staleness=False)
        mock = MockGenerator()

        run_generation(config=config, generator=mock)
        second = run_generation(config=config, generator=mock)

        assert second.status == STATUS_GENERATED
        assert mock.call_count == 2

    def test_stale_outputs_cleared_before_generation(self, project_dir: Path, write_file, build_config):
        write_file(project_dir / "src" / "main" / "thrift" / "foo.thrift", millis=200)
        out = project_dir / "target" / "generated-sources" / "scrooge"
        removed = write_file(out / "scrooge" / "Removed.scala", millis=50)

        run_generation(config=build_config(), generator=MockGenerator())

        assert not removed.exists()
        assert (out / "scrooge" / "Foo.scala").exists()

    def test_unresolved_include_mapping_is_not_a_failure(self, project_dir: Path, write_file, build_config):
        write_file(project_dir / "src" / "main" / "thrift" / "foo.thrift")
        config = build_config(
            include_mappings=[IncludeMapping(include="missing.thrift", artifact_id="nope")]
        )
        mock = MockGenerator()

        result = run_generation(config=config, generator=mock)

        assert result.ok
        assert mock.call_log[0].include_map == {}

    def test_include_mapping_resolved_to_staged_file(
        self, tmp_path: Path, project_dir: Path, make_jar, build_config
    ):
        jar = make_jar(tmp_path / "users-idl.jar", {"com/acme/user.thrift": "struct User {}"})
        project = ProjectNode(
            artifact_id="service",
            file=project_dir / "pom.xml",
            artifacts=[ArtifactRef(artifact_id="users-idl", file=jar)],
        )
        config = build_config(
            project,
            dependency_includes={"users-idl"},
            include_mappings=[IncludeMapping(include="user.thrift", artifact_id="users-idl")],
        )
        mock = MockGenerator()

        result = run_generation(config=config, generator=mock)

        staged = project_dir / "target" / "thrift_dependency" / "users-idl" / "com" / "acme" / "user.thrift"
        assert result.status == STATUS_GENERATED
        request = mock.call_log[0]
        assert request.include_map == {"user.thrift": str(staged)}
        assert request.input_files == [staged]
        assert project_dir / "target" / "thrift_dependency" in request.include_dirs

    def test_generator_failure_reported(self, project_dir: Path, write_file, build_config):
        write_file(project_dir / "src" / "main" / "thrift" / "foo.thrift")
        mock = MockGenerator()
        mock.set_failure("syntax error in foo.thrift")

        result = run_generation(config=build_config(), generator=mock)

        assert not result.ok
        assert result.status == STATUS_FAILED
        assert "syntax error" in result.error
        assert result.compile_roots == []

    def test_unreadable_jar_entry_fails_the_run(
        self, tmp_path: Path, project_dir: Path, write_file, damaged_jar, build_config
    ):
        write_file(project_dir / "src" / "main" / "thrift" / "foo.thrift")
        jar = damaged_jar(tmp_path / "users-idl.jar", name="com/acme/user.thrift")
        project = ProjectNode(
            artifact_id="service",
            file=project_dir / "pom.xml",
            artifacts=[ArtifactRef(artifact_id="users-idl", file=jar)],
        )
        mock = MockGenerator()

        result = run_generation(config=build_config(project, dependency_includes={"users-idl"}), generator=mock)

        assert result.status == STATUS_FAILED
        assert "Cannot extract com/acme/user.thrift" in result.error
        assert mock.call_count == 0
        staging = project_dir / "target" / "thrift_dependency"
        assert [p for p in staging.rglob("*") if p.is_file()] == []

    def test_source_root_that_is_a_file_fails(self, project_dir: Path, write_file, build_config):
        write_file(project_dir / "src" / "main" / "thrift", "oops")

        result = run_generation(config=build_config(), generator=MockGenerator())

        assert result.status == STATUS_FAILED
        assert "not a directory" in result.error

    def test_unknown_phase(self, build_config):
        result = run_generation(config=build_config(), phase="deploy", generator=MockGenerator())
        assert result.status == STATUS_FAILED
        assert "Unknown phase" in result.error

    def test_missing_config(self, tmp_path: Path):
        result = run_generation(tmp_path / "missing.yml")
        assert result.status == STATUS_FAILED
        assert "not found" in result.error

    def test_mock_mode(self, project_dir: Path, write_file, build_config):
        write_file(project_dir / "src" / "main" / "thrift" / "foo.thrift")
        result = run_generation(config=build_config(), mock_mode=True)
        assert result.status == STATUS_GENERATED
        assert result.receipt is not None
        assert result.receipt.adapter == "mock"

    def test_to_dict(self, project_dir: Path, write_file, build_config):
        src = write_file(project_dir / "src" / "main" / "thrift" / "foo.thrift")
        result = run_generation(config=build_config(), generator=MockGenerator())

        data = result.to_dict()

        assert data["phase"] == "compile"
        assert data["status"] == STATUS_GENERATED
        assert data["files"] == [str(src)]
        assert data["sources"]["local"] == 1
        assert data["staleness"]["needs_generation"] is True
        assert data["receipt"]["status"] == "ok"
