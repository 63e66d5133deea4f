"""Tests for application/services/dependency_checker.py."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Mapping, Sequence
from pathlib import Path

import pytest

from jarcheck.application.services.dependency_checker import (
    DependencyChecker,
    check_dependencies,
)
from jarcheck.domain.exceptions.archive import ArchiveUnreadableError
from jarcheck.domain.exceptions.classfile import MalformedClassError
from jarcheck.domain.model.configuration import CheckerConfig
from jarcheck.domain.model.node_failure import FailureKind
from jarcheck.domain.ports.class_source import ClassSourcePort
from jarcheck.domain.ports.reference_extractor import ReferenceExtractorPort
from tests.factories import make_class, write_jar


class GraphSource(ClassSourcePort):
    """In-memory source: a class's bytes are its encoded name.

    Records every lookup so tests can assert what was visited.
    """

    def __init__(self, graph: Mapping[str, Sequence[str]]) -> None:
        self._graph = graph
        self._lock = threading.Lock()
        self.lookups: list[str] = []

    def locate(
        self,
        type_name: str,
        archives: Sequence[str | os.PathLike[str]],
    ) -> bytes | None:
        with self._lock:
            self.lookups.append(type_name)
        return type_name.encode() if type_name in self._graph else None


class GraphExtractor(ReferenceExtractorPort):
    """Extractor for GraphSource bytes; b"!" prefix marks a malformed class."""

    def __init__(self, graph: Mapping[str, Sequence[str]]) -> None:
        self._graph = graph

    def extract(self, class_bytes: bytes) -> frozenset[str]:
        name = class_bytes.decode()
        if name.startswith("!"):
            raise MalformedClassError("corrupt")
        return frozenset(self._graph[name])


def _checker(graph: Mapping[str, Sequence[str]], **config: object) -> DependencyChecker:
    return DependencyChecker(
        config=CheckerConfig(**config),  # type: ignore[arg-type]
        source=GraphSource(graph),
        extractor=GraphExtractor(graph),
    )


class TestCheckScenarios:
    """End-to-end verdicts over real jar archives."""

    def test_runtime_only_references(self, tmp_path: Path) -> None:
        """Entry referencing only runtime classes resolves with no dependencies."""
        jar = write_jar(
            tmp_path / "app.jar",
            {"com.acme.App": make_class("com.acme.App", calls=["java.lang.System"])},
        )

        result = DependencyChecker().check("com.acme.App", [jar])

        assert result.resolved is True
        assert result.dependencies == frozenset()
        assert result.visited == {"com.acme.App"}

    def test_present_helper(self, tmp_path: Path) -> None:
        """Helper found in the archive: resolved, dependency set = {Helper}."""
        jar = write_jar(
            tmp_path / "app.jar",
            {
                "com.acme.App": make_class("com.acme.App", calls=["com.acme.Helper"]),
                "com.acme.Helper": make_class("com.acme.Helper"),
            },
        )

        result = DependencyChecker().check("com.acme.App", [jar])

        assert result.resolved is True
        assert result.dependencies == {"com.acme.Helper"}

    def test_missing_class(self, tmp_path: Path) -> None:
        jar = write_jar(
            tmp_path / "app.jar",
            {"com.acme.App": make_class("com.acme.App", instantiates=["com.acme.Missing"])},
        )

        result = DependencyChecker().check("com.acme.App", [jar])

        assert result.resolved is False
        assert result.missing == {"com.acme.Missing"}

    def test_cycle_terminates(self, tmp_path: Path) -> None:
        """App ↔ Helper: each class is explored once and the check resolves."""
        jar = write_jar(
            tmp_path / "app.jar",
            {
                "com.acme.App": make_class("com.acme.App", calls=["com.acme.Helper"]),
                "com.acme.Helper": make_class("com.acme.Helper", casts=["com.acme.App"]),
            },
        )

        result = DependencyChecker().check("com.acme.App", [jar])

        assert result.resolved is True
        assert result.visited == {"com.acme.App", "com.acme.Helper"}
        assert result.dependencies == {"com.acme.App", "com.acme.Helper"}

    def test_nonexistent_archive_raises(self, tmp_path: Path) -> None:
        """Unreadable archive is an error, not a false verdict."""
        with pytest.raises(ArchiveUnreadableError, match="file not found"):
            DependencyChecker().check("com.acme.App", [tmp_path / "absent.jar"])

    def test_missing_entry_class(self, tmp_path: Path) -> None:
        jar = write_jar(tmp_path / "app.jar", {})

        result = DependencyChecker().check("com.acme.App", [jar])

        assert result.resolved is False
        assert result.missing == {"com.acme.App"}

    def test_dependency_in_second_archive(self, tmp_path: Path) -> None:
        app = write_jar(
            tmp_path / "app.jar",
            {"com.acme.App": make_class("com.acme.App", calls=["org.lib.Util"])},
        )
        lib = write_jar(tmp_path / "lib.jar", {"org.lib.Util": make_class("org.lib.Util")})

        assert check_dependencies("com.acme.App", [app, lib]) is True
        assert check_dependencies("com.acme.App", [app]) is False

    def test_malformed_dependency(self, tmp_path: Path) -> None:
        jar = write_jar(
            tmp_path / "app.jar",
            {
                "com.acme.App": make_class("com.acme.App", calls=["com.acme.Broken"]),
                "com.acme.Broken": b"\xca\xfe\xba\xbe\x00",
            },
        )

        result = DependencyChecker().check("com.acme.App", [jar])

        assert result.resolved is False
        assert result.malformed == {"com.acme.Broken"}
        assert result.missing == frozenset()

    def test_without_index(self, tmp_path: Path) -> None:
        """Plain jar source gives the same verdict as the indexed one."""
        jar = write_jar(
            tmp_path / "app.jar",
            {
                "com.acme.App": make_class("com.acme.App", calls=["com.acme.Helper"]),
                "com.acme.Helper": make_class("com.acme.Helper"),
            },
        )
        config = CheckerConfig(index_archives=False)

        assert check_dependencies("com.acme.App", [jar], config) is True


class TestCheckEntry:
    """Tests for entry class handling."""

    def test_runtime_entry_resolves_without_lookup(self) -> None:
        """A JDK entry class never touches the archives."""
        source = GraphSource({})
        checker = DependencyChecker(source=source, extractor=GraphExtractor({}))

        result = checker.check("java.lang.String", ["absent.jar"])

        assert result.resolved is True
        assert source.lookups == []

    def test_internal_name_normalized(self) -> None:
        result = _checker({"com.acme.App": []}).check("com/acme/App", ["a.jar"])
        assert result.entry == "com.acme.App"
        assert result.resolved is True

    def test_empty_entry_raises(self) -> None:
        with pytest.raises(ValueError, match="entry_class_name"):
            _checker({}).check("", ["a.jar"])

    def test_empty_archives_raises(self) -> None:
        with pytest.raises(ValueError, match="archives"):
            _checker({}).check("com.acme.App", [])

    def test_archives_recorded(self, tmp_path: Path) -> None:
        result = _checker({"a.A": []}).check("a.A", [tmp_path / "x.jar", "y.jar"])
        assert result.archives == (str(tmp_path / "x.jar"), "y.jar")


class TestTraversal:
    """Tests for traversal properties."""

    GRAPH: Mapping[str, Sequence[str]] = {
        "a.App": ["a.Service", "a.Repo", "java.util.List"],
        "a.Service": ["a.Repo", "a.Model"],
        "a.Repo": ["a.Model", "a.App"],
        "a.Model": [],
    }

    def test_each_class_located_once(self) -> None:
        source = GraphSource(self.GRAPH)
        checker = DependencyChecker(source=source, extractor=GraphExtractor(self.GRAPH))

        checker.check("a.App", ["x.jar"])

        assert sorted(source.lookups) == ["a.App", "a.Model", "a.Repo", "a.Service"]

    def test_runtime_names_never_located(self) -> None:
        source = GraphSource(self.GRAPH)
        checker = DependencyChecker(source=source, extractor=GraphExtractor(self.GRAPH))

        result = checker.check("a.App", ["x.jar"])

        assert not any(name.startswith("java.") for name in source.lookups)
        assert "java.util.List" not in result.dependencies

    def test_references_recorded(self) -> None:
        result = _checker(self.GRAPH).check("a.App", ["x.jar"])
        assert result.references["a.Service"] == {"a.Repo", "a.Model"}
        assert result.references["a.Model"] == frozenset()

    def test_repeated_checks_identical(self) -> None:
        """Nothing leaks between check() calls on one checker."""
        checker = _checker(self.GRAPH)
        first = checker.check("a.App", ["x.jar"])
        second = checker.check("a.App", ["x.jar"])

        assert (first.resolved, first.visited, first.dependencies, first.failures) == (
            second.resolved,
            second.visited,
            second.dependencies,
            second.failures,
        )

    @pytest.mark.parametrize("workers", [1, 2, 8])
    def test_worker_count_does_not_change_result(self, workers: int) -> None:
        """A single worker cannot deadlock: joins never block a worker."""
        graph = dict(self.GRAPH) | {"a.Model": ["a.Gone1", "a.Gone2"]}

        result = _checker(graph, max_workers=workers).check("a.App", ["x.jar"])

        assert result.resolved is False
        assert result.missing == {"a.Gone1", "a.Gone2"}
        assert result.visited == {"a.App", "a.Service", "a.Repo", "a.Model", "a.Gone1", "a.Gone2"}

    def test_every_unresolved_class_reported(self) -> None:
        """Without fail-fast, in-flight work drains and the failure list is complete."""
        graph = {
            "a.App": ["a.Missing1", "a.Mid"],
            "a.Mid": ["a.Deep"],
            "a.Deep": ["a.Missing2"],
        }

        result = _checker(graph).check("a.App", ["x.jar"])

        assert [f.type_name for f in result.failures] == ["a.Missing1", "a.Missing2"]
        assert all(f.kind is FailureKind.NOT_FOUND for f in result.failures)

    def test_deep_chain(self) -> None:
        """Completion of a long chain does not recurse once per level."""
        depth = 3000
        graph = {f"a.C{i}": [f"a.C{i + 1}"] for i in range(depth)}
        graph[f"a.C{depth}"] = []

        result = _checker(graph, max_workers=4).check("a.C0", ["x.jar"])

        assert result.resolved is True
        assert result.visited_count == depth + 1

    def test_wide_fan_out(self) -> None:
        graph: dict[str, list[str]] = {"a.Root": [f"a.Leaf{i}" for i in range(500)]}
        graph.update({f"a.Leaf{i}": ["a.Root"] for i in range(500)})

        result = _checker(graph).check("a.Root", ["x.jar"])

        assert result.resolved is True
        assert result.dependency_count == 501

    def test_malformed_recorded(self) -> None:
        graph = {"a.App": ["!a.Bad"], "!a.Bad": []}

        result = _checker(graph).check("a.App", ["x.jar"])

        assert result.resolved is False
        assert result.malformed == {"!a.Bad"}

    def test_unexpected_error_propagates(self) -> None:
        class Exploding(ReferenceExtractorPort):
            def extract(self, class_bytes: bytes) -> frozenset[str]:
                raise RuntimeError("boom")

        checker = DependencyChecker(source=GraphSource({"a.App": []}), extractor=Exploding())

        with pytest.raises(RuntimeError, match="boom"):
            checker.check("a.App", ["x.jar"])

    def test_configured_runtime_prefix_skipped(self) -> None:
        graph = {"a.App": ["org.lib.Util"]}
        config = CheckerConfig().with_runtime_prefixes("org.lib.")
        checker = DependencyChecker(
            config=config, source=GraphSource(graph), extractor=GraphExtractor(graph)
        )

        assert checker.check("a.App", ["x.jar"]).resolved is True

    def test_not_found_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            _checker({"a.App": ["a.Gone"]}).check("a.App", ["x.jar"])

        assert "a.Gone not found in any archive" in caplog.text


class TestFailFast:
    """Tests for fail_fast mode."""

    def test_verdict_unchanged(self) -> None:
        graph: dict[str, list[str]] = {"a.App": ["a.Missing", *[f"a.Ok{i}" for i in range(50)]]}
        graph.update({f"a.Ok{i}": [] for i in range(50)})

        result = _checker(graph, fail_fast=True, max_workers=2).check("a.App", ["x.jar"])

        assert result.resolved is False
        assert "a.Missing" in result.missing

    def test_resolved_graph_fully_explored(self) -> None:
        """Fail-fast only shortens unresolved checks."""
        result = _checker(TestTraversal.GRAPH, fail_fast=True).check("a.App", ["x.jar"])

        assert result.resolved is True
        assert result.visited == {"a.App", "a.Service", "a.Repo", "a.Model"}


class RacingSource(ClassSourcePort):
    """a.Gone is missing; a.Slow fails only after a.Gone was reported.

    The sibling failure settles the parent before the error is raised.
    """

    def __init__(self, error: BaseException) -> None:
        self._error = error
        self._slow_started = threading.Event()
        self._gone_reported = threading.Event()

    def locate(
        self,
        type_name: str,
        archives: Sequence[str | os.PathLike[str]],
    ) -> bytes | None:
        match type_name:
            case "a.Gone":
                self._slow_started.wait(timeout=5)
                self._gone_reported.set()
                return None
            case "a.Slow":
                self._slow_started.set()
                self._gone_reported.wait(timeout=5)
                time.sleep(0.2)
                raise self._error
            case _:
                return type_name.encode()


class TestErrorPropagation:
    """Errors raised by any task reach the caller, whatever the verdict."""

    GRAPH: Mapping[str, Sequence[str]] = {"a.App": ["a.Gone", "a.Slow"]}

    @pytest.mark.parametrize("fail_fast", [False, True])
    def test_unreadable_archive_after_sibling_missing(self, fail_fast: bool) -> None:
        """A missing sibling does not hide an unusable archive."""
        checker = DependencyChecker(
            config=CheckerConfig(fail_fast=fail_fast, max_workers=4),
            source=RacingSource(ArchiveUnreadableError("slow.jar", "corrupt archive")),
            extractor=GraphExtractor(self.GRAPH),
        )

        with pytest.raises(ArchiveUnreadableError, match="slow.jar"):
            checker.check("a.App", ["x.jar"])

    @pytest.mark.parametrize("fail_fast", [False, True])
    def test_child_error_after_sibling_missing(self, fail_fast: bool) -> None:
        checker = DependencyChecker(
            config=CheckerConfig(fail_fast=fail_fast, max_workers=4),
            source=RacingSource(RuntimeError("boom")),
            extractor=GraphExtractor(self.GRAPH),
        )

        with pytest.raises(RuntimeError, match="boom"):
            checker.check("a.App", ["x.jar"])


class TestReferenceNormalization:
    """Extractor output is normalized before filtering and dedup."""

    def test_internal_and_array_names_collapse(self) -> None:
        graph = {"a.App": ["a/Helper", "[La/Helper;", "a.Helper"], "a.Helper": []}
        source = GraphSource(graph)
        checker = DependencyChecker(source=source, extractor=GraphExtractor(graph))

        result = checker.check("a.App", ["x.jar"])

        assert result.resolved is True
        assert result.dependencies == {"a.Helper"}
        assert sorted(source.lookups) == ["a.App", "a.Helper"]

    def test_runtime_array_filtered(self) -> None:
        graph = {"a.App": ["[Ljava/lang/String;", "java/util/List"]}
        source = GraphSource(graph)
        checker = DependencyChecker(source=source, extractor=GraphExtractor(graph))

        result = checker.check("a.App", ["x.jar"])

        assert result.resolved is True
        assert result.dependencies == frozenset()
        assert source.lookups == ["a.App"]


class TestDependencyCheckerInit:
    """Tests for DependencyChecker construction."""

    def test_default_config(self) -> None:
        assert DependencyChecker().config == CheckerConfig()

    def test_custom_config(self) -> None:
        config = CheckerConfig(max_workers=3)
        assert DependencyChecker(config=config).config is config
