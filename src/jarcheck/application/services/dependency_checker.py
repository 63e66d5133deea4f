"""Class-path sufficiency check.

DependencyChecker is the primary entry point: it walks the transitive
reference graph of an entry class over a set of jar archives and decides
whether every non-runtime class can be located.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import TYPE_CHECKING

from jarcheck.domain.exceptions.classfile import MalformedClassError
from jarcheck.domain.model.check_result import CheckResult
from jarcheck.domain.model.configuration import CheckerConfig
from jarcheck.domain.model.node_failure import FailureKind, NodeFailure
from jarcheck.domain.model.type_name import normalize_type_name
from jarcheck.domain.model.visit_table import VisitTable
from jarcheck.infrastructure.archives.indexed_source import IndexedClassSource
from jarcheck.infrastructure.archives.jar_source import JarClassSource
from jarcheck.infrastructure.classfile.extractor import BytecodeReferenceExtractor

if TYPE_CHECKING:
    from jarcheck.domain.ports.class_source import ClassSourcePort
    from jarcheck.domain.ports.reference_extractor import ReferenceExtractorPort
    from jarcheck.domain.predicates.runtime import RuntimeFilter

logger = logging.getLogger(__name__)


class DependencyChecker:
    """Decides whether archives satisfy an entry class's dependencies.

    Composition-based: accepts class source and extractor as dependencies.
    Every check() gets a fresh VisitTable and worker pool; nothing is
    shared between calls, so one checker may be reused.

    Example:
        checker = DependencyChecker()
        result = checker.check("com.acme.Main", ["app.jar", "lib.jar"])
        if not result.resolved:
            print(f"Missing: {sorted(result.missing)}")
    """

    def __init__(
        self,
        *,
        config: CheckerConfig | None = None,
        source: ClassSourcePort | None = None,
        extractor: ReferenceExtractorPort | None = None,
    ) -> None:
        """Initialize checker.

        Args:
            config: Checker configuration. Uses defaults if None.
            source: Class lookup. Jar source (indexed per config) if None.
            extractor: Reference extraction. Bytecode extractor if None.
        """
        self._config = config or CheckerConfig()
        self._filter = self._config.runtime_filter

        if source is None:
            source = IndexedClassSource() if self._config.index_archives else JarClassSource()
        self._source = source
        self._extractor = extractor or BytecodeReferenceExtractor(self._filter)

    @property
    def config(self) -> CheckerConfig:
        """Active configuration."""
        return self._config

    def check(
        self,
        entry_class_name: str,
        archives: Sequence[str | os.PathLike[str]],
    ) -> CheckResult:
        """Run the check.

        Args:
            entry_class_name: Fully qualified entry class (dotted or internal)
            archives: Archive locations, searched in order

        Returns:
            CheckResult with verdict and collected dependencies

        Raises:
            ValueError: If entry_class_name or archives is empty
            ArchiveUnreadableError: If an archive cannot be opened or read
        """
        if not entry_class_name:
            raise ValueError("entry_class_name must not be empty")
        if not archives:
            raise ValueError("archives must not be empty")

        entry = normalize_type_name(entry_class_name)
        archive_paths = tuple(os.fspath(a) for a in archives)

        if self._filter(entry):
            logger.info("%s is a runtime class, nothing to check", entry)
            return CheckResult.runtime_only(entry, archive_paths)

        started = time.perf_counter()
        table = VisitTable()
        table.claim(entry)

        traversal = _Traversal(
            source=self._source,
            extractor=self._extractor,
            runtime_filter=self._filter,
            archives=archive_paths,
            table=table,
            config=self._config,
        )
        resolved = traversal.run(entry)
        snapshot = table.freeze()
        elapsed = time.perf_counter() - started

        logger.info(
            "%s: %s (%d classes visited, %d failed, %.3fs)",
            entry,
            "resolved" if resolved else "unresolved",
            len(snapshot.visited),
            len(snapshot.failures),
            elapsed,
        )

        return CheckResult(
            entry=entry,
            archives=archive_paths,
            resolved=resolved,
            visited=snapshot.visited,
            dependencies=snapshot.dependencies,
            references=snapshot.references,
            failures=snapshot.failures,
            elapsed=elapsed,
        )


def check_dependencies(
    entry_class_name: str,
    archives: Sequence[str | os.PathLike[str]],
    config: CheckerConfig | None = None,
) -> bool:
    """Check whether archives contain everything entry_class_name needs.

    Args:
        entry_class_name: Fully qualified entry class
        archives: Archive locations, searched in order
        config: Checker configuration. Uses defaults if None.

    Returns:
        True if every transitively referenced non-runtime class was found

    Raises:
        ArchiveUnreadableError: If an archive cannot be opened or read
    """
    return DependencyChecker(config=config).check(entry_class_name, archives).resolved


class _Traversal:
    """One fork-join exploration. Lives for a single check() call.

    Each node is a Future[bool]. A worker expands its node (locate,
    extract, filter), claims unvisited children in the shared table and
    dispatches them; a _Join completes the node once all children have.
    Workers never wait on other workers, so a bounded pool cannot deadlock.
    """

    def __init__(
        self,
        *,
        source: ClassSourcePort,
        extractor: ReferenceExtractorPort,
        runtime_filter: RuntimeFilter,
        archives: tuple[str, ...],
        table: VisitTable,
        config: CheckerConfig,
    ) -> None:
        self._source = source
        self._extractor = extractor
        self._filter = runtime_filter
        self._archives = archives
        self._table = table
        self._fail_fast = config.fail_fast
        self._executor = ThreadPoolExecutor(
            max_workers=config.max_workers,
            thread_name_prefix="jarcheck",
        )
        # Set once any task raised: remaining tasks skip their work
        self._aborted = threading.Event()
        # First exception raised by any task; wins over a false verdict
        self._error: BaseException | None = None
        # Submitted tasks not yet finished; guarded by _idle
        self._pending = 0
        self._idle = threading.Condition()

    def run(self, entry: str) -> bool:
        """Explore from an already claimed entry class and return the verdict.

        Returns only after every started task has finished, so an error
        raised anywhere in the graph reaches the caller even when another
        branch already made the verdict false.

        Raises:
            ArchiveUnreadableError: If any archive is unusable
        """
        try:
            root = self._dispatch(entry)
            try:
                resolved = root.result()
            except BaseException:
                self._aborted.set()
                raise
            finally:
                if self._fail_fast:
                    # Queued tasks are cancelled, running ones still finish
                    self._executor.shutdown(wait=False, cancel_futures=True)
                self._wait_idle()

            if self._error is not None:
                raise self._error
            return resolved
        finally:
            self._executor.shutdown(wait=True)

    def _dispatch(self, type_name: str) -> Future[bool]:
        """Schedule exploration of a claimed class."""
        node: Future[bool] = Future()
        with self._idle:
            self._pending += 1

        try:
            task = self._executor.submit(self._visit, type_name, node)
        except RuntimeError as e:
            # Executor already shut down (fail-fast return) or interpreter exiting
            self._fail(node, NodeFailure(type_name, FailureKind.SCHEDULING, str(e)))
            self._task_finished()
            return node

        task.add_done_callback(partial(self._on_task_done, type_name, node))
        return node

    def _visit(self, type_name: str, node: Future[bool]) -> None:
        """Worker body: expand one class and fan out to its children."""
        if self._aborted.is_set():
            _settle(node, False)
            return

        logger.debug("Visiting %s", type_name)
        children = self._expand(type_name)
        if children is None:
            _settle(node, False)
        elif not children:
            _settle(node, True)
        else:
            _Join(node, [self._dispatch(child) for child in children])

    def _expand(self, type_name: str) -> list[str] | None:
        """Locate, parse and filter one class.

        Returns:
            Newly claimed children to dispatch, or None if the class failed
        """
        data = self._source.locate(type_name, self._archives)
        if data is None:
            logger.warning("Class %s not found in any archive", type_name)
            self._table.record_failure(
                NodeFailure(type_name, FailureKind.NOT_FOUND, "not found in any archive")
            )
            return None

        try:
            references = self._extractor.extract(data)
        except MalformedClassError as e:
            logger.warning("Cannot parse %s: %s", type_name, e.reason)
            self._table.record_failure(
                NodeFailure(type_name, FailureKind.MALFORMED_CLASS, e.reason)
            )
            return None

        # Extractors may hand back internal names or array descriptors
        normalized = {normalize_type_name(ref) for ref in references}
        dependencies = sorted(
            ref for ref in normalized if ref != type_name and not self._filter(ref)
        )
        self._table.add_references(type_name, dependencies)
        return [ref for ref in dependencies if self._table.claim(ref)]

    def _on_task_done(self, type_name: str, node: Future[bool], task: Future[None]) -> None:
        """Settle nodes whose task never ran or raised, then update accounting."""
        try:
            if task.cancelled():
                self._fail(node, NodeFailure(type_name, FailureKind.SCHEDULING, "task cancelled"))
            elif (error := task.exception()) is not None:
                self._record_error(error)
                # _visit raises only before it settles its node
                _settle(node, error)
        finally:
            self._task_finished()

    def _record_error(self, error: BaseException) -> None:
        with self._idle:
            if self._error is None:
                self._error = error
        self._aborted.set()

    def _fail(self, node: Future[bool], failure: NodeFailure) -> None:
        log = logger.debug if self._fail_fast else logger.warning
        log("Could not schedule %s: %s", failure.type_name, failure.reason)
        self._table.record_failure(failure)
        _settle(node, False)

    def _task_finished(self) -> None:
        with self._idle:
            self._pending -= 1
            if self._pending == 0:
                self._idle.notify_all()

    def _wait_idle(self) -> None:
        with self._idle:
            self._idle.wait_for(lambda: self._pending == 0)


class _Join:
    """Completes a parent node once all of its children have.

    The parent fails on the first failing child. Siblings already
    dispatched keep running; their outcomes no longer affect this node, and
    their exceptions reach the caller through _Traversal._record_error.
    """

    __slots__ = ("_lock", "_node", "_remaining", "_settled")

    def __init__(self, node: Future[bool], children: list[Future[bool]]) -> None:
        self._node = node
        self._remaining = len(children)
        self._settled = False
        self._lock = threading.Lock()
        for child in children:
            child.add_done_callback(self._child_done)

    def _child_done(self, child: Future[bool]) -> None:
        error = child.exception()
        with self._lock:
            if self._settled:
                return
            self._remaining -= 1
            if error is not None:
                outcome: bool | BaseException = error
            elif not child.result():
                outcome = False
            elif self._remaining == 0:
                outcome = True
            else:
                return
            self._settled = True
        _settle(self._node, outcome)


_settling = threading.local()


def _settle(node: Future[bool], outcome: bool | BaseException) -> None:
    """Complete a node future without recursing through its ancestors.

    Completing a node runs its parent's _Join callback, which may complete
    the parent, and so on up the tree. Outcomes produced while a thread is
    already settling are queued and drained iteratively, so deep reference
    chains cannot exhaust the interpreter stack.
    """
    queue: list[tuple[Future[bool], bool | BaseException]] | None = getattr(
        _settling, "queue", None
    )
    if queue is not None:
        queue.append((node, outcome))
        return

    _settling.queue = queue = [(node, outcome)]
    try:
        while queue:
            target, result = queue.pop()
            if isinstance(result, BaseException):
                target.set_exception(result)
            else:
                target.set_result(result)
    finally:
        _settling.queue = None
