import concurrent.futures
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from lcat.common import L, bus
from lcat.config import LcatConfig
from lcat.lang.lua import LuaCommentScanner
from lcat.render import MarkdownRenderer
from lcat.spec import (
    CommentScannerProtocol,
    Diagnostic,
    DocIndex,
    DocRendererProtocol,
    DocumentedFile,
)

from .processor import FileProcessor

log = logging.getLogger(__name__)

SOURCE_SUFFIX = ".lua"


@dataclass
class RunResult:
    files: List[DocumentedFile] = field(default_factory=list)
    # Paths that could not be read, with the reason.
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def diagnostic_count(self) -> int:
        return sum(len(f.diagnostics) for f in self.files)

    @property
    def index(self) -> DocIndex:
        return DocIndex.from_files(self.files)


class LcatApp:
    def __init__(
        self,
        config: LcatConfig,
        scanner: Optional[CommentScannerProtocol] = None,
        processor: Optional[FileProcessor] = None,
    ):
        self.config = config
        self.root_path = config.root_path
        self.scanner = scanner or LuaCommentScanner()
        self.processor = processor or FileProcessor()

    # --- Discovery ---

    def discover_files(self) -> List[Path]:
        """
        Every `.lua` file below `directory` plus every explicit entry of
        `files`, in that order and without duplicates.
        """
        found: List[Path] = []
        if self.config.directory:
            source_dir = self.root_path / self.config.directory
            if source_dir.is_dir():
                found.extend(sorted(source_dir.rglob(f"*{SOURCE_SUFFIX}")))
            else:
                bus.warning(L.discovery.missing_dir, path=self.config.directory)

        for entry in self.config.files:
            found.append(self.root_path / entry)

        unique: Dict[Path, None] = {}
        for path in found:
            unique.setdefault(path.resolve(), None)
        return list(unique)

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.root_path.resolve()).as_posix()
        except ValueError:
            return path.as_posix()

    # --- Parsing ---

    def parse_file(self, path: Path) -> DocumentedFile:
        source = path.read_text(encoding="utf-8")
        relative_path = self._relative(path)
        blocks = self.scanner.scan(source)
        log.debug(f"{relative_path}: {len(blocks)} comment blocks")
        return self.processor.process(blocks, relative_path)

    def parse_all(self, paths: List[Path]) -> RunResult:
        result = RunResult()
        parsed: Dict[Path, DocumentedFile] = {}
        jobs = max(1, self.config.jobs)

        if jobs == 1 or len(paths) < 2:
            for path in paths:
                try:
                    parsed[path] = self.parse_file(path)
                except (OSError, UnicodeDecodeError) as e:
                    self._record_failure(result, path, e)
        else:
            with concurrent.futures.ThreadPoolExecutor(max_workers=jobs) as executor:
                futures = {executor.submit(self.parse_file, p): p for p in paths}
                for future in concurrent.futures.as_completed(futures):
                    path = futures[future]
                    try:
                        parsed[path] = future.result()
                    except (OSError, UnicodeDecodeError) as e:
                        self._record_failure(result, path, e)

        # Completion order is arbitrary; keep discovery order.
        result.files = [parsed[p] for p in paths if p in parsed]
        return result

    def _record_failure(self, result: RunResult, path: Path, error: Exception) -> None:
        relative_path = self._relative(path)
        log.debug(f"Could not read {relative_path}: {error}")
        result.failures[relative_path] = str(error)
        bus.error(L.error.read_failed, path=relative_path, error=error)

    # --- Reporting ---

    def _report_diagnostic(self, path: str, diagnostic: Diagnostic) -> None:
        msg_id = getattr(L.diagnostic, diagnostic.kind.value.replace("-", "_"))
        bus.warning(
            msg_id,
            path=path,
            line=diagnostic.line if diagnostic.line is not None else "?",
            message=diagnostic.message,
        )

    def _report_files(self, result: RunResult) -> None:
        for documented in result.files:
            for diagnostic in documented.diagnostics:
                self._report_diagnostic(documented.path, diagnostic)
            if documented.suppressed_from is not None:
                bus.info(
                    L.file.suppressed,
                    path=documented.path,
                    line=documented.suppressed_from,
                )

    # --- Runs ---

    def run_build(
        self,
        output_dir: Optional[Path] = None,
        renderer: Optional[DocRendererProtocol] = None,
    ) -> bool:
        paths = self.discover_files()
        if not paths:
            bus.warning(L.build.no_sources)
            return False

        result = self.parse_all(paths)
        self._report_files(result)

        out_dir = output_dir or self.config.output_path
        renderer = renderer or MarkdownRenderer(out_dir, self.config.base_url)
        index = result.index
        written = renderer.render(index)

        bus.success(
            L.build.summary,
            files=len(result.files),
            classes=len(index.classes),
            aliases=len(index.aliases),
            enums=len(index.enums),
            functions=len(index.functions),
            pages=len(written),
            output=out_dir,
        )
        if result.diagnostic_count:
            bus.warning(L.build.diagnostics, count=result.diagnostic_count)
        return not result.failures

    def run_check(self, strict: Optional[bool] = None) -> bool:
        strict = self.config.strict if strict is None else strict
        paths = self.discover_files()
        if not paths:
            bus.warning(L.build.no_sources)
            return False

        result = self.parse_all(paths)
        self._report_files(result)

        count = result.diagnostic_count
        if result.failures:
            bus.error(L.check.run.fail, count=len(result.failures))
            return False
        if count == 0:
            bus.success(L.check.run.success, files=len(result.files))
            return True
        if strict:
            bus.error(L.check.run.strict_fail, count=count)
            return False
        bus.success(L.check.run.success_with_warnings, count=count)
        return True
