"""Cobertura XML exporter.

Document shape (one package per module, one class per file):

<coverage line-rate="0.75" branch-rate="0" ... timestamp="1700000000" version="0">
  <sources>
    <source>/</source>
  </sources>
  <packages>
    <package name="Module" line-rate="0.75" branch-rate="0" complexity="0">
      <classes>
        <class name="File" filename="File" line-rate="0.5" branch-rate="0" complexity="0">
          <methods/>
          <lines>
            <line number="1" hits="1"/>
            <line number="2" hits="0"/>
          </lines>
        </class>
      </classes>
    </package>
  </packages>
</coverage>

Branch data is not collected, so branch attributes are always zero.
"""

import contextlib
import os
import re
import time
import xml.etree.ElementTree as ET
from pathlib import Path, PurePath
from typing import TextIO
from uuid import uuid4

from covscope.config.models import ExportConfig
from covscope.core.errors import ExportError
from covscope.core.logging import get_logger, run_scope
from covscope.coverage.models import CoverageData, FileCoverage, ModuleCoverage

log = get_logger(__name__)


def _format_rate(rate: float) -> str:
    return format(rate, "g")


# Anything outside the XML 1.0 Char production: C0 controls other than tab,
# LF and CR, lone surrogates (undecodable file name bytes on POSIX), U+FFFE
# and U+FFFF.
_INVALID_XML_CHARS = re.compile("[^\t\n\r\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def _xml_text(text: str) -> str:
    """Replace characters an XML document cannot hold with U+FFFD."""
    cleaned = _INVALID_XML_CHARS.sub("\ufffd", text)
    if cleaned != text:
        log.warning("invalid_xml_chars_replaced", original=repr(text), written=cleaned)
    return cleaned


class CoberturaExporter:
    """Writes a CoverageData tree as a Cobertura XML document."""

    def __init__(self, config: ExportConfig | None = None) -> None:
        self._config = config or ExportConfig()

    def build_tree(self, coverage: CoverageData) -> ET.Element:
        """Build the <coverage> element for a tree. Pure read of `coverage`."""
        root = ET.Element(
            "coverage",
            {
                "line-rate": _format_rate(coverage.line_rate),
                "branch-rate": "0",
                "complexity": "0",
                "branches-covered": "0",
                "branches-valid": "0",
                "timestamp": str(int(time.time())),
                "lines-covered": str(coverage.lines_hit),
                "lines-valid": str(coverage.lines_found),
                "version": "0",
            },
        )

        sources = ET.SubElement(root, "sources")
        for anchor in self._source_anchors(coverage):
            ET.SubElement(sources, "source").text = _xml_text(anchor)

        packages = ET.SubElement(root, "packages")
        for module in coverage.modules:
            self._add_package(packages, module)
        return root

    def _source_anchors(self, coverage: CoverageData) -> list[str]:
        # Distinct roots (e.g. "/" or "C:\") of absolute file paths, in order.
        anchors: dict[str, None] = {}
        for file_coverage in coverage.iter_files():
            path = PurePath(file_coverage.path)
            if path.is_absolute():
                anchors.setdefault(path.anchor, None)
        return list(anchors)

    def _add_package(self, packages: ET.Element, module: ModuleCoverage) -> None:
        package = ET.SubElement(
            packages,
            "package",
            {
                "name": _xml_text(module.name),
                "line-rate": _format_rate(module.line_rate),
                "branch-rate": "0",
                "complexity": "0",
            },
        )
        classes = ET.SubElement(package, "classes")
        for file_coverage in module.files:
            self._add_class(classes, file_coverage)

    def _add_class(self, classes: ET.Element, file_coverage: FileCoverage) -> None:
        path = _xml_text(file_coverage.path)
        cls = ET.SubElement(
            classes,
            "class",
            {
                "name": path,
                "filename": path,
                "line-rate": _format_rate(file_coverage.line_rate),
                "branch-rate": "0",
                "complexity": "0",
            },
        )
        ET.SubElement(cls, "methods")
        lines = ET.SubElement(cls, "lines")
        for line in file_coverage.iter_lines():
            ET.SubElement(lines, "line", {"number": str(line.number), "hits": str(line.hits)})

    def to_string(self, coverage: CoverageData) -> str:
        """Render the whole document, XML declaration included."""
        root = self.build_tree(coverage)
        if self._config.indent:
            ET.indent(root, space=self._config.indent)
        body = ET.tostring(root, encoding="unicode")
        return f'<?xml version="1.0" encoding="{self._config.encoding}"?>\n{body}\n'

    def export(self, coverage: CoverageData, output: TextIO | str | os.PathLike[str]) -> None:
        """Export to a writable text stream or to a file path.

        Streams are written to and left open. Paths get their missing parent
        directories created and any existing file replaced.

        Raises:
            ExportError: If the path cannot be written.
        """
        with run_scope():
            if isinstance(output, (str, os.PathLike)):
                self.export_to_path(coverage, output)
            else:
                output.write(self.to_string(coverage))

    def export_to_path(self, coverage: CoverageData, output: str | os.PathLike[str]) -> Path:
        """Write the document to `output` atomically.

        The document goes to a temporary file next to the target which then
        replaces it, so a failed export never leaves a truncated report.
        """
        raw = os.fspath(output)
        path = Path(raw)
        if raw.endswith(("/", os.sep)) or path.is_dir():
            raise ExportError.invalid_output_file(path, "path is a directory")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExportError.invalid_output_file(path, str(e)) from e

        document = self.to_string(coverage)
        tmp_path = path.with_name(f".{path.name}.{uuid4().hex[:8]}.tmp")
        try:
            with tmp_path.open(
                "x", encoding=self._config.encoding, errors="xmlcharrefreplace", newline="\n"
            ) as f:
                f.write(document)
            os.replace(tmp_path, path)
        except OSError as e:
            with contextlib.suppress(OSError):
                tmp_path.unlink()
            raise ExportError.invalid_output_file(path, str(e)) from e

        log.info(
            "cobertura_exported",
            path=str(path),
            modules=len(coverage.modules),
            lines_valid=coverage.lines_found,
        )
        return path


def export_cobertura(
    coverage: CoverageData,
    output: TextIO | str | os.PathLike[str],
    config: ExportConfig | None = None,
) -> None:
    """Export a coverage tree as Cobertura XML. See CoberturaExporter.export."""
    CoberturaExporter(config).export(coverage, output)
