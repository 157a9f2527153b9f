"""Module listing renderers."""

import io
import json
from abc import ABC, abstractmethod

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from sbom_parsers.graph import walk
from sbom_parsers.meta import Package
from sbom_parsers.registry import ModuleReport


class ReportGenerator(ABC):
    """Abstract base class for report generators."""

    @abstractmethod
    def generate(self, report: ModuleReport) -> str:
        """Generate a report from a module listing.

        Args:
            report: The modules to report.

        Returns:
            Formatted report as a string.
        """
        pass


class JSONReporter(ReportGenerator):
    """Generate JSON format reports."""

    def __init__(self, indent: int = 2, flat: bool = False) -> None:
        """Initialize JSON reporter.

        Args:
            indent: JSON indentation level.
            flat: Emit the flat module list instead of the root's tree.
        """
        self.indent = indent
        self.flat = flat

    def generate(self, report: ModuleReport) -> str:
        """Generate JSON report."""
        data = {"manager": report.manager}
        if self.flat or report.root.is_empty():
            data["modules"] = [module.to_dict(nested=False) for module in report.modules]
        else:
            data["root"] = report.root.to_dict()
        return json.dumps(data, indent=self.indent)


class TableReporter(ReportGenerator):
    """Render modules as a rich tree, or a table when flat."""

    def __init__(self, flat: bool = False) -> None:
        self.flat = flat
        self.console = Console(record=True, file=io.StringIO(), width=120)

    def generate(self, report: ModuleReport) -> str:
        """Generate table report."""
        if self.flat or report.root.is_empty():
            self.console.print(self._table(report))
        else:
            self.console.print(self._tree(report.root))
            self.console.print(
                f"\n[bold]{count_nodes(report.root)}[/bold] packages reachable from "
                f"{report.root.name}"
            )

        self.console.print(
            f"\n[bold]{len(report.modules)}[/bold] modules found by {report.manager}"
        )
        return self.console.export_text()

    def _table(self, report: ModuleReport) -> Table:
        table = Table(title=f"Modules ({report.manager})")
        table.add_column("Name", style="cyan")
        table.add_column("Version")
        table.add_column("License")
        table.add_column("Dependencies", justify="right")
        for module in report.modules:
            name = f"[bold]{module.name}[/bold]" if module.root else module.name
            table.add_row(
                name,
                module.version,
                module.license_declared or "-",
                str(len(module.packages)),
            )
        return table

    def _tree(self, root: Package) -> Tree:
        tree = Tree(_label(root))
        expanded: set[int] = set()

        def add(node: Tree, package: Package) -> None:
            # A package pulled in by several parents is expanded once
            expanded.add(id(package))
            for dep_name in sorted(package.packages):
                dep = package.packages[dep_name]
                if id(dep) in expanded:
                    node.add(f"{_label(dep)} [dim](see above)[/dim]")
                    continue
                add(node.add(_label(dep)), dep)

        add(tree, root)
        return tree


def _label(package: Package) -> str:
    version = f"@{package.version}" if package.version else ""
    return f"{package.name}{version}"


def count_nodes(root: Package) -> int:
    """Number of unique packages in the tree under ``root``."""
    return sum(1 for _ in walk(root))


def create_reporter(format: str, flat: bool = False) -> ReportGenerator:
    """Create a reporter for the specified format.

    Args:
        format: Output format ('json' or 'table').
        flat: Render the flat module list instead of the dependency tree.

    Returns:
        Appropriate reporter instance.
    """
    if format == "json":
        return JSONReporter(flat=flat)
    elif format == "table":
        return TableReporter(flat=flat)
    else:
        raise ValueError(f"Unknown format: {format}")
