"""Project scaffolding for `tako new` and `tako init`.

A new project looks like:

    <name>/
    ├── .cargo/config.toml   # rust-lld linker for tbpf-tos-tos
    ├── .gitignore
    ├── Cargo.toml
    ├── README.md
    └── src/lib.rs
"""

import logging
from pathlib import Path
from typing import Optional

from tako.build.process_runner import ProcessRunner, SubprocessRunner
from tako.cli_utils import ErrorFormatter
from tako.errors import ProjectExistsError, TakoError
from tako.project.templates import DEFAULT_TEMPLATE, get_template, process_template

logger = logging.getLogger(__name__)

# No default build target here, so `cargo test` keeps using the host
CARGO_CONFIG = """# TAKO Contract Build Configuration
#
# For development and testing:
#   cargo test                    # Run tests with native target
#
# For TBPF deployment build:
#   tako build --release          # Build with tbpfv3-tos-tos target
#   cargo build --target tbpf-tos-tos --release

[target.tbpf-tos-tos]
linker = "rust-lld"
"""

GITIGNORE = "target/\n*.log\n*.so\nCargo.lock\n"


def write_file(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class ProjectScaffolder:
    """Creates contract projects from templates."""

    def __init__(self, runner: Optional[ProcessRunner] = None):
        self.runner = runner if runner is not None else SubprocessRunner()

    def create_new_project(
        self,
        name: str,
        path: Optional[Path] = None,
        template: str = DEFAULT_TEMPLATE,
    ) -> Path:
        """Create a new project directory.

        Args:
            name: Project name (also the directory name)
            path: Parent directory (default: current directory)
            template: Template name

        Returns:
            Path to the new project root

        Raises:
            ProjectExistsError: If the directory already exists
            InvalidTemplateError: If the template is unknown
        """
        project_root = (Path(path) if path else Path.cwd()) / name
        if project_root.exists():
            raise ProjectExistsError(name)

        # Validate before touching the filesystem
        tmpl = get_template(template)

        project_root.mkdir(parents=True)
        write_file(project_root / "Cargo.toml", process_template(tmpl.cargo_toml, name))
        write_file(project_root / "src" / "lib.rs", process_template(tmpl.lib_rs, name))
        write_file(project_root / "README.md", process_template(tmpl.readme, name))
        write_file(project_root / ".cargo" / "config.toml", CARGO_CONFIG)
        write_file(project_root / ".gitignore", GITIGNORE)
        logger.debug(f"Scaffolded {template} template into {project_root}")

        self._check_project(project_root)
        return project_root

    def _check_project(self, project_root: Path) -> None:
        """Run `cargo check`; problems are reported as warnings only."""
        print("Verifying project...")
        try:
            result = self.runner.run(["cargo", "check"], cwd=project_root, echo=False)
        except OSError as e:
            ErrorFormatter.print_warning(f"Could not run cargo check: {e}")
            return

        if result.success:
            print("✓ Project verified successfully")
        else:
            ErrorFormatter.print_warning(f"cargo check failed:\n{result.stderr}")

    def init_current_project(
        self, template: str = DEFAULT_TEMPLATE, project_dir: Optional[Path] = None
    ) -> Path:
        """Add a contract template to an existing cargo project.

        Returns:
            Path to the written src/lib.rs

        Raises:
            TakoError: If Cargo.toml is missing or src/lib.rs already exists
            InvalidTemplateError: If the template is unknown
        """
        current_dir = Path(project_dir) if project_dir else Path.cwd()

        if not (current_dir / "Cargo.toml").exists():
            raise TakoError(
                "No Cargo.toml found in current directory. Use 'tako new' instead."
            )

        lib_rs_path = current_dir / "src" / "lib.rs"
        if lib_rs_path.exists():
            raise TakoError("src/lib.rs already exists. Remove it or use a fresh project.")

        tmpl = get_template(template)
        project_name = current_dir.resolve().name or "my-contract"

        write_file(current_dir / ".cargo" / "config.toml", CARGO_CONFIG)
        write_file(lib_rs_path, process_template(tmpl.lib_rs, project_name))
        return lib_rs_path
