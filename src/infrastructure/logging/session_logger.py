"""Per-run markdown logger."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional


class SessionLogger:
    """
    Logger that saves each step of a run to its own markdown file.
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        """
        Initialize the logger.

        Args:
            base_dir: Base directory for logs. Defaults to 'logs' in the root.
        """
        if base_dir:
            self.base_dir = Path(base_dir)
        else:
            self.base_dir = Path(__file__).parent.parent.parent.parent / "logs"

        self.session_dir: Optional[Path] = None
        self.step_counter: int = 0

    def start_session(self, run_id: str, url: str) -> str:
        """
        Start a new session by creating a directory for the run.

        Returns:
            Path of the session directory.
        """
        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        self.session_dir = self.base_dir / f"{timestamp}_{run_id}"
        self.session_dir.mkdir(parents=True, exist_ok=True)
        self.step_counter = 0

        metadata_content = f"""# Run: {run_id}

- **URL**: {url}
- **Started at**: {datetime.now().isoformat()}

---

"""
        (self.session_dir / "00_Metadata.md").write_text(metadata_content, encoding="utf-8")
        return str(self.session_dir)

    def log_step(
        self,
        step_name: str,
        status: str,
        summary: Optional[dict[str, Any]] = None,
        error: Optional[dict[str, Any]] = None,
        execution_time_ms: Optional[float] = None,
    ) -> None:
        """
        Log one step's outcome to a markdown file.

        Args:
            step_name: Name of the step.
            status: Final step status.
            summary: Bounded step summary (optional).
            error: Error envelope if the step failed (optional).
            execution_time_ms: Execution time in milliseconds (optional).
        """
        if self.session_dir is None:
            raise RuntimeError("Session not started. Call start_session() first.")

        self.step_counter += 1
        filepath = self.session_dir / f"{self.step_counter:02d}_{step_name}.md"

        content = f"# {step_name}\n\n**Status**: {status}\n\n"
        content += f"**Execution Time**: {execution_time_ms:.2f} ms\n\n" if execution_time_ms else ""
        content += f"**Timestamp**: {datetime.now().isoformat()}\n\n"

        if summary:
            content += f"## Summary\n\n```json\n{json.dumps(summary, indent=2, ensure_ascii=False, default=str)}\n```\n\n"
        if error:
            content += f"## Error\n\n```json\n{json.dumps(error, indent=2, ensure_ascii=False)}\n```\n"

        filepath.write_text(content, encoding="utf-8")

    def end_session(self, success: bool, errors: Optional[list[str]] = None) -> None:
        """Write the run outcome and end the current session."""
        if self.session_dir is not None:
            lines = [f"# Outcome\n\n**Success**: {success}\n"]
            for err in errors or []:
                lines.append(f"- {err}")
            (self.session_dir / "99_Outcome.md").write_text("\n".join(lines) + "\n", encoding="utf-8")
        self.session_dir = None
        self.step_counter = 0
