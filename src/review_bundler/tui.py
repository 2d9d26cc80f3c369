from __future__ import annotations

import threading
from pathlib import Path

from textual import on
from textual.app import App, ComposeResult
from textual.containers import Container, VerticalScroll
from textual.widgets import (
    Button,
    Footer,
    Header,
    Input,
    Label,
    Log,
    Markdown,
    ProgressBar,
    Static,
)
from textual.worker import Worker, WorkerState

from review_bundler.config import configure_logging, get_settings
from review_bundler.models import (
    BundleResult,
    ProcessingRun,
    RunEvent,
    RunStatus,
    ValidationError,
)
from review_bundler.services import build_download_name, bundle_archive, inspect_archive
from review_bundler.services.archive_reader import detect_archive_kind
from review_bundler.services.config_loader import is_json_upload
from review_bundler.tui_rendering import (
    render_group_details,
    render_inspection_markdown,
    render_log,
    render_stats_table,
)
from review_bundler.utils import prompt_for_archive_file, prompt_for_config_file


class ReviewBundlerTUI(App[None]):
    """Terminal UI for regrouping an archive into review bundles."""

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("p", "process", "Process"),
    ]

    CSS = """
Screen {
    layout: vertical;
    background: $background;
}

#middle {
    height: 1fr;
    layout: horizontal;
}

#sidebar {
    width: 30;
    padding: 1 2;
    border: heavy $primary;
    background: $panel;
}

#sidebar Button,
#sidebar Input {
    margin-top: 1;
    width: 100%;
}

#title {
    text-align: center;
    margin-bottom: 1;
    color: $text;
}

#main {
    border: heavy $primary;
    background: $surface;
    height: 1fr;
    layout: vertical;
}

#output-container {
    height: 2fr;
}

#processing-log {
    height: 1fr;
    border-top: solid $primary;
}

#statusbar {
    height: auto;
    padding: 1;
    border: heavy $primary;
    background: $panel;
    color: $text;
}

ProgressBar {
    dock: bottom;
    margin-top: 1;
}
"""

    def __init__(self) -> None:
        super().__init__()
        self._archive_path: Path | None = None
        self._config_path: Path | None = None
        self._result: BundleResult | None = None
        self._worker: Worker[tuple] | None = None
        self._run = ProcessingRun()
        self._run.subscribe(self._on_run_event)
        self._ui_thread: int | None = None

    def compose(self) -> ComposeResult:
        yield Header()

        yield Container(
            Container(
                Static("Review\nBundler", id="title"),
                Label("Archive: -", id="archive-label"),
                Button("Select Archive", id="btn-archive", variant="primary"),
                Label("Config: -", id="config-label"),
                Button("Select Config", id="btn-config", variant="primary"),
                Button("Process Files", id="btn-process", variant="success", disabled=True),
                Input(placeholder="Batch identifier", id="batch-id"),
                Button("Save Bundle", id="btn-save", variant="default", disabled=True),
                Button("Exit", id="btn-exit", variant="error"),
                id="sidebar",
            ),
            Container(
                VerticalScroll(Markdown("", id="output"), id="output-container"),
                Log(id="processing-log", highlight=False),
                id="main",
            ),
            id="middle",
        )

        yield Container(
            Label("Select an archive and a JSON configuration.", id="status"),
            ProgressBar(total=100, id="progress"),
            id="statusbar",
        )

        yield Footer()

    # ---------------------------------------------------------------------
    # RUN CONTEXT
    # ---------------------------------------------------------------------

    def on_mount(self) -> None:
        self._ui_thread = threading.get_ident()

    def _on_run_event(self, event: RunEvent) -> None:
        if threading.get_ident() == self._ui_thread:
            self._apply_run_event(event)
        else:
            self.call_from_thread(self._apply_run_event, event)

    def _apply_run_event(self, event: RunEvent) -> None:
        if event.message is not None:
            self.query_one("#processing-log", Log).write_line(event.message)
        if event.status is not None:
            self._refresh_controls()

    @property
    def _busy(self) -> bool:
        if self._run.is_active:
            return True
        worker = self._worker
        return worker is not None and worker.name == "bundle" and not worker.is_finished

    def _refresh_controls(self) -> None:
        process_btn = self.query_one("#btn-process", Button)
        save_btn = self.query_one("#btn-save", Button)
        batch_id = self.query_one("#batch-id", Input).value

        ready = self._archive_path is not None and self._config_path is not None
        process_btn.disabled = not ready or self._busy
        save_btn.disabled = self._result is None or not batch_id.strip()

    # ---------------------------------------------------------------------
    # EVENTS
    # ---------------------------------------------------------------------

    @on(Button.Pressed, "#btn-archive")
    def handle_select_archive(self) -> None:
        status = self.query_one("#status", Label)
        if self._busy:
            status.update("Wait for processing to finish.")
            return
        selected = prompt_for_archive_file()
        if selected is None:
            status.update("No archive selected.")
            return
        try:
            detect_archive_kind(selected.name)
        except ValidationError as exc:
            status.update(str(exc))
            return

        self._archive_path = selected
        self._result = None
        self.query_one("#archive-label", Label).update(f"Archive: {selected.name}")
        self._run_inspect(selected)
        self._refresh_controls()

    @on(Button.Pressed, "#btn-config")
    def handle_select_config(self) -> None:
        status = self.query_one("#status", Label)
        selected = prompt_for_config_file()
        if selected is None:
            status.update("No configuration selected.")
            return
        if not is_json_upload(selected.name):
            status.update("Please select a valid JSON file")
            return

        self._config_path = selected
        self._result = None
        self.query_one("#config-label", Label).update(f"Config: {selected.name}")
        status.update("Configuration selected.")
        self._refresh_controls()

    @on(Input.Changed, "#batch-id")
    def handle_batch_id_changed(self) -> None:
        self._refresh_controls()

    @on(Button.Pressed, "#btn-process")
    def handle_process(self) -> None:
        self.action_process()

    def action_process(self) -> None:
        status = self.query_one("#status", Label)
        if self._archive_path is None or self._config_path is None:
            status.update("Please upload both archive and JSON files.")
            return
        if self._busy:
            status.update("Processing is already running.")
            return
        self._run_bundle(self._archive_path, self._config_path)

    @on(Button.Pressed, "#btn-save")
    def handle_save(self) -> None:
        status = self.query_one("#status", Label)
        if self._result is None or self._archive_path is None:
            status.update("Nothing to save yet.")
            return

        batch_id = self.query_one("#batch-id", Input).value
        try:
            download_name = build_download_name(batch_id)
        except ValidationError as exc:
            status.update(str(exc))
            return

        output_dir = get_settings().output_dir or self._archive_path.parent
        output_path = output_dir / download_name
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(self._result.archive_bytes)
        except OSError as exc:
            status.update(f"Could not save bundle: {exc}")
            return
        status.update(f"Saved {output_path}")

    @on(Button.Pressed, "#btn-exit")
    def exit_app(self) -> None:
        self.exit()

    # ---------------------------------------------------------------------
    # WORKER
    # ---------------------------------------------------------------------

    def _run_inspect(self, archive_path: Path) -> None:
        progress = self.query_one("#progress", ProgressBar)
        status = self.query_one("#status", Label)
        progress.update(progress=5)
        status.update("Reading archive...")

        def work() -> tuple[str, str]:
            inspection = inspect_archive(archive_path.read_bytes(), archive_path.name)
            return "inspect", render_inspection_markdown(inspection)

        self._worker = self.run_worker(
            work, name="inspect", exclusive=True, thread=True, exit_on_error=False
        )

    def _run_bundle(self, archive_path: Path, config_path: Path) -> None:
        progress = self.query_one("#progress", ProgressBar)
        self.query_one("#processing-log", Log).clear()
        progress.update(progress=5)
        self._result = None

        run = self._run

        def work() -> tuple[str, BundleResult]:
            result = bundle_archive(
                archive_path.read_bytes(),
                archive_path.name,
                config_path.read_bytes(),
                run=run,
            )
            return "bundle", result

        self._worker = self.run_worker(
            work, name="bundle", exclusive=True, thread=True, exit_on_error=False
        )
        self._refresh_controls()

    @on(Worker.StateChanged)
    def worker_state(self, event: Worker.StateChanged) -> None:
        if event.worker is not self._worker:
            return

        progress = self.query_one("#progress", ProgressBar)
        status = self.query_one("#status", Label)
        output = self.query_one("#output", Markdown)

        if event.state == WorkerState.RUNNING:
            progress.update(progress=40)
            status.update("Processing..." if event.worker.name == "bundle" else "Reading...")
            return

        if event.state == WorkerState.SUCCESS:
            kind, payload = event.worker.result
            progress.update(progress=100)
            if kind == "inspect":
                output.update(payload)
                status.update("Archive loaded.")
            else:
                self._result = payload
                output.update(
                    render_stats_table(payload.stats) + "\n\n" + render_group_details(payload.stats)
                )
                status.update(f"Processed {payload.file_count} files.")
            self._refresh_controls()
            return

        if event.state == WorkerState.ERROR:
            progress.update(progress=0)
            message = None
            if event.worker.name == "bundle" and self._run.status is RunStatus.ERROR:
                message = self._run.error
                output.update("# Processing failed\n\n" + render_log(self._run.log_lines))
            status.update(f"Error: {message or event.worker.error}")
            self._refresh_controls()


def main() -> None:
    configure_logging()
    ReviewBundlerTUI().run()
