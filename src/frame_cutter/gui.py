"""Main GUI for the frame cutter."""
import sys
from datetime import datetime
from pathlib import Path

from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QFormLayout,
    QGroupBox, QLabel, QLineEdit, QPushButton, QDoubleSpinBox, QProgressBar,
    QPlainTextEdit, QFileDialog, QMessageBox
)

from .batch import BatchRunner, JobResult, RunReport
from .config import APP_NAME, DEFAULT_FPS, RunConfig, VERSION, get_setting, save_settings
from .errors import ManifestError, RunError
from .ffmpeg_manager import check_ffmpeg, get_ffmpeg_path
from .logger import get_logger, log_exception
from .utils import format_duration


class WorkerThread(QThread):
    """Runs a BatchRunner off the UI thread."""

    progress_updated = pyqtSignal(float, str)  # fraction, description
    job_finished = pyqtSignal(object)  # JobResult
    run_finished = pyqtSignal(object)  # RunReport
    run_aborted = pyqtSignal(str)

    def __init__(self, manifest_path: Path, config: RunConfig):
        super().__init__()
        self.manifest_path = manifest_path
        self.config = config
        self.runner = BatchRunner()

    def run(self):
        try:
            report = self.runner.run(
                self.manifest_path, self.config,
                progress_callback=self.progress_updated.emit,
                result_callback=self.job_finished.emit
            )
        except (RunError, ManifestError) as e:
            self.run_aborted.emit(e.message)
            return
        except Exception as e:
            log_exception(e, "Run failed")
            self.run_aborted.emit(f"Run failed: {e}")
            return
        self.run_finished.emit(report)

    def stop(self):
        """Stop after the clip that is currently being cut."""
        self.runner.stop()


class FrameCutterWindow(QMainWindow):
    """Main application window."""

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Video Cutter")
        self.resize(760, 620)

        self.worker: WorkerThread | None = None
        self.start_time: datetime | None = None

        self.setup_ui()
        self.setup_menu()
        self.load_saved_settings()
        self.check_ffmpeg_availability()

    def check_ffmpeg_availability(self):
        """Warn if ffmpeg cannot be run."""
        ok, msg = check_ffmpeg()
        if not ok:
            QMessageBox.warning(self, "Missing dependency", f"ffmpeg is not available:\n\n{msg}")
            self.statusBar().showMessage("Warning: ffmpeg not available")
        else:
            self.statusBar().showMessage(f"Ready (ffmpeg: {get_ffmpeg_path()})")

    def _path_row(self, placeholder: str, handler) -> tuple[QHBoxLayout, QLineEdit]:
        layout = QHBoxLayout()
        edit = QLineEdit()
        edit.setPlaceholderText(placeholder)
        edit.textChanged.connect(self.update_start_button)
        layout.addWidget(edit)
        button = QPushButton("Browse...")
        button.clicked.connect(handler)
        layout.addWidget(button)
        return layout, edit

    def setup_ui(self):
        """Setup user interface."""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)
        main_layout.setSpacing(10)

        # === Input Section ===
        input_group = QGroupBox("Settings")
        form = QFormLayout()

        video_row, self.video_path_edit = self._path_row("Video to cut", self.select_video_file)
        form.addRow("Video file:", video_row)

        manifest_row, self.manifest_path_edit = self._path_row(
            "CSV (start_frame;end_frame;filename) or Excel file", self.select_manifest_file
        )
        form.addRow("Cut list:", manifest_row)

        output_row, self.output_path_edit = self._path_row("Folder for the clips", self.select_output_folder)
        form.addRow("Output folder:", output_row)

        self.fps_spin = QDoubleSpinBox()
        self.fps_spin.setDecimals(3)
        self.fps_spin.setRange(1.0, 1000.0)
        self.fps_spin.setValue(DEFAULT_FPS)
        form.addRow("Frames per second:", self.fps_spin)

        self.prefix_edit = QLineEdit()
        self.prefix_edit.setPlaceholderText("Optional, output becomes <prefix>_<filename>.mov")
        form.addRow("Filename prefix:", self.prefix_edit)

        input_group.setLayout(form)
        main_layout.addWidget(input_group)

        # === Progress Section ===
        progress_group = QGroupBox("Progress")
        progress_layout = QVBoxLayout()

        self.overall_progress = QProgressBar()
        self.overall_progress.setRange(0, 100)
        progress_layout.addWidget(self.overall_progress)

        self.current_task_label = QLabel("Waiting to start...")
        progress_layout.addWidget(self.current_task_label)

        button_layout = QHBoxLayout()
        self.start_btn = QPushButton("Cut Video")
        self.start_btn.clicked.connect(self.start_processing)
        self.start_btn.setEnabled(False)
        button_layout.addWidget(self.start_btn)

        self.stop_btn = QPushButton("Stop")
        self.stop_btn.clicked.connect(self.stop_processing)
        self.stop_btn.setEnabled(False)
        button_layout.addWidget(self.stop_btn)
        progress_layout.addLayout(button_layout)

        progress_group.setLayout(progress_layout)
        main_layout.addWidget(progress_group)

        # === Log Section ===
        log_group = QGroupBox("Log")
        log_layout = QVBoxLayout()
        self.log_text = QPlainTextEdit()
        self.log_text.setReadOnly(True)
        log_layout.addWidget(self.log_text)
        log_group.setLayout(log_layout)
        main_layout.addWidget(log_group, stretch=1)

        self.inputs = [
            self.video_path_edit, self.manifest_path_edit, self.output_path_edit,
            self.fps_spin, self.prefix_edit
        ]

    def setup_menu(self):
        """Setup menu bar."""
        menubar = self.menuBar()

        file_menu = menubar.addMenu("File")
        exit_action = QAction("Exit", self)
        exit_action.setShortcut("Ctrl+Q")
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        help_menu = menubar.addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self.show_about)
        help_menu.addAction(about_action)

    def load_saved_settings(self):
        self.output_path_edit.setText(get_setting("output_folder", ""))
        self.fps_spin.setValue(float(get_setting("fps", DEFAULT_FPS)))
        self.prefix_edit.setText(get_setting("prefix", ""))

    def log(self, message: str):
        """Add message to log."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.log_text.appendPlainText(f"[{timestamp}] {message}")
        self.statusBar().showMessage(message)

    def select_video_file(self):
        file, _ = QFileDialog.getOpenFileName(
            self, "Select Video File", str(Path.home()),
            "Video Files (*.mov *.mp4 *.mkv *.avi *.mxf *.m4v);;All Files (*)"
        )
        if file:
            self.video_path_edit.setText(file)

    def select_manifest_file(self):
        file, _ = QFileDialog.getOpenFileName(
            self, "Select Cut List", str(Path.home()),
            "Cut Lists (*.csv *.txt *.xlsx *.xlsm);;All Files (*)"
        )
        if file:
            self.manifest_path_edit.setText(file)

    def select_output_folder(self):
        start_dir = self.output_path_edit.text() or str(Path.home())
        folder = QFileDialog.getExistingDirectory(self, "Select Output Folder", start_dir)
        if folder:
            self.output_path_edit.setText(folder)
            self.log(f"Selected output folder: {folder}")

    def update_start_button(self):
        ready = all(edit.text().strip() for edit in (
            self.video_path_edit, self.manifest_path_edit, self.output_path_edit
        ))
        self.start_btn.setEnabled(ready and self.worker is None)

    def set_running(self, running: bool):
        for widget in self.inputs:
            widget.setEnabled(not running)
        self.stop_btn.setEnabled(running)
        self.update_start_button()

    def start_processing(self):
        """Start cutting in a worker thread."""
        config = RunConfig.create(
            self.video_path_edit.text().strip(),
            self.output_path_edit.text().strip(),
            self.fps_spin.value(),
            self.prefix_edit.text()
        )
        save_settings({
            "output_folder": str(config.output_directory),
            "fps": config.frame_rate,
            "prefix": config.filename_prefix,
        })

        self.log_text.clear()
        self.overall_progress.setValue(0)
        self.current_task_label.setText("Validating...")
        self.start_time = datetime.now()

        self.worker = WorkerThread(Path(self.manifest_path_edit.text().strip()), config)
        self.worker.progress_updated.connect(self.on_progress_updated)
        self.worker.job_finished.connect(self.on_job_finished)
        self.worker.run_finished.connect(self.on_run_finished)
        self.worker.run_aborted.connect(self.on_run_aborted)
        self.worker.finished.connect(self.on_worker_finished)
        self.set_running(True)
        self.worker.start()

        self.log("Cutting videos...")

    def stop_processing(self):
        if self.worker and self.worker.isRunning():
            self.worker.stop()
            self.stop_btn.setEnabled(False)
            self.log("Stopping after the current clip...")

    def on_progress_updated(self, fraction: float, description: str):
        self.overall_progress.setValue(int(fraction * 100))
        self.current_task_label.setText(description)

        if self.start_time and fraction > 0:
            elapsed = (datetime.now() - self.start_time).total_seconds()
            remaining = elapsed / fraction - elapsed
            self.statusBar().showMessage(f"Estimated time remaining: {format_duration(remaining)}")

    def on_job_finished(self, result: JobResult):
        for line in result.log_lines():
            self.log_text.appendPlainText(line)

    def on_run_finished(self, report: RunReport):
        self.log(report.summary())
        if report.failed:
            QMessageBox.warning(
                self, "Finished with errors",
                f"{report.summary()}\n\nSee the log for details."
            )

    def on_run_aborted(self, message: str):
        self.current_task_label.setText("Aborted")
        self.log(f"Error: {message}")
        QMessageBox.critical(self, "Cannot start", message)

    def on_worker_finished(self):
        self.worker = None
        self.set_running(False)

    def show_about(self):
        QMessageBox.about(
            self, f"About {APP_NAME}",
            f"{APP_NAME} v{VERSION}\n\n"
            "Cuts clips out of one video using a list of frame ranges.\n"
            "Clips are stream-copied with ffmpeg, nothing is re-encoded."
        )

    def closeEvent(self, event):
        """Handle window close."""
        if self.worker and self.worker.isRunning():
            reply = QMessageBox.question(
                self, "Confirm exit",
                "Clips are still being cut. Exit after the current clip?",
                QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No
            )
            if reply == QMessageBox.StandardButton.No:
                event.ignore()
                return
            self.worker.stop()
            self.worker.wait()

        event.accept()


def main():
    """Application entry point."""
    get_logger()
    app = QApplication(sys.argv)
    app.setStyle("Fusion")

    try:
        window = FrameCutterWindow()
    except Exception as e:
        log_exception(e, "Failed to start")
        raise
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
