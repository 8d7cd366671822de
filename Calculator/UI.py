# UI.py
"""""PySide6 user interface for the expression calculator.

Structure
---------
- Calculator UI: main window with display, bindings line and button grid
- Settings UI: modal dialog for user preferences

Responsibilities (Calculator)
-----------------------------
- Build window, display, layout and buttons
- Collect the formula and the variable bindings ('x=1; y=2')
- Dispatch the formula to MathEngine in a worker thread
- Render results and show MathEngine errors as dialogs
- Clipboard copy (Shift copies the whole equation line instead of the result)

Responsibilities (Settings)
---------------------------
- Load current settings and their descriptions via config_manager
- Decimal places limited to the range config_manager accepts
- Save and apply theme changes immediately

Threading Note
--------------
Evaluation runs off the UI thread in Worker(QObject); the result (or error) comes back
through a Qt signal and is handled in the UI thread.
"""""

import logging
import sys
import threading

import pyperclip
from pynput.keyboard import Controller
from PySide6 import QtWidgets
from PySide6.QtCore import Qt, QObject, Signal

from . import config_manager as config_manager
from . import MathEngine as MathEngine
from . import error as E
from .input_parser import normalize_expression, parse_bindings_line

logger = logging.getLogger(__name__)

DARK_DIALOG_STYLE = """
    QDialog, QMessageBox {background-color: #121212; color: white;}
    QLabel, QCheckBox {color: white;}
    QSpinBox {background-color: #444444; color: white; border: 1px solid #666666;}
    QPushButton {background-color: #2e2e2e; color: white; border: 1px solid #444444; padding: 5px 15px;}
"""


def is_shift_pressed():
    """Shift state as seen by pynput; complements the Qt key events when the window lost focus."""
    keyboard_controller = Controller()
    return keyboard_controller.shift_pressed


class Worker(QObject):
    """""

    Runs one calculation in a separate thread and emits job_finished with
    (display_text, value, equation) on success or (MathError, None, equation) on failure.

    """""

    job_finished = Signal(object, object, str)

    def __init__(self, problem, bindings, settings):
        super().__init__()
        self.data = problem
        self.bindings = bindings
        self.settings = settings

    def run_calc(self):
        try:
            result, value = MathEngine.calculate(self.data, self.bindings, self.settings)
            self.job_finished.emit(result, value, self.data)

        except E.MathError as e:
            # Known, handled error (e.g. "Division by zero")
            self.job_finished.emit(e, None, self.data)

        except Exception as e:
            # Unexpected crash (a bug in the engine)
            logger.exception("Unexpected crash while calculating %r", self.data)
            critical_error = E.MathError(
                message=f"Unexpected crash: {e}",
                code="9999",
                equation=self.data
            )
            self.job_finished.emit(critical_error, None, self.data)


class SettingsDialog(QtWidgets.QDialog):
    """Modal settings form: a checkbox per flag, a spin box for the decimal places."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Calculator Settings")
        self.setMinimumSize(320, 240)

        self.setting_value_list = config_manager.load_setting_value("all")
        descriptions = config_manager.load_setting_description("all")

        form = QtWidgets.QFormLayout(self)
        self.decimal_places = QtWidgets.QSpinBox()
        self.decimal_places.setRange(config_manager.MIN_DECIMAL_PLACES, config_manager.MAX_DECIMAL_PLACES)
        self.decimal_places.setValue(self.setting_value_list["decimal_places"])
        form.addRow(descriptions.get("decimal_places", "decimal_places"), self.decimal_places)

        self.checkboxes = {}
        for key_value, value in self.setting_value_list.items():
            if isinstance(value, bool):
                checkbox = QtWidgets.QCheckBox(descriptions.get(key_value, key_value))
                checkbox.setChecked(value)
                form.addRow(checkbox)
                self.checkboxes[key_value] = checkbox

        button_box = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Ok | QtWidgets.QDialogButtonBox.Cancel)
        button_box.accepted.connect(self.save_settings)
        button_box.rejected.connect(self.reject)
        form.addRow(button_box)

        if self.setting_value_list["darkmode"]:
            self.setStyleSheet(DARK_DIALOG_STYLE)

    def save_settings(self):
        new_settings = dict(self.setting_value_list, decimal_places=self.decimal_places.value())
        for key_value, checkbox in self.checkboxes.items():
            new_settings[key_value] = checkbox.isChecked()

        if config_manager.save_setting(new_settings) == {}:
            logger.error("Error 5001: %sconfig.json", E.ERROR_MESSAGES["5001"])
            QtWidgets.QMessageBox.critical(self, "Error", f"Error 5001: {E.ERROR_MESSAGES['5001']}config.json")
            return
        self.accept()


class CalculatorWindow(QtWidgets.QWidget):

    def __init__(self):
        super().__init__()

        self.setting_value_list = config_manager.load_setting_value("all")

        # --- Instance state ---
        self.ans = None  # last numeric result, inserted for 'Ans'
        self.display_text = "0"
        self.thread_active = False
        self.shift_is_held = False
        self.undo = ["0"]
        self.button_objects = {}

        # --- Window setup ---
        self.setWindowTitle("Calculator")
        self.resize(420, 560)
        main_v_layout = QtWidgets.QVBoxLayout(self)

        expanding_policy = QtWidgets.QSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding,
            QtWidgets.QSizePolicy.Policy.Expanding
        )

        # --- Display ---
        self.display = QtWidgets.QLineEdit("0")
        self.display.setAlignment(Qt.AlignmentFlag.AlignRight)
        self.display.setReadOnly(True)
        font = self.display.font()
        font.setPointSize(28)
        self.display.setFont(font)
        main_v_layout.addWidget(self.display, 1)

        # --- Bindings line ---
        self.bindings_field = QtWidgets.QLineEdit()
        self.bindings_field.setPlaceholderText("Variables, e.g. x=1; y=2,5")
        main_v_layout.addWidget(self.bindings_field)

        # --- Button grid ---
        button_container = QtWidgets.QWidget()
        main_v_layout.addWidget(button_container, 4)
        button_grid = QtWidgets.QGridLayout(button_container)
        button_grid.setSpacing(0)
        button_grid.setContentsMargins(0, 0, 0, 0)

        # (text, row, column)
        self.buttons = [
            ('⚙', 0, 0), ('📋', 0, 1), ('↶', 0, 2), ('<', 0, 3), ('C', 0, 4),
            ('sin', 1, 0), ('cos', 1, 1), ('tan', 1, 2), ('atan', 1, 3), ('/', 1, 4),
            ('log10', 2, 0), ('log2', 2, 1), ('sqrt', 2, 2), ('^', 2, 3), ('*', 2, 4),
            ('(', 3, 0), ('7', 3, 1), ('8', 3, 2), ('9', 3, 3), ('-', 3, 4),
            (')', 4, 0), ('4', 4, 1), ('5', 4, 2), ('6', 4, 3), ('+', 4, 4),
            ('x', 5, 0), ('1', 5, 1), ('2', 5, 2), ('3', 5, 3), ('y', 5, 4),
            ('Ans', 6, 0), ('E', 6, 1), ('0', 6, 2), ('.', 6, 3), ('⏎', 6, 4)
        ]

        for text, row, col in self.buttons:
            button = QtWidgets.QPushButton(text)
            button.setSizePolicy(expanding_policy)
            if text == '⚙':
                button.clicked.connect(self.open_settings)
            else:
                button.clicked.connect(lambda checked=False, val=text: self.handle_button_press(val))
            button_grid.addWidget(button, row, col)
            self.button_objects[text] = button

        self.update_darkmode()

    # --- Key events ---
    def keyPressEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = True
        elif event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
            self.handle_button_press('⏎')
            return
        super().keyPressEvent(event)

    def keyReleaseEvent(self, event):
        if event.key() == Qt.Key.Key_Shift:
            self.shift_is_held = False
        super().keyReleaseEvent(event)

    def handle_button_press(self, value):
        if value == '<':
            self.display_text = self.display_text[:-1] or "0"

        elif value == 'C':
            self.display_text = "0"

        elif value == '↶':
            if len(self.undo) > 1:
                self.undo.pop()
                self.display_text = self.undo[-1]
            self.display.setText(self.display_text)
            return

        elif value == '📋':
            if self.shift_is_held or is_shift_pressed():
                pyperclip.copy(self.display.text())
            else:
                pyperclip.copy(self.display.text().split(" ")[-1])
            return

        elif value == '⏎':
            self.start_calculation()
            return

        else:
            if self.display_text == "0" or self.display.text() != self.display_text:
                # Start a new formula after "0" or after a shown result
                self.display_text = ""
            self.display_text += value

        self.undo.append(self.display_text)
        self.display.setText(self.display_text)

    def start_calculation(self):
        if self.thread_active:
            logger.warning("Error 4002: %s", E.ERROR_MESSAGES["4002"])
            return

        problem = normalize_expression(self.display_text)
        try:
            if "Ans" in problem:
                if self.ans is None:
                    raise E.InputError("No Value in ANS", code="4003", equation=problem)
                problem = problem.replace("Ans", f"({repr(self.ans).upper()})")
            bindings = parse_bindings_line(self.bindings_field.text())
        except E.MathError as e:
            self.show_error(e)
            return

        self.set_busy(True)
        self.display.setText("...")
        QtWidgets.QApplication.processEvents()

        worker_instance = Worker(problem, bindings, self.setting_value_list)
        worker_instance.job_finished.connect(self.calc_result)
        # Keep a reference, the signal must outlive the thread
        self.worker = worker_instance
        threading.Thread(target=worker_instance.run_calc, daemon=True).start()

    def calc_result(self, result, value, equation):
        self.set_busy(False)

        if isinstance(result, E.MathError):
            self.show_error(result)
            self.display.setText(self.display_text)
            return

        self.ans = value
        if self.setting_value_list["show_equation"]:
            final_display_text = f"{equation} {result}"
        else:
            final_display_text = result

        self.display.setText(final_display_text)
        self.undo.append(final_display_text)

    def show_error(self, error_obj):
        error_box = QtWidgets.QMessageBox(self)
        error_box.setIcon(QtWidgets.QMessageBox.Critical)
        error_box.setWindowTitle(error_obj.area)
        error_box.setText(error_obj.describe())
        error_box.setInformativeText(f"Equation: {error_obj.equation}")
        if self.setting_value_list["darkmode"]:
            error_box.setStyleSheet(DARK_DIALOG_STYLE)
        error_box.exec()

    def set_busy(self, busy):
        self.thread_active = busy
        # '⏎' stays disabled until the worker reported back
        self.button_objects['⏎'].setEnabled(not busy)

    def update_darkmode(self):
        if self.setting_value_list["darkmode"]:
            self.setStyleSheet("background-color: #121212; color: white;")
            self.bindings_field.setStyleSheet("background-color: #444444;")
        else:
            self.setStyleSheet("")
            self.bindings_field.setStyleSheet("")

    def open_settings(self):
        SettingsDialog(self).exec()
        self.setting_value_list = config_manager.load_setting_value("all")
        self.update_darkmode()


def main():
    app = QtWidgets.QApplication(sys.argv)
    window = CalculatorWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
