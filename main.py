# Main.py
""""" Entry point for the expression calculator.

   python main.py "<formula>" [name=value ...]   evaluate on the command line
   python main.py                                open the calculator window

   Responsibilities:
   - Detect run mode (script vs PyInstaller.exe)
   - Verify required files exist in development mode (window only)
   - Load configuration, set up logging and hand over to the CLI or the Qt GUI

"""""
import logging
import sys
from pathlib import Path

from Calculator import config_manager as config_manager, CLI as CLI

logger = logging.getLogger(__name__)

# Resolve project root depending on run mode (Script or .exe)

if getattr(sys, 'frozen', False):
    PROJECT_ROOT = Path(sys._MEIPASS)
else:
    PROJECT_ROOT = Path(__file__).resolve().parent


def check_files_exist():

    """
      Return the names of the files the window needs but cannot find.
      In production (.exe) the files are embedded by the bundler and this check is skipped.
    """

    modules_dir = PROJECT_ROOT / "Calculator"

    REQUIRED = [
        modules_dir / "UI.py",
        modules_dir / "MathEngine.py",
        modules_dir / "ScientificEngine.py",
        modules_dir / "config_manager.py",
        PROJECT_ROOT / "config.json",
        PROJECT_ROOT / "ui_strings.json",
    ]

    return [file_path.name for file_path in REQUIRED if not file_path.exists()]


def main():

    """
    Load configuration and start the CLI or the GUI.
    - Keep this thin: no business logic here.
    """

    all_settings = config_manager.load_setting_value("all")
    CLI.configure_logging(all_settings.get("debug", False))
    logger.debug("Config loaded: %s", all_settings)

    if len(sys.argv) > 1:
        return CLI.run(sys.argv[1:], all_settings)

    is_running_as_exe = getattr(sys, 'frozen', False)
    if not is_running_as_exe:
        logger.debug("Developer Mode: Checking file paths...")
        missing_files = check_files_exist()
        if missing_files:
            print("Error: The following files are missing or in the wrong location:", file=sys.stderr)
            for file_name in missing_files:
                print(f"- {file_name}", file=sys.stderr)
            return 1

    # Imported here, the command line must work without a display
    from Calculator import UI as UI

    # Delegate control to the UI layer; the UI owns the event loop.
    UI.main()
    return 0


if __name__ == "__main__":
    sys.exit(main())
