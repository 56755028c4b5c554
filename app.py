import sys
import logging
from PySide6.QtWidgets import QApplication
from BackEnd.core import config
from BackEnd.repos.study_repo import SqliteStudyRepository
from FrontEnd.ui_main import MainWindow

def main():
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    app = QApplication(sys.argv)
    repo = SqliteStudyRepository()
    win = MainWindow(repo)
    win.show()
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
