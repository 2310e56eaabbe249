import logging
import logging.handlers
import tempfile
import unittest
from pathlib import Path

from roommatetap.config.models import FileLoggingSettings, FileRotationSettings, LoggingSettings
from roommatetap.logging import init_logging


class InitLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        root = logging.getLogger()
        self._saved = (root.level, list(root.handlers))

    def tearDown(self) -> None:
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        level, handlers = self._saved
        root.setLevel(level)
        for handler in handlers:
            root.addHandler(handler)
        self._tmp.cleanup()

    def test_console_only(self) -> None:
        init_logging(LoggingSettings(level="DEBUG"))
        root = logging.getLogger()
        self.assertEqual(root.level, logging.DEBUG)
        self.assertEqual(len(root.handlers), 1)
        self.assertIsInstance(root.handlers[0], logging.StreamHandler)

    def test_rotating_file(self) -> None:
        path = Path(self._tmp.name) / "logs" / "roommatetap.log"
        settings = LoggingSettings(
            level="WARNING",
            file=FileLoggingSettings(path=str(path), rotation=FileRotationSettings(backup_count=3)),
        )
        init_logging(settings)

        file_handlers = [
            h for h in logging.getLogger().handlers if isinstance(h, logging.handlers.TimedRotatingFileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].backupCount, 3)
        self.assertTrue(path.parent.is_dir())


if __name__ == "__main__":
    unittest.main()
