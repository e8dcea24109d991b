import logging

from flexshare.log import setup


def test_setup_creates_log_directory(tmp_path):
    """Test setup_logging creates the log file directory."""
    logfile = tmp_path / "logs" / "flexshare.log"

    setup(str(logfile))
    logging.getLogger("flexshare.test").debug("hello")

    assert logfile.parent.is_dir()
    assert "hello" in logfile.read_text(encoding="utf-8")

    for handler in logging.getLogger("flexshare").handlers:
        handler.close()
    logging.getLogger("flexshare").handlers.clear()
