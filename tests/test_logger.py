import io

from runner.logger import Logger, get_logger


def test_logger_info_output():
    buf = io.StringIO()
    logger = get_logger("test")
    logger.stream = buf  # type: ignore
    logger.info("Hello", "World")
    out = buf.getvalue()
    assert "INFO" in out and "test: Hello World" in out


def test_logger_min_level_filters():
    buf = io.StringIO()
    logger = Logger("quiet", stream=buf, min_level=30)
    logger.debug("noise")
    logger.info("hidden")
    logger.warn("shown")
    out = buf.getvalue()
    assert "hidden" not in out and "noise" not in out
    assert "WARN" in out and "shown" in out
