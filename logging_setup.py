import logging
import logging.handlers
from pathlib import Path

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s - %(message)s'


def setup_logging(app):
    """Configure console logging and, when LOG_FILE is set, a rotating file log."""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    fmt = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)

    # avoid duplicate handlers when the factory runs more than once (tests)
    if not any(getattr(h, '_ledger_console', False) for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        console._ledger_console = True
        root.addHandler(console)

    log_file = app.config.get('LOG_FILE')
    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        already = any(
            isinstance(h, logging.handlers.RotatingFileHandler)
            and getattr(h, 'baseFilename', '') == str(log_path.resolve())
            for h in root.handlers
        )
        if not already:
            handler = logging.handlers.RotatingFileHandler(
                log_path, maxBytes=5_000_000, backupCount=3, encoding='utf-8')
            handler.setFormatter(fmt)
            handler.setLevel(level)
            root.addHandler(handler)

    app.logger.setLevel(level)
    return log_file
