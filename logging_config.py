import os
import logging
from logging.handlers import RotatingFileHandler


def setup_logging(app):
    """
    Configure logging for the scan desk.

    Always logs to the console. When LOG_DIR is set, also writes an
    application log and an error log there, rotated at 10MB.
    Returns the log directory, or None when file logging is disabled.
    """
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)

    detailed_formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s (%(funcName)s:%(lineno)d): %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if not any(getattr(h, '_scandesk', False) for h in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(detailed_formatter)
        console_handler._scandesk = True
        root_logger.addHandler(console_handler)

    # SQLAlchemy echoes every statement at INFO
    logging.getLogger('sqlalchemy').setLevel(logging.WARNING)
    logging.getLogger('werkzeug').setLevel(logging.INFO)
    app.logger.setLevel(level)

    log_dir = app.config.get('LOG_DIR')
    if not log_dir:
        return None

    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError as e:
        app.logger.warning(f"Could not create log directory {log_dir}: {e}")
        return None

    main_log_file = os.path.abspath(os.path.join(log_dir, 'scandesk.log'))
    error_log_file = os.path.abspath(os.path.join(log_dir, 'scandesk_errors.log'))

    if any(getattr(h, 'baseFilename', None) == main_log_file for h in root_logger.handlers):
        return log_dir

    # Main application log handler (max 10MB, keep 5 backups)
    main_handler = RotatingFileHandler(
        main_log_file,
        maxBytes=10*1024*1024,
        backupCount=5,
        encoding='utf-8'
    )
    main_handler.setLevel(level)
    main_handler.setFormatter(detailed_formatter)
    main_handler._scandesk = True

    # Error log handler (ERROR and above, keep 10 backups)
    error_handler = RotatingFileHandler(
        error_log_file,
        maxBytes=10*1024*1024,
        backupCount=10,
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)
    error_handler._scandesk = True

    root_logger.addHandler(main_handler)
    root_logger.addHandler(error_handler)

    app.logger.info("=" * 60)
    app.logger.info(f"Scan desk started - Log Directory: {log_dir}")
    app.logger.info(f"Main Log: {main_log_file}")
    app.logger.info(f"Error Log: {error_log_file}")
    app.logger.info("=" * 60)

    return log_dir
