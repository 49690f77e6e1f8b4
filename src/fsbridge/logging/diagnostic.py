import logging

# Configure basic logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(message)s"
)


class DiagnosticLogger:
    @staticmethod
    def warn(msg: str):
        logging.warning(f"[DIAG_WARN] {msg}")

    @staticmethod
    def debug(msg: str):
        logging.debug(f"[DIAG_DEBUG] {msg}")

    @staticmethod
    def error(msg: str):
        logging.error(f"[DIAG_ERROR] {msg}")

    @staticmethod
    def info(msg: str):
        logging.info(f"[DIAG_INFO] {msg}")

diagnostic_logger = DiagnosticLogger()


def set_log_level(level: str | int):
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.getLogger().setLevel(level)


def log_operation_done(op: str, result: list):
    status = "ok" if result and result[0] is None else f"error={result[0]!r}"
    diagnostic_logger.debug(f"Operation {op} done. {status}")

def log_operation_rejected(op: str, reason: str):
    diagnostic_logger.warn(f"Operation rejected: op={op!r} reason={reason}")

def log_transport_failure(op: str, reason: str):
    diagnostic_logger.error(f"Transport failure: op={op!r} reason={reason}")
