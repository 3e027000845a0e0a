"""Process termination strategies for ddd-commons."""

import logging
import os
import signal

logger = logging.getLogger(__name__)


class ProcessTerminator:
    """Terminates the current process by sending it a signal.
    
    SIGTERM by default, so the application's shutdown handlers still run.
    """
    
    def __init__(self, signum: int = signal.SIGTERM):
        self.signum = signum
    
    def terminate(self, reason: str) -> None:
        logger.critical(f"Terminating process {os.getpid()}: {reason}")
        os.kill(os.getpid(), self.signum)
