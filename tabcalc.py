"""
TabCalc
Desktop entry point: keypad window, optionally with the JSON API alongside
"""
import argparse
import atexit
import logging
import os
import subprocess
import sys
import tkinter as tk

import config
from gui import TabCalcGUI

logger = logging.getLogger(__name__)


class ApiProcess:
    """The web API running as a child process for the life of the window"""

    def __init__(self, host=config.WEB_HOST, port=config.WEB_PORT):
        self.host = host
        self.port = port
        self.process = None

    def start(self):
        script = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'run_web.py')
        env = dict(os.environ, TABCALC_HOST=self.host, TABCALC_PORT=str(self.port))
        try:
            self.process = subprocess.Popen(
                [sys.executable, script],
                env=env,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            logger.error("Could not start the API server: %s", e)
            return False
        logger.info("API server started (PID: %s) on http://%s:%s", self.process.pid, self.host, self.port)
        return True

    def stop(self, timeout=5):
        if self.process is None or self.process.poll() is not None:
            self.process = None
            return
        self.process.terminate()
        try:
            self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("API server did not exit after %ss, killing it", timeout)
            self.process.kill()
            self.process.wait()
        logger.info("API server stopped")
        self.process = None


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='tabcalc', description=f"{config.APP_NAME} {config.VERSION}")
    parser.add_argument('--dark', action='store_true', help="use the dark palette")
    parser.add_argument('--no-api', action='store_true', help="do not start the web API")
    parser.add_argument('--port', type=int, default=config.WEB_PORT, help="web API port")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=config.LOG_LEVEL)

    api = None
    if not args.no_api:
        api = ApiProcess(port=args.port)
        if api.start():
            atexit.register(api.stop)
            print(f"{config.APP_NAME} API: http://{api.host}:{api.port}/health")

    root = tk.Tk()
    TabCalcGUI(root, dark=args.dark)
    try:
        root.mainloop()
    finally:
        if api is not None:
            api.stop()


if __name__ == "__main__":
    main()
