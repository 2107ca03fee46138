import threading
import time
import webbrowser

import uvicorn

from homelinks.config import load_config
from homelinks.log import get_logger

logger = get_logger("homelinks.server")


def run_uvicorn(host: str, port: int, log_level: str):
    """
    Run the FastAPI app via uvicorn in this process
    (called in a background thread).
    """
    config = uvicorn.Config(
        "homelinks.main:app",
        host=host,
        port=port,
        log_level=log_level.lower(),
        reload=False,
    )
    server = uvicorn.Server(config)
    server.run()


def open_browser_once(host: str, port: int):
    url = f"http://{host}:{port}/docs"
    logger.info("Opening API docs at %s", url)
    try:
        webbrowser.open(url)
    except webbrowser.Error as exc:
        logger.warning("Could not open a browser: %s", exc)


def main():
    config = load_config()

    # start uvicorn in a separate thread
    t = threading.Thread(
        target=run_uvicorn,
        args=(config.host, config.port, config.log_level),
        daemon=True,
    )
    t.start()

    if config.open_browser:
        # give it a moment to boot before opening browser
        time.sleep(1.0)
        open_browser_once(config.host, config.port)

    logger.info("Serving %s on %s:%s. Press Ctrl+C to quit.", config.data_file, config.host, config.port)
    try:
        while t.is_alive():
            t.join(1.0)
    except KeyboardInterrupt:
        logger.info("Shutting down.")


if __name__ == "__main__":
    main()
