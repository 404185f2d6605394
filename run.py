import logging
import os

from scrollbot.app import ChatApp
from scrollbot.settings import load_settings

def main():
    logging.basicConfig(
        level=os.environ.get("TUFTI_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = ChatApp(load_settings())
    app.run()

if __name__ == "__main__":
    main()
