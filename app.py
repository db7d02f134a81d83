import logging

from lendinghub.presets import load_tables
from lendinghub.ui import main

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

main(load_tables())
