"""Example: drive the service layer directly, without Flask.

Prints the threads of one ward the same way the board endpoint renders them.
"""

import importlib

from config import get_settings_module

from src.ward_board.ward_board.container import build_container
from src.ward_board.ward_board.messages.view import BoardView


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    with BoardView(container.store, ward="1st") as view:
        for thread in view.threads():
            print(thread.to_dict())


if __name__ == "__main__":
    main()
