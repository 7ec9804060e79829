from __future__ import annotations

import logging

from rsm.application.container import build_container
from rsm.config import BackendSettings, get_app_paths
from rsm.logging_config import setup_logging
from rsm.ui.app import App


def main() -> None:
    paths = get_app_paths()
    setup_logging(paths.logs_dir, level=logging.INFO)

    settings = BackendSettings.from_env()
    container = build_container(settings, paths.session_path, async_refresh=True)

    app = App(
        controller=container.controller,
        logs_dir=str(paths.logs_dir),
    )
    app.mainloop()


if __name__ == "__main__":
    main()
