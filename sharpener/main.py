"""Точка входа в приложение."""
import logging

from sharpener.app import SharpenerApp
from sharpener.config import load_config


def main() -> None:
    """Читает конфигурацию, настраивает логирование и запускает главное окно."""
    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = SharpenerApp(config)
    app.mainloop()


if __name__ == "__main__":
    main()
