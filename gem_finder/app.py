import logging

from dotenv import load_dotenv
from flask import Flask

from .settings import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_app() -> Flask:
    # load env vars
    load_dotenv()

    app = Flask(__name__)
    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)
    settings.validate()

    # import and register the routes from webhook.py
    from . import webhook
    app.register_blueprint(webhook.bp)

    return app


def main() -> None:
    app = create_app()
    logging.getLogger(__name__).info("Webhook running on port %s", settings.PORT)
    app.run(host="0.0.0.0", port=settings.PORT, debug=False)


if __name__ == "__main__":
    main()
