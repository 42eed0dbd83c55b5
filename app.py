import logging
import os

from flask import Flask

from blueprints import (
    BlueprintClient,
    BlueprintHealth,
    BlueprintInvoice,
    BlueprintProject,
    BlueprintReconcile,
    BlueprintReset,
    BlueprintStats,
)
from blueprints.util import register_error_handlers
from containers import Container


class FlaskMicroservice(Flask):
    container: Container


def setup_logging() -> None:
    if os.getenv('ENABLE_CLOUD_LOGGING') == '1':  # pragma: no cover
        import google.cloud.logging

        google.cloud.logging.Client().setup_logging()  # type: ignore[no-untyped-call]
    else:
        logging.basicConfig(
            level=os.getenv('LOG_LEVEL', 'INFO').upper(),
            format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        )


def create_app() -> FlaskMicroservice:
    setup_logging()

    app = FlaskMicroservice(__name__)
    app.container = Container()

    app.container.config.firestore.database.from_env('FIRESTORE_DATABASE', '(default)')
    app.container.config.invoice.max_attempts.from_env('INVOICE_ID_MAX_ATTEMPTS', default=5, as_=int)
    if app.container.config.invoice.max_attempts() < 1:
        raise ValueError('INVOICE_ID_MAX_ATTEMPTS must be at least 1')

    register_error_handlers(app)

    app.register_blueprint(BlueprintHealth)
    app.register_blueprint(BlueprintReset)
    app.register_blueprint(BlueprintClient)
    app.register_blueprint(BlueprintProject)
    app.register_blueprint(BlueprintInvoice)
    app.register_blueprint(BlueprintReconcile)
    app.register_blueprint(BlueprintStats)

    return app
