from collections.abc import Callable
from typing import Any

from google.api_core.exceptions import Aborted, GoogleAPICallError
from google.cloud.firestore import Transaction

EXHAUSTED_PREFIX = 'Failed to commit transaction'


def run_transaction(func: Callable[[Transaction], Any], transaction: Transaction) -> Any:  # noqa: ANN401
    """
    Run a ``@transactional`` function and report exhausted retries as ``Aborted``.

    Firestore gives up on a contended transaction with a plain ``ValueError`` chained
    from the last commit error. Callers expect store failures as ``GoogleAPICallError``.
    """
    try:
        return func(transaction)
    except ValueError as err:
        if not str(err).startswith(EXHAUSTED_PREFIX):
            raise
        if isinstance(err.__cause__, GoogleAPICallError):
            raise err.__cause__ from err
        raise Aborted(str(err)) from err
