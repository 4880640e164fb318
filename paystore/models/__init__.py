from paystore.models.pending_transaction import PendingTransaction, TransactionStatus
from paystore.models.callback_result import CallbackResult
from paystore.models.app_config import AppConfigDocument

__all__ = ['PendingTransaction', 'TransactionStatus', 'CallbackResult', 'AppConfigDocument']
