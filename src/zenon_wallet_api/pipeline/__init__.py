from .transaction_pipeline import FuseParams, OperationKind, SendParams, TransactionPipeline

__all__ = ['FuseParams', 'OperationKind', 'SendParams', 'TransactionPipeline']
