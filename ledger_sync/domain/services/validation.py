"""Domain validation helpers."""

from logging import Logger

from ledger_sync.domain.models.transactions import Transaction


def validate_transaction_balance(
    transaction: Transaction,
    logger: Logger,
) -> bool:
    """Report decoded transactions whose currencies do not sum to zero.

    Server transactions priced in another commodity legitimately leave a
    per-currency remainder, so the finding is logged at debug level.

    Args:
        transaction: Decoded transaction.
        logger: Logger used for the report.

    Returns:
        bool: True when every currency sums to zero.
    """
    unbalanced = {
        currency: total
        for currency, total in transaction.balance_per_currency().items()
        if total != 0
    }
    if unbalanced:
        logger.debug(
            f"Transaction {transaction.ledger_id} does not balance per "
            f"currency: {unbalanced}"
        )
    return not unbalanced


__all__ = ["validate_transaction_balance"]
