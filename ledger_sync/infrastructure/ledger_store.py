"""SQLAlchemy storage for synchronized accounts and transactions."""

from collections.abc import Sequence
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.engine import Connection

from ledger_sync.application.ports.database import DatabaseEnginePort
from ledger_sync.application.ports.ledger_store import LedgerStorePort
from ledger_sync.domain.models.accounts import AccountNode, AccountTree
from ledger_sync.domain.models.amounts import AmountStyle
from ledger_sync.domain.models.transactions import Transaction


CREATE_TABLES_SQL = (
    """
    CREATE TABLE IF NOT EXISTS ledger_accounts (
        name TEXT PRIMARY KEY,
        parent_name TEXT,
        level INTEGER NOT NULL,
        expanded INTEGER NOT NULL,
        has_children INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ledger_account_values (
        account_name TEXT NOT NULL,
        currency TEXT NOT NULL,
        value TEXT NOT NULL,
        amount_style TEXT,
        PRIMARY KEY (account_name, currency)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ledger_transactions (
        position INTEGER PRIMARY KEY,
        ledger_id INTEGER NOT NULL,
        date TEXT,
        description TEXT NOT NULL,
        comment TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ledger_postings (
        transaction_position INTEGER NOT NULL,
        order_no INTEGER NOT NULL,
        account_name TEXT NOT NULL,
        currency TEXT NOT NULL,
        amount TEXT,
        comment TEXT NOT NULL,
        amount_style TEXT,
        PRIMARY KEY (transaction_position, order_no)
    )
    """,
)

SELECT_EXPANDED_SQL = text(
    "SELECT name FROM ledger_accounts WHERE expanded = 1"
)

SELECT_ACCOUNTS_SQL = text(
    """
    SELECT name, expanded, has_children
    FROM ledger_accounts
    ORDER BY name
    """
)

SELECT_ACCOUNT_VALUES_SQL = text(
    """
    SELECT account_name, currency, value, amount_style
    FROM ledger_account_values
    ORDER BY account_name, currency
    """
)

INSERT_ACCOUNT_SQL = text(
    """
    INSERT INTO ledger_accounts (
        name, parent_name, level, expanded, has_children
    )
    VALUES (:name, :parent_name, :level, :expanded, :has_children)
    """
)

INSERT_ACCOUNT_VALUE_SQL = text(
    """
    INSERT INTO ledger_account_values (
        account_name, currency, value, amount_style
    )
    VALUES (:account_name, :currency, :value, :amount_style)
    """
)

INSERT_TRANSACTION_SQL = text(
    """
    INSERT INTO ledger_transactions (
        position, ledger_id, date, description, comment
    )
    VALUES (:position, :ledger_id, :date, :description, :comment)
    """
)

INSERT_POSTING_SQL = text(
    """
    INSERT INTO ledger_postings (
        transaction_position, order_no, account_name, currency,
        amount, comment, amount_style
    )
    VALUES (
        :transaction_position, :order_no, :account_name, :currency,
        :amount, :comment, :amount_style
    )
    """
)

DELETE_ACCOUNTS_SQL = (
    "DELETE FROM ledger_account_values",
    "DELETE FROM ledger_accounts",
)

DELETE_TRANSACTIONS_SQL = (
    "DELETE FROM ledger_postings",
    "DELETE FROM ledger_transactions",
)


def _serialize_style(style: AmountStyle | None) -> str | None:
    return style.serialize() if style is not None else None


class SqlAlchemyLedgerStore(LedgerStorePort):
    """Ledger storage backed by SQLAlchemy.

    Magnitudes are stored as text so no precision is lost; styles use
    their compact serialized form.
    """

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the store.

        Args:
            db_port: Port providing access to the ledger engine.
        """
        self._db_port = db_port

    def prepare_destination(self) -> None:
        """Ensure every ledger table exists."""
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            for statement in CREATE_TABLES_SQL:
                conn.exec_driver_sql(statement)

    def fetch_expanded_names(self) -> set[str]:
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            rows = conn.execute(SELECT_EXPANDED_SQL).all()
        return {row.name for row in rows}

    def replace_accounts(self, tree: AccountTree) -> int:
        """Replace stored accounts with the snapshot.

        Args:
            tree: Account snapshot to store.

        Returns:
            int: Number of accounts inserted.
        """
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            return _write_accounts(conn, tree)

    def replace_transactions(self, transactions: Sequence[Transaction]) -> int:
        """Replace stored transactions, keeping their order.

        Args:
            transactions: Transactions in display order.

        Returns:
            int: Number of transactions inserted.
        """
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            return _write_transactions(conn, transactions)

    def replace_ledger(
        self,
        tree: AccountTree,
        transactions: Sequence[Transaction],
    ) -> tuple[int, int]:
        """Replace accounts and transactions in one database transaction.

        A failure while writing either part leaves the previous ledger in
        place.

        Returns:
            tuple[int, int]: Accounts and transactions inserted.
        """
        engine = self._db_port.get_ledger_engine()
        with engine.begin() as conn:
            account_count = _write_accounts(conn, tree)
            transaction_count = _write_transactions(conn, transactions)
        return account_count, transaction_count

    def fetch_accounts(self) -> list[AccountNode]:
        """Return stored accounts with their amounts.

        Returns:
            list[AccountNode]: Accounts ordered by name.
        """
        engine = self._db_port.get_ledger_engine()
        with engine.connect() as conn:
            account_rows = conn.execute(SELECT_ACCOUNTS_SQL).all()
            value_rows = conn.execute(SELECT_ACCOUNT_VALUES_SQL).all()

        nodes = {
            row.name: AccountNode(
                full_name=row.name,
                expanded=bool(row.expanded),
                has_children=bool(row.has_children),
            )
            for row in account_rows
        }
        for row in value_rows:
            node = nodes.get(row.account_name)
            if node is None:
                continue
            node.add_amount(
                Decimal(row.value),
                row.currency,
                AmountStyle.deserialize(row.amount_style),
            )
        return list(nodes.values())


def _write_accounts(conn: Connection, tree: AccountTree) -> int:
    accounts = []
    values = []
    for node in tree:
        accounts.append(
            {
                "name": node.full_name,
                "parent_name": node.parent_name,
                "level": node.level,
                "expanded": int(node.expanded),
                "has_children": int(node.has_children),
            }
        )
        for amount in node.amounts.values():
            values.append(
                {
                    "account_name": node.full_name,
                    "currency": amount.currency_code,
                    "value": str(amount.magnitude),
                    "amount_style": _serialize_style(amount.style),
                }
            )
    for statement in DELETE_ACCOUNTS_SQL:
        conn.exec_driver_sql(statement)
    if accounts:
        conn.execute(INSERT_ACCOUNT_SQL, accounts)
    if values:
        conn.execute(INSERT_ACCOUNT_VALUE_SQL, values)
    return len(accounts)


def _write_transactions(
    conn: Connection,
    transactions: Sequence[Transaction],
) -> int:
    headers = []
    postings = []
    for position, transaction in enumerate(transactions):
        headers.append(
            {
                "position": position,
                "ledger_id": transaction.ledger_id,
                "date": (
                    transaction.date.isoformat()
                    if transaction.date is not None
                    else None
                ),
                "description": transaction.description,
                "comment": transaction.comment,
            }
        )
        for order_no, posting in enumerate(transaction.postings):
            postings.append(
                {
                    "transaction_position": position,
                    "order_no": order_no,
                    "account_name": posting.account_name,
                    "currency": posting.currency_code,
                    "amount": (
                        str(posting.amount)
                        if posting.amount is not None
                        else None
                    ),
                    "comment": posting.comment,
                    "amount_style": _serialize_style(posting.amount_style),
                }
            )
    for statement in DELETE_TRANSACTIONS_SQL:
        conn.exec_driver_sql(statement)
    if headers:
        conn.execute(INSERT_TRANSACTION_SQL, headers)
    if postings:
        conn.execute(INSERT_POSTING_SQL, postings)
    return len(headers)


__all__ = [
    "SqlAlchemyLedgerStore",
    "CREATE_TABLES_SQL",
    "DELETE_ACCOUNTS_SQL",
    "DELETE_TRANSACTIONS_SQL",
]
