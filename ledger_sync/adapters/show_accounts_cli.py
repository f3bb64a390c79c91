"""CLI adapter printing the stored account tree with formatted balances."""

import dotenv
from sqlalchemy.exc import SQLAlchemyError

from ledger_sync.domain.errors import LedgerSyncError
from ledger_sync.domain.models.accounts import AccountNode
from ledger_sync.domain.models.context import FormattingContext
from ledger_sync.domain.services.formatting import format_styled_amount
from ledger_sync.infrastructure.container import build_account_tree_use_case
from ledger_sync.infrastructure.logging.logger import get_app_logger
from ledger_sync.infrastructure.settings import LedgerSyncSettings


def render_account(node: AccountNode, context: FormattingContext) -> str:
    """Render one account line indented by its level."""
    amounts = ", ".join(
        format_styled_amount(amount, context)
        for amount in node.amounts.values()
    )
    marker = "+" if node.has_children and not node.expanded else " "
    return f"{'  ' * node.level}{marker} {node.short_name}  {amounts}".rstrip()


def main() -> None:
    """Print every visible account of the stored tree."""
    dotenv.load_dotenv()
    logger = get_app_logger()
    try:
        context = LedgerSyncSettings.from_env().formatting_context()
        tree = build_account_tree_use_case().execute()
    except (LedgerSyncError, SQLAlchemyError, ValueError) as exc:
        logger.error(f"Could not read accounts: {exc}")
        print(f"Could not load data: {exc}")
        raise SystemExit(1) from exc

    for node in tree.visible_nodes():
        print(render_account(node, context))


if __name__ == "__main__":  # pragma: no cover
    main()
