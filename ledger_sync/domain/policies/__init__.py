"""Domain policies package."""

from .account_filters import is_reported_account_name

__all__ = ["is_reported_account_name"]
